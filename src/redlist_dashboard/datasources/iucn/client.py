"""IUCN Red List API v4 client constants and authenticated GET.

API docs: https://api.iucnredlist.org/api-docs/index.html
Every request carries ``Authorization: Bearer <token>``; the token comes from
``RED_LIST_API_KEY`` via Settings.
"""

from __future__ import annotations

from typing import Any

import requests

from redlist_dashboard.errors import RedListAuthError
from redlist_dashboard.services.http import session

API_BASE = "https://api.iucnredlist.org/api/v4"


def fetch(
    path: str, api_key: str | None, params: dict[str, Any] | None = None
) -> requests.Response:
    """GET ``{API_BASE}/{path}``. Status handling is left to the caller.

    Raises:
        RedListAuthError: No API token configured.
    """
    if not api_key:
        raise RedListAuthError()
    return session.get(
        f"{API_BASE}/{path.lstrip('/')}",
        params=params,
        headers={"Authorization": f"Bearer {api_key}"},
    )
