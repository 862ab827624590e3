"""GBIF occurrence search results as a GeoJSON FeatureCollection."""

from __future__ import annotations

from typing import Any


def occurrence_feature(record: dict[str, Any]) -> dict[str, Any] | None:
    """Point feature for one occurrence. Returns None without coordinates."""
    lat = record.get("decimalLatitude")
    lon = record.get("decimalLongitude")
    if lat is None or lon is None:
        return None
    return {
        "type": "Feature",
        "properties": {
            "gbifID": record.get("key"),
            "species": record.get("species") or record.get("scientificName"),
            "eventDate": record.get("eventDate"),
            "recordedBy": record.get("recordedBy"),
            "country": record.get("country"),
            "basisOfRecord": record.get("basisOfRecord"),
        },
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
    }


def bounding_box(features: list[dict[str, Any]]) -> list[float] | None:
    """``[min_lon, min_lat, max_lon, max_lat]`` of point features, None if empty."""
    if not features:
        return None
    lons = [f["geometry"]["coordinates"][0] for f in features]
    lats = [f["geometry"]["coordinates"][1] for f in features]
    return [min(lons), min(lats), max(lons), max(lats)]


def occurrences_to_geojson(
    results: list[dict[str, Any]], *, species_key: int, total: int | None
) -> dict[str, Any]:
    """FeatureCollection with a metadata block (returned count, GBIF total, bbox)."""
    features = [f for f in (occurrence_feature(r) for r in results) if f is not None]
    return {
        "type": "FeatureCollection",
        "features": features,
        "metadata": {
            "speciesKey": species_key,
            "count": len(features),
            "total": total,
            "bbox": bounding_box(features),
        },
    }
