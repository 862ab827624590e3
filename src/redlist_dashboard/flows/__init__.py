"""
Prefect flows for offline data jobs.

Flows:
- summary: Red List coverage per taxon -> data/taxa-summary.json

Usage (local):
    python -m redlist_dashboard.flows.summary
    redlist-dashboard summarize

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'summarize-taxa/default'
"""
