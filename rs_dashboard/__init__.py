"""
Top-level package for the road-safety dashboard.

This package exposes the core architecture (records, aggregation, coordination,
views, UI adapters). Most code should import from submodules such as:
    rs_dashboard.core
    rs_dashboard.views
    rs_dashboard.ui
"""

__all__: list[str] = []
