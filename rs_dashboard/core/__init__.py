"""
Core domain layer: records, aggregation, filter state, coordination bus,
view base class and the view registry
"""

from .coordination_bus import CoordinationBus
from .filter_state import FilterSelection, FilterState
from .record import Record
from .base_view import BaseView, ViewContext
from .view_registry import ViewRegistry

__all__ = ["CoordinationBus", "FilterSelection", "FilterState", "Record", "BaseView", "ViewContext", "ViewRegistry"]
