from .heat_map_view import HeatmapView
from .dual_perspective_view import DualPerspectiveView
from .scatter_view import ScatterView
from .bidirectional_view import BidirectionalView
from .line_chart_view import LineChartsView
from .choropleth_view import ChoroplethView

__all__ = [
    "HeatmapView",
    "DualPerspectiveView",
    "ScatterView",
    "BidirectionalView",
    "LineChartsView",
    "ChoroplethView",
]
