
class RsDashboardError(Exception):
    """Base exception for all rs_dashboard errors"""
    pass

class ConfigError(RsDashboardError):
    """Invalid or inconsistent global.json"""
    pass

class DataLoadError(RsDashboardError):
    """
    The dataset or the boundary file could not be fetched or parsed.
    The UI turns this into a visible load-failure state.
    """
    pass
