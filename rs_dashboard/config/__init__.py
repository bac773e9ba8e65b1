"""
Config package for rs_dashboard.

Responsible for:
- config models (GlobalConfig, AttributeCatalog)
- config I/O (load_global_config)
"""

from .model import AttributeCatalog, AttributeDescriptor, GlobalConfig
from .loader import load_global_config

__all__ = ["AttributeCatalog", "AttributeDescriptor", "GlobalConfig", "load_global_config"]
