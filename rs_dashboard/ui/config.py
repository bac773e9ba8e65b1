from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rs_dashboard.config.model import GlobalConfig
from rs_dashboard.core.dashboard import Dashboard


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    dashboard: Optional[Dashboard] = None
    load_error: Optional[str] = None

    def validate(self) -> None:
        """Ensure the dashboard is attached before callbacks are registered."""
        if self.dashboard is None:
            raise RuntimeError("AppConfig.dashboard must be initialized.")
