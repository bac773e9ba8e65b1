from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PlaybackStatus(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class PlaybackTimer:
    """
    Time-slider playback: advances the year by one on every tick until the
    maximum year is reached, then stops for good (no looping).

    The timer does not own a clock. Whatever drives the UI (a dcc.Interval in
    the Dash app) calls tick() every `interval_ms` while `running` is True.
    cancel() stops it early, e.g. when the owning view is torn down.
    """

    def __init__(
        self,
        max_year: int,
        on_step: Callable[[int], None],
        interval_ms: int = 1000,
    ):
        self.max_year = max_year
        self.on_step = on_step
        self.interval_ms = interval_ms
        self.status = PlaybackStatus.IDLE
        self.current_year: Optional[int] = None

    @property
    def running(self) -> bool:
        return self.status is PlaybackStatus.PLAYING

    def start(self, from_year: int) -> None:
        self.current_year = from_year
        if from_year >= self.max_year:
            self.status = PlaybackStatus.FINISHED
            return
        self.status = PlaybackStatus.PLAYING
        logger.info("playback_start", extra={"from_year": from_year, "max_year": self.max_year})

    def tick(self) -> Optional[int]:
        """
        Advance one year.

        :return: the new year, or None if the timer is not playing
        """
        if not self.running:
            return None

        self.current_year += 1
        if self.current_year >= self.max_year:
            self.status = PlaybackStatus.FINISHED
        self.on_step(self.current_year)
        return self.current_year

    def cancel(self) -> None:
        if self.running:
            self.status = PlaybackStatus.CANCELLED
            logger.info("playback_cancelled", extra={"year": self.current_year})
