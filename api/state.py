"""
Scrape run state shared by the API routes.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from rentscraper.models import ScrapeResult, Target
from rentscraper.utils import now_iso

IDLE = "idle"
RUNNING = "running"


@dataclass
class ScrapeState:
    """Idle/running token for the one scrape the app allows at a time."""

    status: str = IDLE
    started_at: Optional[str] = None
    finished_at: Optional[str] = None
    targets: List[Target] = field(default_factory=list)
    result: Optional[ScrapeResult] = None
    error: Optional[str] = None

    @property
    def running(self) -> bool:
        return self.status == RUNNING

    def try_start(self, targets: List[Target]) -> bool:
        """Flip to running; False if a run is already in progress."""
        if self.running:
            return False
        self.status = RUNNING
        self.started_at = now_iso()
        self.finished_at = None
        self.targets = list(targets)
        self.error = None
        return True

    def finish(self, result: Optional[ScrapeResult] = None, error: Optional[str] = None) -> None:
        self.status = IDLE
        self.finished_at = now_iso()
        if result is not None:
            self.result = result
        self.error = error
