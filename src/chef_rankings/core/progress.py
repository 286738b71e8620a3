"""Progress tracking utilities for batch scoring operations."""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
)

ProgressCallback = Callable[[int, int, str], None]


class RecalculationProgress:
    """Render batch progress reported through a ``(current, total, message)`` callback.

    Usage::

        with RecalculationProgress() as progress:
            await service.recalculate_all(weights, on_progress=progress.update)
    """

    def __init__(self, console: Console | None = None, description: str = "Scoring") -> None:
        """Initialize progress tracker.

        Args:
            console: Optional console instance. If None, creates a new one.
            description: Label shown before the progress bar.
        """
        self.console = console or Console()
        self.description = description
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def __enter__(self) -> RecalculationProgress:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
        )
        self._progress.start()
        self._task = self._progress.add_task(f"[cyan]{self.description}...", total=None)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task = None

    def update(self, current: int, total: int, message: str) -> None:
        """Advance the bar to ``current`` out of ``total``."""
        if self._progress is None or self._task is None:
            return
        self._progress.update(
            self._task,
            completed=current,
            total=total,
            description=f"[cyan]{self.description}: {message}",
        )
