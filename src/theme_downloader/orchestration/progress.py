"""
Progress Reporting

Each asset shows two states in the same display slot: "Downloading..." while
the call is in flight, then "Downloaded" written over it.
"""

import logging
import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TextIO


class AssetStatus(str, Enum):
    DOWNLOADING = "downloading"
    DOWNLOADED = "downloaded"


STATUS_LABELS = {
    AssetStatus.DOWNLOADING: "Downloading...",
    AssetStatus.DOWNLOADED: "Downloaded",
}


def percent_complete(index: int, total: int) -> int:
    """
    Percentage done after asset `index` of `total`, halves rounded up

    Args:
        index: 1-based position of the asset
        total: Number of assets, must be positive

    Returns:
        int: Whole percent
    """
    return math.floor(index / total * 100 + 0.5)


@dataclass(frozen=True)
class ProgressEvent:
    index: int
    total: int
    key: str
    status: AssetStatus

    @property
    def percent(self) -> int:
        return percent_complete(self.index, self.total)

    def render(self) -> str:
        return (
            f"[{self.index}/{self.total}] {self.percent}% | {self.key} | "
            f"{STATUS_LABELS[self.status]}"
        )


ProgressCallback = Callable[[ProgressEvent], None]


class ConsoleProgress:
    """Writes progress lines, overwriting the downloading line once it completes

    Attached to logging, it also ends a pending downloading line before any log
    record is emitted so log output never lands inside the display slot.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.overwrite = bool(getattr(self.stream, "isatty", lambda: False)())
        self.pending = False

    def __call__(self, event: ProgressEvent) -> None:
        line = event.render()

        if not self.overwrite:
            self.stream.write(line + "\n")
        elif event.status == AssetStatus.DOWNLOADING:
            self.end_pending()
            self.stream.write(line)
            self.pending = True
        elif self.pending:
            # Return to the start of the slot and clear it
            self.stream.write("\r\033[K" + line + "\n")
            self.pending = False
        else:
            self.stream.write(line + "\n")

        self.stream.flush()

    def end_pending(self) -> None:
        """Terminate an unfinished downloading line"""
        if self.pending:
            self.stream.write("\n")
            self.stream.flush()
            self.pending = False

    def filter(self, record: logging.LogRecord) -> bool:
        self.end_pending()
        return True

    def attach_to_logging(self, logger: Optional[logging.Logger] = None) -> None:
        """Install this reporter as a filter on every handler of a logger (root by default)"""
        logger = logger or logging.getLogger()
        for handler in logger.handlers:
            handler.addFilter(self)
