from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class FileWatchState:
    """Modification time of a watched file, split like a timespec."""

    seconds: int = 0
    nanoseconds: int = 0

    @classmethod
    def from_stat(cls, stat_result: os.stat_result) -> "FileWatchState":
        seconds, nanoseconds = divmod(stat_result.st_mtime_ns, 1_000_000_000)
        return cls(seconds=seconds, nanoseconds=nanoseconds)


ZERO_STATE = FileWatchState()


class FileWatchResult(str, Enum):
    MISSING = "missing"
    UNREADABLE = "unreadable"
    UNCHANGED = "unchanged"
    CHANGED = "changed"


@dataclass(frozen=True)
class FileWatchObservation:
    result: FileWatchResult
    state: FileWatchState

    @property
    def should_reload(self) -> bool:
        return self.result == FileWatchResult.CHANGED


class FileChangeDetector:
    """
    Tracks the last recorded modification time of one file.

    `poll()` never records; callers `record()` the observed state once they
    have successfully applied the file, so a failed apply is retried on the
    next poll. Until something is recorded every successful stat counts as
    a change, whatever the file's timestamp.
    """

    def __init__(self) -> None:
        self._last_modified: Optional[FileWatchState] = None

    @property
    def last_modified(self) -> Optional[FileWatchState]:
        return self._last_modified

    def poll(self, path: Union[str, Path]) -> FileWatchObservation:
        try:
            stat_result = os.stat(path)
        except FileNotFoundError:
            self._last_modified = None
            logger.warning("There is no configuration file: %s. Default settings will be used.", path)
            return FileWatchObservation(FileWatchResult.MISSING, ZERO_STATE)
        except OSError as exc:
            self._last_modified = None
            logger.warning(
                "Could not stat configuration file: %s (%s). Default settings will be used.",
                path,
                exc,
            )
            return FileWatchObservation(FileWatchResult.UNREADABLE, ZERO_STATE)

        observed = FileWatchState.from_stat(stat_result)
        if self._last_modified is not None and observed == self._last_modified:
            return FileWatchObservation(FileWatchResult.UNCHANGED, observed)
        return FileWatchObservation(FileWatchResult.CHANGED, observed)

    def should_reload(self, path: Union[str, Path]) -> bool:
        return self.poll(path).should_reload

    def record(self, state: FileWatchState) -> None:
        self._last_modified = state

    def reset(self) -> None:
        self._last_modified = None


logger = logging.getLogger(__name__)
