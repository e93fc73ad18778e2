from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, Union

from ..config import config
from ..errors import ConfigError


LOG_LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

STAT_LOGGER_PREFIX = "stat"

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


class LogPathSink(Protocol):
    """Anything that writes its own log files into the configured directory."""

    def set_log_path(self, log_path: str) -> None:
        ...


class LoggingBackend:
    """
    Handle on the process logging state driven by Logger.xml.

    Tags are logger names; their levels are set on `logging.getLogger(tag)`.
    The log directory receives the main server log and one file per
    statistics stream.
    """

    def __init__(
        self,
        backend_logger: Optional[str] = None,
        file_name: Optional[str] = None,
        stat_streams: Optional[Iterable[str]] = None,
    ) -> None:
        self.backend_logger = backend_logger or config.LOGGING.BACKEND_LOGGER
        self.file_name = file_name or config.LOGGING.FILE_NAME
        self.stat_streams = list(stat_streams if stat_streams is not None else config.LOGGING.STAT_STREAMS)
        self._tag_levels: Dict[str, int] = {}
        self._handlers: Dict[str, logging.Handler] = {}
        self._log_path: Optional[Path] = None

    @property
    def log_path(self) -> Optional[Path]:
        return self._log_path

    @property
    def tag_levels(self) -> Dict[str, int]:
        return dict(self._tag_levels)

    def reset_enable(self) -> None:
        """Drop every tag level applied so far; tags inherit their parents again."""
        for tag in self._tag_levels:
            logging.getLogger(tag).setLevel(logging.NOTSET)
        self._tag_levels.clear()

    @staticmethod
    def resolve_level(level: Union[str, int]) -> Optional[int]:
        if isinstance(level, int):
            return level if level in LOG_LEVELS.values() else None
        return LOG_LEVELS.get(level.strip().lower())

    def set_tag_level(self, tag: str, level: Union[str, int]) -> bool:
        levelno = self.resolve_level(level)
        if not tag or levelno is None:
            return False
        logging.getLogger(tag).setLevel(levelno)
        self._tag_levels[tag] = levelno
        return True

    def stat_logger(self, stream: str) -> logging.Logger:
        return logging.getLogger(f"{STAT_LOGGER_PREFIX}.{stream}")

    def set_path(self, log_path: Union[str, Path]) -> None:
        target = Path(log_path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(
                f"Could not create log directory: {target} ({exc})",
                details={"log_path": str(target)},
            ) from exc

        self._replace_handler(logging.getLogger(self.backend_logger), target / self.file_name)
        for stream in self.stat_streams:
            stat_logger = self.stat_logger(stream)
            stat_logger.propagate = False
            self._replace_handler(stat_logger, target / f"{stream}.log")
        self._log_path = target

    def close(self) -> None:
        for name, handler in list(self._handlers.items()):
            logging.getLogger(name).removeHandler(handler)
            handler.close()
        self._handlers.clear()
        self._log_path = None

    def _replace_handler(self, target_logger: logging.Logger, file_path: Path) -> None:
        previous = self._handlers.pop(target_logger.name, None)
        if previous is not None:
            target_logger.removeHandler(previous)
            previous.close()
        handler = logging.FileHandler(file_path, encoding="utf-8", delay=True)
        handler.setFormatter(_FORMATTER)
        target_logger.addHandler(handler)
        self._handlers[target_logger.name] = handler
