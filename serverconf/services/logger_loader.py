import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from ..config import config
from ..errors import ConfigError
from ..models import LoggerDocument
from .change_detector import FileChangeDetector
from .documents import parse_logger_document
from .logging_backend import LoggingBackend, LogPathSink
from .version_registry import DocumentKind, check_valid_version, parse_version


class LoggerConfigLoader:
    """
    Applies Logger.xml to the logging backend once per file change.

    Behavior:
    - Missing Logger.xml is not fatal; the backend keeps its defaults.
    - An unchanged modification time skips the reload entirely.
    - Every tag level is resolved before anything is applied; one bad tag
      aborts the reload and the file is retried on the next call.
    - Previously applied levels are only reset once the new file parsed,
      passed the version check and staged all its tags.
    """

    def __init__(
        self,
        backend: LoggingBackend,
        detector: Optional[FileChangeDetector] = None,
        sinks: Iterable[LogPathSink] = (),
        parser: Callable[[Path], LoggerDocument] = parse_logger_document,
    ) -> None:
        self.backend = backend
        self.detector = detector or FileChangeDetector()
        self.sinks = list(sinks)
        self._parser = parser
        self._lock = threading.Lock()

    def load(self, config_path: Union[str, Path]) -> bool:
        """Returns True when Logger.xml was (re)applied."""
        logger_config_path = Path(config_path) / config.FILES.LOGGER
        with self._lock:
            observation = self.detector.poll(logger_config_path)
            if not observation.should_reload:
                return False

            document = self._parser(logger_config_path)
            check_valid_version(DocumentKind.LOGGER, parse_version(document.version))
            staged = self._stage_tag_levels(document)

            self.backend.reset_enable()
            log_path = document.log_path or config.LOGGING.DEFAULT_PATH
            self.backend.set_path(log_path)
            for sink in self.sinks:
                sink.set_log_path(str(log_path))
            logger.info("Trying to set logfile in directory... (%s)", log_path)

            for name, levelno in staged:
                self.backend.set_tag_level(name, levelno)

            self.detector.record(observation.state)
            return True

    def _stage_tag_levels(self, document: LoggerDocument) -> List[Tuple[str, int]]:
        staged: List[Tuple[str, int]] = []
        for tag in document.tags:
            levelno = self.backend.resolve_level(tag.level)
            if not tag.name or levelno is None:
                raise ConfigError(
                    f"Could not set log level for tag: {tag.name}",
                    code="LOGGER_TAG_INVALID",
                    details={"tag": tag.name, "level": tag.level},
                )
            staged.append((tag.name, levelno))
        return staged


logger = logging.getLogger(__name__)
