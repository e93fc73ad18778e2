import logging
import platform
import threading
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

from ..config import config
from ..errors import ConfigError
from .documents import ServerDocument, parse_server_document, render_xml
from .legacy_guard import check_legacy_configs
from .logger_loader import LoggerConfigLoader
from .logging_backend import LoggingBackend, LogPathSink
from .server_identity import ServerIdentityStore
from .version_registry import DocumentKind, check_valid_version


@dataclass(frozen=True)
class ConfigPathSet:
    """Files of one configuration directory; pure function of `base`."""

    base: Path

    @property
    def main(self) -> Path:
        return self.base / config.FILES.MAIN

    @property
    def logger(self) -> Path:
        return self.base / config.FILES.LOGGER

    @property
    def server_id(self) -> Path:
        return self.base / config.FILES.SERVER_ID

    @property
    def legacy_last_config(self) -> Path:
        return self.base / config.FILES.LEGACY_LAST_CONFIG

    @property
    def legacy_last_config_old(self) -> Path:
        return self.base / config.FILES.LEGACY_LAST_CONFIG_OLD

    @property
    def last_known_good(self) -> Path:
        return self.base / config.FILES.LAST_KNOWN_GOOD


class ConfigManager:
    """
    Owns the configuration of the running server.

    `load_configs()` runs, in order: legacy config check, Logger.xml
    hot-reload gate, Server.xml parse and version check, server id
    resolution. The Server document, its directory and the server id are
    only replaced once every step has succeeded, so a failed reload keeps
    the previous configuration in place.
    """

    def __init__(
        self,
        logging_backend: Optional[LoggingBackend] = None,
        identity_store: Optional[ServerIdentityStore] = None,
        log_path_sinks: Iterable[LogPathSink] = (),
        server_parser: Callable[[Path], ServerDocument] = parse_server_document,
        logger_loader: Optional[LoggerConfigLoader] = None,
    ) -> None:
        self.logging_backend = logging_backend or LoggingBackend()
        self.identity_store = identity_store or ServerIdentityStore()
        self.logger_loader = logger_loader or LoggerConfigLoader(
            self.logging_backend,
            sinks=log_path_sinks,
        )
        self._server_parser = server_parser
        self._config_mutex = threading.Lock()
        self._server: Optional[ServerDocument] = None
        self._config_path: Optional[Path] = None
        self._server_id: Optional[str] = None
        self._version = str(config.BUILD.VERSION)
        self._git_extra = str(config.BUILD.GIT_EXTRA)
        self._debug_build = bool(config.BUILD.DEBUG)

    def set_build_version(self, version: str, git_extra: str = "") -> None:
        self._version = version
        self._git_extra = git_extra

    @property
    def config_path(self) -> Optional[Path]:
        with self._config_mutex:
            return self._config_path

    @property
    def paths(self) -> Optional[ConfigPathSet]:
        config_path = self.config_path
        return ConfigPathSet(config_path) if config_path is not None else None

    @property
    def server_id(self) -> Optional[str]:
        with self._config_mutex:
            return self._server_id

    @property
    def is_loaded(self) -> bool:
        with self._config_mutex:
            return self._server is not None

    def load_configs(self, config_path: Union[str, Path, None] = None) -> None:
        if not config_path:
            config_path = config.SYSTEM.CONFIG_DIR
        paths = ConfigPathSet(Path(config_path))

        check_legacy_configs(paths.base)

        self.logger_loader.load(paths.base)
        server = self._load_server_config(paths)

        server_id = self.identity_store.resolve(paths.base)
        server.server_id = server_id

        with self._config_mutex:
            self._server = server
            self._config_path = paths.base
            self._server_id = server_id
        logger.info("Configurations loaded from %s (server id: %s)", paths.base, server_id)

    def reload_configs(self) -> None:
        config_path = self.config_path
        if config_path is None:
            raise ConfigError("Configurations have not been loaded yet", code="CONFIG_NOT_LOADED")
        self.load_configs(config_path)

    def reload_logger_config(self) -> bool:
        """Re-check only Logger.xml of the loaded directory."""
        config_path = self.config_path
        if config_path is None:
            return False
        return self.logger_loader.load(config_path)

    def _load_server_config(self, paths: ConfigPathSet) -> ServerDocument:
        logger.info("Trying to load configurations... (%s)", paths.main)
        server = self._server_parser(paths.main)
        check_valid_version(DocumentKind.SERVER, server.version)
        return server

    def _require_server(self) -> ServerDocument:
        if self._server is None:
            raise ConfigError("Configurations have not been loaded yet", code="CONFIG_NOT_LOADED")
        return self._server

    def get_current_config_as_json(self) -> Dict[str, Any]:
        with self._config_mutex:
            return self._require_server().to_json()

    def get_current_config_as_xml(self) -> ET.Element:
        with self._config_mutex:
            return self._require_server().to_xml()

    def save_current_config(self, document: ET.Element, last_config_path: Union[str, Path]) -> Path:
        target = Path(last_config_path)
        content = (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            f"<!--{self._generated_comment()}-->\n"
            f"{render_xml(document)}\n"
        )
        try:
            with open(target, "w", encoding="utf-8", errors="surrogateescape") as f:
                f.write(content)
        except OSError as exc:
            logger.error("Could not write config to file: %s", target)
            raise ConfigError(
                f"Could not write config to file: {target} ({exc})",
                code="CONFIG_WRITE_FAILED",
                details={"path": str(target)},
            ) from exc

        logger.info("Current config is written to %s", target)
        return target

    def save_current_config_to_default(self) -> Path:
        with self._config_mutex:
            document = self._require_server().to_xml()
            last_config_path = ConfigPathSet(self._config_path).last_known_good
        return self.save_current_config(document, last_config_path)

    def _generated_comment(self) -> str:
        uts = platform.uname()
        build_mode = " [debug]" if self._debug_build else ""
        created = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        version = _comment_safe(f"{self._version}{self._git_extra}")
        host = _comment_safe(f"{uts.node} ({uts.system} {uts.machine} - {uts.release}, {uts.version})")
        return (
            "\n"
            "\tThis is an auto-generated configuration file through API call.\n"
            "\tThe server may not work if it is modified incorrectly.\n\n"
            f"\tVersion: v{version}{build_mode}\n"
            f"\tCreated: {created}\n"
            f"\tHost: {host}\n"
        )


def _comment_safe(text: str) -> str:
    # XML comments may not contain "--".
    while "--" in text:
        text = text.replace("--", "- -")
    return text


config_manager = ConfigManager()

logger = logging.getLogger(__name__)
