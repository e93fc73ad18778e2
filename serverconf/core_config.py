"""
Core Configuration Definitions.

This module defines the default structure and values for the process-level
settings of serverconf using `yacs`. It is the single source of truth for
file names, directories and build information used by the configuration
manager.

Configuration is organized into sections:
- SYSTEM: Global paths.
- FILES: Names of the files that live in the configuration directory.
- LOGGING: Log backend and logger hot-reload settings.
- BUILD: Build information written into persisted configs.
- API: Admin HTTP server binding.
"""

import os
from pathlib import Path
from yacs.config import CfgNode as CN  # type: ignore[import-untyped]

from . import __version__


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


_C = CN()

# -----------------------------------------------------------------------------
# System Configuration
# -----------------------------------------------------------------------------
_C.SYSTEM = CN()
# Root directory of the project
_C.SYSTEM.ROOT = str(Path(__file__).parent.parent)

# Configuration directory used when load_configs() gets no explicit path
_C.SYSTEM.CONFIG_DIR = os.environ.get(
    "SERVERCONF_CONFIG_DIR",
    os.path.join(_C.SYSTEM.ROOT, "conf"),
)

# Where operators find up-to-date example documents
_C.SYSTEM.CONF_EXAMPLES_DIR = "misc/conf_examples"

# -----------------------------------------------------------------------------
# Configuration directory layout
# -----------------------------------------------------------------------------
_C.FILES = CN()
_C.FILES.MAIN = "Server.xml"
_C.FILES.LOGGER = "Logger.xml"
_C.FILES.SERVER_ID = "Server.id"
# Written by releases that stored API-created configs next to Server.xml
_C.FILES.LEGACY_LAST_CONFIG = "LastConfig.json"
_C.FILES.LEGACY_LAST_CONFIG_OLD = "LastConfig.xml"
# Target of save_current_config_to_default()
_C.FILES.LAST_KNOWN_GOOD = "LastKnownGood.xml"

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
_C.LOGGING = CN()
# Logger that receives the main log file handler
_C.LOGGING.BACKEND_LOGGER = "serverconf.server"
# Used when Logger.xml has no <Path>
_C.LOGGING.DEFAULT_PATH = os.environ.get(
    "SERVERCONF_LOG_DIR",
    os.path.join(_C.SYSTEM.ROOT, "logs"),
)
_C.LOGGING.FILE_NAME = "server.log"
# Statistics log streams, each written to <log dir>/<stream>.log
_C.LOGGING.STAT_STREAMS = [
    "webrtc_edge_session",
    "webrtc_edge_request",
    "webrtc_edge_viewers",
    "hls_edge_session",
    "hls_edge_request",
    "hls_edge_viewers",
]
# Logger.xml poll interval (seconds, <= 0 disables the watcher)
_C.LOGGING.WATCH_INTERVAL_SECONDS = int(
    os.environ.get("SERVERCONF_LOGGER_WATCH_INTERVAL_SECONDS", "5")
)

# -----------------------------------------------------------------------------
# Build information
# -----------------------------------------------------------------------------
_C.BUILD = CN()
_C.BUILD.VERSION = __version__
_C.BUILD.GIT_EXTRA = os.environ.get("SERVERCONF_GIT_EXTRA", "")
_C.BUILD.DEBUG = _env_bool("SERVERCONF_DEBUG_BUILD", False)

# -----------------------------------------------------------------------------
# Admin API
# -----------------------------------------------------------------------------
_C.API = CN()
_C.API.HOST = os.environ.get("SERVERCONF_API_HOST", "127.0.0.1")
_C.API.PORT = int(os.environ.get("SERVERCONF_API_PORT", "8081"))


def get_cfg_defaults():
    """
    Get a yacs CfgNode object with default values.
    Returns a clone so callers can mutate it freely.
    """
    return _C.clone()
