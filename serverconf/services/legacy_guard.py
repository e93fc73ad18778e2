import logging
from pathlib import Path
from typing import Union

from ..config import config
from ..errors import LegacyConfigError


def check_legacy_configs(config_path: Union[str, Path]) -> None:
    """
    Refuse to start when a file from the old last-config storage is present.

    Releases that saved API-created configuration next to Server.xml are no
    longer supported; the operator must migrate or delete the file manually.
    """
    base = Path(config_path)
    current = config.FILES.LEGACY_LAST_CONFIG
    older = config.FILES.LEGACY_LAST_CONFIG_OLD

    if (base / current).is_file():
        found = current
    elif (base / older).is_file():
        found = older
    else:
        return

    logger.error("Legacy config file found: %s", base / found)
    raise LegacyConfigError(file_name=found)


logger = logging.getLogger(__name__)
