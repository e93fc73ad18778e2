"""
Configuration Loader.

This module initializes the global configuration object (`config`) used
throughout serverconf. The structure is defined in `serverconf.core_config`.

Usage:
    from serverconf.config import config
    print(config.FILES.MAIN)
"""

import logging
from serverconf.core_config import get_cfg_defaults

config = get_cfg_defaults()

# Freeze config to prevent accidental changes during runtime.
config.freeze()

logger = logging.getLogger(__name__)
