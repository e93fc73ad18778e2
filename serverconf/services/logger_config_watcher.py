import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler  # type: ignore[import-untyped]

from ..config import config
from ..errors import ConfigError
from .config_manager import ConfigManager, config_manager


class LoggerConfigWatcher:
    """
    Background job that re-applies Logger.xml when it changes on disk.

    A failed reload is logged and the previous logger settings stay active;
    the file is retried on the next tick.
    """

    def __init__(self, manager: Optional[ConfigManager] = None) -> None:
        self.manager = manager or config_manager
        self.scheduler = AsyncIOScheduler()

    def start(self) -> None:
        interval_seconds = int(config.LOGGING.WATCH_INTERVAL_SECONDS)
        if interval_seconds <= 0:
            logger.info("Logger config watcher disabled (interval <= 0)")
            return
        self.scheduler.add_job(self.check_logger_config, "interval", seconds=interval_seconds)
        self.scheduler.start()

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def check_logger_config(self) -> bool:
        try:
            reloaded = self.manager.reload_logger_config()
        except ConfigError as exc:
            logger.error("Logger config reload failed: %s", exc.message)
            return False
        if reloaded:
            logger.info("Logger config reloaded")
        return reloaded


logger_config_watcher = LoggerConfigWatcher()

logger = logging.getLogger(__name__)
