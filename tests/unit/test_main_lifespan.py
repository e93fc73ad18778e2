import asyncio

import pytest

from serverconf.errors import LegacyConfigError
from serverconf.main import app, lifespan
from serverconf.services.config_manager import ConfigManager
from serverconf.services.logger_config_watcher import LoggerConfigWatcher
from tests.common.config_fixtures import write_server_xml


@pytest.fixture
def patched_services(monkeypatch, logging_backend):
    manager = ConfigManager(logging_backend=logging_backend)
    watcher = LoggerConfigWatcher(manager)
    monkeypatch.setattr("serverconf.services.config_manager.config_manager", manager)
    monkeypatch.setattr("serverconf.services.logger_config_watcher.logger_config_watcher", watcher)
    return manager, watcher


@pytest.mark.asyncio
async def test_lifespan_loads_configs_and_starts_watcher(temp_config_dir, patched_services):
    manager, watcher = patched_services
    write_server_xml(temp_config_dir)

    async with lifespan(app):
        assert manager.is_loaded
        assert manager.config_path == temp_config_dir
        assert manager.paths.server_id.exists()
        assert watcher.scheduler.running

    await asyncio.sleep(0)
    assert not watcher.scheduler.running


@pytest.mark.asyncio
async def test_lifespan_refuses_legacy_config(temp_config_dir, patched_services):
    manager, watcher = patched_services
    write_server_xml(temp_config_dir)
    (temp_config_dir / "LastConfig.json").write_text("{}", encoding="utf-8")

    with pytest.raises(LegacyConfigError):
        async with lifespan(app):
            pass
    assert manager.is_loaded is False
    assert not watcher.scheduler.running
