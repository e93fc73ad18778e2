import logging

from serverconf.services.logger_config_watcher import LoggerConfigWatcher
from tests.common.config_fixtures import TEST_TAG, write_logger_xml


def test_check_logger_config_before_load(manager):
    watcher = LoggerConfigWatcher(manager)
    assert watcher.check_logger_config() is False


def test_check_logger_config_only_on_change(config_dir, manager):
    manager.load_configs(config_dir)
    watcher = LoggerConfigWatcher(manager)
    assert watcher.check_logger_config() is False


def test_failed_logger_reload_keeps_running(config_dir, manager, tmp_path, caplog):
    (config_dir / "Logger.xml").unlink()
    manager.load_configs(config_dir)
    write_logger_xml(config_dir, tmp_path / "logs", tags=((TEST_TAG, "noisy"),))
    watcher = LoggerConfigWatcher(manager)

    with caplog.at_level(logging.ERROR):
        assert watcher.check_logger_config() is False
    assert "Logger config reload failed" in caplog.text

    write_logger_xml(config_dir, tmp_path / "logs", tags=((TEST_TAG, "error"),))
    assert watcher.check_logger_config() is True
    assert logging.getLogger(TEST_TAG).level == logging.ERROR
