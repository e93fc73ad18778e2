import sys
from pathlib import Path
import pytest

# Add project root to sys.path
# This ensures that 'serverconf' is importable as a top-level module during tests
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.common.config_fixtures import write_logger_xml, write_server_xml  # noqa: E402


@pytest.fixture
def config_dir(tmp_path):
    conf = tmp_path / "conf"
    conf.mkdir()
    write_server_xml(conf)
    write_logger_xml(conf, tmp_path / "logs")
    return conf


@pytest.fixture
def logging_backend():
    from serverconf.services.logging_backend import LoggingBackend

    backend = LoggingBackend(backend_logger="serverconf.test.server", stat_streams=["test_stream"])
    try:
        yield backend
    finally:
        backend.reset_enable()
        backend.close()


@pytest.fixture
def manager(logging_backend):
    from serverconf.services.config_manager import ConfigManager

    return ConfigManager(logging_backend=logging_backend)


@pytest.fixture
def temp_config_dir(tmp_path):
    from serverconf.config import config

    old_config_dir = config.SYSTEM.CONFIG_DIR
    conf = tmp_path / "default-conf"
    conf.mkdir()

    config.defrost()
    config.SYSTEM.CONFIG_DIR = str(conf)
    config.freeze()

    try:
        yield conf
    finally:
        config.defrost()
        config.SYSTEM.CONFIG_DIR = old_config_dir
        config.freeze()
