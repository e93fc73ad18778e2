import logging

import pytest

from serverconf.errors import ConfigError
from serverconf.services.logging_backend import LoggingBackend


def _file_handlers(target_logger):
    return [h for h in target_logger.handlers if isinstance(h, logging.FileHandler)]


def test_set_tag_level_accepts_known_levels(logging_backend):
    assert logging_backend.set_tag_level("serverconf.test.a", "WARN") is True
    assert logging.getLogger("serverconf.test.a").level == logging.WARNING
    assert logging_backend.set_tag_level("serverconf.test.b", logging.ERROR) is True
    assert logging_backend.tag_levels == {
        "serverconf.test.a": logging.WARNING,
        "serverconf.test.b": logging.ERROR,
    }


@pytest.mark.parametrize("tag,level", [("serverconf.test.a", "verbose"), ("", "info"), ("serverconf.test.a", 7)])
def test_set_tag_level_rejects_invalid(logging_backend, tag, level):
    assert logging_backend.set_tag_level(tag, level) is False
    assert logging_backend.tag_levels == {}


def test_reset_enable_restores_inheritance(logging_backend):
    logging_backend.set_tag_level("serverconf.test.a", "debug")
    logging_backend.reset_enable()
    assert logging.getLogger("serverconf.test.a").level == logging.NOTSET
    assert logging_backend.tag_levels == {}


def test_set_path_replaces_handlers(tmp_path, logging_backend):
    logging_backend.set_path(tmp_path / "first")
    logging_backend.set_path(tmp_path / "second")

    backend_logger = logging.getLogger("serverconf.test.server")
    handlers = _file_handlers(backend_logger)
    assert len(handlers) == 1
    assert handlers[0].baseFilename == str(tmp_path / "second" / "server.log")
    assert (tmp_path / "second").is_dir()
    assert logging_backend.log_path == tmp_path / "second"


def test_stat_stream_writes_to_own_file(tmp_path, logging_backend):
    logging_backend.set_path(tmp_path)
    stat_logger = logging_backend.stat_logger("test_stream")
    stat_logger.setLevel(logging.INFO)
    try:
        stat_logger.info("session opened")
        for handler in stat_logger.handlers:
            handler.flush()
        assert "session opened" in (tmp_path / "test_stream.log").read_text(encoding="utf-8")
    finally:
        stat_logger.setLevel(logging.NOTSET)


def test_set_path_fails_when_directory_cannot_be_created(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    backend = LoggingBackend(backend_logger="serverconf.test.blocked", stat_streams=[])
    with pytest.raises(ConfigError):
        backend.set_path(blocker / "logs")
    assert backend.log_path is None


def test_close_removes_handlers(tmp_path):
    backend = LoggingBackend(backend_logger="serverconf.test.closing", stat_streams=["closing_stream"])
    backend.set_path(tmp_path)
    backend.close()
    assert not _file_handlers(logging.getLogger("serverconf.test.closing"))
    assert not _file_handlers(backend.stat_logger("closing_stream"))
