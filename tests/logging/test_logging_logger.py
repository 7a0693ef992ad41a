"""Tests for the buffered logger, its config and handlers."""

import pytest

from perfbench.logging import (
    BaseLogHandler,
    CallbackLogHandler,
    FileLogHandler,
    Logger,
    LoggerConfig,
    LogLevel,
)


class DummyPayloadHandler(BaseLogHandler):
    def __init__(self) -> None:
        super().__init__()
        self.received = []
        self.closed = False

    def push(self, buffer: list[str]) -> None:
        self.received.append(tuple(buffer))

    def close(self) -> None:
        self.closed = True


def make_logger(handler, **config) -> Logger:
    config.setdefault("do_stdout", False)
    config.setdefault("str_format", "%(levelname)s %(message)s")
    return Logger(name="test", config=LoggerConfig(**config), handlers=[handler])


class TestLoggerConfig:
    """Validate LoggerConfig inputs."""

    def test_default_values(self) -> None:
        cfg = LoggerConfig()
        assert cfg.base_level.name == "INFO"
        assert cfg.do_stdout is True
        assert cfg.flush_interval_s == 1.0
        assert cfg.buffer_size == 10000

    def test_invalid_flush_interval(self) -> None:
        with pytest.raises(ValueError):
            LoggerConfig(flush_interval_s=0.0)

    def test_invalid_buffer_size(self) -> None:
        with pytest.raises(ValueError):
            LoggerConfig(buffer_size=0)

    def test_format_requires_message(self) -> None:
        with pytest.raises(ValueError, match="message"):
            LoggerConfig(str_format="%(name)s")

    def test_for_verbosity(self) -> None:
        quiet = LoggerConfig.for_verbosity(0)
        assert (quiet.base_level, quiet.do_stdout) == (LogLevel.WARNING, False)
        info = LoggerConfig.for_verbosity(1)
        assert (info.base_level, info.do_stdout) == (LogLevel.INFO, True)
        assert LoggerConfig.for_verbosity(3).base_level is LogLevel.DEBUG
        with pytest.raises(ValueError, match="Invalid verbosity"):
            LoggerConfig.for_verbosity(-1)


class TestLogger:
    """Buffering, level filtering and flushing."""

    def test_primary_config_added(self) -> None:
        handler = DummyPayloadHandler()
        logger = make_logger(handler)
        assert handler.primary_config is logger.config

    def test_rejects_foreign_handler(self) -> None:
        with pytest.raises(TypeError, match="BaseLogHandler"):
            Logger(handlers=[object()])

    def test_messages_buffered_until_flush(self) -> None:
        handler = DummyPayloadHandler()
        logger = make_logger(handler, flush_interval_s=3600.0)
        logger.info("one")
        logger.info("two")
        assert handler.received == []
        logger.flush()
        assert handler.received == [("INFO one", "INFO two")]

    def test_warning_flushes_immediately(self) -> None:
        handler = DummyPayloadHandler()
        logger = make_logger(handler, flush_interval_s=3600.0)
        logger.info("context")
        logger.warning("careful")
        assert handler.received == [("INFO context", "WARNING careful")]

    def test_full_buffer_flushes(self) -> None:
        handler = DummyPayloadHandler()
        logger = make_logger(handler, flush_interval_s=3600.0, buffer_size=2)
        logger.info("a")
        logger.info("b")
        logger.info("c")
        assert handler.received == [("INFO a", "INFO b")]

    def test_level_filtering(self) -> None:
        handler = DummyPayloadHandler()
        logger = make_logger(handler, base_level=LogLevel.WARNING)
        logger.trace("t")
        logger.debug("d")
        logger.info("i")
        logger.error("e")
        assert handler.received == [("ERROR e",)]

    def test_set_log_level(self) -> None:
        handler = DummyPayloadHandler()
        logger = make_logger(handler, base_level=LogLevel.WARNING, flush_interval_s=3600.0)
        logger.set_log_level(LogLevel.DEBUG)
        logger.debug("now visible")
        logger.flush()
        assert handler.received == [("DEBUG now visible",)]

    def test_close_flushes_and_stops(self) -> None:
        handler = DummyPayloadHandler()
        logger = make_logger(handler, flush_interval_s=3600.0)
        logger.info("pending")
        logger.close()
        assert handler.received == [("INFO pending",)]
        assert handler.closed
        logger.error("ignored")
        assert handler.received == [("INFO pending",)]

    def test_stdout_output(self, capsys) -> None:
        logger = Logger(
            name="perfbench",
            config=LoggerConfig(str_format="[%(name)s] %(message)s", flush_interval_s=3600.0),
        )
        logger.info("hello")
        logger.flush()
        assert capsys.readouterr().out == "[perfbench] hello\n"


class TestHandlers:
    """Bundled handler types."""

    def test_callback_handler(self) -> None:
        lines = []
        CallbackLogHandler(lines.append).push(["a", "b"])
        assert lines == ["a", "b"]

    def test_callback_handler_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError):
            CallbackLogHandler(None)

    @pytest.mark.parametrize("name", ["bench.log", "bench.txt"])
    def test_file_handler_appends_after_run_separator(self, tmp_path, name) -> None:
        path = tmp_path / "logs" / name
        handler = FileLogHandler(str(path), create=True, run_label="mod:fast mod:slow")
        handler.push(["first"])
        handler.push(["second", "third"])

        lines = path.read_text().splitlines()
        assert lines[0].startswith("=== perfbench run ")
        assert lines[0].endswith(" mod:fast mod:slow ===")
        assert lines[1:] == ["first", "second", "third"]

    def test_successive_runs_share_a_file(self, tmp_path) -> None:
        path = tmp_path / "bench.log"
        for batch in (["run one"], ["run two"]):
            FileLogHandler(str(path)).push(batch)
        lines = path.read_text().splitlines()
        assert len(lines) == 4
        assert lines[0].startswith("=== perfbench run") and lines[2].startswith("=== perfbench run")
        assert (lines[1], lines[3]) == ("run one", "run two")

    def test_file_handler_rejects_other_suffixes(self, tmp_path) -> None:
        with pytest.raises(ValueError, match="Invalid filepath"):
            FileLogHandler(str(tmp_path / "bench.csv"))
