"""Tests for helpers, environment access and logging."""

import importlib
import io
import json
import os

from vcompiler.parser.builder import base_warn
from vcompiler.utils.env import Env
from vcompiler.utils.helpers import camelize, capitalize, hyphenate, make_map, no
from vcompiler.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    LogRecord,
    MemoryHandler,
    StreamHandler,
    TextFormatter,
    get_logger,
)

env_module = importlib.import_module("vcompiler.utils.env")


class TestHelpers:
    """String and lookup helpers."""

    def test_case_conversion(self):
        assert camelize("foo-bar-baz") == "fooBarBaz"
        assert hyphenate("fooBarBaz") == "foo-bar-baz"
        assert capitalize("fooBar") == "FooBar"
        assert capitalize("") == ""

    def test_make_map(self):
        is_void = make_map("br,hr")
        assert is_void("br")
        assert not is_void("BR")

        lower = make_map(["br"], expects_lower_case=True)
        assert lower("BR")
        assert not lower("")

    def test_no(self):
        assert no("anything", 1) is False


class TestEnv:
    """Environment variables and .env files."""

    def test_load_env_file(self, tmp_path, monkeypatch):
        # registered first so the values written by load() are undone
        for name in ("VC_TEST_NAME", "VC_TEST_FLAG"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)
        env_file = tmp_path / ".env"
        env_file.write_text('# comment\nexport VC_TEST_NAME="app"\nVC_TEST_FLAG=off\nbroken\n')

        env = Env(env_file).load()
        assert env.loaded
        assert env.str("VC_TEST_NAME") == "app"
        assert env.bool("VC_TEST_FLAG") is False
        assert "VC_TEST_NAME" in env

    def test_process_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VC_TEST_NAME", "process")
        env_file = tmp_path / ".env"
        env_file.write_text("VC_TEST_NAME=file\n")

        assert Env(env_file).load().get("VC_TEST_NAME") == "process"

    def test_bool_fallback(self, monkeypatch):
        monkeypatch.setenv("VC_TEST_FLAG", "maybe")
        env = Env()
        assert env.bool("VC_TEST_FLAG", default=True) is True
        assert env.bool("VC_TEST_MISSING", default=False) is False

    def test_missing_file(self, tmp_path):
        assert Env(tmp_path / "nope.env").load().loaded

    def test_dotenv_read_only_on_request(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VC_TEST_NAME", "")
        monkeypatch.delenv("VC_TEST_NAME")
        monkeypatch.delenv("VCOMPILER_ENV", raising=False)
        monkeypatch.setattr(env_module, "_env", Env())
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("VC_TEST_NAME=file\n")

        assert env_module.is_dev_mode()
        assert env_module.env("VC_TEST_NAME") is None
        assert "VC_TEST_NAME" not in os.environ

        env_module.load_env()
        assert env_module.env("VC_TEST_NAME") == "file"


class TestLogger:
    """Structured logging."""

    def test_level_filtering(self):
        handler = MemoryHandler()
        logger = Logger("test", level=LogLevel.WARNING, handlers=[handler])
        logger.info("skipped")
        logger.warning("kept", template="app.html")
        assert handler.messages() == ["kept"]
        assert handler.records[0].context == {"template": "app.html"}

    def test_with_context_shares_handlers(self):
        handler = MemoryHandler()
        logger = Logger("test", handlers=[handler]).with_context(size=3)
        logger.error("boom", errors=1)
        assert handler.records[0].context == {"size": 3, "errors": 1}

    def test_child_loggers_share_root_handlers(self, log_records):
        get_logger("vcompiler.test-child").error("from child")
        assert "from child" in log_records.messages(LogLevel.ERROR)

    def test_base_warn(self, log_records):
        base_warn("something is off")
        assert log_records.messages(LogLevel.ERROR)[-1] == "[vcompiler] something is off"

    def test_text_formatter(self):
        record = LogRecord(level=LogLevel.ERROR, message="bad", context={"errors": 2})
        output = TextFormatter(format_string="[{level}] {message}", colors=False).format(record)
        assert output == "[ERROR] bad errors=2"

    def test_json_formatter(self):
        record = LogRecord(level=LogLevel.INFO, message="ok", logger_name="vcompiler.driver")
        data = json.loads(JsonFormatter().format(record))
        assert (data["level"], data["message"], data["logger"]) == ("INFO", "ok", "vcompiler.driver")

    def test_stream_handler(self):
        stream = io.StringIO()
        handler = StreamHandler(stream, TextFormatter(format_string="{message}", colors=False))
        Logger("test", handlers=[handler]).error("written")
        assert stream.getvalue() == "written\n"

    def test_parse_level(self):
        assert LogLevel.parse("debug", LogLevel.WARNING) is LogLevel.DEBUG
        assert LogLevel.parse("loud", LogLevel.WARNING) is LogLevel.WARNING
        assert LogLevel.parse(None, LogLevel.ERROR) is LogLevel.ERROR
