"""Tests for configuration and logging."""

import logging

import pytest

from slotcache import ArgErr, Env, Log, LogLevel, LogRec


class TestEnv:
    def test_default(self, tmp_path):
        env = Env(str(tmp_path))
        assert env.config("no.such.key") is None
        assert env.config("no.such.key", "x") == "x"

    def test_props_file(self, tmp_path):
        etc = tmp_path / "etc" / "slotcache"
        etc.mkdir(parents=True)
        (etc / "config.props").write_text(
            "# comment\n// also comment\nlog.level = debug\ncodegen.enabled=false\nbroken line\n",
            encoding="utf-8")
        env = Env(str(tmp_path))
        assert env.config("log.level") == "debug"
        assert env.config_bool("codegen.enabled", True) is False
        assert "broken line" not in env.props()

    def test_environment_overrides_props(self, tmp_path, monkeypatch):
        etc = tmp_path / "etc" / "slotcache"
        etc.mkdir(parents=True)
        (etc / "config.props").write_text("invoker.maxCompiledArity=2\n", encoding="utf-8")
        env = Env(str(tmp_path))
        assert env.config_int("invoker.maxCompiledArity", 4) == 2
        monkeypatch.setenv("SLOTCACHE_INVOKER_MAXCOMPILEDARITY", "8")
        assert env.config_int("invoker.maxCompiledArity", 4) == 8

    def test_bad_int(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SLOTCACHE_INVOKER_MAXCOMPILEDARITY", "many")
        assert Env(str(tmp_path)).config_int("invoker.maxCompiledArity", 4) == 4

    def test_cur_and_reload(self):
        env = Env.cur()
        assert Env.cur() is env
        Env.reload()
        assert Env.cur() is not env


class TestLogLevel:
    def test_from_str(self):
        assert LogLevel.from_str("debug") is LogLevel.debug
        assert LogLevel.from_str("WARNING") is LogLevel.warn
        assert LogLevel.from_str("error") is LogLevel.err
        assert LogLevel.from_str("loud", False) is None
        with pytest.raises(ArgErr):
            LogLevel.from_str("loud")

    def test_ordering(self):
        assert LogLevel.debug < LogLevel.info < LogLevel.warn < LogLevel.err < LogLevel.silent


class TestLog:
    def test_get_is_cached(self):
        assert Log.get("slotcache") is Log.get("slotcache")
        assert Log.find("slotcache") is Log.get("slotcache")
        assert Log.find("slotcache.never.created", False) is None

    def test_level_from_config(self, monkeypatch):
        monkeypatch.setenv("SLOTCACHE_LOG_LEVEL", "err")
        Env.reload()
        log = Log.get("slotcache.test.configured")
        assert log.level() is LogLevel.err
        assert not log.is_enabled(LogLevel.warn)

    def test_invalid_name(self):
        with pytest.raises(ArgErr):
            Log("bad name!", register=False)

    def test_handlers(self, log_records):
        log = Log.get("slotcache")
        log.info("hello")
        err = ValueError("x")
        log.warn("careful", err)
        assert [r.msg() for r in log_records[-2:]] == ["hello", "careful"]
        rec = log_records[-1]
        assert isinstance(rec, LogRec)
        assert rec.level() is LogLevel.warn
        assert rec.err() is err
        assert rec.log_name() == "slotcache"

    def test_level_filters(self, log_records):
        log = Log.get("slotcache")
        log.level(LogLevel.err)
        log.info("dropped")
        assert log_records == []

    def test_failing_handler_does_not_break_caller(self, log_records):
        def bad(rec):
            raise RuntimeError("handler failure")
        Log.add_handler(bad)
        try:
            Log.get("slotcache").info("still delivered")
        finally:
            Log.remove_handler(bad)
        assert log_records[-1].msg() == "still delivered"

    def test_forwards_to_logging(self, caplog):
        log = Log.get("slotcache")
        log.level(LogLevel.info)
        with caplog.at_level(logging.INFO, logger="slotcache"):
            log.info("forwarded")
        assert "forwarded" in caplog.text

    def test_add_handler_requires_callable(self):
        with pytest.raises(ArgErr):
            Log.add_handler("not callable")
