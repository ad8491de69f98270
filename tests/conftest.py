"""Test configuration for pytest."""

import collections
import logging

import pytest

from slotcache import Env, Log, LogLevel, Metadata, ReflectCache


class CountingMetadata(Metadata):
    """Metadata scanner counting every underlying scan by method name."""

    def __init__(self):
        self.calls = collections.Counter()

    def find_type(self, name):
        self.calls["find_type"] += 1
        return super().find_type(name)

    def find_field(self, cls, name, scope):
        self.calls["find_field"] += 1
        return super().find_field(cls, name, scope)

    def find_property(self, cls, name, scope):
        self.calls["find_property"] += 1
        return super().find_property(cls, name, scope)

    def find_methods(self, cls, name, scope):
        self.calls["find_methods"] += 1
        return super().find_methods(cls, name, scope)

    def find_ctors(self, cls, scope):
        self.calls["find_ctors"] += 1
        return super().find_ctors(cls, scope)

    def find_facets(self, target, facet_type=None, inherit=False):
        self.calls["find_facets"] += 1
        return super().find_facets(target, facet_type, inherit)

    def total(self):
        return sum(self.calls.values())


@pytest.fixture(autouse=True)
def configure_test_logging(monkeypatch):
    """Keep slotcache logging quiet and configuration isolated per test."""
    monkeypatch.delenv("SLOTCACHE_CODEGEN_ENABLED", raising=False)
    monkeypatch.delenv("SLOTCACHE_INVOKER_MAXCOMPILEDARITY", raising=False)
    monkeypatch.delenv("SLOTCACHE_LOG_LEVEL", raising=False)
    Env.reload()
    logging.getLogger("slotcache").setLevel(logging.ERROR)
    log = Log.get("slotcache")
    saved = log.level()
    yield
    log.level(saved)
    Env.reload()


@pytest.fixture
def metadata():
    return CountingMetadata()


@pytest.fixture
def cache(metadata):
    """Fresh cache service over the counting metadata probe."""
    return ReflectCache(metadata)


@pytest.fixture
def log_records():
    """Capture slotcache log records at debug level."""
    records = []
    log = Log.get("slotcache")
    log.level(LogLevel.debug)

    def handler(rec):
        records.append(rec)

    Log.add_handler(handler)
    yield records
    Log.remove_handler(handler)
