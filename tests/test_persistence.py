import pytest

from header_injector.config import HeaderInjectorConfig, MacroRequest
from header_injector.persistence.memory import MemoryRuleStore
from header_injector.persistence.sqlite import SQLiteRuleStore
from header_injector.types import HeaderRule, MatchKind


def _config() -> HeaderInjectorConfig:
    return HeaderInjectorConfig(
        enabled=False,
        rules=[
            HeaderRule.static("X-Static", "1"),
            HeaderRule.dynamic("X-Token", "token=", match_kind=MatchKind.LITERAL, enabled=False),
        ],
        macro=[MacroRequest(url="https://example.com/login")],
    )


@pytest.mark.parametrize("store_factory", [MemoryRuleStore, SQLiteRuleStore])
def test_store_round_trip(store_factory):
    store = store_factory()
    assert store.load() is None

    store.save(_config())

    assert store.load() == _config()


@pytest.mark.parametrize("store_factory", [MemoryRuleStore, SQLiteRuleStore])
def test_save_replaces_previous_rule_set(store_factory):
    store = store_factory()
    store.save(_config())

    store.save(HeaderInjectorConfig(rules=[HeaderRule.static("X-Only", "1")]))

    loaded = store.load()
    assert loaded is not None
    assert [rule.name for rule in loaded.rules] == ["X-Only"]


@pytest.mark.parametrize("store_factory", [MemoryRuleStore, SQLiteRuleStore])
def test_clear(store_factory):
    store = store_factory()
    store.save(_config())

    store.clear()

    assert store.load() is None


def test_sqlite_file_store_shared_between_instances(tmp_path):
    path = tmp_path / "headers.db"
    SQLiteRuleStore(path, namespace="project").save(_config())

    assert SQLiteRuleStore(path, namespace="project").load() == _config()
    assert SQLiteRuleStore(path, namespace="other").load() is None
