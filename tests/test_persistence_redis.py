import os

import pytest

from header_injector.config import HeaderInjectorConfig
from header_injector.persistence.redis import RedisRuleStore
from header_injector.types import HeaderRule

pytestmark = pytest.mark.skipif(
    os.getenv("REDIS_URL") is None,
    reason="Requires REDIS_URL environment variable",
)


@pytest.fixture()
def store():
    url = os.getenv("REDIS_URL")
    store = RedisRuleStore(dsn=url, namespace="test_header_injector")
    yield store
    store.clear()


def test_redis_round_trip(store):
    config = HeaderInjectorConfig(rules=[HeaderRule.dynamic("X-Token", r"t=(\w+)")])

    store.save(config)

    assert store.load() == config
    store.clear()
    assert store.load() is None
