"""Rule-set storage exports."""

from .base import RuleStore
from .memory import MemoryRuleStore
from .redis import RedisRuleStore
from .sqlite import SQLiteRuleStore

__all__ = [
    "RuleStore",
    "MemoryRuleStore",
    "RedisRuleStore",
    "SQLiteRuleStore",
]
