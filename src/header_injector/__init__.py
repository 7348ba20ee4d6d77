"""Public package interface for header_injector."""

from .config import EventConfig, HeaderInjectorConfig, MacroRequest
from .events import EngineEvent, EventKind, EventPublisher, InMemoryEventSink, LoggingEventSink
from .extractor import InvalidPatternError, TokenExtractor
from .handlers import DynamicHeaderAction, StaticHeaderHandler
from .injector import HeaderInjector
from .mutator import RequestMutator
from .persistence import MemoryRuleStore, RuleStore, SQLiteRuleStore
from .requests_support import requests_request
from .resolver import HeaderResolver
from .rule_loader import load_config
from .rule_set import RuleSetManager
from .session import AsyncHeaderSession, HeaderSession
from .types import (
    CapturedResponse,
    ExtractionRule,
    HeaderMode,
    HeaderRule,
    HttpRequest,
    MatchKind,
    ResolvedHeader,
)

__all__ = [
    "AsyncHeaderSession",
    "CapturedResponse",
    "DynamicHeaderAction",
    "EngineEvent",
    "EventConfig",
    "EventKind",
    "EventPublisher",
    "ExtractionRule",
    "HeaderInjector",
    "HeaderInjectorConfig",
    "HeaderMode",
    "HeaderResolver",
    "HeaderRule",
    "HeaderSession",
    "HttpRequest",
    "InMemoryEventSink",
    "InvalidPatternError",
    "LoggingEventSink",
    "MacroRequest",
    "MatchKind",
    "MemoryRuleStore",
    "RequestMutator",
    "ResolvedHeader",
    "RuleSetManager",
    "RuleStore",
    "SQLiteRuleStore",
    "StaticHeaderHandler",
    "TokenExtractor",
    "load_config",
    "requests_request",
]
