"""HTTP clients that replay a macro and inject configured headers automatically."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Any, Iterable, Mapping, Optional

import httpx

from .config import HeaderInjectorConfig, MacroRequest
from .events import EventPublisher
from .handlers import DynamicHeaderAction, StaticHeaderHandler
from .rule_set import RuleSetManager
from .types import CapturedResponse, HttpRequest, RuleSetSource

LOGGER = logging.getLogger(__name__)


def _header_tuples(headers: httpx.Headers) -> tuple[tuple[str, str], ...]:
    # Raw items keep the original name casing.
    encoding = headers.encoding
    return tuple((key.decode(encoding), value.decode(encoding)) for key, value in headers.raw)


def request_from_httpx(request: httpx.Request) -> HttpRequest:
    """Snapshot an ``httpx.Request`` as an immutable :class:`HttpRequest`."""

    try:
        body = request.content
    except httpx.RequestNotRead:
        body = b""
    return HttpRequest(
        method=request.method,
        url=str(request.url),
        headers=_header_tuples(request.headers),
        body=body,
    )


def response_from_httpx(response: httpx.Response) -> CapturedResponse:
    return CapturedResponse(
        status_code=response.status_code,
        headers=_header_tuples(response.headers),
        body=response.content,
    )


def write_headers(target: httpx.Request, source: HttpRequest) -> None:
    """Replace the header list of ``target`` with the one carried by ``source``."""

    # Extracted tokens may carry non-ASCII text, so values go out as UTF-8.
    target.headers = httpx.Headers(list(source.headers), encoding="utf-8")


def _configured_macro(source: RuleSetSource) -> list[MacroRequest]:
    if isinstance(source, HeaderInjectorConfig):
        return list(source.macro)
    if isinstance(source, RuleSetManager):
        return list(source.config.macro)
    return []


class _InjectionMixin:
    _static: StaticHeaderHandler
    _dynamic: DynamicHeaderAction
    _macro: list[MacroRequest]

    def _setup(
        self,
        source: Optional[RuleSetSource],
        macro: Optional[Iterable[MacroRequest]],
        events: Optional[EventPublisher],
    ) -> None:
        config = source if source is not None else HeaderInjectorConfig()
        if macro is None:
            macro = _configured_macro(config)
        self._events = events or EventPublisher()
        self._static = StaticHeaderHandler(config, events=self._events)
        self._dynamic = DynamicHeaderAction(config, events=self._events)
        self._macro = list(macro)

    @property
    def macro(self) -> list[MacroRequest]:
        return list(self._macro)

    def _apply_static(self, built: httpx.Request) -> httpx.Request:
        write_headers(built, self._static.handle_request(request_from_httpx(built)))
        return built

    def _inject(self, built: httpx.Request, captured: list[Optional[CapturedResponse]]) -> httpx.Request:
        snapshot = request_from_httpx(built)
        if self._macro:
            snapshot = self._dynamic.perform(snapshot, captured)
        write_headers(built, self._static.handle_request(snapshot))
        return built

    @staticmethod
    def _macro_failed(step: MacroRequest, exc: Exception) -> None:
        LOGGER.warning("Macro request %s %s failed: %r", step.method, step.url, exc)


class HeaderSession(_InjectionMixin, AbstractContextManager):
    """Synchronous HTTP client that applies static and dynamic headers per request."""

    def __init__(
        self,
        source: Optional[RuleSetSource] = None,
        *,
        macro: Optional[Iterable[MacroRequest]] = None,
        events: Optional[EventPublisher] = None,
        client_options: Optional[dict[str, Any]] = None,
    ) -> None:
        self._setup(source, macro, events)
        self._client = httpx.Client(**dict(client_options or {}))

    def close(self) -> None:
        self._client.close()

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        **request_kwargs: Any,
    ) -> httpx.Response:
        """Replay the macro, inject headers, then send the request."""

        captured = self.replay_macro()
        built = self._client.build_request(method, url, headers=headers, **request_kwargs)
        return self._client.send(self._inject(built, captured))

    def replay_macro(self) -> list[Optional[CapturedResponse]]:
        captured: list[Optional[CapturedResponse]] = []
        for step in self._macro:
            built = self._client.build_request(
                step.method, step.url, headers=step.headers, content=step.content
            )
            try:
                response = self._client.send(self._apply_static(built))
            except httpx.HTTPError as exc:
                self._macro_failed(step, exc)
                captured.append(None)
                continue
            captured.append(response_from_httpx(response))
        return captured


class AsyncHeaderSession(_InjectionMixin):
    """Asynchronous HTTP client that applies static and dynamic headers per request."""

    def __init__(
        self,
        source: Optional[RuleSetSource] = None,
        *,
        macro: Optional[Iterable[MacroRequest]] = None,
        events: Optional[EventPublisher] = None,
        client_options: Optional[dict[str, Any]] = None,
    ) -> None:
        self._setup(source, macro, events)
        self._client = httpx.AsyncClient(**dict(client_options or {}))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHeaderSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        **request_kwargs: Any,
    ) -> httpx.Response:
        captured = await self.replay_macro()
        built = self._client.build_request(method, url, headers=headers, **request_kwargs)
        return await self._client.send(self._inject(built, captured))

    async def replay_macro(self) -> list[Optional[CapturedResponse]]:
        captured: list[Optional[CapturedResponse]] = []
        for step in self._macro:
            built = self._client.build_request(
                step.method, step.url, headers=step.headers, content=step.content
            )
            try:
                response = await self._client.send(self._apply_static(built))
            except httpx.HTTPError as exc:
                self._macro_failed(step, exc)
                captured.append(None)
                continue
            captured.append(response_from_httpx(response))
        return captured


__all__ = [
    "AsyncHeaderSession",
    "HeaderSession",
    "request_from_httpx",
    "response_from_httpx",
    "write_headers",
]
