"""Integration helpers for using the injector with the `requests` library."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

import requests

from .config import MacroRequest
from .injector import HeaderInjector
from .types import CapturedResponse, HttpRequest

LOGGER = logging.getLogger(__name__)


def requests_request(
    injector: HeaderInjector,
    method: str,
    url: str,
    *,
    session: Optional[requests.Session] = None,
    macro: Optional[Iterable[MacroRequest]] = None,
    **kwargs,
):
    """Send a request with configured headers applied.

    Parameters mirror ``requests.request``. The macro (defaulting to the injector's
    configured one) is replayed through the same session first and its responses
    feed the dynamic headers.
    """

    close_session = False
    if session is None:
        session = requests.Session()
        close_session = True

    try:
        steps = list(injector.macro if macro is None else macro)
        captured = [_replay(injector, session, step) for step in steps]

        outgoing = HttpRequest(
            method=method.upper(),
            url=url,
            headers=_header_pairs(kwargs.pop("headers", None)),
        )
        mutated = injector.apply(outgoing, captured) if steps else injector.apply_static(outgoing)
        return session.request(method, url, headers=_wire_headers(mutated), **kwargs)
    finally:
        if close_session:
            session.close()


def _header_pairs(headers) -> tuple[tuple[str, str], ...]:
    if not headers:
        return ()
    if isinstance(headers, Mapping):
        return tuple(headers.items())
    return tuple((name, value) for name, value in headers)


def _wire_headers(request: HttpRequest) -> dict[str, str | bytes]:
    """Shape headers for ``requests``, which only accepts one value per name.

    Repeated names are folded into a comma-separated value. Non-ASCII values are
    pre-encoded as UTF-8 since http.client would otherwise encode them as latin-1.
    """

    names: dict[str, str] = {}
    values: dict[str, list[str]] = {}
    for name, value in request.headers:
        key = names.setdefault(name.lower(), name)
        values.setdefault(key, []).append(value)
    wire: dict[str, str | bytes] = {}
    for name, parts in values.items():
        joined = ", ".join(parts)
        wire[name] = joined if joined.isascii() else joined.encode("utf-8")
    return wire


def _replay(
    injector: HeaderInjector,
    session: requests.Session,
    step: MacroRequest,
) -> Optional[CapturedResponse]:
    prepared = injector.apply_static(
        HttpRequest(method=step.method, url=step.url, headers=tuple(step.headers.items()))
    )
    try:
        response = session.request(
            step.method,
            step.url,
            headers=_wire_headers(prepared),
            data=step.content,
        )
    except requests.RequestException as exc:
        LOGGER.warning("Macro request %s %s failed: %r", step.method, step.url, exc)
        return None
    return CapturedResponse(
        status_code=response.status_code,
        headers=tuple(response.headers.items()),
        body=response.content,
    )


__all__ = ["requests_request"]
