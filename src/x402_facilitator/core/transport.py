"""
HTTP transport configuration for :class:`FacilitatorClient`.

A transport is assembled by applying an ordered list of option functions to a
default :class:`Transport`. Each option receives the transport and returns it,
so options compose and later ones override earlier ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, Union

import requests

__all__ = [
    "Transport",
    "TransportOption",
    "build_transport",
    "with_headers",
    "with_proxies",
    "with_session",
    "with_timeout",
    "with_tls_verify",
]


@dataclass
class Transport:
    """
    Mutable bundle of everything needed to send a request.

    ``timeout`` of ``None`` means calls may block indefinitely. ``session`` is
    left unset until :func:`build_transport` has applied every option.
    """

    session: Optional[requests.Session] = None
    timeout: Optional[float] = None
    headers: Dict[str, str] = field(default_factory=dict)
    proxies: Dict[str, str] = field(default_factory=dict)
    verify: Union[bool, str] = True


TransportOption = Callable[[Transport], Transport]


def with_timeout(seconds: Optional[float]) -> TransportOption:
    """Bound every request (connect + read) to ``seconds``."""
    if seconds is not None and seconds <= 0:
        raise ValueError("timeout must be greater than zero")

    def apply(transport: Transport) -> Transport:
        transport.timeout = seconds
        return transport

    return apply


def with_session(session: requests.Session) -> TransportOption:
    """Use a caller-provided :class:`requests.Session` (e.g. with mounted adapters)."""

    def apply(transport: Transport) -> Transport:
        transport.session = session
        return transport

    return apply


def with_headers(headers: Mapping[str, str]) -> TransportOption:
    """Send extra headers (e.g. ``Authorization``) with every request."""

    def apply(transport: Transport) -> Transport:
        transport.headers.update(headers)
        return transport

    return apply


def with_proxies(proxies: Mapping[str, str]) -> TransportOption:
    def apply(transport: Transport) -> Transport:
        transport.proxies.update(proxies)
        return transport

    return apply


def with_tls_verify(verify: Union[bool, str]) -> TransportOption:
    """Toggle TLS certificate verification or point it at a CA bundle path."""

    def apply(transport: Transport) -> Transport:
        transport.verify = verify
        return transport

    return apply


def build_transport(*options: TransportOption) -> Transport:
    transport = Transport()
    for option in options:
        transport = option(transport)
    if transport.session is None:
        transport.session = requests.Session()
    return transport
