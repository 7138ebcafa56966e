"""
Public, high-level helpers for interacting with an x402 facilitator.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import requests

from .core.client import FacilitatorClient, PayloadLike, RequirementsLike
from .core.config import FacilitatorConfig, load_facilitator_config
from .core.errors import PaymentRejectedError
from .core.transport import with_session
from .core.types import SettleResponse

__all__ = [
    "create_facilitator_client",
    "verify_then_settle",
]


def create_facilitator_client(
    *,
    config: Optional[FacilitatorConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    facilitator_url: Optional[str] = None,
    timeout_seconds: Optional[float | str] = None,
    verify_tls: Optional[bool | str] = None,
    ca_bundle: Optional[str] = None,
    proxy: Optional[str] = None,
    auth_token: Optional[str] = None,
) -> FacilitatorClient:
    """
    Construct a :class:`FacilitatorClient`.

    Callers can either supply a ready-made :class:`FacilitatorConfig` or let the
    helper assemble one from environment data.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            facilitator_url,
            timeout_seconds,
            verify_tls,
            ca_bundle,
            proxy,
            auth_token,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built FacilitatorConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_facilitator_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            facilitator_url=facilitator_url,
            timeout_seconds=timeout_seconds,
            verify_tls=verify_tls,
            ca_bundle=ca_bundle,
            proxy=proxy,
            auth_token=auth_token,
        )

    options = cfg.transport_options()
    if session is not None:
        options.insert(0, with_session(session))
    return FacilitatorClient(cfg.facilitator_url, *options)


def verify_then_settle(
    client: FacilitatorClient,
    payload: PayloadLike,
    requirements: RequirementsLike,
) -> SettleResponse:
    """
    Run the two-phase handshake: verify, and settle only if the payload is valid.

    Raises :class:`PaymentRejectedError` when the facilitator reports the
    payload as invalid. Settlement failures reported in the body
    (``success = false``) are returned, not raised.
    """
    verification = client.verify(payload, requirements)
    if not verification.is_valid:
        raise PaymentRejectedError(verification.invalid_reason, verification.payer)

    logging.info("Facilitator accepted payment payload for payer %s", verification.payer)
    return client.settle(payload, requirements)
