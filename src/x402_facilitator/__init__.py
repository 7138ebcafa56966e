"""
Public facade for the x402 facilitator client package.

Re-exports the pieces integrators need so they can
``from x402_facilitator import ...`` without navigating the package.
"""

from .api import create_facilitator_client, verify_then_settle
from .core import (
    DEFAULT_FACILITATOR_URL,
    ConfigError,
    DecodeError,
    FacilitatorClient,
    FacilitatorConfig,
    FacilitatorEnvironment,
    FacilitatorError,
    PaymentPayload,
    PaymentRejectedError,
    PaymentRequirements,
    RequestBuildError,
    SerializationError,
    SettleResponse,
    Transport,
    TransportError,
    TransportOption,
    UnexpectedStatusError,
    VerifyResponse,
    build_environment,
    build_transport,
    load_env_file,
    load_facilitator_config,
    new_facilitator_client,
    with_headers,
    with_proxies,
    with_session,
    with_timeout,
    with_tls_verify,
)

__all__ = (
    "ConfigError",
    "DEFAULT_FACILITATOR_URL",
    "DecodeError",
    "FacilitatorClient",
    "FacilitatorConfig",
    "FacilitatorEnvironment",
    "FacilitatorError",
    "PaymentPayload",
    "PaymentRejectedError",
    "PaymentRequirements",
    "RequestBuildError",
    "SerializationError",
    "SettleResponse",
    "Transport",
    "TransportError",
    "TransportOption",
    "UnexpectedStatusError",
    "VerifyResponse",
    "build_environment",
    "build_transport",
    "create_facilitator_client",
    "load_env_file",
    "load_facilitator_config",
    "new_facilitator_client",
    "verify_then_settle",
    "with_headers",
    "with_proxies",
    "with_session",
    "with_timeout",
    "with_tls_verify",
)
