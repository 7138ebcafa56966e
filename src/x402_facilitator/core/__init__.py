"""
Core primitives that implement the facilitator verify/settle handshake.
"""

from .client import DEFAULT_FACILITATOR_URL, FacilitatorClient, new_facilitator_client
from .config import ConfigError, FacilitatorConfig, load_facilitator_config
from .environment import FacilitatorEnvironment, build_environment, load_env_file
from .errors import (
    DecodeError,
    FacilitatorError,
    PaymentRejectedError,
    RequestBuildError,
    SerializationError,
    TransportError,
    UnexpectedStatusError,
)
from .transport import (
    Transport,
    TransportOption,
    build_transport,
    with_headers,
    with_proxies,
    with_session,
    with_timeout,
    with_tls_verify,
)
from .types import PaymentPayload, PaymentRequirements, SettleResponse, VerifyResponse

__all__ = [
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
    "load_env_file",
    "load_facilitator_config",
    "new_facilitator_client",
    "with_headers",
    "with_proxies",
    "with_session",
    "with_timeout",
    "with_tls_verify",
]
