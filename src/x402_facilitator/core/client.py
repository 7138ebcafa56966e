"""
HTTP client for the x402 facilitator ``/verify`` and ``/settle`` endpoints.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Union

import requests

from .errors import (
    DecodeError,
    RequestBuildError,
    SerializationError,
    TransportError,
    UnexpectedStatusError,
)
from .transport import Transport, TransportOption, build_transport
from .types import PaymentPayload, PaymentRequirements, SettleResponse, VerifyResponse

__all__ = [
    "DEFAULT_FACILITATOR_URL",
    "FacilitatorClient",
    "new_facilitator_client",
]

DEFAULT_FACILITATOR_URL = "https://x402.org/facilitator"

PayloadLike = Union[PaymentPayload, Mapping[str, Any]]
RequirementsLike = Union[PaymentRequirements, Mapping[str, Any]]


def _to_wire(value: Any, name: str) -> Dict[str, Any]:
    if value is None:
        raise SerializationError(f"failed to marshal request body: {name} is required")
    to_dict = getattr(value, "to_dict", None)
    try:
        if callable(to_dict):
            return to_dict()
        if isinstance(value, Mapping):
            return dict(value)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"failed to marshal request body: {exc}") from exc
    raise SerializationError(
        f"failed to marshal request body: unsupported {name} type "
        f"{type(value).__name__}"
    )


def _encode_body(payload: Any, requirements: Any) -> bytes:
    body = {
        "paymentPayload": _to_wire(payload, "paymentPayload"),
        "paymentRequirements": _to_wire(requirements, "paymentRequirements"),
    }
    try:
        return json.dumps(body, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"failed to marshal request body: {exc}") from exc


def _post_json(transport: Transport, url: str, operation: str, body: bytes) -> Any:
    session = transport.session
    headers = dict(transport.headers)
    headers["Content-Type"] = "application/json"

    try:
        prepared = session.prepare_request(
            requests.Request("POST", url, data=body, headers=headers)
        )
        # Unsupported schemes only surface when an adapter is looked up.
        session.get_adapter(prepared.url)
    except (requests.RequestException, ValueError) as exc:
        raise RequestBuildError(f"failed to create request: {exc}") from exc

    settings = session.merge_environment_settings(
        prepared.url, transport.proxies, None, transport.verify, None
    )
    try:
        response = session.send(prepared, timeout=transport.timeout, **settings)
    except requests.RequestException as exc:
        raise TransportError(f"failed to send {operation} request: {exc}") from exc

    with response:
        logging.debug(
            "Facilitator answered %s %s for %s",
            response.status_code,
            response.reason,
            url,
        )
        if response.status_code != 200:
            raise UnexpectedStatusError(
                operation, response.status_code, response.reason, response.text
            )
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"failed to decode {operation} response: {exc}") from exc


class FacilitatorClient:
    """
    Client for verifying and settling payments through a facilitator.

    The client holds no per-call state and may be shared between threads; each
    call builds its own request and releases its own response.
    """

    def __init__(self, url: Optional[str] = "", *options: TransportOption) -> None:
        self._url = (url or DEFAULT_FACILITATOR_URL).rstrip("/")
        self.transport = build_transport(*options)

    @property
    def url(self) -> str:
        return self._url

    def __enter__(self) -> "FacilitatorClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.transport.session.close()

    def verify(
        self, payload: PayloadLike, requirements: RequirementsLike
    ) -> VerifyResponse:
        """
        Ask the facilitator whether ``payload`` satisfies ``requirements``.

        Raises:
            SerializationError: the request body could not be encoded.
            RequestBuildError: the request could not be constructed.
            TransportError: the request could not be delivered.
            UnexpectedStatusError: the facilitator answered with a non-200 status.
            DecodeError: the response body is not a valid ``VerifyResponse``.
        """
        body = _encode_body(payload, requirements)
        verify_url = f"{self._url}/verify"
        logging.info("Submitting payment for verification to %s", verify_url)
        data = _post_json(self.transport, verify_url, "verify", body)
        return VerifyResponse.from_response(data)

    def settle(
        self, payload: PayloadLike, requirements: RequirementsLike
    ) -> SettleResponse:
        """
        Ask the facilitator to execute the payment.

        No deduplication or retry happens here; raises the same errors as
        :meth:`verify`.
        """
        body = _encode_body(payload, requirements)
        settle_url = f"{self._url}/settle"
        logging.info("Submitting payment for settlement to %s", settle_url)
        data = _post_json(self.transport, settle_url, "settle", body)
        return SettleResponse.from_response(data)


def new_facilitator_client(
    url: Optional[str] = "", *options: TransportOption
) -> FacilitatorClient:
    return FacilitatorClient(url, *options)
