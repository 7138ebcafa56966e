"""
Exception hierarchy raised by the facilitator client.

Every error is raised with the underlying cause chained (``raise ... from``)
so ``exc.__cause__`` carries the original exception.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "DecodeError",
    "FacilitatorError",
    "PaymentRejectedError",
    "RequestBuildError",
    "SerializationError",
    "TransportError",
    "UnexpectedStatusError",
]


class FacilitatorError(Exception):
    """Base class for failures talking to the facilitator."""


class SerializationError(FacilitatorError):
    """Raised when the request body cannot be encoded as JSON."""


class RequestBuildError(FacilitatorError):
    """Raised when the HTTP request cannot be constructed (e.g. malformed URL)."""


class TransportError(FacilitatorError):
    """Raised when the request could not be delivered or answered."""


class UnexpectedStatusError(FacilitatorError):
    """Raised when the facilitator answers with anything other than 200."""

    def __init__(
        self,
        operation: str,
        status_code: int,
        reason: Optional[str],
        body: str = "",
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        self.reason = reason or ""
        self.body = body
        super().__init__(f"failed to {operation} payment: {self.status}")

    @property
    def status(self) -> str:
        return f"{self.status_code} {self.reason}".strip()


class DecodeError(FacilitatorError):
    """Raised when a 200 response body is not the expected JSON shape."""


class PaymentRejectedError(FacilitatorError):
    """Raised by :func:`verify_then_settle` when verification fails."""

    def __init__(self, reason: Optional[str], payer: Optional[str] = None) -> None:
        self.reason = reason
        self.payer = payer
        super().__init__(f"Payment rejected: {reason or 'unknown reason'}")
