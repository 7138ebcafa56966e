"""
Data contracts exchanged with the x402 facilitator.

The client treats :class:`PaymentPayload` and :class:`PaymentRequirements` as
opaque records: it serializes them and never looks inside. The response types
are decoded defensively from whatever the facilitator returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .errors import DecodeError

__all__ = [
    "PaymentPayload",
    "PaymentRequirements",
    "SettleResponse",
    "VerifyResponse",
]


@dataclass(frozen=True)
class PaymentPayload:
    """Signed payment instruction produced by the payer's wallet."""

    x402_version: int
    scheme: str
    network: str
    payload: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x402Version": self.x402_version,
            "scheme": self.scheme,
            "network": self.network,
            "payload": dict(self.payload),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PaymentPayload":
        return cls(
            x402_version=int(data["x402Version"]),
            scheme=data["scheme"],
            network=data["network"],
            payload=dict(data.get("payload") or {}),
        )


@dataclass(frozen=True)
class PaymentRequirements:
    """What the resource server demands in exchange for the resource."""

    scheme: str
    network: str
    max_amount_required: str
    resource: str
    description: str
    mime_type: str
    pay_to: str
    max_timeout_seconds: int
    asset: str
    output_schema: Optional[Mapping[str, Any]] = None
    extra: Optional[Mapping[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheme": self.scheme,
            "network": self.network,
            "maxAmountRequired": self.max_amount_required,
            "resource": self.resource,
            "description": self.description,
            "mimeType": self.mime_type,
            "outputSchema": self.output_schema,
            "payTo": self.pay_to,
            "maxTimeoutSeconds": self.max_timeout_seconds,
            "asset": self.asset,
            "extra": self.extra,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PaymentRequirements":
        return cls(
            scheme=data["scheme"],
            network=data["network"],
            max_amount_required=str(data["maxAmountRequired"]),
            resource=data["resource"],
            description=data.get("description", ""),
            mime_type=data.get("mimeType", ""),
            pay_to=data["payTo"],
            max_timeout_seconds=int(data["maxTimeoutSeconds"]),
            asset=data["asset"],
            output_schema=data.get("outputSchema"),
            extra=data.get("extra"),
        )


def _require_object(payload: Any, type_name: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise DecodeError(
            f"{type_name} must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def _bool_field(payload: Mapping[str, Any], key: str) -> bool:
    value = payload.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"'{key}' must be a boolean, got {value!r}")
    return value


def _str_field(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise DecodeError(f"'{key}' must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class VerifyResponse:
    is_valid: bool
    invalid_reason: Optional[str] = None
    payer: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_response(cls, payload: Any) -> "VerifyResponse":
        body = _require_object(payload, "VerifyResponse")
        return cls(
            is_valid=_bool_field(body, "isValid"),
            invalid_reason=_str_field(body, "invalidReason"),
            payer=_str_field(body, "payer"),
            raw=dict(body),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"isValid": self.is_valid}
        if self.invalid_reason is not None:
            result["invalidReason"] = self.invalid_reason
        if self.payer is not None:
            result["payer"] = self.payer
        return result


@dataclass(frozen=True)
class SettleResponse:
    success: bool
    error_reason: Optional[str] = None
    transaction: Optional[str] = None
    network: Optional[str] = None
    payer: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_response(cls, payload: Any) -> "SettleResponse":
        body = _require_object(payload, "SettleResponse")
        return cls(
            success=_bool_field(body, "success"),
            error_reason=_str_field(body, "errorReason"),
            transaction=_str_field(body, "transaction"),
            network=_str_field(body, "network"),
            payer=_str_field(body, "payer"),
            raw=dict(body),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        for key, value in (
            ("errorReason", self.error_reason),
            ("transaction", self.transaction),
            ("network", self.network),
            ("payer", self.payer),
        ):
            if value is not None:
                result[key] = value
        return result
