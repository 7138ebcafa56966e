"""
Configuration objects and helpers for the facilitator client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .client import DEFAULT_FACILITATOR_URL
from .environment import build_environment
from .transport import (
    TransportOption,
    with_headers,
    with_proxies,
    with_timeout,
    with_tls_verify,
)

__all__ = [
    "ConfigError",
    "FacilitatorConfig",
    "load_facilitator_config",
]

_PARAMETER_TO_ENV_KEY = {
    "facilitator_url": "X402_FACILITATOR_URL",
    "timeout_seconds": "X402_FACILITATOR_TIMEOUT_SECONDS",
    "verify_tls": "X402_FACILITATOR_VERIFY_TLS",
    "ca_bundle": "X402_FACILITATOR_CA_BUNDLE",
    "proxy": "X402_FACILITATOR_PROXY",
    "auth_token": "X402_FACILITATOR_AUTH_TOKEN",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown facilitator parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(
            f"X402_FACILITATOR_TIMEOUT_SECONDS must be a number, got '{raw}'"
        ) from exc
    if value <= 0:
        raise ConfigError("X402_FACILITATOR_TIMEOUT_SECONDS must be greater than zero")
    return value


def _parse_bool(raw: Optional[str], field_name: str, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{field_name} must be a boolean flag, got '{raw}'")


def _optional(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    value = raw.strip()
    return value or None


@dataclass(frozen=True)
class FacilitatorConfig:
    facilitator_url: str = DEFAULT_FACILITATOR_URL
    timeout_seconds: Optional[float] = None
    verify_tls: bool = True
    ca_bundle: Optional[str] = None
    proxy: Optional[str] = None
    auth_token: Optional[str] = None

    def transport_options(self) -> List[TransportOption]:
        """
        Translate the configuration into transport options, in application order.
        """
        options: List[TransportOption] = []
        if self.timeout_seconds is not None:
            options.append(with_timeout(self.timeout_seconds))
        if not self.verify_tls:
            options.append(with_tls_verify(False))
        elif self.ca_bundle:
            options.append(with_tls_verify(self.ca_bundle))
        if self.proxy:
            options.append(with_proxies({"http": self.proxy, "https": self.proxy}))
        if self.auth_token:
            options.append(with_headers({"Authorization": f"Bearer {self.auth_token}"}))
        return options

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "FacilitatorConfig":
        facilitator_url = (
            _optional(values.get("X402_FACILITATOR_URL")) or DEFAULT_FACILITATOR_URL
        ).rstrip("/")

        return cls(
            facilitator_url=facilitator_url,
            timeout_seconds=_parse_timeout(
                values.get("X402_FACILITATOR_TIMEOUT_SECONDS")
            ),
            verify_tls=_parse_bool(
                values.get("X402_FACILITATOR_VERIFY_TLS"),
                "X402_FACILITATOR_VERIFY_TLS",
                True,
            ),
            ca_bundle=_optional(values.get("X402_FACILITATOR_CA_BUNDLE")),
            proxy=_optional(values.get("X402_FACILITATOR_PROXY")),
            auth_token=_optional(values.get("X402_FACILITATOR_AUTH_TOKEN")),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        facilitator_url: Optional[str] = None,
        timeout_seconds: Optional[float | str] = None,
        verify_tls: Optional[bool | str] = None,
        ca_bundle: Optional[str] = None,
        proxy: Optional[str] = None,
        auth_token: Optional[str] = None,
    ) -> "FacilitatorConfig":
        parameter_overrides = _collect_parameter_overrides(
            {
                "facilitator_url": facilitator_url,
                "timeout_seconds": timeout_seconds,
                "verify_tls": verify_tls,
                "ca_bundle": ca_bundle,
                "proxy": proxy,
                "auth_token": auth_token,
            }
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_facilitator_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    facilitator_url: Optional[str] = None,
    timeout_seconds: Optional[float | str] = None,
    verify_tls: Optional[bool | str] = None,
    ca_bundle: Optional[str] = None,
    proxy: Optional[str] = None,
    auth_token: Optional[str] = None,
) -> FacilitatorConfig:
    """
    Convenience wrapper that mirrors :meth:`FacilitatorConfig.from_env`.

    Settings can come from environment variables, a ``.env`` file, direct
    keyword arguments, or any combination of the three.
    """
    return FacilitatorConfig.from_env(
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
