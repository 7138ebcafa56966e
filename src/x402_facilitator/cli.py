"""
Command-line interface for exercising a facilitator's verify/settle endpoints.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Iterable, Sequence, Tuple

from .api import create_facilitator_client, verify_then_settle
from .core.client import FacilitatorClient
from .core.config import ConfigError, load_facilitator_config
from .core.errors import FacilitatorError, PaymentRejectedError
from .core.types import SettleResponse


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _load_request(path: str) -> Dict[str, Any]:
    if path == "-":
        raw = sys.stdin.read()
    else:
        with open(path, encoding="utf-8") as handle:
            raw = handle.read()
    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError("request file must contain a JSON object")
    for key in ("paymentPayload", "paymentRequirements"):
        if not isinstance(body.get(key), dict):
            raise ValueError(f"request file is missing '{key}'")
    return body


def _print_json(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="x402-facilitator",
        description="Verify or settle an x402 payment through a facilitator",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing X402_FACILITATOR_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--facilitator-url",
        help="Facilitator base URL (default: https://x402.org/facilitator)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: no timeout)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("verify", "Submit the payment to /verify"),
        ("settle", "Submit the payment to /settle"),
        ("pay", "Verify the payment, then settle it"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument(
            "request_file",
            help="JSON file with paymentPayload and paymentRequirements ('-' for stdin)",
        )
        if name == "pay":
            command.add_argument(
                "--verify-only",
                action="store_true",
                help="Submit the payload to /verify but skip settlement",
            )
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_facilitator_config(
            env_file=args.env_file,
            overrides=overrides,
            facilitator_url=args.facilitator_url,
            timeout_seconds=args.timeout,
        )
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        body = _load_request(args.request_file)
    except (OSError, ValueError) as exc:
        logging.error("Invalid request file: %s", exc)
        return 1

    payload = body["paymentPayload"]
    requirements = body["paymentRequirements"]

    with create_facilitator_client(config=config) as client:
        if args.command == "verify" or (args.command == "pay" and args.verify_only):
            return _run_verify(client, payload, requirements)
        if args.command == "settle":
            return _run_settle(client, payload, requirements)

        try:
            settlement = verify_then_settle(client, payload, requirements)
        except PaymentRejectedError as exc:
            logging.error("%s", exc)
            return 1
        except FacilitatorError as exc:
            logging.error("Payment request failed: %s", exc)
            return 1
        _print_json(settlement.to_dict())
        return _handle_settlement(settlement)


def _run_verify(client: FacilitatorClient, payload, requirements) -> int:
    try:
        verification = client.verify(payload, requirements)
    except FacilitatorError as exc:
        logging.error("Verification request failed: %s", exc)
        return 1

    _print_json(verification.to_dict())
    if not verification.is_valid:
        logging.error("Payment rejected: %s", verification.invalid_reason)
        return 1
    logging.info("Facilitator accepted payment payload for payer %s", verification.payer)
    return 0


def _run_settle(client: FacilitatorClient, payload, requirements) -> int:
    try:
        settlement = client.settle(payload, requirements)
    except FacilitatorError as exc:
        logging.error("Settlement request failed: %s", exc)
        return 1

    _print_json(settlement.to_dict())
    return _handle_settlement(settlement)


def _handle_settlement(settlement: SettleResponse) -> int:
    if not settlement.success:
        logging.error("Settlement failed: %s", settlement.raw)
        return 1

    logging.info(
        "Payment settled on %s. Transaction hash: %s",
        settlement.network,
        settlement.transaction,
    )
    return 0


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
