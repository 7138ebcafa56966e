"""
Minimal script that uses the public API to verify and settle an x402 payment.

The payment payload is expected to be signed already (e.g. by a wallet); this
script only forwards it to the facilitator.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from x402_facilitator import (
    ConfigError,
    FacilitatorError,
    PaymentPayload,
    PaymentRejectedError,
    PaymentRequirements,
    create_facilitator_client,
    load_facilitator_config,
    verify_then_settle,
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verify and settle an x402 payment")
    parser.add_argument(
        "request_file",
        help="JSON file holding paymentPayload and paymentRequirements",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing X402_FACILITATOR_* settings",
    )
    parser.add_argument(
        "--facilitator-url",
        help="Override the facilitator base URL (default: https://x402.org/facilitator)",
    )
    parser.add_argument(
        "--timeout-seconds",
        type=float,
        help="Request timeout in seconds (default: X402_FACILITATOR_TIMEOUT_SECONDS or none)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_facilitator_config(
            env_file=args.env_file,
            facilitator_url=args.facilitator_url,
            timeout_seconds=args.timeout_seconds,
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    with open(args.request_file, encoding="utf-8") as handle:
        body = json.load(handle)
    payload = PaymentPayload.from_dict(body["paymentPayload"])
    requirements = PaymentRequirements.from_dict(body["paymentRequirements"])

    logging.info("Forwarding payment to %s", config.facilitator_url)
    with create_facilitator_client(config=config) as client:
        try:
            settlement = verify_then_settle(client, payload, requirements)
        except PaymentRejectedError as exc:
            logging.error("%s", exc)
            return 1
        except FacilitatorError as exc:
            logging.error("Facilitator request failed: %s", exc)
            return 1

    if settlement.success:
        logging.info(
            "Payment settled on %s. Transaction hash: %s",
            settlement.network,
            settlement.transaction,
        )
        return 0

    logging.error("Settlement failed: %s", settlement.raw)
    return 1


if __name__ == "__main__":
    sys.exit(main())
