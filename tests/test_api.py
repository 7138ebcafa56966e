from unittest.mock import Mock

import pytest
import requests

from x402_facilitator import (
    FacilitatorClient,
    FacilitatorConfig,
    PaymentRejectedError,
    SettleResponse,
    UnexpectedStatusError,
    VerifyResponse,
    create_facilitator_client,
    verify_then_settle,
)


class TestCreateFacilitatorClient:
    def test_from_config(self):
        config = FacilitatorConfig(facilitator_url="https://facilitator.example.com", timeout_seconds=3)

        client = create_facilitator_client(config=config)

        assert client.url == "https://facilitator.example.com"
        assert client.transport.timeout == 3

    def test_from_parameters(self):
        client = create_facilitator_client(env_file=None, base={}, timeout_seconds="7")

        assert client.url == "https://x402.org/facilitator"
        assert client.transport.timeout == 7.0

    def test_config_and_parameters_are_exclusive(self):
        with pytest.raises(ValueError):
            create_facilitator_client(config=FacilitatorConfig(), facilitator_url="https://other")

    def test_session_is_used(self):
        session = requests.Session()

        client = create_facilitator_client(config=FacilitatorConfig(), session=session)

        assert client.transport.session is session


class TestVerifyThenSettle:
    def test_settles_after_successful_verification(self, facilitator, payment_payload, payment_requirements):
        facilitator.respond("/verify", body={"isValid": True, "payer": "0xabc"})
        facilitator.respond("/settle", body={"success": True, "transaction": "0xdead"})
        client = FacilitatorClient(facilitator.url)

        result = verify_then_settle(client, payment_payload, payment_requirements)

        assert result == SettleResponse(success=True, transaction="0xdead")
        assert [r["path"] for r in facilitator.requests] == ["/verify", "/settle"]

    def test_rejected_payment_is_not_settled(self):
        client = Mock(spec=FacilitatorClient)
        client.verify.return_value = VerifyResponse(is_valid=False, invalid_reason="expired", payer="0xabc")

        with pytest.raises(PaymentRejectedError) as excinfo:
            verify_then_settle(client, {"x402Version": 1}, {"scheme": "exact"})

        assert excinfo.value.reason == "expired"
        assert excinfo.value.payer == "0xabc"
        client.settle.assert_not_called()

    def test_verification_errors_propagate(self, facilitator, payment_payload, payment_requirements):
        facilitator.respond("/verify", status=500, body={})
        client = FacilitatorClient(facilitator.url)

        with pytest.raises(UnexpectedStatusError):
            verify_then_settle(client, payment_payload, payment_requirements)

        assert [r["path"] for r in facilitator.requests] == ["/verify"]
