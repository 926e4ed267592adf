"""Integration tests for the public payer-facing endpoints"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from httpx import AsyncClient


def _payload(**overrides) -> dict:
    payload = {
        "payerEmail": "payer@example.com",
        "payerName": "Ada Lovelace",
        "cardNumber": "4242 4242 4242 4242",
        "expiryMonth": 12,
        "expiryYear": datetime.utcnow().year + 2,
        "cvv": "123",
    }
    payload.update(overrides)
    return payload


class TestPublicLinkAPI:
    """GET /api/pay/{token}"""

    @pytest.mark.asyncio
    async def test_view_active_link(self, client: AsyncClient, create_link):
        await create_link(link_token="tok_public_view", amount=Decimal("12.50"), max_uses=4)

        response = await client.get("/api/pay/tok_public_view")

        assert response.status_code == 200
        data = response.json()
        assert data["link_token"] == "tok_public_view"
        assert Decimal(data["amount"]) == Decimal("12.50")
        assert data["max_uses"] == 4
        assert data["remaining_uses"] == 4
        assert "owner_id" not in data

    @pytest.mark.asyncio
    async def test_view_unknown_link(self, client: AsyncClient):
        response = await client.get("/api/pay/does_not_exist")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "LINK_NOT_FOUND", "message": "Payment link not found"}
        }

    @pytest.mark.asyncio
    async def test_view_expired_link(self, client: AsyncClient, create_link):
        await create_link(link_token="tok_public_gone", expires_at=datetime.utcnow() - timedelta(seconds=1))

        response = await client.get("/api/pay/tok_public_gone")

        assert response.status_code == 410
        assert response.json()["error"]["code"] == "LINK_EXPIRED"


class TestRedeemAPI:
    """POST /api/pay/{token}/redeem"""

    @pytest.mark.asyncio
    async def test_redeem_approved(self, client: AsyncClient, create_link):
        """Test an approved card returns 200 with a completed transaction"""
        # Arrange
        await create_link(link_token="tok_public_pay", max_uses=1)

        # Act
        response = await client.post("/api/pay/tok_public_pay/redeem", json=_payload())

        # Assert
        assert response.status_code == 200
        data = response.json()
        transaction = data["transaction"]
        assert transaction["status"] == "completed"
        assert transaction["link_token"] == "tok_public_pay"
        assert Decimal(transaction["amount"]) == Decimal("25.00")
        assert transaction["currency"] == "USD"
        assert transaction["card_brand"] == "Visa"
        assert transaction["card_last4"] == "4242"
        assert transaction["processed_at"] is not None
        assert "card_number" not in transaction
        assert "cvv" not in transaction
        assert data["gateway_response"]["response_code"] == "APPROVED"
        assert data["gateway_response"]["failure_reason"] is None

    @pytest.mark.asyncio
    async def test_redeem_declined_still_returns_200(self, client: AsyncClient, create_link):
        """Test a declined card returns 200 with a failed transaction"""
        await create_link(link_token="tok_public_decline")

        response = await client.post(
            "/api/pay/tok_public_decline/redeem", json=_payload(cardNumber="4242424242424240")
        )

        assert response.status_code == 200
        data = response.json()
        assert data["transaction"]["status"] == "failed"
        assert data["gateway_response"]["response_code"] == "DECLINED"
        assert data["gateway_response"]["failure_reason"] == "CARD_DECLINED"

    @pytest.mark.asyncio
    async def test_redeem_invalid_cvv(self, client: AsyncClient, create_link):
        await create_link(link_token="tok_public_cvv")

        response = await client.post("/api/pay/tok_public_cvv/redeem", json=_payload(cvv="120"))

        assert response.status_code == 200
        assert response.json()["gateway_response"]["failure_reason"] == "INVALID_CVV"

    @pytest.mark.asyncio
    async def test_redeem_ignores_client_amount(self, client: AsyncClient, create_link):
        await create_link(link_token="tok_public_amount", amount=Decimal("99.99"), currency="EUR")

        response = await client.post(
            "/api/pay/tok_public_amount/redeem",
            json=_payload(amount="0.01", currency="USD"),
        )

        assert response.status_code == 200
        transaction = response.json()["transaction"]
        assert Decimal(transaction["amount"]) == Decimal("99.99")
        assert transaction["currency"] == "EUR"

    @pytest.mark.asyncio
    async def test_redeem_validation_reports_all_fields(self, client: AsyncClient, create_link):
        """Test invalid payer and card fields return 400 and record nothing"""
        # Arrange
        await create_link(link_token="tok_public_invalid")

        # Act
        response = await client.post(
            "/api/pay/tok_public_invalid/redeem",
            json={"payerEmail": "not-an-email", "cardNumber": "1234", "expiryMonth": 13, "cvv": "1"},
        )
        owner_view = await client.get(
            "/api/payment-links/tok_public_invalid", headers={"X-Owner-Id": "merchant_1"}
        )

        # Assert
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        fields = {detail["field"] for detail in error["details"]}
        assert fields == {"card_number", "cvv", "expiry_month", "expiry_year", "payer_email", "payer_name"}
        assert owner_view.json()["transaction_count"] == 0

    @pytest.mark.asyncio
    async def test_redeem_exhausted_link(self, client: AsyncClient, create_link):
        await create_link(link_token="tok_public_full", max_uses=1)

        first = await client.post("/api/pay/tok_public_full/redeem", json=_payload())
        second = await client.post("/api/pay/tok_public_full/redeem", json=_payload())

        assert first.json()["transaction"]["status"] == "completed"
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "LINK_EXHAUSTED"

    @pytest.mark.asyncio
    async def test_redeem_inactive_link(self, client: AsyncClient, create_link):
        await create_link(link_token="tok_public_off", is_active=False)

        response = await client.post("/api/pay/tok_public_off/redeem", json=_payload())

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "LINK_INACTIVE"

    @pytest.mark.asyncio
    async def test_redeem_unknown_link(self, client: AsyncClient):
        response = await client.post("/api/pay/missing/redeem", json=_payload())

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LINK_NOT_FOUND"


class TestHealthAPI:

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
