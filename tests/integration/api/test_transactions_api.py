"""Integration tests for the transaction history endpoints"""

import pytest
from datetime import datetime
from httpx import AsyncClient

OWNER = {"X-Owner-Id": "merchant_1"}


async def _redeem(client: AsyncClient, link_token: str, card_number: str = "4242424242424242") -> dict:
    payload = {
        "payer_email": "payer@example.com",
        "payer_name": "Payer",
        "card_number": card_number,
        "expiry_month": 12,
        "expiry_year": datetime.utcnow().year + 2,
        "cvv": "123",
    }
    response = await client.post(f"/api/pay/{link_token}/redeem", json=payload)
    assert response.status_code == 200
    return response.json()["transaction"]


class TestTransactionsAPI:
    """GET /api/transactions and GET /api/transactions/{id}"""

    @pytest.mark.asyncio
    async def test_list_filters_by_status_and_link(self, client: AsyncClient, create_link):
        """Test GET /transactions narrows by status and link_token"""
        # Arrange
        await create_link(link_token="tok_tx_a")
        await create_link(link_token="tok_tx_b")
        await _redeem(client, "tok_tx_a")
        await _redeem(client, "tok_tx_a", card_number="4242424242424240")
        await _redeem(client, "tok_tx_b")

        # Act
        everything = await client.get("/api/transactions", headers=OWNER)
        failed = await client.get("/api/transactions", params={"status": "failed"}, headers=OWNER)
        link_b = await client.get("/api/transactions", params={"link_token": "tok_tx_b"}, headers=OWNER)

        # Assert
        assert everything.status_code == 200
        assert everything.json()["total"] == 3
        assert [t["card_last4"] for t in failed.json()["transactions"]] == ["4240"]
        assert [t["link_token"] for t in link_b.json()["transactions"]] == ["tok_tx_b"]

    @pytest.mark.asyncio
    async def test_list_hides_other_owners(self, client: AsyncClient, create_link):
        await create_link(link_token="tok_tx_foreign", owner_id="merchant_2")
        await _redeem(client, "tok_tx_foreign")

        response = await client.get("/api/transactions", headers=OWNER)

        assert response.json()["total"] == 0
        assert response.json()["transactions"] == []

    @pytest.mark.asyncio
    async def test_get_transaction(self, client: AsyncClient, create_link):
        # Arrange
        await create_link(link_token="tok_tx_get")
        created = await _redeem(client, "tok_tx_get")

        # Act
        own = await client.get(f"/api/transactions/{created['id']}", headers=OWNER)
        foreign = await client.get(f"/api/transactions/{created['id']}", headers={"X-Owner-Id": "merchant_2"})

        # Assert
        assert own.status_code == 200
        assert own.json()["status"] == "completed"
        assert own.json()["link_token"] == "tok_tx_get"
        assert foreign.status_code == 404
        assert foreign.json()["error"]["code"] == "TRANSACTION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_requires_owner(self, client: AsyncClient):
        response = await client.get("/api/transactions")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "OWNER_REQUIRED"
