"""
API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. POST /events + POST /batches publish a batch
3. GET /proofs/{address} returns a proof that POST /verify accepts
4. Missing batch / unknown claim map to 404, bad input to 400
"""

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.deps import get_praise_service, reset_praise_service
from core.crypto.hashing import to_hex
from core.merkle.leaf import encode_leaf
from core.merkle.merkle_tree import merkle_parent
from core.rewards.service import PraiseService

from fixtures.common import make_address, make_rewards_config


# Create test client
client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_service():
    """Give every test its own in-memory service."""
    service = PraiseService(make_rewards_config(default_reward_pool=100))
    reset_praise_service(service)
    yield service
    reset_praise_service(None)


def publish(addr_a, addr_b):
    response = client.post("/events", json={"events": [
        {"address": addr_a, "amount": 30},
        {"address": addr_b, "amount": 70},
    ]})
    assert response.status_code == 200
    response = client.post("/batches", json={})
    assert response.status_code == 200
    return response.json()["batch"]


class TestHealth:
    """Tests for GET /health."""

    def test_health(self):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "service": "commons-rewards-api", "version": "v1"}

    def test_root(self):
        assert client.get("/").json()["ok"] is True


class TestEvents:
    """Tests for POST /events."""

    def test_collect(self, addr_a, fresh_service):
        response = client.post("/events", json={"events": [
            {"address": addr_a, "amount": 2, "reason": "review"},
            "thanks",
        ]})

        assert response.status_code == 200
        data = response.json()
        assert data["claimants"] == 2
        assert data["total_score"] == 3
        assert data["collected"][0]["metadata"] == {"reason": "review"}
        assert fresh_service.scoreboard.get(addr_a).score == 2

    def test_bad_address_rejects_whole_request(self, addr_a, fresh_service):
        response = client.post("/events", json={"events": [
            {"address": addr_a, "amount": 1},
            {"address": "0OIl", "amount": 1},
        ]})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ADDRESS"
        assert len(fresh_service.scoreboard) == 0

    def test_negative_amount(self, addr_a):
        response = client.post("/events", json={"events": [{"address": addr_a, "amount": -1}]})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "AMOUNT_OUT_OF_RANGE"

    def test_malformed_amount(self, addr_a):
        response = client.post("/events", json={"events": [{"address": addr_a, "amount": "lots"}]})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"


class TestBatches:
    """Tests for POST /batches and GET /batches/current."""

    def test_thirty_seventy(self, addr_a, addr_b):
        batch = publish(addr_a, addr_b)

        expected_root = merkle_parent(encode_leaf(addr_a, 30), encode_leaf(addr_b, 70))
        assert batch["merkleRoot"] == to_hex(expected_root)
        assert batch["totalTokens"] == 100
        assert batch["claims"] == [
            {"address": addr_a, "amount": 30},
            {"address": addr_b, "amount": 70},
        ]

    def test_current_batch(self, addr_a, addr_b):
        batch = publish(addr_a, addr_b)

        response = client.get("/batches/current")
        assert response.status_code == 200
        assert response.json()["batch"] == batch

    def test_current_batch_missing(self):
        response = client.get("/batches/current")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "BATCH_MISSING"

    def test_empty_batch(self):
        response = client.post("/batches")

        assert response.status_code == 200
        assert response.json()["batch"]["merkleRoot"] == "00" * 32

    def test_reward_pool_override(self, addr_a):
        client.post("/events", json={"events": [{"address": addr_a, "amount": 1}]})
        response = client.post("/batches", json={"reward_pool": 555})

        assert response.json()["batch"]["totalTokens"] == 555

    def test_insufficient_pool(self):
        client.post("/events", json={"events": [
            {"address": make_address(i), "amount": s} for i, s in enumerate([1, 1, 50, 48])
        ]})
        response = client.post("/batches", json={"reward_pool": 4})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INSUFFICIENT_REWARD_POOL"


class TestProofs:
    """Tests for GET /proofs/{address} and POST /verify."""

    def test_proof_and_verify(self, addr_a, addr_b):
        batch = publish(addr_a, addr_b)

        response = client.get(f"/proofs/{addr_a}")
        assert response.status_code == 200
        proof = response.json()
        assert proof["amount"] == 30
        assert proof["proof"] == [to_hex(encode_leaf(addr_b, 70))]
        assert proof["merkle_root"] == batch["merkleRoot"]

        response = client.post("/verify", json={
            "address": addr_a,
            "amount": 30,
            "proof": proof["proof"],
        })
        assert response.status_code == 200
        assert response.json()["valid"] is True

    def test_verify_wrong_amount(self, addr_a, addr_b):
        batch = publish(addr_a, addr_b)
        proof = client.get(f"/proofs/{addr_a}").json()

        response = client.post("/verify", json={
            "address": addr_a,
            "amount": 31,
            "proof": proof["proof"],
            "merkle_root": batch["merkleRoot"],
        })
        assert response.json()["valid"] is False

    def test_verify_malformed_proof(self, addr_a, addr_b):
        publish(addr_a, addr_b)

        response = client.post("/verify", json={"address": addr_a, "amount": 30, "proof": ["abcd"]})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_verify_without_batch(self, addr_a):
        response = client.post("/verify", json={"address": addr_a, "amount": 1, "proof": []})
        assert response.status_code == 404

    def test_proof_without_batch(self, addr_a):
        response = client.get(f"/proofs/{addr_a}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "BATCH_MISSING"

    def test_proof_unknown_address(self, addr_a, addr_b):
        publish(addr_a, addr_b)
        response = client.get(f"/proofs/{make_address('nobody')}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CLAIM_NOT_FOUND"

    def test_proof_invalid_address(self, addr_a, addr_b):
        publish(addr_a, addr_b)
        response = client.get("/proofs/0OIl")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ADDRESS"


class TestServiceSingleton:
    """Tests for the shared service dependency."""

    def test_created_once(self):
        reset_praise_service(None)
        first = get_praise_service()

        assert get_praise_service() is first
        assert first.config.default_reward_pool == 1000


class TestUnexpectedErrors:
    """Unhandled exceptions become a 500 ErrorResponse."""

    def test_internal_error_body(self):
        def broken_service():
            raise RuntimeError("boom")

        app.dependency_overrides[get_praise_service] = broken_service
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/batches/current")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        body = response.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert body["error"]["details"] == {"type": "RuntimeError"}
