"""
Payload IO Tests

Tests for orchestrator/artifacts/io.py:
1. Save, read back, document round-trips
2. Malformed and missing files raise PayloadIOError
3. OFFCHAIN_PIPELINE_PAYLOAD serves a cached file
"""
import json

import pytest

from orchestrator.artifacts.io import (
    PAYLOAD_ENV_VAR,
    PayloadIOError,
    clear_payload_cache,
    load_offchain_payload,
    payload_digest,
    read_payload,
    save_payload,
)
from orchestrator.pipeline import PayloadOptions, assemble_from_events

from fixtures.common import make_event


@pytest.fixture
def payload(runtime_config, addr_a, addr_b):
    return assemble_from_events(
        [make_event(addr_a, 1), make_event(addr_b, 3)],
        runtime_config,
        silent=True,
    )


class TestSaveAndRead:
    """Save/read round trips."""

    def test_round_trip(self, payload, tmp_path):
        path = save_payload(payload, tmp_path / "out" / "payload.json")

        assert path.exists()
        assert read_payload(path) == payload.to_dict()

    def test_indented_and_no_temp_left(self, payload, tmp_path):
        path = save_payload(payload, tmp_path / "payload.json")

        assert path.read_text().startswith("{\n  ")
        assert [p.name for p in tmp_path.iterdir()] == ["payload.json"]

    def test_plain_dict(self, tmp_path):
        path = save_payload({"a": 1}, tmp_path / "p.json")
        assert read_payload(path) == {"a": 1}

    def test_missing_file(self, tmp_path):
        with pytest.raises(PayloadIOError, match="not found"):
            read_payload(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(PayloadIOError, match="not valid JSON"):
            read_payload(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(PayloadIOError, match="JSON object"):
            read_payload(path)


class TestDigest:
    """Tests for payload_digest()."""

    def test_digest_matches_document(self, payload):
        assert payload_digest(payload) == payload_digest(payload.to_dict())
        assert len(payload_digest(payload)) == 64

    def test_digest_ignores_key_order(self):
        assert payload_digest({"a": 1, "b": 2}) == payload_digest({"b": 2, "a": 1})


class TestLoadOffchainPayload:
    """Tests for load_offchain_payload()."""

    def test_assembles_without_env(self, runtime_config, addr_a):
        document = load_offchain_payload(
            PayloadOptions(praise_events=[make_event(addr_a, 1)], silent=True),
            runtime_config,
        )
        assert document["batch"]["totalTokens"] == runtime_config.rewards.default_reward_pool

    def test_cached_file_preferred(self, tmp_path, monkeypatch, runtime_config):
        path = tmp_path / "cached.json"
        path.write_text(json.dumps({"batch": {"merkleRoot": "cached"}}))
        monkeypatch.setenv(PAYLOAD_ENV_VAR, str(path))

        first = load_offchain_payload(config=runtime_config)
        path.write_text(json.dumps({"batch": {"merkleRoot": "changed"}}))
        second = load_offchain_payload(config=runtime_config)

        assert first["batch"]["merkleRoot"] == "cached"
        assert second is first

        clear_payload_cache()
        assert load_offchain_payload(config=runtime_config)["batch"]["merkleRoot"] == "changed"

    def test_missing_cached_file_assembles(self, tmp_path, monkeypatch, runtime_config):
        monkeypatch.setenv(PAYLOAD_ENV_VAR, str(tmp_path / "absent.json"))
        document = load_offchain_payload(config=runtime_config)
        assert document["batch"]["claims"] == []
