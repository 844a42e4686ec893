"""
CLI Tests

Tests for commons_cli:
1. batch emits the epoch document and writes it with --out
2. verify accepts both document shapes; exit 0 valid, 2 tampered
3. config --init writes a loadable template
"""
import json

import pytest

from commons_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)
from orchestrator.artifacts.io import save_payload
from orchestrator.pipeline import assemble_from_events

from fixtures.common import make_address, make_event, make_runtime_config


@pytest.fixture
def events_file(tmp_path, addr_a, addr_b):
    path = tmp_path / "events.json"
    path.write_text(json.dumps([
        make_event(addr_a, 30),
        make_event(addr_b, 70),
        "thanks",
    ]))
    return path


def run_batch(capsys, *extra):
    code = main(["batch", *extra, "--json"])
    out = capsys.readouterr().out
    return code, (json.loads(out) if code == EXIT_SUCCESS else None)


class TestParser:
    """Argument parsing."""

    def test_output_alias(self):
        args = create_parser().parse_args(["batch", "--output", "x.json"])
        assert args.out == "x.json"

    def test_no_command(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR


class TestBatchCommand:
    """Tests for `commons batch`."""

    def test_emits_epoch_document(self, capsys, events_file, addr_a, addr_b):
        code, document = run_batch(
            capsys, "--events-file", str(events_file), "--reward-pool", "100", "--epoch", "3",
        )

        assert code == EXIT_SUCCESS
        assert document["epochId"] == 3
        assert document["totalTokens"] == 100
        assert len(document["merkleRoot"]) == 64
        addresses = [entry["address"] for entry in document["proofs"]]
        assert addresses[:2] == [addr_a, addr_b]
        for entry in document["proofs"]:
            assert all(len(node) == 32 for node in entry["proof"])
            assert all(0 <= b <= 255 for node in entry["proof"] for b in node)
        assert document["issues"]
        assert "simulation" in document

    def test_default_epoch_and_pool(self, capsys, events_file):
        code, document = run_batch(capsys, "--events-file", str(events_file))

        assert code == EXIT_SUCCESS
        assert document["epochId"] == 1
        assert document["totalTokens"] == 1000

    def test_no_events(self, capsys):
        code, document = run_batch(capsys)

        assert code == EXIT_SUCCESS
        assert document["proofs"] == []
        assert document["merkleRoot"] == "00" * 32

    def test_writes_out_file(self, capsys, events_file, tmp_path):
        out = tmp_path / "epoch.json"
        code = main(["batch", "--events-file", str(events_file), "--out", str(out)])

        assert code == EXIT_SUCCESS
        assert json.loads(out.read_text())["epochId"] == 1
        assert "merkle_root:" in capsys.readouterr().out

    def test_missing_events_file(self, capsys, tmp_path):
        code = main(["batch", "--events-file", str(tmp_path / "none.json")])

        assert code == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err

    def test_bad_address(self, capsys, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"address": "0OIl", "amount": 1}]))

        assert main(["batch", "--events-file", str(path)]) == EXIT_RUNTIME_ERROR

    def test_insufficient_pool(self, capsys, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps([make_event(make_address(i), s) for i, s in enumerate([1, 1, 50, 48])]))

        code = main(["batch", "--events-file", str(path), "--reward-pool", "4"])
        assert code == EXIT_RUNTIME_ERROR
        assert "Reward pool 4" in capsys.readouterr().err

    def test_config_file_pool(self, capsys, events_file, tmp_path):
        config_path = tmp_path / "custom.json"
        config_path.write_text(json.dumps({"rewards": {"default_reward_pool": 40}}))

        code = main(["--config", str(config_path), "batch", "--events-file", str(events_file), "--json"])
        document = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert document["totalTokens"] == 40


class TestVerifyCommand:
    """Tests for `commons verify`."""

    def test_epoch_document_valid(self, capsys, events_file, tmp_path):
        out = tmp_path / "epoch.json"
        assert main(["batch", "--events-file", str(events_file), "--out", str(out)]) == EXIT_SUCCESS
        capsys.readouterr()

        assert main(["verify", str(out)]) == EXIT_SUCCESS
        assert "claims: 3/3 valid" in capsys.readouterr().out

    def test_payload_document_valid(self, capsys, tmp_path, addr_a, addr_b):
        payload = assemble_from_events(
            [make_event(addr_a, 1), make_event(addr_b, 2)], make_runtime_config(), silent=True,
        )
        path = save_payload(payload, tmp_path / "payload.json")

        assert main(["verify", str(path), "--json"]) == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["claims_valid"] == 2

    def test_single_address(self, capsys, events_file, tmp_path, addr_b):
        out = tmp_path / "epoch.json"
        main(["batch", "--events-file", str(events_file), "--out", str(out)])
        capsys.readouterr()

        assert main(["verify", str(out), "--address", addr_b, "--json"]) == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["claims_checked"] == 1

    def test_unknown_address_fails(self, capsys, events_file, tmp_path):
        out = tmp_path / "epoch.json"
        main(["batch", "--events-file", str(events_file), "--out", str(out)])

        assert main(["verify", str(out), "--address", make_address("zz")]) == EXIT_VERIFICATION_FAILED

    def test_tampered_amount_fails(self, capsys, events_file, tmp_path):
        out = tmp_path / "epoch.json"
        main(["batch", "--events-file", str(events_file), "--out", str(out)])
        document = json.loads(out.read_text())
        document["proofs"][0]["amount"] += 1
        document["proofs"][1]["amount"] -= 1
        out.write_text(json.dumps(document))

        assert main(["verify", str(out)]) == EXIT_VERIFICATION_FAILED

    def test_total_mismatch_fails(self, capsys, events_file, tmp_path):
        out = tmp_path / "epoch.json"
        main(["batch", "--events-file", str(events_file), "--out", str(out)])
        document = json.loads(out.read_text())
        document["totalTokens"] += 5
        out.write_text(json.dumps(document))

        assert main(["verify", str(out)]) == EXIT_VERIFICATION_FAILED

    def test_empty_batch_valid(self, capsys, tmp_path):
        out = tmp_path / "empty.json"
        assert main(["batch", "--out", str(out), "--json"]) == EXIT_SUCCESS
        capsys.readouterr()

        assert main(["verify", str(out), "--json"]) == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["empty_batch"] is True
        assert report["claims_checked"] == 0

    def test_no_claims_with_nonzero_root_fails(self, capsys, tmp_path):
        path = tmp_path / "odd.json"
        path.write_text(json.dumps({"merkleRoot": "ab" * 32, "totalTokens": 0, "proofs": []}))

        assert main(["verify", str(path)]) == EXIT_VERIFICATION_FAILED

    def test_empty_batch_unknown_address_fails(self, capsys, tmp_path):
        out = tmp_path / "empty.json"
        main(["batch", "--out", str(out)])

        assert main(["verify", str(out), "--address", make_address("zz")]) == EXIT_VERIFICATION_FAILED

    def test_unreadable_file(self, capsys, tmp_path):
        path = tmp_path / "junk.json"
        path.write_text(json.dumps({"something": "else"}))

        assert main(["verify", str(path)]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    """Tests for `commons config`."""

    def test_init_then_show(self, capsys, tmp_path):
        path = tmp_path / "commons.json"

        assert main(["config", "--init", "--path", str(path)]) == EXIT_SUCCESS
        assert path.exists()
        assert main(["config", "--init", "--path", str(path)]) == EXIT_RUNTIME_ERROR

        capsys.readouterr()
        assert main(["config", "--show", "--path", str(path)]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["rewards"]["default_reward_pool"] == 1000
        assert shown["log_level"] == "INFO"

    def test_force_overwrites(self, tmp_path):
        path = tmp_path / "commons.json"
        path.write_text("{}")

        assert main(["config", "--init", "--force", "--path", str(path)]) == EXIT_SUCCESS
        assert json.loads(path.read_text())["rewards"]["default_reward_pool"] == 1000

    def test_show_reports_source_and_env(self, capsys, monkeypatch):
        monkeypatch.setenv("COMMONS_REWARD_POOL", "77")

        assert main(["config", "--show", "--path", "absent.json"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)

        assert shown["source"] == "defaults"
        assert shown["env_overrides"] == {"COMMONS_REWARD_POOL": "77"}
        assert shown["rewards"]["default_reward_pool"] == 77
