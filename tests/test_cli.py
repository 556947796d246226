"""Tests for the click command-line interface."""

import json

import pytest
from click.testing import CliRunner

from homaes.cli import main

KEY = "000102030405060708090a0b0c0d0e0f"
PT = "00112233445566778899aabbccddeeff"
CT = "69c4e0d86a7b0430d8cdb78070b4c55a"

FAST = ["--circuit-workers", "2", "--state-workers", "4"]


@pytest.fixture
def runner():
    return CliRunner()


class TestListCommand:
    def test_lists_engines(self, runner) -> None:
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert "clear" in result.output
        assert "masked" in result.output


class TestEncryptDecrypt:
    def test_encrypt(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "--key", KEY, "--plaintext", PT, *FAST])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == CT

    def test_decrypt(self, runner) -> None:
        result = runner.invoke(main, ["decrypt", "--key", KEY, "--ciphertext", CT, *FAST])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == PT

    def test_masked_engine(self, runner) -> None:
        result = runner.invoke(
            main,
            ["encrypt", "--key", KEY, "--plaintext", PT, "--engine", "masked", "--d", "1", "--seed", "3", *FAST],
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == CT

    def test_verbose(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "--key", KEY, "--plaintext", PT, "--verbose", *FAST])
        assert result.exit_code == 0, result.output
        assert "Homomorphic AES-128 encrypt" in result.output
        assert "R10" in result.output
        assert f"Output: {CT}" in result.output
        assert "[OK] PASS" in result.output
        assert "Primitive" in result.output

    def test_trace_and_json_files(self, runner, tmp_path) -> None:
        trace_path = tmp_path / "trace.jsonl"
        json_path = tmp_path / "report.json"
        result = runner.invoke(
            main,
            [
                "decrypt", "--key", KEY, "--ciphertext", CT,
                "--trace-file", str(trace_path), "--json", str(json_path), *FAST,
            ],
        )
        assert result.exit_code == 0, result.output

        records = [json.loads(line) for line in trace_path.read_text().splitlines()]
        assert len(records) == 40
        assert records[-1]["state"] == PT

        report = json.loads(json_path.read_text())
        assert report["results"][0]["direction"] == "decrypt"
        assert report["results"][0]["output_hex"] == PT

    def test_bad_hex(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "--key", "zz", "--plaintext", PT])
        assert result.exit_code == 1
        assert "Key is not valid hex" in result.output

    def test_short_block(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "--key", KEY, "--plaintext", "0011"])
        assert result.exit_code == 1
        assert "Plaintext must be 16 bytes, got 2" in result.output

    def test_unknown_engine(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "--key", KEY, "--plaintext", PT, "--engine", "nope"])
        assert result.exit_code == 1
        assert "Unknown engine 'nope'" in result.output

    def test_invalid_config(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "--key", KEY, "--plaintext", PT, "--state-workers", "32"])
        assert result.exit_code == 1
        assert "state_workers must be 1..16" in result.output

    @pytest.mark.parametrize("workers", ["0", "9"])
    def test_circuit_workers_out_of_range(self, runner, workers) -> None:
        result = runner.invoke(
            main, ["encrypt", "--key", KEY, "--plaintext", PT, "--circuit-workers", workers]
        )
        assert result.exit_code == 1
        assert "circuit_workers must be 1..8" in result.output


class TestValidateCommand:
    def test_clear_engine_passes(self, runner) -> None:
        result = runner.invoke(main, ["validate", "--n", "1", "--seed", "5", *FAST])
        assert result.exit_code == 0, result.output
        assert "Known-answer tests: 5/5 passed" in result.output
        assert "Random round trips: 1/1 passed" in result.output
        assert "VALIDATION PASSED" in result.output

    def test_verbose_table_and_json(self, runner, tmp_path) -> None:
        json_path = tmp_path / "validate.json"
        result = runner.invoke(
            main, ["validate", "--n", "0", "--verbose", "--json", str(json_path), *FAST]
        )
        assert result.exit_code == 0, result.output
        assert "KAT 1: PASS" in result.output
        assert "Direction" in result.output
        assert json.loads(json_path.read_text())["count"] == 10

    def test_version(self, runner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
