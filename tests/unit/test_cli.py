"""
Module 05 - CLI Unit Tests
Tests for hashtree_cli/main.py and the command modules

Drives main() in-process and checks exit codes and output:
0 = success, 1 = runtime error, 2 = verification failed / item absent
"""
import json
import logging

import pytest

from hashtree_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)

pytestmark = pytest.mark.cli


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the handlers setup_logging installs on the root logger."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def workdir(isolated_env):
    """Empty working directory with no config files and no HASHTREE_* env."""
    return isolated_env


@pytest.fixture
def items_file(workdir):
    path = workdir / "items.txt"
    path.write_text("T1\nT2\nT3\nT4\n", encoding="utf-8")
    return path


@pytest.fixture
def proof_file(workdir, items_file, capsys):
    path = workdir / "proof.json"
    code = main(["prove", "--items-file", str(items_file), "--index", "1", "--out", str(path)])
    assert code == EXIT_SUCCESS
    capsys.readouterr()
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_no_command(self, workdir, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR
        assert "usage" in capsys.readouterr().out.lower()

    def test_prove_requires_target(self, workdir):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["prove"])

    def test_prove_target_exclusive(self, workdir):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["prove", "--index", "0", "--item", "T1"])

    def test_unknown_algorithm(self, workdir):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--algorithm", "md5", "build"])


class TestBuildAndTree:
    """Tests for build and tree commands."""

    def test_build_json(self, workdir, capsys):
        assert main(["build", "-d", "A", "-d", "B", "--json"]) == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["root_digest"].startswith("0x63956f0ce48edc48")
        assert summary["leaf_count"] == 2
        assert summary["depth"] == 2

    def test_build_default_items(self, workdir, capsys):
        assert main(["build"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "leaf_count: 4" in out
        assert "Transaction 1: Alice -> Bob" in out

    def test_build_from_file_then_data(self, workdir, items_file, capsys):
        assert main(["build", "-f", str(items_file), "-d", "T5", "--json"]) == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert [leaf["item"] for leaf in summary["leaves"]] == ["T1", "T2", "T3", "T4", "T5"]

    def test_tree_rendering(self, workdir, capsys):
        assert main(["tree", "-d", "A", "-d", "B"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Merkle Tree Structure:" in out
        assert "Level 0: Leaf[559aead08264d579] | Leaf[df7e70e5021544f4]" in out
        assert "Level 1: Internal[63956f0ce48edc48]" in out
        assert "Root Hash: 63956f0ce48edc48" in out

    def test_blank_item_in_file(self, workdir, capsys):
        path = workdir / "bad.txt"
        path.write_text("T1\n\nT3\n", encoding="utf-8")
        assert main(["build", "-f", str(path)]) == EXIT_RUNTIME_ERROR
        assert "position 1" in capsys.readouterr().err

    def test_empty_items_file(self, workdir, capsys):
        path = workdir / "empty.txt"
        path.write_text("", encoding="utf-8")
        assert main(["build", "-f", str(path)]) == EXIT_RUNTIME_ERROR
        assert "must not be empty" in capsys.readouterr().err

    def test_missing_items_file(self, workdir, capsys):
        assert main(["build", "-f", str(workdir / "absent.txt")]) == EXIT_RUNTIME_ERROR


class TestProve:
    """Tests for the prove command."""

    def test_prove_human(self, workdir, items_file, capsys):
        assert main(["prove", "-f", str(items_file), "--index", "1"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Merkle Proof for leaf 1:" in out
        assert "  1. left: " in out
        assert "  2. right: " in out
        assert "Valid: true" in out
        assert "Estimated size: 134 bytes" in out

    def test_prove_json_by_item(self, workdir, items_file, capsys):
        assert main(["prove", "-f", str(items_file), "--item", "T3", "--json"]) == EXIT_SUCCESS
        info = json.loads(capsys.readouterr().out)
        assert info["proof"]["leaf_index"] == 2
        assert info["is_valid"] is True
        assert info["proof_size"] == 134

    def test_prove_out_writes_file(self, workdir, proof_file):
        data = json.loads(proof_file.read_text(encoding="utf-8"))
        assert data["leaf_index"] == 1
        assert data["algorithm"] == "sha256"
        assert [step["side"] for step in data["path"]] == ["left", "right"]

    def test_prove_index_out_of_range(self, workdir, items_file, capsys):
        assert main(["prove", "-f", str(items_file), "--index", "9"]) == EXIT_RUNTIME_ERROR
        assert "out of range" in capsys.readouterr().err

    def test_prove_missing_item(self, workdir, items_file, capsys):
        assert main(["prove", "-f", str(items_file), "--item", "T9"]) == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err


class TestVerify:
    """Tests for the offline verify command."""

    def test_valid_proof(self, workdir, proof_file, capsys):
        assert main(["verify", str(proof_file), "--item", "T2"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "proof_valid: true" in out
        assert "item_valid: true" in out

    def test_wrong_item(self, workdir, proof_file, capsys):
        assert main(["verify", str(proof_file), "--item", "T3"]) == EXIT_VERIFICATION_FAILED
        out = capsys.readouterr().out
        assert "item_valid: false" in out
        assert "[LEAF_HASH_MISMATCH]" in out

    def test_tampered_proof(self, workdir, proof_file, capsys):
        data = json.loads(proof_file.read_text(encoding="utf-8"))
        digest = data["path"][0]["digest"]
        data["path"][0]["digest"] = digest[:-1] + ("0" if digest[-1] != "0" else "1")
        proof_file.write_text(json.dumps(data), encoding="utf-8")

        assert main(["verify", str(proof_file), "--json"]) == EXIT_VERIFICATION_FAILED
        report = json.loads(capsys.readouterr().out)
        assert report["proof_valid"] is False
        assert [e["code"] for e in report["errors"]] == ["MERKLE_PROOF_INVALID"]

    def test_undecodable_proof(self, workdir, capsys):
        path = workdir / "garbage.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["verify", str(path), "--item", "T2", "--json"]) == EXIT_VERIFICATION_FAILED
        report = json.loads(capsys.readouterr().out)
        assert report["proof_valid"] is False
        assert report["item_valid"] is False
        assert report["errors"][0]["code"] == "PROOF_DECODE_ERROR"

    def test_non_utf8_proof_file(self, workdir, capsys):
        path = workdir / "binary.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        assert main(["verify", str(path), "--json"]) == EXIT_VERIFICATION_FAILED
        report = json.loads(capsys.readouterr().out)
        assert report["proof_valid"] is False
        assert report["errors"][0]["code"] == "PROOF_DECODE_ERROR"
        assert "UTF-8" in report["errors"][0]["message"]

    def test_missing_proof_file(self, workdir, capsys):
        assert main(["verify", str(workdir / "absent.json")]) == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err

    def test_trusted_root(self, workdir, items_file, proof_file, capsys):
        main(["build", "-f", str(items_file), "--json"])
        root = json.loads(capsys.readouterr().out)["root_digest"]
        assert main(["verify", str(proof_file), "--root", root]) == EXIT_SUCCESS
        assert "root_pinned: true" in capsys.readouterr().out

    def test_untrusted_root(self, workdir, proof_file, capsys):
        other_root = "0x" + "00" * 32
        assert main(["verify", str(proof_file), "--root", other_root]) == EXIT_VERIFICATION_FAILED
        out = capsys.readouterr().out
        assert "root_pinned: false" in out
        assert "[ROOT_MISMATCH]" in out

    def test_bad_root_hex(self, workdir, proof_file, capsys):
        assert main(["verify", str(proof_file), "--root", "abc"]) == EXIT_RUNTIME_ERROR
        assert "Invalid --root" in capsys.readouterr().err

    def test_algorithm_taken_from_proof(self, workdir, items_file, capsys):
        path = workdir / "rolling.json"
        assert main(
            ["-a", "rolling32", "prove", "-f", str(items_file), "--index", "0", "--out", str(path)]
        ) == EXIT_SUCCESS
        capsys.readouterr()
        assert main(["verify", str(path), "--item", "T1", "--json"]) == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["algorithm"] == "rolling32"
        assert report["proof_valid"] is True
        assert main(["-a", "rolling32", "verify", str(path), "--item", "T1"]) == EXIT_SUCCESS

    def test_blake2b_proof_without_flag(self, workdir, items_file, capsys):
        path = workdir / "blake.json"
        assert main(
            ["-a", "blake2b", "prove", "-f", str(items_file), "--index", "3", "--out", str(path)]
        ) == EXIT_SUCCESS
        capsys.readouterr()
        assert main(["verify", str(path), "--item", "T4"]) == EXIT_SUCCESS
        assert "algorithm: blake2b" in capsys.readouterr().out

    def test_pinned_algorithm_mismatch(self, workdir, items_file, capsys):
        path = workdir / "rolling.json"
        main(["-a", "rolling32", "prove", "-f", str(items_file), "--index", "0", "--out", str(path)])
        capsys.readouterr()
        assert main(["-a", "sha256", "verify", str(path), "--item", "T1", "--json"]) == EXIT_VERIFICATION_FAILED
        report = json.loads(capsys.readouterr().out)
        assert report["proof_valid"] is False
        assert report["item_valid"] is False
        assert [e["code"] for e in report["errors"]] == ["ALGORITHM_MISMATCH"]
        assert report["errors"][0]["details"] == {"expected": "sha256", "actual": "rolling32"}

    def test_pinned_mismatch_human(self, workdir, proof_file, capsys):
        assert main(["-a", "blake2b", "verify", str(proof_file)]) == EXIT_VERIFICATION_FAILED
        out = capsys.readouterr().out
        assert "[ALGORITHM_MISMATCH] Proof was built with sha256, but blake2b was requested" in out
        assert "does not match proof root" not in out

    def test_unknown_proof_algorithm(self, workdir, proof_file, capsys):
        data = json.loads(proof_file.read_text(encoding="utf-8"))
        data["algorithm"] = "md5"
        proof_file.write_text(json.dumps(data), encoding="utf-8")
        assert main(["verify", str(proof_file), "--json"]) == EXIT_VERIFICATION_FAILED
        report = json.loads(capsys.readouterr().out)
        assert report["proof_valid"] is False
        assert report["errors"][0]["code"] == "MERKLE_PROOF_INVALID"
        assert report["errors"][0]["details"]["algorithm"] == "md5"


class TestContains:
    """Tests for the contains command."""

    def test_present(self, workdir, items_file, capsys):
        assert main(["contains", "T3", "-f", str(items_file)]) == EXIT_SUCCESS
        assert "exists: true (index 2)" in capsys.readouterr().out

    def test_absent(self, workdir, items_file, capsys):
        assert main(["contains", "T9", "-f", str(items_file), "--json"]) == EXIT_VERIFICATION_FAILED
        assert json.loads(capsys.readouterr().out)["exists"] is False

    def test_blank(self, workdir, items_file, capsys):
        assert main(["contains", " ", "-f", str(items_file)]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    """Tests for the config command."""

    def test_init_creates_file(self, workdir, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        created = workdir / "hashtree.json"
        assert created.exists()
        assert json.loads(created.read_text())["tree"]["hash_algorithm"] == "sha256"

    def test_init_refuses_overwrite(self, workdir, capsys):
        (workdir / "hashtree.json").write_text("{}")
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

    def test_show_reflects_file(self, workdir, capsys):
        (workdir / "hashtree.yaml").write_text("tree:\n  hash_algorithm: blake2b\n")
        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["tree"]["hash_algorithm"] == "blake2b"

    def test_bad_config_file(self, workdir, capsys):
        (workdir / "hashtree.json").write_text("{broken")
        assert main(["build"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err

    def test_explicit_config(self, workdir, capsys):
        path = workdir / "custom.yaml"
        path.write_text("tree:\n  default_items: [A, B]\n")
        assert main(["--config", str(path), "build", "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["root_digest"].startswith("0x63956f0ce48edc48")
