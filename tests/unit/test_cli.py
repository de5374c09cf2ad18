"""
CLI Tests
Tests for flectra_cli: hash-leaf, root, prove, verify and config commands.

Commands are invoked through main(argv) and their stdout inspected.
"""
import json

import pytest

from fixtures.common import flip_byte, make_leaves
from flectra.crypto.hashing import from_hex, hash_leaf, sha256, to_hex
from flectra.merkle.merkle_tree import MerkleTree, compute_merkle_root
from flectra_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Run each CLI test from an empty directory so no flectra.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


@pytest.fixture
def leaves_hex() -> list[str]:
    return [to_hex(leaf) for leaf in make_leaves(5)]


@pytest.fixture
def leaves_file(tmp_path, leaves_hex):
    path = tmp_path / "leaves.txt"
    path.write_text("# batch 1\n" + "\n".join(leaves_hex) + "\n\n")
    return path


def run_json(capsys, argv: list[str]) -> tuple[int, dict]:
    code = main(argv)
    out = capsys.readouterr().out
    return code, json.loads(out)


class TestParser:
    """Argument parsing."""

    def test_no_command_fails(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_subcommands_registered(self):
        parser = create_parser()
        args = parser.parse_args(["root", "0x00"])
        assert args.command == "root"
        assert args.leaves == ["0x00"]


class TestHashLeafCommand:
    """flectra hash-leaf"""

    def test_text_payload(self, capsys):
        assert main(["hash-leaf", "robot action"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == to_hex(hash_leaf(b"robot action"))

    def test_hex_payload_json(self, capsys):
        code, data = run_json(capsys, ["hash-leaf", "0xdeadbeef", "--hex", "--json"])

        assert code == EXIT_SUCCESS
        assert data["leaf"] == to_hex(hash_leaf(bytes.fromhex("deadbeef")))
        assert data["hash_algorithm"] == "keccak256"

    def test_bad_hex_payload(self, capsys):
        assert main(["hash-leaf", "nothex", "--hex"]) == EXIT_RUNTIME_ERROR

    def test_sha256_override(self, capsys):
        assert main(["--hash", "sha256", "hash-leaf", "x"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == to_hex(sha256(sha256(b"x")))


class TestRootCommand:
    """flectra root"""

    def test_root_from_args(self, capsys, leaves_hex):
        code, data = run_json(capsys, ["root", *leaves_hex, "--json"])

        expected = compute_merkle_root([from_hex(h) for h in leaves_hex])
        assert code == EXIT_SUCCESS
        assert data["root"] == to_hex(expected)
        assert data["leaf_count"] == 5
        assert data["depth"] == 3

    def test_root_from_file(self, capsys, leaves_file, leaves_hex):
        code, data = run_json(capsys, ["root", "--file", str(leaves_file), "--json"])

        assert code == EXIT_SUCCESS
        assert data["root"] == to_hex(compute_merkle_root([from_hex(h) for h in leaves_hex]))

    def test_root_from_json_file(self, capsys, tmp_path, leaves_hex):
        path = tmp_path / "leaves.json"
        path.write_text(json.dumps(leaves_hex))

        code, data = run_json(capsys, ["root", "-f", str(path), "--json"])
        assert code == EXIT_SUCCESS
        assert data["leaf_count"] == 5

    def test_root_human_output(self, capsys, leaves_hex):
        assert main(["root", *leaves_hex]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "root: 0x" in out
        assert "depth: 3" in out

    def test_root_no_leaves(self, capsys):
        code, data = run_json(capsys, ["root", "--json"])
        assert code == EXIT_RUNTIME_ERROR
        assert data["ok"] is False
        assert "no leaves" in data["error"]

    def test_root_missing_file(self, capsys, tmp_path):
        assert main(["root", "--file", str(tmp_path / "nope.txt")]) == EXIT_RUNTIME_ERROR

    def test_root_rejects_short_leaves(self, capsys):
        code, data = run_json(capsys, ["root", "0x01", "0x02", "0x03", "--json"])

        assert code == EXIT_RUNTIME_ERROR
        assert data["ok"] is False
        assert "32-byte" in data["error"]

    def test_root_rejects_non_string_json_entries(self, capsys, tmp_path):
        path = tmp_path / "leaves.json"
        path.write_text("[1, 2, 3]")

        code, data = run_json(capsys, ["root", "-f", str(path), "--json"])
        assert code == EXIT_RUNTIME_ERROR
        assert "JSON list of hex strings" in data["error"]


class TestProveAndVerifyCommands:
    """flectra prove / flectra verify"""

    def test_prove_prints_document(self, capsys, leaves_hex):
        code, data = run_json(capsys, ["prove", "2", *leaves_hex])

        tree = MerkleTree.build([from_hex(h) for h in leaves_hex])
        assert code == EXIT_SUCCESS
        assert data["leaf"] == leaves_hex[2]
        assert data["index"] == 2
        assert data["root"] == to_hex(tree.root)
        assert len(data["siblings"]) == tree.depth

    def test_prove_out_of_range(self, capsys, leaves_hex):
        code, data = run_json(capsys, ["prove", "5", *leaves_hex, "--json"])
        assert code == EXIT_RUNTIME_ERROR
        assert "out of range" in data["error"]

    def test_prove_rejects_short_leaves(self, capsys, leaves_hex):
        code, data = run_json(capsys, ["prove", "0", leaves_hex[0], "0x01", "--json"])

        assert code == EXIT_RUNTIME_ERROR
        assert data["ok"] is False
        assert "got 1 bytes" in data["error"]

    def test_prove_then_verify(self, capsys, tmp_path, leaves_file):
        proof_path = tmp_path / "proof.json"
        assert main(["prove", "4", "--file", str(leaves_file), "--out", str(proof_path)]) == EXIT_SUCCESS
        capsys.readouterr()

        code, data = run_json(capsys, ["verify", str(proof_path), "--json"])
        assert code == EXIT_SUCCESS
        assert data["ok"] is True
        assert data["index"] == 4

    def test_verify_with_wrong_root(self, capsys, tmp_path, leaves_file):
        proof_path = tmp_path / "proof.json"
        main(["prove", "1", "--file", str(leaves_file), "--out", str(proof_path)])
        capsys.readouterr()

        wrong_root = to_hex(hash_leaf(b"unrelated"))
        code, data = run_json(capsys, ["verify", str(proof_path), "--root", wrong_root, "--json"])
        assert code == EXIT_VERIFICATION_FAILED
        assert data["ok"] is False
        assert data["errors"]

    def test_verify_tampered_leaf(self, capsys, tmp_path, leaves_file):
        proof_path = tmp_path / "proof.json"
        main(["prove", "0", "--file", str(leaves_file), "--out", str(proof_path)])
        capsys.readouterr()

        document = json.loads(proof_path.read_text())
        document["leaf"] = to_hex(flip_byte(from_hex(document["leaf"])))
        proof_path.write_text(json.dumps(document))

        assert main(["verify", str(proof_path)]) == EXIT_VERIFICATION_FAILED
        assert "ok: false" in capsys.readouterr().out

    def test_verify_missing_root(self, capsys, tmp_path, leaves_hex):
        tree = MerkleTree.build([from_hex(h) for h in leaves_hex])
        proof = tree.proof(0)
        proof_path = tmp_path / "rootless.json"
        proof_path.write_text(json.dumps({
            "leaf": to_hex(proof.leaf),
            "siblings": [to_hex(s) for s in proof.siblings],
            "positions": list(proof.positions),
            "index": 0,
        }))

        assert main(["verify", str(proof_path)]) == EXIT_RUNTIME_ERROR
        assert main(["verify", str(proof_path), "--root", to_hex(tree.root)]) == EXIT_SUCCESS

    def test_verify_invalid_document(self, capsys, tmp_path):
        proof_path = tmp_path / "bad.json"
        proof_path.write_text('{"leaf": "0x1234", "index": 0}')
        assert main(["verify", str(proof_path)]) == EXIT_RUNTIME_ERROR

    def test_verify_missing_file(self, capsys, tmp_path):
        assert main(["verify", str(tmp_path / "missing.json")]) == EXIT_RUNTIME_ERROR

    def test_hash_algorithm_must_match(self, capsys, tmp_path, leaves_file):
        proof_path = tmp_path / "proof.json"
        main(["--hash", "sha256", "prove", "3", "--file", str(leaves_file), "--out", str(proof_path)])
        capsys.readouterr()

        assert main(["--hash", "sha256", "verify", str(proof_path)]) == EXIT_SUCCESS
        assert main(["verify", str(proof_path)]) == EXIT_VERIFICATION_FAILED


class TestConfigCommand:
    """flectra config"""

    def test_show_defaults(self, capsys):
        code, data = run_json(capsys, ["config", "--show"])
        assert code == EXIT_SUCCESS
        assert data["merkle"]["hash_algorithm"] == "keccak256"

    def test_show_from_yaml(self, capsys, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("merkle:\n  hash_algorithm: sha256\n")

        code, data = run_json(capsys, ["--config", str(path), "config", "--show"])
        assert code == EXIT_SUCCESS
        assert data["merkle"]["hash_algorithm"] == "sha256"

    def test_env_override(self, capsys, monkeypatch):
        monkeypatch.setenv("FLECTRA_HASH_ALGORITHM", "sha256")
        code, data = run_json(capsys, ["config", "--show"])
        assert data["merkle"]["hash_algorithm"] == "sha256"

    def test_default_yaml_in_cwd(self, capsys, tmp_path):
        (tmp_path / "flectra.yaml").write_text("merkle:\n  hash_algorithm: sha256\n")
        code, data = run_json(capsys, ["config", "--show"])
        assert data["merkle"]["hash_algorithm"] == "sha256"

    def test_bad_config_file(self, capsys, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("merkle:\n  hash_algorithm: md5\n")
        assert main(["--config", str(path), "config", "--show"]) == EXIT_RUNTIME_ERROR

    @pytest.mark.parametrize("body", [
        "merkle:\n  hash_algorithm: 256\n",
        "logging:\n  level: 10\n",
        "merkle: sha256\n",
    ])
    def test_mistyped_config_values(self, capsys, tmp_path, body):
        path = tmp_path / "typed.yaml"
        path.write_text(body)

        assert main(["--config", str(path), "config", "--show"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err

    def test_missing_config_file(self, capsys, tmp_path):
        assert main(["--config", str(tmp_path / "none.yaml"), "config"]) == EXIT_RUNTIME_ERROR
