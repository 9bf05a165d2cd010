"""
CLI Unit Tests
Tests for whitelist_cli/main.py and the root/proofs/verify/config commands.

Commands run in-process through main(argv) inside a temporary working
directory; output is captured with capsys.
"""
import json

import pytest

from core.merkle.leaf import WHITELIST_LEAF_ENCODING
from core.merkle.merkle_proofs import MerkleVerifier
from core.merkle.standard_tree import StandardMerkleTree
from core.whitelist.io import load_proofs
from fixtures.common import BAD_CHECKSUM_ADDRESS, write_whitelist
from whitelist_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)


OUTSIDER = "0x" + "99" * 20


@pytest.fixture
def workdir(isolated_cwd, monkeypatch, addresses):
    monkeypatch.setenv("HOME", str(isolated_cwd))
    write_whitelist(isolated_cwd / "whitelist.txt", addresses)
    return isolated_cwd


@pytest.fixture
def expected_tree(leaf_values):
    return StandardMerkleTree.of(leaf_values, WHITELIST_LEAF_ENCODING)


class TestParser:
    """Tests for argument parsing."""

    def test_no_command(self, workdir, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR
        assert "usage" in capsys.readouterr().out.lower()

    def test_verify_requires_address(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["verify"])

    def test_amount_accepts_hex(self):
        args = create_parser().parse_args(["root", "--amount", "0x10"])

        assert args.amount == 16

    def test_repeated_proof_flags(self):
        args = create_parser().parse_args(
            ["verify", "-a", OUTSIDER, "--proof", "0x01", "--proof", "0x02"]
        )

        assert args.proof == ["0x01", "0x02"]


class TestRootCommand:
    """Tests for `whitelist-merkle root`."""

    def test_prints_root_and_leaves(self, workdir, expected_tree, capsys):
        assert main(["root"]) == EXIT_SUCCESS

        out = capsys.readouterr().out.splitlines()
        assert out[0] == f"Merkle Root: {expected_tree.root}"
        assert out[1] == "Leaves: 5"

    def test_explicit_input(self, workdir, expected_tree, capsys):
        path = workdir / "other.txt"
        (workdir / "whitelist.txt").rename(path)

        assert main(["root", str(path)]) == EXIT_SUCCESS
        assert f"Merkle Root: {expected_tree.root}" in capsys.readouterr().out

    def test_json(self, workdir, expected_tree, capsys):
        assert main(["root", "--json"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data == {
            "input_path": "whitelist.txt",
            "root": expected_tree.root,
            "leaves": 5,
            "leaf_encoding": ["address", "uint256"],
        }

    def test_render(self, workdir, expected_tree, capsys):
        assert main(["root", "--render"]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert f"0) {expected_tree.root}" in out
        assert "└─" in out

    def test_amount_changes_root(self, workdir, expected_tree, capsys):
        assert main(["root", "--amount", "7", "--json"]) == EXIT_SUCCESS

        assert json.loads(capsys.readouterr().out)["root"] != expected_tree.root

    def test_amount_from_env(self, workdir, addresses, monkeypatch, capsys):
        monkeypatch.setenv("WHITELIST_MERKLE_AMOUNT", "7")
        expected = StandardMerkleTree.of([[a, 7] for a in addresses], WHITELIST_LEAF_ENCODING)

        assert main(["root", "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["root"] == expected.root

    def test_address_only_encoding(self, workdir, addresses, monkeypatch, capsys):
        monkeypatch.setenv("WHITELIST_MERKLE_LEAF_ENCODING", "address")
        expected = StandardMerkleTree.of([[a] for a in addresses], ["address"])

        assert main(["root", "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["root"] == expected.root

    def test_unique(self, workdir, addresses, expected_tree, capsys):
        write_whitelist(workdir / "whitelist.txt", addresses + addresses[:2])

        assert main(["root", "--unique"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert f"Merkle Root: {expected_tree.root}" in out
        assert "Leaves: 5" in out

    def test_duplicates_kept_without_unique(self, workdir, addresses, capsys):
        write_whitelist(workdir / "whitelist.txt", addresses + addresses[:2])

        assert main(["root"]) == EXIT_SUCCESS
        assert "Leaves: 7" in capsys.readouterr().out

    def test_missing_file(self, workdir, capsys):
        assert main(["root", "missing.txt"]) == EXIT_RUNTIME_ERROR
        assert "Error: Cannot read missing.txt" in capsys.readouterr().err

    def test_empty_file(self, workdir, capsys):
        (workdir / "whitelist.txt").write_text("\n\n", encoding="utf-8")

        assert main(["root"]) == EXIT_RUNTIME_ERROR
        assert "Expected non-zero number of leaves" in capsys.readouterr().err

    def test_bad_address(self, workdir, addresses, capsys):
        write_whitelist(workdir / "whitelist.txt", addresses + [BAD_CHECKSUM_ADDRESS])

        assert main(["root"]) == EXIT_RUNTIME_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_error_as_json(self, workdir, capsys):
        assert main(["root", "missing.txt", "--json"]) == EXIT_RUNTIME_ERROR

        data = json.loads(capsys.readouterr().out)
        assert data["error"]["code"] == "WHITELIST_IO_ERROR"

    def test_bad_config_file(self, workdir, capsys):
        (workdir / "whitelist-merkle.json").write_text("{broken", encoding="utf-8")

        assert main(["root"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err


class TestProofsCommand:
    """Tests for `whitelist-merkle proofs`."""

    def test_writes_default_proofs_file(self, workdir, expected_tree, addresses, capsys):
        assert main(["proofs"]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert f"Merkle Root: {expected_tree.root}" in out
        assert "Proofs: proofs.json" in out

        entries = load_proofs(workdir / "proofs.json")
        assert [e.address for e in entries] == addresses
        for entry in entries:
            assert MerkleVerifier.verify_entry(expected_tree.root, entry)

    def test_out_and_tree_out(self, workdir, expected_tree, capsys):
        assert main(["proofs", "-o", "out/p.json", "--tree-out", "out/tree.json", "--json"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["proofs_path"] == "out/p.json"
        assert data["tree_path"] == "out/tree.json"
        assert (workdir / "out" / "p.json").exists()

        dump = json.loads((workdir / "out" / "tree.json").read_text(encoding="utf-8"))
        assert dump["tree"][0] == expected_tree.root

    def test_json_without_tree(self, workdir, capsys):
        assert main(["proofs", "--json"]) == EXIT_SUCCESS

        assert "tree_path" not in json.loads(capsys.readouterr().out)

    def test_workers(self, workdir, capsys):
        assert main(["proofs", "-o", "one.json"]) == EXIT_SUCCESS
        assert main(["proofs", "-o", "many.json", "--workers", "4"]) == EXIT_SUCCESS

        assert load_proofs(workdir / "one.json") == load_proofs(workdir / "many.json")

    def test_nothing_written_on_error(self, workdir, addresses, capsys):
        write_whitelist(workdir / "whitelist.txt", addresses + [BAD_CHECKSUM_ADDRESS])

        assert main(["proofs"]) == EXIT_RUNTIME_ERROR
        assert not (workdir / "proofs.json").exists()


class TestVerifyCommand:
    """Tests for `whitelist-merkle verify`."""

    def test_verify_from_proofs_file(self, workdir, expected_tree, addresses, capsys):
        main(["proofs"])
        capsys.readouterr()

        code = main(["verify", "-a", addresses[2], "-r", expected_tree.root, "--proofs", "proofs.json"])

        assert code == EXIT_SUCCESS
        assert "valid: true" in capsys.readouterr().out

    def test_address_not_in_proofs_file(self, workdir, expected_tree, capsys):
        main(["proofs"])
        capsys.readouterr()

        code = main(["verify", "-a", OUTSIDER, "-r", expected_tree.root, "--proofs", "proofs.json", "--json"])

        assert code == EXIT_VERIFICATION_FAILED
        data = json.loads(capsys.readouterr().out)
        assert data["valid"] is False
        assert data["errors"] == ["Address not found in proofs.json"]

    def test_verify_from_tree(self, workdir, addresses, capsys):
        main(["proofs", "--tree-out", "tree.json"])
        capsys.readouterr()

        assert main(["verify", "-a", addresses[0], "--tree", "tree.json"]) == EXIT_SUCCESS

    def test_outsider_against_tree(self, workdir, capsys):
        main(["proofs", "--tree-out", "tree.json"])
        capsys.readouterr()

        assert main(["verify", "-a", OUTSIDER, "--tree", "tree.json"]) == EXIT_VERIFICATION_FAILED
        assert "Leaf is not in tree" in capsys.readouterr().out

    def test_inline_proof(self, workdir, expected_tree, addresses, capsys):
        argv = ["verify", "-a", addresses[1], "-r", expected_tree.root]
        for node in expected_tree.get_proof(1):
            argv += ["--proof", node]

        assert main(argv) == EXIT_SUCCESS

    def test_wrong_amount(self, workdir, expected_tree, addresses, capsys):
        argv = ["verify", "-a", addresses[1], "-r", expected_tree.root, "--amount", "1"]
        for node in expected_tree.get_proof(1):
            argv += ["--proof", node]

        assert main(argv) == EXIT_VERIFICATION_FAILED
        assert "Proof does not reproduce the root" in capsys.readouterr().out

    def test_missing_root(self, workdir, addresses, capsys):
        assert main(["verify", "-a", addresses[0], "--proofs", "proofs.json"]) == EXIT_RUNTIME_ERROR
        assert "--root is required" in capsys.readouterr().err

    def test_missing_proof_source(self, workdir, expected_tree, addresses, capsys):
        assert main(["verify", "-a", addresses[0], "-r", expected_tree.root]) == EXIT_RUNTIME_ERROR
        assert "--proof, --proofs or --tree" in capsys.readouterr().err

    def test_malformed_inline_proof(self, workdir, expected_tree, addresses, capsys):
        argv = ["verify", "-a", addresses[0], "-r", expected_tree.root, "--proof", "0x1234"]

        assert main(argv) == EXIT_RUNTIME_ERROR
        assert "32-byte" in capsys.readouterr().err


    def test_malformed_root_reported_as_json(self, workdir, addresses, capsys):
        argv = ["verify", "-a", addresses[0], "-r", "abc", "--proof", "0x" + "00" * 32, "--json"]

        assert main(argv) == EXIT_RUNTIME_ERROR
        assert json.loads(capsys.readouterr().out)["error"]["code"] == "INVALID_MERKLE_NODE"

    def test_tree_dump_not_an_object(self, workdir, addresses, capsys):
        (workdir / "tree.json").write_text("[]", encoding="utf-8")

        assert main(["verify", "-a", addresses[0], "--tree", "tree.json"]) == EXIT_RUNTIME_ERROR
        assert "must be a JSON object" in capsys.readouterr().err


class TestConfigCommand:
    """Tests for `whitelist-merkle config`."""

    def test_init(self, workdir, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS

        data = json.loads((workdir / "whitelist-merkle.json").read_text(encoding="utf-8"))
        assert data["proofs_out"] == "proofs.json"

    def test_init_refuses_overwrite(self, workdir, capsys):
        main(["config", "--init"])

        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR
        assert "already exists" in capsys.readouterr().err

    def test_show(self, workdir, monkeypatch, capsys):
        monkeypatch.setenv("WHITELIST_MERKLE_WORKERS", "6")

        assert main(["config", "--show"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["workers"] == 6

    def test_config_file_is_used(self, workdir, capsys):
        (workdir / "cfg.json").write_text(json.dumps({"proofs_out": "from-config.json"}), encoding="utf-8")

        assert main(["--config", "cfg.json", "proofs"]) == EXIT_SUCCESS
        assert (workdir / "from-config.json").exists()
