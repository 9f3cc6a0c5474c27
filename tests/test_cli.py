import json

import pytest

from deployconf.deployconf import main, parse_arguments

CONFIG = """\
default_network: hardhat
solidity:
  version: "0.8.19"
  optimizer:
    enabled: true
    runs: 1000
named_accounts:
  deployer: 0
explorer:
  api_key_env_var: ETHERS_SCAN_API_KEY
networks:
  buildbear:
    url: "https://rpc.buildbear.io/{BUILDBEAR_NODE_ID}"
    credential_env_var: PRIVATE_KEY
  polygon:
    url: "https://polygon-mainnet.g.alchemy.com/v2/{ALCHEMY_POLYGON_API_KEY}"
    chain_id: 137
    credential_env_var: PRIVATE_KEY
    gas_price: 100000000000
"""

KEY = "0x" + "11" * 32


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    for name in (
        "BUILDBEAR_NODE_ID",
        "ALCHEMY_POLYGON_API_KEY",
        "PRIVATE_KEY",
        "ETHERS_SCAN_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "deployconf.yaml"
    path.write_text(CONFIG)
    return str(path)


def test_parse_arguments_defaults():
    args = parse_arguments([])
    assert args.path == "deployconf.yaml"
    assert args.network is None
    assert not args.resolve_every_target
    assert args.export_path is None
    assert args.account_env_vars is None


def test_version(capsys):
    main(["--version"])
    assert "Deployconf" in capsys.readouterr().out


def test_missing_config_exits(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "absent.yaml")])
    assert exc_info.value.code == 1


def test_default_local_profile(config_path, capsys):
    main([config_path])
    assert "hardhat" in capsys.readouterr().out


def test_invoked_target_resolves(config_path, monkeypatch, capsys):
    monkeypatch.setenv("ALCHEMY_POLYGON_API_KEY", "alchemy-key")
    monkeypatch.setenv("PRIVATE_KEY", KEY)

    main([config_path, "--network", "polygon"])

    out = capsys.readouterr().out
    assert KEY not in out
    assert "alchemy-key" not in out


def test_invoked_target_failure_exits(config_path):
    with pytest.raises(SystemExit) as exc_info:
        main([config_path, "--network", "polygon"])
    assert exc_info.value.code == 1


def test_unknown_target_exits(config_path):
    with pytest.raises(SystemExit) as exc_info:
        main([config_path, "--network", "mainnet"])
    assert exc_info.value.code == 1


def test_unused_broken_target_does_not_block(config_path, monkeypatch):
    monkeypatch.setenv("BUILDBEAR_NODE_ID", "node-1")
    main([config_path, "--network", "buildbear", "--all"])


def test_env_file(config_path, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(f"BUILDBEAR_NODE_ID=node-1\nPRIVATE_KEY={KEY}\n")
    export_path = tmp_path / "out" / "networks.json"

    main(
        [
            config_path,
            "-n",
            "buildbear",
            "--env-file",
            str(env_file),
            "--export",
            str(export_path),
        ]
    )

    document = json.loads(export_path.read_text())
    assert document["defaultNetwork"] == "buildbear"
    assert document["networks"]["buildbear"] == {
        "url": "https://rpc.buildbear.io/node-1",
        "accounts": [KEY],
        "gasPrice": "auto",
    }
    assert document["solidity"]["version"] == "0.8.19"
    assert document["namedAccounts"] == {"deployer": 0}


def test_export_all_skips_failed_targets(config_path, monkeypatch, tmp_path):
    monkeypatch.setenv("BUILDBEAR_NODE_ID", "node-1")
    export_path = tmp_path / "networks.json"

    main([config_path, "-n", "buildbear", "--all", "--export", str(export_path)])

    document = json.loads(export_path.read_text())
    assert list(document["networks"]) == ["buildbear"]
    assert document["networks"]["buildbear"]["accounts"] == []


INDEXED_CONFIG = """\
named_accounts:
  deployer: 0
  treasury: 1
networks:
  staging:
    url: https://rpc.example
    accounts: indexed-account-set
    credential_required: true
"""


@pytest.fixture
def indexed_config_path(tmp_path, monkeypatch):
    for name in ("DEPLOYER_KEY", "TREASURY_KEY"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "indexed.yaml"
    path.write_text(INDEXED_CONFIG)
    return str(path)


def test_account_env_supplies_indexed_accounts(indexed_config_path, monkeypatch, tmp_path):
    monkeypatch.setenv("DEPLOYER_KEY", KEY)
    monkeypatch.setenv("TREASURY_KEY", "0x" + "22" * 32)
    export_path = tmp_path / "networks.json"

    main(
        [
            indexed_config_path,
            "-n",
            "staging",
            "--account-env",
            "DEPLOYER_KEY",
            "--account-env",
            "TREASURY_KEY",
            "--export",
            str(export_path),
        ]
    )

    document = json.loads(export_path.read_text())
    assert document["networks"]["staging"]["accounts"] == [KEY, "0x" + "22" * 32]


def test_indexed_target_without_account_env_exits(indexed_config_path):
    with pytest.raises(SystemExit) as exc_info:
        main([indexed_config_path, "-n", "staging"])
    assert exc_info.value.code == 1


def test_missing_account_env_variable_exits(indexed_config_path, monkeypatch):
    monkeypatch.setenv("TREASURY_KEY", KEY)
    with pytest.raises(SystemExit) as exc_info:
        main(
            [
                indexed_config_path,
                "-n",
                "staging",
                "--account-env",
                "DEPLOYER_KEY",
                "--account-env",
                "TREASURY_KEY",
            ]
        )
    assert exc_info.value.code == 1


def test_empty_explorer_section_exits_cleanly(tmp_path):
    path = tmp_path / "deployconf.yaml"
    path.write_text("explorer:\nsolidity: 0.8.19\nnetworks:\n  local:\n    url: http://127.0.0.1:8545\n")
    main([str(path), "-n", "local"])


def test_duplicate_target_exits(tmp_path):
    path = tmp_path / "deployconf.yaml"
    path.write_text(
        "networks:\n  local:\n    url: http://a\n  local:\n    url: http://b\n"
    )
    with pytest.raises(SystemExit) as exc_info:
        main([str(path), "-n", "local"])
    assert exc_info.value.code == 1
