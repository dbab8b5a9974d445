import json

import pytest

from rootstock_mcp.rootstock_api.contracts import ContractArtifactError, load_artifact


@pytest.mark.parametrize("mintable,name", [(False, "StandardERC20"), (True, "MintableERC20")])
def test_bundled_erc20_artifacts(mintable, name):
    artifact = load_artifact("erc20", mintable)
    assert artifact.name == name
    assert artifact.bytecode.startswith("0x") and len(artifact.bytecode) > 2
    constructor = next(f for f in artifact.abi if f["type"] == "constructor")
    assert [p["type"] for p in constructor["inputs"]] == ["string", "string", "uint256", "uint8"]


def test_mintable_artifact_exposes_mint():
    artifact = load_artifact("erc20", True)
    assert any(f.get("name") == "mint" for f in artifact.abi)


def test_artifacts_dir_takes_precedence(tmp_path):
    payload = {
        "contractName": "SimpleERC721",
        "abi": ["constructor(string name, string symbol)"],
        "bytecode": {"object": "6080604052"},
    }
    (tmp_path / "SimpleERC721.json").write_text(json.dumps(payload), encoding="utf-8")
    artifact = load_artifact("erc721", False, artifacts_dir=str(tmp_path))
    assert artifact.name == "SimpleERC721"
    assert artifact.bytecode == "0x6080604052"


def test_missing_erc721_artifact(tmp_path):
    with pytest.raises(ContractArtifactError, match="ROOTSTOCK_ARTIFACTS_DIR"):
        load_artifact("erc721", True, artifacts_dir=str(tmp_path))


def test_malformed_artifacts(tmp_path):
    (tmp_path / "StandardERC20.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ContractArtifactError, match="Could not read"):
        load_artifact("erc20", False, artifacts_dir=str(tmp_path))

    (tmp_path / "MintableERC20.json").write_text(json.dumps({"abi": [], "bytecode": "0x"}), encoding="utf-8")
    with pytest.raises(ContractArtifactError, match="no bytecode"):
        load_artifact("erc20", True, artifacts_dir=str(tmp_path))

    with pytest.raises(ContractArtifactError, match="Unknown contract template"):
        load_artifact("erc1155", False)
