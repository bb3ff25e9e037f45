from contextlib import nullcontext
from types import SimpleNamespace

import pytest
from click.testing import CliRunner

from deployment.registry import RegistryEntry, write_registry
from scripts.verify import cli
from tests.conftest import DEV_PRIVATE_KEY, make_address

HOLESKY_CHAIN_ID = 17000

TOKEN_PROXY = make_address(0xA002)
CROWDSALE_PROXY = make_address(0xA004)
IMPLEMENTATIONS = {
    TOKEN_PROXY: make_address(0xA001),
    CROWDSALE_PROXY: make_address(0xA003),
}


class FakeEcosystem:
    def get_proxy_info(self, address):
        target = IMPLEMENTATIONS.get(address)
        return SimpleNamespace(target=target) if target else None


class FakeNetworkManager:
    def __init__(self):
        self.choices = []
        self.provider = SimpleNamespace(
            chain_id=HOLESKY_CHAIN_ID, network=SimpleNamespace(ecosystem=FakeEcosystem())
        )

    def parse_network_choice(self, choice):
        self.choices.append(choice)
        return nullcontext(self.provider)


def _entry(chain_id, name, address):
    return RegistryEntry(
        chain_id=chain_id,
        name=name,
        address=address,
        abi=[],
        tx_hash="0x" + "ab" * 32,
        block_number=1,
        deployer=make_address(1),
    )


@pytest.fixture
def runner():
    return CliRunner(mix_stderr=False)


@pytest.fixture
def registry_filepath(tmp_path):
    filepath = tmp_path / "holesky.json"
    write_registry(
        [
            _entry(HOLESKY_CHAIN_ID, "Laxce", TOKEN_PROXY),
            _entry(HOLESKY_CHAIN_ID, "LaxceCrowdSale", CROWDSALE_PROXY),
            _entry(1, "Laxce", make_address(0xDEAD)),
        ],
        filepath,
    )
    return filepath


@pytest.fixture
def verified(monkeypatch, token_container, crowdsale_container):
    verified = []
    containers = {"Laxce": token_container, "LaxceCrowdSale": crowdsale_container}
    monkeypatch.setattr("scripts.verify.get_contract_container", lambda name: containers[name])
    monkeypatch.setattr("scripts.verify.verify_contracts", lambda contracts: verified.extend(contracts))
    monkeypatch.setattr("scripts.verify.check_etherscan_plugin", lambda network: None)
    monkeypatch.setattr("scripts.verify.load_dotenv", lambda **kwargs: False)
    return verified


@pytest.fixture
def network_manager(monkeypatch):
    manager = FakeNetworkManager()
    monkeypatch.setattr("scripts.verify.networks", manager)
    monkeypatch.setenv("RPC_URL", "https://rpc.example.org")
    monkeypatch.setenv("PRIVATE_KEY", DEV_PRIVATE_KEY)
    monkeypatch.setenv("ETHERSCAN_API_KEY", "explorer-key")
    return manager


def test_implementations_are_verified(runner, network_manager, verified, registry_filepath):
    result = runner.invoke(
        cli, ["--network-name", "holesky", "--registry-filepath", str(registry_filepath)]
    )

    assert result.exit_code == 0, result.stderr
    assert [(c.contract_type.name, c.address) for c in verified] == [
        ("Laxce", IMPLEMENTATIONS[TOKEN_PROXY]),
        ("LaxceCrowdSale", IMPLEMENTATIONS[CROWDSALE_PROXY]),
    ]
    assert f"targets {IMPLEMENTATIONS[TOKEN_PROXY]}" in result.stderr


def test_single_contract(runner, network_manager, verified, registry_filepath):
    result = runner.invoke(
        cli,
        [
            "--network-name",
            "holesky",
            "--registry-filepath",
            str(registry_filepath),
            "--contract-name",
            "LaxceCrowdSale",
        ],
    )

    assert result.exit_code == 0, result.stderr
    assert [c.address for c in verified] == [IMPLEMENTATIONS[CROWDSALE_PROXY]]


def test_unregistered_contract(runner, network_manager, verified, tmp_path):
    filepath = tmp_path / "holesky.json"
    write_registry([_entry(HOLESKY_CHAIN_ID, "Laxce", TOKEN_PROXY)], filepath)

    result = runner.invoke(
        cli, ["--network-name", "holesky", "--registry-filepath", str(filepath)]
    )

    assert result.exit_code == 1
    assert "ContractNotRegistered" in result.stderr
    assert "LaxceCrowdSale not registered for chain 17000" in result.stderr
    assert verified == []


def test_local_network_is_rejected(runner, network_manager, verified):
    result = runner.invoke(cli, ["--network-name", "local"])
    assert result.exit_code == 2
    assert network_manager.choices == []


def test_missing_explorer_key(monkeypatch, runner, network_manager, verified, registry_filepath):
    monkeypatch.delenv("ETHERSCAN_API_KEY")
    result = runner.invoke(
        cli, ["--network-name", "holesky", "--registry-filepath", str(registry_filepath)]
    )

    assert result.exit_code == 1
    assert "ETHERSCAN_API_KEY" in result.stderr
    assert network_manager.choices == []
