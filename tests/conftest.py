from types import SimpleNamespace

import pytest
from eth_utils import to_checksum_address

from deployment.constants import LAXCE_CROWDSALE, LAXCE_TOKEN
from deployment.networks import NetworkDefinition

# well-known development key (first account of the "test test ... junk" mnemonic)
DEV_PRIVATE_KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

LOCAL_CHAIN_ID = 1337


def make_address(n: int) -> str:
    return to_checksum_address(f"0x{n:040x}")


def method_abi(name, *inputs):
    return SimpleNamespace(
        name=name,
        inputs=[SimpleNamespace(name=input_name, type=input_type) for input_name, input_type in inputs],
    )


UUPS_METHODS = [
    method_abi("proxiableUUID"),
    method_abi("upgradeToAndCall", ("newImplementation", "address"), ("data", "bytes")),
]


class FakeMethod:
    def __init__(self, name):
        self.name = name
        self.encoded = []

    def encode_input(self, *args):
        self.encoded.append(args)
        return f"{self.name}{args}".encode()


class FakeInstance:
    def __init__(self, container, address, receipt=None):
        self.container = container
        self.contract_type = container.contract_type
        self.address = address
        self.receipt = receipt
        self.initialize = FakeMethod("initialize")


class FakeContainer:
    def __init__(self, name, methods=None):
        self.contract_type = SimpleNamespace(name=name, methods=methods or [], abi=[])
        self.wrapped = []

    def at(self, address):
        instance = FakeInstance(self, address)
        self.wrapped.append(instance)
        return instance


class FakeReceipt:
    def __init__(self, txn_hash, sender, block_number):
        self.chain_id = LOCAL_CHAIN_ID
        self.txn_hash = txn_hash
        self.block_number = block_number
        self.transaction = SimpleNamespace(sender=sender)


class FakeAccount:
    """Records deployments and hands out sequential addresses."""

    def __init__(self, address=DEV_ADDRESS):
        self.address = address
        self.deployments = []

    def deploy(self, container, *params, **kwargs):
        number = len(self.deployments) + 1
        receipt = FakeReceipt(
            txn_hash=f"0x{number:064x}", sender=self.address, block_number=number
        )
        instance = FakeInstance(container, make_address(0xA000 + number), receipt=receipt)
        self.deployments.append((container.contract_type.name, params, kwargs, instance))
        return instance


@pytest.fixture
def account():
    return FakeAccount()


@pytest.fixture
def local_network():
    return NetworkDefinition(name="local")


@pytest.fixture
def token_container():
    return FakeContainer(LAXCE_TOKEN, methods=[method_abi("initialize"), *UUPS_METHODS])


@pytest.fixture
def crowdsale_container():
    initializer = method_abi(
        "initialize", ("_rate", "uint256"), ("_token", "address"), ("_usdt", "address")
    )
    return FakeContainer(LAXCE_CROWDSALE, methods=[initializer, *UUPS_METHODS])


@pytest.fixture
def proxy_containers(monkeypatch):
    containers = {
        "uups": FakeContainer("ERC1967Proxy"),
        "transparent": FakeContainer("TransparentUpgradeableProxy"),
    }
    monkeypatch.setattr("deployment.params.get_proxy_container", lambda kind: containers[kind])
    return containers


@pytest.fixture
def registry_filepath(tmp_path):
    return tmp_path / "artifacts" / "local.json"
