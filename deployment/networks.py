import os
import typing
from typing import NamedTuple, Optional

from eth_utils import add_0x_prefix, decode_hex

from deployment.constants import (
    ETHERSCAN_API_KEY_ENVVAR,
    HOLESKY,
    LOCAL,
    LOCAL_NETWORK_CHOICE,
    MAINNET,
    MATIC,
    MATIC_GAS_LIMIT,
    MATIC_GAS_PRICE,
    MATIC_MUMBAI_RPC_URL,
    PRIVATE_KEY_ENVVAR,
    RPC_URL_ENVVAR,
    SUPPORTED_NETWORKS,
    TESTNET,
)


class UnknownNetwork(ValueError):
    pass


class MissingEnvironmentVariable(ValueError):
    def __init__(self, envvar: str, network_name: str):
        self.envvar = envvar
        super().__init__(f"{envvar} is not set; it is required for the '{network_name}' network.")


class InvalidPrivateKey(ValueError):
    pass


class NetworkSpec(NamedTuple):
    """Static description of a network; credentials are resolved by load_network."""

    url: Optional[str] = None
    uses_rpc_url: bool = False
    uses_private_key: bool = True
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None


NETWORK_SPECS = {
    LOCAL: NetworkSpec(uses_private_key=False),
    MAINNET: NetworkSpec(uses_rpc_url=True),
    HOLESKY: NetworkSpec(uses_rpc_url=True),
    TESTNET: NetworkSpec(uses_rpc_url=True),
    MATIC: NetworkSpec(
        url=MATIC_MUMBAI_RPC_URL,
        gas_limit=MATIC_GAS_LIMIT,
        gas_price=MATIC_GAS_PRICE,
    ),
}


class NetworkDefinition(NamedTuple):
    name: str
    url: Optional[str] = None
    private_key: Optional[str] = None
    etherscan_api_key: Optional[str] = None
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None

    @property
    def is_local(self) -> bool:
        return self.url is None

    @property
    def choice(self) -> str:
        """The ape network choice used to connect to this network."""
        return LOCAL_NETWORK_CHOICE if self.is_local else self.url

    def transaction_kwargs(self) -> typing.Dict[str, int]:
        kwargs = dict()
        if self.gas_limit is not None:
            kwargs["gas_limit"] = self.gas_limit
        if self.gas_price is not None:
            kwargs["gas_price"] = self.gas_price
        return kwargs


def require_envvar(environ: typing.Mapping[str, str], envvar: str, network_name: str) -> str:
    value = environ.get(envvar, "").strip()
    if not value:
        raise MissingEnvironmentVariable(envvar=envvar, network_name=network_name)
    return value


def normalize_private_key(private_key: str) -> str:
    """Returns the 0x-prefixed form of a hex private key."""
    private_key = add_0x_prefix(private_key.strip())
    try:
        key_bytes = decode_hex(private_key)
    except ValueError:
        raise InvalidPrivateKey(f"{PRIVATE_KEY_ENVVAR} is not valid hex.")
    if len(key_bytes) != 32:
        raise InvalidPrivateKey(
            f"{PRIVATE_KEY_ENVVAR} must be 32 bytes long, got {len(key_bytes)} bytes."
        )
    return private_key


def load_network(
    name: str, verify: bool = False, environ: Optional[typing.Mapping[str, str]] = None
) -> NetworkDefinition:
    """
    Builds the definition of a single network from the environment.
    Only the credentials used by the requested network are read.
    """
    if name not in NETWORK_SPECS:
        raise UnknownNetwork(
            f"Unknown network '{name}'; expected one of {', '.join(SUPPORTED_NETWORKS)}."
        )
    environ = os.environ if environ is None else environ
    spec = NETWORK_SPECS[name]

    url = spec.url
    if spec.uses_rpc_url:
        url = require_envvar(environ, RPC_URL_ENVVAR, name)

    private_key = None
    if spec.uses_private_key:
        private_key = normalize_private_key(require_envvar(environ, PRIVATE_KEY_ENVVAR, name))

    etherscan_api_key = None
    if verify and url is not None:
        etherscan_api_key = require_envvar(environ, ETHERSCAN_API_KEY_ENVVAR, name)

    return NetworkDefinition(
        name=name,
        url=url,
        private_key=private_key,
        etherscan_api_key=etherscan_api_key,
        gas_limit=spec.gas_limit,
        gas_price=spec.gas_price,
    )
