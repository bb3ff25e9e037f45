import typing
from collections import OrderedDict
from pathlib import Path
from typing import Any, List, Optional

import click
from ape.api import AccountAPI
from ape.contracts.base import ContractContainer, ContractInstance
from ethpm_types import MethodABI
from web3.auto import w3

from deployment.confirm import _confirm_resolution, _continue
from deployment.constants import INITIALIZER, SUPPORTED_PROXY_KINDS, TRANSPARENT, UUPS
from deployment.networks import NetworkDefinition
from deployment.registry import registry_from_ape_deployments
from deployment.utils import (
    check_etherscan_plugin,
    get_proxy_container,
    registry_filepath_for_network,
    verify_contracts,
)

UUPS_REQUIRED_METHODS = ("proxiableUUID", "upgradeToAndCall")


def _normalize_arg(abi_type: str, value: Any) -> Any:
    """Decimal strings are accepted for integer parameters."""
    if abi_type.startswith(("uint", "int")) and isinstance(value, str) and value.isdecimal():
        return int(value)
    return value


def _validate_method_args(
    method_abis: List[MethodABI], args: typing.Sequence[Any]
) -> typing.Dict[str, Any]:
    """Validates the transaction arguments against the function ABI."""
    if len(method_abis) == 0:
        raise ValueError("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = OrderedDict()
        for position, (arg, abi_input) in enumerate(zip(args, abi.inputs)):
            arg = _normalize_arg(abi_input.type, arg)
            if not w3.is_encodable(abi_input.type, arg):
                break
            # unnamed inputs are keyed by position
            named_args[abi_input.name or f"_{position}"] = arg
        else:
            return named_args
    raise ValueError(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


def _method_abis(container: ContractContainer, method_name: str) -> List[MethodABI]:
    return [abi for abi in container.contract_type.methods if abi.name == method_name]


class Transactor:
    """
    Represents an ape account plus confirmation of the transactions it sends.
    """

    def __init__(self, account: AccountAPI, autosign: bool = False):
        self._account = account
        if autosign:
            click.echo(
                "WARNING: Autosign is enabled. Transactions will be signed automatically.",
                err=True,
            )
        self._autosign = autosign

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account


class Deployer(Transactor):
    """
    Represents an ape account plus the network it deploys to,
    and the validated/annotated deployment of proxied contracts.
    """

    class InvalidProxy(ValueError):
        """Raised when a contract cannot be deployed behind the requested proxy"""

    def __init__(
        self,
        account: AccountAPI,
        network: NetworkDefinition,
        verify: bool = False,
        autosign: bool = False,
        registry_filepath: Optional[Path] = None,
    ):
        super().__init__(account, autosign)
        self.network = network
        if verify and network.is_local:
            click.echo("(i) No block explorer on the local network; skipping verification.", err=True)
            verify = False
        self.verify = verify
        self.registry_filepath = registry_filepath or registry_filepath_for_network(network)
        self.implementations: typing.Dict[str, ContractInstance] = dict()
        self.proxies: typing.Dict[str, ContractInstance] = dict()

        if verify:
            check_etherscan_plugin(network)

        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    def _get_kwargs(self) -> typing.Dict[str, Any]:
        """Returns the deployment kwargs."""
        return self.network.transaction_kwargs()

    def deploy_proxy(
        self,
        container: ContractContainer,
        *args,
        initializer: str = INITIALIZER,
        kind: str = UUPS,
    ) -> ContractInstance:
        """
        Deploys an implementation contract and a proxy initialized with `args`,
        returning the proxy address typed as the implementation.
        """
        contract_name = container.contract_type.name
        self._validate_proxy_kind(container, kind)

        initializer_abis = _method_abis(container, initializer)
        if not initializer_abis:
            raise self.InvalidProxy(f"{contract_name} has no initializer named '{initializer}'.")
        named_args = _validate_method_args(method_abis=initializer_abis, args=args)

        click.echo(f"\nDeploying {contract_name} implementation.", err=True)
        implementation = self._deploy_contract(container, OrderedDict())

        if not self._autosign:
            _confirm_resolution(named_args, f"{contract_name}.{initializer}")
        initializer_handler = getattr(implementation, initializer)
        data = initializer_handler.encode_input(*named_args.values())

        proxy_container = get_proxy_container(kind)
        proxy_params = self._proxy_parameters(kind, implementation, data)
        click.echo(
            f"\nDeploying {proxy_container.contract_type.name} ({kind}) "
            f"contract to proxy {contract_name}.",
            err=True,
        )
        proxy_contract = self._deploy_contract(proxy_container, proxy_params)
        click.echo(
            f"\nWrapping {contract_name} into {proxy_contract.contract_type.name} "
            f"at {proxy_contract.address}.",
            err=True,
        )
        self.implementations[proxy_contract.address] = implementation
        self.proxies[proxy_contract.address] = proxy_contract
        return container.at(proxy_contract.address)

    def _validate_proxy_kind(self, container: ContractContainer, kind: str) -> None:
        if kind not in SUPPORTED_PROXY_KINDS:
            raise self.InvalidProxy(
                f"Unsupported proxy kind '{kind}'; "
                f"expected one of {', '.join(SUPPORTED_PROXY_KINDS)}."
            )
        if kind != UUPS:
            return

        # UUPS implementations carry their own upgrade logic
        method_names = {abi.name for abi in container.contract_type.methods}
        missing = [name for name in UUPS_REQUIRED_METHODS if name not in method_names]
        if missing:
            raise self.InvalidProxy(
                f"{container.contract_type.name} is not UUPS upgradeable; "
                f"missing {', '.join(missing)}."
            )

    def _proxy_parameters(
        self, kind: str, implementation: ContractInstance, data: bytes
    ) -> OrderedDict:
        if kind == TRANSPARENT:
            return OrderedDict(
                {
                    "_logic": implementation.address,
                    "initialOwner": self.get_account().address,
                    "_data": data,
                }
            )
        return OrderedDict({"implementation": implementation.address, "_data": data})

    def _deploy_contract(
        self, container: ContractContainer, resolved_params: OrderedDict
    ) -> ContractInstance:
        contract_name = container.contract_type.name
        if not self._autosign:
            _confirm_resolution(resolved_params, contract_name)
        deployment_params = [container, *resolved_params.values()]
        kwargs = self._get_kwargs()

        deployer_account = self.get_account()
        return deployer_account.deploy(*deployment_params, **kwargs)

    def finalize(self, deployments: List[ContractInstance]) -> None:
        """
        Publishes the deployments to the registry and optionally to block explorers.
        """
        # proxied instances are wrapped with .at(), so their receipt is the proxy's
        receipts = {
            address: proxy_contract.receipt for address, proxy_contract in self.proxies.items()
        }
        registry_from_ape_deployments(
            deployments=deployments,
            output_filepath=self.registry_filepath,
            receipts=receipts,
        )
        if self.verify:
            contracts = list()
            for instance in deployments:
                if instance.address in self.proxies:
                    contracts.append(self.implementations[instance.address])
                    contracts.append(self.proxies[instance.address])
                else:
                    contracts.append(instance)
            verify_contracts(contracts=contracts)

    def _print_deployment_info(self):
        click.echo(
            "\n".join(
                [
                    f"Account: {self.get_account().address}",
                    f"Network: {self.network.name}",
                    f"Registry: {self.registry_filepath}",
                    f"Verify: {self.verify}",
                    f"Gas Limit: {self.network.gas_limit or 'auto'}",
                    f"Gas Price: {self.network.gas_price or 'auto'}",
                ]
            ),
            err=True,
        )
