import json
import re
from pathlib import Path
from typing import List, NamedTuple

import click
import yaml
from ape import networks, project
from ape.contracts import ContractContainer, ContractInstance

from deployment.constants import (
    APE_CONFIG_FILEPATH,
    ARTIFACTS_DIR,
    OZ_DEPENDENCY_NAME,
    OZ_DEPENDENCY_VERSION,
    SUPPORTED_PROXY_KINDS,
    TRANSPARENT,
    UUPS,
)
from deployment.networks import NetworkDefinition

PROXY_CONTRACT_NAMES = {
    UUPS: "ERC1967Proxy",
    TRANSPARENT: "TransparentUpgradeableProxy",
}


class InvalidCompilerConfig(ValueError):
    pass


class CompilerConfig(NamedTuple):
    version: str
    optimize: bool
    optimization_runs: int


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def load_compiler_config(config_filepath: Path = APE_CONFIG_FILEPATH) -> CompilerConfig:
    """
    Reads the solidity compiler settings from ape-config.yaml.

    The compiler version must be pinned exactly and the optimizer settings
    must be explicit, so that deployed bytecode can be reproduced for
    block explorer verification.
    """
    config = _load_yaml(config_filepath) or dict()
    solidity = config.get("solidity")
    if not solidity:
        raise InvalidCompilerConfig(f"No solidity section in {config_filepath}.")

    missing = [key for key in CompilerConfig._fields if key not in solidity]
    if missing:
        raise InvalidCompilerConfig(
            f"solidity.{missing[0]} is not set in {config_filepath}."
        )

    version = str(solidity["version"])
    if not re.fullmatch(r"\d+\.\d+\.\d+", version):
        raise InvalidCompilerConfig(
            f"solidity.version in {config_filepath} must be an exact version; got '{version}'."
        )
    optimize = solidity["optimize"]
    if not isinstance(optimize, bool):
        raise InvalidCompilerConfig(
            f"solidity.optimize in {config_filepath} must be true or false; got '{optimize}'."
        )
    runs = solidity["optimization_runs"]
    if isinstance(runs, bool) or not isinstance(runs, int) or runs < 1:
        raise InvalidCompilerConfig(
            f"solidity.optimization_runs in {config_filepath} must be a positive integer; "
            f"got '{runs}'."
        )

    return CompilerConfig(version=version, optimize=optimize, optimization_runs=runs)


def registry_filepath_for_network(network: NetworkDefinition) -> Path:
    return ARTIFACTS_DIR / f"{network.name}.json"


def check_etherscan_plugin(network: NetworkDefinition) -> None:
    """
    Checks that the ape-etherscan plugin is installed and that
    the explorer API key was provided for a live network.
    """
    try:
        import ape_etherscan  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to verify contracts.")
    if not network.etherscan_api_key:
        raise ValueError(f"No explorer API key configured for the '{network.name}' network.")


def verify_contracts(contracts: List[ContractInstance]) -> None:
    explorer = networks.provider.network.explorer
    for instance in contracts:
        click.echo(f"(i) Verifying {instance.contract_type.name}...", err=True)
        explorer.publish_contract(instance.address)


def get_proxy_container(kind: str) -> ContractContainer:
    """Returns the OpenZeppelin proxy contract used for a given proxy kind."""
    if kind not in SUPPORTED_PROXY_KINDS:
        raise ValueError(
            f"Unsupported proxy kind '{kind}'; expected one of {', '.join(SUPPORTED_PROXY_KINDS)}."
        )
    oz_dependency = project.dependencies[OZ_DEPENDENCY_NAME][OZ_DEPENDENCY_VERSION]
    return getattr(oz_dependency, PROXY_CONTRACT_NAMES[kind])


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container
