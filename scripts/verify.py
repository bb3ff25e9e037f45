#!/usr/bin/python3
import sys
import traceback
from pathlib import Path
from typing import List, Optional, Sequence

import click
from ape import networks
from ape.contracts import ContractInstance
from dotenv import load_dotenv

from deployment.networks import load_network
from deployment.options import (
    contract_name_option,
    live_network_name_option,
    registry_filepath_option,
)
from deployment.registry import registered_contracts
from deployment.utils import (
    check_etherscan_plugin,
    get_contract_container,
    registry_filepath_for_network,
    verify_contracts,
)


def verify(
    network_name: str, contract_names: Sequence[str], registry_filepath: Optional[Path] = None
) -> List[ContractInstance]:
    network = load_network(network_name, verify=True)
    check_etherscan_plugin(network)
    registry_filepath = registry_filepath or registry_filepath_for_network(network)

    with networks.parse_network_choice(network.choice) as provider:
        entries = registered_contracts(
            registry_filepath, chain_id=provider.chain_id, names=contract_names
        )

        contracts = list()
        for name, entry in entries.items():
            # the registry records proxy addresses; the source belongs to the implementation
            address = entry.address
            proxy_info = provider.network.ecosystem.get_proxy_info(address)
            if proxy_info:
                click.echo(f"(i) {name} proxy at {address} targets {proxy_info.target}.", err=True)
                address = proxy_info.target
            contracts.append(get_contract_container(name).at(address))

        verify_contracts(contracts)

    return contracts


@click.command()
@live_network_name_option
@contract_name_option
@registry_filepath_option
def cli(network_name, contract_names, registry_filepath):
    """
    Publishes the sources of the deployed LAXCE contracts to the block explorer.

    ape run verify --network-name holesky
    """
    load_dotenv(override=True)
    try:
        verify(
            network_name=network_name,
            contract_names=contract_names,
            registry_filepath=registry_filepath,
        )
    except Exception:
        click.echo(traceback.format_exc(), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
