#!/usr/bin/python3
import sys
import traceback

import click
from ape import networks
from dotenv import load_dotenv

from deployment.accounts import get_deployer_account
from deployment.constants import LAXCE_CROWDSALE, LAXCE_TOKEN
from deployment.laxce import LaxceDeployment, deploy_laxce
from deployment.networks import load_network
from deployment.options import (
    autosign_option,
    network_name_option,
    usdt_address_option,
    verify_option,
)
from deployment.params import Deployer
from deployment.utils import get_contract_container, load_compiler_config


def deploy(network_name: str, verify: bool, autosign: bool, usdt_address: str) -> LaxceDeployment:
    network = load_network(network_name, verify=verify)
    compiler = load_compiler_config()
    click.echo(
        f"Compiler: solc {compiler.version} "
        f"(optimizer {'on' if compiler.optimize else 'off'}, {compiler.optimization_runs} runs)",
        err=True,
    )

    with networks.parse_network_choice(network.choice):
        account = get_deployer_account(network, autosign=autosign)
        deployer = Deployer(account=account, network=network, verify=verify, autosign=autosign)

        deployment = deploy_laxce(
            deployer,
            token_container=get_contract_container(LAXCE_TOKEN),
            crowdsale_container=get_contract_container(LAXCE_CROWDSALE),
            usdt_address=usdt_address,
        )
        deployer.finalize(deployments=list(deployment))

    return deployment


@click.command()
@network_name_option
@verify_option
@autosign_option
@usdt_address_option
def cli(network_name, verify, autosign, usdt_address):
    """
    Deploys the LAXCE token and the LAXCE crowdsale behind UUPS proxies.

    RPC_URL, PRIVATE_KEY and ETHERSCAN_API_KEY are read from the environment
    (or a .env file in the working directory).

    ape run deploy --network-name holesky --verify
    """
    load_dotenv(override=True)
    try:
        deploy(
            network_name=network_name,
            verify=verify,
            autosign=autosign,
            usdt_address=usdt_address,
        )
    except Exception:
        click.echo(traceback.format_exc(), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
