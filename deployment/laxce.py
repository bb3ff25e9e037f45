from typing import NamedTuple

import click
from ape.contracts.base import ContractContainer, ContractInstance

from deployment.constants import CROWDSALE_RATE, INITIALIZER, USDT_ADDRESS, UUPS
from deployment.params import Deployer


class LaxceDeployment(NamedTuple):
    token: ContractInstance
    crowdsale: ContractInstance


def deploy_laxce(
    deployer: Deployer,
    token_container: ContractContainer,
    crowdsale_container: ContractContainer,
    rate: str = CROWDSALE_RATE,
    usdt_address: str = USDT_ADDRESS,
) -> LaxceDeployment:
    """
    Deploys the LAXCE token and its crowdsale behind UUPS proxies.

    The crowdsale is initialized with the rate, the token proxy address and
    the USDT address, so it is only deployed once the token proxy exists.
    """
    token = deployer.deploy_proxy(token_container, initializer=INITIALIZER, kind=UUPS)
    click.echo(f"LAXCE Token Contract Address: {token.address}")

    crowdsale = deployer.deploy_proxy(
        crowdsale_container,
        rate,
        token.address,
        usdt_address,
        initializer=INITIALIZER,
        kind=UUPS,
    )
    click.echo(f"ESTIA Crowdsale Contract Address: {crowdsale.address}")

    return LaxceDeployment(token=token, crowdsale=crowdsale)
