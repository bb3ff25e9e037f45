from pathlib import Path

import click

from deployment.constants import (
    DEFAULT_NETWORK,
    LAXCE_CROWDSALE,
    LAXCE_TOKEN,
    LIVE_NETWORKS,
    SUPPORTED_NETWORKS,
    USDT_ADDRESS,
)
from deployment.types import ChecksumAddress

network_name_option = click.option(
    "--network-name",
    "-n",
    help="Deployment network, as configured from the environment.",
    type=click.Choice(SUPPORTED_NETWORKS),
    default=DEFAULT_NETWORK,
    show_default=True,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Publish deployed contracts to the block explorer.",
    default=False,
    show_default=True,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without prompting for confirmation.",
    is_flag=True,
    default=False,
)

usdt_address_option = click.option(
    "--usdt-address",
    "-u",
    help="Address of the USDT token accepted by the crowdsale.",
    type=ChecksumAddress(),
    default=USDT_ADDRESS,
    show_default=True,
)

live_network_name_option = click.option(
    "--network-name",
    "-n",
    help="Live deployment network, as configured from the environment.",
    type=click.Choice(LIVE_NETWORKS),
    default=DEFAULT_NETWORK,
    show_default=True,
)

contract_name_option = click.option(
    "--contract-name",
    "-c",
    "contract_names",
    help="Contract to verify; repeat for several.",
    type=click.Choice([LAXCE_TOKEN, LAXCE_CROWDSALE]),
    multiple=True,
    default=[LAXCE_TOKEN, LAXCE_CROWDSALE],
    show_default=True,
)

registry_filepath_option = click.option(
    "--registry-filepath",
    "-f",
    help="Registry to read instead of the network's own.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
)
