import os
import typing
from typing import Optional

import click
from ape import accounts
from ape.api import AccountAPI
from ape_accounts import import_account_from_private_key
from eth_account import Account

from deployment.constants import DEPLOYER_ACCOUNT_ALIAS, DEPLOYER_PASSPHRASE_ENVVAR
from deployment.networks import NetworkDefinition, require_envvar


class AccountMismatch(ValueError):
    pass


def get_deployer_account(
    network: NetworkDefinition,
    autosign: bool = False,
    environ: Optional[typing.Mapping[str, str]] = None,
) -> AccountAPI:
    """
    Returns the account that signs the deployment.

    Live networks use the ape keystore account stored under the deployer alias;
    on first use it is imported from the network's private key.
    """
    if network.is_local:
        return accounts.test_accounts[0]

    environ = os.environ if environ is None else environ
    passphrase = require_envvar(environ, DEPLOYER_PASSPHRASE_ENVVAR, network.name)
    expected_address = Account.from_key(network.private_key).address

    if DEPLOYER_ACCOUNT_ALIAS in list(accounts.aliases):
        account = accounts.load(DEPLOYER_ACCOUNT_ALIAS)
    else:
        account = import_account_from_private_key(
            DEPLOYER_ACCOUNT_ALIAS, passphrase, network.private_key
        )
        click.echo(f"Account imported: {account.address}", err=True)

    if account.address != expected_address:
        raise AccountMismatch(
            f"Keystore account '{DEPLOYER_ACCOUNT_ALIAS}' ({account.address}) does not match "
            f"the address of the configured private key ({expected_address})."
        )

    if autosign:
        account.set_autosign(True, passphrase=passphrase)
    return account
