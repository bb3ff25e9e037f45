import sys
import typing

import click
from ape.utils import ZERO_ADDRESS


def _ask(question: str) -> None:
    """
    Writes a Y/N question to stderr and reads the answer from stdin.
    Only "n" (or a closed stdin) aborts the deployment.
    """
    click.echo(f"{question} Y/N? ", nl=False, err=True)
    try:
        # no prompt argument; input() would write it to stdout
        answer = input()
    except EOFError:
        answer = "n"
    if answer.strip().lower() == "n":
        click.echo("\nAborting deployment!", err=True)
        sys.exit(1)


def _continue() -> None:
    _ask("Continue")


def _confirm_deployment(contract_name: str) -> None:
    _ask(f"Deploy {contract_name}")


def _confirm_resolution(resolved_params: typing.Mapping[str, typing.Any], contract_name: str) -> None:
    """Lists the resolved parameters of a deployment and asks for confirmation."""
    if not resolved_params:
        click.echo(f"\n(i) No parameters for {contract_name}", err=True)
    else:
        click.echo(f"\nParameters for {contract_name}", err=True)
        for name, value in resolved_params.items():
            click.echo(f"\t{name}={value}", err=True)

    _confirm_deployment(contract_name)
    if ZERO_ADDRESS in resolved_params.values():
        _ask("Zero address detected in the parameters; continue")
