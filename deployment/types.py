import click
from eth_utils import (
    is_checksum_address,
    is_checksum_formatted_address,
    is_hex_address,
    to_checksum_address,
)


class ChecksumAddress(click.ParamType):
    """
    An ethereum address. All-lowercase or all-uppercase input is checksummed;
    mixed-case input must already carry a valid EIP-55 checksum.
    """

    name = "checksum_address"

    def convert(self, value, param, ctx):
        if not is_hex_address(value):
            self.fail(f"{value} is not a valid ethereum address", param, ctx)
        if is_checksum_formatted_address(value) and not is_checksum_address(value):
            self.fail(f"{value} has an invalid checksum", param, ctx)
        return to_checksum_address(value)
