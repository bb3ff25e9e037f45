import json
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

import click
from ape.api import ReceiptAPI
from ape.contracts import ContractInstance
from eth_typing import ABI, ChecksumAddress
from eth_utils import to_checksum_address

from deployment.utils import _load_json

ChainId = int
ContractName = str

# keys stored for each contract, below its chain id and name
ARTIFACT_FIELDS = ("address", "abi", "tx_hash", "block_number", "deployer")


class ContractNotRegistered(ValueError):
    pass


class RegistryEntry(NamedTuple):
    """A deployed contract, as recorded in the JSON registry of a network."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: str
    block_number: int
    deployer: str

    @classmethod
    def from_deployment(
        cls, instance: ContractInstance, receipt: Optional[ReceiptAPI] = None
    ) -> "RegistryEntry":
        # a proxy wrapped in its implementation's type has no receipt of its own
        receipt = receipt or instance.receipt
        return cls(
            chain_id=receipt.chain_id,
            name=instance.contract_type.name,
            address=to_checksum_address(instance.address),
            abi=[item.model_dump(mode="json", by_alias=True) for item in instance.contract_type.abi],
            tx_hash=receipt.txn_hash,
            block_number=receipt.block_number,
            deployer=receipt.transaction.sender,
        )

    @classmethod
    def from_artifact(cls, chain_id: str, name: ContractName, artifact: Dict) -> "RegistryEntry":
        return cls(
            chain_id=int(chain_id),
            name=name,
            **{field: artifact[field] for field in ARTIFACT_FIELDS},
        )

    def to_artifact(self) -> Dict:
        # sorted so that registries diff cleanly between deployments
        abi = sorted(self.abi, key=lambda item: (item["type"], item.get("name", "")))
        return {
            "address": self.address,
            "abi": abi,
            "tx_hash": self.tx_hash,
            "block_number": int(self.block_number),
            "deployer": self.deployer,
        }


def _registry_data(entries: Iterable[RegistryEntry]) -> Dict[str, Dict[ContractName, Dict]]:
    data = defaultdict(dict)
    for entry in sorted(entries, key=lambda entry: (str(entry.chain_id), entry.name)):
        data[str(entry.chain_id)][entry.name] = entry.to_artifact()
    return dict(data)


def read_registry(filepath: Path) -> List[RegistryEntry]:
    return [
        RegistryEntry.from_artifact(chain_id, name, artifact)
        for chain_id, contracts in _load_json(filepath).items()
        for name, artifact in contracts.items()
    ]


def write_registry(entries: List[RegistryEntry], filepath: Path) -> Path:
    """
    Writes registry entries to `filepath` and returns the path written.

    A registry for other chains is extended in place. When the file already
    holds one of the entries' chain ids, nothing is overwritten: the entries
    go to a sibling `<network>.unmerged.json` file instead.
    """
    if not entries:
        click.echo("(i) Nothing to register.", err=True)
        return filepath

    data = _registry_data(entries)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if filepath.exists():
        existing_data = _load_json(filepath)
        overlapping = sorted(set(existing_data) & set(data))
        if overlapping:
            filepath = filepath.with_suffix(".unmerged.json")
            click.echo(
                f"Registry already holds chain id(s) {', '.join(overlapping)}; "
                f"writing {filepath} instead.",
                err=True,
            )
        else:
            data = {**existing_data, **data}

    with open(filepath, "w") as file:
        json.dump(data, file, indent=4, separators=(",", ": "))
    return filepath


def registry_from_ape_deployments(
    deployments: List[ContractInstance],
    output_filepath: Path,
    receipts: Optional[Dict[str, ReceiptAPI]] = None,
) -> Path:
    """Records ape deployments; `receipts` maps addresses to their deployment receipts."""
    receipts = receipts or dict()
    entries = [
        RegistryEntry.from_deployment(instance, receipt=receipts.get(instance.address))
        for instance in deployments
    ]
    output_filepath = write_registry(entries=entries, filepath=output_filepath)
    click.echo(f"(i) Registry written to {output_filepath}!", err=True)
    return output_filepath


def registered_contracts(
    filepath: Path, chain_id: ChainId, names: Sequence[ContractName]
) -> Dict[ContractName, RegistryEntry]:
    """Returns the registry entries of `names` on `chain_id`, in the order given."""
    on_chain = {entry.name: entry for entry in read_registry(filepath) if entry.chain_id == chain_id}
    missing = [name for name in names if name not in on_chain]
    if missing:
        raise ContractNotRegistered(
            f"{', '.join(missing)} not registered for chain {chain_id} in {filepath}."
        )
    return {name: on_chain[name] for name in names}
