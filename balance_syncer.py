"""
Sync balances of the addresses listed in a CSV file.

Reads the ``address`` column of the input file, fetches the balance of every
address and writes ``address,balance`` rows to the output file. The balance is
the one of the first tracked token of the network, or the native balance when
the network tracks no token. The first failing row aborts the run.
"""
import asyncio
import csv
import logging
from pathlib import Path

import click

from core.container import create_container
from wallet.entities import BalanceRecord, NetworkConfig
from wallet.networks import NetworkRegistry, PRESET_NETWORKS
from wallet.services import Web3Service

ACTIVE_NETWORK = "active"


def reported_balance(record: BalanceRecord, network: NetworkConfig) -> str:
    if network.tokens_addresses:
        return record.token_balances[network.tokens_addresses[0]]
    return record.native_balance


async def sync_balances(
    web3_service: Web3Service,
    network: NetworkConfig,
    input_path: Path,
    output_path: Path,
    logger: logging.Logger
) -> int:
    """
    Write the balance of every input address to the output CSV.

    Parameters
    ----------
    web3_service : Web3Service
        Service used for balance queries
    network : NetworkConfig
        Network to query
    input_path : Path
        CSV file with an ``address`` column
    output_path : Path
        CSV file to create
    logger : logging.Logger
        Logger instance

    Returns
    -------
    int
        Number of processed addresses
    """
    processed = 0
    with open(input_path, newline="", encoding="utf-8") as src, \
            open(output_path, "w", newline="", encoding="utf-8") as dst:
        reader = csv.DictReader(src)
        if not reader.fieldnames or "address" not in reader.fieldnames:
            raise ValueError(f"{input_path} has no 'address' column")

        writer = csv.writer(dst)
        writer.writerow(["address", "balance"])
        for row in reader:
            address = (row["address"] or "").strip()
            if not address:
                continue
            record = await web3_service.get_balances(network, address)
            balance = reported_balance(record, network)
            writer.writerow([address, balance])
            processed += 1
            logger.info(f"Processed {address} - Balance: {balance}")

    logger.info(f"Balance sync completed! {processed} results written to {output_path}")
    return processed


async def run(input_path: Path, output_path: Path, network_name: str) -> int:
    container = create_container()
    try:
        logger = await container.get(logging.Logger, component="logger")
        web3_service = await container.get(Web3Service, component="wallet")
        if network_name == ACTIVE_NETWORK:
            registry = await container.get(NetworkRegistry, component="wallet")
            network = await registry.get_network()
        else:
            network = PRESET_NETWORKS[network_name]
        logger.info(f"network: {network.alias} ({network.rpc_url})")
        return await sync_balances(web3_service, network, input_path, output_path, logger)
    finally:
        await container.close()


@click.command(help="Writes the balance of every address of a CSV file to another CSV file.")
@click.option(
    "--input",
    "input_path",
    default="holders.csv",
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="CSV file with an address column.",
)
@click.option(
    "--output",
    "output_path",
    default="holders_with_balances.csv",
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="CSV file to write.",
)
@click.option(
    "--network",
    "network_name",
    default="map",
    show_default=True,
    type=click.Choice([*PRESET_NETWORKS, ACTIVE_NETWORK]),
    help=f"Preset network, or '{ACTIVE_NETWORK}' for the network stored in the registry.",
)
def main(input_path: Path, output_path: Path, network_name: str) -> None:
    try:
        asyncio.run(run(input_path, output_path, network_name))
    except Exception as e:
        click.echo(f"Error processing addresses: {e}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
