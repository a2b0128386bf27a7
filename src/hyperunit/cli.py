# src/hyperunit/cli.py
"""Console entry-points for the hyperunit CLI."""

from __future__ import annotations

import json
import logging
from typing import Optional

import typer

from hyperunit.client.sdk import HyperUnitSDK
from hyperunit.config import HyperUnitConfig, get_settings
from hyperunit.core.enums import Asset, Chain, Environment
from hyperunit.core.guardians import DEFAULT_GUARDIAN_REGISTRY
from hyperunit.core.models import GenerateAddressParams
from hyperunit.exceptions import HyperUnitError

app = typer.Typer(help="HyperUnit bridge client with guardian signature verification")


@app.callback()
def main(
    ctx: typer.Context,
    environment: Optional[Environment] = typer.Option(
        None, "--env", "-e", help="testnet or mainnet (default from HYPERUNIT_ENVIRONMENT)"
    ),
    log_level: Optional[str] = typer.Option(None, help="Logging level"),
) -> None:
    settings = get_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = HyperUnitConfig(environment=environment).resolve(settings)


def _sdk(ctx: typer.Context) -> HyperUnitSDK:
    return HyperUnitSDK(ctx.obj)


def _echo(model) -> None:
    typer.echo(model.model_dump_json(by_alias=True, indent=2))


def _fail(exc: HyperUnitError) -> None:
    typer.echo(f"error: {exc.message}" + (f" (HTTP {exc.status})" if exc.status else ""), err=True)
    raise typer.Exit(code=2)


# ---------------------------------------------------------------------- #
# generate
# ---------------------------------------------------------------------- #
@app.command()
def generate(
    ctx: typer.Context,
    src_chain: Chain = typer.Argument(...),
    dst_chain: Chain = typer.Argument(...),
    asset: Asset = typer.Argument(...),
    dst_addr: str = typer.Argument(...),
) -> None:
    """Generate an address and verify its guardian signatures.

    Exits with status 1 when the guardian quorum is not reached.
    """
    params = GenerateAddressParams(
        src_chain=src_chain, dst_chain=dst_chain, asset=asset, dst_addr=dst_addr
    )
    with _sdk(ctx) as sdk:
        try:
            response = sdk.generate_address_with_verification(params)
        except HyperUnitError as exc:
            _fail(exc)
    _echo(response.data)
    if not response.data.verification.success:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------- #
# read-only endpoints
# ---------------------------------------------------------------------- #
@app.command()
def operations(ctx: typer.Context, address: str = typer.Argument(...)) -> None:
    """List operations for an address."""
    with _sdk(ctx) as sdk:
        try:
            _echo(sdk.get_operations(address).data)
        except HyperUnitError as exc:
            _fail(exc)


@app.command()
def fees(ctx: typer.Context) -> None:
    """Show fee and processing time estimates."""
    with _sdk(ctx) as sdk:
        try:
            _echo(sdk.estimate_fees().data)
        except HyperUnitError as exc:
            _fail(exc)


@app.command()
def queue(ctx: typer.Context) -> None:
    """Show the withdrawal queue."""
    with _sdk(ctx) as sdk:
        try:
            _echo(sdk.get_withdrawal_queue().data)
        except HyperUnitError as exc:
            _fail(exc)


@app.command()
def guardians(ctx: typer.Context) -> None:
    """Print the compiled-in guardian nodes for the active environment."""
    table = DEFAULT_GUARDIAN_REGISTRY.table(ctx.obj.environment)
    typer.echo(
        json.dumps(
            {node_id: node.model_dump(mode="json") for node_id, node in sorted(table.items())},
            indent=2,
        )
    )


if __name__ == "__main__":
    app()
