"""Command-line interface for the AdventureCoin explorer."""

import sys
import json
from typing import Any, Optional
import click
import structlog

from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.known_addresses import get_known_address
from advc_explorer.core.explorer import BlockExplorer
from advc_explorer.utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def echo_json(data: Any):
    click.echo(json.dumps(data, indent=2, default=str))


def build_explorer(ctx) -> BlockExplorer:
    factory = ctx.obj.get('explorer_factory') or BlockExplorer
    return factory(ctx.obj['config'])


@click.group()
@click.option('--config-file', '-c', type=click.Path(exists=True),
              help='Path to configuration file')
@click.option('--log-level', '-l', default='WARNING',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level')
@click.pass_context
def cli(ctx, config_file: Optional[str], log_level: str):
    """AdventureCoin Block Explorer CLI."""
    ctx.ensure_object(dict)

    try:
        if config_file:
            config = ExplorerConfig(_env_file=config_file)
        else:
            config = ExplorerConfig()

        config.log_level = log_level
        ctx.obj['config'] = config

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(config)


@cli.command()
@click.pass_context
def init_db(ctx):
    """Create the explorer tables."""
    explorer = build_explorer(ctx)

    click.echo("Initializing database...")
    try:
        explorer.db_manager.create_tables()
        click.echo("✅ Database initialized successfully")
    except Exception as e:
        click.echo(f"❌ Database initialization failed: {e}", err=True)
        sys.exit(1)
    finally:
        explorer.close()


@cli.command()
@click.pass_context
def test_connection(ctx):
    """Check storage and node connectivity."""
    explorer = build_explorer(ctx)

    db_ok = explorer.db_manager.test_connection()
    rpc_ok = explorer.rpc_client.test_connection()
    explorer.close()

    click.echo(f"{'✅' if db_ok else '❌'} Database")
    click.echo(f"{'✅' if rpc_ok else '⚠️ '} Node RPC")

    if not db_ok:
        sys.exit(1)


@cli.command()
@click.pass_context
def summary(ctx):
    """Show the network summary."""
    explorer = build_explorer(ctx)
    try:
        echo_json(explorer.get_summary().to_dict())
    finally:
        explorer.close()


@cli.command()
@click.pass_context
def price(ctx):
    """Show the USD price."""
    explorer = build_explorer(ctx)
    try:
        click.echo(explorer.get_price())
    finally:
        explorer.close()


@cli.command()
@click.argument('block_hash', required=False)
@click.option('--page', '-p', type=int, default=1, help='Page of the block list')
@click.option('--limit', '-n', type=int, default=20, help='Blocks per page')
@click.pass_context
def block(ctx, block_hash: Optional[str], page: int, limit: int):
    """Show one block, or list blocks when no hash is given."""
    explorer = build_explorer(ctx)
    try:
        if block_hash is None:
            blocks, pagination = explorer.blocks.list_blocks(page, limit)
            echo_json({"blocks": [b.to_dict() for b in blocks], "pagination": pagination.to_dict()})
            return

        detail = explorer.blocks.get_block(block_hash)
        if detail is None:
            click.echo(f"❌ Block {block_hash} not found", err=True)
            sys.exit(1)
        echo_json(detail.to_dict())
    finally:
        explorer.close()


@cli.command()
@click.argument('txid')
@click.pass_context
def tx(ctx, txid: str):
    """Show a confirmed or pending transaction."""
    explorer = build_explorer(ctx)
    try:
        detail = explorer.transactions.get_transaction(txid)
        if detail is None:
            click.echo(f"❌ Transaction {txid} not found", err=True)
            sys.exit(1)
        echo_json(detail.to_dict())
    finally:
        explorer.close()


@cli.command()
@click.argument('address')
@click.option('--page', '-p', type=int, default=1, help='Page of the history')
@click.option('--limit', '-n', type=int, default=20, help='Transactions per page')
@click.pass_context
def address(ctx, address: str, page: int, limit: int):
    """Show an address balance and its history."""
    explorer = build_explorer(ctx)
    try:
        record = explorer.addresses.get_address(address)
        if record is None:
            click.echo(f"❌ Address {address} not found", err=True)
            sys.exit(1)

        history, pagination = explorer.addresses.get_address_transactions(address, page, limit)
        known = get_known_address(address)
        echo_json({
            **record.to_dict(),
            "label": known.to_dict() if known else None,
            "transactions": [entry.to_dict() for entry in history],
            "pagination": pagination.to_dict(),
        })
    finally:
        explorer.close()


@cli.command()
@click.option('--limit', '-n', type=int, default=20, help='Number of addresses')
@click.pass_context
def richlist(ctx, limit: int):
    """List addresses by balance."""
    explorer = build_explorer(ctx)
    try:
        for rank, record in enumerate(explorer.addresses.get_rich_list(limit), start=1):
            known = get_known_address(record.a_id)
            tag = f"  [{known.tag}]" if known else ""
            click.echo(f"{rank:>4}. {record.a_id}  {record.balance}{tag}")
    finally:
        explorer.close()


@cli.command()
@click.pass_context
def mempool(ctx):
    """Show pending transactions."""
    explorer = build_explorer(ctx)
    try:
        echo_json(explorer.mempool.get_mempool().to_dict())
    finally:
        explorer.close()


@cli.command()
@click.pass_context
def mining(ctx):
    """Show mining statistics and the halving schedule."""
    explorer = build_explorer(ctx)
    try:
        echo_json(explorer.network.get_mining_stats().to_dict())
    finally:
        explorer.close()


@cli.command()
@click.option('--limit', '-n', type=int, default=50, help='Number of heights')
@click.pass_context
def difficulty(ctx, limit: int):
    """Show the difficulty history."""
    explorer = build_explorer(ctx)
    try:
        echo_json([point.to_dict() for point in explorer.difficulty.get_difficulty_history(limit)])
    finally:
        explorer.close()


@cli.command()
@click.option('--host', default=None, help='Bind host (default from config)')
@click.option('--port', type=int, default=None, help='Bind port (default from config)')
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int]):
    """Run the HTTP API."""
    import uvicorn
    from advc_explorer.api.main import create_app

    config = ctx.obj['config']
    app = create_app(config)

    click.echo(f"🚀 Serving explorer API on {host or config.api_host}:{port or config.api_port}")
    uvicorn.run(app, host=host or config.api_host, port=port or config.api_port,
                log_level=config.log_level.lower())


def main():
    cli()


if __name__ == '__main__':
    main()
