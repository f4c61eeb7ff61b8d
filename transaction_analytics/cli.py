# transaction_analytics/cli.py
import functools
import json
import logging

import anyio
import click
import uvicorn
from dotenv import load_dotenv

from transaction_analytics.config import load_config
from transaction_analytics.importer import DEFAULT_TIMEOUT, initialize_database
from transaction_analytics.queries import combined_data
from transaction_analytics.store import TransactionStore
from webapp.main import create_app


def _setup_logging(level):
    logging.basicConfig(
        level=str(level or "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults are used when it does not exist)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with API_URL, DATABASE_PATH, PORT, ...'
)
@click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides config)'
)
@click.pass_context
def main(ctx, config_path, env_file, db_path):
    """
    Transaction analytics dashboard: import the sales feed into a local
    store and serve the listing, statistics and chart endpoints.
    """
    if env_file:
        load_dotenv(env_file)

    cfg = load_config(config_path)
    if db_path:
        cfg['db_path'] = db_path
    _setup_logging(cfg.get('log_level'))

    ctx.obj = {
        'config': cfg,
        'store': TransactionStore(cfg['db_path']),
    }


@main.command('init-db')
@click.option('--feed-url', default=None, help='Transaction feed URL (overrides config)')
@click.pass_obj
def init_db(obj, feed_url):
    """Replace the store contents with the records from the feed."""
    cfg = obj['config']
    url = feed_url or cfg.get('api_url')
    try:
        count = initialize_database(
            obj['store'],
            url,
            timeout=float(cfg.get('feed_timeout') or DEFAULT_TIMEOUT),
        )
    except Exception as e:
        click.echo(f"Error initializing database: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Stored {count} transaction(s) in {cfg['db_path']}.")


@main.command('stats')
@click.option('--month', required=True, type=click.IntRange(1, 12), help='Month number (1-12)')
@click.option('--search', default=None, help='Optional search term for the listing')
@click.option('--page', default=1, type=click.IntRange(min=1), help='Listing page')
@click.pass_obj
def stats(obj, month, search, page):
    """Print the combined dashboard data for a month as JSON."""
    try:
        payload = anyio.run(
            functools.partial(combined_data, obj['store'], month, search=search, page=page)
        )
    except Exception as e:
        click.echo(f"Error fetching combined data: {e}", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(payload, indent=2))


@main.command('serve')
@click.option('--host', default=None, help='Host to bind (overrides config)')
@click.option('--port', default=None, type=int, help='Port to bind (overrides config)')
@click.pass_obj
def serve(obj, host, port):
    """Run the API and dashboard with uvicorn."""
    cfg = obj['config']
    host = host or cfg.get('host')
    port = port or int(cfg.get('port'))
    app = create_app(cfg, store=obj['store'])
    click.echo(f"Transaction analytics running at http://{host}:{port} (db: {cfg['db_path']})")
    uvicorn.run(app, host=host, port=port, log_level=str(cfg.get('log_level', 'info')).lower())
