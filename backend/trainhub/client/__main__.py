# Usage:
# - python -m trainhub.client render /inventory --user-name "Jane Doe" --user-email jane@example.com
#   Render one route against TRAINHUB_API_BASE and print the page text.

import asyncio
import logging

import click

from .app import TrainHubApp
from .config import ClientConfig
from .session import MemoryStorage, Principal


@click.group()
@click.option('--verbose', is_flag=True, help='Log client activity to stderr')
def cli(verbose):
    """Headless Train Hub client."""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)


async def _render(path, principal):
    config = ClientConfig.from_env()
    app = TrainHubApp(config, storage=MemoryStorage(), url=config.api_base.rstrip('/') + path)
    if principal is not None:
        app.session.set_current_user(principal)
    await app.start()
    await app.router.settle()
    try:
        return app.nav.text, app.mount.text, [t.message for t in app.toasts.items], app.router.last_error
    finally:
        await app.stop()


@cli.command('render')
@click.argument('path', default='/')
@click.option('--user-name', default='', help='Principal name to act as')
@click.option('--user-email', default=None, help='Principal email to act as')
def render(path, user_name, user_email):
    """Render PATH and print the nav bar and page text."""
    principal = Principal(user_name, user_email) if user_email else None
    nav, page, toasts, error = asyncio.run(_render(path, principal))

    click.echo(nav)
    click.echo("-" * 80)
    click.echo(page)
    for message in toasts:
        click.echo(f"* {message}")
    if error is not None:
        raise SystemExit(1)


if __name__ == '__main__':
    cli()
