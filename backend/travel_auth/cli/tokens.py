"""Flask CLI commands for refresh-token housekeeping."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from travel_auth.api.deps import get_auth_service

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Collection of refresh-token maintenance commands."""


@tokens_cli.command("prune")
@with_appcontext
def prune() -> None:
    """Delete expired refresh tokens and tombstones, then print the counts."""
    result = get_auth_service().prune_expired()
    LOGGER.debug("tokens.prune finished")
    click.echo("Prune summary:")
    click.echo(f"  refresh_tokens  deleted={result.refresh_tokens}")
    click.echo(f"  revoked_tokens  deleted={result.revoked_tokens}")
