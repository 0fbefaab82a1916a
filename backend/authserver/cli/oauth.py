"""Flask CLI commands to inspect registered clients and issued tokens."""

from __future__ import annotations

import json
import logging

import click
from flask.cli import with_appcontext

from authserver.core.extensions import get_services
from authserver.schemas import CheckTokenResponseSchema, ClientRecordSchema
from authserver.services._shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Raise logging verbosity for token services when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger("authserver.services").setLevel(level)
    LOGGER.setLevel(level)


@click.group("oauth")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for token services.")
@click.pass_context
def oauth_cli(ctx: click.Context, verbose: bool) -> None:
    """Inspect OAuth2 clients and tokens."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@oauth_cli.command("clients")
@with_appcontext
def clients_command() -> None:
    """List registered clients (secrets are never printed)."""
    directory = get_services().clients
    list_clients = getattr(directory, "list_clients", None)
    if list_clients is None:
        raise click.ClickException("The configured client directory cannot be listed.")
    clients = list_clients()
    if not clients:
        click.echo("  (no clients)")
        return
    schema = ClientRecordSchema()
    width = max(len(c.client_id) for c in clients)
    for client in clients:
        data = schema.dump(client)
        grants = ",".join(data["authorized_grant_types"]) or "-"
        click.echo(
            f"  {client.client_id.ljust(width)}  access={data['access_token_validity_seconds']:>6}s"
            f"  refresh={data['refresh_token_validity_seconds']:>6}s  grants={grants}"
        )


@oauth_cli.command("check-token")
@click.argument("token")
@with_appcontext
def check_token_command(token: str) -> None:
    """Print the binding of a live access TOKEN as JSON."""
    try:
        details = get_services().token_service.get_oauth2_details_by_access_token(token)
    except ServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(CheckTokenResponseSchema().dump(details), indent=2, sort_keys=True))
