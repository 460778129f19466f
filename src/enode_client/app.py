"""Typer application and CLI entry point for enode_client.

The ``enode`` command is a thin shell around the library: the root callback
collects global flags and credential overrides, and each sub-command opens a
:class:`~enode_client.session.Session` with :func:`_open_session`, calls one
resource operation and prints the result through the global
:class:`~enode_client.output.OutputManager`.

Credentials come from ``--client-id`` / ``--client-secret`` or the
``ENODE_*`` environment variables (see :mod:`enode_client.config`). Both
accept ``env:VAR`` and ``file:/path`` source descriptors.

Every :class:`~enode_client.exceptions.EnodeError` is reported on stderr and
turned into the exit code its class declares.
"""

from __future__ import annotations

import logging
import signal
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer

from enode_client import __version__
from enode_client.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="enode",
    help="Query and control Enode users and vehicles.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
users_app = typer.Typer(no_args_is_help=True)
vehicles_app = typer.Typer(no_args_is_help=True)

app.add_typer(users_app, name="users", help="List, inspect, link and unlink users.")
app.add_typer(vehicles_app, name="vehicles", help="List vehicles and control charging.")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"enode {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    client_id: Optional[str] = typer.Option(
        None, "--client-id", help="OAuth2 client id, or an env:/file: source."
    ),
    client_secret: Optional[str] = typer.Option(
        None, "--client-secret", help="OAuth2 client secret, or an env:/file: source."
    ),
    environment: Optional[str] = typer.Option(
        None, "--environment", "-e", help="sandbox, production or an API base URL."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Request timeout in seconds."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output and library logging."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~enode_client.output.OutputManager` and
    stores the credential overrides in ``ctx.obj`` for :func:`_open_session`.
    """
    from enode_client.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=_LOG_FORMAT, stream=sys.stderr)

    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "client_id": client_id,
        "client_secret": client_secret,
        "environment": environment,
        "timeout": timeout,
    }


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Report :class:`EnodeError` on stderr and exit with its exit code."""
    from enode_client.exceptions import EnodeError
    from enode_client.output import get_output

    try:
        yield
    except EnodeError as exc:
        get_output().error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@contextmanager
def _open_session(ctx: typer.Context) -> Iterator[Any]:
    """Load settings, authenticate and yield a session closed on exit."""
    from enode_client.config import load_settings
    from enode_client.output import get_output
    from enode_client.session import new_session

    overrides = (ctx.obj or {}).get("overrides", {})
    with _reported_errors():
        settings = load_settings(overrides)
        get_output().debug(f"Authenticating against {settings.environment}")
        with new_session(
            settings.client_id,
            settings.client_secret.get_secret_value(),
            settings.environment,
            auto_refresh=settings.auto_refresh,
            timeout=settings.timeout,
        ) as session:
            yield session


# ------------------------------------------------------------------ #
# token
# ------------------------------------------------------------------ #


@app.command("token")
def token_command(
    ctx: typer.Context,
    show_secret: bool = typer.Option(
        False, "--show", help="Print the full access token instead of a masked one."
    ),
) -> None:
    """Exchange the client credentials for an access token.

    Useful to check that credentials and environment are right before
    calling the API.
    """
    from enode_client.auth import exchange_token
    from enode_client.config import load_settings
    from enode_client.output import get_output

    overrides = (ctx.obj or {}).get("overrides", {})
    with _reported_errors():
        settings = load_settings(overrides)
        token_response = exchange_token(
            settings.client_id,
            settings.client_secret.get_secret_value(),
            settings.environment,
            timeout=settings.timeout,
        )

    data = token_response.model_dump()
    if not show_secret:
        data["access_token"] = _mask(token_response.access_token)
    get_output().print_data(data)


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


# ------------------------------------------------------------------ #
# users
# ------------------------------------------------------------------ #


@users_app.command("list")
def users_list(ctx: typer.Context) -> None:
    """List all users."""
    from enode_client.output import OutputFormat, get_output
    from enode_client.resources import list_users

    with _open_session(ctx) as session:
        users = list_users(session)

    output = get_output()
    if output.format == OutputFormat.RICH:
        rows = [
            [
                user.id,
                user.created_at.isoformat() if user.created_at else "",
                ", ".join(v.vendor or "?" for v in user.linked_vendors),
            ]
            for user in users.values()
        ]
        output.print_table(["ID", "Created", "Vendors"], rows, title="Users")
    else:
        output.print_data(list(users.values()))


@users_app.command("get")
def users_get(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User id."),
) -> None:
    """Show one user and the vendors they have linked."""
    from enode_client.output import get_output
    from enode_client.resources import get_user

    with _open_session(ctx) as session:
        user = get_user(session, user_id)
    get_output().print_data(user)


@users_app.command("link")
def users_link(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User id (created on first link)."),
    redirect_uri: str = typer.Option(
        ..., "--redirect-uri", help="Where the Link UI sends the user afterwards."
    ),
    vendor_type: str = typer.Option(
        "vehicle", "--vendor-type", help="Asset type to link."
    ),
    vendor: Optional[str] = typer.Option(
        None, "--vendor", help="Skip vendor selection and link this vendor."
    ),
    language: str = typer.Option(
        "en-GB", "--language", help="Link UI locale, e.g. en-GB or de-DE."
    ),
    scopes: Optional[list[str]] = typer.Option(
        None, "--scope", help="Requested scope; repeat for several."
    ),
) -> None:
    """Create a Link UI session and print its URL and token."""
    from enode_client.models import LinkData
    from enode_client.output import get_output
    from enode_client.resources import link_user

    output = get_output()
    try:
        link_data = LinkData(
            vendor=vendor,
            vendor_type=vendor_type,
            language=language,
            scopes=scopes or [],
            redirect_uri=redirect_uri,
        )
    except ValueError as exc:
        output.error(f"Invalid link request: {exc}")
        raise typer.Exit(code=2) from None

    with _open_session(ctx) as session:
        access = link_user(session, user_id, link_data)
    output.print_data(access)
    output.info("The link session is single-use and expires after 24 hours.")


@users_app.command("unlink")
def users_unlink(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User id."),
) -> None:
    """Delete a user and all of their data."""
    from enode_client.output import get_output
    from enode_client.resources import unlink_user

    with _open_session(ctx) as session:
        unlink_user(session, user_id)
    get_output().success(f"User '{user_id}' unlinked.")


@users_app.command("deauthorize")
def users_deauthorize(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User id."),
) -> None:
    """Delete the user's stored vendor authorizations, keeping other data."""
    from enode_client.output import get_output
    from enode_client.resources import deauthorize_user

    with _open_session(ctx) as session:
        deauthorize_user(session, user_id)
    get_output().success(f"Authorizations of user '{user_id}' removed.")


@users_app.command("disconnect")
def users_disconnect(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User id."),
    vendor: str = typer.Argument(help="Vendor to disconnect, e.g. TESLA."),
    vendor_type: Optional[str] = typer.Option(
        None, "--vendor-type", help="Only disconnect this asset type."
    ),
) -> None:
    """Disconnect a vendor, or one of its asset types, from a user."""
    from enode_client.models import VendorType
    from enode_client.output import get_output
    from enode_client.resources import disconnect_vendor, disconnect_vendor_type

    output = get_output()
    kind: Optional[VendorType] = None
    if vendor_type is not None:
        try:
            kind = VendorType(vendor_type)
        except ValueError:
            valid = ", ".join(t.value for t in VendorType)
            output.error(f"Unknown vendor type '{vendor_type}'. Use one of: {valid}")
            raise typer.Exit(code=2) from None

    with _open_session(ctx) as session:
        if kind is None:
            disconnect_vendor(session, user_id, vendor)
        else:
            disconnect_vendor_type(session, user_id, vendor, kind)

    target = vendor if kind is None else f"{vendor} ({kind.value})"
    output.success(f"Disconnected {target} from user '{user_id}'.")


# ------------------------------------------------------------------ #
# vehicles
# ------------------------------------------------------------------ #


@vehicles_app.command("list")
def vehicles_list(
    ctx: typer.Context,
    user_id: Optional[str] = typer.Option(
        None, "--user", "-u", help="Only list this user's vehicles."
    ),
) -> None:
    """List vehicles of all users, or of one user."""
    from enode_client.output import OutputFormat, get_output
    from enode_client.resources import list_user_vehicles, list_vehicles

    with _open_session(ctx) as session:
        if user_id is None:
            vehicles = list_vehicles(session)
        else:
            vehicles = list_user_vehicles(session, user_id)

    output = get_output()
    if output.format == OutputFormat.RICH:
        rows = []
        for vehicle in vehicles.values():
            info = vehicle.information
            charge = vehicle.charge_state
            rows.append(
                [
                    vehicle.id,
                    " ".join(part for part in (info.brand, info.model) if part),
                    "" if charge.battery_level is None else f"{charge.battery_level:g}%",
                    _yes_no(charge.is_plugged_in),
                    _yes_no(charge.is_charging),
                ]
            )
        output.print_table(
            ["ID", "Vehicle", "Battery", "Plugged in", "Charging"], rows, title="Vehicles"
        )
    else:
        output.print_data(list(vehicles.values()))


def _yes_no(value: Optional[bool]) -> str:
    if value is None:
        return ""
    return "yes" if value else "no"


@vehicles_app.command("get")
def vehicles_get(
    ctx: typer.Context,
    vehicle_id: str = typer.Argument(help="Vehicle id."),
) -> None:
    """Show one vehicle with its charge state, odometer and location."""
    from enode_client.output import get_output
    from enode_client.resources import get_vehicle

    with _open_session(ctx) as session:
        vehicle = get_vehicle(session, vehicle_id)
    get_output().print_data(vehicle)


@vehicles_app.command("charge")
def vehicles_charge(
    ctx: typer.Context,
    vehicle_id: str = typer.Argument(help="Vehicle id."),
    action: str = typer.Argument(help="start or stop."),
) -> None:
    """Start or stop charging. Prints the pending charge action."""
    from enode_client.models import ChargeAction
    from enode_client.output import get_output
    from enode_client.resources import control_charging

    output = get_output()
    try:
        charge_action = ChargeAction(action.upper())
    except ValueError:
        output.error(f"Unknown charge action '{action}'. Use start or stop.")
        raise typer.Exit(code=2) from None

    with _open_session(ctx) as session:
        vehicle_action = control_charging(session, vehicle_id, charge_action)
    output.print_data(vehicle_action)
    output.info(f"Charge action {vehicle_action.id} is {vehicle_action.state.value}.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``enode`` console script.

    Errors raised outside a command's own reporting still exit with the
    error's ``exit_code``; anything else exits with the generic failure code.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from enode_client.exceptions import EnodeError
        from enode_client.output import get_output

        if isinstance(exc, EnodeError):
            get_output().error(str(exc))
            sys.exit(exc.exit_code)
        get_output().error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
