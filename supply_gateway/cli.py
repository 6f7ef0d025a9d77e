"""
Console entry-point for the supply order gateway.

`supply-console serve` runs the gateway; `login`, `orders list`, `orders create`
and `orders set-status` drive it from the terminal the way the web console does.
"""

import logging
import sys

import click
import uvicorn

from supply_gateway.client.console import OrderConsole
from supply_gateway.client.session import SessionState, SessionStore
from supply_gateway.config import get_settings
from supply_gateway.errors import GatewayError
from supply_gateway.logging_config import configure_logging
from supply_gateway.workflow import OrderStatus, StatusFilter

logger = logging.getLogger("cli")


def _console() -> OrderConsole:
    settings = get_settings()
    state = SessionState(SessionStore(settings.session_file))
    return OrderConsole(settings.gateway_url, state, timeout=settings.upstream_timeout_seconds)


def _print_orders(orders):
    if not orders:
        click.echo("No orders found.")
        return
    click.echo(f"{'ID':>6}  {'Item':<24} {'Qty':>5}  {'Status':<10}  Created")
    for o in orders:
        created = o.created_at.isoformat(timespec="seconds") if o.created_at else "-"
        click.echo(f"{'#' + str(o.id):>6}  {o.item_name:<24} {o.quantity:>5}  {o.status.value:<10}  {created}")


def _fail(e: GatewayError):
    click.echo(f"Error: {e.message}", err=True)
    sys.exit(1)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL.")
def cli(log_level) -> None:
    """Supply order console."""
    configure_logging(log_level or get_settings().log_level)


# ---------------- Servers ----------------

@cli.command("serve", help="Run the gateway.")
@click.option("--host", default="0.0.0.0")
@click.option("--port", type=int, default=8082)
def serve(host, port):
    uvicorn.run("supply_gateway.main:app", host=host, port=port)


@cli.command("serve-auth-mock", help="Run the demo Auth service.")
@click.option("--host", default="0.0.0.0")
@click.option("--port", type=int, default=8081)
def serve_auth_mock(host, port):
    from supply_gateway.mocks.auth_service import create_auth_app
    uvicorn.run(create_auth_app(), host=host, port=port)


@cli.command("serve-order-mock", help="Run the demo Order service.")
@click.option("--host", default="0.0.0.0")
@click.option("--port", type=int, default=8080)
def serve_order_mock(host, port):
    from supply_gateway.mocks.order_service import create_order_app
    uvicorn.run(create_order_app(), host=host, port=port)


# ---------------- Session ----------------

@cli.command("login")
@click.option("--username", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
def login(username, password):
    console = _console()
    try:
        session = console.login(username, password)
    except GatewayError as e:
        _fail(e)
    click.echo(f"Logged in as {username} (token valid for {session.expires_in_seconds}s).")
    _print_orders(console.orders)


@cli.command("logout")
def logout():
    _console().logout()
    click.echo("Logged out.")


@cli.command("whoami")
def whoami():
    state = SessionState(SessionStore(get_settings().session_file))
    if state.restore():
        click.echo(f"Authenticated ({state.session.token_type} token).")
    else:
        click.echo("Anonymous.")


# ---------------- Orders ----------------

@cli.group("orders")
def orders():
    """Create, list and update supply orders."""


@orders.command("list")
@click.option("--status", "status_filter", default="ALL",
              type=click.Choice([f.value for f in StatusFilter], case_sensitive=False))
def list_orders(status_filter):
    console = _console()
    console.state.restore()
    try:
        _print_orders(console.load_orders(status_filter))
    except GatewayError as e:
        _fail(e)


@orders.command("create")
@click.argument("item_name")
@click.argument("quantity")
def create_order(item_name, quantity):
    console = _console()
    console.state.restore()
    try:
        order = console.create_order(item_name, quantity)
    except GatewayError as e:
        _fail(e)
    click.echo(f"Created order #{order.id} ({order.status.value}).")
    if console.last_error:
        click.echo(f"Warning: {console.last_error}", err=True)


@orders.command("set-status")
@click.argument("order_id", type=int)
@click.argument("status", type=click.Choice([s.value for s in OrderStatus]))
def set_status(order_id, status):
    console = _console()
    console.state.restore()
    try:
        order = console.update_status(order_id, status)
    except GatewayError as e:
        _fail(e)
    click.echo(f"Order #{order.id} is now {order.status.value}.")
    if console.last_error:
        click.echo(f"Warning: {console.last_error}", err=True)


if __name__ == "__main__":
    cli()
