"""Mini README: Entry point CLI for the Smart Utility Billing Assistant.

This script exposes a Typer CLI to serve the FastAPI application, record
payments and splits against the persisted ledger, export the transaction
history as CSV, reset the demo data, and play with the USSD simulator in the
terminal. Ledger location and timings come from ``SMARTBILLING_*``
environment variables.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional

import typer
import uvicorn

from smartbilling.configuration import get_settings
from smartbilling.errors import BillingError
from smartbilling.ledger import LedgerStore
from smartbilling.ledger.export import export_filename
from smartbilling.logging_utils import configure_root_logger
from smartbilling.ussd import MenuResponse, MenuState, MenuStateMachine

cli = typer.Typer(help="Track utility bills, payments and shared bills.")


def _open_store() -> LedgerStore:
    settings = get_settings()
    configure_root_logger(settings.log_level)
    return LedgerStore.from_settings(settings)


def _fail(error: BillingError) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


@cli.command()
def serve(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # 0.0.0.0 is a bind address only; browsers need a routable host.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Smart Billing API on {effective_host}:{effective_port}.\n"
        f"Open http://{browser_host}:{effective_port}/docs to explore the endpoints."
    )
    uvicorn.run(
        "smartbilling.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def pay(
    utility_id: str = typer.Argument(..., help="Utility identifier, e.g. 'electricity'."),
    amount: float = typer.Argument(..., help="Amount to pay."),
    method: str = typer.Option("M-Pesa", help="Payment method."),
) -> None:
    """Pay towards a utility balance."""

    store = _open_store()
    try:
        transaction = store.apply_payment(utility_id, amount, method)
    except BillingError as error:
        _fail(error)
    utility = store.get_utility(utility_id)
    currency = store.settings.currency
    typer.echo(
        f"Payment of {currency} {transaction.amount:,.2f} successful! "
        f"Reference: {transaction.reference}\n"
        f"Remaining balance for {utility.name}: {currency} {utility.balance:,.2f}"
    )


@cli.command()
def split(
    utility: str = typer.Argument(..., help="Utility name the bill belongs to."),
    total_amount: float = typer.Argument(..., help="Bill total to divide."),
    participants: str = typer.Argument(..., help="Comma separated participant names."),
    share_type: str = typer.Option("equal", help="'equal' or 'custom' (divided equally)."),
) -> None:
    """Split a bill among participants."""

    store = _open_store()
    try:
        created = store.create_split(utility, total_amount, participants, share_type)
    except BillingError as error:
        _fail(error)
    typer.echo(f"Split {created.split_id} created for {created.utility}:")
    for position, participant in enumerate(created.participants):
        typer.echo(f"  [{position}] {participant.name}: {participant.share:,.2f}")


@cli.command("mark-paid")
def mark_paid(
    split_id: int = typer.Argument(..., help="Split identifier."),
    index: int = typer.Argument(..., help="Participant position within the split."),
) -> None:
    """Mark a split participant as paid."""

    store = _open_store()
    try:
        updated = store.mark_participant_paid(split_id, index)
    except BillingError as error:
        _fail(error)
    typer.echo(
        f"{updated.participants[index].name} marked as paid "
        f"({updated.paid_count}/{len(updated.participants)} paid)."
    )


@cli.command("export-csv")
def export_csv(
    output: Optional[Path] = typer.Option(None, help="Destination file; defaults to a dated name."),
) -> None:
    """Write the transaction history to a CSV file."""

    store = _open_store()
    destination = output or Path(export_filename(store.today()))
    destination.write_text(store.export_csv(), encoding="utf-8")
    typer.echo(f"Transaction history exported to {destination}")


@cli.command()
def reset(
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    """Discard all data and restore the demo ledger."""

    if not yes:
        typer.confirm(
            "Are you sure you want to reset all demo data? This cannot be undone.",
            abort=True,
        )
    _open_store().reset()
    typer.echo("Demo data has been reset successfully!")


@cli.command()
def ussd() -> None:
    """Run the USSD simulator interactively. Enter 'q' to quit."""

    settings = get_settings()
    configure_root_logger(settings.log_level)

    def show(response: MenuResponse) -> None:
        typer.echo(f"\n{response.display}\n")

    machine = MenuStateMachine(
        return_delay_seconds=settings.ussd_return_delay_seconds,
        listener=show,
    )
    show(machine.current())
    while True:
        choice = typer.prompt("", default="", show_default=False, prompt_suffix="> ")
        if choice.strip().lower() == "q":
            break
        response = machine.send(choice)
        show(response)
        if response.state is MenuState.EXITED:
            break


if __name__ == "__main__":
    cli()
