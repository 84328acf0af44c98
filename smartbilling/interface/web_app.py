"""Mini README: FastAPI interface for the billing assistant.

Structure:
    * create_application - application factory wiring the JSON routes.
    * _utility_payload / _split_payload - view models for responses.

The routes are thin: every change goes through ``LedgerStore`` or
``MenuStateMachine`` and ledger errors become 400/404 responses carrying the
user-facing message. Inputs arrive form-encoded, mirroring the forms of the
browser front end.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from fastapi import FastAPI, Form, HTTPException
from fastapi.responses import JSONResponse, Response

from ..configuration import get_settings
from ..errors import BillingError, IndexOutOfRange, SplitNotFound, UnknownUtility
from ..ledger import LedgerStore, Split, Transaction, Utility
from ..ledger.export import export_filename
from ..logging_utils import get_logger
from ..ussd import MenuStateMachine

LOGGER = get_logger(__name__)

_NOT_FOUND_ERRORS = (UnknownUtility, SplitNotFound, IndexOutOfRange)


def _to_http(error: BillingError) -> HTTPException:
    status_code = 404 if isinstance(error, _NOT_FOUND_ERRORS) else 400
    LOGGER.warning("Request rejected (%s): %s", status_code, error)
    return HTTPException(status_code=status_code, detail=str(error))


def _utility_payload(utility: Utility, today: date) -> Dict[str, object]:
    payload = utility.as_dict()
    payload["progress"] = round(utility.instalment_progress, 1)
    payload["overdue"] = utility.is_overdue(today)
    payload["daysUntilDue"] = utility.days_until_due(today)
    return payload


def _split_payload(split: Split) -> Dict[str, object]:
    payload = split.as_dict()
    payload["paidCount"] = split.paid_count
    payload["progress"] = round(split.progress, 1)
    return payload


def _transactions_payload(transactions: List[Transaction]) -> List[Dict[str, object]]:
    return [transaction.as_dict() for transaction in transactions]


def create_application(
    store: Optional[LedgerStore] = None,
    machine: Optional[MenuStateMachine] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    app = FastAPI(title="Smart Utility Billing Assistant", version="0.1.0")
    if store is None or machine is None:
        settings = get_settings()
        store = store or LedgerStore.from_settings(settings)
        machine = machine or MenuStateMachine(
            return_delay_seconds=settings.ussd_return_delay_seconds
        )
    ledger = store
    menu = machine

    @app.get("/")
    async def dashboard() -> JSONResponse:
        """Utility cards and upcoming-bill reminders."""

        today = ledger.today()
        utilities = [_utility_payload(utility, today) for utility in ledger.list_utilities()]
        reminders = [_utility_payload(utility, today) for utility in ledger.upcoming_bills(today)]
        LOGGER.debug("Dashboard with %s utilities, %s reminders", len(utilities), len(reminders))
        return JSONResponse(
            {
                "utilities": utilities,
                "reminders": reminders,
                "currency": ledger.settings.currency,
                "theme": ledger.settings.theme,
            }
        )

    @app.get("/utilities")
    async def list_utilities() -> JSONResponse:
        today = ledger.today()
        return JSONResponse(
            {"utilities": [_utility_payload(utility, today) for utility in ledger.list_utilities()]}
        )

    @app.post("/utilities")
    async def add_utility(
        name: str = Form(...),
        provider: str = Form(...),
        balance: float = Form(...),
        due_date: str = Form(...),
        monthly_amount: float = Form(...),
        account_number: str = Form(""),
        utility_id: Optional[str] = Form(None),
    ) -> JSONResponse:
        """Register a new utility."""

        try:
            utility = ledger.add_utility(
                name=name,
                provider=provider,
                balance=balance,
                due_date=due_date,
                monthly_amount=monthly_amount,
                account_number=account_number,
                utility_id=utility_id,
            )
        except BillingError as error:
            raise _to_http(error) from error
        return JSONResponse(_utility_payload(utility, ledger.today()), status_code=201)

    @app.post("/utilities/{utility_id}")
    async def edit_utility(
        utility_id: str,
        name: Optional[str] = Form(None),
        provider: Optional[str] = Form(None),
        balance: Optional[float] = Form(None),
        due_date: Optional[str] = Form(None),
        monthly_amount: Optional[float] = Form(None),
        account_number: Optional[str] = Form(None),
    ) -> JSONResponse:
        """Edit the supplied fields of a utility."""

        try:
            utility = ledger.update_utility(
                utility_id,
                name=name,
                provider=provider,
                balance=balance,
                due_date=due_date,
                monthly_amount=monthly_amount,
                account_number=account_number,
            )
        except BillingError as error:
            raise _to_http(error) from error
        return JSONResponse(_utility_payload(utility, ledger.today()))

    @app.delete("/utilities/{utility_id}")
    async def remove_utility(utility_id: str) -> JSONResponse:
        try:
            utility = ledger.remove_utility(utility_id)
        except BillingError as error:
            raise _to_http(error) from error
        return JSONResponse({"removed": utility.utility_id})

    @app.post("/pay")
    async def pay(
        utility_id: str = Form(...),
        amount: float = Form(...),
        method: str = Form(...),
    ) -> JSONResponse:
        """Pay towards a utility balance."""

        try:
            transaction = ledger.apply_payment(utility_id, amount, method)
        except BillingError as error:
            raise _to_http(error) from error
        currency = ledger.settings.currency
        return JSONResponse(
            {
                "transaction": transaction.as_dict(),
                "utility": _utility_payload(ledger.get_utility(utility_id), ledger.today()),
                "message": (
                    f"Payment of {currency} {transaction.amount:,.2f} successful! "
                    f"Reference: {transaction.reference}"
                ),
            }
        )

    @app.get("/splits")
    async def list_splits() -> JSONResponse:
        return JSONResponse({"splits": [_split_payload(split) for split in ledger.list_splits()]})

    @app.post("/splits")
    async def create_split(
        utility: str = Form(...),
        total_amount: float = Form(...),
        participants: str = Form(...),
        share_type: str = Form("equal"),
    ) -> JSONResponse:
        """Create a split from a comma separated participant list."""

        try:
            split = ledger.create_split(utility, total_amount, participants, share_type)
        except BillingError as error:
            raise _to_http(error) from error
        return JSONResponse(_split_payload(split), status_code=201)

    @app.post("/splits/{split_id}/participants/{index}/paid")
    async def mark_paid(split_id: int, index: int) -> JSONResponse:
        try:
            split = ledger.mark_participant_paid(split_id, index)
        except BillingError as error:
            raise _to_http(error) from error
        return JSONResponse(_split_payload(split))

    @app.get("/history")
    async def history() -> JSONResponse:
        return JSONResponse({"transactions": _transactions_payload(ledger.list_transactions())})

    @app.get("/history/export")
    async def export_history() -> Response:
        """Download the transaction history as CSV."""

        filename = export_filename(ledger.today())
        LOGGER.info("Exporting transaction history as %s", filename)
        return Response(
            content=ledger.export_csv(),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/settings")
    async def read_settings() -> JSONResponse:
        return JSONResponse(
            {"settings": ledger.settings.as_dict(), "reminders": ledger.reminders.as_dict()}
        )

    @app.post("/settings/theme")
    async def toggle_theme() -> JSONResponse:
        return JSONResponse({"theme": ledger.toggle_theme()})

    @app.post("/settings/reminders")
    async def update_reminders(
        enabled: Optional[bool] = Form(None),
        days_before: Optional[int] = Form(None),
        smart_suggestions: Optional[bool] = Form(None),
    ) -> JSONResponse:
        try:
            reminders = ledger.update_reminders(
                enabled=enabled,
                days_before=days_before,
                smart_suggestions=smart_suggestions,
            )
        except BillingError as error:
            raise _to_http(error) from error
        return JSONResponse({"reminders": reminders.as_dict()})

    @app.post("/settings/reset")
    async def reset_data() -> JSONResponse:
        """Restore the demo data."""

        ledger.reset()
        return JSONResponse({"message": "Demo data has been reset successfully!"})

    @app.get("/ussd")
    async def ussd_screen() -> JSONResponse:
        return JSONResponse(menu.current().as_dict())

    @app.post("/ussd/input")
    async def ussd_input(choice: str = Form("")) -> JSONResponse:
        """Feed one menu choice into the USSD simulator."""

        return JSONResponse(menu.send(choice).as_dict())

    @app.post("/ussd/reset")
    async def ussd_reset() -> JSONResponse:
        return JSONResponse(menu.reset().as_dict())

    return app
