from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Label, Markdown, Select

import api.crud as crud
from api.models import Payment, PaymentStatus
from utils.analytics import filter_payments, sort_newest_first
from utils.presentation import badge, badge_text
from utils.pure import format_money, generate_markdown_table, pretty_date
from views.base_screen import BaseScreen

ALL_STATUSES = "ALL"


class AdminPaymentsScreen(BaseScreen):
    """
    All payments, newest first. Search by payment, order or user id and
    narrow by status.
    """

    ROUTE = "admin_payments"
    TITLE_TEXT = "Payments"

    def __init__(self) -> None:
        super().__init__()
        self._payments: List[Payment] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            with Horizontal(id="hort-filters"):
                yield Input(id="input-search", placeholder="Search by payment, order or user id...")
                yield Select(
                    [("All statuses", ALL_STATUSES)]
                    + [(badge(s).label, s.value) for s in PaymentStatus],
                    allow_blank=False,
                    value=ALL_STATUSES,
                    id="select-status",
                )
            yield DataTable(id="table-payments")
            yield Markdown("", id="md-payment")
            with Horizontal(id="hort-controls"):
                yield Label("", id="label-payment-count")
                yield Button("Refresh", id="btn-refresh")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Payment", "Order", "User", "Amount", "Status", "Reference", "Date")

    def reload(self) -> None:
        self.load_payments()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True)
    async def load_payments(self) -> None:
        res = await crud.list_payments(self.app.state.gateway)
        if not res.success:
            self.notify(res.error or "Failed to load payments", severity="error")
            return
        self._payments = sort_newest_first(res.data)
        self.render_table()

    def render_table(self) -> None:
        query = self.query_one("#input-search", Input).value
        status_value = self.query_one("#select-status", Select).value
        status = None if status_value == ALL_STATUSES else PaymentStatus(status_value)

        shown = filter_payments(self._payments, query, status)
        table = self.query_one(DataTable)
        table.clear()
        for p in shown:
            table.add_row(
                p.id,
                p.order_id,
                "-" if p.user_id is None else str(p.user_id),
                format_money(p.amount),
                badge_text(p.status),
                p.payment_reference_id or "-",
                pretty_date(p.created_at),
                key=p.id,
            )
        self.query_one("#label-payment-count", Label).update(
            f"{len(shown)} of {len(self._payments)} payments"
        )

    def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-search":
            self.render_table()

    @on(Select.Changed, "#select-status")
    def handle_status_changed(self) -> None:
        self.render_table()

    @on(DataTable.RowHighlighted)
    async def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        payment = next((p for p in self._payments if p.id == event.row_key.value), None)
        if payment is None:
            return
        rows = [
            ["Order", payment.order_id],
            ["User", "-" if payment.user_id is None else payment.user_id],
            ["Amount", format_money(payment.amount)],
            ["Status", badge(payment.status).label],
            ["Reference", payment.payment_reference_id or "-"],
            ["Created", pretty_date(payment.created_at)],
            ["Updated", pretty_date(payment.updated_at)],
        ]
        await self.query_one("#md-payment", Markdown).update(
            f"#### Payment {payment.id}\n\n"
            + generate_markdown_table(["Attribute", "Value"], rows, ["l", "l"])
        )
