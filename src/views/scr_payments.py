from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, DataTable, Markdown

import api.crud as crud
from api.models import Payment
from utils.analytics import payment_summary, sort_newest_first
from utils.presentation import badge_text
from utils.pure import format_money, generate_markdown_table, pretty_date
from views.base_screen import BaseScreen
from views.modal_order_detail import OrderDetailModal


class PaymentsScreen(BaseScreen):
    """
    Payment history of the signed-in customer with a short summary on top.
    """

    ROUTE = "payments"
    TITLE_TEXT = "Payment History"

    def __init__(self) -> None:
        super().__init__()
        self._payments: List[Payment] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield Markdown("", id="md-payment-summary")
            yield DataTable(id="table-payments")
            yield Button("Refresh", id="btn-refresh")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Payment", "Order", "Date", "Amount", "Status")

    def reload(self) -> None:
        self.load_payments()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True)
    async def load_payments(self) -> None:
        user_id = self.app.state.user_id
        if user_id is None:
            return
        res = await crud.list_user_payments(self.app.state.gateway, user_id)
        if not res.success:
            self.notify(res.error or "Failed to load payments", severity="error")
            return

        self._payments = sort_newest_first(res.data)
        summary = payment_summary(self._payments)
        last = summary.last_success
        rows = [
            ["Payments made", summary.total_payments],
            ["Total spent", format_money(summary.total_spent)],
            ["Successful", summary.successful],
            ["Failed", summary.failed],
            [
                "Last payment",
                f"{format_money(last.amount)} on {pretty_date(last.created_at)}" if last else "-",
            ],
        ]
        await self.query_one(Markdown).update(
            "### Summary\n\n" + generate_markdown_table(["", ""], rows, ["l", "r"])
        )

        table = self.query_one(DataTable)
        table.clear()
        for p in self._payments:
            table.add_row(
                p.id,
                p.order_id,
                pretty_date(p.created_at),
                format_money(p.amount),
                badge_text(p.status),
                key=p.id,
            )

    @on(DataTable.RowSelected)
    def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        payment = next((p for p in self._payments if p.id == event.row_key.value), None)
        if payment:
            self.app.push_screen(OrderDetailModal(payment.order_id))
