from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, MarkdownViewer

import api.crud as crud
from api.models import Order
from store import policy
from utils.analytics import sort_newest_first
from utils.messages import NavigateMessage
from utils.presentation import badge_text
from utils.pure import format_money, generate_markdown_table, pretty_date
from views.base_screen import BaseScreen
from views.modal_order_detail import OrderDetailModal


class OrdersScreen(BaseScreen):
    """
    Customers browse their own orders, newest first.

    Layout:
    - Markdown preview at the top for the highlighted order.
    - Orders table below; Enter opens the full order detail.
    """

    ROUTE = "orders"
    TITLE_TEXT = "My Orders"

    # Show some hints in footer
    BINDINGS = [
        Binding("enter", "noop", "View Order Detail", show=True, key_display="⏎"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-preview", show_table_of_contents=False)
            yield DataTable(id="table-orders")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Button("Order Something", id="btn-menu", variant="primary")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Date", "Items", "Total", "Status", "Payment")

    def reload(self) -> None:
        self._load_orders()

    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self):
        self._load_orders()

    @work(exclusive=True, group="orders")
    async def _load_orders(self) -> None:
        user_id = self.app.state.user_id
        if user_id is None:
            return
        res = await crud.list_user_orders(self.app.state.gateway, user_id)
        if not res.success:
            self.notify(res.error or "Failed to load orders", severity="error")
            return

        self._orders = sort_newest_first(res.data)
        table = self.query_one(DataTable)
        table.clear()
        for o in self._orders:
            table.add_row(
                o.id,
                pretty_date(o.created_at),
                str(sum(it.quantity for it in o.items)),
                format_money(o.total_amount),
                badge_text(o.status),
                badge_text(o.payment_status),
                key=o.id,
            )
        if self._orders:
            table.move_cursor(row=0)
            await self._render_preview(self._orders[0])
        else:
            await self._render_preview(None)

    @on(DataTable.RowHighlighted)
    async def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        order = next((o for o in self._orders if o.id == event.row_key.value), None)
        await self._render_preview(order)

    async def _render_preview(self, order) -> None:
        viewer = self.query_one("#md-order-preview", MarkdownViewer)
        if order is None:
            await viewer.document.update(
                "### No orders yet\n\nYour orders will show up here once you check out."
            )
            return

        rows = [[it.product_name, it.quantity, format_money(it.subtotal)] for it in order.items]
        md = (
            f"### Order {order.id}\n"
            f"Placed: {pretty_date(order.created_at)}\n\n"
            + generate_markdown_table(["Item", "Qty", "Line Total"], rows, ["l", "c", "r"])
            + f"\n\n**Items total:** {format_money(order.total_amount)}"
        )
        await viewer.document.update(md)

    @on(DataTable.RowSelected)
    def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        self.app.push_screen(OrderDetailModal(event.row_key.value))

    @on(Button.Pressed, "#btn-menu")
    def handle_menu(self) -> None:
        self.app.post_message(NavigateMessage(policy.Route(policy.MENU)))
