import asyncio
from typing import Dict, List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Label, MarkdownViewer, Select

import api.crud as crud
from api.models import Order, OrderStatus, User
from store import flows
from utils.analytics import filter_orders, index_by_id, sort_newest_first
from utils.presentation import badge, badge_text
from utils.pure import format_money, generate_markdown_table, pretty_date
from views.base_screen import BaseScreen


class AdminOrdersScreen(BaseScreen):
    """
    Every order in the store. Search by order id, user id or username;
    pick a new status for the highlighted order from the selector.
    """

    ROUTE = "admin_orders"
    TITLE_TEXT = "Orders"

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []
        self._users: Dict[object, User] = {}
        self._selected: Optional[Order] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Input(id="input-search", placeholder="Search by order id, user id or username...")
        yield DataTable(id="table-orders")
        with Horizontal(id="hort-order-panel"):
            yield MarkdownViewer(id="md-order", show_table_of_contents=False)
            with Vertical(id="vert-order-status"):
                yield Label("Status")
                yield Select(
                    [(badge(s).label, s.value) for s in OrderStatus],
                    allow_blank=False,
                    id="select-status",
                    disabled=True,
                )
                yield Button("Refresh", id="btn-refresh")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Customer", "Items", "Total", "Status", "Payment", "Date")

    def reload(self) -> None:
        self.load_orders()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="load")
    async def load_orders(self) -> None:
        gw = self.app.state.gateway
        orders_res, users_res = await asyncio.gather(crud.list_orders(gw), crud.list_users(gw))
        if not orders_res.success:
            self.notify(orders_res.error or "Failed to load orders", severity="error")
            return

        self._orders = sort_newest_first(orders_res.data)
        self._users = index_by_id(users_res.data) if users_res.success else {}
        self.render_table()

    def render_table(self) -> None:
        query = self.query_one("#input-search", Input).value
        selected_id = self._selected.id if self._selected else None
        table = self.query_one(DataTable)
        table.clear()
        for o in filter_orders(self._orders, query, self._users):
            owner = self._users.get(o.user_id)
            table.add_row(
                o.id,
                owner.username if owner else f"#{o.user_id}",
                str(sum(it.quantity for it in o.items)),
                format_money(o.total_amount),
                badge_text(o.status),
                badge_text(o.payment_status),
                pretty_date(o.created_at),
                key=o.id,
            )
        if not table.row_count:
            self._select(None)
        elif selected_id in table.rows:
            table.move_cursor(row=table.get_row_index(selected_id))

    def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-search":
            self.render_table()

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        self._select(next((o for o in self._orders if o.id == event.row_key.value), None))

    def _select(self, order: Optional[Order]) -> None:
        self._selected = order
        select = self.query_one("#select-status", Select)
        select.disabled = order is None
        if order is not None:
            with select.prevent(Select.Changed):
                select.value = order.status.value
        self.render_detail()

    @work(exclusive=True, group="detail")
    async def render_detail(self) -> None:
        viewer = self.query_one("#md-order", MarkdownViewer)
        order = self._selected
        if order is None:
            await viewer.document.update("### Select an order to view its details.")
            return

        owner = self._users.get(order.user_id)
        rows = [
            [it.product_name, it.quantity, format_money(it.unit_price), format_money(it.subtotal)]
            for it in order.items
        ]
        md = (
            f"### Order {order.id}\n"
            f"Customer: {owner.username if owner else order.user_id}  \n"
            f"Placed: {pretty_date(order.created_at)}  \n"
            f"Payment: {badge(order.payment_status).label}\n\n"
            + generate_markdown_table(
                ["Item", "Qty", "Unit Price", "Line Total"], rows, ["l", "c", "r", "r"]
            )
            + f"\n\n**Total:** {format_money(order.total_amount)}"
        )
        await viewer.document.update(md)

    @on(Select.Changed, "#select-status")
    @work(exclusive=True, group="status")
    async def handle_status_changed(self, event: Select.Changed) -> None:
        order = self._selected
        if order is None or event.value == order.status.value:
            return

        status = OrderStatus(event.value)
        result = await flows.set_order_status(self.app.state, order.id, status)
        if not result.success:
            self.notify(result.message, severity="error")
            # put the selector back on the status the service still has
            with event.select.prevent(Select.Changed):
                event.select.value = order.status.value
            return

        updated = order.with_status(status)
        self._orders = [updated if o.id == order.id else o for o in self._orders]
        self._selected = updated
        self.notify(f"{result.message}: {badge(status).label}")
        self.render_table()
