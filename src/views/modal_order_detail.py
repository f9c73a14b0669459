import asyncio
from typing import List, Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, MarkdownViewer, Static

import api.crud as crud
from api.models import Order, OrderStatus, PaymentStatus, Product
from store import flows
from store.cart import compute_totals
from store.policy import Route
from utils.messages import NavigateMessage
from utils.presentation import badge_markup, progress_line
from utils.pure import (
    estimate_eta,
    format_money,
    generate_markdown_table,
    pretty_date,
    write_invoice,
)


class OrderDetailModal(ModalScreen[bool]):
    """
    One order: progress tracker, delivery estimate, items and bill.
    Offers payment when it is still due, reorder and invoice export.
    """

    def __init__(self, order_id: str) -> None:
        super().__init__()
        self._order_id = order_id
        self._order: Optional[Order] = None
        self._products: List[Product] = []

    def compose(self) -> ComposeResult:
        with Vertical(id="vert-order-detail"):
            yield Static("", id="static-order-status")
            yield Static("", id="static-order-progress")
            yield Static("", id="static-order-eta")
            yield MarkdownViewer("", show_table_of_contents=False)
            with Horizontal(id="hort-order-actions"):
                yield Button("Close", id="btn-quit")
                yield Button("Download Invoice", id="btn-invoice", disabled=True)
                yield Button("Reorder", id="btn-reorder", disabled=True)
                yield Button(
                    "Complete Payment",
                    id="btn-pay",
                    variant="success",
                    disabled=True,
                )

    def on_mount(self):
        self.load_order()

    @work(exclusive=True)
    async def load_order(self) -> None:
        gw = self.app.state.gateway
        order_res, products_res = await asyncio.gather(
            crud.get_order(gw, self._order_id), crud.list_products(gw)
        )
        if not order_res.success:
            self.notify(order_res.error or "Failed to load order", severity="error")
            await self.query_one(MarkdownViewer).document.update(
                f"### Order {self._order_id}\n\nCould not load this order."
            )
            return

        self._order = order = order_res.data
        self._products = products_res.data if products_res.success else []
        await self._render(order)

    async def _render(self, order: Order) -> None:
        self.query_one("#static-order-status", Static).update(
            f"Order [b]{order.id}[/b]   {badge_markup(order.status)}   "
            f"{badge_markup(order.payment_status)}"
        )
        self.query_one("#static-order-progress", Static).update(progress_line(order.status))

        eta = estimate_eta(order.created_at)
        eta_text = ""
        if eta and order.status in (OrderStatus.PENDING, OrderStatus.CONFIRMED):
            clock, minutes_left = eta
            eta_text = f"Arriving around {clock} ({minutes_left} min)"
        self.query_one("#static-order-eta", Static).update(eta_text)

        totals = compute_totals(order.total_amount)
        rows = [
            [it.product_name, it.quantity, format_money(it.unit_price), format_money(it.subtotal)]
            for it in order.items
        ]
        md = (
            f"### Placed {pretty_date(order.created_at)}\n\n"
            + generate_markdown_table(
                ["Item", "Qty", "Unit Price", "Line Total"], rows, ["l", "c", "r", "r"]
            )
            + f"\n\n**Subtotal:** {format_money(totals.subtotal)}  "
            + f"\n**Delivery:** {format_money(totals.delivery)}  "
            + f"\n**GST (5%):** {format_money(totals.tax)}  "
            + f"\n\n### Total: {format_money(totals.total)}"
        )
        if order.payment_reference_id:
            md += f"\n\nPayment reference: `{order.payment_reference_id}`"
        await self.query_one(MarkdownViewer).document.update(md)

        self.query_one("#btn-invoice").disabled = False
        self.query_one("#btn-reorder").disabled = not order.items
        self.query_one("#btn-pay").disabled = (
            order.payment_status is PaymentStatus.SUCCESS
            or order.status is OrderStatus.CANCELLED
        )

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)

    @on(Button.Pressed, "#btn-pay")
    def handle_pay(self):
        self.dismiss(False)
        self.app.post_message(
            NavigateMessage(Route("payment", {"order_id": self._order_id}))
        )

    @on(Button.Pressed, "#btn-reorder")
    def handle_reorder(self):
        result = flows.reorder(self.app.state, self._order, self._products)
        if not result.success:
            self.notify(result.message, severity="error")
            return
        self.notify(result.message)
        self.dismiss(True)
        self.app.post_message(NavigateMessage(result.route))

    @on(Button.Pressed, "#btn-invoice")
    def handle_invoice(self):
        try:
            path = write_invoice(self._order, self.app.state.settings.invoice_dir)
        except OSError as e:
            self.notify(f"Could not save invoice: {e}", severity="error")
            return
        self.notify(f"Invoice saved to {path}")
