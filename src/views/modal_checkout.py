from typing import Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, MarkdownViewer

from store import flows
from store.policy import Route
from utils.messages import NewOrderMessage
from utils.pure import format_money, generate_markdown_table
from views.modal_dialog import DialogModal


class CheckoutModal(ModalScreen[Optional[Route]]):
    """
    Order summary for the current cart.
    Dismisses with the payment Route once the order is placed, None otherwise.
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield MarkdownViewer("", show_table_of_contents=False)
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Place Order", id="btn-submit", variant="primary")

    async def on_mount(self):
        cart = self.app.state.cart
        headers = ["Item", "Unit Price", "Quantity", "Total"]
        rows = [
            [
                line.name,
                format_money(line.unit_price),
                line.quantity,
                format_money(line.line_total),
            ]
            for line in cart.lines()
        ]
        totals = cart.totals()
        md = "### Order Summary\n\n"
        md += generate_markdown_table(headers, rows, ["l", "r", "c", "r"])
        md += (
            f"\n\n**Subtotal:** {format_money(totals.subtotal)}  "
            f"\n**Delivery:** {format_money(totals.delivery)}  "
            f"\n**GST (5%):** {format_money(totals.tax)}  "
            f"\n\n### Total: {format_money(totals.total)}"
        )
        await self.query_one(MarkdownViewer).document.update(md)
        self.query_one("#btn-submit").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        if not await self.app.push_screen_wait(
            DialogModal(
                "Place order? You will be taken to payment next.",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        button = self.query_one("#btn-submit", Button)
        button.disabled = True
        result = await flows.place_order(self.app.state)
        if not result.success:
            button.disabled = False
            self.notify(result.message, severity="error")
            if result.route is not None:
                self.dismiss(result.route)
            return

        self.notify(f"Order placed. Your order number is {result.data.id}.")
        self.app.post_message(NewOrderMessage())
        self.dismiss(result.route)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(None)
