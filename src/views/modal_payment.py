from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Markdown, RadioButton, RadioSet

import api.crud as crud
from api.models import PaymentStatus
from store import flows
from store.cart import compute_totals
from utils.messages import NavigateMessage, NewOrderMessage
from utils.pure import format_money, generate_markdown_table

# method -> (input label, placeholder); the details are only for show, never sent
METHODS = {
    "upi": ("UPI ID", "name@bank"),
    "card": ("Card number", "4111 1111 1111 1111"),
    "wallet": ("Wallet phone", "9876543210"),
}


class PaymentModal(ModalScreen[bool]):
    """
    Simulated payment for one order. A single press of Pay makes a single
    attempt; on success the app is sent to the order's detail.
    """

    def __init__(self, order_id: str) -> None:
        super().__init__()
        self._order_id = order_id
        self._processing = False

    def compose(self) -> ComposeResult:
        with Vertical(id="vert-payment"):
            yield Markdown("", id="md-payment-summary")
            yield Label("Pay with")
            with RadioSet(id="radio-method"):
                yield RadioButton("UPI", value=True, id="radio-upi")
                yield RadioButton("Card", id="radio-card")
                yield RadioButton("Wallet", id="radio-wallet")
            yield Label(METHODS["upi"][0], id="label-method-detail")
            yield Input(placeholder=METHODS["upi"][1], id="input-method-detail")
            with Horizontal():
                yield Button("Later", id="btn-quit")
                yield Button("Pay", id="btn-pay", variant="success")

    def on_mount(self):
        self.load_order()

    @work(exclusive=True)
    async def load_order(self) -> None:
        md = self.query_one("#md-payment-summary", Markdown)
        res = await crud.get_order(self.app.state.gateway, self._order_id)
        if not res.success:
            await md.update(f"### Payment for order {self._order_id}")
            self.notify(res.error or "Failed to load order", severity="error")
            return

        order = res.data
        totals = compute_totals(order.total_amount)
        rows = [
            ["Items", format_money(totals.subtotal)],
            ["Delivery", format_money(totals.delivery)],
            ["GST (5%)", format_money(totals.tax)],
            ["**Amount due**", f"**{format_money(totals.total)}**"],
        ]
        await md.update(
            f"### Payment for order {order.id}\n\n"
            + generate_markdown_table(["", "Amount"], rows, ["l", "r"])
        )
        if order.payment_status is PaymentStatus.SUCCESS:
            self.query_one("#btn-pay", Button).disabled = True
            self.notify("This order is already paid.", severity="warning")

    @on(RadioSet.Changed, "#radio-method")
    def handle_method_changed(self, event: RadioSet.Changed) -> None:
        method = event.pressed.id.removeprefix("radio-")
        label, placeholder = METHODS[method]
        self.query_one("#label-method-detail", Label).update(label)
        detail = self.query_one("#input-method-detail", Input)
        detail.placeholder = placeholder
        detail.value = ""

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape" and not self._processing:
            self.dismiss(False)

    @on(Button.Pressed, "#btn-pay")
    @work(exclusive=True)
    async def handle_pay(self):
        if self._processing:
            return
        self._processing = True
        button = self.query_one("#btn-pay", Button)
        button.disabled = True
        button.label = "Processing..."

        result = await flows.pay_order(self.app.state, self._order_id)

        self._processing = False
        if not result.success:
            button.disabled = False
            button.label = "Pay"
            self.notify(result.message, severity="error")
            return

        self.notify(result.message)
        self.app.post_message(NewOrderMessage())
        self.dismiss(True)
        self.app.post_message(NavigateMessage(result.route))

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        if not self._processing:
            self.dismiss(False)
