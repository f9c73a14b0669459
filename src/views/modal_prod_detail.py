from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, MarkdownViewer

from api.models import Product
from utils.pure import format_money, generate_markdown_table


class ProdDetailModal(ModalScreen[bool]):
    """
    Product detail plus add-to-cart.
    Returns True if the cart changed, False if not.
    """

    order_qty = reactive(1, init=False)

    def __init__(self, product: Product) -> None:
        super().__init__()
        self._prod = product

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-prod-detail"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with Vertical(id="vert-prod-order"):
                yield Label("", id="label-in-cart")
                yield Label("Quantity")
                with Horizontal():
                    yield Button("-", id="btn-sub-qty", disabled=True)
                    yield Input(value="1", id="input-order-qty", type="integer")
                    yield Button("+", id="btn-add-qty")
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button("Add to Cart", id="btn-addcart", variant="primary")

    async def on_mount(self):
        prod = self._prod
        table_rows = [
            ["Price", format_money(prod.price)],
            ["Category", prod.category or "-"],
            ["In stock", "-" if prod.stock_quantity is None else prod.stock_quantity],
        ]
        md = f"### {prod.name}\n\n{prod.description or '_No description._'}\n\n"
        md += generate_markdown_table(["Attribute", "Value"], table_rows, ["l", "l"])
        await self.query_one(MarkdownViewer).document.update(md)

        self.query_one("#input-order-qty").validators = [Number(minimum=1)]

        line = self.app.state.cart.get(prod.id)
        if line:
            self.query_one("#label-in-cart", Label).update(
                f"Already in cart: {line.quantity}"
            )
            self.query_one("#btn-addcart", Button).label = "Add More"

        self.query_one("#input-order-qty").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    def on_input_changed(self, message: Input.Changed) -> None:
        if (
            message.input.id == "input-order-qty"
            and message.input.is_valid
            and self.focused == message.input
        ):
            self.order_qty = int(message.value)

    def watch_order_qty(self, qty: int):
        self.query_one("#btn-sub-qty").disabled = qty <= 1
        self.query_one("#input-order-qty", Input).value = str(qty)

    @on(Button.Pressed, "#btn-add-qty")
    def handle_add_qty(self):
        self.order_qty += 1

    @on(Button.Pressed, "#btn-sub-qty")
    def handle_sub_qty(self):
        self.order_qty = max(1, self.order_qty - 1)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)

    @on(Button.Pressed, "#btn-addcart")
    def handle_addcart(self):
        line = self.app.state.cart.add(self._prod, self.order_qty)
        self.app.notify(f"{self._prod.name} x {line.quantity} in cart.")
        self.dismiss(True)
