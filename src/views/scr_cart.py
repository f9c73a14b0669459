from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, HorizontalGroup, VerticalScroll
from textual.widgets import Button, Label, Markdown, Rule

from store import policy
from store.cart import CartLine
from utils.messages import CartChangedMessage, NavigateMessage
from utils.pure import format_money, generate_markdown_table
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal
from views.modal_dialog import DialogModal


class CartItemWidget(HorizontalGroup):
    """One cart line with its own quantity controls."""

    def __init__(self, line: CartLine):
        super().__init__()
        self.line = line

    def compose(self):
        with Container(id="div-cart-item-group"):
            with Container(id="div-item"):
                yield Label(self.line.name, id="label-item-name")
                yield Label(format_money(self.line.unit_price), id="label-item-price")
                yield Label(str(self.line.quantity), id="label-item-qty")
                yield Label(format_money(self.line.line_total), id="label-item-total")
            with Container(id="div-actions"):
                yield Button("-", id="btn-item-dec")
                yield Button("+", id="btn-item-inc")
                yield Button("Remove", id="btn-item-remove", variant="error")

    def _show(self, line: CartLine) -> None:
        self.line = line
        self.query_one("#label-item-qty", Label).update(str(line.quantity))
        self.query_one("#label-item-total", Label).update(format_money(line.line_total))

    @on(Button.Pressed, "#btn-item-inc")
    def handle_increment(self):
        line = self.app.state.cart.increment(self.line.product_id)
        if line:
            self._show(line)
            self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-item-dec")
    def handle_decrement(self):
        # quantity never drops below 1; use Remove for that
        line = self.app.state.cart.decrement(self.line.product_id)
        if line:
            self._show(line)
            self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-item-remove")
    @work()
    async def handle_remove_item(self):
        remove_confirmed = await self.app.push_screen_wait(
            DialogModal(
                f"Remove {self.line.name} from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        )

        if remove_confirmed:
            self.app.state.cart.remove(self.line.product_id)
            self.post_message(CartChangedMessage())
            await self.remove()
            self.notify("Item removed from cart.", severity="information")


class CartScreen(BaseScreen):
    ROUTE = "cart"
    TITLE_TEXT = "Cart"

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield VerticalScroll(id="vertscroll-content")
        yield Rule(line_style="dashed")
        yield Markdown("", id="md-cart-totals")
        with Horizontal(id="hort-buttons"):
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Browse Menu", id="btn-menu")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    def reload(self) -> None:
        self.render_cart()

    @work(exclusive=True)  # must be exclusive, else duplicate widgets get mounted
    async def render_cart(self):
        cart = self.app.state.cart
        cart.reload()

        content = self.query_one("#vertscroll-content")
        await content.remove_children()
        await content.mount_all([CartItemWidget(line) for line in cart.lines()])
        content.set_class(cart.is_empty, "no-items")
        await self.render_totals()

    async def render_totals(self) -> None:
        cart = self.app.state.cart
        if cart.is_empty:
            md = "### Your cart is empty\n\nPick something tasty from the menu."
        else:
            totals = cart.totals()
            rows = [
                ["Subtotal", format_money(totals.subtotal)],
                ["Delivery", format_money(totals.delivery)],
                ["GST (5%)", format_money(totals.tax)],
                ["**Total**", f"**{format_money(totals.total)}**"],
            ]
            md = generate_markdown_table(["Bill", "Amount"], rows, ["l", "r"])
        await self.query_one("#md-cart-totals", Markdown).update(md)
        self.query_one("#btn-checkout").disabled = cart.is_empty

    @on(CartChangedMessage)
    async def handle_cart_change(self, message: CartChangedMessage):
        message.stop()
        # remove() already took the widget off screen; only resync when lines were added elsewhere
        shown = len(self.query(CartItemWidget))
        if shown < len(self.app.state.cart):
            self.render_cart()
        else:
            await self.render_totals()
            self.query_one("#vertscroll-content").set_class(
                self.app.state.cart.is_empty, "no-items"
            )

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if self.app.state.cart.is_empty:
            self.app.notify("Cart is empty.", severity="warning")
            return

        if await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove all items from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        ):
            self.app.state.cart.clear()
            self.render_cart()

    @on(Button.Pressed, "#btn-menu")
    def handle_menu(self) -> None:
        self.app.post_message(NavigateMessage(policy.Route(policy.MENU)))

    @on(Button.Pressed, "#btn-checkout")
    @work()
    async def handle_checkout(self) -> None:
        if self.app.state.cart.is_empty:
            self.app.notify("Cart is empty.", severity="warning")
            return

        route = await self.app.push_screen_wait(CheckoutModal())
        if route is not None:
            self.app.post_message(NavigateMessage(route))
