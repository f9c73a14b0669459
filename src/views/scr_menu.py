from typing import List

from textual import events, on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import DataTable, Input, Label, Select

import api.crud as crud
from api.models import Product
from store import policy
from utils.analytics import categories, filter_products
from utils.pure import format_money
from views.base_screen import BaseScreen
from views.modal_prod_detail import ProdDetailModal

ALL_CATEGORIES = "__all__"


class MenuScreen(BaseScreen):
    """
    Customer landing screen: the whole catalogue, searchable by name and
    narrowed by category.
    """

    ROUTE = policy.MENU
    TITLE_TEXT = "Menu"

    # only here to be displayed in footer
    BINDINGS = [
        Binding("fn+shift+1", "abs(1)", "View Product", show=True, key_display="⏎"),
        Binding("a", "quick_add", "Add 1 to Cart", show=True),
    ]

    query_str = reactive("", init=False)
    category = reactive(ALL_CATEGORIES, init=False)

    def __init__(self):
        super().__init__()
        self._products: List[Product] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Label("", id="label-greeting")
        yield Label("", id="label-recommended")
        with Horizontal(id="hort-filters"):
            yield Input(
                id="input-search", placeholder="Search dishes by name..."
            )
            yield Select(
                [("All categories", ALL_CATEGORIES)],
                allow_blank=False,
                value=ALL_CATEGORIES,
                id="select-category",
            )
        yield DataTable(id="table-menu")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Category", "Price", "In Cart")
        self.query_one("#input-search").focus()

    def reload(self) -> None:
        self.load_products()

    @work(exclusive=True)
    async def load_products(self) -> None:
        username = self.app.state.session.username or "there"
        self.query_one("#label-greeting", Label).update(
            f"Hey, {username}! What are you craving today?"
        )

        res = await crud.list_products(self.app.state.gateway)
        if not res.success:
            self.notify(res.error or "Failed to load menu", severity="error")
            return

        self._products = res.data
        recommended = ", ".join(p.name for p in self._products[:6])
        self.query_one("#label-recommended", Label).update(
            f"Recommended: {recommended}" if recommended else "No dishes on the menu yet."
        )
        self.query_one("#select-category", Select).set_options(
            [("All categories", ALL_CATEGORIES)] + [(c, c) for c in categories(self._products)]
        )
        self.render_table()

    def render_table(self) -> None:
        category = None if self.category == ALL_CATEGORIES else self.category
        cart = self.app.state.cart

        table = self.query_one(DataTable)
        table.clear()
        for p in filter_products(self._products, self.query_str, category):
            line = cart.get(p.id)
            table.add_row(
                p.name,
                p.category or "-",
                format_money(p.price),
                str(line.quantity) if line else "",
                key=p.id,
            )

    def _product_at_cursor(self):
        table = self.query_one(DataTable)
        if not table.row_count:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return next((p for p in self._products if p.id == row_key.value), None)

    def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-search":
            self.query_str = message.value

    @on(Select.Changed, "#select-category")
    def handle_category_changed(self, event: Select.Changed) -> None:
        self.category = event.value

    def watch_query_str(self) -> None:
        self.render_table()

    def watch_category(self) -> None:
        self.render_table()

    @on(DataTable.RowSelected)
    @work()
    async def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        product = next((p for p in self._products if p.id == event.row_key.value), None)
        if product and await self.app.push_screen_wait(ProdDetailModal(product)):
            self.render_table()

    def action_quick_add(self) -> None:
        product = self._product_at_cursor()
        if product is None:
            return
        self.app.state.cart.add(product, 1)
        self.notify(f"{product.name} added to cart.")
        self.render_table()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.query_one("#input-search").focus()
