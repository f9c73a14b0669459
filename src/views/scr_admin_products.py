from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, MarkdownViewer

import api.crud as crud
from api.models import Product
from utils.analytics import filter_products
from utils.pure import format_money, generate_markdown_table
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal
from views.modal_forms import ProductFormModal


class AdminProductsScreen(BaseScreen):
    """
    Catalogue management: search, add, edit and delete products.
    """

    ROUTE = "admin_products"
    TITLE_TEXT = "Products"

    def __init__(self) -> None:
        super().__init__()
        self._products: List[Product] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield Input(id="input-search", placeholder="Search for product...")
            yield DataTable(id="table-products")
            yield MarkdownViewer(id="md-prod", show_table_of_contents=False)
            with Horizontal(id="hort-controls"):
                yield Button("Refresh", id="btn-refresh")
                yield Button("Delete", id="btn-delete", variant="error")
                yield Button("Edit", id="btn-edit")
                yield Button("Add Product", id="btn-add", variant="success")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Category", "Price", "Stock")

    def reload(self) -> None:
        self.load_products()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="load")
    async def load_products(self) -> None:
        res = await crud.list_products(self.app.state.gateway)
        if not res.success:
            self.notify(res.error or "Failed to load products", severity="error")
            return
        self._products = res.data
        self.render_table()

    def render_table(self) -> None:
        query = self.query_one("#input-search", Input).value
        table = self.query_one(DataTable)
        table.clear()
        for p in filter_products(self._products, query):
            table.add_row(
                p.id,
                p.name,
                p.category or "-",
                format_money(p.price),
                "-" if p.stock_quantity is None else str(p.stock_quantity),
                key=p.id,
            )
        if not table.row_count:
            self.render_product(None)

    def _current(self) -> Optional[Product]:
        table = self.query_one(DataTable)
        if not table.row_count:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return next((p for p in self._products if p.id == row_key.value), None)

    def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-search":
            self.render_table()

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self) -> None:
        self.render_product(self._current())

    @work(exclusive=True, group="detail")
    async def render_product(self, prod: Optional[Product]) -> None:
        viewer = self.query_one("#md-prod", MarkdownViewer)
        if prod is None:
            await viewer.document.update("### No product selected.")
            return
        rows = [
            ["Price", format_money(prod.price)],
            ["Category", prod.category or "-"],
            ["Stock", "-" if prod.stock_quantity is None else prod.stock_quantity],
            ["Image", prod.image_url or "-"],
            ["Description", prod.description or "-"],
        ]
        await viewer.document.update(
            f"### Product Detail: {prod.name}\n\n"
            + generate_markdown_table(["Attribute", "Value"], rows, ["l", "l"])
        )

    @on(Button.Pressed, "#btn-add")
    @work(exclusive=True, group="edit")
    async def handle_add(self) -> None:
        draft = await self.app.push_screen_wait(ProductFormModal())
        if draft is None:
            return
        res = await crud.create_product(self.app.state.gateway, draft)
        if not res.success:
            self.notify(f"Failed to add product: {res.error}", severity="error")
            return
        self.notify(f"{draft.name} added.")
        self.load_products()

    @on(Button.Pressed, "#btn-edit")
    @work(exclusive=True, group="edit")
    async def handle_edit(self) -> None:
        prod = self._current()
        if prod is None:
            self.notify("Select a product first.", severity="warning")
            return
        # edit what the service holds now, not the row loaded earlier
        fresh = await crud.get_product(self.app.state.gateway, prod.id)
        if not fresh.success:
            self.notify(f"Failed to load product: {fresh.error}", severity="error")
            self.load_products()
            return
        prod = fresh.data
        draft = await self.app.push_screen_wait(ProductFormModal(prod))
        if draft is None:
            return
        res = await crud.update_product(self.app.state.gateway, prod.id, draft)
        if not res.success:
            self.notify(f"Failed to update product: {res.error}", severity="error")
            return
        self.notify("Product updated successfully.")
        self.load_products()

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True, group="edit")
    async def handle_delete(self) -> None:
        prod = self._current()
        if prod is None:
            self.notify("Select a product first.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Delete {prod.name}? This cannot be undone.",
                primary_text="Delete",
                secondary_text="Cancel",
                tone="error",
            )
        ):
            return
        res = await crud.delete_product(self.app.state.gateway, prod.id)
        if not res.success:
            self.notify(f"Failed to delete product: {res.error}", severity="error")
            return
        self.notify(f"{prod.name} deleted.")
        self.load_products()
