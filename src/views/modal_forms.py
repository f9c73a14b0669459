from decimal import Decimal, InvalidOperation
from typing import Optional

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, Select

from api.models import Product, ProductDraft, Role, User, UserDraft
from utils.presentation import badge


def _mark_invalid(widget: Input) -> None:
    widget.add_class("-invalid")
    widget.focus()


class ProductFormModal(ModalScreen[Optional[ProductDraft]]):
    """
    Add or edit a product. Dismisses with a ProductDraft, or None when cancelled.
    """

    def __init__(self, product: Optional[Product] = None) -> None:
        super().__init__()
        self._product = product

    def compose(self) -> ComposeResult:
        p = self._product
        with VerticalScroll(id="vert-form"):
            yield Label("Edit Product" if p else "New Product", id="label-form-title")
            yield Label("Name *")
            yield Input(p.name if p else "", id="input-name")
            yield Label("Price *")
            yield Input(
                str(p.price) if p else "",
                id="input-price",
                type="number",
                validators=[Number(minimum=0.01)],
            )
            yield Label("Category")
            yield Input(p.category if p else "", id="input-category")
            yield Label("Description")
            yield Input(p.description if p else "", id="input-description")
            yield Label("Image URL")
            yield Input((p.image_url or "") if p else "", id="input-image")
            yield Label("Stock")
            yield Input(
                str(p.stock_quantity) if p and p.stock_quantity is not None else "1",
                id="input-stock",
                type="integer",
                validators=[Number(minimum=0)],
            )
            with Horizontal():
                yield Button("Cancel", id="btn-quit")
                yield Button("Save", id="btn-save", variant="primary")

    def on_mount(self):
        self.query_one("#input-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(None)

    @on(Button.Pressed, "#btn-save")
    def handle_save(self):
        name_input = self.query_one("#input-name", Input)
        price_input = self.query_one("#input-price", Input)
        stock_input = self.query_one("#input-stock", Input)

        name = name_input.value.strip()
        if not name:
            _mark_invalid(name_input)
            self.notify("Name is required.", severity="error")
            return

        try:
            price = Decimal(price_input.value.strip())
        except InvalidOperation:
            price = Decimal("0")
        if price <= 0:
            _mark_invalid(price_input)
            self.notify("Price must be greater than zero.", severity="error")
            return

        stock_text = stock_input.value.strip()
        if stock_text and not stock_input.is_valid:
            _mark_invalid(stock_input)
            self.notify("Stock must be zero or more.", severity="error")
            return

        self.dismiss(
            ProductDraft(
                name=name,
                price=price,
                description=self.query_one("#input-description", Input).value.strip(),
                category=self.query_one("#input-category", Input).value.strip(),
                image_url=self.query_one("#input-image", Input).value.strip(),
                stock_quantity=int(stock_text) if stock_text else 1,
            )
        )


class UserFormModal(ModalScreen[Optional[UserDraft]]):
    """
    Add or edit an account. The password is only sent when typed;
    leaving it blank on edit keeps the current one.
    """

    def __init__(self, user: Optional[User] = None) -> None:
        super().__init__()
        self._user = user

    def compose(self) -> ComposeResult:
        u = self._user
        with VerticalScroll(id="vert-form"):
            yield Label("Edit User" if u else "New User", id="label-form-title")
            yield Label("Username *")
            yield Input(u.username if u else "", id="input-username")
            yield Label("Email *")
            yield Input(u.email if u else "", id="input-email")
            yield Label("Full name")
            yield Input(u.full_name if u else "", id="input-name")
            yield Label("Phone")
            yield Input(u.phone if u else "", id="input-phone")
            yield Label("Role")
            yield Select(
                [(badge(r).label, r.value) for r in Role],
                allow_blank=False,
                value=(u.role if u else Role.USER).value,
                id="select-role",
            )
            yield Label("Password" + ("" if u else " *"))
            yield Input(
                placeholder="leave blank to keep" if u else "",
                password=True,
                id="input-pwd",
            )
            with Horizontal():
                yield Button("Cancel", id="btn-quit")
                yield Button("Save", id="btn-save", variant="primary")

    def on_mount(self):
        self.query_one("#input-username").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(None)

    @on(Button.Pressed, "#btn-save")
    def handle_save(self):
        username_input = self.query_one("#input-username", Input)
        email_input = self.query_one("#input-email", Input)
        pwd_input = self.query_one("#input-pwd", Input)

        for widget in (username_input, email_input):
            if not widget.value.strip():
                _mark_invalid(widget)
                self.notify("Username and email are required.", severity="error")
                return

        # a new account cannot sign in without one
        if self._user is None and not pwd_input.value.strip():
            _mark_invalid(pwd_input)
            self.notify("Password is required for new users.", severity="error")
            return

        self.dismiss(
            UserDraft(
                username=username_input.value.strip(),
                email=email_input.value.strip(),
                full_name=self.query_one("#input-name", Input).value.strip(),
                phone=self.query_one("#input-phone", Input).value.strip(),
                role=Role(self.query_one("#select-role", Select).value),
                password=pwd_input.value if pwd_input.value.strip() else "",
            )
        )
