from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, MarkdownViewer, Select

import api.crud as crud
from api.models import Role, User
from utils.analytics import filter_users
from utils.presentation import badge, badge_text
from utils.pure import generate_markdown_table, pretty_date
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal
from views.modal_forms import UserFormModal

ALL_ROLES = "ALL"


class AdminUsersScreen(BaseScreen):
    """
    Account management: search by name, email or id, filter by role,
    add, edit and delete users.
    """

    ROUTE = "admin_users"
    TITLE_TEXT = "Users"

    def __init__(self) -> None:
        super().__init__()
        self._users: List[User] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            with Horizontal(id="hort-filters"):
                yield Input(id="input-search", placeholder="Search by username, email or id...")
                yield Select(
                    [("All roles", ALL_ROLES)] + [(badge(r).label, r.value) for r in Role],
                    allow_blank=False,
                    value=ALL_ROLES,
                    id="select-role",
                )
            yield DataTable(id="table-users")
            yield MarkdownViewer(id="md-user", show_table_of_contents=False)
            with Horizontal(id="hort-controls"):
                yield Button("Refresh", id="btn-refresh")
                yield Button("Delete", id="btn-delete", variant="error")
                yield Button("Edit", id="btn-edit")
                yield Button("Add User", id="btn-add", variant="success")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Username", "Email", "Phone", "Role")

    def reload(self) -> None:
        self.load_users()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="load")
    async def load_users(self) -> None:
        res = await crud.list_users(self.app.state.gateway)
        if not res.success:
            self.notify(res.error or "Failed to load users", severity="error")
            return
        self._users = res.data
        self.render_table()

    def render_table(self) -> None:
        query = self.query_one("#input-search", Input).value
        role_value = self.query_one("#select-role", Select).value
        role = None if role_value == ALL_ROLES else Role(role_value)

        table = self.query_one(DataTable)
        table.clear()
        for u in filter_users(self._users, query, role):
            table.add_row(
                str(u.id), u.username, u.email, u.phone or "-", badge_text(u.role), key=str(u.id)
            )
        if not table.row_count:
            self.render_user(None)

    def _current(self) -> Optional[User]:
        table = self.query_one(DataTable)
        if not table.row_count:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return next((u for u in self._users if str(u.id) == row_key.value), None)

    def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-search":
            self.render_table()

    @on(Select.Changed, "#select-role")
    def handle_role_changed(self) -> None:
        self.render_table()

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self) -> None:
        self.render_user(self._current())

    @work(exclusive=True, group="detail")
    async def render_user(self, user: Optional[User]) -> None:
        viewer = self.query_one("#md-user", MarkdownViewer)
        if user is None:
            await viewer.document.update("### No user selected.")
            return
        rows = [
            ["Full name", user.full_name or "-"],
            ["Email", user.email],
            ["Phone", user.phone or "-"],
            ["Role", badge(user.role).label],
            ["Joined", pretty_date(user.created_at)],
        ]
        await viewer.document.update(
            f"### {user.username} (#{user.id})\n\n"
            + generate_markdown_table(["Attribute", "Value"], rows, ["l", "l"])
        )

    @on(Button.Pressed, "#btn-add")
    @work(exclusive=True, group="edit")
    async def handle_add(self) -> None:
        draft = await self.app.push_screen_wait(UserFormModal())
        if draft is None:
            return
        res = await crud.create_user(self.app.state.gateway, draft)
        if not res.success:
            self.notify(f"Failed to add user: {res.error}", severity="error")
            return
        self.notify(f"{draft.username} added.")
        self.load_users()

    @on(Button.Pressed, "#btn-edit")
    @work(exclusive=True, group="edit")
    async def handle_edit(self) -> None:
        user = self._current()
        if user is None:
            self.notify("Select a user first.", severity="warning")
            return
        fresh = await crud.get_user(self.app.state.gateway, user.id)
        if not fresh.success:
            self.notify(f"Failed to load user: {fresh.error}", severity="error")
            self.load_users()
            return
        user = fresh.data
        draft = await self.app.push_screen_wait(UserFormModal(user))
        if draft is None:
            return
        res = await crud.update_user(self.app.state.gateway, user.id, draft)
        if not res.success:
            self.notify(f"Failed to update user: {res.error}", severity="error")
            return
        self.notify("User updated successfully.")
        self.load_users()

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True, group="edit")
    async def handle_delete(self) -> None:
        user = self._current()
        if user is None:
            self.notify("Select a user first.", severity="warning")
            return
        if user.id == self.app.state.user_id:
            self.notify("You cannot delete your own account.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Delete user {user.username}? This cannot be undone.",
                primary_text="Delete",
                secondary_text="Cancel",
                tone="error",
            )
        ):
            return
        res = await crud.delete_user(self.app.state.gateway, user.id)
        if not res.success:
            self.notify(f"Failed to delete user: {res.error}", severity="error")
            return
        self.notify(f"{user.username} deleted.")
        self.load_users()
