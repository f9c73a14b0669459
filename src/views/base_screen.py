from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from api.models import Role
from store.policy import Route, authorize
from utils.messages import NavigateMessage, UserLogoutMessage
from utils.presentation import badge
from utils.pure import generate_markdown_table
from views.modal_dialog import DialogModal, QuitDialogModal


class Sidebar(Container):
    def compose(self) -> ComposeResult:
        yield Label("Signed in", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    async def refresh_info(self, current_route: Optional[str]) -> None:
        session = self.app.state.session
        role = session.role

        rows = [
            ["User", session.username or "-"],
            ["User ID", session.user_id if session.user_id is not None else "-"],
            ["Role", badge(role).label if role else "-"],
        ]
        await self.query_one(Markdown).update(
            generate_markdown_table(None, rows, ["l", "l"])
        )

        modes = self.app.ADMIN_MODES if role is Role.ADMIN else self.app.CUSTOMER_MODES
        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [ListItem(Label(v), id="list-menu-item-" + k) for k, v in modes.items()]
        )
        if current_route in modes:
            list_menu.index = list(modes).index(current_route)

    @on(ListView.Selected, "#list-menu")
    def handle_menu_selected(self, event: ListView.Selected) -> None:
        selected = event.item.id.removeprefix("list-menu-item-")
        if selected != self.app.current_mode:
            self.app.post_message(NavigateMessage(Route(selected)))

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        if not await self.app.push_screen_wait(
            DialogModal(
                "Are you sure you want to log out?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            return

        self.app.post_message(UserLogoutMessage())


class BaseScreen(Screen):
    """
    Inherited by all screens: header, footer, sidebar, keybindings and the
    access check.

    Screens set ROUTE to the policy route they serve; public screens leave it None.
    On every resume a protected screen re-checks access and then calls reload().
    """

    ROUTE: Optional[str] = None
    TITLE_TEXT = ""

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()
        self.configure()

    def configure(self, header_sub_title: str = "", show_sidebar: bool = True) -> None:
        self.sub_title = header_sub_title or self.TITLE_TEXT
        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    def guard(self) -> bool:
        """Run the access policy for this screen; redirect silently when denied."""
        if self.ROUTE is None:
            return True
        decision = authorize(self.ROUTE, self.app.state.session.token)
        if not decision.allowed:
            self.app.post_message(NavigateMessage(Route(decision.redirect)))
        return decision.allowed

    @on(ScreenResume)
    async def handle_screen_resume(self) -> None:
        if not self.guard():
            return
        if self._show_sidebar:
            await self.query_one(Sidebar).refresh_info(self.ROUTE)
        self.reload()

    def reload(self) -> None:
        """Fetch whatever the screen shows. Called after every successful access check."""

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
