from typing import Optional

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from store import flows, policy
from store.policy import Route
from utils.logger import get_logger
from utils.messages import (
    NavigateMessage,
    NewOrderMessage,
    QuitRequestedMessage,
    UserLogoutMessage,
)
from utils.state import AppState
from views.base_screen import BaseScreen
from views.modal_order_detail import OrderDetailModal
from views.modal_payment import PaymentModal
from views.scr_admin_dashboard import AdminDashboardScreen
from views.scr_admin_orders import AdminOrdersScreen
from views.scr_admin_payments import AdminPaymentsScreen
from views.scr_admin_products import AdminProductsScreen
from views.scr_admin_users import AdminUsersScreen
from views.scr_cart import CartScreen
from views.scr_login import LoginScreen
from views.scr_menu import MenuScreen
from views.scr_orders import OrdersScreen
from views.scr_payments import PaymentsScreen

_logger = get_logger(__name__)


class QuickBiteApp(App):
    TITLE = "QuickBite"

    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    # mode names are the policy route names
    MODES = {
        "menu": MenuScreen,
        "cart": CartScreen,
        "orders": OrdersScreen,
        "payments": PaymentsScreen,
        "admin_dashboard": AdminDashboardScreen,
        "admin_orders": AdminOrdersScreen,
        "admin_products": AdminProductsScreen,
        "admin_users": AdminUsersScreen,
        "admin_payments": AdminPaymentsScreen,
    }

    ADMIN_MODES = {
        "admin_dashboard": "Dashboard",
        "admin_orders": "Orders",
        "admin_products": "Products",
        "admin_users": "Users",
        "admin_payments": "Payments",
    }
    CUSTOMER_MODES = {
        "menu": "Menu",
        "cart": "Cart",
        "orders": "My Orders",
        "payments": "Payment History",
    }

    CSS_PATH = [
        "views/styles/index.tcss",
        "views/styles/login.tcss",
        "views/styles/customer.tcss",
        "views/styles/admin.tcss",
    ]

    state: AppState

    def __init__(self, state: Optional[AppState] = None):
        super().__init__()
        self.state = state or AppState.create()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @work(exclusive=True, group="main_flow")
    async def main_flow(self):
        """Sign in unless the saved cookie still holds a valid session, then land by role."""
        route = None
        if not self.state.session.is_valid():
            route = await self.push_screen_wait(LoginScreen())
        else:
            _logger.info(f"Resuming session of {self.state.session.username}")
        await self.navigate(route or Route(policy.landing_route(self.state.session.role)))

    async def navigate(self, route: Route) -> None:
        decision = policy.authorize(route.name, self.state.session.token)
        if not decision.allowed:
            _logger.debug(f"{route.name} denied, redirecting to {decision.redirect}")
            route = Route(decision.redirect)

        if route.name in policy.PUBLIC_ROUTES:
            if not isinstance(self.screen, LoginScreen):
                self.main_flow()
        elif route.name == "order_detail":
            await self.push_screen(OrderDetailModal(route.params["order_id"]))
        elif route.name == "payment":
            await self.push_screen(PaymentModal(route.params["order_id"]))
        elif route.name != self.current_mode:
            _logger.debug(f"switching mode {self.current_mode} -> {route.name}")
            await self.switch_mode(route.name)

    @on(NavigateMessage)
    async def handle_navigate(self, message: NavigateMessage):
        await self.navigate(message.route)

    @on(NewOrderMessage)
    def handle_new_order(self):
        # modals post this after dismissing; refresh whatever screen is underneath
        if isinstance(self.screen, BaseScreen) and self.screen.guard():
            self.screen.reload()

    @on(UserLogoutMessage)
    def handle_user_logout(self):
        result = flows.sign_out(self.state)
        self.notify(result.message)
        self.main_flow()

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        await self.state.close()
        self.exit()


def run():
    app = QuickBiteApp()
    app.run()


if __name__ == "__main__":
    run()
