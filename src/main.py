from typing import Dict, List, Type

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from api.client import ApiClient
from api.models import Role
from flows.profile import ProfileFlow
from utils.logger import get_logger
from utils.messages import NavigateMessage, QuitRequestedMessage, UserLogoutMessage
from utils.state import GlobalState
from views.base_screen import BaseScreen
from views.scr_auth import AuthScreen
from views.scr_cart import CartScreen
from views.scr_chat import ChatScreen
from views.scr_dashboard import DashboardScreen
from views.scr_market import MarketScreen
from views.scr_order_mgmt import OrderManagementScreen
from views.scr_orders import OrdersScreen
from views.scr_products import ProductsScreen
from views.scr_profile import ProfileScreen
from views.scr_weather import WeatherScreen
from views.scr_wishlist import WishlistScreen

_logger = get_logger("app")


class FarmConnectApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
        Binding("ctrl+l", "toggle_language", "English/اردو", show=True),
    ]

    # menu entry -> screen; a fresh instance is built on every navigation
    MENU_SCREENS: Dict[str, Type[BaseScreen]] = {
        "dashboard": DashboardScreen,
        "market": MarketScreen,
        "cart": CartScreen,
        "orders": OrdersScreen,
        "wishlist": WishlistScreen,
        "products": ProductsScreen,
        "order_mgmt": OrderManagementScreen,
        "weather": WeatherScreen,
        "chat": ChatScreen,
        "profile": ProfileScreen,
    }

    ROLE_MODES: Dict[Role, List[str]] = {
        Role.FARMER: [
            "dashboard",
            "market",
            "cart",
            "orders",
            "wishlist",
            "products",
            "order_mgmt",
            "weather",
            "chat",
            "profile",
        ],
        Role.BUYER: ["dashboard", "market", "cart", "orders", "wishlist", "chat", "profile"],
        Role.SUPPLIER: ["dashboard", "products", "order_mgmt", "chat", "profile"],
    }

    CSS_PATH = [
        "styles/index.tcss",
        "styles/auth.tcss",
        "styles/market.tcss",
        "styles/cart.tcss",
        "styles/orders.tcss",
        "styles/manage.tcss",
        "styles/chat.tcss",
    ]

    state: GlobalState
    client: ApiClient

    def __init__(self):
        super().__init__()
        self.state = GlobalState()
        self.client = ApiClient()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        await self.state.restore()
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @work(exclusive=True, group="language")
    async def action_toggle_language(self):
        await self.state.toggle_language()
        # sidebar and dashboard texts are built at compose time
        mode = getattr(self.screen, "MODE", "")
        if self.state.is_authenticated and mode:
            await self.open_mode(mode)

    async def open_mode(self, mode: str) -> None:
        allowed = self.ROLE_MODES.get(self.state.role, [])
        if mode not in allowed:
            _logger.warning(f"{mode} is not available to {self.state.role}")
            mode = "dashboard"
        screen = self.MENU_SCREENS[mode]()
        # the default screen stays at the bottom of the stack
        if len(self.screen_stack) > 1:
            await self.switch_screen(screen)
        else:
            await self.push_screen(screen)

    async def _reset_stack(self) -> None:
        while len(self.screen_stack) > 1:
            await self.pop_screen()

    @on(NavigateMessage)
    async def handle_navigate(self, message: NavigateMessage):
        if self.state.is_authenticated:
            await self.open_mode(message.mode)

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        # account deletion clears the session before asking for a restart
        if self.state.is_authenticated:
            await ProfileFlow(self.client, self.state).logout()
            self.notify("Logout successful.")
        await self._reset_stack()
        self.main_flow()

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        await self.client.aclose()
        self.exit()

    @work(exclusive=True, group="main")
    async def main_flow(self):
        # a persisted session skips the login screen
        if not self.state.is_authenticated:
            await self.push_screen_wait(AuthScreen())
        await self.open_mode("dashboard")


def run():
    FarmConnectApp().run()


if __name__ == "__main__":
    run()
