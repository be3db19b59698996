import unittest

from fakes import BackendTestCase, cart_json
from api.models import Role, UserProfile
from main import FarmConnectApp
from utils.messages import NavigateMessage
from utils.state import GlobalState
from views.scr_auth import AuthScreen
from views.scr_cart import CartScreen
from views.scr_dashboard import DashboardScreen


class AppShellTestCase(BackendTestCase):
    async def make_app(self) -> FarmConnectApp:
        app = FarmConnectApp()
        await app.client.aclose()
        app.client = self.client
        return app

    async def settle(self, app, pilot, screen_type):
        # restore and navigation run in workers; poll, then let loads finish
        for _ in range(40):
            if isinstance(app.screen, screen_type):
                break
            await pilot.pause(0.05)
        await app.workers.wait_for_complete()
        await pilot.pause()

    async def test_without_session_shows_sign_in(self):
        app = await self.make_app()
        async with app.run_test() as pilot:
            # main_flow stays parked on the sign-in screen, so poll instead of waiting on workers
            for _ in range(40):
                if isinstance(app.screen, AuthScreen):
                    break
                await pilot.pause(0.05)
            self.assertIsInstance(app.screen, AuthScreen)
            self.assertEqual(self.backend.calls, [])

    async def test_persisted_session_opens_dashboard_then_cart(self):
        # written by a previous run
        await GlobalState().login(Role.BUYER, UserProfile(name="Sara"))
        self.backend.on("GET", "/api/cart/my-cart", 200, cart_json("c1", []))

        app = await self.make_app()
        async with app.run_test() as pilot:
            await self.settle(app, pilot, DashboardScreen)
            self.assertIsInstance(app.screen, DashboardScreen)
            self.assertEqual(app.state.role, Role.BUYER)

            app.post_message(NavigateMessage("cart"))
            await self.settle(app, pilot, CartScreen)
            self.assertIsInstance(app.screen, CartScreen)
            self.assertTrue(app.screen.flow.is_empty)
            self.assertEqual(len(app.screen.query("#label-cart-empty")), 1)

    async def test_menu_is_limited_to_role(self):
        await GlobalState().login(Role.SUPPLIER, UserProfile(name="Bilal"))
        app = await self.make_app()
        async with app.run_test() as pilot:
            await self.settle(app, pilot, DashboardScreen)
            first = app.screen
            app.post_message(NavigateMessage("cart"))
            for _ in range(40):
                if app.screen is not first:
                    break
                await pilot.pause(0.05)
            # suppliers have no cart, a fresh dashboard is opened instead
            self.assertIsNot(app.screen, first)
            self.assertIsInstance(app.screen, DashboardScreen)


if __name__ == "__main__":
    unittest.main()
