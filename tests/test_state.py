import unittest
from datetime import datetime

from fakes import BackendTestCase, order_json
from api.models import Role, Session, UserProfile
from db import database as db_database
from db import storage
from flows.dashboard import DashboardFlow
from utils import config
from utils.i18n import t
from utils.state import GlobalState


class StorageTestCase(BackendTestCase):
    async def test_set_get_remove(self):
        self.assertIsNone(await storage.get_item("k"))
        await storage.set_item("k", "v1")
        await storage.set_item("k", "v2")
        self.assertEqual(await storage.get_item("k"), "v2")
        await storage.remove_item("k")
        self.assertIsNone(await storage.get_item("k"))

    async def test_json_entries(self):
        await storage.set_json("blob", {"a": [1, 2]})
        self.assertEqual(await storage.get_json("blob"), {"a": [1, 2]})
        await storage.set_item("blob", "{not json")
        self.assertIsNone(await storage.get_json("blob"))

    async def test_table_created_per_database_file(self):
        async with db_database.connect() as conn:
            cur = await conn.execute("SELECT name FROM sqlite_master WHERE type='table';")
            tables = [row[0] for row in await cur.fetchall()]
            await cur.close()
        self.assertIn("kv", tables)


class SessionStateTestCase(BackendTestCase):
    # ---------- Session ----------

    async def test_login_persists_snapshot(self):
        state = GlobalState()
        await state.login(Role.FARMER, UserProfile(name="Ahmed", image_url="a.png"))

        self.assertTrue(state.is_authenticated)
        self.assertEqual(state.role, Role.FARMER)
        self.assertEqual(
            await storage.get_json(config.AUTH_STORAGE_KEY),
            {"isAuthenticated": True, "role": "Farmer", "user": {"name": "Ahmed", "img": "a.png"}},
        )

        restored = GlobalState()
        await restored.restore()
        self.assertTrue(restored.is_authenticated)
        self.assertEqual(restored.role, Role.FARMER)
        self.assertEqual(restored.user.name, "Ahmed")

    async def test_logout_clears_session_and_snapshot(self):
        state = GlobalState()
        await state.login(Role.BUYER, UserProfile(name="Sara"))
        await state.logout()

        self.assertEqual(state.session, Session())
        self.assertIsNone(state.role)
        self.assertIsNone(state.user)
        self.assertIsNone(await storage.get_item(config.AUTH_STORAGE_KEY))

        restored = GlobalState()
        await restored.restore()
        self.assertFalse(restored.is_authenticated)

    async def test_restore_ignores_unknown_role(self):
        await storage.set_json(
            config.AUTH_STORAGE_KEY, {"isAuthenticated": True, "role": "Admin", "user": None}
        )
        state = GlobalState()
        await state.restore()
        self.assertFalse(state.is_authenticated)

    # ---------- Language ----------

    async def test_toggle_language_persists_code(self):
        state = GlobalState()
        self.assertEqual(await state.toggle_language(), "ur")
        self.assertEqual(await storage.get_item(config.LANGUAGE_STORAGE_KEY), "ur")

        restored = GlobalState()
        await restored.restore()
        self.assertEqual(restored.language, "ur")

        self.assertEqual(await state.toggle_language(), "en")
        self.assertEqual(await storage.get_item(config.LANGUAGE_STORAGE_KEY), "en")

    async def test_dashboard_strings_follow_language(self):
        self.backend.on(
            "GET", "/api/v1/order/supplier-orders", 200, {"orders": [order_json("o1")]}
        )
        self.backend.on("GET", "/api/products/my_product", 200, {"products": []})
        state = GlobalState()
        flow = DashboardFlow(self.client, Role.FARMER)
        await flow.load()
        now = datetime(2026, 10, 19)

        english = flow.cards(state.language, now)
        self.assertEqual(english[0][0], "Active Orders")
        self.assertEqual(flow.title(state.language), "Farmer Console")

        await state.toggle_language()
        urdu = flow.cards(state.language, now)
        self.assertEqual(urdu[0][0], t("ur", "active_orders"))
        self.assertNotEqual(urdu[0][0], english[0][0])
        self.assertEqual(flow.title(state.language), "کسان کنسول")


class I18nTestCase(unittest.TestCase):
    def test_fallbacks(self):
        self.assertEqual(t("en", "menu_cart"), "Cart")
        self.assertEqual(t("fr", "menu_cart"), "Cart")
        self.assertEqual(t("ur", "no_such_key"), "no_such_key")
        self.assertEqual(t("en", "revenue", month="Oct"), "Revenue (Oct)")


if __name__ == "__main__":
    unittest.main()
