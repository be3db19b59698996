import os
import tempfile
import unittest
from datetime import datetime

import httpx

from fakes import BackendTestCase, cart_json, order_json, product_json
from api.models import Order, Role, UserProfile
from flows.chat import CONNECTION_TROUBLE, GREETING, NO_ANSWER, ChatFlow
from flows.dashboard import DashboardFlow, active_count, monthly_revenue
from flows.orders import MyOrdersFlow, OrderManagementFlow
from flows.products import MarketplaceFlow, ProductForm, ProductManagementFlow
from flows.profile import ProfileFlow
from flows.weather import DEFAULT_CITY, WeatherFlow
from flows.wishlist import WishlistFlow
from utils.state import GlobalState


class OrdersFlowTestCase(BackendTestCase):
    # ---------- Buyer history ----------

    async def test_cancel_only_open_orders(self):
        self.backend.on(
            "GET",
            "/api/v1/order/user-orders",
            200,
            {"orders": [order_json("o1"), order_json("o2", status="shipped")]},
        )
        self.backend.on("PUT", "/api/v1/order/cancel/o1", 200, {})
        flow = MyOrdersFlow(self.client)
        await flow.fetch_orders()
        open_order, shipped = flow.orders

        self.assertFalse(await flow.cancel_order(shipped))
        self.assertEqual(flow.message, "Order cannot be cancelled while shipped")
        self.assertNotIn("/api/v1/order/cancel/o2", self.backend.paths)

        self.assertTrue(await flow.cancel_order(open_order))
        self.assertEqual(flow.message, "Order cancelled")
        self.assertEqual(self.backend.paths.count("/api/v1/order/user-orders"), 2)

    async def test_review_delivered_line_once(self):
        self.backend.on("POST", "/api/review/add", 201, {})
        flow = MyOrdersFlow(self.client)
        delivered = Order.from_json(order_json("o1", status="delivered"))
        pending = Order.from_json(order_json("o2"))

        self.assertFalse(await flow.submit_review(delivered, "p1", 0, "Great"))
        self.assertEqual(flow.message, "Select rating and add a comment")
        self.assertFalse(await flow.submit_review(pending, "p1", 5, "Great"))
        self.assertEqual(self.backend.calls, [])

        self.assertTrue(await flow.submit_review(delivered, "p1", 5, " Great tomatoes "))
        self.assertEqual(
            self.backend.payload("POST", "/api/review/add"),
            {"productId": "p1", "rating": 5, "comment": "Great tomatoes"},
        )
        self.assertFalse(flow.can_review(delivered, "p1"))

    async def test_load_detail_failure(self):
        flow = MyOrdersFlow(self.client)
        self.assertIsNone(await flow.load_detail("missing"))
        self.assertEqual(flow.message, "no route GET /api/v1/order/single/missing")

    # ---------- Seller side ----------

    async def test_advance_follows_chain(self):
        self.backend.on(
            "GET",
            "/api/v1/order/supplier-orders",
            200,
            {"orders": [order_json("o1"), order_json("o2", status="delivered")]},
        )
        self.backend.on("PUT", "/api/v1/order/update-status/o1", 200, {})
        flow = OrderManagementFlow(self.client)
        await flow.fetch_orders()

        self.assertTrue(await flow.advance(flow.orders[0]))
        self.assertEqual(flow.orders[0].status, "processing")
        self.assertEqual(
            self.backend.payload("PUT", "/api/v1/order/update-status/o1"), {"status": "processing"}
        )

        self.assertFalse(await flow.advance(flow.orders[1]))
        self.assertEqual(flow.message, "Order is already delivered")
        self.assertFalse(await flow.cancel(flow.orders[1]))

    async def test_cancel_and_filters(self):
        self.backend.on(
            "GET",
            "/api/v1/order/supplier-orders",
            200,
            {"orders": [order_json("aa11"), order_json("bb22", status="shipped")]},
        )
        self.backend.on("PUT", "/api/v1/order/update-status/aa11", 200, {})
        flow = OrderManagementFlow(self.client)
        await flow.fetch_orders()

        self.assertTrue(await flow.cancel(flow.orders[0]))
        self.assertEqual(flow.orders[0].status, "canceled")

        flow.status_filter = "shipped"
        self.assertEqual([o.id for o in flow.visible_orders], ["bb22"])
        flow.status_filter = "all"
        flow.search_term = "AA1"
        self.assertEqual([o.id for o in flow.visible_orders], ["aa11"])

    async def test_status_update_failure(self):
        flow = OrderManagementFlow(self.client)
        order = Order.from_json(order_json("o1", status="processing"))
        flow.orders = [order]
        self.backend.on("PUT", "/api/v1/order/update-status/o1", 403, {})
        self.assertFalse(await flow.advance(order))
        self.assertEqual(flow.message, "Failed to update status")
        self.assertEqual(flow.orders[0].status, "processing")


class DashboardFlowTestCase(BackendTestCase):
    def serve_buyer(self):
        self.backend.on(
            "GET",
            "/api/v1/order/user-orders",
            200,
            {"orders": [order_json("o1"), order_json("o2", status="delivered")]},
        )
        self.backend.on(
            "GET", "/api/wishlist/my-wishlist", 200, {"wishlist": {"products": [{"productId": "p1"}]}}
        )
        self.backend.on("GET", "/api/cart/my-cart", 200, cart_json("c1", [("p1", 10, 1), ("p2", 5, 3)]))
        self.backend.on(
            "GET",
            "/api/products/all",
            200,
            {"products": [product_json(f"p{i}", isAvailable=i != 2) for i in range(6)]},
        )

    async def test_buyer_counts(self):
        self.serve_buyer()
        flow = DashboardFlow(self.client, Role.BUYER)
        await flow.load()
        s = flow.stats
        self.assertEqual((s.orders, s.active_orders, s.wishlist, s.cart_items), (2, 1, 1, 2))
        self.assertEqual([p.id for p in s.recommended], ["p0", "p1", "p3", "p4"])
        self.assertEqual(flow.cards("en")[0], ["My Orders", "2"])

    async def test_one_failure_fails_the_screen(self):
        self.serve_buyer()
        self.backend.on("GET", "/api/cart/my-cart", 500, {"message": "Cart unavailable"})
        flow = DashboardFlow(self.client, Role.BUYER)
        await flow.load()
        self.assertEqual(flow.error, "Cart unavailable")
        self.assertEqual(flow.stats.orders, 0)

    async def test_seller_revenue(self):
        now = datetime(2026, 10, 19)
        self.backend.on(
            "GET",
            "/api/v1/order/supplier-orders",
            200,
            {
                "orders": [
                    order_json("o1", status="delivered", total=300),
                    order_json("o2", status="delivered", total=200, createdAt="2026-09-30T10:00:00Z"),
                    order_json("o3", status="pending", total=999),
                ]
            },
        )
        self.backend.on("GET", "/api/products/my_product", 200, {"products": [product_json("p1")]})
        flow = DashboardFlow(self.client, Role.SUPPLIER)
        await flow.load(now)
        self.assertEqual(flow.stats.revenue, 300)
        self.assertEqual(flow.stats.products, 1)
        self.assertEqual(flow.cards("en", now), [["Orders", "3"], ["My Products", "1"]])

    def test_helpers(self):
        orders = [Order("a", "pending"), Order("b", "canceled"), Order("c", "shipped")]
        self.assertEqual(active_count(orders), 2)
        self.assertEqual(monthly_revenue([], datetime(2026, 1, 1)), 0)


class ProductFlowsTestCase(BackendTestCase):
    # ---------- Marketplace ----------

    async def test_farmers_browse_supplier_listings(self):
        self.backend.on("GET", "/api/products/productForFarmer", 200, {"products": [product_json("s1")]})
        flow = MarketplaceFlow(self.client, Role.FARMER)
        await flow.fetch_products()
        self.assertEqual(self.backend.paths, ["/api/products/productForFarmer"])
        self.assertEqual(flow.products[0].id, "s1")

    async def test_buyers_browse_everything_and_filter(self):
        self.backend.on(
            "GET",
            "/api/products/all",
            200,
            {
                "products": [
                    product_json("p1", "Tomato"),
                    product_json("p2", "Urea", category="Fertilizer"),
                ]
            },
        )
        flow = MarketplaceFlow(self.client, Role.BUYER)
        await flow.fetch_products()
        flow.category = "Fertilizer"
        self.assertEqual([p.id for p in flow.visible_products], ["p2"])
        flow.category = "all"
        flow.search_term = "toma"
        self.assertEqual([p.id for p in flow.visible_products], ["p1"])

    async def test_add_to_cart_and_wishlist(self):
        self.backend.on("POST", "/api/cart/add", 200, {})
        self.backend.on("POST", "/api/wishlist/add", 400, {"message": "Already in wishlist"})
        flow = MarketplaceFlow(self.client, Role.BUYER)
        self.assertTrue(await flow.add_to_cart("p1", 3))
        self.assertEqual(self.backend.payload("POST", "/api/cart/add"), {"productId": "p1", "quantity": 3})
        self.assertFalse(await flow.add_to_wishlist("p1"))
        self.assertEqual(flow.message, "Already in wishlist")
        self.assertNotIn("p1", flow.wishlist_ids)

    # ---------- Own listings ----------

    async def test_save_validates_locally(self):
        flow = ProductManagementFlow(self.client)
        flow.form = ProductForm(name="Wheat", price="", quantity="5")
        self.assertFalse(await flow.save())
        self.assertEqual(flow.message, "Please fill required fields")
        flow.form = ProductForm(name="Wheat", price="abc", quantity="5")
        self.assertFalse(await flow.save())
        self.assertEqual(flow.message, "Price and quantity must be numbers")
        self.assertEqual(self.backend.calls, [])

    async def test_add_then_edit(self):
        self.backend.on("POST", "/api/products/add", 201, {})
        self.backend.on("PUT", "/api/products/update/p1", 200, {})
        self.backend.on("GET", "/api/products/my_product", 200, {"products": [product_json("p1", "Wheat", 3500)]})
        flow = ProductManagementFlow(self.client)

        flow.form = ProductForm(name=" Wheat ", price="3500", quantity="20", category="Crops")
        self.assertTrue(await flow.save())
        self.assertEqual(flow.message, "Product added")
        body = self.backend.payload("POST", "/api/products/add")
        self.assertEqual((body["name"], body["price"], body["quantity"]), ("Wheat", 3500.0, 20))

        flow.start_edit(flow.products[0])
        self.assertEqual(flow.form.price, "3500")
        flow.form.quantity = "15"
        self.assertTrue(await flow.save())
        self.assertEqual(flow.message, "Product updated")
        self.assertEqual(self.backend.payload("PUT", "/api/products/update/p1")["quantity"], 15)
        self.assertIsNone(flow.editing_id)

    async def test_delete(self):
        self.backend.on("DELETE", "/api/products/delete/p1", 200, {})
        self.backend.on("GET", "/api/products/my_product", 200, {"products": []})
        flow = ProductManagementFlow(self.client)
        self.assertTrue(await flow.delete("p1"))
        self.assertEqual(flow.products, [])

    async def test_upload_image_sets_form_url(self):
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        path = os.path.join(temp_dir.name, "wheat.jpg")
        with open(path, "wb") as f:
            f.write(b"jpeg")
        transport = httpx.MockTransport(
            lambda r: httpx.Response(200, json={"secure_url": "https://cdn.test/wheat.jpg"})
        )
        flow = ProductManagementFlow(self.client)
        self.assertTrue(await flow.upload_image(path, transport=transport))
        self.assertEqual(flow.form.image_url, "https://cdn.test/wheat.jpg")
        flow.form.name, flow.form.price, flow.form.quantity = "Wheat", "3500", "20"
        self.assertEqual(flow.build_payload()["images"], ["https://cdn.test/wheat.jpg"])


class WishlistFlowTestCase(BackendTestCase):
    async def test_move_to_cart_refetches(self):
        self.backend.on(
            "GET", "/api/wishlist/my-wishlist", 200, {"wishlist": {"products": [{"productId": product_json("p1")}]}}
        )
        self.backend.on("POST", "/api/wishlist/addtocart", 200, {})
        flow = WishlistFlow(self.client)
        await flow.fetch_wishlist()
        self.assertEqual(len(flow.items), 1)

        self.assertTrue(await flow.move_to_cart("p1"))
        self.assertEqual(
            self.backend.payload("POST", "/api/wishlist/addtocart"), {"productId": "p1", "quantity": 1}
        )
        self.assertEqual(self.backend.paths.count("/api/wishlist/my-wishlist"), 2)

    async def test_remove_and_clear(self):
        self.backend.on(
            "GET",
            "/api/wishlist/my-wishlist",
            200,
            {"wishlist": [{"productId": product_json("p1")}, {"productId": product_json("p2")}]},
        )
        self.backend.on("DELETE", "/api/wishlist/item/p1", 200, {})
        self.backend.on("DELETE", "/api/wishlist/clear", 200, {})
        flow = WishlistFlow(self.client)
        await flow.fetch_wishlist()
        self.assertTrue(await flow.remove_item("p1"))
        self.assertEqual([i.product.id for i in flow.items], ["p2"])
        self.assertTrue(await flow.clear())
        self.assertEqual(flow.items, [])
        self.assertEqual(flow.message, "Wishlist cleared")

    async def test_fetch_failure(self):
        self.backend.on("GET", "/api/wishlist/my-wishlist", 500, {})
        flow = WishlistFlow(self.client)
        await flow.fetch_wishlist()
        self.assertEqual(flow.error, "Failed to load wishlist")
        self.assertEqual(flow.items, [])


class ChatFlowTestCase(BackendTestCase):
    async def test_conversation(self):
        self.backend.on("POST", "/api/chatbot/ask", 200, {"response": "Irrigate at dawn."})
        flow = ChatFlow(self.client)
        self.assertEqual(flow.messages[0].message, GREETING)

        self.assertIsNone(await flow.send("   "))
        self.assertEqual(self.backend.calls, [])

        reply = await flow.send("When should I water?")
        self.assertEqual(reply.message, "Irrigate at dawn.")
        self.assertEqual([m.sender for m in flow.messages], ["bot", "user", "bot"])
        self.assertEqual(self.backend.payload("POST", "/api/chatbot/ask"), {"question": "When should I water?"})

    async def test_empty_answer_and_failure(self):
        self.backend.on("POST", "/api/chatbot/ask", 200, {})
        flow = ChatFlow(self.client)
        self.assertEqual((await flow.send("hi")).message, NO_ANSWER)

        self.backend.on("POST", "/api/chatbot/ask", 502, {})
        self.assertEqual((await flow.send("hi again")).message, CONNECTION_TROUBLE)
        self.assertEqual(flow.message, CONNECTION_TROUBLE)
        self.assertFalse(flow.loading)


class WeatherFlowTestCase(BackendTestCase):
    async def test_default_city_and_alerts(self):
        self.backend.on(
            "GET",
            f"/api/weather/{DEFAULT_CITY}",
            200,
            {"data": {"temperature": 38, "humidity": 60, "description": "haze"}},
        )
        self.backend.on(
            "GET", "/api/weather/alerts/user", 200, {"alerts": [{"title": "Locust swarm", "message": "Spray now"}]}
        )
        flow = WeatherFlow(self.client)
        await flow.fetch()
        self.assertEqual(flow.weather.temperature, 38)
        self.assertEqual(flow.weather.wind_speed, 7)
        self.assertEqual([a.alert for a in flow.alerts], ["HEAT STRESS ADVISORY"])

        await flow.fetch_user_alerts()
        self.assertEqual(flow.user_alerts[0].alert, "Locust swarm")

    async def test_failed_city_keeps_previous(self):
        self.backend.on("GET", "/api/weather/Atlantis", 404, {"message": "City not found"})
        flow = WeatherFlow(self.client)
        await flow.fetch("Atlantis")
        self.assertEqual(flow.error, "City not found")
        self.assertEqual(flow.city, DEFAULT_CITY)


class ProfileFlowTestCase(BackendTestCase):
    async def asyncSetUp(self):
        self.state = GlobalState()
        await self.state.login(Role.BUYER, UserProfile(name="Sara"))
        self.flow = ProfileFlow(self.client, self.state)

    async def test_save_refreshes_session_name(self):
        self.backend.on("PUT", "/api/buyers/update", 200, {})
        self.backend.on("GET", "/api/buyers/me", 200, {"user": {"name": "Sara Malik", "email": "s@x.co"}})
        self.assertFalse(await self.flow.save("Sara 2", "s@x.co", "", ""))
        self.assertEqual(self.backend.calls, [])

        self.assertTrue(await self.flow.save("Sara Malik", "s@x.co", "+923001234567", "Lahore"))
        self.assertEqual(self.state.user.name, "Sara Malik")

    async def test_change_password_checks(self):
        self.flow.passwords.old_password = "old"
        self.flow.passwords.new_password = "newpass"
        self.flow.passwords.confirm_password = "other"
        self.assertFalse(await self.flow.change_password())
        self.assertEqual(self.flow.message, "Passwords do not match")
        self.assertEqual(self.backend.calls, [])

    async def test_logout_clears_session_even_if_server_fails(self):
        self.backend.on("GET", "/api/buyers/logout", 500, {})
        self.assertFalse(await self.flow.logout())
        self.assertFalse(self.state.is_authenticated)

    async def test_delete_account(self):
        self.backend.on("DELETE", "/api/buyers/delete", 200, {})
        self.assertTrue(await self.flow.delete_account())
        self.assertFalse(self.state.is_authenticated)


if __name__ == "__main__":
    unittest.main()
