import unittest

import httpx

from fakes import BackendTestCase, cart_json, order_json
from api.models import CartItem
from flows.cart import CartFlow
from utils.pure import cart_total


class CartFlowTestCase(BackendTestCase):
    def setUp(self):
        super().setUp()
        self.flow = CartFlow(self.client)

    def serve_cart(self, cart_id="c1", lines=(("p1", 100, 2), ("p2", 50, 1))):
        self.backend.on("GET", "/api/cart/my-cart", 200, cart_json(cart_id, list(lines)))

    def fill_checkout(self):
        form = self.flow.checkout
        form.full_name = "Sara Malik"
        form.phone_number = "+923001234567"
        form.street = "12 Canal Road"
        form.city = "Lahore"
        form.zip_code = "54000"

    # ---------- Fetch & totals ----------

    async def test_total_of_fetched_cart(self):
        self.serve_cart()
        await self.flow.fetch_cart()
        self.assertEqual(self.flow.cart_id, "c1")
        self.assertEqual(len(self.flow.items), 2)
        self.assertEqual(self.flow.total, 250)
        self.assertFalse(self.flow.is_empty)

    def test_cart_total_helper(self):
        items = [
            CartItem("l1", "p1", price=100, quantity=2),
            CartItem("l2", "p2", price=50, quantity=1),
        ]
        self.assertEqual(cart_total(items), 250)
        self.assertEqual(cart_total([]), 0)

    async def test_failed_fetch_sets_error(self):
        self.backend.on("GET", "/api/cart/my-cart", 503, {"message": "Cart service down"})
        await self.flow.fetch_cart()
        self.assertIsNone(self.flow.items)
        self.assertFalse(self.flow.is_empty)
        self.assertEqual(self.flow.error, "Cart service down")

        self.backend.on("GET", "/api/cart/my-cart", 503, {})
        await self.flow.fetch_cart()
        self.assertEqual(self.flow.error, "Failed to load cart")

    # ---------- Quantity ----------

    async def test_quantity_below_one_sends_nothing(self):
        self.serve_cart()
        await self.flow.fetch_cart()
        calls = len(self.backend.calls)

        self.assertFalse(await self.flow.update_quantity("p2", 0))
        self.assertFalse(await self.flow.update_quantity("p2", -3))
        self.assertEqual(len(self.backend.calls), calls)
        self.assertEqual(self.flow.message, "")

    async def test_quantity_update_patches_line(self):
        self.serve_cart()
        self.backend.on("PUT", "/api/cart/update", 200, {"success": True})
        await self.flow.fetch_cart()

        self.assertTrue(await self.flow.update_quantity("p2", 3))
        self.assertEqual(self.backend.payload("PUT", "/api/cart/update"), {"productId": "p2", "quantity": 3})
        self.assertEqual(self.flow.total, 350)

    async def test_failed_quantity_update_refetches(self):
        self.serve_cart()
        self.backend.on("PUT", "/api/cart/update", 400, {"message": "Only 2 left in stock"})
        await self.flow.fetch_cart()

        self.assertFalse(await self.flow.update_quantity("p1", 9))
        self.assertEqual(self.flow.message, "Only 2 left in stock")
        self.assertEqual(self.backend.paths.count("/api/cart/my-cart"), 2)
        self.assertEqual(self.flow.total, 250)

    # ---------- Remove & clear ----------

    async def test_remove_and_clear(self):
        self.serve_cart()
        self.backend.on("DELETE", "/api/cart/item/p1", 200, {})
        self.backend.on("DELETE", "/api/cart/clear", 200, {})
        await self.flow.fetch_cart()

        self.assertTrue(await self.flow.remove_item("p1"))
        self.assertEqual([i.product_id for i in self.flow.items], ["p2"])
        self.assertTrue(await self.flow.clear_cart())
        self.assertTrue(self.flow.is_empty)
        self.assertEqual(self.flow.message, "Cart cleared")

    async def test_remove_failure_keeps_items(self):
        self.serve_cart()
        await self.flow.fetch_cart()
        self.assertFalse(await self.flow.remove_item("p9"))
        self.assertEqual(len(self.flow.items), 2)
        self.assertEqual(self.flow.message, "no route DELETE /api/cart/item/p9")

    # ---------- Checkout ----------

    async def test_incomplete_checkout_sends_nothing(self):
        self.serve_cart()
        await self.flow.fetch_cart()
        calls = len(self.backend.calls)
        self.fill_checkout()
        self.flow.checkout.full_name = "  "

        self.assertEqual(self.flow.validate_checkout(), ["Full Name"])
        self.assertFalse(await self.flow.place_order())
        self.assertEqual(self.flow.message, "Please fill in: Full Name")
        self.assertEqual(len(self.backend.calls), calls)

    async def test_checkout_without_cart(self):
        self.fill_checkout()
        self.assertFalse(await self.flow.place_order())
        self.assertEqual(self.flow.message, "No cart found")
        self.assertEqual(self.backend.calls, [])

    async def test_place_order_then_empty_cart(self):
        self.serve_cart()
        await self.flow.fetch_cart()

        def placed(request):
            # the server empties the cart once the order exists
            self.serve_cart(lines=())
            return httpx.Response(201, json={"order": order_json("o1")})

        self.backend.on("POST", "/api/v1/order/place-order", handler=placed)
        self.fill_checkout()

        self.assertTrue(await self.flow.place_order())
        self.assertEqual(self.flow.message, "Order placed successfully")
        self.assertEqual(self.flow.last_order.id, "o1")
        self.assertTrue(self.flow.is_empty)
        self.assertEqual(self.flow.total, 0)
        # form is reset for the next checkout
        self.assertEqual(self.flow.checkout.full_name, "")
        body = self.backend.payload("POST", "/api/v1/order/place-order")
        self.assertEqual(body["cartId"], "c1")
        self.assertEqual(body["paymentMethod"], "cash-on-delivery")

    async def test_place_order_rejected(self):
        self.serve_cart()
        self.backend.on("POST", "/api/v1/order/place-order", 400, {})
        await self.flow.fetch_cart()
        self.fill_checkout()
        self.assertFalse(await self.flow.place_order())
        self.assertEqual(self.flow.message, "Failed to place order")
        self.assertEqual(self.flow.checkout.full_name, "Sara Malik")


if __name__ == "__main__":
    unittest.main()
