from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

import api.marketplace as api
from api.errors import ApiError
from api.models import CartItem, CheckoutForm, Order
from flows.base import Flow
from utils.pure import cart_total

REQUIRED_CHECKOUT_FIELDS = {
    "full_name": "Full Name",
    "street": "Street",
    "city": "City",
    "phone_number": "Phone Number",
}


class CartFlow(Flow):
    """
    Cart projection and checkout.

    `items` is None until the first successful fetch and after a failed one.
    Every mutation is a single call; the server copy is authoritative, so a
    failed quantity update re-fetches instead of rolling back locally.
    """

    def __init__(self, client):
        super().__init__(client)
        self.cart_id: Optional[str] = None
        self.items: Optional[List[CartItem]] = None
        self.checkout = CheckoutForm()
        self.last_order: Optional[Order] = None

    @property
    def total(self) -> float:
        return cart_total(self.items or [])

    @property
    def is_empty(self) -> bool:
        return self.items is not None and not self.items

    async def fetch_cart(self) -> None:
        self.loading = True
        self.error = ""
        try:
            cart = await api.get_cart(self.client)
        except ApiError as e:
            self.items = None
            self.cart_id = None
            self.fail(e, "Failed to load cart", "error")
            return
        finally:
            self.loading = False
        self.cart_id = cart.cart_id
        self.items = list(cart.items)

    async def update_quantity(self, product_id: str, quantity: int) -> bool:
        self.message = ""
        if quantity < 1:
            return False
        try:
            await api.update_cart_item(self.client, product_id, quantity)
        except ApiError as e:
            self.fail(e, "Failed to update quantity")
            await self.fetch_cart()
            return False
        self.items = [
            replace(item, quantity=quantity) if item.product_id == product_id else item
            for item in self.items or []
        ]
        return True

    async def remove_item(self, product_id: str) -> bool:
        self.message = ""
        try:
            await api.remove_cart_item(self.client, product_id)
        except ApiError as e:
            self.fail(e, "Failed to remove item")
            return False
        self.items = [item for item in self.items or [] if item.product_id != product_id]
        self.message = "Item removed from cart"
        return True

    async def clear_cart(self) -> bool:
        self.message = ""
        try:
            await api.clear_cart(self.client)
        except ApiError as e:
            self.fail(e, "Failed to clear cart")
            return False
        self.items = []
        self.cart_id = None
        self.message = "Cart cleared"
        return True

    def validate_checkout(self) -> List[str]:
        """Labels of the required shipping fields left blank."""
        return [
            label
            for attr, label in REQUIRED_CHECKOUT_FIELDS.items()
            if not getattr(self.checkout, attr).strip()
        ]

    async def place_order(self) -> bool:
        missing = self.validate_checkout()
        if missing:
            self.message = f"Please fill in: {', '.join(missing)}"
            return False
        if not self.cart_id:
            self.message = "No cart found"
            return False

        self.message = ""
        form = self.checkout
        try:
            self.last_order = await api.place_order(
                self.client,
                self.cart_id,
                form.payment_method,
                form.street.strip(),
                form.city.strip(),
                form.zip_code.strip(),
                form.phone_number.strip(),
                form.notes.strip(),
            )
        except ApiError as e:
            self.fail(e, "Failed to place order")
            return False

        self.checkout = CheckoutForm()
        await self.fetch_cart()
        self.message = "Order placed successfully"
        return True
