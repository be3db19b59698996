from typing import List

import api.marketplace as api
from api.errors import ApiError
from api.models import WishlistItem
from flows.base import Flow


class WishlistFlow(Flow):
    def __init__(self, client):
        super().__init__(client)
        self.items: List[WishlistItem] = []

    async def fetch_wishlist(self) -> None:
        self.loading = True
        self.error = ""
        try:
            self.items = await api.get_wishlist(self.client)
        except ApiError as e:
            self.items = []
            self.fail(e, "Failed to load wishlist", "error")
        finally:
            self.loading = False

    async def remove_item(self, product_id: str) -> bool:
        self.message = ""
        try:
            await api.remove_wishlist_item(self.client, product_id)
        except ApiError as e:
            self.fail(e, "Failed to remove item")
            return False
        self.items = [i for i in self.items if i.product.id != product_id]
        self.message = "Removed from wishlist"
        return True

    async def clear(self) -> bool:
        self.message = ""
        try:
            await api.clear_wishlist(self.client)
        except ApiError as e:
            self.fail(e, "Failed to clear wishlist")
            return False
        self.items = []
        self.message = "Wishlist cleared"
        return True

    async def move_to_cart(self, product_id: str) -> bool:
        self.message = ""
        try:
            await api.wishlist_to_cart(self.client, product_id, 1)
        except ApiError as e:
            self.fail(e, "Failed to add to cart")
            return False
        self.message = "Added to cart"
        await self.fetch_wishlist()
        return True
