from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

import api.marketplace as api
from api.errors import ApiError, ValidationError
from api.models import Product, Role
from api.uploads import upload_image
from flows.base import Flow
from utils.pure import filter_products

CATEGORY_OPTIONS = ["Fruits", "Vegetables", "Crops", "Pesticides", "Fertilizer", "Other"]
UNIT_OPTIONS = ["kg", "g", "lb", "maund", "piece"]


@dataclass
class ProductForm:
    name: str = ""
    description: str = ""
    price: str = ""
    unit: str = "kg"
    quantity: str = ""
    category: str = ""
    image_url: str = ""

    @classmethod
    def from_product(cls, p: Product) -> "ProductForm":
        return cls(
            name=p.name,
            description=p.description,
            price=f"{p.price:g}" if p.price else "",
            unit=p.unit or "kg",
            quantity=str(p.quantity) if p.quantity else "",
            category=p.category,
            image_url=p.images[0] if p.images else "",
        )


class ProductManagementFlow(Flow):
    """
    Listings owned by the signed-in farmer or supplier.
    """

    def __init__(self, client):
        super().__init__(client)
        self.products: List[Product] = []
        self.search_term = ""
        self.form = ProductForm()
        self.editing_id: Optional[str] = None

    @property
    def visible_products(self) -> List[Product]:
        return filter_products(self.products, self.search_term)

    async def fetch_products(self) -> None:
        self.loading = True
        self.error = ""
        try:
            self.products = await api.list_my_products(self.client)
        except ApiError as e:
            self.fail(e, "Failed to load products", "error")
        finally:
            self.loading = False

    def start_edit(self, product: Product) -> None:
        self.editing_id = product.id
        self.form = ProductForm.from_product(product)

    def reset_form(self) -> None:
        self.editing_id = None
        self.form = ProductForm()

    def build_payload(self) -> Dict[str, Any]:
        """Payload for add/update. Raises ValidationError for an incomplete form."""
        f = self.form
        if not f.name.strip() or not f.price.strip() or not f.quantity.strip():
            raise ValidationError("Please fill required fields")
        try:
            price = float(f.price)
            quantity = int(f.quantity)
        except ValueError:
            raise ValidationError("Price and quantity must be numbers") from None
        if price < 0 or quantity < 0:
            raise ValidationError("Price and quantity cannot be negative")
        return {
            "name": f.name.strip(),
            "description": f.description.strip(),
            "price": price,
            "unit": f.unit,
            "quantity": quantity,
            "category": f.category,
            "images": [f.image_url] if f.image_url else [],
        }

    async def save(self) -> bool:
        try:
            payload = self.build_payload()
        except ValidationError as e:
            self.message = e.message
            return False
        self.message = ""
        try:
            if self.editing_id:
                await api.update_product(self.client, self.editing_id, payload)
                done = "Product updated"
            else:
                await api.add_product(self.client, payload)
                done = "Product added"
        except ApiError as e:
            self.fail(e, "Failed to save product")
            return False
        await self.fetch_products()
        self.reset_form()
        self.message = done
        return True

    async def delete(self, product_id: str) -> bool:
        self.message = ""
        try:
            await api.delete_product(self.client, product_id)
        except ApiError as e:
            self.fail(e, "Failed to delete product")
            return False
        self.message = "Product deleted"
        await self.fetch_products()
        return True

    async def upload_image(self, path: str, transport=None) -> bool:
        self.loading = True
        try:
            self.form.image_url = await upload_image(path, transport=transport)
        except ApiError as e:
            self.fail(e, "Failed to upload image.")
            return False
        finally:
            self.loading = False
        self.message = "Image uploaded successfully!"
        return True


class MarketplaceFlow(Flow):
    """
    Product browsing. Farmers see supplier listings, buyers see everything.
    Search and category filters run over the last full fetch.
    """

    def __init__(self, client, role: Optional[Role]):
        super().__init__(client)
        self.role = role
        self.products: List[Product] = []
        self.search_term = ""
        self.category = "all"
        self.wishlist_ids: Set[str] = set()
        self.detail: Optional[Product] = None

    @property
    def visible_products(self) -> List[Product]:
        return filter_products(self.products, self.search_term, self.category)

    async def fetch_products(self) -> None:
        self.loading = True
        self.error = ""
        try:
            if self.role == Role.FARMER:
                self.products = await api.list_products_for_farmer(self.client)
            else:
                self.products = await api.list_all_products(self.client)
        except ApiError as e:
            self.fail(e, "Failed to load products", "error")
        finally:
            self.loading = False

    async def load_detail(self, product_id: str) -> Optional[Product]:
        try:
            self.detail = await api.get_product_details(self.client, product_id)
        except ApiError as e:
            self.fail(e, "Failed to load product")
            self.detail = None
        return self.detail

    async def add_to_cart(self, product_id: str, quantity: int = 1) -> bool:
        self.message = ""
        try:
            await api.add_to_cart(self.client, product_id, quantity)
        except ApiError as e:
            self.fail(e, "Failed to add to cart")
            return False
        self.message = "Added to cart"
        return True

    async def add_to_wishlist(self, product_id: str) -> bool:
        self.message = ""
        try:
            await api.add_to_wishlist(self.client, product_id)
        except ApiError as e:
            self.fail(e, "Failed to add to wishlist")
            return False
        self.wishlist_ids.add(product_id)
        self.message = "Added to wishlist"
        return True
