"""
Role dashboards. Widgets are fetched concurrently and joined; one failed
request fails the whole screen, the others' results are discarded.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import api.marketplace as api
from api.errors import ApiError
from api.models import Order, Product, Role
from flows.base import Flow
from utils.i18n import t

RECOMMENDED_LIMIT = 4


@dataclass
class DashboardStats:
    orders: int = 0
    active_orders: int = 0
    products: int = 0
    wishlist: int = 0
    cart_items: int = 0
    revenue: float = 0.0
    recommended: List[Product] = field(default_factory=list)


def monthly_revenue(orders: List[Order], now: Optional[datetime] = None) -> float:
    """Delivered order totals for the calendar month of `now`."""
    now = now or datetime.now()
    return sum(
        o.total_price
        for o in orders
        if o.status == "delivered"
        and o.created_at
        and o.created_at.month == now.month
        and o.created_at.year == now.year
    )


def active_count(orders: List[Order]) -> int:
    return len([o for o in orders if o.status not in ("delivered", "canceled")])


class DashboardFlow(Flow):
    def __init__(self, client, role: Role):
        super().__init__(client)
        self.role = role
        self.stats = DashboardStats()

    async def load(self, now: Optional[datetime] = None) -> None:
        self.loading = True
        self.error = ""
        try:
            if self.role == Role.BUYER:
                self.stats = await self._load_buyer()
            else:
                self.stats = await self._load_seller(now)
        except ApiError as e:
            self.fail(e, "Failed to load data", "error")
        finally:
            self.loading = False

    async def _load_buyer(self) -> DashboardStats:
        orders, wishlist, cart, products = await asyncio.gather(
            api.list_user_orders(self.client),
            api.get_wishlist(self.client),
            api.get_cart(self.client),
            api.list_all_products(self.client),
        )
        return DashboardStats(
            orders=len(orders),
            active_orders=active_count(orders),
            wishlist=len(wishlist),
            cart_items=len(cart.items),
            recommended=[p for p in products if p.is_available][:RECOMMENDED_LIMIT],
        )

    async def _load_seller(self, now: Optional[datetime]) -> DashboardStats:
        orders, products = await asyncio.gather(
            api.list_supplier_orders(self.client),
            api.list_my_products(self.client),
        )
        return DashboardStats(
            orders=len(orders),
            active_orders=active_count(orders),
            products=len(products),
            revenue=monthly_revenue(orders, now),
        )

    def cards(self, language: str, now: Optional[datetime] = None) -> List[List[str]]:
        """Label/value rows in the active language."""
        s = self.stats
        if self.role == Role.BUYER:
            return [
                [t(language, "my_orders"), str(s.orders)],
                [t(language, "wishlist"), str(s.wishlist)],
                [t(language, "cart_items"), str(s.cart_items)],
            ]
        if self.role == Role.FARMER:
            month = (now or datetime.now()).strftime("%b")
            return [
                [t(language, "active_orders"), str(s.active_orders)],
                [t(language, "my_products"), str(s.products)],
                [t(language, "revenue", month=month), f"Rs. {s.revenue:,.2f}"],
            ]
        return [
            [t(language, "orders"), str(s.orders)],
            [t(language, "my_products"), str(s.products)],
        ]

    def title(self, language: str) -> str:
        return t(language, f"{self.role.value.lower()}_dashboard")
