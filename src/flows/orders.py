from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Set, Tuple

import api.marketplace as api
from api.errors import ApiError
from api.models import Order, Review
from flows.base import Flow
from utils.pure import CANCELLABLE_STATUSES, filter_orders, next_status


class MyOrdersFlow(Flow):
    """
    Buyer order history: cancel open orders, review delivered lines.
    """

    def __init__(self, client):
        super().__init__(client)
        self.orders: List[Order] = []
        self.selected: Optional[Order] = None
        # (order id, product id) pairs already reviewed this session
        self.reviewed: Set[Tuple[str, str]] = set()

    async def fetch_orders(self) -> None:
        self.loading = True
        self.error = ""
        try:
            self.orders = await api.list_user_orders(self.client)
        except ApiError as e:
            self.fail(e, "Failed to load orders", "error")
        finally:
            self.loading = False

    async def load_detail(self, order_id: str) -> Optional[Order]:
        try:
            self.selected = await api.get_order(self.client, order_id)
        except ApiError as e:
            self.fail(e, "Failed to load order")
            self.selected = None
        return self.selected

    @staticmethod
    def can_cancel(order: Order) -> bool:
        return order.status in CANCELLABLE_STATUSES

    def can_review(self, order: Order, product_id: Optional[str]) -> bool:
        return (
            order.status == "delivered"
            and bool(product_id)
            and (order.id, product_id) not in self.reviewed
        )

    async def cancel_order(self, order: Order) -> bool:
        if not self.can_cancel(order):
            self.message = f"Order cannot be cancelled while {order.status}"
            return False
        self.message = ""
        try:
            await api.cancel_order(self.client, order.id)
        except ApiError as e:
            self.fail(e, "Failed to cancel order")
            return False
        self.message = "Order cancelled"
        await self.fetch_orders()
        return True

    async def submit_review(
        self, order: Order, product_id: Optional[str], rating: int, comment: str
    ) -> bool:
        comment = (comment or "").strip()
        if not product_id or not 1 <= rating <= 5 or not comment:
            self.message = "Select rating and add a comment"
            return False
        if not self.can_review(order, product_id):
            self.message = "This item cannot be reviewed"
            return False
        self.message = ""
        try:
            await api.add_review(self.client, Review(product_id, rating, comment))
        except ApiError as e:
            self.fail(e, "Failed to submit review")
            return False
        self.reviewed.add((order.id, product_id))
        self.message = "Review submitted"
        return True


class OrderManagementFlow(Flow):
    """
    Farmer/Supplier side: incoming orders and their status progression.
    """

    STATUS_FILTERS = ("all", "pending", "processing", "shipped", "delivered", "canceled")

    def __init__(self, client):
        super().__init__(client)
        self.orders: List[Order] = []
        self.status_filter = "all"
        self.search_term = ""

    @property
    def visible_orders(self) -> List[Order]:
        return filter_orders(self.orders, self.status_filter, self.search_term)

    async def fetch_orders(self) -> None:
        self.loading = True
        self.error = ""
        try:
            self.orders = await api.list_supplier_orders(self.client)
        except ApiError as e:
            self.fail(e, "Failed to load orders", "error")
        finally:
            self.loading = False

    async def _set_status(self, order: Order, status: str) -> bool:
        self.message = ""
        try:
            await api.update_order_status(self.client, order.id, status)
        except ApiError as e:
            self.fail(e, "Failed to update status")
            return False
        self.orders = [replace(o, status=status) if o.id == order.id else o for o in self.orders]
        self.message = "Order status updated"
        return True

    async def advance(self, order: Order) -> bool:
        target = next_status(order.status)
        if not target:
            self.message = f"Order is already {order.status}"
            return False
        return await self._set_status(order, target)

    async def cancel(self, order: Order) -> bool:
        if order.status not in CANCELLABLE_STATUSES:
            self.message = f"Order cannot be cancelled while {order.status}"
            return False
        return await self._set_status(order, "canceled")
