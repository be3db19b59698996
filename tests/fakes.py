# in-memory stand-ins shared by the test modules
import json
import os
import sys
import tempfile
import unittest
from typing import Any, Callable, Dict, List, Optional, Tuple

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

import httpx  # noqa: E402

from api.client import ApiClient  # noqa: E402
from db import database as db_database  # noqa: E402

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """
    Routes requests by (method, path) and records every call.
    Unknown routes answer 404 with a message, like the real server.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: List[Tuple[str, str, Optional[Any]]] = []

    def on(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body: Any = None,
        handler: Optional[Handler] = None,
    ) -> None:
        body = {} if json_body is None else json_body
        self.routes[(method, path)] = handler or (lambda _req: httpx.Response(status, json=body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        try:
            payload = json.loads(request.content) if request.content else None
        except ValueError:
            payload = None
        self.calls.append((request.method, request.url.path, payload))
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                404, json={"message": f"no route {request.method} {request.url.path}"}
            )
        return route(request)

    @property
    def paths(self) -> List[str]:
        return [path for _, path, _ in self.calls]

    def payload(self, method: str, path: str) -> Optional[Any]:
        for m, p, body in self.calls:
            if m == method and p == path:
                return body
        return None

    def client(self) -> ApiClient:
        return ApiClient(base_url="http://backend.test", transport=httpx.MockTransport(self))


class BackendTestCase(unittest.IsolatedAsyncioTestCase):
    """Fresh fake backend, API client and key-value store per test."""

    def setUp(self):
        # Point the store to a temporary file
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "test.sqlite")
        db_database.DB_PATH = self.db_path
        db_database._initialized_for = None

        self.backend = FakeBackend()
        self.client = self.backend.client()

    async def asyncTearDown(self):
        await self.client.aclose()

    def tearDown(self):
        self.temp_dir.cleanup()


def product_json(pid: str, name: str = "Tomato", price: float = 100, **extra) -> Dict[str, Any]:
    data = {
        "_id": pid,
        "name": name,
        "description": f"Fresh {name.lower()}",
        "price": price,
        "unit": "kg",
        "quantity": 40,
        "category": "Vegetables",
        "images": [],
        "isAvailable": True,
        "upLoadedBy": {"uploaderName": "Ali"},
    }
    data.update(extra)
    return data


def cart_json(cart_id: Optional[str], lines: List[Tuple[str, float, int]]) -> Dict[str, Any]:
    """lines: (product id, price, quantity)"""
    return {
        "cart": {
            "_id": cart_id,
            "products": [
                {"_id": f"line-{pid}", "productId": product_json(pid, price=price), "quantity": qty}
                for pid, price, qty in lines
            ],
        }
    }


def order_json(oid: str, status: str = "pending", total: float = 250, **extra) -> Dict[str, Any]:
    data = {
        "_id": oid,
        "status": status,
        "totalPrice": total,
        "createdAt": "2026-10-03T09:30:00.000Z",
        "products": [{"productId": product_json("p1"), "quantity": 2, "price": 100}],
        "shippingAddress": {
            "street": "12 Canal Road",
            "city": "Lahore",
            "zipCode": "54000",
            "phoneNumber": "+923001234567",
        },
        "paymentInfo": {"status": "pending"},
    }
    data.update(extra)
    return data
