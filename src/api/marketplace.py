# src/api/marketplace.py
# one coroutine per backend endpoint, grouped by resource
from __future__ import annotations

from typing import Any, Dict, List, Optional

from api.client import ApiClient
from api.errors import ApiError
from api.models import (
    Cart,
    Order,
    Product,
    Review,
    Role,
    UserProfile,
    WeatherAlert,
    WishlistItem,
)
from utils.logger import get_logger

_logger = get_logger(__name__)

ORDER_BASE = "/api/v1/order"


# ---------------------------
# Auth & Registration
# ---------------------------


async def signup(
    client: ApiClient,
    role: Role,
    name: str,
    email: str,
    password: str,
    phone: str,
    address: str,
) -> Dict[str, Any]:
    """Register an account. The body carries the `requiresOTP` flag."""
    return await client.post(
        f"{role.prefix}/new",
        {
            "name": name,
            "email": email,
            "password": password,
            "phone": phone,
            "address": address,
        },
    )


async def login(client: ApiClient, role: Role, email: str, password: str) -> Dict[str, Any]:
    return await client.post(f"{role.prefix}/login", {"email": email, "password": password})


async def get_me(client: ApiClient, role: Role) -> UserProfile:
    data = await client.get(f"{role.prefix}/me")
    return UserProfile.from_json(data.get("user"))


async def verify_otp(client: ApiClient, role: Role, email: str, otp: str) -> None:
    await client.post(f"{role.prefix}/verify", {"email": email, "otp": otp})


async def resend_otp(client: ApiClient, role: Role, email: str) -> None:
    """Older deployments expose `resendOTP`, newer ones `resend-otp`."""
    try:
        await client.post(f"{role.prefix}/resendOTP", {"email": email})
    except ApiError:
        _logger.debug("resendOTP rejected, trying resend-otp")
        await client.post(f"{role.prefix}/resend-otp", {"email": email})


async def forgot_password(client: ApiClient, role: Role, email: str) -> None:
    await client.post(f"{role.prefix}/forgot-password", {"email": email})


async def reset_password(
    client: ApiClient, role: Role, email: str, otp: str, new_password: str
) -> None:
    await client.post(
        f"{role.prefix}/reset-password",
        {"email": email, "otp": otp, "newPassword": new_password},
    )


async def update_profile(client: ApiClient, role: Role, profile: Dict[str, str]) -> None:
    await client.put(f"{role.prefix}/update", profile)


async def change_password(
    client: ApiClient, role: Role, old_password: str, new_password: str
) -> None:
    await client.put(
        f"{role.prefix}/changepassword",
        {"oldPassword": old_password, "newPassword": new_password},
    )


async def logout(client: ApiClient, role: Role) -> None:
    await client.get(f"{role.prefix}/logout")


async def delete_account(client: ApiClient, role: Role) -> None:
    await client.delete(f"{role.prefix}/delete")


# ---------------------------
# Products
# ---------------------------


def _products(data: Dict[str, Any]) -> List[Product]:
    return [Product.from_json(p) for p in data.get("products") or []]


async def list_all_products(client: ApiClient) -> List[Product]:
    return _products(await client.get("/api/products/all"))


async def list_products_for_farmer(client: ApiClient) -> List[Product]:
    return _products(await client.get("/api/products/productForFarmer"))


async def list_my_products(client: ApiClient) -> List[Product]:
    return _products(await client.get("/api/products/my_product"))


async def get_product_details(client: ApiClient, product_id: str) -> Optional[Product]:
    data = await client.get(f"/api/products/{product_id}/details")
    prod = data.get("product")
    return Product.from_json(prod) if prod else None


async def add_product(client: ApiClient, payload: Dict[str, Any]) -> None:
    await client.post("/api/products/add", payload)


async def update_product(client: ApiClient, product_id: str, payload: Dict[str, Any]) -> None:
    await client.put(f"/api/products/update/{product_id}", payload)


async def delete_product(client: ApiClient, product_id: str) -> None:
    await client.delete(f"/api/products/delete/{product_id}")


# ---------------------------
# Cart
# ---------------------------


async def get_cart(client: ApiClient) -> Cart:
    data = await client.get("/api/cart/my-cart")
    return Cart.from_json(data.get("cart"))


async def add_to_cart(client: ApiClient, product_id: str, quantity: int = 1) -> None:
    await client.post("/api/cart/add", {"productId": product_id, "quantity": quantity})


async def update_cart_item(client: ApiClient, product_id: str, quantity: int) -> None:
    await client.put("/api/cart/update", {"productId": product_id, "quantity": quantity})


async def remove_cart_item(client: ApiClient, product_id: str) -> None:
    await client.delete(f"/api/cart/item/{product_id}")


async def clear_cart(client: ApiClient) -> None:
    await client.delete("/api/cart/clear")


# ---------------------------
# Wishlist
# ---------------------------


async def get_wishlist(client: ApiClient) -> List[WishlistItem]:
    data = await client.get("/api/wishlist/my-wishlist")
    wishlist = data.get("wishlist") or {}
    # some deployments return the product list directly
    entries = wishlist if isinstance(wishlist, list) else wishlist.get("products") or []
    return [WishlistItem.from_json(e) for e in entries]


async def add_to_wishlist(client: ApiClient, product_id: str) -> None:
    await client.post("/api/wishlist/add", {"productId": product_id})


async def remove_wishlist_item(client: ApiClient, product_id: str) -> None:
    await client.delete(f"/api/wishlist/item/{product_id}")


async def clear_wishlist(client: ApiClient) -> None:
    await client.delete("/api/wishlist/clear")


async def wishlist_to_cart(client: ApiClient, product_id: str, quantity: int = 1) -> None:
    await client.post("/api/wishlist/addtocart", {"productId": product_id, "quantity": quantity})


# ---------------------------
# Orders & Reviews
# ---------------------------


def _orders(data: Dict[str, Any]) -> List[Order]:
    return [Order.from_json(o) for o in data.get("orders") or []]


async def list_user_orders(client: ApiClient) -> List[Order]:
    return _orders(await client.get(f"{ORDER_BASE}/user-orders"))


async def list_supplier_orders(client: ApiClient) -> List[Order]:
    return _orders(await client.get(f"{ORDER_BASE}/supplier-orders"))


async def get_order(client: ApiClient, order_id: str) -> Optional[Order]:
    data = await client.get(f"{ORDER_BASE}/single/{order_id}")
    order = data.get("order")
    return Order.from_json(order) if order else None


async def place_order(
    client: ApiClient,
    cart_id: str,
    payment_method: str,
    street: str,
    city: str,
    zip_code: str,
    phone_number: str,
    notes: str,
) -> Optional[Order]:
    data = await client.post(
        f"{ORDER_BASE}/place-order",
        {
            "cartId": cart_id,
            "paymentMethod": payment_method,
            "street": street,
            "city": city,
            "zipCode": zip_code,
            "phoneNumber": phone_number,
            "notes": notes,
        },
    )
    order = data.get("order")
    return Order.from_json(order) if isinstance(order, dict) else None


async def cancel_order(client: ApiClient, order_id: str) -> None:
    await client.put(f"{ORDER_BASE}/cancel/{order_id}")


async def update_order_status(client: ApiClient, order_id: str, status: str) -> None:
    await client.put(f"{ORDER_BASE}/update-status/{order_id}", {"status": status})


async def add_review(client: ApiClient, review: Review) -> None:
    await client.post("/api/review/add", review.to_json())


# ---------------------------
# Weather & Chatbot
# ---------------------------


async def get_weather(client: ApiClient, city: str) -> Optional[Dict[str, Any]]:
    """Raw reading for a city; missing fields are filled in by the caller."""
    data = await client.get(f"/api/weather/{city}")
    reading = data.get("data")
    return reading if isinstance(reading, dict) else None


async def get_user_alerts(client: ApiClient) -> List[WeatherAlert]:
    data = await client.get("/api/weather/alerts/user")
    return [WeatherAlert.from_json(a) for a in data.get("alerts") or []]


async def ask_chatbot(client: ApiClient, question: str) -> Optional[str]:
    data = await client.post("/api/chatbot/ask", {"question": question})
    return data.get("response") or data.get("answer")
