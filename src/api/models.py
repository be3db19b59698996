# provide dataclass models mirroring the server resources

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple


def _num(val, default=0.0) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def _int(val, default=0) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def _ref_id(val) -> Optional[str]:
    """Ids arrive either bare or as a populated document."""
    if isinstance(val, dict):
        return val.get("_id")
    return val


class Role(str, Enum):
    FARMER = "Farmer"
    BUYER = "Buyer"
    SUPPLIER = "Supplier"

    @property
    def key(self) -> str:
        return self.value.lower() + "s"

    @property
    def prefix(self) -> str:
        return f"/api/{self.key}"


ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "canceled")
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "canceled"]


@dataclass(frozen=True)
class UserProfile:
    name: str = ""
    image_url: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "UserProfile":
        data = data or {}
        return cls(
            name=data.get("name") or "",
            image_url=data.get("profileImage") or data.get("img") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            address=data.get("address") or "",
        )

    def snapshot(self) -> Dict[str, str]:
        # only the display part is persisted with the session
        return {"name": self.name, "img": self.image_url}


@dataclass(frozen=True)
class Session:
    is_authenticated: bool = False
    role: Optional[Role] = None
    user: Optional[UserProfile] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "isAuthenticated": self.is_authenticated,
            "role": self.role.value if self.role else None,
            "user": self.user.snapshot() if self.user else None,
        }

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "Session":
        if not data or not data.get("isAuthenticated"):
            return cls()
        try:
            role = Role(data.get("role"))
        except ValueError:
            return cls()
        user = data.get("user")
        return cls(True, role, UserProfile.from_json(user) if user else None)


@dataclass(frozen=True)
class Product:
    id: str
    name: str = ""
    description: str = ""
    price: float = 0.0
    unit: str = "kg"
    quantity: int = 0
    category: str = ""
    images: Tuple[str, ...] = ()
    is_available: bool = True
    seller_name: str = ""

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Product":
        seller = data.get("upLoadedBy") or {}
        return cls(
            id=data.get("_id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
            price=_num(data.get("price")),
            unit=data.get("unit") or "kg",
            quantity=_int(data.get("quantity")),
            category=data.get("category") or "",
            images=tuple(data.get("images") or ()),
            is_available=bool(data.get("isAvailable", True)),
            seller_name=seller.get("uploaderName", "") if isinstance(seller, dict) else "",
        )


@dataclass(frozen=True)
class CartItem:
    cart_item_id: str
    product_id: str
    name: str = ""
    description: str = ""
    price: float = 0.0
    unit: str = ""
    quantity: int = 0
    images: Tuple[str, ...] = ()
    seller_name: str = ""
    category: str = ""

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "CartItem":
        prod = data.get("productId") or {}
        if not isinstance(prod, dict):
            prod = {"_id": prod}
        seller = prod.get("upLoadedBy") or {}
        return cls(
            cart_item_id=data.get("_id") or "",
            product_id=prod.get("_id") or "",
            name=prod.get("name") or "",
            description=prod.get("description") or "",
            price=_num(prod.get("price")),
            unit=prod.get("unit") or "",
            quantity=_int(data.get("quantity")),
            images=tuple(prod.get("images") or ()),
            seller_name=seller.get("uploaderName", "") if isinstance(seller, dict) else "",
            category=prod.get("category") or "",
        )


@dataclass(frozen=True)
class Cart:
    cart_id: Optional[str]
    items: Tuple[CartItem, ...] = ()

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "Cart":
        data = data or {}
        return cls(
            cart_id=data.get("_id"),
            items=tuple(CartItem.from_json(p) for p in data.get("products") or ()),
        )


@dataclass(frozen=True)
class OrderLine:
    product_id: Optional[str]
    name: str = ""
    quantity: int = 0
    price: float = 0.0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "OrderLine":
        prod = data.get("productId")
        name = data.get("name") or (prod.get("name") if isinstance(prod, dict) else "")
        price = data.get("price")
        if price is None and isinstance(prod, dict):
            price = prod.get("price")
        return cls(
            product_id=_ref_id(prod),
            name=name or "",
            quantity=_int(data.get("quantity")),
            price=_num(price),
        )


@dataclass(frozen=True)
class ShippingAddress:
    street: str = ""
    city: str = ""
    zip_code: str = ""
    phone_number: str = ""

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "ShippingAddress":
        data = data or {}
        return cls(
            street=data.get("street") or "",
            city=data.get("city") or "",
            zip_code=data.get("zipCode") or "",
            phone_number=data.get("phoneNumber") or "",
        )

    def __str__(self) -> str:
        return ", ".join(p for p in (self.street, self.city, self.zip_code) if p)


@dataclass(frozen=True)
class Order:
    id: str
    status: str = "pending"
    products: Tuple[OrderLine, ...] = ()
    total_price: float = 0.0
    shipping_address: ShippingAddress = field(default_factory=ShippingAddress)
    payment_status: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Order":
        created = data.get("createdAt")
        created_at = None
        if created:
            try:
                created_at = datetime.fromisoformat(str(created).replace("Z", "+00:00"))
            except ValueError:
                created_at = None
        payment = data.get("paymentInfo") or {}
        return cls(
            id=data.get("_id") or "",
            status=(data.get("status") or "pending").lower(),
            products=tuple(OrderLine.from_json(p) for p in data.get("products") or ()),
            total_price=_num(data.get("totalPrice")),
            shipping_address=ShippingAddress.from_json(data.get("shippingAddress")),
            payment_status=payment.get("status", "") if isinstance(payment, dict) else "",
            created_at=created_at,
        )


@dataclass(frozen=True)
class WishlistItem:
    product: Product

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "WishlistItem":
        prod = data.get("productId") or {}
        if not isinstance(prod, dict):
            prod = {"_id": prod}
        return cls(product=Product.from_json(prod))


@dataclass(frozen=True)
class Review:
    product_id: str
    rating: int
    comment: str

    def to_json(self) -> Dict[str, Any]:
        return {"productId": self.product_id, "rating": self.rating, "comment": self.comment}


@dataclass(frozen=True)
class Weather:
    temperature: float
    description: str
    humidity: float
    wind_speed: float
    feels_like: float


@dataclass(frozen=True)
class WeatherAlert:
    alert: str
    description: str
    city: str = ""

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "WeatherAlert":
        return cls(
            alert=data.get("alert") or data.get("title") or "",
            description=data.get("description") or data.get("message") or "",
            city=data.get("city") or "",
        )


@dataclass(frozen=True)
class ChatMessage:
    sender: Literal["user", "bot"]
    message: str
    time: datetime = field(default_factory=datetime.now)


@dataclass
class CheckoutForm:
    full_name: str = ""
    phone_number: str = ""
    street: str = ""
    city: str = ""
    zip_code: str = ""
    notes: str = ""
    payment_method: str = "cash-on-delivery"


PAYMENT_METHODS: List[str] = ["cash-on-delivery", "card"]
