# translation tables for the dashboards and the sidebar menu
from typing import Dict

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "farmer_dashboard": "Farmer Console",
        "buyer_dashboard": "Buyer Dashboard",
        "supplier_dashboard": "Supplier Dashboard",
        "welcome": "Welcome back to the market!",
        "active_orders": "Active Orders",
        "my_products": "My Products",
        "revenue": "Revenue ({month})",
        "my_orders": "My Orders",
        "wishlist": "Wishlist",
        "cart_items": "Cart Items",
        "orders": "Orders",
        "recommended": "Recommended Products",
        "quick_actions": "Quick Actions",
        "loading_dashboard": "Loading dashboard...",
        "load_failed": "Failed to load data",
        "user_info": "User Info",
        "menu": "Menu",
        "logout": "Log out",
        "language": "اردو",
        # menu entries
        "menu_dashboard": "Dashboard",
        "menu_market": "Marketplace",
        "menu_cart": "Cart",
        "menu_orders": "My Orders",
        "menu_wishlist": "Wishlist",
        "menu_products": "Product Management",
        "menu_order_mgmt": "Order Management",
        "menu_weather": "Weather Alerts",
        "menu_chat": "Assistant",
        "menu_profile": "Profile",
    },
    "ur": {
        "farmer_dashboard": "کسان کنسول",
        "buyer_dashboard": "خریدار ڈیش بورڈ",
        "supplier_dashboard": "سپلائر ڈیش بورڈ",
        "welcome": "مارکیٹ میں خوش آمدید!",
        "active_orders": "فعال آرڈرز",
        "my_products": "میری مصنوعات",
        "revenue": "آمدنی ({month})",
        "my_orders": "میرے آرڈرز",
        "wishlist": "پسندیدہ فہرست",
        "cart_items": "کارٹ اشیاء",
        "orders": "آرڈرز",
        "recommended": "تجویز کردہ مصنوعات",
        "quick_actions": "فوری اقدامات",
        "loading_dashboard": "ڈیش بورڈ لوڈ ہو رہا ہے...",
        "load_failed": "ڈیٹا لوڈ کرنے میں ناکامی",
        "user_info": "صارف کی معلومات",
        "menu": "مینو",
        "logout": "لاگ آؤٹ",
        "language": "English",
        "menu_dashboard": "ڈیش بورڈ",
        "menu_market": "منڈی",
        "menu_cart": "کارٹ",
        "menu_orders": "میرے آرڈرز",
        "menu_wishlist": "پسندیدہ فہرست",
        "menu_products": "مصنوعات کا انتظام",
        "menu_order_mgmt": "آرڈرز کا انتظام",
        "menu_weather": "موسمی انتباہات",
        "menu_chat": "معاون",
        "menu_profile": "پروفائل",
    },
}


def t(language: str, key: str, **kwargs) -> str:
    """Look up key in the table for language, falling back to English, then the key."""
    table = TRANSLATIONS.get(language, TRANSLATIONS["en"])
    text = table.get(key) or TRANSLATIONS["en"].get(key, key)
    return text.format(**kwargs) if kwargs else text
