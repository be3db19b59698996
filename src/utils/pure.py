# side-effect free helpers shared by flows and views
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence

from api.models import CartItem, Order, Product, Weather, WeatherAlert

# fixed forward chain, no skipping and no going back
NEXT_STATUS: Dict[str, Optional[str]] = {
    "pending": "processing",
    "processing": "shipped",
    "shipped": "delivered",
    "delivered": None,
    "canceled": None,
}
CANCELLABLE_STATUSES = ("pending", "processing")

DEFAULT_WEATHER = Weather(
    temperature=28.5,
    description="Clear Skies",
    humidity=45,
    wind_speed=7,
    feels_like=21.0,
)


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[Any]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Render rows as a Markdown table.

    Args:
        headers: column headers, or None to promote the first row.
        rows: cell values; None renders as "-".
        aligns: 'l', 'c' or 'r' per column, centered when omitted.
    """
    if not rows:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    def cell(v) -> str:
        return "-" if v is None else str(v).replace("|", "/")

    headers = [cell(h) for h in headers]
    aligns = aligns or ["c"] * len(headers)
    if len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    rule = {"l": ":---", "c": ":---:", "r": "---:"}
    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join(rule[a] for a in aligns) + " |",
    ]
    lines += ["| " + " | ".join(cell(v) for v in row) + " |" for row in rows]
    return "\n".join(lines)


def format_currency(amount: float) -> str:
    return f"Rs. {float(amount or 0):,.2f}"


def format_date(when: Optional[datetime]) -> str:
    return when.strftime("%Y-%m-%d %H:%M") if when else "N/A"


def cart_total(items: Iterable[CartItem]) -> float:
    return sum((item.price or 0) * (item.quantity or 0) for item in items)


def next_status(status: str) -> Optional[str]:
    return NEXT_STATUS.get((status or "").lower())


def filter_products(
    products: Sequence[Product], term: str = "", category: str = "all"
) -> List[Product]:
    """In-memory search over name, description and category."""
    term = (term or "").strip().lower()
    category = (category or "all").lower()
    result = []
    for p in products:
        name, desc, cat = p.name.lower(), p.description.lower(), p.category.lower()
        matches_search = not term or term in name or term in desc or term in cat
        matches_category = category == "all" or category in cat
        if matches_search and matches_category:
            result.append(p)
    return result


def filter_orders(orders: Sequence[Order], status: str = "all", term: str = "") -> List[Order]:
    term = (term or "").strip().lower()
    status = (status or "all").lower()
    result = []
    for o in orders:
        if status != "all" and o.status != status:
            continue
        if term and not (
            term in o.id.lower()
            or any(term in line.name.lower() for line in o.products)
            or term in o.shipping_address.city.lower()
        ):
            continue
        result.append(o)
    return result


def process_weather(reading: Optional[Dict[str, Any]]) -> Weather:
    """Fill the fields the backend left out from a fixed default reading."""
    if not reading or reading.get("temperature") is None:
        return DEFAULT_WEATHER
    d = DEFAULT_WEATHER
    return Weather(
        temperature=reading.get("temperature") or d.temperature,
        description=reading.get("description") or d.description,
        humidity=reading.get("humidity") or d.humidity,
        wind_speed=reading.get("windSpeed") or d.wind_speed,
        feels_like=reading.get("feelsLike") or d.feels_like,
    )


def generate_agricultural_alerts(weather: Optional[Weather], city: str) -> List[WeatherAlert]:
    if not weather:
        return []
    region = ", ".join(part.strip() for part in city.split(",")[:2])
    alerts = []

    if weather.temperature < 7:
        alerts.append(
            WeatherAlert(
                "FROST WARNING IMMINENT",
                "Temperatures below 7°C are critical. Activate frost protection for susceptible crops.",
                region,
            )
        )
    elif weather.temperature > 35 and weather.humidity > 50:
        alerts.append(
            WeatherAlert(
                "HEAT STRESS ADVISORY",
                "High heat and humidity increase risk of wilting and heat stroke in livestock. Ensure adequate water.",
                region,
            )
        )

    if weather.wind_speed > 25:
        alerts.append(
            WeatherAlert(
                "HIGH WIND ALERT",
                "Wind speeds above 25 km/h detected. POSTPONE all aerial spraying to prevent chemical drift.",
                region,
            )
        )

    if "rain" in weather.description.lower() or weather.humidity > 85:
        alerts.append(
            WeatherAlert(
                "HIGH DISEASE RISK",
                "High moisture levels create ideal conditions for fungal diseases (e.g., blight). Monitor fields closely.",
                region,
            )
        )

    if not alerts:
        alerts.append(
            WeatherAlert(
                "Optimal Conditions",
                "Current conditions are favorable for planting and growth.",
                region,
            )
        )
    return alerts
