import unittest
from datetime import datetime

from fakes import order_json, product_json
from api.models import Order, Product, Session, Weather
from utils.pure import (
    DEFAULT_WEATHER,
    filter_orders,
    filter_products,
    format_currency,
    format_date,
    generate_agricultural_alerts,
    generate_markdown_table,
    next_status,
    process_weather,
)


def weather(temperature=25.0, description="clear sky", humidity=40, wind_speed=5):
    return Weather(temperature, description, humidity, wind_speed, temperature)


class MarkdownTableTestCase(unittest.TestCase):
    def test_rows_and_alignment(self):
        md = generate_markdown_table(["A", "B"], [[1, None], ["x|y", 2]], ["l", "r"])
        self.assertEqual(
            md.splitlines(),
            ["| A | B |", "| :--- | ---: |", "| 1 | - |", "| x/y | 2 |"],
        )

    def test_first_row_as_header(self):
        md = generate_markdown_table(None, [["Name", "Ali"], ["Role", "Farmer"]], ["l", "l"])
        self.assertTrue(md.startswith("| Name | Ali |"))
        self.assertEqual(generate_markdown_table(["A"], []), "")

    def test_alignment_length_mismatch(self):
        with self.assertRaises(ValueError):
            generate_markdown_table(["A", "B"], [[1, 2]], ["l"])


class FormattingTestCase(unittest.TestCase):
    def test_currency_and_date(self):
        self.assertEqual(format_currency(1234.5), "Rs. 1,234.50")
        self.assertEqual(format_currency(None), "Rs. 0.00")
        self.assertEqual(format_date(datetime(2026, 10, 19, 8, 5)), "2026-10-19 08:05")
        self.assertEqual(format_date(None), "N/A")

    def test_status_chain(self):
        self.assertEqual(next_status("pending"), "processing")
        self.assertEqual(next_status("Processing"), "shipped")
        self.assertEqual(next_status("shipped"), "delivered")
        self.assertIsNone(next_status("delivered"))
        self.assertIsNone(next_status("canceled"))
        self.assertIsNone(next_status("unknown"))


class FilterTestCase(unittest.TestCase):
    def setUp(self):
        self.products = [
            Product.from_json(product_json("p1", "Tomato")),
            Product.from_json(product_json("p2", "Urea", category="Fertilizer", description="Nitrogen")),
            Product.from_json(product_json("p3", "Wheat Seed", category="Crops")),
        ]

    def test_products_by_term_and_category(self):
        self.assertEqual(len(filter_products(self.products)), 3)
        self.assertEqual([p.id for p in filter_products(self.products, "nitro")], ["p2"])
        self.assertEqual([p.id for p in filter_products(self.products, "", "crops")], ["p3"])
        self.assertEqual(filter_products(self.products, "tomato", "Fertilizer"), [])

    def test_orders_by_status_and_term(self):
        orders = [
            Order.from_json(order_json("o1")),
            Order.from_json(order_json("o2", status="delivered", shippingAddress={"city": "Multan"})),
        ]
        self.assertEqual([o.id for o in filter_orders(orders, "delivered")], ["o2"])
        self.assertEqual([o.id for o in filter_orders(orders, "all", "multan")], ["o2"])
        self.assertEqual(len(filter_orders(orders, "all", "tomato")), 2)


class WeatherTestCase(unittest.TestCase):
    def test_process_fills_defaults(self):
        self.assertEqual(process_weather(None), DEFAULT_WEATHER)
        self.assertEqual(process_weather({"humidity": 90}), DEFAULT_WEATHER)
        w = process_weather({"temperature": 12, "windSpeed": 30})
        self.assertEqual((w.temperature, w.wind_speed), (12, 30))
        self.assertEqual(w.description, DEFAULT_WEATHER.description)

    def test_alert_thresholds(self):
        def titles(w):
            return [a.alert for a in generate_agricultural_alerts(w, "Lahore, Punjab, PK")]

        self.assertEqual(titles(weather(temperature=5)), ["FROST WARNING IMMINENT"])
        self.assertEqual(titles(weather(temperature=7)), ["Optimal Conditions"])
        self.assertEqual(titles(weather(temperature=36, humidity=51)), ["HEAT STRESS ADVISORY"])
        self.assertEqual(titles(weather(temperature=36, humidity=50)), ["Optimal Conditions"])
        self.assertEqual(titles(weather(wind_speed=26)), ["HIGH WIND ALERT"])
        self.assertEqual(titles(weather(description="light rain")), ["HIGH DISEASE RISK"])
        self.assertEqual(
            titles(weather(temperature=3, humidity=90, wind_speed=30)),
            ["FROST WARNING IMMINENT", "HIGH WIND ALERT", "HIGH DISEASE RISK"],
        )
        self.assertEqual(generate_agricultural_alerts(None, "Lahore"), [])

    def test_alert_region(self):
        alert = generate_agricultural_alerts(weather(), "Lahore, Punjab, PK")[0]
        self.assertEqual(alert.city, "Lahore, Punjab")


class SessionModelTestCase(unittest.TestCase):
    def test_round_trip_shape(self):
        self.assertEqual(Session().to_json(), {"isAuthenticated": False, "role": None, "user": None})
        self.assertEqual(Session.from_json({"isAuthenticated": False, "role": "Farmer"}), Session())
        self.assertEqual(Session.from_json(None), Session())


if __name__ == "__main__":
    unittest.main()
