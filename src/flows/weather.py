from typing import List, Optional

import api.marketplace as api
from api.errors import ApiError
from api.models import Weather, WeatherAlert
from flows.base import Flow
from utils.pure import generate_agricultural_alerts, process_weather

DEFAULT_CITY = "Lahore"


class WeatherFlow(Flow):
    def __init__(self, client):
        super().__init__(client)
        self.city = DEFAULT_CITY
        self.weather: Optional[Weather] = None
        self.alerts: List[WeatherAlert] = []
        self.user_alerts: List[WeatherAlert] = []

    async def fetch(self, city: Optional[str] = None) -> None:
        city = (city or self.city).strip() or DEFAULT_CITY
        self.loading = True
        self.error = ""
        try:
            reading = await api.get_weather(self.client, city)
        except ApiError as e:
            self.fail(e, "Failed to load weather", "error")
            return
        finally:
            self.loading = False
        self.weather = process_weather(reading)
        self.alerts = generate_agricultural_alerts(self.weather, city)
        self.city = city

    async def fetch_user_alerts(self) -> None:
        try:
            self.user_alerts = await api.get_user_alerts(self.client)
        except ApiError as e:
            self.fail(e, "Failed to load alerts")
