from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, MarkdownViewer

from flows.weather import DEFAULT_CITY, WeatherFlow
from utils.pure import generate_markdown_table
from views.base_screen import BaseScreen


class WeatherScreen(BaseScreen):
    """
    Current conditions for a city plus derived farming alerts.
    """

    MODE = "weather"

    def __init__(self) -> None:
        super().__init__()
        self.flow = WeatherFlow(self.client)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            with Horizontal(id="hort-filters"):
                yield Input(DEFAULT_CITY, id="input-city", placeholder="City")
                yield Button("Search", id="btn-search", variant="primary")
            yield MarkdownViewer(id="md-weather", show_table_of_contents=False)
            yield Label("", id="label-feedback")

    def on_mount(self) -> None:
        self.load_weather(DEFAULT_CITY)

    @on(Input.Submitted, "#input-city")
    @on(Button.Pressed, "#btn-search")
    def handle_search(self) -> None:
        self.load_weather(self.query_one("#input-city", Input).value)

    @work(exclusive=True)
    async def load_weather(self, city: str) -> None:
        viewer = self.query_one("#md-weather", MarkdownViewer)
        await viewer.document.update("### Loading weather...")
        await self.flow.fetch(city)
        if self.flow.error:
            await viewer.document.update(f"### Weather\n\n**{self.flow.error}**")
            self.show_feedback(self.flow.error, error=True)
            return
        self.show_feedback("")
        await self.flow.fetch_user_alerts()

        w = self.flow.weather
        rows = [
            ["Temperature", f"{w.temperature:.1f} °C"],
            ["Feels like", f"{w.feels_like:.1f} °C"],
            ["Humidity", f"{w.humidity:.0f} %"],
            ["Wind", f"{w.wind_speed:.1f} km/h"],
        ]
        md = (
            f"### {self.flow.city}: {w.description}\n\n"
            + generate_markdown_table(None, rows, ["l", "r"])
            + "\n\n#### Farming Alerts\n\n"
            + "\n".join(f"- **{a.alert}**: {a.description}" for a in self.flow.alerts)
        )
        if self.flow.user_alerts:
            md += "\n\n#### My Alerts\n\n" + "\n".join(
                f"- **{a.alert}** ({a.city or '-'}): {a.description}" for a in self.flow.user_alerts
            )
        await viewer.document.update(md)
