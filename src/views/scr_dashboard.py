from textual import on, work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import Button, MarkdownViewer

from flows.dashboard import DashboardFlow
from utils.i18n import t
from utils.pure import format_currency, generate_markdown_table
from views.base_screen import BaseScreen


class DashboardScreen(BaseScreen):
    """
    Role dashboard: counters fetched concurrently, rendered in the active language.
    """

    MODE = "dashboard"

    def __init__(self) -> None:
        super().__init__()
        self.flow = DashboardFlow(self.client, self.app.state.role)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-dashboard", show_table_of_contents=False)
            yield Button("Refresh", id="btn-refresh")

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True)
    async def handle_reload(self) -> None:
        lang = self.app.state.language
        viewer = self.query_one("#md-dashboard", MarkdownViewer)
        await viewer.document.update(f"### {t(lang, 'loading_dashboard')}")

        await self.flow.load()
        if self.flow.error:
            await viewer.document.update(f"### {self.flow.title(lang)}\n\n**{self.flow.error}**")
            self.show_feedback(self.flow.error, error=True)
            return

        user = self.app.state.user
        greeting = f"{t(lang, 'welcome')} {user.name if user else ''}".strip()
        md = (
            f"### {self.flow.title(lang)}\n\n{greeting}\n\n"
            + generate_markdown_table(None, self.flow.cards(lang), ["l", "r"])
        )

        recommended = self.flow.stats.recommended
        if recommended:
            rows = [[p.name, p.category, format_currency(p.price), p.unit] for p in recommended]
            md += f"\n\n#### {t(lang, 'recommended')}\n\n" + generate_markdown_table(
                ["Product", "Category", "Price", "Unit"], rows, ["l", "l", "r", "c"]
            )

        await viewer.document.update(md)
