from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Label

from api.models import WishlistItem
from flows.wishlist import WishlistFlow
from utils.pure import format_currency
from views.base_screen import BaseScreen
from views.modal_dialog import confirm


class WishlistScreen(BaseScreen):
    """
    Saved products; move them to the cart or drop them.
    """

    MODE = "wishlist"

    BINDINGS = [
        Binding("f2", "cart", "Move to Cart", show=True),
        Binding("delete", "remove", "Remove", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.flow = WishlistFlow(self.client)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield DataTable(id="table-wishlist")
            yield Label("", id="label-wishlist-empty")
            yield Label("", id="label-feedback")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Button("Clear Wishlist", id="btn-clear", variant="error")
            yield Button("Move to Cart", id="btn-cart", variant="primary")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Category", "Price", "Unit", "Stock")
        self.handle_refresh()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="wishlist")
    async def handle_refresh(self) -> None:
        await self.flow.fetch_wishlist()
        if self.flow.error:
            self.show_feedback(self.flow.error, error=True)
        self.render_table()

    def render_table(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for item in self.flow.items:
            p = item.product
            table.add_row(p.name, p.category or "-", format_currency(p.price), p.unit, p.quantity)

        empty = not self.flow.items
        self.query_one("#label-wishlist-empty", Label).update(
            "Your wishlist is empty" if empty and not self.flow.error else ""
        )
        self.query_one("#btn-clear").disabled = empty
        self.query_one("#btn-cart").disabled = empty

    def _selected(self) -> Optional[WishlistItem]:
        table = self.query_one(DataTable)
        if table.row_count == 0 or table.cursor_row is None or table.cursor_row >= len(self.flow.items):
            return None
        return self.flow.items[table.cursor_row]

    @on(Button.Pressed, "#btn-cart")
    @work(exclusive=True)
    async def action_cart(self) -> None:
        item = self._selected()
        if not item:
            return
        ok = await self.flow.move_to_cart(item.product.id)
        self.show_feedback(self.flow.message, error=not ok)
        self.render_table()

    @work()
    async def action_remove(self) -> None:
        item = self._selected()
        if not item:
            return
        if await self.app.push_screen_wait(
            confirm(f"Remove {item.product.name} from wishlist?")
        ):
            ok = await self.flow.remove_item(item.product.id)
            self.show_feedback(self.flow.message, error=not ok)
            self.render_table()

    @on(Button.Pressed, "#btn-clear")
    @work()
    async def handle_clear(self) -> None:
        if await self.app.push_screen_wait(
            confirm("Do you really want to clear your wishlist?", tone="error")
        ):
            ok = await self.flow.clear()
            self.show_feedback(self.flow.message, error=not ok)
            self.render_table()
