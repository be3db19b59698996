from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Input, Label, Select

from flows.products import CATEGORY_OPTIONS, MarketplaceFlow
from utils.pure import format_currency
from views.base_screen import BaseScreen
from views.modal_prod_detail import ProdDetailModal


class MarketScreen(BaseScreen):
    """
    Browse listings, filter locally, add to cart or wishlist.
    """

    MODE = "market"

    # shown in footer only
    BINDINGS = [
        Binding("enter", "noop", "View Product", show=True, key_display="⏎"),
        Binding("f2", "cart", "Add to Cart", show=True),
        Binding("f3", "wishlist", "Add to Wishlist", show=True),
    ]

    def __init__(self):
        super().__init__()
        self.flow = MarketplaceFlow(self.client, self.app.state.role)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            with Horizontal(id="hort-filters"):
                yield Input(id="input-search", placeholder="Search products...")
                yield Select(
                    [("All", "all")] + [(c, c) for c in CATEGORY_OPTIONS],
                    value="all",
                    allow_blank=False,
                    id="select-category",
                )
            yield DataTable(id="table-products")
            yield Label("", id="label-feedback")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("", "Name", "Category", "Price", "Unit", "Stock", "Seller")
        self.load_products()
        self.query_one("#input-search").focus()

    @work(exclusive=True)
    async def load_products(self) -> None:
        await self.flow.fetch_products()
        if self.flow.error:
            self.show_feedback(self.flow.error, error=True)
        self.render_table()

    def render_table(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for p in self.flow.visible_products:
            table.add_row(
                "♥" if p.id in self.flow.wishlist_ids else "",
                p.name,
                p.category,
                format_currency(p.price),
                p.unit,
                p.quantity,
                p.seller_name or "-",
            )

    def _selected(self):
        table = self.query_one(DataTable)
        visible = self.flow.visible_products
        if table.row_count == 0 or table.cursor_row is None or table.cursor_row >= len(visible):
            return None
        return visible[table.cursor_row]

    @on(Input.Changed, "#input-search")
    def handle_search(self, event: Input.Changed) -> None:
        self.flow.search_term = event.value
        self.render_table()

    @on(Select.Changed, "#select-category")
    def handle_category(self, event: Select.Changed) -> None:
        self.flow.category = str(event.value)
        self.render_table()

    @on(DataTable.RowSelected)
    @work()
    async def handle_view_product(self) -> None:
        product = self._selected()
        if product and await self.app.push_screen_wait(ProdDetailModal(self.flow, product)):
            self.render_table()
            self.show_feedback(self.flow.message)

    @work(exclusive=True)
    async def action_cart(self) -> None:
        product = self._selected()
        if not product:
            return
        ok = await self.flow.add_to_cart(product.id)
        self.show_feedback(self.flow.message, error=not ok)

    @work(exclusive=True)
    async def action_wishlist(self) -> None:
        product = self._selected()
        if not product or product.id in self.flow.wishlist_ids:
            return
        ok = await self.flow.add_to_wishlist(product.id)
        self.show_feedback(self.flow.message, error=not ok)
        self.render_table()

    def action_noop(self) -> None:
        pass
