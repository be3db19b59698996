from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Label

from api.models import Product
from flows.products import ProductManagementFlow
from utils.pure import format_currency
from views.base_screen import BaseScreen
from views.modal_dialog import confirm
from views.modal_product_form import ProductFormModal


class ProductsScreen(BaseScreen):
    """
    Own listings of a farmer or supplier: add, edit, delete.
    """

    MODE = "products"

    BINDINGS = [
        Binding("enter", "noop", "Edit Product", show=True, key_display="⏎"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.flow = ProductManagementFlow(self.client)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield Input(id="input-search", placeholder="Search my products...")
            yield DataTable(id="table-products")
            yield Label("", id="label-feedback")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Button("Delete", id="btn-delete", variant="error")
            yield Button("Add Product", id="btn-add", variant="primary")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Category", "Price", "Unit", "Stock", "Available")
        self.handle_refresh()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="products")
    async def handle_refresh(self) -> None:
        await self.flow.fetch_products()
        if self.flow.error:
            self.show_feedback(self.flow.error, error=True)
        self.render_table()

    def render_table(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for p in self.flow.visible_products:
            table.add_row(
                p.name,
                p.category or "-",
                format_currency(p.price),
                p.unit,
                p.quantity,
                "Yes" if p.is_available else "No",
            )
        self.query_one("#btn-delete").disabled = table.row_count == 0

    def _selected(self) -> Optional[Product]:
        table = self.query_one(DataTable)
        visible = self.flow.visible_products
        if table.row_count == 0 or table.cursor_row is None or table.cursor_row >= len(visible):
            return None
        return visible[table.cursor_row]

    @on(Input.Changed, "#input-search")
    def handle_search(self, event: Input.Changed) -> None:
        self.flow.search_term = event.value
        self.render_table()

    @on(Button.Pressed, "#btn-add")
    @work()
    async def handle_add(self) -> None:
        self.flow.reset_form()
        await self._open_form()

    @on(DataTable.RowSelected)
    @work()
    async def handle_edit(self) -> None:
        product = self._selected()
        if not product:
            return
        self.flow.start_edit(product)
        await self._open_form()

    async def _open_form(self) -> None:
        if await self.app.push_screen_wait(ProductFormModal(self.flow)):
            self.show_feedback(self.flow.message)
            self.render_table()

    @on(Button.Pressed, "#btn-delete")
    @work()
    async def handle_delete(self) -> None:
        product = self._selected()
        if not product:
            return
        if await self.app.push_screen_wait(
            confirm(f"Delete {product.name}? This cannot be undone.", tone="error")
        ):
            ok = await self.flow.delete(product.id)
            self.show_feedback(self.flow.message, error=not ok)
            self.render_table()

    def action_noop(self) -> None:
        pass
