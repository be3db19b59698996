from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Label, MarkdownViewer, Select

from api.models import Order
from flows.orders import OrderManagementFlow
from utils.pure import (
    CANCELLABLE_STATUSES,
    format_currency,
    format_date,
    generate_markdown_table,
    next_status,
)
from views.base_screen import BaseScreen
from views.modal_dialog import confirm


class OrderManagementScreen(BaseScreen):
    """
    Incoming orders for farmers and suppliers; move them along the status chain.
    """

    MODE = "order_mgmt"

    def __init__(self) -> None:
        super().__init__()
        self.flow = OrderManagementFlow(self.client)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            with Horizontal(id="hort-filters"):
                yield Input(id="input-search", placeholder="Search by order id or product...")
                yield Select(
                    [(s.title(), s) for s in OrderManagementFlow.STATUS_FILTERS],
                    value="all",
                    allow_blank=False,
                    id="select-status",
                )
            yield DataTable(id="table-orders")
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield Label("", id="label-feedback")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Button("Advance Status", id="btn-advance", variant="success")
            yield Button("Cancel Order", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Date", "Status", "Ship To", "Total")
        self.handle_refresh()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="orders")
    async def handle_refresh(self) -> None:
        await self.flow.fetch_orders()
        if self.flow.error:
            self.show_feedback(self.flow.error, error=True)
        await self.render_table()

    async def render_table(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        visible = self.flow.visible_orders
        for o in visible:
            table.add_row(
                o.id[-8:],
                format_date(o.created_at),
                o.status.title(),
                o.shipping_address.city or "-",
                format_currency(o.total_price),
            )
        await self.render_detail(visible[0] if visible else None)

    def _selected(self) -> Optional[Order]:
        table = self.query_one(DataTable)
        visible = self.flow.visible_orders
        if table.row_count == 0 or table.cursor_row is None or table.cursor_row >= len(visible):
            return None
        return visible[table.cursor_row]

    @on(DataTable.RowHighlighted)
    async def handle_row_highlight(self) -> None:
        await self.render_detail(self._selected())

    async def render_detail(self, order: Optional[Order]) -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        advance = self.query_one("#btn-advance", Button)
        cancel = self.query_one("#btn-cancel", Button)
        if not order:
            await viewer.document.update("### No orders match the filters.")
            advance.disabled = cancel.disabled = True
            return

        rows = [[l.name or l.product_id, l.quantity, format_currency(l.price)] for l in order.products]
        addr = order.shipping_address
        md = (
            f"### Order #{order.id}\n"
            f"Status: **{order.status.title()}**  \n"
            f"Ship To: {addr or '-'}  \n"
            f"Phone: {addr.phone_number or '-'}\n\n"
            + generate_markdown_table(["Product", "Qty", "Price"], rows, ["l", "r", "r"])
        )
        await viewer.document.update(md)

        target = next_status(order.status)
        advance.disabled = target is None
        advance.label = f"Mark {target.title()}" if target else "Advance Status"
        cancel.disabled = order.status not in CANCELLABLE_STATUSES

    @on(Input.Changed, "#input-search")
    async def handle_search(self, event: Input.Changed) -> None:
        self.flow.search_term = event.value
        await self.render_table()

    @on(Select.Changed, "#select-status")
    async def handle_status_filter(self, event: Select.Changed) -> None:
        self.flow.status_filter = str(event.value)
        await self.render_table()

    @on(Button.Pressed, "#btn-advance")
    @work(exclusive=True)
    async def handle_advance(self) -> None:
        order = self._selected()
        if not order:
            return
        ok = await self.flow.advance(order)
        self.show_feedback(self.flow.message, error=not ok)
        await self.render_table()

    @on(Button.Pressed, "#btn-cancel")
    @work()
    async def handle_cancel(self) -> None:
        order = self._selected()
        if not order:
            return
        if await self.app.push_screen_wait(
            confirm(f"Cancel order #{order.id[-8:]}?", tone="error")
        ):
            ok = await self.flow.cancel(order)
            self.show_feedback(self.flow.message, error=not ok)
            await self.render_table()
