from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Label, MarkdownViewer, Select

from api.models import Order
from flows.orders import MyOrdersFlow
from utils.pure import format_currency, format_date, generate_markdown_table
from views.base_screen import BaseScreen
from views.modal_dialog import confirm
from views.modal_review import ReviewModal


class OrdersScreen(BaseScreen):
    """
    Buyer order history.

    Layout:
    - Markdown detail view at the top, showing the highlighted order.
    - Orders table below, newest first as returned by the server.
    - Cancel applies to pending/processing orders, review to delivered ones.
    """

    MODE = "orders"

    BINDINGS = [
        Binding("enter", "noop", "View Order Detail", show=True, key_display="⏎"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.flow = MyOrdersFlow(self.client)
        self._current: Optional[Order] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield DataTable(id="table-orders")
            yield Label("", id="label-feedback")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Select([], prompt="Item to review", id="select-review-line")
            yield Button("Review", id="btn-review", variant="success")
            yield Button("Cancel Order", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Date", "Status", "Items", "Total")
        self.handle_refresh()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="orders")
    async def handle_refresh(self) -> None:
        await self.flow.fetch_orders()
        if self.flow.error:
            self.show_feedback(self.flow.error, error=True)
        await self.render_orders()

    async def render_orders(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for o in self.flow.orders:
            table.add_row(
                o.id[-8:],
                format_date(o.created_at),
                o.status.title(),
                sum(line.quantity for line in o.products),
                format_currency(o.total_price),
            )
        if self.flow.orders:
            table.cursor_coordinate = (0, 0)
            await self.render_detail(self.flow.orders[0])
        else:
            await self.render_detail(None)

    @on(DataTable.RowHighlighted)
    async def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        if 0 <= event.cursor_row < len(self.flow.orders):
            await self.render_detail(self.flow.orders[event.cursor_row])

    @on(DataTable.RowSelected)
    @work(exclusive=True)
    async def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        if not 0 <= event.cursor_row < len(self.flow.orders):
            return
        # the list endpoint may omit populated lines
        detail = await self.flow.load_detail(self.flow.orders[event.cursor_row].id)
        if detail:
            await self.render_detail(detail)
        else:
            self.show_feedback(self.flow.message, error=True)

    async def render_detail(self, order: Optional[Order]) -> None:
        self._current = order
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        lines = self.query_one("#select-review-line", Select)

        if not order:
            msg = "### No orders yet." if not self.flow.error else f"### {self.flow.error}"
            await viewer.document.update(msg)
            lines.set_options([])
            self.query_one("#btn-cancel").disabled = True
            self.query_one("#btn-review").disabled = True
            return

        header = (
            f"### Order #{order.id}\n"
            f"Date: {format_date(order.created_at)}  \n"
            f"Status: **{order.status.title()}**  \n"
            f"Ship To: {order.shipping_address or '-'}\n\n"
        )
        rows = [
            [l.name or l.product_id, l.quantity, format_currency(l.price), format_currency(l.price * l.quantity)]
            for l in order.products
        ]
        md = header + generate_markdown_table(
            ["Product", "Qty", "Unit Price", "Line Total"], rows, ["l", "r", "r", "r"]
        )
        md += f"\n\n**Total:** {format_currency(order.total_price)}"
        await viewer.document.update(md)

        reviewable = [l for l in order.products if self.flow.can_review(order, l.product_id)]
        lines.set_options([(l.name or l.product_id, l.product_id) for l in reviewable])
        self.query_one("#btn-review").disabled = not reviewable
        self.query_one("#btn-cancel").disabled = not self.flow.can_cancel(order)

    @on(Button.Pressed, "#btn-cancel")
    @work()
    async def handle_cancel(self) -> None:
        order = self._current
        if not order:
            return
        if not await self.app.push_screen_wait(
            confirm("Are you sure you want to cancel this order?", tone="error")
        ):
            return
        ok = await self.flow.cancel_order(order)
        self.show_feedback(self.flow.message, error=not ok)
        if ok:
            await self.render_orders()

    @on(Button.Pressed, "#btn-review")
    @work()
    async def handle_review(self) -> None:
        order = self._current
        selected = self.query_one("#select-review-line", Select).value
        if not order or selected is Select.BLANK:
            self.notify("Pick an item to review.", severity="warning")
            return
        line = next((l for l in order.products if l.product_id == selected), None)
        if line and await self.app.push_screen_wait(ReviewModal(self.flow, order, line)):
            self.show_feedback(self.flow.message)
            await self.render_detail(order)

    def action_noop(self) -> None:
        pass
