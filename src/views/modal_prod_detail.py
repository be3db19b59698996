from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, MarkdownViewer

from api.models import Product
from flows.products import MarketplaceFlow
from utils.pure import format_currency, generate_markdown_table


class ProdDetailModal(ModalScreen[bool]):
    """
    Product detail plus ordering.
    Returns True if the cart or wishlist changed.
    """

    order_qty = reactive(1)

    def __init__(self, flow: MarketplaceFlow, product: Product) -> None:
        super().__init__()
        self.flow = flow
        self._prod = product
        self._changed = False

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-prod-detail"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with Vertical():
                yield Label("Order Quantity")
                with Horizontal():
                    yield Button("-", id="btn-sub-qty")
                    yield Input(value="1", id="input-order-qty", type="integer")
                    yield Button("+", id="btn-add-qty")
                yield Label("", id="label-feedback")
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button("♥ Wishlist", id="btn-wishlist")
                    yield Button("Add to Cart", id="btn-addcart", variant="primary")

    async def on_mount(self):
        # listing rows are partial, the details endpoint has the full document
        detail = await self.flow.load_detail(self._prod.id)
        if detail:
            self._prod = detail
        p = self._prod

        rows = [
            ["Category", p.category or "-"],
            ["Price", f"{format_currency(p.price)} / {p.unit}"],
            ["In stock", p.quantity],
            ["Seller", p.seller_name or "-"],
            ["Available", "Yes" if p.is_available else "No"],
        ]
        md = f"### {p.name}\n\n{p.description}\n\n" + generate_markdown_table(
            ["Attribute", "Value"], rows, ["l", "l"]
        )
        if p.images:
            md += f"\n\n[Image]({p.images[0]})"
        await self.query_one(MarkdownViewer).document.update(md)

        if p.quantity < 1 or not p.is_available:
            order_btn = self.query_one("#btn-addcart", Button)
            order_btn.label = "Out of Stock"
            order_btn.disabled = True
            order_btn.variant = "warning"

        self.query_one("#input-order-qty").validators = [
            Number(minimum=1, maximum=max(p.quantity, 1))
        ]
        self.query_one("#btn-wishlist").disabled = p.id in self.flow.wishlist_ids
        self.query_one("#input-order-qty").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(self._changed)

    def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-order-qty" and message.value and message.input.is_valid:
            self.order_qty = int(message.value)

    def watch_order_qty(self, qty: int) -> None:
        self.query_one("#btn-sub-qty").disabled = qty <= 1
        self.query_one("#btn-add-qty").disabled = qty >= self._prod.quantity
        qty_input = self.query_one("#input-order-qty", Input)
        if qty_input.value != str(qty):
            qty_input.value = str(qty)

    @on(Button.Pressed, "#btn-add-qty")
    def handle_add_qty(self):
        self.order_qty += 1

    @on(Button.Pressed, "#btn-sub-qty")
    def handle_sub_qty(self):
        if self.order_qty > 1:
            self.order_qty -= 1

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(self._changed)

    @on(Button.Pressed, "#btn-wishlist")
    @work(exclusive=True)
    async def handle_wishlist(self):
        ok = await self.flow.add_to_wishlist(self._prod.id)
        self.query_one("#label-feedback", Label).update(self.flow.message)
        if ok:
            self._changed = True
            self.query_one("#btn-wishlist").disabled = True

    @on(Button.Pressed, "#btn-addcart")
    @work(exclusive=True)
    async def handle_addcart(self):
        if await self.flow.add_to_cart(self._prod.id, self.order_qty):
            self.app.notify("Item added to cart.")
            self.dismiss(True)
        else:
            self.query_one("#label-feedback", Label).update(self.flow.message)
