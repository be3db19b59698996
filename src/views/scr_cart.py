from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, HorizontalGroup, VerticalScroll
from textual.message import Message
from textual.widgets import Button, Label, Rule

from api.models import CartItem
from flows.cart import CartFlow
from utils.messages import NavigateMessage
from utils.pure import format_currency
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal
from views.modal_dialog import confirm


class CartItemAction(Message):
    bubble = True

    def __init__(self, item: CartItem, action: str) -> None:
        super().__init__()
        self.item = item
        self.action = action


class CartItemActionLabel(Label):
    def __init__(self, item: CartItem, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.item = item

    def action_dec(self):
        self.post_message(CartItemAction(self.item, "dec"))

    def action_inc(self):
        self.post_message(CartItemAction(self.item, "inc"))

    def action_remove(self):
        self.post_message(CartItemAction(self.item, "remove"))


class CartItemWidget(HorizontalGroup):
    def __init__(self, item: CartItem):
        super().__init__()
        self.item = item

    def compose(self):
        item = self.item
        with Container(id="div-cart-item-group"):
            with Container(id="div-item"):
                yield Label(item.name or item.product_id, id="label-item-name")
                yield Label(
                    f"{item.category} • {item.unit} • Seller: {item.seller_name or 'Unknown'}",
                    id="label-item-meta",
                )
                yield Label(f"{format_currency(item.price)} x {item.quantity}", id="label-item-price")
            with Container(id="div-actions"):
                yield CartItemActionLabel(item, "[@click=dec()] - [/]", id="link-item-dec")
                yield Label(str(item.quantity), id="label-item-qty")
                yield CartItemActionLabel(item, "[@click=inc()] + [/]", id="link-item-inc")
                yield CartItemActionLabel(item, "[@click=remove()]Remove[/]", id="link-item-remove")


class CartScreen(BaseScreen):
    """
    Cart lines with quantity controls, clear and checkout.
    """

    MODE = "cart"

    def __init__(self) -> None:
        super().__init__()
        self.flow = CartFlow(self.client)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield VerticalScroll(id="vertscroll-content")
        yield Label("Total: Rs. 0.00", id="label-cart-total")
        yield Label("", id="label-feedback")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Refresh", id="btn-refresh")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self):
        self.handle_refresh()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True)
    async def handle_refresh(self):
        await self.flow.fetch_cart()
        await self.render_cart()

    async def render_cart(self) -> None:
        content = self.query_one("#vertscroll-content")
        await content.remove_children()

        if self.flow.items is None:
            await content.mount(Label(f"Error: {self.flow.error}", id="label-cart-error"))
            self.show_feedback(self.flow.error, error=True)
        elif self.flow.is_empty:
            await content.mount(
                Label("Your cart is empty", id="label-cart-empty"),
                Label("Add items from the marketplace to get started."),
            )
        else:
            await content.mount_all([CartItemWidget(item) for item in self.flow.items])

        content.set_class(not self.flow.items, "no-items")
        self.query_one("#btn-checkout").disabled = not self.flow.items
        self.query_one("#btn-clear-cart").disabled = not self.flow.items
        self.query_one("#label-cart-total", Label).update(
            f"Total: {format_currency(self.flow.total)}"
        )

    @on(CartItemAction)
    @work()
    async def handle_item_action(self, message: CartItemAction) -> None:
        item = message.item
        if message.action == "remove":
            if not await self.app.push_screen_wait(
                confirm("Do you really want to remove this item from cart?")
            ):
                return
            ok = await self.flow.remove_item(item.product_id)
        else:
            delta = 1 if message.action == "inc" else -1
            ok = await self.flow.update_quantity(item.product_id, item.quantity + delta)
            if not ok and not self.flow.message:
                # below one, nothing was sent
                return
        self.show_feedback(self.flow.message, error=not ok)
        await self.render_cart()

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if not self.flow.items:
            self.notify("Cart is empty.", severity="warning")
            return
        if await self.app.push_screen_wait(
            confirm("Do you really want to remove all items from cart?", tone="error")
        ):
            ok = await self.flow.clear_cart()
            self.show_feedback(self.flow.message, error=not ok)
            await self.render_cart()

    @on(Button.Pressed, "#btn-checkout")
    @work()
    async def handle_checkout(self) -> None:
        if not self.flow.items:
            self.notify("Cart is empty.", severity="warning")
            return
        if await self.app.push_screen_wait(CheckoutModal(self.flow)):
            await self.render_cart()
            self.show_feedback(self.flow.message)
            self.post_message(NavigateMessage("orders"))
