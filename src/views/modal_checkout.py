from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, MarkdownViewer, Select

from api.models import PAYMENT_METHODS
from flows.cart import REQUIRED_CHECKOUT_FIELDS, CartFlow
from utils.pure import format_currency, generate_markdown_table
from views.modal_dialog import confirm

# form attribute -> (label, placeholder)
_FIELDS = {
    "full_name": ("Full Name", "Jane Doe"),
    "phone_number": ("Phone Number", "+923001234567"),
    "street": ("Street", "House 12, Street 4"),
    "city": ("City", "Lahore"),
    "zip_code": ("Zip code", "54000"),
    "notes": ("Notes", "Leave at the gate"),
}


class CheckoutModal(ModalScreen[bool]):
    """
    Order summary plus the shipping form.
    Return True once the order is placed, False if abandoned.
    """

    def __init__(self, flow: CartFlow):
        super().__init__()
        self.flow = flow

    def compose(self) -> ComposeResult:
        with Vertical():
            yield MarkdownViewer("", show_table_of_contents=False)
            with VerticalScroll(id="div-checkout-form"):
                for attr, (label, placeholder) in _FIELDS.items():
                    required = " *" if attr in REQUIRED_CHECKOUT_FIELDS else ""
                    yield Label(label + required)
                    yield Input(
                        value=getattr(self.flow.checkout, attr),
                        placeholder=placeholder,
                        id=f"input-{attr.replace('_', '-')}",
                    )
                yield Label("Payment Method")
                yield Select(
                    [(m.replace("-", " ").title(), m) for m in PAYMENT_METHODS],
                    value=self.flow.checkout.payment_method,
                    allow_blank=False,
                    id="select-payment",
                )
            yield Label("", id="label-feedback")
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Place Order", id="btn-submit", variant="primary")

    async def on_mount(self):
        items = self.flow.items or []
        headers = ["Product", "Unit Price", "Quantity", "Total Price"]
        rows = [
            [i.name, format_currency(i.price), i.quantity, format_currency(i.price * i.quantity)]
            for i in items
        ]
        md = "### Order Summary\n\n" + generate_markdown_table(headers, rows, ["l", "c", "c", "c"])
        md += f"\n\n**Total:** {format_currency(self.flow.total)}"
        await self.query_one(MarkdownViewer).document.update(md)
        self.query_one("#input-full-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    def _read_form(self) -> None:
        form = self.flow.checkout
        for attr in _FIELDS:
            setattr(form, attr, self.query_one(f"#input-{attr.replace('_', '-')}", Input).value)
        form.payment_method = str(self.query_one("#select-payment", Select).value)

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        self._read_form()
        missing = self.flow.validate_checkout()
        if missing:
            for attr, label in REQUIRED_CHECKOUT_FIELDS.items():
                widget = self.query_one(f"#input-{attr.replace('_', '-')}", Input)
                widget.set_class(label in missing, "-invalid")
            self.query_one("#label-feedback", Label).update(
                f"Please fill in: {', '.join(missing)}"
            )
            return

        if not await self.app.push_screen_wait(
            confirm("Place order? This cannot be undone.", tone="positive")
        ):
            return

        if await self.flow.place_order():
            self.notify(self.flow.message)
            self.dismiss(True)
        else:
            self.query_one("#label-feedback", Label).update(self.flow.message)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self._read_form()
        self.dismiss(False)
