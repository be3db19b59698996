from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

from api.models import Order, OrderLine
from flows.orders import MyOrdersFlow


class ReviewModal(ModalScreen[bool]):
    """
    Rate one delivered order line. Returns True once the review is stored.
    """

    def __init__(self, flow: MyOrdersFlow, order: Order, line: OrderLine):
        super().__init__()
        self.flow = flow
        self.order = order
        self.line = line

    def compose(self) -> ComposeResult:
        with Vertical(id="div-review"):
            yield Label(f"Review: {self.line.name or self.line.product_id}", id="caption")
            yield Select(
                [("★" * n, n) for n in range(5, 0, -1)],
                prompt="Rating",
                id="select-rating",
            )
            yield Input(placeholder="Share your experience...", id="input-comment")
            yield Label("", id="label-feedback")
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Submit", id="btn-submit", variant="primary")

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)

    @on(Input.Submitted, "#input-comment")
    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        rating = self.query_one("#select-rating", Select).value
        comment = self.query_one("#input-comment", Input).value
        ok = await self.flow.submit_review(
            self.order,
            self.line.product_id,
            rating if isinstance(rating, int) else 0,
            comment,
        )
        if ok:
            self.notify(self.flow.message)
            self.dismiss(True)
        else:
            self.query_one("#label-feedback", Label).update(self.flow.message)
