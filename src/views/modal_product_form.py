from pathlib import Path

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, Select, TextArea

from flows.products import CATEGORY_OPTIONS, UNIT_OPTIONS, ProductManagementFlow


class ProductFormModal(ModalScreen[bool]):
    """
    Add or edit a listing, depending on `flow.editing_id`.
    Return True once the server accepted it.
    """

    def __init__(self, flow: ProductManagementFlow):
        super().__init__()
        self.flow = flow

    def compose(self) -> ComposeResult:
        form = self.flow.form
        title = "Edit Product" if self.flow.editing_id else "Add Product"
        with Vertical(id="div-product-form"):
            yield Label(title, id="caption")
            with VerticalScroll():
                yield Label("Name *")
                yield Input(form.name, id="input-name")
                yield Label("Description")
                yield TextArea(form.description, id="textarea-description")
                with Horizontal():
                    with Vertical():
                        yield Label("Price (Rs.) *")
                        yield Input(
                            form.price,
                            id="input-price",
                            type="number",
                            validators=[Number(minimum=0.0)],
                        )
                    with Vertical():
                        yield Label("Quantity *")
                        yield Input(
                            form.quantity,
                            id="input-quantity",
                            type="integer",
                            validators=[Number(minimum=0)],
                        )
                with Horizontal():
                    with Vertical():
                        yield Label("Unit")
                        yield Select(
                            [(u, u) for u in UNIT_OPTIONS],
                            value=form.unit if form.unit in UNIT_OPTIONS else UNIT_OPTIONS[0],
                            allow_blank=False,
                            id="select-unit",
                        )
                    with Vertical():
                        yield Label("Category")
                        yield Select(
                            [(c, c) for c in CATEGORY_OPTIONS],
                            value=form.category if form.category in CATEGORY_OPTIONS else Select.BLANK,
                            prompt="Select category",
                            id="select-category",
                        )
                yield Label("Image")
                with Horizontal(id="hort-image"):
                    yield Input(placeholder="path/to/image.jpg", id="input-image-path")
                    yield Button("Upload", id="btn-upload")
                yield Label(form.image_url or "No image", id="label-image-url")
            yield Label("", id="label-feedback")
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Save", id="btn-submit", variant="primary")

    def on_mount(self):
        self.query_one("#input-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    def _read_form(self) -> None:
        form = self.flow.form
        form.name = self.query_one("#input-name", Input).value
        form.description = self.query_one("#textarea-description", TextArea).text
        form.price = self.query_one("#input-price", Input).value
        form.quantity = self.query_one("#input-quantity", Input).value
        form.unit = str(self.query_one("#select-unit", Select).value)
        category = self.query_one("#select-category", Select).value
        form.category = "" if category is Select.BLANK else str(category)

    def _feedback(self, text: str, error: bool = True) -> None:
        label = self.query_one("#label-feedback", Label)
        label.update(text)
        label.set_class(error, "-error")

    @on(Button.Pressed, "#btn-upload")
    @work(exclusive=True, group="upload")
    async def handle_upload(self):
        path = self.query_one("#input-image-path", Input).value.strip()
        if not path or not Path(path).expanduser().is_file():
            self._feedback("Select an existing image file.")
            return
        self._feedback("Uploading...", error=False)
        ok = await self.flow.upload_image(str(Path(path).expanduser()))
        self._feedback(self.flow.message, error=not ok)
        if ok:
            self.query_one("#label-image-url", Label).update(self.flow.form.image_url)

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        self._read_form()
        if await self.flow.save():
            self.notify(self.flow.message)
            self.dismiss(True)
        else:
            self._feedback(self.flow.message)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)
