from rich.text import Text
from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Button, Input, Label

from api.models import ChatMessage
from flows.chat import ChatFlow
from views.base_screen import BaseScreen


class ChatBubble(Label):
    def __init__(self, message: ChatMessage):
        who = "You" if message.sender == "user" else "Assistant"
        # plain Text, replies may contain markup-like brackets
        super().__init__(
            Text.assemble((who, "bold"), " ", (f"{message.time:%H:%M}", "dim"), "\n", message.message),
            classes=f"chat-{message.sender}",
        )


class ChatScreen(BaseScreen):
    """
    Farming assistant chat. The log lives only as long as the screen.
    """

    MODE = "chat"

    def __init__(self) -> None:
        super().__init__()
        self.flow = ChatFlow(self.client)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll(id="vertscroll-chat"):
            for msg in self.flow.messages:
                yield ChatBubble(msg)
        with Horizontal(id="hort-chat-input"):
            yield Input(id="input-chat", placeholder="Ask about crops, prices, weather...")
            yield Button("Send", id="btn-send", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#input-chat").focus()

    @on(Input.Submitted, "#input-chat")
    @on(Button.Pressed, "#btn-send")
    @work(exclusive=True)
    async def handle_send(self) -> None:
        chat_input = self.query_one("#input-chat", Input)
        text = chat_input.value
        if not text.strip() or self.flow.loading:
            return
        chat_input.value = ""

        send_btn = self.query_one("#btn-send", Button)
        send_btn.disabled = True
        sent = len(self.flow.messages)
        try:
            await self.flow.send(text)
        finally:
            send_btn.disabled = False

        log = self.query_one("#vertscroll-chat", VerticalScroll)
        await log.mount_all([ChatBubble(m) for m in self.flow.messages[sent:]])
        log.scroll_end(animate=False)
        if self.flow.message:
            self.notify(self.flow.message, severity="error")
