from typing import List, Optional

import api.marketplace as api
from api.errors import ApiError
from api.models import ChatMessage
from flows.base import Flow

NO_ANSWER = "I couldn't process that request."
CONNECTION_TROUBLE = "Sorry, I'm having trouble connecting. Please try again later."
GREETING = "Hello! Ask me about crops, prices, weather or your orders."


class ChatFlow(Flow):
    def __init__(self, client):
        super().__init__(client)
        self.messages: List[ChatMessage] = [ChatMessage("bot", GREETING)]

    async def send(self, text: str) -> Optional[ChatMessage]:
        """Ask the assistant; returns the bot reply appended to the log."""
        content = (text or "").strip()
        if not content or self.loading:
            return None

        self.messages.append(ChatMessage("user", content))
        self.message = ""
        self.loading = True
        try:
            reply = await api.ask_chatbot(self.client, content) or NO_ANSWER
        except ApiError as e:
            self.fail(e, CONNECTION_TROUBLE)
            reply = CONNECTION_TROUBLE
        finally:
            self.loading = False

        bot = ChatMessage("bot", reply)
        self.messages.append(bot)
        return bot
