from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user asks to log out from the sidebar or profile
    """

    bubble = True


class NavigateMessage(Message):
    """
    Ask the app to open another menu entry, e.g. after checkout the cart
    screen asks for order history.
    Must reach the app, so post it at app level from modals.
    """

    bubble = True

    def __init__(self, mode: str) -> None:
        super().__init__()
        self.mode = mode
