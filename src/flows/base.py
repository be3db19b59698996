from api.client import ApiClient
from api.errors import describe_error
from utils.logger import get_logger

_logger = get_logger("flows")


class Flow:
    """
    Local view state for one screen.

    error   - blocking failure of the initial load, replaces the screen body
    message - feedback banner for the last user action
    """

    def __init__(self, client: ApiClient):
        self.client = client
        self.loading = False
        self.error = ""
        self.message = ""

    def fail(self, exc: BaseException, fallback: str, attr: str = "message") -> str:
        text = describe_error(exc, fallback)
        _logger.warning(f"{type(self).__name__}: {text}")
        setattr(self, attr, text)
        return text
