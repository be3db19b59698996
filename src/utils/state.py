from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

import aiosqlite

from api.models import Role, Session, UserProfile
from db import storage
from utils import config
from utils.logger import get_logger

_logger = get_logger(__name__)

Language = Literal["en", "ur"]


@dataclass
class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - session: who is signed in, with which role and display profile
      - language: "en" | "ur", used by dashboards and the sidebar

    Both are persisted to the local key-value store; writes are
    last-write-wins and a failed write leaves the in-memory value changed.
    """

    session: Session = field(default_factory=Session)
    language: Language = "en"

    @property
    def role(self) -> Optional[Role]:
        return self.session.role

    @property
    def user(self) -> Optional[UserProfile]:
        return self.session.user

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    async def restore(self) -> None:
        """Load the persisted session and language, if any."""
        try:
            self.session = Session.from_json(await storage.get_json(config.AUTH_STORAGE_KEY))
            lang = await storage.get_item(config.LANGUAGE_STORAGE_KEY)
        except (aiosqlite.Error, OSError) as e:
            _logger.warning(f"Could not read persisted state: {e!r}")
            return
        if lang in ("en", "ur"):
            self.language = lang

    async def login(self, role: Role, user: Optional[UserProfile]) -> None:
        self.session = Session(is_authenticated=True, role=role, user=user)
        try:
            await storage.set_json(config.AUTH_STORAGE_KEY, self.session.to_json())
        except (aiosqlite.Error, OSError) as e:
            _logger.warning(f"Could not persist session: {e!r}")

    async def logout(self) -> None:
        self.session = Session()
        try:
            await storage.remove_item(config.AUTH_STORAGE_KEY)
        except (aiosqlite.Error, OSError) as e:
            _logger.warning(f"Could not remove persisted session: {e!r}")

    async def toggle_language(self) -> Language:
        self.language = "ur" if self.language == "en" else "en"
        try:
            await storage.set_item(config.LANGUAGE_STORAGE_KEY, self.language)
        except (aiosqlite.Error, OSError) as e:
            _logger.warning(f"Could not persist language: {e!r}")
        return self.language
