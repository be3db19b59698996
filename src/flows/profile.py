from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import api.marketplace as api
from api.errors import ApiError
from api.models import UserProfile
from flows.base import Flow
from utils.state import GlobalState
from utils.validators import validate_name, validate_email


@dataclass
class PasswordForm:
    old_password: str = ""
    new_password: str = ""
    confirm_password: str = ""


class ProfileFlow(Flow):
    def __init__(self, client, state: GlobalState):
        super().__init__(client)
        self.state = state
        self.profile: Optional[UserProfile] = None
        self.passwords = PasswordForm()

    async def fetch_profile(self) -> None:
        self.loading = True
        self.error = ""
        try:
            self.profile = await api.get_me(self.client, self.state.role)
        except ApiError as e:
            self.fail(e, "Failed to load profile", "error")
        finally:
            self.loading = False

    async def save(self, name: str, email: str, phone: str, address: str) -> bool:
        self.message = ""
        invalid = validate_name(name) or validate_email(email)
        if invalid:
            self.message = invalid
            return False
        body = {"name": name.strip(), "email": email.strip(), "phone": phone.strip(), "address": address.strip()}
        try:
            await api.update_profile(self.client, self.state.role, body)
        except ApiError as e:
            self.fail(e, "Failed to update profile")
            return False
        self.message = "Profile updated"
        await self.fetch_profile()
        if self.profile:
            # keep the sidebar name in step with the server
            await self.state.login(self.state.role, self.profile)
        return True

    async def change_password(self) -> bool:
        p = self.passwords
        if not p.old_password or not p.new_password or not p.confirm_password:
            self.message = "Fill all password fields"
            return False
        if p.new_password != p.confirm_password:
            self.message = "Passwords do not match"
            return False
        try:
            await api.change_password(self.client, self.state.role, p.old_password, p.new_password)
        except ApiError as e:
            self.fail(e, "Failed to change password")
            return False
        self.passwords = PasswordForm()
        self.message = "Password changed"
        return True

    async def logout(self) -> bool:
        """Server logout, then local. The local session is cleared either way."""
        ok = True
        try:
            await api.logout(self.client, self.state.role)
        except ApiError as e:
            self.fail(e, "Logout failed")
            ok = False
        await self.state.logout()
        return ok

    async def delete_account(self) -> bool:
        try:
            await api.delete_account(self.client, self.state.role)
        except ApiError as e:
            self.fail(e, "Failed to delete account")
            return False
        await self.state.logout()
        return True
