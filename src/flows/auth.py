"""
Sign in / sign up state machine.

    auth --signup(requiresOTP)--> otp --verify--> auth
    auth --forgot--> forgot --send--> reset --reset--> auth

Every transition happens only after a successful response; a failed call
leaves the step as it was and puts the message in `error_message`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

import api.marketplace as api
from api.client import ApiClient
from api.errors import ApiError, describe_error
from api.models import Role
from utils import validators
from utils.logger import get_logger
from utils.state import GlobalState

_logger = get_logger(__name__)


class AuthStep(str, Enum):
    AUTH = "auth"
    OTP = "otp"
    FORGOT = "forgot"
    RESET = "reset"


@dataclass
class AuthForm:
    email: str = ""
    password: str = ""
    name: str = ""
    phone: str = ""
    address: str = ""


class AuthFlow:
    def __init__(self, client: ApiClient, state: GlobalState):
        self.client = client
        self.state = state

        self.role: Role = Role.FARMER
        self.is_signup = False
        self.step = AuthStep.AUTH
        self.form = AuthForm()
        self.otp = ""
        self.new_password = ""

        self.loading = False
        self.error_message = ""
        self.success_message = ""
        self.field_errors: Dict[str, str] = {}

    # ---------- state helpers ----------

    def clear_feedback(self) -> None:
        self.error_message = ""
        self.success_message = ""
        self.field_errors = {}

    def set_role(self, role: Role) -> None:
        self.role = role
        self.form.password = ""

    def set_signup(self, is_signup: bool) -> None:
        self.is_signup = is_signup
        self.step = AuthStep.AUTH
        self.clear_feedback()

    def go_to(self, step: AuthStep) -> None:
        self.step = step
        self.clear_feedback()

    def _back_to_sign_in(self) -> None:
        self.step = AuthStep.AUTH
        self.is_signup = False
        self.form = replace(self.form, password="")
        self.otp = ""
        self.new_password = ""

    def _check(self, field: str, error: str) -> bool:
        self.field_errors[field] = error
        return not error

    def validate_current_step(self) -> bool:
        """Validate the fields the current step submits. No network access."""
        self.clear_feedback()
        f = self.form

        if self.step == AuthStep.FORGOT:
            ok = self._check("email", validators.validate_email(f.email))
        elif self.step == AuthStep.RESET:
            ok = self._check("otp", validators.validate_otp(self.otp)) and self._check(
                "new_password", validators.validate_new_password(self.new_password)
            )
        elif self.step == AuthStep.OTP:
            ok = self._check("otp", validators.validate_otp(self.otp))
        else:
            ok = self._check("email", validators.validate_email(f.email)) and self._check(
                "password", validators.validate_password(f.password, self.is_signup)
            )
            if self.is_signup and ok:
                checks = [
                    self._check("name", validators.validate_name(f.name)),
                    self._check("phone", validators.validate_phone(f.phone)),
                    self._check("address", validators.validate_address(f.address)),
                ]
                ok = all(checks)

        if not ok:
            self.error_message = "Please correct the errors in the form."
        return ok

    # ---------- operations ----------

    async def submit(self) -> Optional[Role]:
        """Sign up or sign in depending on mode.

        Returns the role when a session was committed, None otherwise.
        """
        if not self.validate_current_step():
            return None

        self.loading = True
        f = self.form
        try:
            if self.is_signup:
                body = await api.signup(
                    self.client, self.role, f.name, f.email, f.password, f.phone, f.address
                )
                if body.get("requiresOTP"):
                    self.step = AuthStep.OTP
                    self.success_message = "Registered successfully! Please verify your email."
                else:
                    self._back_to_sign_in()
                    self.success_message = "Registered successfully! Please sign in."
                return None

            await api.login(self.client, self.role, f.email, f.password)
            profile = await api.get_me(self.client, self.role)
            await self.state.login(self.role, profile)
            self.success_message = "Signed in successfully!"
            _logger.info(f"Signed in as {self.role.value}")
            return self.role
        except ApiError as e:
            self.error_message = describe_error(e, "Authentication failed")
            return None
        finally:
            self.loading = False

    async def verify_otp(self) -> bool:
        if not self.validate_current_step():
            return False
        self.loading = True
        try:
            await api.verify_otp(self.client, self.role, self.form.email, self.otp.strip())
        except ApiError as e:
            self.error_message = describe_error(e, "OTP verification failed")
            return False
        finally:
            self.loading = False
        self.success_message = "Email verified! Please log in."
        self._back_to_sign_in()
        return True

    async def resend_otp(self) -> bool:
        error = validators.validate_email(self.form.email)
        if error:
            self.field_errors["email"] = error
            self.error_message = error
            return False
        self.clear_feedback()
        self.loading = True
        try:
            await api.resend_otp(self.client, self.role, self.form.email)
        except ApiError as e:
            self.error_message = describe_error(e, "Failed to resend OTP")
            return False
        finally:
            self.loading = False
        self.success_message = "OTP resent to your email."
        return True

    async def forgot_password(self) -> bool:
        if not self.validate_current_step():
            return False
        self.loading = True
        try:
            await api.forgot_password(self.client, self.role, self.form.email)
        except ApiError as e:
            self.error_message = describe_error(e, "Failed to send reset instructions")
            return False
        finally:
            self.loading = False
        self.step = AuthStep.RESET
        self.success_message = "Reset instructions sent! Check your email."
        return True

    async def reset_password(self) -> bool:
        if not self.validate_current_step():
            return False
        self.loading = True
        try:
            await api.reset_password(
                self.client, self.role, self.form.email, self.otp.strip(), self.new_password
            )
        except ApiError as e:
            self.error_message = describe_error(e, "Failed to reset password")
            return False
        finally:
            self.loading = False
        self.success_message = "Password reset successfully! Please sign in."
        self._back_to_sign_in()
        return True
