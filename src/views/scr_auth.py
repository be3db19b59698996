from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    Button,
    ContentSwitcher,
    Input,
    Label,
    Select,
    TabbedContent,
    TabPane,
)

from api.models import Role
from flows.auth import AuthFlow, AuthStep
from utils.validators import password_checklist
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal

# how long "Signed in successfully!" stays up before the dashboard opens
NAVIGATION_DELAY = 1.0


class AuthScreen(BaseScreen):
    """
    Sign in, sign up, email verification and password recovery.
    Dismisses with the Role once a session is committed.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Sign in / Sign up", show_sidebar=False)
        self.flow = AuthFlow(self.client, self.app.state)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-auth"):
            yield Label("I am a")
            yield Select(
                [(r.value, r) for r in Role],
                value=Role.FARMER,
                allow_blank=False,
                id="select-role",
            )
            with ContentSwitcher(initial="step-auth", id="switch-step"):
                with TabbedContent(id="step-auth"):
                    with TabPane("Sign in", id="tab-login"):
                        with Vertical(id="div-login"):
                            yield Label("Email")
                            yield Input(placeholder="user@example.com", id="input-login-email")
                            yield Label("Password")
                            yield Input(placeholder="*********", password=True, id="input-login-pwd")
                            with Horizontal(id="div-login-btns"):
                                yield Button("Quit", id="btn-quit")
                                yield Button("Forgot password?", id="btn-forgot")
                                yield Button("Sign in", id="btn-login", variant="primary")
                    with TabPane("Sign up", id="tab-signup"):
                        with Vertical(id="div-reg"):
                            yield Label("Full Name")
                            yield Input(placeholder="Jane Doe", id="input-reg-name")
                            yield Label("Email")
                            yield Input(placeholder="user@example.com", id="input-reg-email")
                            yield Label("Password")
                            yield Input(placeholder="*********", password=True, id="input-reg-pwd")
                            yield Label("", id="label-pwd-checklist")
                            yield Label("Phone")
                            yield Input(placeholder="+923001234567", id="input-reg-phone")
                            yield Label("Address")
                            yield Input(placeholder="Village, District", id="input-reg-address")
                            yield Button("Register", id="btn-reg", variant="primary")
                with Vertical(id="step-otp"):
                    yield Label("Enter the 6-digit code sent to your email")
                    yield Input(placeholder="123456", max_length=6, id="input-otp")
                    with Horizontal(classes="div-step-btns"):
                        yield Button("Resend", id="btn-resend")
                        yield Button("Verify", id="btn-verify", variant="primary")
                with Vertical(id="step-forgot"):
                    yield Label("Email")
                    yield Input(placeholder="user@example.com", id="input-forgot-email")
                    with Horizontal(classes="div-step-btns"):
                        yield Button("Back", id="btn-back-forgot")
                        yield Button("Send code", id="btn-send-reset", variant="primary")
                with Vertical(id="step-reset"):
                    yield Label("Code")
                    yield Input(placeholder="123456", max_length=6, id="input-reset-otp")
                    yield Label("New password")
                    yield Input(password=True, id="input-reset-pwd")
                    with Horizontal(classes="div-step-btns"):
                        yield Button("Back", id="btn-back-reset")
                        yield Button("Reset password", id="btn-reset", variant="primary")
            yield Label("", id="label-feedback")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    # ---------- rendering ----------

    def render_state(self) -> None:
        f = self.flow
        self.query_one("#switch-step", ContentSwitcher).current = f"step-{f.step.value}"
        for field, error in f.field_errors.items():
            for input_id in _FIELD_INPUTS.get(field, ()):
                self.query_one(input_id, Input).set_class(bool(error), "-invalid")

        if f.error_message:
            details = [e for e in f.field_errors.values() if e]
            text = f.error_message + ("\n" + "\n".join(details) if details else "")
            self.show_feedback(text, error=True)
        else:
            self.show_feedback(f.success_message)

    def _read_form(self) -> None:
        form = self.flow.form
        if self.flow.is_signup:
            form.name = self.query_one("#input-reg-name", Input).value
            form.email = self.query_one("#input-reg-email", Input).value.strip()
            form.password = self.query_one("#input-reg-pwd", Input).value
            form.phone = self.query_one("#input-reg-phone", Input).value
            form.address = self.query_one("#input-reg-address", Input).value
        else:
            form.email = self.query_one("#input-login-email", Input).value.strip()
            form.password = self.query_one("#input-login-pwd", Input).value

    # ---------- events ----------

    @on(Select.Changed, "#select-role")
    def handle_role(self, event: Select.Changed) -> None:
        if isinstance(event.value, Role):
            self.flow.set_role(event.value)
            self.query_one("#input-login-pwd", Input).value = ""

    @on(TabbedContent.TabActivated, "#step-auth")
    def handle_tab(self, event: TabbedContent.TabActivated) -> None:
        is_signup = event.pane.id == "tab-signup"
        if is_signup != self.flow.is_signup:
            self.flow.set_signup(is_signup)
            self.show_feedback("")

    @on(Input.Changed, "#input-reg-pwd")
    def handle_pwd_changed(self, event: Input.Changed) -> None:
        labels = {"length": "8+", "lower": "a-z", "upper": "A-Z", "digit": "0-9", "special": "@$!"}
        marks = [
            f"{'✓' if ok else '·'} {labels[k]}" for k, ok in password_checklist(event.value).items()
        ]
        self.query_one("#label-pwd-checklist", Label).update("  ".join(marks))

    @on(Input.Submitted, "#input-login-pwd")
    @on(Button.Pressed, "#btn-login")
    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_submit(self) -> Optional[Role]:
        self._read_form()
        role = await self.flow.submit()
        self.render_state()
        if role is None:
            if self.flow.step == AuthStep.OTP:
                self.query_one("#input-otp").focus()
            elif not self.flow.is_signup:
                pwd = self.query_one("#input-login-pwd", Input)
                pwd.value = ""
                pwd.focus()
            return None
        self.set_timer(NAVIGATION_DELAY, lambda: self.dismiss(role))
        return role

    @on(Input.Submitted, "#input-otp")
    @on(Button.Pressed, "#btn-verify")
    @work(exclusive=True)
    async def handle_verify(self) -> None:
        self.flow.otp = self.query_one("#input-otp", Input).value
        if await self.flow.verify_otp():
            self._back_to_login()
        self.render_state()

    @on(Button.Pressed, "#btn-resend")
    @work(exclusive=True)
    async def handle_resend(self) -> None:
        await self.flow.resend_otp()
        self.render_state()

    @on(Button.Pressed, "#btn-forgot")
    def handle_forgot(self) -> None:
        self.flow.go_to(AuthStep.FORGOT)
        self.query_one("#input-forgot-email", Input).value = self.query_one(
            "#input-login-email", Input
        ).value
        self.render_state()

    @on(Button.Pressed, "#btn-back-forgot")
    @on(Button.Pressed, "#btn-back-reset")
    def handle_back(self) -> None:
        self.flow.go_to(AuthStep.AUTH)
        self.render_state()

    @on(Button.Pressed, "#btn-send-reset")
    @work(exclusive=True)
    async def handle_send_reset(self) -> None:
        self.flow.form.email = self.query_one("#input-forgot-email", Input).value.strip()
        await self.flow.forgot_password()
        self.render_state()

    @on(Button.Pressed, "#btn-reset")
    @work(exclusive=True)
    async def handle_reset(self) -> None:
        self.flow.otp = self.query_one("#input-reset-otp", Input).value
        self.flow.new_password = self.query_one("#input-reset-pwd", Input).value
        if await self.flow.reset_password():
            self._back_to_login()
        self.render_state()

    def _back_to_login(self) -> None:
        self.query_one("#step-auth", TabbedContent).active = "tab-login"
        self.query_one("#input-login-email", Input).value = self.flow.form.email
        for input_id in ("#input-login-pwd", "#input-otp", "#input-reset-otp", "#input-reset-pwd"):
            self.query_one(input_id, Input).value = ""
        self.query_one("#input-login-pwd").focus()

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())


_FIELD_INPUTS = {
    "email": ("#input-login-email", "#input-reg-email", "#input-forgot-email"),
    "password": ("#input-login-pwd", "#input-reg-pwd"),
    "name": ("#input-reg-name",),
    "phone": ("#input-reg-phone",),
    "address": ("#input-reg-address",),
    "otp": ("#input-otp", "#input-reset-otp"),
    "new_password": ("#input-reset-pwd",),
}
