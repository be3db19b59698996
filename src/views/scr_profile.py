from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Input, Label, Markdown, Rule

from flows.profile import ProfileFlow
from utils.messages import UserLogoutMessage
from utils.pure import generate_markdown_table
from views.base_screen import BaseScreen
from views.modal_dialog import confirm


class ProfileScreen(BaseScreen):
    """
    Account details, password change, logout and account deletion.
    """

    MODE = "profile"

    def __init__(self) -> None:
        super().__init__()
        self.flow = ProfileFlow(self.client, self.app.state)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll():
            yield Markdown("", id="md-profile")
            with Horizontal(id="hort-profile-form"):
                with Vertical():
                    yield Label("Full Name")
                    yield Input(id="input-name")
                    yield Label("Email")
                    yield Input(id="input-email")
                with Vertical():
                    yield Label("Phone")
                    yield Input(id="input-phone", placeholder="+923001234567")
                    yield Label("Address")
                    yield Input(id="input-address")
            yield Button("Save Profile", id="btn-save", variant="primary")
            yield Rule(line_style="dashed")
            yield Label("Change Password")
            with Horizontal(id="hort-password-form"):
                yield Input(id="input-old-password", placeholder="Current password", password=True)
                yield Input(id="input-new-password", placeholder="New password", password=True)
                yield Input(id="input-confirm-password", placeholder="Confirm password", password=True)
            yield Button("Change Password", id="btn-password")
            yield Rule(line_style="dashed")
            with Horizontal(id="hort-buttons"):
                yield Button("Logout", id="btn-profile-logout", variant="warning")
                yield Button("Delete Account", id="btn-delete-account", variant="error")
            yield Label("", id="label-feedback")

    def on_mount(self) -> None:
        self.load_profile()

    @work(exclusive=True)
    async def load_profile(self) -> None:
        await self.flow.fetch_profile()
        if self.flow.error:
            self.show_feedback(self.flow.error, error=True)
            return
        p = self.flow.profile
        rows = [
            ["Name", p.name or "-"],
            ["Email", p.email or "-"],
            ["Role", self.app.state.role.value],
        ]
        await self.query_one("#md-profile", Markdown).update(
            "### My Profile\n\n" + generate_markdown_table(None, rows, ["l", "l"])
        )
        self.query_one("#input-name", Input).value = p.name
        self.query_one("#input-email", Input).value = p.email
        self.query_one("#input-phone", Input).value = p.phone
        self.query_one("#input-address", Input).value = p.address

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True)
    async def handle_save(self) -> None:
        ok = await self.flow.save(
            self.query_one("#input-name", Input).value,
            self.query_one("#input-email", Input).value,
            self.query_one("#input-phone", Input).value,
            self.query_one("#input-address", Input).value,
        )
        self.show_feedback(self.flow.message, error=not ok)
        if ok:
            self.load_profile()

    @on(Button.Pressed, "#btn-password")
    @work(exclusive=True)
    async def handle_password(self) -> None:
        form = self.flow.passwords
        form.old_password = self.query_one("#input-old-password", Input).value
        form.new_password = self.query_one("#input-new-password", Input).value
        form.confirm_password = self.query_one("#input-confirm-password", Input).value
        ok = await self.flow.change_password()
        self.show_feedback(self.flow.message, error=not ok)
        if ok:
            for input_id in ("#input-old-password", "#input-new-password", "#input-confirm-password"):
                self.query_one(input_id, Input).value = ""

    @on(Button.Pressed, "#btn-profile-logout")
    @work()
    async def handle_logout(self) -> None:
        if await self.app.push_screen_wait(confirm("Are you sure you want to log out?")):
            self.post_message(UserLogoutMessage())

    @on(Button.Pressed, "#btn-delete-account")
    @work()
    async def handle_delete(self) -> None:
        if not await self.app.push_screen_wait(
            confirm(
                "Delete your account permanently? This cannot be undone.",
                tone="error",
            )
        ):
            return
        if await self.flow.delete_account():
            self.app.notify("Account deleted.")
            # session is already cleared, the app only restarts the login
            self.post_message(UserLogoutMessage())
        else:
            self.show_feedback(self.flow.message, error=True)
