from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from utils.i18n import t
from utils.messages import NavigateMessage, UserLogoutMessage
from utils.pure import generate_markdown_table
from views.modal_dialog import QuitDialogModal, confirm


class Sidebar(Container):
    def __init__(self, current_mode: str = ""):
        super().__init__()
        self.current_mode = current_mode

    def compose(self) -> ComposeResult:
        lang = self.app.state.language
        yield Label(t(lang, "user_info"), id="label-info-1")
        yield Markdown("", id="md-userinfo")
        with Container(id="div-sidebar-btns"):
            yield Button(t(lang, "language"), id="btn-language")
            yield Button(t(lang, "logout"), id="btn-logout", variant="error")
        yield Label(t(lang, "menu"), id="label-info-2")
        yield ListView(id="list-menu")

    async def on_mount(self):
        state = self.app.state
        if not state.is_authenticated:
            return

        rows = [
            ["Name", state.user.name if state.user and state.user.name else "-"],
            ["Role", state.role.value],
        ]
        await self.query_one(Markdown).update(generate_markdown_table(None, rows, ["l", "l"]))

        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [
                ListItem(Label(t(state.language, f"menu_{mode}")), id=f"list-menu-item-{mode}")
                for mode in self.app.ROLE_MODES[state.role]
            ]
        )
        for item in list_menu.children:
            item.highlighted = item.id == f"list-menu-item-{self.current_mode}"

    def on_list_view_selected(self, event: ListView.Selected):
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        if selected_mode != self.current_mode:
            self.post_message(NavigateMessage(selected_mode))

    @on(Button.Pressed, "#btn-language")
    def handle_language(self):
        self.app.action_toggle_language()

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        if await self.app.push_screen_wait(confirm("Are you sure you want to log out?")):
            self.post_message(UserLogoutMessage())


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    # menu entry this screen implements, "" for screens outside the menu
    MODE = ""

    def __init__(self):
        super().__init__()
        self.configure()

    def configure(self, header_sub_title: str = "", show_sidebar: bool = True) -> None:
        self.app.title = "FarmConnect"
        if self.MODE and self.app.state.is_authenticated:
            self.sub_title = t(self.app.state.language, f"menu_{self.MODE}")
        else:
            self.sub_title = header_sub_title
        self._show_sidebar = show_sidebar

    @property
    def client(self):
        return self.app.client

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar(self.MODE)
        yield Header()
        yield Footer(show_command_palette=False)

    def show_feedback(self, text: str, error: bool = False) -> None:
        """Single banner per screen, mirrored into a toast."""
        for banner in self.query("#label-feedback").results(Label):
            banner.update(text)
            banner.set_class(error, "-error")
        if text:
            self.notify(text, severity="error" if error else "information")

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
