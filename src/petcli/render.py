"""Rich-based rendering for the pet panel, chat pane, input box and status line."""

from collections.abc import Callable

from rich.console import Console, ConsoleOptions, RenderResult
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from petcli.art import pet_text
from petcli.history import Message, Role
from petcli.moods import Mood
from petcli.themes import Theme

CAT = "\U0001f431"  # 🐱
DOT_TRAIL = "·" * 20
HINT = "Enter send · ↑/↓ scroll · PgUp/PgDn page · /help commands · Esc quit"


def message_lines(message: Message, pet_name: str, mood: Mood, theme: Theme) -> list[Text]:
    """One styled Text per source line; pet and system messages get a trailing blank line."""
    lines: list[Text] = []
    if message.role is Role.USER:
        prefix, prefix_style, body_style = "You: ", theme.user_label, theme.user_text
    elif message.role is Role.PET:
        prefix, prefix_style, body_style = f"{pet_name}: ", f"bold {theme.mood_style(mood)}", theme.pet_text
    else:
        prefix, prefix_style, body_style = "", theme.system_text, theme.system_text

    indent = " " * len(prefix)
    for i, line in enumerate(message.text.split("\n")):
        lines.append(Text.assemble((prefix if i == 0 else indent, prefix_style), (line, body_style)))
    if message.role is not Role.USER:
        lines.append(Text(""))
    return lines


class ChatPane:
    """Renders the tail of the chat, `offset` wrapped lines up from the bottom.

    The offset is clamped so the oldest line can reach the top of the pane.
    `on_measure` receives that largest useful offset on every render.
    """

    def __init__(
        self,
        lines: list[Text],
        offset: int = 0,
        on_measure: Callable[[int], None] | None = None,
    ) -> None:
        self.lines = lines
        self.offset = offset
        self.on_measure = on_measure

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        wrapped: list[Text] = []
        for line in self.lines:
            wrapped.extend(line.wrap(console, width) if line.plain else [line])

        height = options.height or len(wrapped)
        max_offset = max(0, len(wrapped) - height)
        if self.on_measure is not None:
            self.on_measure(max_offset)
        end = len(wrapped) - min(self.offset, max_offset)
        start = max(0, end - height)
        for line in wrapped[start:end]:
            yield line


def thinking_frame(tick: int, pet_name: str) -> Text:
    """The cat eating its way along a trail of dots while a request is pending."""
    i = tick % (len(DOT_TRAIL) + 1)
    return Text(f"  {pet_name} is thinking  {' ' * i}{CAT}{DOT_TRAIL[i:]}", style="dim")


def build_screen(view, theme: Theme) -> Layout:
    """Build the full-screen layout from an app view (see PetApp)."""
    state = view.state
    mood_style = theme.mood_style(state.mood)
    art = pet_text(view.config.pet_ascii, state.mood, view.tick_count, mood_style)

    pet_panel = Panel(
        art,
        title=Text(f" {state.name} (Mood: {state.mood.label} · {state.happiness:.0%}) ", style=f"bold {mood_style}"),
        border_style=mood_style,
    )

    lines: list[Text] = []
    for message in view.transcript.all():
        lines.extend(message_lines(message, state.name, state.mood, theme))
    chat_title = " Chat History "
    if view.transcript.offset:
        chat_title += f"(↑{view.transcript.offset}) "
    chat_panel = Panel(
        ChatPane(lines, view.transcript.offset, view.transcript.set_scroll_limit),
        title=Text(chat_title, style="bold"),
        title_align="left",
        border_style=theme.chat_border,
    )

    input_panel = Panel(
        Text.assemble(("> ", theme.input_border), (view.input, theme.user_text), ("▏", "blink")),
        title=Text(" Input ", style=f"bold {theme.input_border}"),
        title_align="left",
        border_style=theme.input_border,
    )

    if view.pending is not None:
        status = thinking_frame(view.tick_count, state.name)
    else:
        status = Text(f"  {HINT}", style="dim")

    art_height = len(art.plain.split("\n"))
    layout = Layout()
    layout.split_column(
        Layout(pet_panel, name="pet", size=max(art_height + 2, 6)),
        Layout(chat_panel, name="chat"),
        Layout(input_panel, name="input", size=3),
        Layout(status, name="status", size=1),
    )
    return layout
