"""Color theme system — built-in themes for terminal customization."""

from dataclasses import dataclass

from petcli.moods import Mood


@dataclass(frozen=True)
class Theme:
    """Semantic color roles for PetCLI's UI."""

    name: str
    happy: str  # pet panel + pet name when happy
    neutral: str
    sad: str
    user_label: str  # "You:" prefix
    user_text: str
    pet_text: str
    system_text: str  # command output and notices
    chat_border: str
    input_border: str
    error: str
    warning: str

    def mood_style(self, mood: Mood) -> str:
        """Return the style for the given mood."""
        return {Mood.HAPPY: self.happy, Mood.NEUTRAL: self.neutral, Mood.SAD: self.sad}[mood]


THEMES: dict[str, Theme] = {
    "default": Theme(
        name="default",
        happy="bright_green",
        neutral="yellow",
        sad="bright_red",
        user_label="bold cyan",
        user_text="white",
        pet_text="grey70",
        system_text="dim italic",
        chat_border="grey42",
        input_border="blue",
        error="bold red",
        warning="yellow",
    ),
    "light": Theme(
        name="light",
        happy="rgb(0,130,60)",
        neutral="rgb(180,120,0)",
        sad="rgb(190,30,30)",
        user_label="bold rgb(0,100,150)",
        user_text="black",
        pet_text="rgb(60,60,60)",
        system_text="dim italic",
        chat_border="rgb(150,150,150)",
        input_border="blue",
        error="bold red",
        warning="rgb(180,120,0)",
    ),
    "solarized": Theme(
        name="solarized",
        happy="rgb(133,153,0)",  # solarized green
        neutral="rgb(181,137,0)",  # solarized yellow
        sad="rgb(220,50,47)",  # solarized red
        user_label="bold rgb(42,161,152)",  # solarized cyan
        user_text="rgb(253,246,227)",  # solarized base3
        pet_text="rgb(147,161,161)",  # solarized base1
        system_text="italic rgb(88,110,117)",  # solarized base01
        chat_border="rgb(88,110,117)",
        input_border="rgb(38,139,210)",  # solarized blue
        error="bold rgb(220,50,47)",
        warning="rgb(203,75,22)",  # solarized orange
    ),
    "dracula": Theme(
        name="dracula",
        happy="rgb(80,250,123)",  # dracula green
        neutral="rgb(241,250,140)",  # dracula yellow
        sad="rgb(255,85,85)",  # dracula red
        user_label="bold rgb(139,233,253)",  # dracula cyan
        user_text="rgb(248,248,242)",  # dracula foreground
        pet_text="rgb(189,147,249)",  # dracula purple
        system_text="italic rgb(98,114,164)",  # dracula comment
        chat_border="rgb(98,114,164)",
        input_border="rgb(255,121,198)",  # dracula pink
        error="bold rgb(255,85,85)",
        warning="rgb(255,184,108)",  # dracula orange
    ),
    "catppuccin": Theme(
        name="catppuccin",
        happy="rgb(166,227,161)",  # catppuccin green
        neutral="rgb(249,226,175)",  # catppuccin yellow
        sad="rgb(243,139,168)",  # catppuccin red
        user_label="bold rgb(137,220,235)",  # catppuccin sky
        user_text="rgb(205,214,244)",  # catppuccin text
        pet_text="rgb(186,194,222)",  # catppuccin subtext1
        system_text="italic rgb(127,132,156)",  # catppuccin overlay1
        chat_border="rgb(88,91,112)",  # catppuccin surface2
        input_border="rgb(203,166,247)",  # catppuccin mauve
        error="bold rgb(243,139,168)",
        warning="rgb(250,179,135)",  # catppuccin peach
    ),
}

THEME_NAMES = sorted(THEMES.keys())


def get_theme(name: str) -> Theme:
    """Look up a theme by name, falling back to the default."""
    return THEMES.get(name, THEMES["default"])
