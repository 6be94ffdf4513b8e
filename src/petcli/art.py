"""Pet ASCII art — mood-dependent eyes, blinking, and greeting lines."""

import random

from rich.text import Text

from petcli.moods import Mood

# Eyes drawn in place of the "o o" in the configured art
EYES: dict[Mood, str] = {
    Mood.HAPPY: "^ ^",
    Mood.NEUTRAL: "o o",
    Mood.SAD: "u u",
}
BLINK_EYES = "- -"
ART_EYES = "o o"

BLINK_EVERY = 40  # ticks between blinks
BLINK_LENGTH = 2  # ticks the eyes stay shut

GREETINGS: dict[Mood, list[str]] = {
    Mood.HAPPY: [
        "Welcome back! Type your message and press Enter to chat.",
        "*purrs contentedly* Missed you! What are we working on?",
        "*stretches* Ready when you are.",
    ],
    Mood.NEUTRAL: [
        "Welcome back! Type your message and press Enter to chat.",
        "*looks at you curiously* Meow?",
    ],
    Mood.SAD: [
        "*seems a bit distant* ... oh, it's you. Hi.",
        "*yawn* ...ok I'm up. Haven't seen you in a while.",
    ],
}


def pet_frame(art: str, mood: Mood, tick: int = 0) -> str:
    """Return the art for this tick: mood eyes, or shut eyes while blinking."""
    blinking = tick % BLINK_EVERY >= BLINK_EVERY - BLINK_LENGTH
    eyes = BLINK_EYES if blinking else EYES[mood]
    return art.replace(ART_EYES, eyes, 1)


def pet_text(art: str, mood: Mood, tick: int, style: str) -> Text:
    """Build the styled art for the pet panel."""
    return Text(pet_frame(art, mood, tick).strip("\n"), style=style)


def greeting(mood: Mood) -> str:
    """Pick a random greeting suited to the pet's mood."""
    return random.choice(GREETINGS[mood])
