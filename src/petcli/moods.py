"""Mood engine — pure functions that derive the pet's mood from its interaction history."""

import enum
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

IDLE_THRESHOLD = timedelta(hours=1)  # happiness starts decaying after this much silence
SAD_THRESHOLD = timedelta(hours=6)  # past this the pet is sad no matter what
DECAY_PER_HOUR = 0.1

MIN_HAPPINESS = 0.1
MAX_HAPPINESS = 1.0
NEUTRAL_AT = 0.4
HAPPY_AT = 0.8
EPSILON = 1e-9  # float sums like 0.1 * 7 land just under a threshold


class Mood(enum.Enum):
    SAD = "sad"
    NEUTRAL = "neutral"
    HAPPY = "happy"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    def step_up(self) -> "Mood":
        """Return the next mood toward HAPPY (HAPPY stays HAPPY)."""
        return _ORDER[min(self.rank + 1, len(_ORDER) - 1)]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_ORDER = (Mood.SAD, Mood.NEUTRAL, Mood.HAPPY)

# Lowest happiness value at which each mood is reached
MOOD_FLOORS: dict[Mood, float] = {
    Mood.SAD: MIN_HAPPINESS,
    Mood.NEUTRAL: NEUTRAL_AT,
    Mood.HAPPY: HAPPY_AT,
}


class EventKind(enum.Enum):
    CHAT = "chat"
    SHELL = "shell"
    TREAT = "treat"
    PLAY = "play"
    IDLE = "idle"


BOOSTS: dict[EventKind, float] = {
    EventKind.CHAT: 0.1,
    EventKind.SHELL: 0.1,
    EventKind.TREAT: 0.2,
    EventKind.PLAY: 0.15,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PetState:
    """Snapshot of the pet. Every mood update returns a new one."""

    name: str = "Whiskers"
    mood: Mood = Mood.HAPPY
    happiness: float = 0.8
    last_interaction: datetime = datetime.fromtimestamp(0, timezone.utc)
    last_update: datetime = datetime.fromtimestamp(0, timezone.utc)
    interaction_count: int = 0

    @classmethod
    def fresh(cls, name: str, now: datetime | None = None) -> "PetState":
        """A brand-new pet that was just interacted with."""
        now = now or utcnow()
        return cls(name=name, last_interaction=now, last_update=now)


def clamp(value: float, lo: float = MIN_HAPPINESS, hi: float = MAX_HAPPINESS) -> float:
    return lo if value < lo else hi if value > hi else value


def mood_for(happiness: float, idle: timedelta) -> Mood:
    """Map a happiness value and idle duration to a mood."""
    if idle > SAD_THRESHOLD:
        return Mood.SAD
    if happiness >= HAPPY_AT - EPSILON:
        return Mood.HAPPY
    if happiness >= NEUTRAL_AT - EPSILON:
        return Mood.NEUTRAL
    return Mood.SAD


def decayed_happiness(state: PetState, now: datetime) -> float:
    """Apply idle decay accumulated since the last update.

    Decay only counts time past IDLE_THRESHOLD and is measured from
    last_update, so calling this every tick gives the same result as calling
    it once.
    """
    decay_start = max(state.last_update, state.last_interaction + IDLE_THRESHOLD)
    if now <= decay_start:
        return state.happiness
    hours = (now - decay_start).total_seconds() / 3600.0
    return clamp(state.happiness - hours * DECAY_PER_HOUR)


def update_mood(state: PetState, event: EventKind, now: datetime) -> PetState:
    """Return the pet state after `event` happened at `now`."""
    happiness = decayed_happiness(state, now)

    if event is EventKind.IDLE:
        idle = max(now - state.last_interaction, timedelta(0))
        return replace(
            state,
            happiness=happiness,
            mood=mood_for(happiness, idle),
            last_update=max(now, state.last_update),
        )

    happiness = clamp(happiness + BOOSTS[event])
    if event in (EventKind.TREAT, EventKind.PLAY):
        target = state.mood.step_up()
        happiness = max(happiness, MOOD_FLOORS[target])

    return replace(
        state,
        happiness=happiness,
        mood=mood_for(happiness, timedelta(0)),
        last_interaction=now,
        last_update=now,
        interaction_count=state.interaction_count + 1,
    )


def classify_event(text: str) -> EventKind:
    """Pick the event kind for a chat line (treats and play make the pet extra happy)."""
    lowered = text.lower()
    if "treat" in lowered:
        return EventKind.TREAT
    if "play" in lowered:
        return EventKind.PLAY
    return EventKind.CHAT
