"""Domain types for Squad Maker: tiers, participants and teams."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional


MAX_NAME_LENGTH = 20
MAX_TEAM_COUNT = 8


def validate_participant_name(name: str) -> str:
    """Validate and trim a participant name.

    Args:
        name: Raw name as typed by the user

    Returns:
        The trimmed name

    Raises:
        ValueError: If the name is empty, whitespace-only or too long
    """
    if name is None or not str(name).strip():
        raise ValueError("Participant name cannot be empty or whitespace-only")

    trimmed = str(name).strip()
    if len(trimmed) > MAX_NAME_LENGTH:
        raise ValueError(
            f"Participant name too long (max {MAX_NAME_LENGTH} chars): '{trimmed}'"
        )
    return trimmed


# Cycled when more teams than colours are requested
TEAM_COLORS = [
    "#ff4757",  # red
    "#00d4ff",  # blue
    "#00ff88",  # green
    "#ffd700",  # yellow
    "#ff6b35",  # orange
    "#c678dd",  # purple
    "#e06c75",  # pink
    "#56b6c2",  # cyan
]


class Tier(str, Enum):
    """Skill tiers, declared from highest to lowest."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @classmethod
    def parse(cls, value) -> "Tier":
        """Parse a tier from a case-insensitive string.

        Raises:
            ValueError: If the value is not one of S, A, B, C, D
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        try:
            return cls(text)
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown tier '{value}' (expected one of {valid})")


TIER_ORDER = list(Tier)


@dataclass(frozen=True)
class TierInfo:
    score: int
    label: str
    description: str


TIER_CONFIG: Dict[Tier, TierInfo] = {
    Tier.S: TierInfo(score=5, label="S", description="Top"),
    Tier.A: TierInfo(score=4, label="A", description="High"),
    Tier.B: TierInfo(score=3, label="B", description="Upper-mid"),
    Tier.C: TierInfo(score=2, label="C", description="Mid"),
    Tier.D: TierInfo(score=1, label="D", description="Beginner"),
}


@dataclass(frozen=True)
class Participant:
    """A single roster entry. Identity is ``id``."""

    id: str
    name: str
    tier: Tier
    created_at: datetime

    @classmethod
    def create(cls, name: str, tier) -> "Participant":
        """Create a new participant with a fresh id and creation time.

        The name is trimmed and must be 1-20 characters long.

        Args:
            name: Display name
            tier: Tier or tier letter

        Returns:
            The new participant

        Raises:
            ValueError: If the name or tier is invalid
        """
        return cls(
            id=str(uuid.uuid4()),
            name=validate_participant_name(name),
            tier=Tier.parse(tier),
            created_at=datetime.now(timezone.utc),
        )

    def with_tier(self, tier) -> "Participant":
        """Return a copy with a different tier."""
        return replace(self, tier=Tier.parse(tier))

    def with_name(self, name: str) -> "Participant":
        """Return a copy with a new, validated name."""
        return replace(self, name=validate_participant_name(name))


@dataclass
class Team:
    """A generated team. Only allocators create these."""

    id: str
    name: str
    color: str
    players: List[Participant] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.players)


def make_empty_teams(team_count: int, names: Optional[List[str]] = None) -> List[Team]:
    """Build ``team_count`` empty teams with ids, names and palette colours.

    Custom names are used in order; teams beyond the supplied names fall
    back to ``Team <n>``.
    """
    names = names or []
    teams = []
    for i in range(team_count):
        name = names[i] if i < len(names) else f"Team {i + 1}"
        teams.append(Team(
            id=f"team-{i + 1}",
            name=name,
            color=TEAM_COLORS[i % len(TEAM_COLORS)],
        ))
    return teams
