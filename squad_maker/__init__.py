"""Squad Maker - split a tiered roster into random or balanced teams."""

__version__ = "0.1.0"

from .assigner import (
    TeamAssigner,
    balance_score,
    generate_balanced_teams,
    generate_random_teams,
    team_average_score,
    team_score,
    tier_distribution,
)
from .config import Config
from .models import TIER_CONFIG, Participant, Team, Tier
from .validators import InvalidConfigError

__all__ = [
    "TeamAssigner",
    "Config",
    "Participant",
    "Team",
    "Tier",
    "TIER_CONFIG",
    "InvalidConfigError",
    "generate_random_teams",
    "generate_balanced_teams",
    "team_score",
    "team_average_score",
    "balance_score",
    "tier_distribution",
]
