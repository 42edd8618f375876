"""Core team assignment logic for Squad Maker."""

import random
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
import yaml

from .config import Config
from .models import TIER_CONFIG, TIER_ORDER, Participant, Team, Tier, TierInfo, make_empty_teams
from .validators import InvalidConfigError, validate_allocation_request

MODES = ("random", "balanced")


def _tier_score(participant: Participant, tier_config: Optional[Dict[Tier, TierInfo]]) -> int:
    return (tier_config or TIER_CONFIG)[participant.tier].score


def team_score(team: Team, tier_config: Optional[Dict[Tier, TierInfo]] = None) -> int:
    """Sum of the tier scores of a team's members. Empty teams score 0."""
    return sum(_tier_score(p, tier_config) for p in team.players)


def team_average_score(team: Team, tier_config: Optional[Dict[Tier, TierInfo]] = None) -> float:
    if not team.players:
        return 0.0
    return team_score(team, tier_config) / len(team.players)


def balance_score(teams: Sequence[Team], tier_config: Optional[Dict[Tier, TierInfo]] = None) -> int:
    """Spread between the strongest and weakest team; 0 is perfect balance."""
    if not teams:
        return 0
    scores = [team_score(team, tier_config) for team in teams]
    return max(scores) - min(scores)


def tier_distribution(participants: Sequence[Participant]) -> Dict[Tier, int]:
    """Count participants per tier, in tier order, including empty tiers."""
    counts = Counter(p.tier for p in participants)
    return {tier: counts.get(tier, 0) for tier in TIER_ORDER}


def snake_slot(idx: int, team_count: int) -> int:
    """Team index for draft pick ``idx``: 0..N-1, then N-1..0, and so on."""
    round_number = idx // team_count
    if round_number % 2 == 0:
        return idx % team_count
    return team_count - 1 - (idx % team_count)


def generate_random_teams(
    participants: Sequence[Participant],
    team_count: int,
    *,
    strict: bool = True,
    rng: Optional[random.Random] = None,
    names: Optional[List[str]] = None,
) -> List[Team]:
    """Split participants into teams uniformly at random.

    The roster is shuffled with Fisher-Yates and dealt round-robin, so team
    sizes differ by at most one.

    Args:
        participants: Roster snapshot; not modified
        team_count: Number of teams to create
        strict: Reject rosters smaller than ``team_count`` instead of
            leaving teams empty
        rng: Random source; a fresh one is created when omitted
        names: Optional custom team names

    Returns:
        ``team_count`` teams partitioning the roster

    Raises:
        InvalidConfigError: If the request is invalid
    """
    validate_allocation_request(participants, team_count, strict=strict)
    rng = rng or random.Random()

    shuffled = list(participants)
    rng.shuffle(shuffled)

    teams = make_empty_teams(team_count, names)
    for idx, participant in enumerate(shuffled):
        teams[idx % team_count].players.append(participant)

    return teams


def generate_balanced_teams(
    participants: Sequence[Participant],
    team_count: int,
    *,
    strict: bool = True,
    rng: Optional[random.Random] = None,
    names: Optional[List[str]] = None,
    tier_config: Optional[Dict[Tier, TierInfo]] = None,
) -> List[Team]:
    """Split participants into teams with similar total tier scores.

    This is a greedy heuristic, not an optimizer:

    1. Participants are sorted by descending tier score. Ties are broken
       randomly so roster insertion order never biases the draft.
    2. The first ``team_count`` picks seed one player per team following
       the snake draft order.
    3. Every later pick goes to a team holding the current minimum score
       that still has room, chosen uniformly at random. When no minimum
       team has room, the snake slot is used, or failing that the weakest
       team with room.

    A team has room while it is below ``n // team_count`` players, or at
    exactly that size while fewer than ``n % team_count`` teams have reached
    ``n // team_count + 1``. This keeps every team size within one of the
    others.

    Args:
        participants: Roster snapshot; not modified
        team_count: Number of teams to create
        strict: Reject rosters smaller than ``team_count`` instead of
            leaving teams empty
        rng: Random source; a fresh one is created when omitted
        names: Optional custom team names
        tier_config: Optional tier table overriding the default scores

    Returns:
        ``team_count`` teams partitioning the roster

    Raises:
        InvalidConfigError: If the request is invalid
    """
    validate_allocation_request(participants, team_count, strict=strict)
    rng = rng or random.Random()

    # Shuffle then stable-sort: equal scores end up in random order
    ordered = list(participants)
    rng.shuffle(ordered)
    ordered.sort(key=lambda p: _tier_score(p, tier_config), reverse=True)

    teams = make_empty_teams(team_count, names)
    team_scores = [0] * team_count
    base_size, num_large = divmod(len(ordered), team_count)

    def has_room(team_idx: int) -> bool:
        size = len(teams[team_idx].players)
        if size < base_size:
            return True
        if size == base_size and num_large > 0:
            full_large = sum(1 for team in teams if len(team.players) == base_size + 1)
            return full_large < num_large
        return False

    for idx, participant in enumerate(ordered):
        team_idx = snake_slot(idx, team_count)

        if idx >= team_count:
            min_score = min(team_scores)
            candidates = [
                i for i in range(team_count)
                if team_scores[i] == min_score and has_room(i)
            ]
            if candidates:
                team_idx = rng.choice(candidates)
            elif not has_room(team_idx):
                open_teams = [i for i in range(team_count) if has_room(i)]
                lowest = min(team_scores[i] for i in open_teams)
                team_idx = rng.choice([i for i in open_teams if team_scores[i] == lowest])

        teams[team_idx].players.append(participant)
        team_scores[team_idx] += _tier_score(participant, tier_config)

    return teams


class TeamAssigner:
    """Entry point that applies a Config to the allocators."""

    def __init__(self, config: Config):
        """Initialize the team assigner.

        Args:
            config: Configuration object with team settings
        """
        self.config = config

    def _rng(self) -> random.Random:
        return random.Random(self.config.seed) if self.config.seed is not None else random.Random()

    def assign(self, participants: Sequence[Participant], mode: Optional[str] = None) -> List[Team]:
        """Generate teams for a roster snapshot.

        Args:
            participants: Roster snapshot to split
            mode: ``"random"`` or ``"balanced"``; defaults to the configured mode

        Returns:
            The generated teams

        Raises:
            InvalidConfigError: If the mode or the request is invalid
        """
        mode = mode or self.config.mode
        if mode == "random":
            return generate_random_teams(
                participants,
                self.config.team_count,
                strict=self.config.strict,
                rng=self._rng(),
                names=self.config.team_names,
            )
        if mode == "balanced":
            return generate_balanced_teams(
                participants,
                self.config.team_count,
                strict=self.config.strict,
                rng=self._rng(),
                names=self.config.team_names,
                tier_config=self.config.tier_config,
            )
        raise InvalidConfigError(f"Unknown mode '{mode}' (expected one of {', '.join(MODES)})")

    def get_assignment_summary(self, teams: Sequence[Team]) -> Dict[str, Any]:
        """Get a summary of the assignment results.

        Args:
            teams: Generated teams

        Returns:
            Dictionary with assignment statistics
        """
        tier_config = self.config.tier_config
        if not teams:
            return {
                'total_people': 0,
                'team_sizes': {},
                'team_scores': {},
                'team_averages': {},
                'balance_score': 0,
            }

        return {
            'total_people': sum(len(team.players) for team in teams),
            'team_sizes': {team.name: len(team.players) for team in teams},
            'team_scores': {team.name: team_score(team, tier_config) for team in teams},
            'team_averages': {
                team.name: round(team_average_score(team, tier_config), 2) for team in teams
            },
            'balance_score': balance_score(teams, tier_config),
        }

    def format_teams_text(self, teams: Sequence[Team]) -> str:
        """Render teams as plain text suitable for pasting into a chat."""
        blocks = []
        for team in teams:
            lines = [f"【{team.name}】"]
            lines.extend(f"  {p.name} ({p.tier.value})" for p in team.players)
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)

    def save_assignments_csv(self, teams: Sequence[Team], output_path: Path) -> None:
        """Save assignments to CSV, one row per participant.

        Args:
            teams: Generated teams
            output_path: Path where to save the assignments CSV
        """
        rows = []
        for team in teams:
            for participant in team.players:
                rows.append({
                    'team': team.name,
                    'name': participant.name,
                    'tier': participant.tier.value,
                    'score': (self.config.tier_config or TIER_CONFIG)[participant.tier].score,
                    'id': participant.id,
                })

        assignment_df = pd.DataFrame(rows, columns=['team', 'name', 'tier', 'score', 'id'])
        assignment_df.to_csv(output_path, index=False)

    def save_assignments_yaml(self, teams: Sequence[Team], output_path: Path) -> None:
        """Save assignments to YAML with teams keyed by name.

        Args:
            teams: Generated teams
            output_path: Path where to save the assignments YAML
        """
        tier_config = self.config.tier_config
        yaml_data = {
            'teams': [
                {
                    'id': team.id,
                    'name': team.name,
                    'color': team.color,
                    'score': team_score(team, tier_config),
                    'players': [
                        {'name': p.name, 'tier': p.tier.value} for p in team.players
                    ],
                }
                for team in teams
            ],
            'balance_score': balance_score(teams, tier_config),
        }

        with open(output_path, 'w', encoding='utf-8') as f:
            yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
