"""Validation utilities for Squad Maker."""

from pathlib import Path
from typing import Dict, Sequence

import pandas as pd

from .models import (
    MAX_TEAM_COUNT,
    TIER_ORDER,
    Participant,
    Tier,
    TierInfo,
    validate_participant_name,
)


class InvalidConfigError(ValueError):
    """Raised when a team generation request cannot be honoured."""


def validate_unique_ids(participants: Sequence[Participant]) -> None:
    """Ensure no participant id appears twice.

    Raises:
        InvalidConfigError: If a duplicate id is found
    """
    seen = set()
    for participant in participants:
        if participant.id in seen:
            raise InvalidConfigError(f"Duplicate participant id: {participant.id}")
        seen.add(participant.id)


def validate_allocation_request(
    participants: Sequence[Participant],
    team_count: int,
    strict: bool = True,
) -> None:
    """Validate a team generation request before any work is done.

    Strict mode requires at least 2 participants and
    ``2 <= team_count <= min(8, len(participants))``. Lenient mode keeps the
    bounds on ``team_count`` but accepts empty rosters and more teams than
    participants; the surplus teams stay empty.

    Args:
        participants: Roster snapshot to split
        team_count: Number of teams requested
        strict: Whether to apply the strict roster checks

    Raises:
        InvalidConfigError: If the request is not valid in the chosen mode
    """
    if isinstance(team_count, bool) or not isinstance(team_count, int):
        raise InvalidConfigError(f"Team count must be an integer, got {team_count!r}")

    if team_count < 2:
        raise InvalidConfigError(f"Cannot create teams: team count {team_count} < 2")

    if team_count > MAX_TEAM_COUNT:
        raise InvalidConfigError(
            f"Cannot create teams: team count {team_count} > maximum {MAX_TEAM_COUNT}"
        )

    if strict:
        if not participants:
            raise InvalidConfigError("No participants to assign")
        if len(participants) < 2:
            raise InvalidConfigError(
                f"At least 2 participants are required, got {len(participants)}"
            )
        if team_count > len(participants):
            raise InvalidConfigError(
                f"Insufficient participants for {team_count} teams: "
                f"{len(participants)} participants"
            )

    validate_unique_ids(participants)


def validate_tier_config(tier_config: Dict[Tier, TierInfo]) -> None:
    """Validate a tier table.

    Every tier must be present with a positive integer score, and scores
    must strictly decrease from S to D.

    Raises:
        ValueError: If the table is incomplete or not strictly monotonic
    """
    missing = [tier.value for tier in TIER_ORDER if tier not in tier_config]
    if missing:
        raise ValueError(f"Tier table is missing tiers: {missing}")

    previous = None
    for tier in TIER_ORDER:
        score = tier_config[tier].score
        if isinstance(score, bool) or not isinstance(score, int) or score <= 0:
            raise ValueError(f"Tier {tier.value} score must be a positive integer, got {score!r}")
        if previous is not None and score >= previous[1]:
            raise ValueError(
                f"Tier scores must strictly decrease from S to D: "
                f"{previous[0].value}={previous[1]}, {tier.value}={score}"
            )
        previous = (tier, score)


def validate_roster_csv(csv_path: Path) -> pd.DataFrame:
    """Validate a roster CSV file and return its contents.

    The file must have ``name`` and ``tier`` columns, at least one row, no
    missing values, valid names and known tiers.

    Args:
        csv_path: Path to the CSV file to validate

    Returns:
        DataFrame with trimmed names and upper-case tier letters

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
        ValueError: If the CSV structure or content is invalid
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"Roster file not found: {csv_path}")

    try:
        # Names such as "NA" or "None" are kept as text
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, na_filter=False)
    except pd.errors.EmptyDataError:
        raise ValueError("Roster CSV file is empty")
    except Exception as e:
        raise ValueError(f"Failed to read CSV file: {e}")

    df.columns = [str(column).strip().lower() for column in df.columns]
    missing_columns = {"name", "tier"} - set(df.columns)
    if missing_columns:
        raise ValueError(f"Roster CSV is missing columns: {sorted(missing_columns)}")

    if df.shape[0] == 0:
        raise ValueError("Roster CSV must contain at least 1 participant row")

    for column in ("name", "tier"):
        if (df[column].str.strip() == "").any():
            raise ValueError(f"Column '{column}' contains missing values")

    names = []
    tiers = []
    for row_number, (name, tier) in enumerate(zip(df["name"], df["tier"]), start=2):
        try:
            names.append(validate_participant_name(name))
            tiers.append(Tier.parse(tier).value)
        except ValueError as e:
            raise ValueError(f"Row {row_number}: {e}")

    return pd.DataFrame({"name": names, "tier": tiers})
