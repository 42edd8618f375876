"""Configuration management for Squad Maker."""

from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .models import MAX_TEAM_COUNT, TIER_CONFIG, TIER_ORDER, Tier, TierInfo
from .validators import validate_tier_config


class Config:
    """Configuration class for team generation settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        self.team_count: int = 2
        self.mode: str = "balanced"
        self.strict: bool = True
        self.team_names: List[str] = []
        self.tier_config: Dict[Tier, TierInfo] = dict(TIER_CONFIG)
        self.seed: Optional[int] = None

    def load_from_file(self, config_path: Path) -> None:
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML file is invalid
            ValueError: If the configuration structure is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a YAML dictionary")

        teams_config = config_data.get('teams', {}) or {}
        if not isinstance(teams_config, dict):
            raise ValueError("teams must be a mapping")

        if 'count' in teams_config:
            count = teams_config['count']
            if isinstance(count, bool) or not isinstance(count, int) or not 2 <= count <= MAX_TEAM_COUNT:
                raise ValueError(f"teams.count must be an integer between 2 and {MAX_TEAM_COUNT}")
            self.team_count = count

        if 'mode' in teams_config:
            mode = teams_config['mode']
            if mode not in ("random", "balanced"):
                raise ValueError("teams.mode must be 'random' or 'balanced'")
            self.mode = mode

        if 'strict' in teams_config:
            if not isinstance(teams_config['strict'], bool):
                raise ValueError("teams.strict must be true or false")
            self.strict = teams_config['strict']

        if 'names' in teams_config:
            names = teams_config['names']
            if not isinstance(names, list):
                raise ValueError("teams.names must be a list")
            self.team_names = [str(name).strip() for name in names]
            if any(not name for name in self.team_names):
                raise ValueError("teams.names cannot contain empty names")

        if 'tiers' in config_data:
            self.tier_config = self._load_tiers(config_data['tiers'])

        if 'seed' in config_data:
            seed = config_data['seed']
            if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
                raise ValueError("seed must be an integer")
            self.seed = seed

    def _load_tiers(self, tiers_data) -> Dict[Tier, TierInfo]:
        """Merge per-tier overrides onto the default tier table."""
        if not isinstance(tiers_data, dict):
            raise ValueError("tiers must be a mapping of tier letter to settings")

        tier_config = dict(TIER_CONFIG)
        for key, settings in tiers_data.items():
            tier = Tier.parse(key)
            if not isinstance(settings, dict):
                raise ValueError(f"tiers.{tier.value} must be a mapping")
            default = tier_config[tier]
            tier_config[tier] = TierInfo(
                score=settings.get('score', default.score),
                label=str(settings.get('label', default.label)),
                description=str(settings.get('description', default.description)),
            )

        validate_tier_config(tier_config)
        return tier_config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary representation of the configuration
        """
        config_dict = {
            'teams': {
                'count': self.team_count,
                'mode': self.mode,
                'strict': self.strict,
            },
            'tiers': {
                tier.value: {
                    'score': self.tier_config[tier].score,
                    'label': self.tier_config[tier].label,
                    'description': self.tier_config[tier].description,
                }
                for tier in TIER_ORDER
            },
        }

        if self.team_names:
            config_dict['teams']['names'] = list(self.team_names)

        if self.seed is not None:
            config_dict['seed'] = self.seed

        return config_dict

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path where to save the configuration
        """
        config_dict = self.to_dict()

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=True)
