"""Tests for the config module."""

import tempfile
from pathlib import Path

import pytest
import yaml

from squad_maker.config import Config
from squad_maker.models import TIER_CONFIG, Tier


def write_config(config_data) -> Path:
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config_data, f)
        return Path(f.name)


class TestConfig:
    """Test cases for the Config class."""

    def test_default_initialization(self):
        """Test that Config initializes with correct defaults."""
        config = Config()
        assert config.team_count == 2
        assert config.mode == "balanced"
        assert config.strict is True
        assert config.team_names == []
        assert config.tier_config == TIER_CONFIG
        assert config.seed is None

    def test_load_team_settings(self):
        """Test loading team settings from YAML."""
        config_path = write_config({
            'teams': {
                'count': 4,
                'mode': 'random',
                'strict': False,
                'names': ['Red', ' Blue '],
            },
            'seed': 11,
        })

        try:
            config = Config()
            config.load_from_file(config_path)
            assert config.team_count == 4
            assert config.mode == 'random'
            assert config.strict is False
            assert config.team_names == ['Red', 'Blue']
            assert config.seed == 11
        finally:
            config_path.unlink()

    def test_load_tier_overrides(self):
        """Test that tier overrides are merged onto the defaults."""
        config_path = write_config({
            'tiers': {
                'S': {'score': 10, 'description': 'Pro'},
                'a': {'score': 6},
            }
        })

        try:
            config = Config()
            config.load_from_file(config_path)
            assert config.tier_config[Tier.S].score == 10
            assert config.tier_config[Tier.S].description == 'Pro'
            assert config.tier_config[Tier.S].label == 'S'
            assert config.tier_config[Tier.A].score == 6
            assert config.tier_config[Tier.D] == TIER_CONFIG[Tier.D]
        finally:
            config_path.unlink()

    def test_non_monotonic_tiers_rejected(self):
        config_path = write_config({'tiers': {'C': {'score': 4}}})

        try:
            config = Config()
            with pytest.raises(ValueError, match="strictly decrease"):
                config.load_from_file(config_path)
        finally:
            config_path.unlink()

    def test_unknown_tier_rejected(self):
        config_path = write_config({'tiers': {'X': {'score': 4}}})

        try:
            with pytest.raises(ValueError, match="Unknown tier"):
                Config().load_from_file(config_path)
        finally:
            config_path.unlink()

    @pytest.mark.parametrize("teams", [
        {'count': 1},
        {'count': 9},
        {'count': 'three'},
        {'mode': 'draft'},
        {'strict': 'yes'},
        {'names': 'Red,Blue'},
    ])
    def test_invalid_team_settings(self, teams):
        config_path = write_config({'teams': teams})

        try:
            with pytest.raises(ValueError, match="teams"):
                Config().load_from_file(config_path)
        finally:
            config_path.unlink()

    def test_save_and_reload(self):
        """Test that a saved configuration loads back unchanged."""
        config = Config()
        config.team_count = 3
        config.mode = 'random'
        config.team_names = ['Red', 'Blue', 'Green']
        config.seed = 5

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            config_path = Path(f.name)

        try:
            config.save_to_file(config_path)
            reloaded = Config()
            reloaded.load_from_file(config_path)
            assert reloaded.to_dict() == config.to_dict()
        finally:
            config_path.unlink()

    def test_invalid_config_structure(self):
        """Test handling of invalid configuration structures."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("invalid: yaml: structure: [")
            config_path = Path(f.name)

        try:
            config = Config()
            with pytest.raises(yaml.YAMLError):
                config.load_from_file(config_path)
        finally:
            config_path.unlink()

    def test_non_mapping_config(self):
        config_path = write_config(['teams', 'tiers'])

        try:
            with pytest.raises(ValueError, match="YAML dictionary"):
                Config().load_from_file(config_path)
        finally:
            config_path.unlink()

    def test_nonexistent_config_file(self):
        """Test handling of nonexistent configuration file."""
        config = Config()
        nonexistent_path = Path('/nonexistent/config.yaml')

        with pytest.raises(FileNotFoundError):
            config.load_from_file(nonexistent_path)
