"""Tests for the command line interface."""

import sqlite3 as sql
from pathlib import Path

import pandas as pd
import pytest
import yaml
from click.testing import CliRunner

import squad_maker.db as db
from squad_maker.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def participants_in(db_file: str):
    conn = sql.connect(db_file)
    try:
        return db.fetch_participants(conn)
    finally:
        conn.close()


def seed_roster(runner, db_file="roster.db", players=(("Alice", "S"), ("Bob", "D"), ("Carol", "B"), ("Dan", "B"))):
    result = runner.invoke(cli, ["init", db_file])
    assert result.exit_code == 0
    for name, tier in players:
        result = runner.invoke(cli, ["add", db_file, name, "--tier", tier])
        assert result.exit_code == 0, result.output


class TestRosterCommands:
    """Test cases for roster management commands."""

    def test_init_and_add(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[("Alice", "s")])

            participants = participants_in("roster.db")
            assert [(p.name, p.tier.value) for p in participants] == [("Alice", "S")]

    def test_add_rejects_long_name(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[])
            result = runner.invoke(cli, ["add", "roster.db", "x" * 21])

            assert result.exit_code == 1
            assert "too long" in result.output

    def test_list_with_tier_filter(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner)

            result = runner.invoke(cli, ["list", "roster.db", "--tier", "B"])

            assert result.exit_code == 0
            assert "Carol" in result.output
            assert "Dan" in result.output
            assert "Alice" not in result.output
            assert "Tier distribution (4 players): S: 1, B: 2, D: 1" in result.output

    def test_set_tier_rename_remove(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[("Alice", "S"), ("Bob", "D")])
            alice, bob = participants_in("roster.db")

            assert runner.invoke(cli, ["set-tier", "roster.db", alice.id, "a"]).exit_code == 0
            assert runner.invoke(cli, ["rename", "roster.db", alice.id, "Alicia"]).exit_code == 0
            assert runner.invoke(cli, ["remove", "roster.db", bob.id]).exit_code == 0

            participants = participants_in("roster.db")
            assert [(p.name, p.tier.value) for p in participants] == [("Alicia", "A")]

    def test_remove_unknown_id(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[])
            result = runner.invoke(cli, ["remove", "roster.db", "missing"])

            assert result.exit_code == 1
            assert "No participant with id missing" in result.output

    def test_clear_requires_confirmation(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner)

            result = runner.invoke(cli, ["clear", "roster.db"], input="n\n")
            assert "Nothing deleted" in result.output
            assert len(participants_in("roster.db")) == 4

            result = runner.invoke(cli, ["clear", "roster.db", "--yes"])
            assert result.exit_code == 0
            assert participants_in("roster.db") == []

    def test_import_csv(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[("Old", "C")])
            pd.DataFrame({'name': ['Alice', 'Bob'], 'tier': ['S', 'd']}).to_csv("players.csv", index=False)

            result = runner.invoke(cli, ["import", "roster.db", "players.csv"])
            assert result.exit_code == 0, result.output
            assert [p.name for p in participants_in("roster.db")] == ["Old", "Alice", "Bob"]

            result = runner.invoke(cli, ["import", "roster.db", "players.csv", "--replace"])
            assert result.exit_code == 0, result.output
            assert [p.name for p in participants_in("roster.db")] == ["Alice", "Bob"]

    def test_import_na_name(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[])
            Path("players.csv").write_text("name,tier\nNA,S\nBob,D\n")

            result = runner.invoke(cli, ["import", "roster.db", "players.csv"])

            assert result.exit_code == 0, result.output
            assert [p.name for p in participants_in("roster.db")] == ["NA", "Bob"]

    def test_import_invalid_csv(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[])
            Path("players.csv").write_text("name\nAlice\n")

            result = runner.invoke(cli, ["import", "roster.db", "players.csv"])

            assert result.exit_code == 1
            assert "missing columns" in result.output


class TestGenerateCommand:
    """Test cases for the generate command."""

    def test_generate_balanced(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner)

            result = runner.invoke(cli, ["generate", "roster.db", "--seed", "1"])

            assert result.exit_code == 0, result.output
            assert "Team 1" in result.output
            assert "Team 2" in result.output
            # S+D vs B+B is the only split the draft can produce
            assert "Balance ±0" in result.output

    def test_generate_yaml_output(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner)

            result = runner.invoke(
                cli, ["generate", "roster.db", "--mode", "random", "--teams", "2", "--output", "teams.yaml"]
            )

            assert result.exit_code == 0, result.output
            data = yaml.safe_load(Path("teams.yaml").read_text(encoding="utf-8"))
            names = sorted(p['name'] for team in data['teams'] for p in team['players'])
            assert names == ["Alice", "Bob", "Carol", "Dan"]

    def test_generate_text_output(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[("Alice", "S"), ("Bob", "D")])

            result = runner.invoke(cli, ["generate", "roster.db", "--output", "teams.txt"])

            assert result.exit_code == 0, result.output
            assert Path("teams.txt").read_text(encoding="utf-8") == "【Team 1】\n  Alice (S)\n\n【Team 2】\n  Bob (D)\n"

    def test_generate_with_config(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner)
            Path("config.yaml").write_text(yaml.dump({'teams': {'count': 2, 'names': ['Red', 'Blue']}}))

            result = runner.invoke(cli, ["generate", "roster.db", "--config", "config.yaml", "--output", "teams.csv"])

            assert result.exit_code == 0, result.output
            df = pd.read_csv("teams.csv")
            assert sorted(df['team'].unique()) == ["Blue", "Red"]

    def test_generate_too_many_teams(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner, players=[("Alice", "S"), ("Bob", "D")])

            result = runner.invoke(cli, ["generate", "roster.db", "--teams", "3"])
            assert result.exit_code == 1
            assert "Insufficient participants" in result.output

            result = runner.invoke(cli, ["generate", "roster.db", "--teams", "3", "--lenient"])
            assert result.exit_code == 0, result.output
            assert "some teams will be empty" in result.output

    def test_generate_invalid_config(self, runner):
        with runner.isolated_filesystem():
            seed_roster(runner)
            Path("config.yaml").write_text(yaml.dump({'teams': {'mode': 'draft'}}))

            result = runner.invoke(cli, ["generate", "roster.db", "--config", "config.yaml"])

            assert result.exit_code == 1
            assert "Invalid config" in result.output
