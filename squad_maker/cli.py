"""Command line interface for Squad Maker."""

import click
import sys
import sqlite3 as sql
from pathlib import Path
import yaml

import squad_maker.db as db
from squad_maker.assigner import TeamAssigner, MODES, team_average_score, team_score, tier_distribution
from squad_maker.config import Config
from squad_maker.models import Participant, TIER_ORDER
from squad_maker.roster import Roster, RosterError
from squad_maker.validators import InvalidConfigError, validate_roster_csv


TIER_CHOICE = click.Choice([tier.value for tier in TIER_ORDER], case_sensitive=False)

def fail(message: str) -> None:
  click.secho(f"Error: {message}", fg="red")
  sys.exit(1)

def open_roster(conn: sql.Connection) -> Roster:
  roster = Roster(conn)
  try:
    roster.load()
  except RosterError as e:
    fail(str(e))
  return roster

def print_distribution(participants) -> None:
  dist = tier_distribution(participants)
  parts = [f"{tier.value}: {count}" for tier, count in dist.items() if count]
  click.secho(f"Tier distribution ({len(participants)} players): {', '.join(parts)}", fg="blue")

@click.group()
def cli():
  """Squad Maker CLI for managing a roster and generating teams."""
  pass

@cli.command()
@click.argument("db_file", type=click.Path(path_type=Path))
def init(db_file: Path):
  """Initialize the roster database."""
  if db_file.exists():
    db_file.unlink()

  with sql.connect(db_file) as conn:
    db.truncate_participants(conn)
    click.secho(f"Initialized database {db_file}", fg="green")

@cli.command()
@click.argument("db_file", type=click.Path(path_type=Path))
@click.argument("name")
@click.option("--tier", type=TIER_CHOICE, default="B", show_default=True, help="Skill tier")
def add(db_file: Path, name: str, tier: str):
  """Register a participant."""
  with sql.connect(db_file) as conn:
    roster = open_roster(conn)
    try:
      participant = roster.add(name, tier)
    except (ValueError, RosterError) as e:
      fail(str(e))
    click.secho(f"Added {participant.name} ({participant.tier.value}) as {participant.id}", fg="green")

@cli.command()
@click.argument("db_file", type=click.Path(exists=True, path_type=Path))
@click.argument("participant_id")
def remove(db_file: Path, participant_id: str):
  """Remove a participant by id."""
  with sql.connect(db_file) as conn:
    roster = open_roster(conn)
    try:
      participant = roster.remove(participant_id)
    except KeyError:
      fail(f"No participant with id {participant_id}")
    except RosterError as e:
      fail(str(e))
    click.secho(f"Removed {participant.name}", fg="green")

@cli.command(name="set-tier")
@click.argument("db_file", type=click.Path(exists=True, path_type=Path))
@click.argument("participant_id")
@click.argument("tier", type=TIER_CHOICE)
def set_tier(db_file: Path, participant_id: str, tier: str):
  """Change a participant's tier."""
  with sql.connect(db_file) as conn:
    roster = open_roster(conn)
    try:
      participant = roster.update_tier(participant_id, tier)
    except KeyError:
      fail(f"No participant with id {participant_id}")
    except RosterError as e:
      fail(str(e))
    click.secho(f"{participant.name} is now tier {participant.tier.value}", fg="green")

@cli.command()
@click.argument("db_file", type=click.Path(exists=True, path_type=Path))
@click.argument("participant_id")
@click.argument("name")
def rename(db_file: Path, participant_id: str, name: str):
  """Rename a participant."""
  with sql.connect(db_file) as conn:
    roster = open_roster(conn)
    try:
      participant = roster.update_name(participant_id, name)
    except KeyError:
      fail(f"No participant with id {participant_id}")
    except (ValueError, RosterError) as e:
      fail(str(e))
    click.secho(f"Renamed {participant_id} to {participant.name}", fg="green")

@cli.command(name="list")
@click.argument("db_file", type=click.Path(exists=True, path_type=Path))
@click.option("--tier", type=TIER_CHOICE, default=None, help="Only show this tier")
def list_participants(db_file: Path, tier: str):
  """List registered participants."""
  with sql.connect(db_file) as conn:
    roster = open_roster(conn)
    participants = roster.filter_by_tier(tier) if tier else list(roster.participants)

    if not participants:
      click.secho("No participants registered.", fg="yellow")
      return

    for participant in participants:
      click.echo(f"{participant.id}  {participant.tier.value}  {participant.name}")
    print_distribution(roster.participants)

@cli.command()
@click.argument("db_file", type=click.Path(exists=True, path_type=Path))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def clear(db_file: Path, yes: bool):
  """Delete every participant."""
  with sql.connect(db_file) as conn:
    roster = open_roster(conn)
    if not yes and not click.confirm(f"Delete all {len(roster)} participants?", default=False):
      click.secho("Nothing deleted.", fg="yellow")
      return
    try:
      roster.clear()
    except RosterError as e:
      fail(str(e))
    click.secho(f"Cleared database {db_file} successfully.", fg="green")

@cli.command(name="import")
@click.argument("db_file", type=click.Path(path_type=Path))
@click.argument("csv_file", type=click.Path(exists=True, path_type=Path))
@click.option("--replace", is_flag=True, help="Replace the roster instead of appending")
def import_csv(db_file: Path, csv_file: Path, replace: bool):
  """Import participants from a CSV file with name and tier columns."""
  try:
    df = validate_roster_csv(csv_file)
  except ValueError as e:
    fail(str(e))

  with sql.connect(db_file) as conn:
    roster = open_roster(conn)
    imported = [Participant.create(row.name, row.tier) for row in df.itertuples(index=False)]
    participants = imported if replace else list(roster.participants) + imported
    try:
      roster.import_participants(participants)
    except RosterError as e:
      fail(str(e))
    click.secho(f"Imported {len(imported)} participants from {csv_file} into {db_file}", fg="green")

@cli.command()
@click.argument("db_file", type=click.Path(exists=True, path_type=Path))
@click.option("--config", "config_file", type=click.Path(exists=True, path_type=Path),
              default=None, help="YAML configuration file")
@click.option("--mode", type=click.Choice(MODES), default=None, help="Generation mode")
@click.option("--teams", "team_count", type=int, default=None, help="Number of teams")
@click.option("--lenient", is_flag=True, help="Allow more teams than participants")
@click.option("--seed", type=int, default=None, help="Random seed for reproducible teams")
@click.option("--output", type=click.Path(path_type=Path), default=None,
              help="Write the result to a .yaml or .csv file")
def generate(db_file: Path, config_file: Path, mode: str, team_count: int,
             lenient: bool, seed: int, output: Path):
  """Generate teams from the roster."""
  config = Config()
  if config_file:
    try:
      config.load_from_file(config_file)
    except (ValueError, yaml.YAMLError) as e:
      fail(f"Invalid config {config_file}: {e}")
  if mode:
    config.mode = mode
  if team_count is not None:
    config.team_count = team_count
  if lenient:
    config.strict = False
  if seed is not None:
    config.seed = seed

  with sql.connect(db_file) as conn:
    roster = open_roster(conn)

  click.secho(f"Generating {config.team_count} {config.mode} teams for {len(roster)} participants", fg="blue")
  if len(roster) < config.team_count and not config.strict:
    click.secho("More teams than participants; some teams will be empty", fg="yellow")

  assigner = TeamAssigner(config)
  try:
    teams = assigner.assign(roster.participants)
  except InvalidConfigError as e:
    fail(str(e))

  for team in teams:
    score = team_score(team, config.tier_config)
    average = team_average_score(team, config.tier_config)
    click.secho(f"\n{team.name}  score {score}  avg {average:.1f}  ({len(team.players)} players)", fg="cyan")
    for participant in team.players:
      click.echo(f"  {participant.name} ({participant.tier.value}) +{config.tier_config[participant.tier].score}")

  summary = assigner.get_assignment_summary(teams)
  balance = summary['balance_score']
  colour = "green" if balance == 0 else "yellow" if balance <= 2 else "red"
  click.secho(f"\nBalance ±{balance}", fg=colour)

  if output:
    if output.suffix.lower() in (".yaml", ".yml"):
      assigner.save_assignments_yaml(teams, output)
    elif output.suffix.lower() == ".csv":
      assigner.save_assignments_csv(teams, output)
    else:
      output.write_text(assigner.format_teams_text(teams) + "\n", encoding="utf-8")
    click.secho(f"Saved teams to {output}", fg="green")

if __name__ == "__main__":
  cli()
