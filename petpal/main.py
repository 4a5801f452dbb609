"""
PetPal command line: headless simulation, scoring and config checks.
"""

import json
import random
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError

from petpal.common.errors import ConfigError, PetPalError
from petpal.common.logging_config import setup_logging
from petpal.common.metrics import get_metrics
from petpal.common.settings import load_config, settings
from petpal.domain.scoring import ScoringEngine
from petpal.domain.stats import WeekSnapshot
from petpal.engine.session import GameSession
from petpal.models.base import ScoreHistory

app = typer.Typer(help="PetPal virtual pet simulation")

TRICK_PLAN = ["Sit", "Roll Over", "High Five"]


def autoplay_step(session: GameSession, rng: random.Random) -> None:
    """
    One round of a simple careful-owner policy.

    Keeps hunger and hygiene up so health (and salary) hold, spends on
    fun only with a cushion, and plays minigames for extra cash.
    """
    stats = session.pet.stats
    wallet = session.ledger.wallet

    if stats.health < 25 and wallet >= 45:
        session.visit_vet("full_treatment")
    elif stats.health < 50 and wallet >= 30:
        session.visit_vet("checkup")

    if stats.hunger < 50:
        session.feed("premium_meal" if session.ledger.wallet >= 100 else "basic_kibble")
    if stats.hygiene < 50:
        session.clean()
    if stats.energy < 30:
        session.rest()
    elif stats.happiness < 50 and session.ledger.wallet >= 60:
        session.play("yarn_ball")

    known = len(session.pet.profile.tricks)
    if known < len(TRICK_PLAN) and session.week > (known + 1) * 3 and session.ledger.wallet >= 60:
        session.teach_trick(TRICK_PLAN[known])

    if rng.random() < 0.25:
        session.record_minigame(rng.randint(0, 10), source="Minigame reward")


@app.command()
def simulate(
    seed: int = typer.Option(42, "--seed", help="Random seed for autoplay and the mystery snack"),
    name: str = typer.Option("Biscuit", "--name", help="Pet name"),
    species: str = typer.Option("dog", "--species", help="Species id"),
    budget: Optional[int] = typer.Option(None, "--budget", help="Starting budget (50-500, steps of 10)"),
    weeks: Optional[int] = typer.Option(None, "--weeks", help="Override the number of weeks"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Game tuning YAML"),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the JSON report to this file"),
    metrics_out: Optional[Path] = typer.Option(None, "--metrics-out", help="Write Prometheus metrics to this file"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Log level"),
    json_logs: bool = typer.Option(settings.ENABLE_JSON_LOGS, "--json-logs/--console-logs", help="Log format"),
):
    """Play a full session with the autoplay policy and print the report."""
    setup_logging(level=log_level, enable_json=json_logs)

    try:
        config = load_config(config_path)
        if weeks is not None:
            config = config.model_copy(update={"total_weeks": weeks})
        rng = random.Random(seed)
        session = GameSession.start_session(
            {"name": name, "species": species},
            config=config,
            budget=budget,
            rng=random.Random(seed),
        )
    except PetPalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    while not session.ended:
        session.tick(config.decay_interval_ms)
        if not session.ended:
            autoplay_step(session, rng)

    report = session.build_report()
    payload = report.model_dump_json(indent=2)

    if output:
        output.write_text(payload, encoding="utf-8")
        typer.echo(f"Report written to {output}")
    else:
        typer.echo(payload)

    if metrics_out:
        metrics_out.write_bytes(get_metrics())


@app.command()
def score(history: Path = typer.Argument(..., help="YAML file with snapshots and spending")):
    """
    Score a recorded history.

    The file holds `snapshots` (happiness/health/energy per week),
    `weekly_spending`, `preventive` and `reactive`.
    """
    try:
        data = yaml.safe_load(history.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        typer.echo(f"Error: cannot read {history}: {e}", err=True)
        raise typer.Exit(code=1)

    if not isinstance(data, dict):
        typer.echo("Error: history must be a mapping", err=True)
        raise typer.Exit(code=1)

    try:
        parsed = ScoreHistory.model_validate(data)
    except ValidationError as e:
        typer.echo(f"Error: bad history: {e}", err=True)
        raise typer.Exit(code=1)

    snapshots = [WeekSnapshot(**row.model_dump()) for row in parsed.snapshots]
    breakdown = ScoringEngine.compute(snapshots, parsed.weekly_spending, parsed.preventive, parsed.reactive)
    typer.echo(json.dumps(breakdown.as_dict(), indent=2))


@app.command("validate-config")
def validate_config(config_path: Optional[Path] = typer.Argument(None, help="Game tuning YAML")):
    """Load the game tuning file and report whether it is valid."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        typer.echo(f"Invalid config: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(
        f"Config OK: {config.total_weeks} weeks of {config.week_duration_ms} ms, "
        f"bill {config.weekly_bill}, starting budget {config.starting_budget}"
    )


if __name__ == "__main__":
    app()
