"""
Typer CLI for the Axon engine.

Commands:
    axon play                     - Terminal speed-math run (endless by default)
    axon play --mode classic      - 60 second classic run
    axon play --mode classic --tier 3
    axon stats                    - Show lifetime progress and ad economy state
    axon config                   - Show effective settings
    axon reset                    - Wipe persisted progress

Usage:
    axon --help
    axon --db /tmp/axon.db play --seed 7
"""

from __future__ import annotations

import asyncio
import random
import sys
import time
from datetime import date
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from axon.adaptive.engine import AdaptiveConfig, AdaptiveEngine
from axon.core.errors import ConfigurationError, InsufficientXPError
from axon.core.modes import GameConfig, GameMode, MiniGameType
from axon.economy.gate import AdEconomyGate
from axon.games.questions import QuestionGenerator
from axon.persistence.repository import ProgressRepository
from axon.persistence.store import SQLiteKeyValueStore
from axon.scoring.ledger import daily_challenge_target
from axon.session.collaborators import NullAdProvider
from axon.session.controller import SessionController, SessionPhase, SessionSummary
from axon.session.selector import GameSelector
from config import Settings, get_settings

app = typer.Typer(
    help="Axon: adaptive cognitive training engine",
    no_args_is_help=True,
)

console = Console()

# Mixable games with a text generator
TERMINAL_GAMES = [MiniGameType.SPEED_MATH]


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with the configured ones."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level="DEBUG",
            rotation="10 MB",
            retention=3,
        )


def _repository(ctx: typer.Context) -> ProgressRepository:
    db_path = ctx.obj.get("db") if ctx.obj else None
    store = SQLiteKeyValueStore(db_path or get_settings().state_db_path)
    return ProgressRepository(store)


@app.callback()
def main(
    ctx: typer.Context,
    db: Path | None = typer.Option(None, "--db", help="State database path (default: from config)"),
) -> None:
    ctx.obj = {"db": db}


# =============================================================================
# play
# =============================================================================


@app.command()
def play(
    ctx: typer.Context,
    mode: GameMode = typer.Option(GameMode.ENDLESS, "--mode", "-m", help="classic or endless"),
    tier: int = typer.Option(1, "--tier", "-t", min=1, max=5, help="Starting tier (classic only)"),
    duration: int | None = typer.Option(None, "--duration", min=0, help="Classic run length in seconds"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible questions"),
) -> None:
    """Play a speed-math run in the terminal."""
    settings = get_settings()
    repo = _repository(ctx)
    try:
        config = GameConfig(mode=mode, enabled_games=TERMINAL_GAMES)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    rng = random.Random(seed)
    controller = SessionController.from_settings(
        config,
        repo,
        settings,
        selector=GameSelector(config.enabled_games, settings.game_selection_policy, rng=rng),
    )
    questions = QuestionGenerator(rng)
    duration = settings.classic_duration_seconds if duration is None else duration

    controller.start(start_tier=tier)
    console.print(
        Panel(
            f"[bold]{mode.value.upper()}[/bold] run. Type the answer and press enter.\n"
            + (f"You have {duration}s." if mode == GameMode.CLASSIC else "One mistake ends the run."),
            title="Axon",
        )
    )
    controller.begin_play()
    started = time.monotonic()
    summary: SessionSummary | None = None

    while summary is None:
        if mode == GameMode.CLASSIC and time.monotonic() - started >= duration:
            summary = controller.on_time_expired()
            break

        questions.tier = controller.tier
        question = questions.generate(controller.current_game.value)
        asked = time.monotonic()
        raw = Prompt.ask(f"[cyan]{question.prompt}[/cyan]", default="", show_default=False)
        elapsed_ms = int((time.monotonic() - asked) * 1000)
        if raw.strip().lower() in {"q", "quit"}:
            controller.on_quit()
            console.print("[dim]Run abandoned.[/dim]")
            return

        correct = _parse_int(raw) == question.answer
        feedback = controller.on_answer(correct, elapsed_ms)
        if correct:
            console.print(
                f"[green]+{feedback.points}[/green]  score {feedback.score}  "
                f"streak {feedback.streak}  [dim]{feedback.tier_label} x{feedback.speed_multiplier:.2f}[/dim]"
            )
        else:
            console.print(f"[red]✗[/red] answer was {question.answer}")

        if feedback.session_phase == SessionPhase.CONTINUE_PENDING:
            summary = _negotiate_continue(controller)

    _print_summary(summary)
    if summary.gate_navigation:
        _ad_break(controller.gate)
    controller.dismiss_result()


def _parse_int(raw: str) -> int | None:
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _negotiate_continue(controller: SessionController) -> SessionSummary | None:
    """Ask the player how to settle the continue. Returns a summary when the run ends."""
    while True:
        offer = controller.on_request_continue()
        console.print(
            f"[yellow]Streak {offer.streak} on the line.[/yellow] "
            f"Continue with an ad, or {offer.xp_cost} XP (you have {offer.xp_balance})?"
        )
        choice = Prompt.ask("Continue", choices=["ad", "xp", "decline"], default="decline")
        resolution = asyncio.run(controller.resolve_continue(choice))
        if resolution.granted:
            console.print("[green]Back in the run.[/green]")
            return None
        if resolution.summary is not None:
            return resolution.summary
        console.print("[red]Not enough XP.[/red]")


def _ad_break(gate: AdEconomyGate) -> None:
    choice = Prompt.ask(
        f"Ad break. Watch, or skip for {gate.skip_cost} XP?",
        choices=["watch", "skip"],
        default="watch",
    )
    if choice == "skip":
        try:
            remaining = gate.skip_with_xp()
            console.print(f"[dim]Skipped. {remaining} XP left.[/dim]")
            return
        except InsufficientXPError as e:
            console.print(f"[red]{e}[/red]")
    asyncio.run(gate.watch_ad(NullAdProvider()))
    console.print("[dim]Thanks for watching.[/dim]")


def _print_summary(summary: SessionSummary) -> None:
    table = Table(title="Run complete", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Mode", summary.mode.value)
    table.add_row("Score", str(summary.score))
    table.add_row("Correct / Wrong", f"{summary.correct} / {summary.wrong}")
    table.add_row("Streak", str(summary.streak))
    table.add_row("Accuracy", f"{summary.accuracy:.0f}%")
    table.add_row("Peak speed", f"{summary.peak_game_speed:.2f}x")
    table.add_row("XP gained", f"+{summary.xp_gained}")
    if summary.daily_challenge_completed:
        table.add_row("Daily challenge", f"[bold green]complete +{summary.daily_bonus_xp} XP[/bold green]")
    if summary.is_new_high_score:
        table.add_row("", "[bold magenta]New best![/bold magenta]")
    console.print(table)


# =============================================================================
# stats / config / reset
# =============================================================================


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show lifetime progress and ad economy state."""
    repo = _repository(ctx)
    user = repo.user_stats
    ads = repo.ad_state

    table = Table(title="Progress")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total XP", str(user.total_xp))
    table.add_row("Games played", str(user.total_games_played))
    table.add_row("Correct answers", str(user.total_correct_answers))
    table.add_row("Classic high score", str(user.classic_high_score))
    table.add_row("Endless best streak", str(user.endless_best_streak))
    table.add_row("Day streak", str(user.day_streak))
    table.add_row("Last played", str(user.last_played_date or "-"))
    table.add_row(
        "Daily challenge",
        f"{user.daily_challenge_progress}/{daily_challenge_target(user.total_games_played)} today"
        if user.last_daily_challenge_date == date.today()
        else "not started today",
    )
    table.add_row("Daily challenges completed", str(user.daily_challenges_completed))
    console.print(table)

    mastery = Table(title="Mastery")
    mastery.add_column("Game", style="cyan")
    mastery.add_column("Level", justify="right")
    mastery.add_column("XP", justify="right")
    for game in MiniGameType:
        mastery.add_row(
            game.value,
            str(user.game_levels.get(game.value, 1)),
            str(user.game_mastery_xp.get(game.value, 0)),
        )
    console.print(mastery)

    ad_table = Table(title="Ads")
    ad_table.add_column("Metric", style="cyan")
    ad_table.add_column("Value", justify="right")
    ad_table.add_row("Games since last ad", str(ads.games_played_since_last_ad))
    ad_table.add_row("Ads watched", str(ads.total_ads_watched))
    ad_table.add_row("Ads skipped", str(ads.total_ads_skipped))
    ad_table.add_row("XP spent on skips", str(ads.xp_spent_on_skips))
    console.print(ad_table)


@app.command("config")
def show_config() -> None:
    """Show effective settings (environment and .env applied)."""
    settings = get_settings()
    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))
    engine = AdaptiveEngine(AdaptiveConfig.from_settings(settings))
    table.add_row("allowed time at speed 1.0", f"{engine.allowed_time_ms} ms")
    console.print(table)


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Wipe all persisted progress."""
    if not yes and not typer.confirm("Erase all progress?"):
        raise typer.Abort()
    _repository(ctx).reset()
    console.print("[green]Progress cleared.[/green]")


def run() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    run()
