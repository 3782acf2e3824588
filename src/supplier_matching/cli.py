"""CLI for the supplier matching engine.

Commands:
- rank: Rank a candidate pool against a request and write ranked/explain outputs
- score: Show one candidate's score breakdown
- market: Write market averages per service category
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from . import __version__
from .application.market import run_market_summary
from .application.matching import run_matching, score_single_candidate
from .config import MatchingConfig
from .config_file import load_matching_config_file
from .domain.ranking import RankedMatch
from .protocols import FileSystem


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: MatchingConfig
    deps: CliDependencies


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the supplier-match entry point.")


DEFAULT_REQUEST_IN = Path("data/request.json")
DEFAULT_CANDIDATES_IN = Path("data/candidates.json")
DEFAULT_OUT_DIR = Path("data/out")
DEFAULT_MARKET_OUT = Path("data/out/market_summary.csv")


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _version_callback(value: bool) -> None:
    if value:
        rprint(f"supplier-match {__version__}")
        raise typer.Exit()


def _breakdown_table(match: RankedMatch) -> Table:
    breakdown = match.breakdown
    table = Table(title=f"{match.candidate.candidate_id} (rank {match.rank})")
    table.add_column("Criterion")
    table.add_column("Points", justify="right")
    table.add_column("Bound", justify="right")
    table.add_row("cultural", str(breakdown.cultural), f"0..{breakdown.cultural_ceiling}")
    table.add_row("budget", str(breakdown.budget), "0..20")
    table.add_row("reputation", str(breakdown.reputation), "0..20")
    table.add_row("experience", str(breakdown.experience), "0..10")
    table.add_row("location", str(breakdown.location), "0..10")
    table.add_row("tags", str(breakdown.tags), "-2..10")
    table.add_row("specialty", str(breakdown.specialty), "-3..15")
    table.add_row(
        "capacity", "-" if breakdown.capacity is None else str(breakdown.capacity), "-5..10"
    )
    table.add_row("ctr_bonus", str(breakdown.ctr_bonus), "-3..5")
    table.add_row("availability_penalty", str(breakdown.availability_penalty), "")
    table.add_row("total_algo", str(breakdown.total_algo), "")
    table.add_row("score_before_fairness", str(breakdown.score_before_fairness), "0..100")
    table.add_row("fairness_multiplier", f"{breakdown.fairness_multiplier:.4f}", "")
    table.add_row("final_score", str(breakdown.final_score), "0..100")
    return table


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="Supplier matching: fairness-adjusted ranking of suppliers against a request",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="TOML config file overriding environment settings",
            ),
        ] = None,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show the version and exit",
            ),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        deps = deps_builder()
        config = MatchingConfig.from_env()
        if config_path is not None:
            config = config.with_file_overrides(
                load_matching_config_file(path=config_path, fs=deps.fs)
            )
        ctx.obj = CliContext(config=config, deps=deps)

    @app.command()
    def rank(
        ctx: typer.Context,
        request_path: Annotated[
            Path,
            typer.Option("--request", "-r", help="Path to the request JSON"),
        ] = DEFAULT_REQUEST_IN,
        candidates_path: Annotated[
            Path,
            typer.Option("--candidates", "-i", help="Path to the candidate pool JSON"),
        ] = DEFAULT_CANDIDATES_IN,
        out_dir: Annotated[
            Path,
            typer.Option("--output-dir", "-o", help="Directory for output files"),
        ] = DEFAULT_OUT_DIR,
        min_score: Annotated[
            int | None,
            typer.Option(
                "--min-score",
                min=0,
                max=100,
                help="Override the relevance floor (default: 30)",
            ),
        ] = None,
        max_results: Annotated[
            int | None,
            typer.Option(
                "--max-results",
                min=1,
                help="Override the number of results (default: 3)",
            ),
        ] = None,
        no_fairness: Annotated[
            bool,
            typer.Option("--no-fairness", help="Disable the fairness adjustment"),
        ] = False,
    ) -> None:
        """Rank: score the candidate pool and write ranked and explain outputs."""
        state = _get_context(ctx)
        config = state.config.with_overrides(
            fairness_enabled=False if no_fairness else None,
            min_relevance_score=min_score,
            max_results=max_results,
        )
        result = run_matching(
            request_path=request_path,
            candidates_path=candidates_path,
            out_dir=out_dir,
            config=config,
            fs=state.deps.fs,
        )
        rprint(
            f"[green]✓ Rank complete:[/green] {result.match_count} match(es) for "
            f"'{result.service_category}' ({result.eligible_candidates} of "
            f"{result.total_candidates} candidates eligible)"
        )
        for match in result.matches:
            rprint(
                f"  {match.rank}. {match.candidate.candidate_id} "
                f"[bold]{match.final_score}[/bold] - {match.explanation}"
            )
        if result.fallback is not None:
            rprint(f"[yellow]No match above the floor ({result.empty_reason}).[/yellow]")
            rprint(f"  {result.fallback.message}")
            for match in result.fallback.alternatives:
                rprint(f"  - {match.candidate.candidate_id} ({match.final_score})")
            rprint(f"  fallback: {result.fallback_path}")
        rprint(f"  ranked: {result.ranked_path}")
        rprint(f"  explain: {result.explain_path}")

    @app.command()
    def score(
        ctx: typer.Context,
        candidate_id: Annotated[
            str,
            typer.Option("--candidate-id", help="Candidate to explain"),
        ],
        request_path: Annotated[
            Path,
            typer.Option("--request", "-r", help="Path to the request JSON"),
        ] = DEFAULT_REQUEST_IN,
        candidates_path: Annotated[
            Path,
            typer.Option("--candidates", "-i", help="Path to the candidate pool JSON"),
        ] = DEFAULT_CANDIDATES_IN,
    ) -> None:
        """Score: print one candidate's score breakdown."""
        state = _get_context(ctx)
        match = score_single_candidate(
            request_path=request_path,
            candidates_path=candidates_path,
            candidate_id=candidate_id,
            config=state.config,
            fs=state.deps.fs,
        )
        Console().print(_breakdown_table(match))
        rprint(match.explanation)

    @app.command()
    def market(
        ctx: typer.Context,
        candidates_path: Annotated[
            Path,
            typer.Option("--candidates", "-i", help="Path to the candidate pool JSON"),
        ] = DEFAULT_CANDIDATES_IN,
        output: Annotated[
            Path,
            typer.Option("--output", "-o", help="Output CSV path"),
        ] = DEFAULT_MARKET_OUT,
    ) -> None:
        """Market: write market averages per service category."""
        state = _get_context(ctx)
        path = run_market_summary(
            candidates_path=candidates_path,
            output_path=output,
            fs=state.deps.fs,
        )
        rprint(f"[green]✓ Market summary written:[/green] {path}")

    return app
