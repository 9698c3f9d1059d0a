"""
Command line interface for scoring, simulation and coverage studies.

Commands:
    scoring-table  Sum score to trait score lookup table
    information    Test information and SEM over a theta grid
    simulate       Simulated responses from known trait values
    estimate       Per-person theta and SE for a response file
    coverage       Simulation study of CI coverage and recovery
"""

import dataclasses
import logging
import math
from pathlib import Path

import numpy as np
import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from sem_analysis.core.data import (
    load_item_parameters_csv,
    load_response_csv,
)
from sem_analysis.core.settings import RuntimeSettings
from sem_analysis.core.utils import get_rng
from sem_analysis.evaluation import (
    SimulationStudyResult,
    pool_coverage,
    run_replications,
)
from sem_analysis.irt.estimation import (
    EstimationConfig,
    EstimationMethod,
    ExtremeScorePolicy,
    ItemSet,
    SEMethod,
    estimate_abilities,
)
from sem_analysis.scoring import build_scoring_table, information_curve
from sem_analysis.synthetic_data.generators import simulate, to_csv
from sem_analysis.synthetic_data.presets import (
    get_available_presets,
    get_item_preset,
    get_preset,
)
from sem_analysis.synthetic_data.sampling import draw_sample

console = Console()
app = typer.Typer(help="Measurement error analysis for PCM scoring.")


@app.callback()
def main() -> None:
    """Measurement error analysis for Partial Credit Model scoring."""
    settings = RuntimeSettings()
    logging.getLogger("sem_analysis").setLevel(settings.log_level.upper())


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error: {message}[/red]")
    return typer.Exit(1)


def _load_items(path: Path) -> ItemSet:
    if not path.exists():
        raise _fail(f"Item file not found: {path}")
    try:
        return load_item_parameters_csv(path)
    except ValueError as e:
        raise _fail(f"Could not parse {path}: {e}") from e


def _estimation_config(
    method: EstimationMethod,
    se_method: SEMethod,
    policy: ExtremeScorePolicy,
    n_workers: int | None,
) -> EstimationConfig:
    settings = RuntimeSettings()
    if n_workers is None:
        n_workers = settings.n_workers
    try:
        return EstimationConfig(
            theta_range=(settings.theta_min, settings.theta_max),
            method=method,
            se_method=se_method,
            extreme_score_policy=policy,
            n_workers=n_workers,
        )
    except ValueError as e:
        raise _fail(str(e)) from e


def _format(value: float, digits: int = 3) -> str:
    if math.isnan(value):
        return "-"
    if math.isinf(value):
        return "inf"
    return f"{value:.{digits}f}"


@app.command("scoring-table")
def scoring_table(
    items: Path = typer.Argument(..., help="CSV of item thresholds"),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Write the table to this CSV file"
    ),
    lo: int | None = typer.Option(None, "--lo", help="Lowest sum score"),
    hi: int | None = typer.Option(None, "--hi", help="Highest sum score"),
    method: EstimationMethod = typer.Option(
        EstimationMethod.WLE, "--method", help="Point estimator"
    ),
    se_method: SEMethod = typer.Option(
        SEMethod.CORRECTED, "--se-method", help="Standard error method"
    ),
    policy: ExtremeScorePolicy = typer.Option(
        ExtremeScorePolicy.BOUNDARY,
        "--extreme-policy",
        help="Scoring of the minimum and maximum sum scores",
    ),
    n_workers: int | None = typer.Option(None, "--n-workers"),
) -> None:
    """Print (and optionally save) the sum score to theta lookup table."""
    item_set = _load_items(items)
    config = _estimation_config(method, se_method, policy, n_workers)

    score_range = None
    if lo is not None or hi is not None:
        score_range = (
            lo if lo is not None else 0,
            hi if hi is not None else item_set.max_sum_score,
        )

    try:
        table = build_scoring_table(item_set, score_range, config)
    except ValueError as e:
        raise _fail(str(e)) from e

    rich_table = Table(title=f"Scoring table ({item_set.n_items} items)")
    rich_table.add_column("Sum score", justify="right")
    rich_table.add_column("Theta", justify="right")
    rich_table.add_column("SE", justify="right")
    rich_table.add_column("Status")
    for row in table.rows:
        rich_table.add_row(
            str(row.sum_score),
            _format(row.theta),
            _format(row.se),
            row.status.value,
        )
    console.print(rich_table)

    if not table.is_monotone:
        console.print("[yellow]Warning: theta is not monotone[/yellow]")

    if output is not None:
        table.to_dataframe().to_csv(output, index=False)
        console.print(f"[green]✓[/green] Saved table to {output}")


@app.command()
def information(
    items: Path = typer.Argument(..., help="CSV of item thresholds"),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Write the curve to this CSV file"
    ),
    theta_min: float = typer.Option(-6.0, "--theta-min"),
    theta_max: float = typer.Option(6.0, "--theta-max"),
    n_points: int = typer.Option(25, "--n-points"),
) -> None:
    """Print the test information and SEM over a theta grid."""
    item_set = _load_items(items)
    if n_points < 2 or theta_max <= theta_min:
        raise _fail("need --n-points >= 2 and --theta-max > --theta-min")

    curve = information_curve(
        item_set, np.linspace(theta_min, theta_max, n_points)
    )

    rich_table = Table(title="Test information")
    rich_table.add_column("Theta", justify="right")
    rich_table.add_column("Information", justify="right")
    rich_table.add_column("SEM", justify="right")
    for theta, info, sem in curve.itertuples(index=False):
        rich_table.add_row(_format(theta, 2), _format(info), _format(sem))
    console.print(rich_table)

    if output is not None:
        curve.to_csv(output, index=False)
        console.print(f"[green]✓[/green] Saved curve to {output}")


@app.command("simulate")
def simulate_command(
    items: Path = typer.Argument(..., help="CSV of item thresholds"),
    output: Path = typer.Option(
        ..., "-o", "--output", help="CSV file for the simulated responses"
    ),
    n_persons: int = typer.Option(
        1000, "-n", "--n-persons", help="Number of simulated persons"
    ),
    mean: float = typer.Option(0.0, "--mean", help="Mean of true theta"),
    sd: float = typer.Option(1.0, "--sd", help="SD of true theta"),
    seed: int = typer.Option(42, "-s", "--seed", help="Random seed"),
) -> None:
    """Simulate responses for normally distributed true theta values."""
    item_set = _load_items(items)
    if n_persons < 1:
        raise _fail(f"--n-persons must be >= 1, got {n_persons}")
    if sd < 0:
        raise _fail(f"--sd must be >= 0, got {sd}")

    rng = get_rng(seed)
    if sd == 0:
        abilities = draw_sample(n_persons, "fixed", {"value": mean}, rng)
    else:
        abilities = draw_sample(
            n_persons, "normal", {"mean": mean, "std": sd}, rng
        )
    dataset = simulate(item_set, abilities, rng=rng)
    to_csv(dataset, output)

    console.print(
        f"[green]✓[/green] Simulated {n_persons} persons × "
        f"{item_set.n_items} items -> {output}"
    )


@app.command()
def estimate(
    items: Path = typer.Argument(..., help="CSV of item thresholds"),
    responses: Path = typer.Argument(
        ..., help="CSV with one column per item id"
    ),
    output: Path = typer.Option(
        ..., "-o", "--output", help="CSV file for theta and SE per person"
    ),
    id_column: str | None = typer.Option(
        None, "--id-column", help="Person id column in the response file"
    ),
    method: EstimationMethod = typer.Option(
        EstimationMethod.WLE, "--method", help="Point estimator"
    ),
    se_method: SEMethod = typer.Option(
        SEMethod.CORRECTED, "--se-method", help="Standard error method"
    ),
    policy: ExtremeScorePolicy = typer.Option(
        ExtremeScorePolicy.BOUNDARY,
        "--extreme-policy",
        help="Scoring of all-minimum and all-maximum patterns",
    ),
    n_workers: int | None = typer.Option(None, "--n-workers"),
) -> None:
    """Estimate theta and its standard error for every person."""
    item_set = _load_items(items)
    if not responses.exists():
        raise _fail(f"Response file not found: {responses}")
    config = _estimation_config(method, se_method, policy, n_workers)

    try:
        person_ids, matrix = load_response_csv(responses, item_set, id_column)
    except ValueError as e:
        raise _fail(f"Could not read {responses}: {e}") from e

    estimates = estimate_abilities(item_set, matrix, config)
    df = estimates.to_dataframe()
    df.insert(0, "person_id", person_ids)
    df.to_csv(output, index=False)

    rich_table = Table(title="Estimate status")
    rich_table.add_column("Status")
    rich_table.add_column("Persons", justify="right")
    for status, count in sorted(estimates.status_counts().items()):
        rich_table.add_row(status.value, str(count))
    console.print(rich_table)
    console.print(
        f"[green]✓[/green] Saved {estimates.n_persons} estimates to {output}"
    )


def _print_coverage(results: list[SimulationStudyResult]) -> None:
    pooled = pool_coverage(results)

    coverage_table = Table(title="Confidence interval coverage")
    coverage_table.add_column("Nominal", justify="right")
    coverage_table.add_column("z", justify="right")
    coverage_table.add_column("Observed", justify="right")
    coverage_table.add_column("Covered / evaluated", justify="right")
    for level in pooled.levels:
        coverage_table.add_row(
            f"{level.confidence_level:.2f}",
            _format(level.critical_value),
            _format(level.observed),
            f"{level.n_covered} / {level.n_evaluated}",
        )
    console.print(coverage_table)

    recovery_table = Table(title="Point estimate recovery")
    recovery_table.add_column("Run", justify="right")
    recovery_table.add_column("Bias", justify="right")
    recovery_table.add_column("MAE", justify="right")
    recovery_table.add_column("RMSE", justify="right")
    recovery_table.add_column("r", justify="right")
    recovery_table.add_column("n", justify="right")
    for result in results:
        recovery = result.recovery
        recovery_table.add_row(
            str(result.run_index),
            _format(recovery.bias),
            _format(recovery.mean_absolute_error),
            _format(recovery.rmse),
            _format(recovery.correlation),
            str(recovery.n),
        )
    console.print(recovery_table)

    if pooled.n_excluded:
        console.print(
            f"[yellow]{pooled.n_excluded} persons without an estimate "
            "were excluded[/yellow]"
        )


@app.command()
def coverage(
    preset: str = typer.Option(
        "coverage_normal", "-p", "--preset", help="Simulation preset name"
    ),
    items: Path | None = typer.Option(
        None,
        "--items",
        help="CSV of item thresholds (defaults to the preset's items)",
    ),
    n_persons: int | None = typer.Option(
        None, "-n", "--n-persons", help="Override the preset's sample size"
    ),
    n_replications: int = typer.Option(
        1, "-r", "--n-replications", help="Number of replications"
    ),
    seed: int | None = typer.Option(
        None, "-s", "--seed", help="Base seed (defaults to the preset's)"
    ),
    output: Path | None = typer.Option(
        None,
        "-o",
        "--output",
        help="Write per-person results of every run to this CSV file",
    ),
    n_workers: int | None = typer.Option(None, "--n-workers"),
) -> None:
    """Run a simulation study of coverage and point estimate recovery."""
    available_presets = get_available_presets()
    if preset not in available_presets:
        raise _fail(
            f"Unknown preset: {preset}. "
            f"Available: {', '.join(available_presets)}"
        )
    if n_replications < 1:
        raise _fail(f"--n-replications must be >= 1, got {n_replications}")

    config = get_preset(preset)
    if n_persons is not None:
        try:
            config = dataclasses.replace(config, n_persons=n_persons)
        except ValueError as e:
            raise _fail(str(e)) from e

    if items is not None:
        item_set = _load_items(items)
    else:
        item_set = get_item_preset(config.item_preset)

    estimation_config = _estimation_config(
        EstimationMethod.WLE,
        SEMethod.CORRECTED,
        ExtremeScorePolicy.BOUNDARY,
        n_workers,
    )

    base_seed = seed if seed is not None else config.random_seed
    with console.status("[bold]Running simulation study..."):
        results = list(
            run_replications(
                item_set,
                config,
                n_replications=n_replications,
                base_seed=base_seed,
                estimation_config=estimation_config,
            )
        )

    console.print(
        f"[green]✓[/green] Completed {n_replications} replication(s) of "
        f"{config.n_persons} persons ({preset})"
    )
    _print_coverage(results)

    if output is not None:
        frames = []
        for result in results:
            df = result.to_dataframe()
            df.insert(0, "run_index", result.run_index)
            frames.append(df)
        pd.concat(frames, ignore_index=True).to_csv(output, index=False)
        console.print(f"[green]✓[/green] Saved results to {output}")
