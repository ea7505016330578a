"""CLI for the strainlab score engine."""

import logging
from dataclasses import replace

import click

logger = logging.getLogger(__name__)


def _settings(max_hr: float | None, sleep_need: float | None, verbose: bool):
    from strainlab.config import EngineSettings

    overrides = {}
    if max_hr is not None:
        overrides["max_heart_rate"] = max_hr
    if sleep_need is not None:
        overrides["sleep_need_minutes"] = sleep_need
    if verbose:
        overrides["log_level"] = "DEBUG"
    settings = EngineSettings(**overrides)
    settings.configure_logging()
    return settings


def _baseline_for(engine, day_file, settings, max_hr, sleep_need):
    """Stored snapshot if the file has one, else computed from its history."""
    profile = day_file.profile
    max_heart_rate = (
        max_hr if max_hr is not None
        else profile.get("max_heart_rate", settings.max_heart_rate)
    )
    sleep_need_minutes = (
        sleep_need if sleep_need is not None
        else profile.get("sleep_need_minutes", settings.sleep_need_minutes)
    )

    if day_file.baseline is not None:
        return replace(
            day_file.baseline,
            max_heart_rate=max_heart_rate,
            sleep_need_minutes=sleep_need_minutes,
        )
    return engine.update_baseline(
        day_file.hrv_history,
        day_file.rhr_history,
        day_file.inputs.day,
        sleep_need_minutes=sleep_need_minutes,
        max_heart_rate=max_heart_rate,
    )


@click.group()
def main() -> None:
    """strainlab: recovery, strain and sleep scores from heart-rate data."""


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-hr", default=None, type=float, help="Max HR (bpm); overrides the file profile.")
@click.option("--sleep-need", default=None, type=float, help="Sleep need in minutes.")
@click.option(
    "--intensity",
    type=click.Choice(["light", "moderate", "intense", "very_intense"]),
    default="moderate",
    help="Preferred training intensity for the strain guidance.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full summary as JSON.")
@click.option("--output", "-o", default=None, help="Write the summary JSON to a file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def score(
    file: str,
    max_hr: float | None,
    sleep_need: float | None,
    intensity: str,
    as_json: bool,
    output: str | None,
    verbose: bool,
) -> None:
    """Score one day file (strain, sleep and recovery)."""
    from strainlab.analytics.guidance import TrainingIntensity
    from strainlab.config import ConfigurationError
    from strainlab.loader import load_day

    try:
        settings = _settings(max_hr, sleep_need, verbose)
        day_file = load_day(file)
        engine = settings.build_engine()
        baseline = _baseline_for(engine, day_file, settings, max_hr, sleep_need)
        summary = engine.score_day(
            day_file.inputs, baseline, intensity=TrainingIntensity(intensity),
        )
    except (ConfigurationError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    logger.debug("Scored %s", file)

    if as_json:
        click.echo(summary.to_json())
    else:
        recovery = summary.recovery
        strain = summary.strain
        sleep = summary.sleep
        guidance = summary.guidance

        click.echo(f"\n{'=' * 60}")
        click.echo(f"  Daily Summary: {summary.date}")
        click.echo(f"{'=' * 60}")
        if recovery.score is None:
            click.echo("  Recovery:   -- (baseline not established)")
        else:
            click.echo(f"  Recovery:   {recovery.score:.0f}/100 "
                       f"({recovery.category.display_name})")
        click.echo(f"  Strain:     {strain.score:.1f}/21 "
                   f"({strain.category.display_name}, load {strain.raw_load:.0f})")
        if sleep is not None:
            click.echo(f"  Sleep:      {sleep.score:.0f}/100 ({sleep.category}, "
                       f"{sleep.total_duration_minutes:.0f} min, eff {sleep.efficiency:.0%})")
        else:
            click.echo("  Sleep:      -- (no session)")
        click.echo(f"  Target:     {guidance.formatted_range} "
                   f"({guidance.weekly_load_status.value})")
        click.echo(f"  Confidence: {summary.quality.confidence_level.value}")
        click.echo(f"  Insight:    {summary.insight.headline}")
        click.echo(f"{'=' * 60}")

    if output:
        with open(output, "w") as f:
            f.write(summary.to_json())
        click.echo(f"\nSummary written to {output}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--window", default=None, type=int, help="Rolling window in days.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def baseline(file: str, window: int | None, verbose: bool) -> None:
    """Compute the HRV / resting HR baseline from a day file's history."""
    from strainlab.config import ConfigurationError, EngineSettings
    from strainlab.loader import load_day

    try:
        overrides = {"log_level": "DEBUG"} if verbose else {}
        if window is not None:
            overrides["baseline_window_days"] = window
        settings = EngineSettings(**overrides)
        settings.configure_logging()
        day_file = load_day(file)
        engine = settings.build_engine()
        snapshot = _baseline_for(engine, day_file, settings, None, None)
        hrv = engine.baseline.compute(day_file.hrv_history)
        rhr = engine.baseline.compute(day_file.rhr_history)
    except (ConfigurationError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    for label, unit, estimate in (("HRV", "ms", hrv), ("Resting HR", "bpm", rhr)):
        if estimate.established:
            click.echo(f"{label + ':':<12}{estimate.value:.1f} {unit} "
                       f"({estimate.days_available} days)")
        else:
            click.echo(f"{label + ':':<12}not established "
                       f"({estimate.days_remaining} more days needed)")
    click.echo(f"{'Max HR:':<12}{snapshot.max_heart_rate:.0f} bpm")
    click.echo(f"{'Sleep need:':<12}{snapshot.sleep_need_minutes:.0f} min")
