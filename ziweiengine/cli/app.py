"""Primary Typer application for the ZiWeiEngine CLI."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from ziweiengine.boot.logging import configure_logging
from ziweiengine.config import (
    Settings,
    default_settings,
    ensure_default_config,
    load_settings,
)
from ziweiengine.zi_wei import (
    BirthInput,
    ZiWeiChart,
    ZiWeiError,
    career_palace,
    compute_zi_wei_chart,
    current_major_limit_palace,
    wealth_palace,
)
from ziweiengine.zi_wei.chart import ZiWeiStar
from ziweiengine.zi_wei.profile_bars import (
    career_bars_for_chart,
    execution_style_for_chart,
    life_bars_for_chart,
    wealth_bars_for_chart,
)
from ziweiengine.zi_wei.wealth_code import wealth_codes_for_chart

app = typer.Typer(help="ZiWeiEngine command line interface.")
config_app = typer.Typer(help="Inspect and initialise the settings file.")
app.add_typer(config_app, name="config")


def _resolve_date(value: str, *, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"{option}: use ISO-8601 dates (YYYY-MM-DD)") from exc


def _settings_from(path: Optional[Path]) -> Settings:
    if path is None:
        return default_settings()
    if not path.exists():
        raise typer.BadParameter(f"Settings file not found: {path}")
    try:
        return load_settings(path)
    except (ValidationError, yaml.YAMLError) as exc:
        raise typer.BadParameter(f"Invalid settings file {path}: {exc}") from exc


def _format_star(star: ZiWeiStar) -> str:
    tags = "".join(item.value[-1] for item in star.transformations)
    self_tags = "".join(item.value[-1] for item in star.self_influence)
    label = star.name.value
    if tags:
        label += f"[{tags}]"
    if self_tags:
        label += f"(自{self_tags})"
    return label


def _format_star_list(stars) -> str:
    names = ", ".join(_format_star(star) for star in stars)
    return names or "-"


def _echo_chart(chart: ZiWeiChart, *, show_trace: bool) -> None:
    lunar = chart.lunar_date
    typer.echo(
        f"Birth: {chart.birth.describe()} | Lunar: {lunar.label()} | "
        f"Year: {chart.year_stem.chinese}{chart.year_branch.chinese} ({chart.polarity.value})"
    )
    main_star = chart.main_star.value if chart.main_star else "-"
    typer.echo(
        f"Life Palace: {chart.life_palace} ({chart.life.branch.chinese}) | "
        f"Five Elements: {chart.five_element.value} | Main Star: {main_star}"
    )
    typer.echo(
        f"Wealth: {wealth_palace(chart).name.value} | Career: {career_palace(chart).name.value}"
    )
    current = current_major_limit_palace(chart)
    if current is not None:
        typer.echo(
            f"Current Major Limit: {current.name.value} ({current.major_limit.label()})"
        )
    typer.echo("")
    for palace in chart.palaces:
        typer.echo(
            f"{palace.position:>2} {palace.stem.chinese}{palace.branch.chinese} "
            f"{palace.name.value:<3} {palace.major_limit.label():>7} "
            f"{palace.annual_flow.year}: {_format_star_list(palace.stars)}"
        )
    if show_trace:
        typer.echo("")
        for stage, message in chart.trace.items():
            typer.echo(f"{stage}: {message}")


def _profile_payload(chart: ZiWeiChart) -> dict[str, Any]:
    execution = execution_style_for_chart(chart)
    return {
        "wealth_codes": [code.value for code in wealth_codes_for_chart(chart)],
        "execution_style": execution.style.value if execution else None,
        "life_bars": {axis.value: bar for axis, bar in life_bars_for_chart(chart).items()},
        "wealth_bars": {axis.value: bar for axis, bar in wealth_bars_for_chart(chart).items()},
        "career_bars": {axis.value: bar for axis, bar in career_bars_for_chart(chart).items()},
    }


def _echo_profile(profile: dict[str, Any]) -> None:
    typer.echo("")
    typer.echo(f"Wealth Codes: {', '.join(profile['wealth_codes']) or '-'}")
    typer.echo(f"Execution Style: {profile['execution_style'] or '-'}")
    for key in ("life_bars", "wealth_bars", "career_bars"):
        bars = ", ".join(f"{axis} {bar}" for axis, bar in profile[key].items())
        typer.echo(f"{key.replace('_', ' ').title()}: {bars}")


@app.command("chart")
def cli_chart(
    birth_date: str = typer.Argument(..., metavar="YYYY-MM-DD", help="Gregorian birth date."),
    hour: int = typer.Option(..., "--hour", min=0, max=23, help="Birth clock hour (0-23)."),
    gender: str = typer.Option(..., "--gender", help="Either 'male' or 'female'."),
    name: str = typer.Option("", "--name", help="Optional label carried on the chart."),
    as_of: Optional[str] = typer.Option(
        None, "--as-of", help="Date selecting the annual flow cycle (defaults to today)."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Settings YAML file (defaults to built-in settings)."
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit the chart as JSON."),
    show_trace: bool = typer.Option(False, "--trace", help="Print the per-stage trace."),
    show_profile: bool = typer.Option(
        False, "--profile", help="Add wealth codes, execution style and palace bars."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    """Compute a Zi Wei Dou Shu chart for the supplied birth data."""

    configure_logging(level=log_level)
    born = _resolve_date(birth_date, option="birth date")
    moment = _resolve_date(as_of, option="--as-of") if as_of else None
    settings = _settings_from(config)

    try:
        birth = BirthInput(
            year=born.year,
            month=born.month,
            day=born.day,
            hour=hour,
            gender=gender,
            subject_label=name,
        )
        chart = compute_zi_wei_chart(birth, as_of=moment, settings=settings)
    except ZiWeiError as exc:
        typer.secho(f"Chart calculation failed: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(1) from exc

    profile = _profile_payload(chart) if show_profile else None
    if json_output:
        payload = chart.to_dict()
        if profile is not None:
            payload["profile"] = profile
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    _echo_chart(chart, show_trace=show_trace)
    if profile is not None:
        _echo_profile(profile)


@config_app.command("init")
def cli_config_init() -> None:
    """Write the default settings file if none exists and print its path."""

    typer.echo(str(ensure_default_config()))


@config_app.command("show")
def cli_config_show(
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file."),
) -> None:
    """Print the effective settings as YAML."""

    settings = _settings_from(config)
    typer.echo(yaml.safe_dump(settings.model_dump(), sort_keys=False, allow_unicode=True))


def main() -> None:
    app()
