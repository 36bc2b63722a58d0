"""Typer based command line entry points for keyreport."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
import yaml
from pydantic import TypeAdapter, ValidationError

from .config import ReportSettings, load_settings
from .errors import ReportError
from .report import Report
from .utils.log import configure_logging, get_logger, reset_logging

app = typer.Typer(help="Fill spreadsheet templates from annotated data classes.")

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Settings YAML (see ReportSettings).")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    level_value = getattr(logging, log_level.upper(), None)
    if not isinstance(level_value, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")
    logging.getLogger("keyreport").setLevel(level_value)


def _fail(message: str, exc: BaseException) -> NoReturn:
    get_logger("cli").error("%s: %s", message, exc, exc_info=True)
    typer.secho(f"{message}: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def _load_model(reference: str) -> type:
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter("MODEL must look like 'package.module:ClassName'", param_hint="MODEL")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"Cannot import {module_name}: {exc}", param_hint="MODEL") from exc
    target: Any = module
    for part in attr.split("."):
        target = getattr(target, part, None)
        if target is None:
            raise typer.BadParameter(f"{module_name} has no attribute {attr}", param_hint="MODEL")
    if not isinstance(target, type):
        raise typer.BadParameter(f"{reference} is not a class", param_hint="MODEL")
    return target


def _settings(config: Optional[Path]) -> ReportSettings:
    settings = load_settings(config)
    if settings.log_dir is not None:
        level = logging.getLogger("keyreport").level
        reset_logging()
        configure_logging(settings.log_dir, level or logging.INFO)
    return settings


def _load_data(path: Path, model: type) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    # YAML is a superset of JSON, one loader covers both
    with path.open("r", encoding="utf-8") as fh:
        payload = yaml.safe_load(fh)
    return TypeAdapter(model).validate_python(payload)


@app.command("keys")
def cli_keys(
    model: str = typer.Argument(..., help="Root data class, e.g. 'myapp.reports:Invoice'"),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Print the key catalogue of MODEL."""

    root_type = _load_model(model)
    try:
        report = Report(root_type, _settings(config))
    except ReportError as exc:
        _fail("Unable to build key schema", exc)

    for row in report.catalogue():
        details = ", ".join(
            part
            for part in (row.key_type, row.data_type, row.date_format or row.time_format)
            if part
        )
        line = f"{row.name} ({details})" if details else row.name
        if row.temporary == "true":
            line += " [temporary]"
        typer.echo(f"{line}: {row.description}" if row.description else line)


@app.command("template")
def cli_template(
    model: str = typer.Argument(..., help="Root data class, e.g. 'myapp.reports:Invoice'"),
    output: Path = typer.Argument(..., dir_okay=False, help="Workbook to create"),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Write a blank template with the key catalogue for MODEL."""

    root_type = _load_model(model)
    try:
        path = Report(root_type, _settings(config)).create_template(output)
    except (ReportError, OSError) as exc:
        _fail("Template generation failed", exc)
    typer.echo(str(path))


@app.command("render")
def cli_render(
    model: str = typer.Argument(..., help="Root data class, e.g. 'myapp.reports:Invoice'"),
    template: Path = typer.Argument(..., dir_okay=False, help="Template workbook"),
    data: Path = typer.Argument(..., dir_okay=False, help="YAML or JSON document for MODEL"),
    output: Path = typer.Argument(..., dir_okay=False, help="Report workbook to write"),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Fill TEMPLATE with DATA and write the report to OUTPUT."""

    root_type = _load_model(model)
    try:
        report = Report(root_type, _settings(config))
        payload = _load_data(data, root_type)
        path = report.create_report(payload, template, output)
    except ValidationError as exc:
        _fail("Invalid report data", exc)
    except (ReportError, OSError, yaml.YAMLError) as exc:
        _fail("Report generation failed", exc)
    typer.echo(str(path))


__all__ = ["app"]
