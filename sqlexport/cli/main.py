"""Typer-based CLI entry point for template-driven SQL exports."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog
import typer

# ---- project imports ----
from sqlexport import __version__
from sqlexport.config import DEFAULT_CONFIG_PATH, load_config, read_sql
from sqlexport.datasource.base import DataSource
from sqlexport.datasource.postgres import PostgresDataSource
from sqlexport.datasource.sqlite import SQLiteDataSource
from sqlexport.emit.stream import open_output
from sqlexport.errors import ConfigError, ExportError
from sqlexport.export import Exporter
from sqlexport.logging_config import LoggingSetupError, setup_logging
from sqlexport.templates.helpers import HelperLibrary
from sqlexport.templates.renderer import TemplateRenderer

logger = structlog.get_logger(__name__)

# -----------------------------------------------------------------------------
# Typer app
# -----------------------------------------------------------------------------
app = typer.Typer(help="Export the result of one SQL query through header/row templates.")


# -----------------------------------------------------------------------------
# Utility helpers
# -----------------------------------------------------------------------------
def _create_source(sql_type: str, connect_string: str, batch_size: int) -> DataSource:
    """Factory for query executors."""
    kind = sql_type.lower()
    if kind in {"postgres", "postgresql"}:
        return PostgresDataSource(dsn=connect_string, batch_size=batch_size)
    if kind in {"sqlite", "sqlite3"}:
        return SQLiteDataSource(path=connect_string, batch_size=batch_size)
    raise ConfigError(f"Unsupported sql_type: {sql_type}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"SQL Template Data Export version: v{__version__}")
        raise typer.Exit()


# -----------------------------------------------------------------------------
# EXPORT: header once, row template per record, to stdout or --output
# -----------------------------------------------------------------------------
@app.command(name="export")
def export(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Config file (TOML or YAML)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout."),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level for stderr diagnostics."),
    version: bool = typer.Option(
        False, "--version", "-v", callback=_version_callback, is_eager=True, help="Prints version."
    ),
) -> None:
    """Run the configured query and render every row through the templates."""
    try:
        setup_logging(log_level)
    except LoggingSetupError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    try:
        cfg = load_config(config)
        sql = read_sql(cfg.sql_file)
        renderer = TemplateRenderer.from_files(
            cfg.header_tmpl_file, cfg.row_tmpl_file, helpers=HelperLibrary.default()
        )
        source = _create_source(cfg.sql_type, cfg.connect_string, cfg.batch_size)
        # Query first: a connect or SQL failure must not truncate an existing --output file.
        exporter = Exporter(source, renderer)
        exporter.execute(sql)
        try:
            with open_output(output, encoding=cfg.output_encoding) as sink:
                stats = exporter.stream(sink)
        finally:
            exporter.close()
    except ExportError as exc:
        logger.error("export_aborted", error=str(exc))
        raise typer.Exit(code=1)

    logger.info(
        "export_finished",
        rows=stats.rows_total,
        written=stats.rows_written,
        failed=stats.rows_failed,
        header_ok=stats.header_ok,
    )


# Allow `python -m sqlexport.cli.main` direct execution (and `python -m sqlexport`)
if __name__ == "__main__":
    app()
