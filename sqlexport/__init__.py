"""
SQL template export (sqlexport) package.

This package runs a single SQL query and streams its result set through a
pair of Jinja2 templates (a header rendered once against the column names and
a row template rendered once per record), producing CSV, SQL INSERT
statements, JSON or any other text format.
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "datasource",
    "emit",
    "export",
    "rows",
    "templates",
    "values",
    "cli",
]
