"""Allow ``python -m sqlexport``."""

from sqlexport.cli.main import app

app(prog_name="sqlexport")
