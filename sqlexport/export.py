"""Export driver: one query, one header render, one row render per record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog

from .datasource.base import DataSource, QueryResult
from .emit.stream import TextSink
from .errors import QueryError, RenderError, RowScanError
from .rows import RowMaterializer
from .templates.renderer import TemplateRenderer

logger = structlog.get_logger(__name__)


class ExportState(Enum):
    INIT = "init"
    EXECUTED = "executed"
    HEADER_RENDERED = "header_rendered"
    ROW_RENDERED = "row_rendered"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class ExportStats:
    """Counters reported at the end of a run."""

    rows_total: int = 0
    rows_written: int = 0
    rows_failed: int = 0
    header_ok: bool = True


class Exporter:
    """
    Drive a single export run.

    The templates are compiled before the exporter exists, so setup here is
    only executing the query. ``execute`` runs it without touching any
    output, which lets a caller open its sink only once the query is known
    to work. Failures there (and a failure to advance the cursor) are fatal
    and propagate as ``QueryError``. Scan, render and output-encoding
    failures of a single record are logged with the 1-based record ordinal
    and the loop moves on. Closing the cursor and connection happens in
    reverse acquisition order and never raises.
    """

    def __init__(self, source: DataSource, renderer: TemplateRenderer) -> None:
        self.source = source
        self.renderer = renderer
        self.state = ExportState.INIT
        self.stats = ExportStats()
        self._result: Optional[QueryResult] = None

    def execute(self, sql: str) -> QueryResult:
        try:
            self._result = self.source.execute(sql)
        except QueryError:
            self.state = ExportState.ABORTED
            self.close()
            raise
        self.state = ExportState.EXECUTED
        return self._result

    def stream(self, sink: TextSink) -> ExportStats:
        if self._result is None:
            raise RuntimeError("stream() called before execute()")
        try:
            self._stream(self._result, sink)
        except QueryError:
            self.state = ExportState.ABORTED
            raise
        finally:
            self.close()
        self.state = ExportState.DONE
        return self.stats

    def run(self, sql: str, sink: TextSink) -> ExportStats:
        self.execute(sql)
        return self.stream(sink)

    def _stream(self, result: QueryResult, sink: TextSink) -> None:
        columns = result.columns
        materializer = RowMaterializer(columns)
        dupes = materializer.duplicates()
        if dupes:
            logger.warning("duplicate_columns", columns=dupes)

        try:
            self.renderer.render_header(columns, sink)
        except (RenderError, UnicodeEncodeError) as exc:
            self.stats.header_ok = False
            logger.error("header_template_failed", error=str(exc))
        self.state = ExportState.HEADER_RENDERED

        for ordinal, record in enumerate(result.records(), start=1):
            self.stats.rows_total += 1
            try:
                row = materializer.materialize(record, ordinal)
            except RowScanError as exc:
                self.stats.rows_failed += 1
                logger.error("row_scan_failed", row=ordinal, error=str(exc))
                continue
            try:
                self.renderer.render_row(row, sink)
            except RenderError as exc:
                self.stats.rows_failed += 1
                logger.error("row_template_failed", row=ordinal, error=str(exc))
                continue
            except UnicodeEncodeError as exc:
                # the sink rejected a chunk; earlier chunks of the row are already out
                self.stats.rows_failed += 1
                logger.error("row_encode_failed", row=ordinal, error=str(exc))
                continue
            self.stats.rows_written += 1
            self.state = ExportState.ROW_RENDERED

    def close(self) -> None:
        """Release the cursor and then the connection; safe to call twice."""

        result, self._result = self._result, None
        if result is not None:
            try:
                result.close()
            except Exception as exc:
                logger.warning("query_close_failed", error=str(exc))
        try:
            self.source.close()
        except Exception as exc:
            logger.warning("database_close_failed", error=str(exc))


def run_export(source: DataSource, sql: str, renderer: TemplateRenderer, sink: TextSink) -> ExportStats:
    """Run one export of ``sql`` from ``source`` into ``sink``."""

    return Exporter(source, renderer).run(sql, sink)
