"""Jinja2 header/row template compilation and streaming rendering."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Optional, Sequence, Set

from jinja2 import Environment, StrictUndefined, Template, TemplateError, UndefinedError, nodes

from ..emit.stream import TextSink
from ..errors import CompileError, ConfigError, HelperArgumentError, RenderError
from ..values import decode_text
from .helpers import HelperLibrary

# Names a template may call without them being registered helpers.
_BUILTIN_CALLABLES = {"caller", "loop", "super", "varargs", "kwargs"}

BOUND_VALUE_NAME = "data"


def _finalize(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return decode_text(value)
    return value


def build_environment(helpers: HelperLibrary) -> Environment:
    """Create a Jinja2 environment with every helper as a global and a filter."""

    env = Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
        finalize=_finalize,
    )
    env.globals.update(helpers)
    env.filters.update(helpers)
    return env


@dataclass(frozen=True)
class CompiledTemplate:
    """A parsed and compiled template, reused for every render."""

    name: str
    template: Template


def _locally_bound(ast: nodes.Template) -> Set[str]:
    names = {node.name for node in ast.find_all(nodes.Macro)}
    for node in ast.find_all(nodes.Name):
        if node.ctx in ("store", "param"):
            names.add(node.name)
    return names


def _check_calls(ast: nodes.Template, env: Environment, name: str) -> None:
    known = set(env.globals) | _BUILTIN_CALLABLES | _locally_bound(ast)
    for call in ast.find_all(nodes.Call):
        target = call.node
        if isinstance(target, nodes.Name) and target.name not in known:
            raise CompileError(name, f"unknown helper '{target.name}'", target.lineno)


def compile_template(source: str, helpers: HelperLibrary, name: str) -> CompiledTemplate:
    """
    Compile ``source`` against ``helpers``.

    Syntax errors, unknown filters and calls to names that are neither
    registered helpers nor Jinja2 globals raise ``CompileError``.
    """

    env = build_environment(helpers)
    try:
        ast = env.parse(source, name=name)
        _check_calls(ast, env, name)
        template = env.from_string(source)
    except TemplateError as exc:
        raise CompileError(name, exc.message or str(exc), getattr(exc, "lineno", None)) from exc
    return CompiledTemplate(name=name, template=template)


def compile_header(source: str, helpers: HelperLibrary) -> CompiledTemplate:
    return compile_template(source, helpers, "header")


def compile_row(source: str, helpers: HelperLibrary) -> CompiledTemplate:
    return compile_template(source, helpers, "row")


def _context(value: object) -> dict:
    context = {}
    if isinstance(value, Mapping):
        context.update((str(key), item) for key, item in value.items())
    context[BOUND_VALUE_NAME] = value
    return context


def _evaluate(compiled: CompiledTemplate, value: object) -> Iterator[str]:
    try:
        yield from compiled.template.generate(_context(value))
    except UndefinedError as exc:
        raise RenderError(compiled.name, exc.message or str(exc)) from exc
    except HelperArgumentError as exc:
        raise RenderError(compiled.name, str(exc)) from exc
    except TemplateError as exc:
        raise RenderError(compiled.name, exc.message or str(exc)) from exc
    except (ArithmeticError, AttributeError, LookupError, TypeError, ValueError) as exc:
        raise RenderError(compiled.name, f"{type(exc).__name__}: {exc}") from exc


def render(compiled: CompiledTemplate, value: object, sink: TextSink) -> None:
    """
    Evaluate ``compiled`` against ``value`` and stream the chunks into ``sink``.

    The bound value is exposed as ``data``; mapping keys are also exposed as
    top-level names. Chunks produced before a failure stay written. Errors
    raised by the sink itself are not wrapped.
    """

    for chunk in _evaluate(compiled, value):
        sink.write(chunk)


class TemplateRenderer:
    """Own the compiled header and row templates for one export run."""

    def __init__(
        self,
        header_source: str,
        row_source: str,
        helpers: Optional[HelperLibrary] = None,
    ) -> None:
        self.helpers = helpers if helpers is not None else HelperLibrary.default()
        self.header = compile_header(header_source, self.helpers)
        self.row = compile_row(row_source, self.helpers)

    @classmethod
    def from_files(
        cls,
        header_path: str | Path,
        row_path: str | Path,
        helpers: Optional[HelperLibrary] = None,
    ) -> "TemplateRenderer":
        """Read both template files (UTF-8) and compile them."""

        sources = []
        for label, path in (("header", header_path), ("row", row_path)):
            try:
                sources.append(Path(path).read_text(encoding="utf-8"))
            except OSError as exc:
                raise ConfigError(f"Open {label} template file: {exc}") from exc
        return cls(sources[0], sources[1], helpers=helpers)

    def render_header(self, columns: Sequence[str], sink: TextSink) -> None:
        render(self.header, list(columns), sink)

    def render_row(self, row: Mapping[str, object], sink: TextSink) -> None:
        render(self.row, row, sink)
