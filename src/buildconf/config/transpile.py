"""
Lowering of typed config files into the plain dialect run by the sandboxed evaluator.

Annotations are kept as written: they parse on every supported interpreter and class
bodies depend on them at runtime (dataclasses, ``NamedTuple``, pydantic models).
Only syntax newer than the target is rewritten, namely ``type`` alias statements and
PEP 695 type parameters.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from typing import Literal, Optional

from buildconf.diagnostics import Diagnostic, catch_error, has_error

logger = logging.getLogger(__name__)

_TypeAlias = getattr(ast, "TypeAlias", None)

_EXPORT_INTEROP_EPILOGUE = """
if not hasattr(exports, "config") and "config" in globals():
    exports.config = globals()["config"]
"""

@dataclass(frozen=True, slots=True)
class TranspileOptions:
    module_kind: Literal["exports", "module"] = "exports"
    export_interop: bool = True
    target: tuple[int, int] = (3, 10)
    report_diagnostics: bool = False


# Parse errors are not reported here: they surface as evaluation errors when the
# unchanged source is executed.
CONFIG_TRANSPILE_OPTIONS = TranspileOptions()


def _typing_attr(name: str) -> ast.expr:
    module = ast.Call(func=ast.Name(id="__import__", ctx=ast.Load()), args=[ast.Constant("typing")], keywords=[])
    return ast.Attribute(value=module, attr=name, ctx=ast.Load())


def _bind_type_params(type_params: list, anchor: ast.AST) -> list[ast.stmt]:
    bindings: list[ast.stmt] = []
    for param in type_params:
        args: list[ast.expr] = [ast.Constant(param.name)]
        keywords: list[ast.keyword] = []
        bound = getattr(param, "bound", None)
        if isinstance(bound, ast.Tuple):
            args.extend(bound.elts)
        elif bound is not None:
            keywords.append(ast.keyword(arg="bound", value=bound))
        # ast.TypeVar, ast.ParamSpec and ast.TypeVarTuple share their names with the typing factories.
        call = ast.Call(func=_typing_attr(type(param).__name__), args=args, keywords=keywords)
        target = ast.Name(id=param.name, ctx=ast.Store())
        bindings.append(ast.copy_location(ast.Assign(targets=[target], value=call), anchor))
    return bindings


def _generic_base(type_params: list) -> ast.expr:
    elts: list[ast.expr] = []
    for param in type_params:
        name = ast.Name(id=param.name, ctx=ast.Load())
        if type(param).__name__ == "TypeVarTuple":
            name = ast.Subscript(value=_typing_attr("Unpack"), slice=name, ctx=ast.Load())
        elts.append(name)
    slice_ = elts[0] if len(elts) == 1 else ast.Tuple(elts=elts, ctx=ast.Load())
    return ast.Subscript(value=_typing_attr("Generic"), slice=slice_, ctx=ast.Load())


def _bound_names(stmt: ast.stmt) -> set[str]:
    names: set[str] = set()
    if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
        names.add(stmt.name)
    elif _TypeAlias is not None and isinstance(stmt, _TypeAlias):
        names.add(stmt.name.id)
    elif isinstance(stmt, (ast.Import, ast.ImportFrom)):
        for alias in stmt.names:
            names.add(alias.asname or alias.name.split(".")[0])
    elif isinstance(stmt, (ast.Assign, ast.AnnAssign, ast.AugAssign)):
        targets = stmt.targets if isinstance(stmt, ast.Assign) else [stmt.target]
        for target in targets:
            names.update(n.id for n in ast.walk(target) if isinstance(n, ast.Name))
    return names


class _QuoteNames(ast.NodeTransformer):
    def __init__(self, names: set[str]) -> None:
        self._names = names

    def visit_Name(self, node: ast.Name) -> ast.AST:
        if isinstance(node.ctx, ast.Load) and node.id in self._names:
            return ast.copy_location(ast.Constant(node.id), node)
        return node


def _quote_forward_references(body: list[ast.stmt]) -> None:
    # Alias values are lazy; once assigned eagerly, names bound later in the same
    # block become string forward references.
    for index, stmt in enumerate(body):
        if not isinstance(stmt, _TypeAlias):
            continue
        earlier: set[str] = set()
        for prior in body[:index]:
            earlier |= _bound_names(prior)
        later: set[str] = set()
        for following in body[index + 1 :]:
            later |= _bound_names(following)
        later.add(stmt.name.id)
        params = {p.name for p in stmt.type_params}
        forward = later - earlier - params
        if forward:
            stmt.value = _QuoteNames(forward).visit(stmt.value)


class _TypeParamLowering(ast.NodeTransformer):
    def __init__(self) -> None:
        self.changed = False

    def _visit_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> list[ast.stmt]:
        self.generic_visit(node)
        params = list(getattr(node, "type_params", None) or [])
        if not params:
            return [node]
        self.changed = True
        node.type_params = []  # type: ignore[attr-defined]
        return [*_bind_type_params(params, node), node]

    def visit_FunctionDef(self, node: ast.FunctionDef) -> list[ast.stmt]:
        return self._visit_function(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> list[ast.stmt]:
        return self._visit_function(node)

    def visit_ClassDef(self, node: ast.ClassDef) -> list[ast.stmt]:
        self.generic_visit(node)
        params = list(getattr(node, "type_params", None) or [])
        if not params:
            return [node]
        self.changed = True
        node.type_params = []  # type: ignore[attr-defined]
        node.bases.append(_generic_base(params))
        return [*_bind_type_params(params, node), node]

    def visit_TypeAlias(self, node) -> list[ast.stmt]:
        self.generic_visit(node)
        self.changed = True
        target = ast.Name(id=node.name.id, ctx=ast.Store())
        assign = ast.copy_location(ast.Assign(targets=[target], value=node.value), node)
        return [*_bind_type_params(list(node.type_params), node), assign]


def _append_export_interop(tree: ast.Module) -> None:
    epilogue = ast.parse(_EXPORT_INTEROP_EPILOGUE)
    tree.body.extend(epilogue.body)


def transpile_typed_config(
    diagnostics: list[Diagnostic],
    source_text: str,
    file_path: str,
    options: Optional[TranspileOptions] = None,
) -> str:
    """
    Transpile a typed config file into plain source for the sandboxed evaluator.

    Args:
        diagnostics: The shared diagnostics of the current load. If it already
            holds an error, ``source_text`` is returned unchanged.
        source_text: The text of the config file.
        file_path: Used for error locations only.
        options: Defaults to ``CONFIG_TRANSPILE_OPTIONS``.

    Returns:
        The transpiled text, or ``source_text`` when nothing could be done.
    """
    if has_error(diagnostics):
        return source_text

    opts = options or CONFIG_TRANSPILE_OPTIONS

    try:
        tree = ast.parse(source_text, filename=file_path)
    except SyntaxError as exc:
        if opts.report_diagnostics:
            catch_error(diagnostics, exc)
        else:
            logger.debug("Config file did not parse, leaving it unchanged. path=%s", file_path)
        return source_text

    lowered = False
    if _TypeAlias is not None and opts.target < (3, 12):
        for node in ast.walk(tree):
            body = getattr(node, "body", None)
            if isinstance(body, list):
                _quote_forward_references(body)
        lowering = _TypeParamLowering()
        tree = lowering.visit(tree)
        lowered = lowering.changed

    interop = opts.module_kind == "exports" and opts.export_interop

    if not lowered:
        # Untouched source keeps its line numbers for runtime error locations.
        logger.debug("Config file has no syntax to lower. path=%s", file_path)
        if not interop:
            return source_text
        separator = "" if source_text.endswith("\n") or not source_text else "\n"
        return source_text + separator + _EXPORT_INTEROP_EPILOGUE.lstrip("\n")

    if interop:
        _append_export_interop(tree)

    ast.fix_missing_locations(tree)
    return ast.unparse(tree)
