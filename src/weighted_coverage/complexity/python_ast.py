"""Complexity of Python sources from the standard ``ast`` module.

Each module yields one ``unit`` space covering every physical line, plus a
space per class and function (nested ones included). A space's complexity
only counts its own code: the bodies of nested classes and functions are
measured in their own spaces.
"""

from __future__ import annotations

import ast
from pathlib import PurePosixPath
from typing import List, Optional, Union

from ..exceptions import PerFileError
from ..logging_config import get_logger
from ..models import CodeSpace, SpaceKind
from .base import ComplexityProvider

logger = get_logger(__name__)

_Def = Union[ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef]
_DEF_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)


class _CyclomaticVisitor(ast.NodeVisitor):
    """McCabe complexity: one plus the number of decision points."""

    def __init__(self) -> None:
        self.complexity = 1

    def _branch(self, node: ast.AST) -> None:
        self.complexity += 1
        self.generic_visit(node)

    visit_If = _branch
    visit_IfExp = _branch
    visit_For = _branch
    visit_AsyncFor = _branch
    visit_While = _branch
    visit_ExceptHandler = _branch
    visit_match_case = _branch

    def visit_BoolOp(self, node: ast.BoolOp) -> None:  # noqa: N802
        """Each extra operand of and/or is another path."""
        self.complexity += len(node.values) - 1
        self.generic_visit(node)

    def visit_comprehension(self, node: ast.comprehension) -> None:  # noqa: N802
        self.complexity += 1 + len(node.ifs)
        self.generic_visit(node)

    def _nested(self, node: ast.AST) -> None:
        pass

    visit_FunctionDef = _nested
    visit_AsyncFunctionDef = _nested
    visit_ClassDef = _nested


class _CognitiveVisitor:
    """Cognitive complexity: structural increments weighted by nesting.

    ``if``/loops/``except``/``match``/conditional expressions cost one plus
    the current nesting level; ``elif`` and ``else`` cost one flat; every
    run of like boolean operators costs one. Recursion is not counted.
    """

    def __init__(self) -> None:
        self.complexity = 0

    def walk(self, node: ast.AST, nesting: int) -> None:
        for child in ast.iter_child_nodes(node):
            self.visit(child, nesting)

    def visit_all(self, nodes: List[ast.AST], nesting: int) -> None:
        for node in nodes:
            self.visit(node, nesting)

    def visit(self, node: ast.AST, nesting: int, parent_op: Optional[type] = None) -> None:
        if isinstance(node, _DEF_NODES):
            return
        if isinstance(node, ast.If):
            self._if(node, nesting, is_elif=False)
        elif isinstance(node, (ast.For, ast.AsyncFor, ast.While)):
            self._loop(node, nesting)
        elif isinstance(node, (ast.Try, ast.TryStar)):
            self._try(node, nesting)
        elif isinstance(node, ast.Match):
            self.complexity += 1 + nesting
            self.visit(node.subject, nesting)
            for case in node.cases:
                if case.guard is not None:
                    self.visit(case.guard, nesting + 1)
                self.visit_all(case.body, nesting + 1)
        elif isinstance(node, ast.IfExp):
            self.complexity += 1 + nesting
            self.walk(node, nesting + 1)
        elif isinstance(node, ast.BoolOp):
            if type(node.op) is not parent_op:
                self.complexity += 1
            for value in node.values:
                self.visit(value, nesting, parent_op=type(node.op))
        elif isinstance(node, ast.Lambda):
            self.walk(node, nesting + 1)
        else:
            self.walk(node, nesting)

    def _if(self, node: ast.If, nesting: int, is_elif: bool) -> None:
        self.complexity += 1 if is_elif else 1 + nesting
        self.visit(node.test, nesting)
        self.visit_all(node.body, nesting + 1)

        orelse = node.orelse
        if len(orelse) == 1 and isinstance(orelse[0], ast.If):
            self._if(orelse[0], nesting, is_elif=True)
        elif orelse:
            self.complexity += 1
            self.visit_all(orelse, nesting + 1)

    def _loop(self, node: Union[ast.For, ast.AsyncFor, ast.While], nesting: int) -> None:
        self.complexity += 1 + nesting
        if isinstance(node, ast.While):
            self.visit(node.test, nesting)
        else:
            self.visit(node.iter, nesting)
        self.visit_all(node.body, nesting + 1)
        if node.orelse:
            self.complexity += 1
            self.visit_all(node.orelse, nesting + 1)

    def _try(self, node: Union[ast.Try, ast.TryStar], nesting: int) -> None:
        self.visit_all(node.body, nesting)
        for handler in node.handlers:
            self.complexity += 1 + nesting
            self.visit_all(handler.body, nesting + 1)
        self.visit_all(node.orelse, nesting)
        self.visit_all(node.finalbody, nesting)


def cyclomatic_complexity(node: ast.AST) -> int:
    """Own cyclomatic complexity of a module, class or function node."""
    visitor = _CyclomaticVisitor()
    visitor.generic_visit(node)
    return visitor.complexity


def cognitive_complexity(node: ast.AST) -> int:
    """Own cognitive complexity of a module, class or function node."""
    visitor = _CognitiveVisitor()
    visitor.walk(node, 0)
    return visitor.complexity


def _start_line(node: _Def) -> int:
    # Decorators belong to the definition they wrap
    return min([node.lineno] + [d.lineno for d in node.decorator_list])


class PythonComplexityProvider(ComplexityProvider):
    """Code spaces of ``.py`` files."""

    name = "python"
    extensions = (".py",)

    def extract(self, path: str, source: str) -> List[CodeSpace]:
        try:
            tree = ast.parse(source, filename=path)
        except SyntaxError as e:
            raise PerFileError(path, f"syntax error: {e.msg} (line {e.lineno})")
        except ValueError as e:
            raise PerFileError(path, f"cannot parse: {e}")

        spaces = [
            CodeSpace(
                kind=SpaceKind.UNIT,
                name=PurePosixPath(path).name,
                start_line=1,
                end_line=len(source.splitlines()),
                cyclomatic=cyclomatic_complexity(tree),
                cognitive=cognitive_complexity(tree),
            )
        ]
        self._collect(tree, "", spaces)

        logger.debug(f"{path}: {len(spaces)} code spaces")
        return spaces

    def _collect(self, node: ast.AST, prefix: str, spaces: List[CodeSpace]) -> None:
        for child in ast.iter_child_nodes(node):
            if isinstance(child, _DEF_NODES):
                name = f"{prefix}{child.name}"
                kind = SpaceKind.CLASS if isinstance(child, ast.ClassDef) else SpaceKind.FUNCTION
                spaces.append(
                    CodeSpace(
                        kind=kind,
                        name=name,
                        start_line=_start_line(child),
                        end_line=child.end_lineno or child.lineno,
                        cyclomatic=cyclomatic_complexity(child),
                        cognitive=cognitive_complexity(child),
                    )
                )
                self._collect(child, f"{name}.", spaces)
            else:
                self._collect(child, prefix, spaces)
