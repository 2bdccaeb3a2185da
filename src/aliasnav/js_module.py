#!/usr/bin/env python3
"""Evaluation of executable JavaScript config modules.

``webpack.config.js`` and ``vue.config.js`` are code, not data. This module
turns them into plain Python data (dicts, lists, strings, numbers) so that
alias tables can be read out of them. Two evaluators are provided:

- NodeModuleEvaluator: asks a real ``node`` process to ``require()`` the
  file and print its exports as JSON.
- StaticModuleEvaluator: never executes anything. Parses the file with
  tree-sitter and interprets the small subset of JavaScript that alias
  declarations are usually written in (literals, ``path.resolve``,
  ``__dirname``, top-level constants and one-line helper functions).

Example:
    >>> evaluator = StaticModuleEvaluator()
    >>> config = evaluator.evaluate(Path('/my/project/webpack.config.js'))
    >>> config['resolve']['alias']
    {'@': '/my/project/src'}
"""

import codecs
import json
import logging
import os
import posixpath
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import tree_sitter_javascript as ts_javascript
from tree_sitter import Language, Parser

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)

NODE_ENV_VAR = "ALIASNAV_NODE"

# Prints the module's exports as JSON; ES modules compiled to CJS expose `default`.
_NODE_SCRIPT = (
    "const mod = require(process.argv[1]);"
    "const value = mod && mod.__esModule ? mod.default : mod;"
    "process.stdout.write(JSON.stringify(value === undefined ? null : value));"
)


class ModuleEvaluator(ABC):
    """Turns a JavaScript config module into plain Python data."""

    name = "module"

    @abstractmethod
    def evaluate(self, path: Path) -> Optional[Any]:
        """Evaluate the module at ``path``.

        Returns:
            The exported value as JSON-like Python data, or None when the
            module cannot be evaluated.
        """


def find_node() -> Optional[str]:
    """Locate the node executable.

    ``ALIASNAV_NODE`` wins when set; an empty value disables node entirely.
    """
    configured = os.environ.get(NODE_ENV_VAR)
    if configured is not None:
        return configured or None
    return shutil.which("node")


class NodeModuleEvaluator(ModuleEvaluator):
    """Evaluates a config module with a ``node`` subprocess.

    Attributes:
        node: Path to the node executable (None if unavailable).
        timeout: Seconds to wait for node before giving up.
    """

    name = "node"

    def __init__(self, node: Optional[str] = None, timeout: float = 10.0):
        self.node = node if node is not None else find_node()
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return bool(self.node)

    def evaluate(self, path: Path) -> Optional[Any]:
        if not self.node:
            return None

        try:
            completed = subprocess.run(
                [self.node, "-e", _NODE_SCRIPT, str(path)],
                cwd=str(path.parent),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning("node timed out after %ss evaluating %s", self.timeout, path)
            return None
        except OSError as e:
            logger.warning("Could not run node for %s: %s", path, e)
            return None

        if completed.returncode != 0:
            lines = completed.stderr.strip().splitlines()
            reason = lines[-1] if lines else f"exit status {completed.returncode}"
            logger.warning("node failed to evaluate %s: %s", path, reason)
            return None

        try:
            return json.loads(completed.stdout or "null")
        except json.JSONDecodeError as e:
            logger.warning("node printed invalid JSON for %s: %s", path, e)
            return None


# Markers produced while interpreting; none of them ever leaks into results.
_UNKNOWN = object()
_PATH_MODULE = object()


@dataclass(frozen=True)
class _PathFunction:
    name: str  # "resolve" or "join"


@dataclass(frozen=True)
class _Function:
    params: List[str]
    body: "Node"


def _is_data(value: Any) -> bool:
    return value is None or isinstance(value, (dict, list, str, int, float, bool))


def node_join(*parts: str) -> str:
    """``path.join`` as node implements it: concatenate, then normalize."""
    joined = "/".join(part for part in parts if part)
    if not joined:
        return "."
    return posixpath.normpath(joined)


def node_resolve(cwd: str, *parts: str) -> str:
    """``path.resolve`` as node implements it, with ``cwd`` as the fallback root."""
    resolved = ""
    for part in reversed(parts):
        if not part:
            continue
        resolved = f"{part}/{resolved}" if resolved else part
        if part.startswith("/"):
            break
    if not resolved.startswith("/"):
        resolved = f"{cwd}/{resolved}" if resolved else cwd
    return posixpath.normpath(resolved)


class StaticModuleEvaluator(ModuleEvaluator):
    """Interprets a safe subset of a JavaScript config module with tree-sitter.

    Nothing in the module is executed. Values outside the supported subset
    evaluate to "unknown": unknown object properties are dropped and an
    unknown export makes ``evaluate`` return None.

    Supported:
        - ``module.exports = ...``, ``exports.x = ...``, ``export default ...``
        - object, array, string, number, boolean, null literals and spreads
        - template strings without substitutions, string ``+`` concatenation
        - top-level ``const``/``let``/``var`` bindings
        - ``__dirname``, ``__filename``, ``require('path')``
        - ``path.resolve()``/``path.join()`` (also destructured)
        - ``defineConfig(x)`` wrappers
        - helper functions whose body is a single ``return`` (or arrow body)

    Example:
        >>> StaticModuleEvaluator().evaluate(Path('vue.config.js'))
        {'configureWebpack': {'resolve': {'alias': {'@': '/abs/src'}}}}
    """

    name = "static"

    MAX_DEPTH = 64

    def __init__(self):
        self._parser = Parser(Language(ts_javascript.language()))

    def evaluate(self, path: Path) -> Optional[Any]:
        try:
            source = path.read_bytes()
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

        return self.evaluate_source(source, path)

    def evaluate_source(self, source: bytes, path: Path) -> Optional[Any]:
        """Evaluate module source as if it lived at ``path``."""
        tree = self._parser.parse(source)
        return _ModuleInterpreter(source, path).run(tree.root_node)


class _ModuleInterpreter:
    """One-shot interpreter for a single parsed module."""

    def __init__(self, source: bytes, path: Path):
        self.source = source
        self.filename = Path(os.path.abspath(path)).as_posix()
        self.dirname = posixpath.dirname(self.filename)
        self.bindings: Dict[str, "Node"] = {}
        self.destructured: Dict[str, Any] = {}
        self._depth = 0

    def run(self, program: "Node") -> Optional[Any]:
        exports: Any = _UNKNOWN

        for statement in program.named_children:
            if statement.type in ("lexical_declaration", "variable_declaration"):
                self._bind_declaration(statement)
            elif statement.type == "function_declaration":
                name = statement.child_by_field_name("name")
                if name is not None:
                    self.bindings[self._text(name)] = statement
            elif statement.type == "export_statement":
                value = statement.child_by_field_name("value")
                if value is not None:
                    exports = self._evaluate(value, {})
            elif statement.type == "expression_statement":
                exports = self._run_assignment(statement, exports)

        if exports is _UNKNOWN or not _is_data(exports):
            return None
        return exports

    def _run_assignment(self, statement: "Node", exports: Any) -> Any:
        expression = statement.named_children[0] if statement.named_children else None
        if expression is None or expression.type != "assignment_expression":
            return exports

        left = self._text(expression.child_by_field_name("left"))
        right = expression.child_by_field_name("right")

        if left == "module.exports":
            return self._evaluate(right, {})

        for prefix in ("module.exports.", "exports."):
            if left.startswith(prefix):
                key = left[len(prefix) :]
                if exports is _UNKNOWN:
                    exports = {}
                value = self._evaluate(right, {})
                if isinstance(exports, dict) and _is_data(value):
                    exports[key] = value
                break

        return exports

    def _bind_declaration(self, declaration: "Node") -> None:
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name is None or value is None:
                continue

            if name.type == "identifier":
                self.bindings[self._text(name)] = value
            elif name.type == "object_pattern":
                # const { resolve, join } = require('path')
                source = self._evaluate(value, {})
                for prop in name.named_children:
                    if prop.type == "shorthand_property_identifier_pattern":
                        key = alias = self._text(prop)
                    elif prop.type == "pair_pattern":
                        key = self._property_key(prop.child_by_field_name("key"), {})
                        alias = self._text(prop.child_by_field_name("value"))
                    else:
                        continue
                    self.destructured[alias] = self._member(source, key)

    def _text(self, node: Optional["Node"]) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def _evaluate(self, node: Optional["Node"], scope: Dict[str, Any]) -> Any:
        if node is None or self._depth >= StaticModuleEvaluator.MAX_DEPTH:
            return _UNKNOWN
        self._depth += 1
        try:
            return self._evaluate_node(node, scope)
        finally:
            self._depth -= 1

    def _evaluate_node(self, node: "Node", scope: Dict[str, Any]) -> Any:
        kind = node.type

        if kind == "object":
            return self._object(node, scope)
        if kind == "array":
            return [
                value if _is_data(value) else None
                for value in (
                    self._evaluate(child, scope)
                    for child in node.named_children
                    if child.type != "comment"
                )
            ]
        if kind == "string":
            return self._string(node)
        if kind == "template_string":
            if any(child.type == "template_substitution" for child in node.named_children):
                return _UNKNOWN
            return self._text(node)[1:-1]
        if kind == "number":
            return self._number(self._text(node))
        if kind == "true":
            return True
        if kind == "false":
            return False
        if kind in ("null", "undefined"):
            return None
        if kind == "parenthesized_expression":
            inner = [child for child in node.named_children if child.type != "comment"]
            return self._evaluate(inner[0], scope) if inner else _UNKNOWN
        if kind == "identifier":
            return self._identifier(self._text(node), scope)
        if kind == "member_expression":
            target = self._evaluate(node.child_by_field_name("object"), scope)
            return self._member(target, self._text(node.child_by_field_name("property")))
        if kind == "subscript_expression":
            target = self._evaluate(node.child_by_field_name("object"), scope)
            return self._member(target, self._evaluate(node.child_by_field_name("index"), scope))
        if kind == "binary_expression":
            return self._binary(node, scope)
        if kind == "call_expression":
            return self._call(node, scope)
        if kind in ("arrow_function", "function_expression", "function_declaration", "function"):
            return self._function(node)

        return _UNKNOWN

    def _object(self, node: "Node", scope: Dict[str, Any]) -> Any:
        result: Dict[str, Any] = {}
        for child in node.named_children:
            if child.type == "pair":
                key = self._property_key(child.child_by_field_name("key"), scope)
                value = self._evaluate(child.child_by_field_name("value"), scope)
                if isinstance(key, str) and _is_data(value):
                    result[key] = value
            elif child.type == "shorthand_property_identifier":
                name = self._text(child)
                value = self._identifier(name, scope)
                if _is_data(value):
                    result[name] = value
            elif child.type == "spread_element":
                spread = [c for c in child.named_children if c.type != "comment"]
                value = self._evaluate(spread[0], scope) if spread else _UNKNOWN
                if isinstance(value, dict):
                    result.update(value)
        return result

    def _property_key(self, node: Optional["Node"], scope: Dict[str, Any]) -> Any:
        if node is None:
            return _UNKNOWN
        if node.type == "property_identifier":
            return self._text(node)
        if node.type == "string":
            return self._string(node)
        if node.type == "number":
            return self._text(node)
        if node.type == "computed_property_name":
            inner = [c for c in node.named_children if c.type != "comment"]
            value = self._evaluate(inner[0], scope) if inner else _UNKNOWN
            return value if isinstance(value, str) else _UNKNOWN
        return _UNKNOWN

    def _string(self, node: "Node") -> str:
        parts = []
        for child in node.named_children:
            text = self._text(child)
            if child.type == "escape_sequence":
                try:
                    text = codecs.decode(text, "unicode_escape")
                except UnicodeError:
                    text = text[1:]
            parts.append(text)
        return "".join(parts)

    @staticmethod
    def _number(text: str) -> Any:
        text = text.replace("_", "")
        try:
            return int(text, 0)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return _UNKNOWN

    def _identifier(self, name: str, scope: Dict[str, Any]) -> Any:
        if name in scope:
            return scope[name]
        if name == "__dirname":
            return self.dirname
        if name == "__filename":
            return self.filename
        if name in self.destructured:
            return self.destructured[name]
        if name in self.bindings:
            return self._evaluate(self.bindings[name], {})
        return _UNKNOWN

    @staticmethod
    def _member(target: Any, key: Any) -> Any:
        if target is _PATH_MODULE and key in ("resolve", "join"):
            return _PathFunction(key)
        if isinstance(target, dict) and isinstance(key, str):
            return target.get(key, _UNKNOWN)
        if isinstance(target, list) and isinstance(key, int) and 0 <= key < len(target):
            return target[key]
        return _UNKNOWN

    def _binary(self, node: "Node", scope: Dict[str, Any]) -> Any:
        operator = self._text(node.child_by_field_name("operator"))
        if operator != "+":
            return _UNKNOWN
        left = self._evaluate(node.child_by_field_name("left"), scope)
        right = self._evaluate(node.child_by_field_name("right"), scope)
        if isinstance(left, str) and isinstance(right, (str, int, float)):
            return left + str(right)
        if isinstance(left, (int, float)) and isinstance(right, str):
            return str(left) + right
        return _UNKNOWN

    def _call(self, node: "Node", scope: Dict[str, Any]) -> Any:
        callee = node.child_by_field_name("function")
        arguments_node = node.child_by_field_name("arguments")
        args = []
        if arguments_node is not None:
            args = [
                self._evaluate(child, scope)
                for child in arguments_node.named_children
                if child.type != "comment"
            ]

        callee_name = self._text(callee) if callee is not None else ""
        if callee_name == "require":
            return _PATH_MODULE if args and args[0] in ("path", "node:path") else _UNKNOWN
        if callee_name == "defineConfig":
            return args[0] if args else _UNKNOWN

        function = self._evaluate(callee, scope)
        if isinstance(function, _PathFunction):
            if not all(isinstance(arg, str) for arg in args):
                return _UNKNOWN
            if function.name == "join":
                return node_join(*args)
            return node_resolve(self.dirname, *args)
        if isinstance(function, _Function):
            local = dict(zip(function.params, args))
            return self._evaluate(function.body, local)
        return _UNKNOWN

    def _function(self, node: "Node") -> Any:
        params: List[str] = []
        single = node.child_by_field_name("parameter")
        if single is not None:
            params.append(self._text(single))
        parameters = node.child_by_field_name("parameters")
        if parameters is not None:
            for param in parameters.named_children:
                if param.type != "identifier":
                    return _UNKNOWN
                params.append(self._text(param))

        body = node.child_by_field_name("body")
        if body is None:
            return _UNKNOWN
        if body.type != "statement_block":
            return _Function(params, body)

        statements = [child for child in body.named_children if child.type != "comment"]
        if len(statements) != 1 or statements[0].type != "return_statement":
            return _UNKNOWN
        returned = [c for c in statements[0].named_children if c.type != "comment"]
        if not returned:
            return _UNKNOWN
        return _Function(params, returned[0])


def default_evaluators() -> List[ModuleEvaluator]:
    """Evaluators to try in order: node when installed, then the static one."""
    evaluators: List[ModuleEvaluator] = []
    node = NodeModuleEvaluator()
    if node.available:
        evaluators.append(node)
    evaluators.append(StaticModuleEvaluator())
    return evaluators
