"""Tree documents: building program trees from JSON and YAML.

A tree document is the plain dict/list form of a program.  Every item
carries a ``"kind"`` discriminator naming its construct, and the loader
replays the document bottom-up as one constructor call per item, so the
layout checks of ``ontc.ast.nodes`` apply to loaded programs as well.

Document root
-------------
Either a list of top-level items, or a mapping::

    kind: TransUnit
    body:
      - kind: Func
        name: main
        body:
          - {kind: Call, callee: println, args: ["hello"]}
      - {kind: TripleFact, subject: main, relation: printsATestMessageWhenCalled}

Scalars in expression position become ``Int``, ``Float`` or ``Str``
literals.  Names (callees, scopes, addresses) may be a string for a single
level or a list of strings for a namespaced name.

A top-level item that cannot be built is skipped with an ONT301 error
diagnostic and loading continues with the next item.  Input that is not a
document at all raises ``LoadError``.

Usage
-----
::

    from ontc.ast.loader import TreeLoader

    result = TreeLoader().load_file("hello.yaml")
    if not result.diagnostics:
        run_program(result.tree)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import yaml

from ontc.ast.nodes import (
    Node,
    NodeKind,
    TreeConstructionError,
    add_child,
    add_sibling,
    new_address,
    new_binop,
    new_break,
    new_call,
    new_class,
    new_class_spec,
    new_compound,
    new_cond,
    new_continue,
    new_fact,
    new_float,
    new_for,
    new_func,
    new_int,
    new_return,
    new_scope,
    new_sigvar,
    new_signature,
    new_str,
    new_ternary,
    new_trans_unit,
    new_triple_fact,
    new_unop,
    new_vardecl,
    new_while,
    to_sequence,
)
from ontc.validator.diagnostics import Diagnostic, DiagnosticSeverity

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """Raised when input cannot be read as a tree document.

    Parameters
    ----------
    message:
        Description of the problem.
    source:
        File name or other origin of the input, if known.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{message}")
        self.source = source
        self.load_message = message


@dataclass
class LoadResult:
    """A loaded tree together with the problems found while building it."""

    tree: Node
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def _field(item: dict[str, object], key: str) -> object:
    if key not in item:
        raise LoadError(f"{item.get('kind')} item is missing '{key}'")
    return item[key]


def _link_chain(nodes: list[Node]) -> Node | None:
    for current, following in zip(nodes, nodes[1:]):
        add_sibling(current, following)
    return nodes[0] if nodes else None


class TreeLoader:
    """Build ``TransUnit`` trees from tree documents."""

    def __init__(self) -> None:
        self._builders: dict[str, Callable[[dict[str, object]], Node]] = {
            NodeKind.FUNC.value: self._build_func,
            NodeKind.CALL.value: self._build_call,
            "BinOp": self._build_binop,
            "UnOp": self._build_unop,
            NodeKind.COND.value: self._build_cond,
            NodeKind.TERNARY.value: self._build_ternary,
            NodeKind.RETURN.value: self._build_return,
            NodeKind.BREAK.value: lambda item: new_break(),
            NodeKind.CONTINUE.value: lambda item: new_continue(),
            NodeKind.WHILE.value: self._build_while,
            NodeKind.FOR.value: self._build_for,
            NodeKind.VAR_DECL.value: self._build_vardecl,
            NodeKind.CLASS.value: self._build_class,
            NodeKind.COMPOUND.value: self._build_compound,
            NodeKind.SCOPE.value: self._scope,
            NodeKind.ADDRESS.value: self._address,
            NodeKind.INT.value: lambda item: new_int(_field(item, "value")),
            NodeKind.FLOAT.value: lambda item: new_float(_field(item, "value")),
            NodeKind.STR.value: lambda item: new_str(_field(item, "value")),
            NodeKind.FACT.value: self._build_fact,
            NodeKind.TRIPLE_FACT.value: self._build_triple_fact,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def from_dict(self, data: object) -> LoadResult:
        """Build a tree from an already-decoded document.

        Raises
        ------
        LoadError
            If ``data`` is neither a list nor a ``TransUnit`` mapping.
        """
        if isinstance(data, list):
            items = data
        elif isinstance(data, dict) and data.get("kind") == NodeKind.TRANS_UNIT.value:
            items = data.get("body") or []
            if not isinstance(items, list):
                raise LoadError("TransUnit 'body' must be a list")
        else:
            raise LoadError("Document root must be a list or a TransUnit mapping")

        nodes: list[Node] = []
        diagnostics: list[Diagnostic] = []
        for position, item in enumerate(items):
            try:
                nodes.append(self._item(item))
            except (TreeConstructionError, LoadError) as exc:
                logger.warning("Skipping top-level item %d: %s", position, exc)
                diagnostics.append(Diagnostic(
                    severity=DiagnosticSeverity.ERROR,
                    code="ONT301",
                    message=f"Cannot build top-level item: {exc}",
                    location=f"body[{position}]",
                    rule="loader",
                ))

        tree = new_trans_unit(_link_chain(nodes))
        logger.debug("Loaded %d top-level item(s)", len(nodes))
        return LoadResult(tree=tree, diagnostics=diagnostics)

    def from_json(self, text: str) -> LoadResult:
        """Build a tree from a JSON document."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise LoadError(f"Invalid JSON: {exc}") from exc
        return self.from_dict(data)

    def from_yaml(self, text: str) -> LoadResult:
        """Build a tree from a YAML document."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise LoadError(f"Invalid YAML: {exc}") from exc
        if data is None:
            raise LoadError("Empty document")
        return self.from_dict(data)

    def load_file(self, path: str | Path) -> LoadResult:
        """Read and build the tree document at ``path``.

        ``.json`` files are decoded as JSON, everything else as YAML.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise LoadError(f"Cannot read file: {exc}", source=str(path)) from exc
        try:
            if path.suffix.lower() == ".json":
                return self.from_json(text)
            return self.from_yaml(text)
        except LoadError as exc:
            raise LoadError(exc.load_message, source=str(path)) from exc

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def _item(self, item: object) -> Node:
        if not isinstance(item, dict):
            raise LoadError(f"Expected an item mapping, got {type(item).__name__}")
        kind = item.get("kind")
        builder = self._builders.get(kind) if isinstance(kind, str) else None
        if builder is None:
            raise LoadError(f"Unknown item kind {kind!r}")
        return builder(item)

    def _expr(self, value: object) -> Node:
        if isinstance(value, dict):
            return self._item(value)
        if isinstance(value, bool):
            raise LoadError(f"Unsupported literal {value!r}")
        if isinstance(value, int):
            return new_int(value)
        if isinstance(value, float):
            return new_float(value)
        if isinstance(value, str):
            return new_str(value)
        raise LoadError(f"Unsupported expression {value!r}")

    def _block(self, items: object) -> Node | None:
        if items is None:
            return None
        if not isinstance(items, list):
            raise LoadError("A statement block must be a list")
        return _link_chain([self._expr(item) for item in items])

    def _scope(self, value: object) -> Node:
        if isinstance(value, dict):
            value = _field(value, "names")
        names = [value] if isinstance(value, str) else value
        if not isinstance(names, list):
            raise LoadError(f"Invalid name {value!r}")
        if not names:
            return new_scope(None)
        scope = new_scope(self._expr(names[0]))
        for part in names[1:]:
            if not isinstance(part, str):
                raise LoadError(f"Name part {part!r} is not a string")
            add_child(scope, new_str(part))
        return scope

    def _address(self, value: object) -> Node:
        if isinstance(value, dict) and value.get("kind") == NodeKind.ADDRESS.value:
            param = value.get("param")
            return new_address(
                self._scope(_field(value, "scope")),
                new_str(param) if param is not None else None,
            )
        return new_address(self._scope(value))

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def _build_func(self, item: dict[str, object]) -> Node:
        name = self._expr(_field(item, "name"))
        return new_func(new_signature(name), self._block(item.get("body")))

    def _build_call(self, item: dict[str, object]) -> Node:
        return new_call(self._scope(_field(item, "callee")), self._block(item.get("args")))

    def _build_binop(self, item: dict[str, object]) -> Node:
        return new_binop(
            str(_field(item, "op")),
            self._expr(_field(item, "left")),
            self._expr(_field(item, "right")),
        )

    def _build_unop(self, item: dict[str, object]) -> Node:
        return new_unop(
            str(item.get("affix", "prefix")),
            str(_field(item, "op")),
            self._expr(_field(item, "operand")),
        )

    def _build_cond(self, item: dict[str, object]) -> Node:
        else_ = item.get("else")
        return new_cond(
            self._expr(_field(item, "condition")),
            new_compound(self._block(_field(item, "then"))),
            new_compound(self._block(else_)) if else_ is not None else None,
        )

    def _build_ternary(self, item: dict[str, object]) -> Node:
        return new_ternary(
            self._expr(_field(item, "condition")),
            self._expr(_field(item, "then")),
            self._expr(_field(item, "else")),
        )

    def _build_return(self, item: dict[str, object]) -> Node:
        value = item.get("value")
        return new_return(self._expr(value) if value is not None else None)

    def _build_while(self, item: dict[str, object]) -> Node:
        body = to_sequence(new_compound(self._block(item.get("body"))))
        return new_while(self._expr(_field(item, "condition")), body)

    def _build_for(self, item: dict[str, object]) -> Node:
        body = to_sequence(new_compound(self._block(item.get("body"))))
        return new_for(
            self._expr(_field(item, "identifier")),
            self._expr(_field(item, "iterable")),
            body,
        )

    def _build_vardecl(self, item: dict[str, object]) -> Node:
        type_name = item.get("type")
        sigvar = new_sigvar(
            self._expr(_field(item, "name")),
            self._scope(type_name) if type_name is not None else None,
        )
        value = item.get("value")
        return new_vardecl(sigvar, self._expr(value) if value is not None else None)

    def _build_class(self, item: dict[str, object]) -> Node:
        return new_class(
            self._expr(_field(item, "name")),
            new_class_spec(self._block(item.get("members"))),
        )

    def _build_compound(self, item: dict[str, object]) -> Node:
        return new_compound(self._block(item.get("body")))

    def _build_fact(self, item: dict[str, object]) -> Node:
        args = item.get("args") or []
        if not isinstance(args, list):
            raise LoadError("Fact 'args' must be a list")
        return new_fact(
            self._scope(_field(item, "relation")),
            _link_chain([self._address(arg) for arg in args]),
        )

    def _build_triple_fact(self, item: dict[str, object]) -> Node:
        obj = item.get("object")
        return new_triple_fact(
            self._address(_field(item, "subject")),
            self._scope(_field(item, "relation")),
            self._address(obj) if obj is not None else None,
        )


def load(source: str | Path) -> LoadResult:
    """Convenience function: load the tree document at ``source``."""
    return TreeLoader().load_file(source)
