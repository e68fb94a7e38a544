"""Unit tests for ontc.ast.loader — building trees from JSON/YAML documents."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from ontc.ast.loader import LoadError, LoadResult, TreeLoader, load
from ontc.ast.nodes import (
    NodeKind,
    address_name,
    call_parts,
    fact_parts,
    find_function,
    function_body,
    function_name,
    iter_chain,
    scope_names,
    str_value,
    top_level,
    triple_parts,
)

HELLO_YAML = """\
kind: TransUnit
body:
  - kind: Func
    name: main
    body:
      - {kind: Call, callee: println, args: ["hello"]}
  - {kind: TripleFact, subject: main, relation: printsATestMessageWhenCalled}
"""


@pytest.fixture()
def loader() -> TreeLoader:
    return TreeLoader()


# ===========================================================================
# Document roots
# ===========================================================================


class TestDocumentRoot:
    def test_trans_unit_mapping(self, loader: TreeLoader) -> None:
        result = loader.from_yaml(HELLO_YAML)
        assert isinstance(result, LoadResult)
        assert result.ok
        assert result.tree.kind is NodeKind.TRANS_UNIT
        assert [n.kind for n in top_level(result.tree)] == [
            NodeKind.FUNC,
            NodeKind.TRIPLE_FACT,
        ]

    def test_bare_list(self, loader: TreeLoader) -> None:
        result = loader.from_dict([{"kind": "Func", "name": "main"}])
        assert function_name(result.tree.child) == "main"  # type: ignore[arg-type]

    def test_empty_body(self, loader: TreeLoader) -> None:
        result = loader.from_dict({"kind": "TransUnit", "body": []})
        assert result.tree.child is None
        assert result.ok

    def test_other_mapping_is_rejected(self, loader: TreeLoader) -> None:
        with pytest.raises(LoadError, match="list or a TransUnit"):
            loader.from_dict({"kind": "Func", "name": "main"})

    def test_scalar_document_is_rejected(self, loader: TreeLoader) -> None:
        with pytest.raises(LoadError):
            loader.from_dict("main")

    def test_body_must_be_list(self, loader: TreeLoader) -> None:
        with pytest.raises(LoadError, match="must be a list"):
            loader.from_dict({"kind": "TransUnit", "body": {"kind": "Func"}})


# ===========================================================================
# Items
# ===========================================================================


class TestItems:
    def test_function_body_calls(self, loader: TreeLoader) -> None:
        tree = loader.from_yaml(HELLO_YAML).tree
        main = find_function(tree, "main")
        assert main is not None
        (statement,) = list(function_body(main))
        callee, first = call_parts(statement)
        assert scope_names(callee) == ["println"]
        assert [str_value(a) for a in iter_chain(first)] == ["hello"]

    def test_triple_fact_with_object(self, loader: TreeLoader) -> None:
        tree = loader.from_dict([
            {"kind": "TripleFact", "subject": "main", "relation": "isPreceededBy", "object": "setup"},
        ]).tree
        relation, subject, obj = triple_parts(tree.child)  # type: ignore[arg-type]
        assert scope_names(relation) == ["isPreceededBy"]
        assert address_name(subject) == "main"
        assert address_name(obj) == "setup"

    def test_namespaced_names(self, loader: TreeLoader) -> None:
        tree = loader.from_dict([
            {"kind": "TripleFact", "subject": ["std", "io"], "relation": "rel"},
        ]).tree
        _, subject, _ = triple_parts(tree.child)  # type: ignore[arg-type]
        assert address_name(subject) == "std.io"

    def test_explicit_address_with_param(self, loader: TreeLoader) -> None:
        tree = loader.from_dict([
            {
                "kind": "Fact",
                "relation": "between",
                "args": [{"kind": "Address", "scope": "a", "param": "x"}, "b"],
            },
        ]).tree
        relation, args = fact_parts(tree.child)  # type: ignore[arg-type]
        assert scope_names(relation) == ["between"]
        assert [address_name(a) for a in args] == ["a", "b"]
        assert str_value(args[0].nth_child(1)) == "x"

    def test_scalars_become_literals(self, loader: TreeLoader) -> None:
        tree = loader.from_dict([
            {"kind": "Func", "name": "main", "body": [
                {"kind": "BinOp", "op": "+", "left": 1, "right": 2.5},
                {"kind": "Return", "value": "done"},
            ]},
        ]).tree
        binop, ret = list(function_body(tree.child))  # type: ignore[arg-type]
        assert binop.kind is NodeKind.ADD
        assert [c.kind for c in binop.children()] == [NodeKind.INT, NodeKind.FLOAT]
        assert str_value(ret.child) == "done"

    def test_control_flow_items(self, loader: TreeLoader) -> None:
        tree = loader.from_dict([
            {"kind": "Func", "name": "loop", "body": [
                {"kind": "While", "condition": 1, "body": [{"kind": "Break"}]},
                {"kind": "For", "identifier": "i", "iterable": {"kind": "Scope", "names": ["xs"]},
                 "body": [{"kind": "Continue"}]},
                {"kind": "Cond", "condition": 0, "then": [], "else": []},
                {"kind": "Ternary", "condition": 1, "then": 2, "else": 3},
                {"kind": "UnOp", "affix": "postfix", "op": "++", "operand": "i"},
                {"kind": "VarDecl", "name": "x", "type": "int", "value": 5},
                {"kind": "Compound", "body": []},
            ]},
        ]).tree
        kinds = [n.kind for n in function_body(tree.child)]  # type: ignore[arg-type]
        assert kinds == [
            NodeKind.WHILE,
            NodeKind.FOR,
            NodeKind.COND,
            NodeKind.TERNARY,
            NodeKind.POST_INC,
            NodeKind.VAR_DECL,
            NodeKind.COMPOUND,
        ]

    def test_loop_bodies_are_sequences(self, loader: TreeLoader) -> None:
        tree = loader.from_dict([
            {"kind": "Func", "name": "f", "body": [{"kind": "While", "condition": 1}]},
        ]).tree
        (loop,) = list(function_body(tree.child))  # type: ignore[arg-type]
        assert loop.nth_child(1).kind is NodeKind.SEQUENCE  # type: ignore[union-attr]

    def test_class_members(self, loader: TreeLoader) -> None:
        tree = loader.from_dict([
            {"kind": "Class", "name": "Point", "members": [{"kind": "Func", "name": "norm"}]},
        ]).tree
        spec = tree.child.nth_child(1)  # type: ignore[union-attr]
        assert spec is not None and spec.kind is NodeKind.CLASS_SPEC
        assert function_name(spec.child) == "norm"  # type: ignore[arg-type]


# ===========================================================================
# Recovery
# ===========================================================================


class TestRecovery:
    def test_bad_item_is_skipped_with_diagnostic(self, loader: TreeLoader) -> None:
        result = loader.from_dict([
            {"kind": "Func", "name": "main"},
            {"kind": "TripleFact", "subject": "main"},
            {"kind": "Func", "name": "other"},
        ])
        assert [function_name(n) for n in top_level(result.tree)] == ["main", "other"]
        (diag,) = result.diagnostics
        assert diag.code == "ONT301"
        assert diag.is_error
        assert diag.location == "body[1]"
        assert "relation" in diag.message

    def test_unknown_kind(self, loader: TreeLoader) -> None:
        result = loader.from_dict([{"kind": "Lambda"}])
        assert result.tree.child is None
        assert "Unknown item kind" in result.diagnostics[0].message

    def test_constructor_error_becomes_diagnostic(self, loader: TreeLoader) -> None:
        result = loader.from_dict([{"kind": "BinOp", "op": "**", "left": 1, "right": 2}])
        assert result.diagnostics[0].code == "ONT301"
        assert "invalid binary operator" in result.diagnostics[0].message

    def test_non_string_function_name(self, loader: TreeLoader) -> None:
        result = loader.from_dict([{"kind": "Func", "name": 3}])
        assert not result.ok

    def test_boolean_literal_is_unsupported(self, loader: TreeLoader) -> None:
        result = loader.from_dict([{"kind": "Return", "value": True}])
        assert not result.ok

    def test_empty_name_list(self, loader: TreeLoader) -> None:
        result = loader.from_dict([{"kind": "Call", "callee": []}])
        assert "empty scope" in result.diagnostics[0].message


# ===========================================================================
# Text and files
# ===========================================================================


class TestTextAndFiles:
    def test_from_json(self, loader: TreeLoader) -> None:
        text = json.dumps([{"kind": "Func", "name": "main"}])
        assert function_name(loader.from_json(text).tree.child) == "main"  # type: ignore[arg-type]

    def test_invalid_json(self, loader: TreeLoader) -> None:
        with pytest.raises(LoadError, match="Invalid JSON"):
            loader.from_json("{not json")

    def test_invalid_yaml(self, loader: TreeLoader) -> None:
        with pytest.raises(LoadError, match="Invalid YAML"):
            loader.from_yaml("body: [unclosed")

    def test_empty_yaml(self, loader: TreeLoader) -> None:
        with pytest.raises(LoadError, match="Empty document"):
            loader.from_yaml("")

    def test_load_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "hello.yaml"
        path.write_text(HELLO_YAML, encoding="utf-8")
        result = load(path)
        assert find_function(result.tree, "main") is not None

    def test_load_json_file(self, loader: TreeLoader, tmp_path: Path) -> None:
        path = tmp_path / "hello.json"
        path.write_text(json.dumps([{"kind": "Func", "name": "main"}]), encoding="utf-8")
        assert find_function(loader.load_file(path).tree, "main") is not None

    def test_missing_file(self, loader: TreeLoader, tmp_path: Path) -> None:
        missing = tmp_path / "missing.yaml"
        with pytest.raises(LoadError) as excinfo:
            loader.load_file(missing)
        assert excinfo.value.source == str(missing)

    def test_file_errors_name_the_file(self, loader: TreeLoader, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("[", encoding="utf-8")
        with pytest.raises(LoadError, match="bad.json"):
            loader.load_file(path)
