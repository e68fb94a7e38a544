"""OXPL AST module.

Exports the node types, the per-kind constructors, the chain and
traversal helpers, and the loader for building trees from JSON/YAML
tree documents.
"""
from __future__ import annotations

from ontc.ast.nodes import (
    BINARY_OPERATORS,
    UNARY_OPERATORS,
    FloatNode,
    IntNode,
    Node,
    NodeKind,
    StrNode,
    TreeConstructionError,
    add_child,
    add_sibling,
    address_name,
    call_parts,
    fact_parts,
    find_function,
    function_body,
    function_name,
    iter_chain,
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
    release,
    scope_names,
    str_value,
    to_sequence,
    top_level,
    triple_parts,
    walk,
)
from ontc.ast.loader import LoadError, LoadResult, TreeLoader, load

__all__ = [
    # Node types
    "Node",
    "NodeKind",
    "IntNode",
    "FloatNode",
    "StrNode",
    "TreeConstructionError",
    "BINARY_OPERATORS",
    "UNARY_OPERATORS",
    # Constructors
    "new_int",
    "new_float",
    "new_str",
    "new_scope",
    "new_address",
    "new_call",
    "new_binop",
    "new_unop",
    "new_signature",
    "new_sigvar",
    "new_func",
    "new_compound",
    "to_sequence",
    "new_cond",
    "new_ternary",
    "new_return",
    "new_break",
    "new_continue",
    "new_while",
    "new_for",
    "new_vardecl",
    "new_class",
    "new_class_spec",
    "new_fact",
    "new_triple_fact",
    "new_trans_unit",
    # Chains and traversal
    "add_sibling",
    "add_child",
    "iter_chain",
    "walk",
    "release",
    # Accessors
    "str_value",
    "scope_names",
    "address_name",
    "function_name",
    "function_body",
    "call_parts",
    "triple_parts",
    "fact_parts",
    "top_level",
    "find_function",
    # Loader
    "TreeLoader",
    "LoadResult",
    "LoadError",
    "load",
]
