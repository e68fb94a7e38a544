"""AST node definitions for OXPL programs.

The tree is a left-child / right-sibling tree: every ``Node`` holds one
reference to its first child and one to its next sibling, so the complete
child list of a node is the sibling chain that starts at ``node.child``.
The ``kind`` tag decides which children are meaningful and in what order;
the ``new_*`` constructors below are the only place where that layout is
enforced.  Traversal code dispatches on ``node.kind`` and uses the accessor
helpers at the bottom of this module, which assume a node of the matching
kind.

Nodes are exclusively owned by their parent once attached.  Linking marks a
node as attached, and every constructor and chain helper refuses a node that
is already attached or whose subtree would reach back to the link target, so
no node can end up reachable from two places and the tree never has a cycle.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from enum import Enum

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Node kinds
# ---------------------------------------------------------------------------


class NodeKind(Enum):
    """Every construct of the language is one node kind.

    The enum value is the variant name used by tree documents.
    """

    TRANS_UNIT = "TransUnit"

    # Literals
    INT = "Int"
    FLOAT = "Float"
    STR = "Str"

    # Structural
    SCOPE = "Scope"
    SEQUENCE = "Sequence"
    COMPOUND = "Compound"
    ADDRESS = "Address"
    CALL = "Call"
    SIGNATURE = "Signature"
    SIG_VAR = "SigVar"

    # Binary operators
    ADD = "Add"
    SUB = "Sub"
    MUL = "Mul"
    DIV = "Div"
    MOD = "Mod"
    ASSIGN = "Assign"
    EQ = "Eq"
    NEQ = "Neq"
    AND = "And"
    OR = "Or"
    BIT_AND = "BitAnd"
    BIT_OR = "BitOr"
    XOR = "Xor"
    LT = "Lt"
    GT = "Gt"
    LEQ = "Leq"
    GEQ = "Geq"
    SHL = "Shl"
    SHR = "Shr"

    # Unary operators
    PRE_INC = "PreInc"
    POST_INC = "PostInc"
    PRE_DEC = "PreDec"
    POST_DEC = "PostDec"
    NEGATE = "Negate"

    # Control flow and declarations
    FUNC = "Func"
    COND = "Cond"
    TERNARY = "Ternary"
    RETURN = "Return"
    CONTINUE = "Continue"
    BREAK = "Break"
    WHILE = "While"
    FOR = "For"
    VAR_DECL = "VarDecl"
    CLASS = "Class"
    CLASS_SPEC = "ClassSpec"

    # Logic
    FACT = "Fact"
    TRIPLE_FACT = "TripleFact"


BINARY_OPERATORS: dict[str, NodeKind] = {
    "+": NodeKind.ADD,
    "-": NodeKind.SUB,
    "*": NodeKind.MUL,
    "/": NodeKind.DIV,
    "%": NodeKind.MOD,
    "=": NodeKind.ASSIGN,
    "==": NodeKind.EQ,
    "!=": NodeKind.NEQ,
    "&&": NodeKind.AND,
    "||": NodeKind.OR,
    "&": NodeKind.BIT_AND,
    "|": NodeKind.BIT_OR,
    "^": NodeKind.XOR,
    "<": NodeKind.LT,
    ">": NodeKind.GT,
    "<=": NodeKind.LEQ,
    ">=": NodeKind.GEQ,
    "<<": NodeKind.SHL,
    ">>": NodeKind.SHR,
}

UNARY_OPERATORS: dict[tuple[str, str], NodeKind] = {
    ("prefix", "++"): NodeKind.PRE_INC,
    ("prefix", "--"): NodeKind.PRE_DEC,
    ("prefix", "-"): NodeKind.NEGATE,
    ("postfix", "++"): NodeKind.POST_INC,
    ("postfix", "--"): NodeKind.POST_DEC,
}


class TreeConstructionError(ValueError):
    """Raised when a constructor receives children that violate its layout.

    Parameters
    ----------
    kind:
        The node kind being constructed, or ``None`` for chain operations.
    message:
        Human-readable description of the problem.
    """

    def __init__(self, kind: NodeKind | None, message: str) -> None:
        target = kind.value if kind is not None else "node"
        super().__init__(f"Cannot construct {target}: {message}")
        self.kind = kind
        self.construction_message = message


# ---------------------------------------------------------------------------
# Node types
# ---------------------------------------------------------------------------


class Node:
    """A tree node without a literal payload.

    ``attached`` is set once the node has a parent or a predecessor in a
    sibling chain, and cleared again by ``release``.

    Parameters
    ----------
    kind:
        The variant tag.
    child:
        First child, or ``None``.
    """

    __slots__ = ("kind", "child", "sibling", "attached")

    def __init__(self, kind: NodeKind, child: Node | None = None) -> None:
        self.kind = kind
        self.child = child
        self.sibling: Node | None = None
        self.attached = False

    def __repr__(self) -> str:
        return f"Node({self.kind.value})"

    def children(self) -> Iterator[Node]:
        """Iterate over the child chain in order."""
        return iter_chain(self.child)

    def nth_child(self, index: int) -> Node | None:
        """Return the 0-based ``index``-th child, or ``None`` if absent."""
        for position, node in enumerate(self.children()):
            if position == index:
                return node
        return None


class IntNode(Node):
    """An integer literal."""

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        super().__init__(NodeKind.INT)
        self.value = value

    def __repr__(self) -> str:
        return f"IntNode({self.value})"


class FloatNode(Node):
    """A floating-point literal."""

    __slots__ = ("value",)

    def __init__(self, value: float) -> None:
        super().__init__(NodeKind.FLOAT)
        self.value = value

    def __repr__(self) -> str:
        return f"FloatNode({self.value})"


class StrNode(Node):
    """A string payload: a string literal or an identifier part.

    ``value`` becomes ``None`` once the node has been released.
    """

    __slots__ = ("value",)

    def __init__(self, value: str) -> None:
        super().__init__(NodeKind.STR)
        self.value: str | None = value

    def __repr__(self) -> str:
        return f"StrNode({self.value!r})"


# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------


def _require(
    kind: NodeKind,
    role: str,
    node: Node | None,
    expected: NodeKind | None = None,
) -> Node:
    if node is None:
        raise TreeConstructionError(kind, f"missing {role}")
    if expected is not None and node.kind is not expected:
        raise TreeConstructionError(
            kind, f"{role} must be {expected.value}, got {node.kind.value}"
        )
    return node


def _check_optional(
    kind: NodeKind, role: str, node: Node | None, expected: NodeKind
) -> None:
    if node is not None and node.kind is not expected:
        raise TreeConstructionError(
            kind, f"{role} must be {expected.value}, got {node.kind.value}"
        )


def _check_free(kind: NodeKind | None, node: Node) -> None:
    if node.attached:
        raise TreeConstructionError(
            kind, f"{node.kind.value} node already has an owner"
        )


def _check_acyclic(target: Node, successor: Node) -> None:
    if any(node is target for node in walk(successor)):
        raise TreeConstructionError(
            None, f"linking {successor.kind.value} would create a cycle"
        )


def _link(kind: NodeKind, *fixed: Node | None, chain: Node | None = None) -> Node:
    """Create a ``kind`` node whose children are ``fixed`` followed by ``chain``.

    ``None`` entries in ``fixed`` are optional trailing children and are
    skipped.  Fixed children must be free-standing; only ``chain`` (an
    argument list or statement block) may carry its own siblings.
    """
    present = [c for c in fixed if c is not None]
    for child in present:
        if child.sibling is not None:
            raise TreeConstructionError(
                kind, f"{child.kind.value} child already belongs to a chain"
            )
    if chain is not None:
        present.append(chain)
    for position, child in enumerate(present):
        _check_free(kind, child)
        if any(child is other for other in present[:position]):
            raise TreeConstructionError(
                kind, f"{child.kind.value} child is passed more than once"
            )
    for current, following in zip(present, present[1:]):
        current.sibling = following
    for child in present:
        child.attached = True
    node = Node(kind, present[0] if present else None)
    logger.debug("Constructed %s node", kind.value)
    return node


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def new_int(value: int) -> IntNode:
    """Create an ``Int`` literal node."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TreeConstructionError(NodeKind.INT, f"{value!r} is not an integer")
    return IntNode(value)


def new_float(value: float) -> FloatNode:
    """Create a ``Float`` literal node."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TreeConstructionError(NodeKind.FLOAT, f"{value!r} is not a number")
    return FloatNode(float(value))


def new_str(value: str) -> StrNode:
    """Create a ``Str`` node owning a copy of ``value``."""
    if not isinstance(value, str):
        raise TreeConstructionError(NodeKind.STR, f"{value!r} is not a string")
    return StrNode(value)


def new_scope(value: Node | None) -> Node:
    """Create a ``Scope`` with one namespace part.

    Further parts are appended with ``add_child``.
    """
    if value is None:
        raise TreeConstructionError(NodeKind.SCOPE, "empty scope")
    if value.kind is not NodeKind.STR:
        raise TreeConstructionError(
            NodeKind.SCOPE, "scope identifier has to be a string"
        )
    return _link(NodeKind.SCOPE, value)


def new_address(scope: Node | None, param: Node | None = None) -> Node:
    """Create an ``Address``: a scope plus an optional parameter name."""
    _require(NodeKind.ADDRESS, "scope", scope, NodeKind.SCOPE)
    _check_optional(NodeKind.ADDRESS, "parameter", param, NodeKind.STR)
    return _link(NodeKind.ADDRESS, scope, param)


def new_call(callee: Node | None, args: Node | None = None) -> Node:
    """Create a ``Call``; ``args`` is the head of the argument chain."""
    _require(NodeKind.CALL, "callee", callee)
    return _link(NodeKind.CALL, callee, chain=args)


def new_binop(op: str, left: Node | None, right: Node | None) -> Node:
    """Create a binary operator node from its symbol, e.g. ``"<<"``."""
    kind = BINARY_OPERATORS.get(op)
    if kind is None:
        raise TreeConstructionError(None, f"invalid binary operator {op!r}")
    _require(kind, "left operand", left)
    _require(kind, "right operand", right)
    return _link(kind, left, right)


def new_unop(affix: str, op: str, operand: Node | None) -> Node:
    """Create a unary operator node.

    Parameters
    ----------
    affix:
        ``"prefix"`` or ``"postfix"``.
    op:
        One of ``"++"``, ``"--"`` or (prefix only) ``"-"``.
    operand:
        The operand expression.
    """
    kind = UNARY_OPERATORS.get((affix, op))
    if kind is None:
        raise TreeConstructionError(None, f"invalid {affix} operator {op!r}")
    _require(kind, "operand", operand)
    return _link(kind, operand)


def new_signature(name: Node | None) -> Node:
    """Create a function ``Signature`` around a ``Str`` name."""
    _require(NodeKind.SIGNATURE, "name", name, NodeKind.STR)
    return _link(NodeKind.SIGNATURE, name)


def new_sigvar(identifier: Node | None, type_scope: Node | None = None) -> Node:
    """Create a variable signature: identifier plus optional type scope."""
    _require(NodeKind.SIG_VAR, "identifier", identifier, NodeKind.STR)
    _check_optional(NodeKind.SIG_VAR, "type", type_scope, NodeKind.SCOPE)
    return _link(NodeKind.SIG_VAR, identifier, type_scope)


def new_func(sig: Node | None, block: Node | None = None) -> Node:
    """Create a ``Func``; ``block`` is the head of the body statement chain."""
    _require(NodeKind.FUNC, "signature", sig, NodeKind.SIGNATURE)
    return _link(NodeKind.FUNC, sig, chain=block)


def new_compound(head: Node | None = None) -> Node:
    """Create a ``Compound`` block; extend it with ``add_child``."""
    return _link(NodeKind.COMPOUND, chain=head)


def to_sequence(compound: Node | None) -> Node | None:
    """Convert a ``Compound`` into a ``Sequence`` in place.

    Sequences are the bodies of loops; they share the compound layout.
    """
    if compound is None:
        return None
    if compound.kind is not NodeKind.COMPOUND:
        raise TreeConstructionError(
            NodeKind.SEQUENCE, f"cannot convert {compound.kind.value} to a sequence"
        )
    compound.kind = NodeKind.SEQUENCE
    return compound


def new_cond(
    condition: Node | None, then: Node | None, else_: Node | None = None
) -> Node:
    """Create an if-statement with compound branches."""
    _require(NodeKind.COND, "condition", condition)
    _require(NodeKind.COND, "then-branch", then, NodeKind.COMPOUND)
    _check_optional(NodeKind.COND, "else-branch", else_, NodeKind.COMPOUND)
    return _link(NodeKind.COND, condition, then, else_)


def new_ternary(
    condition: Node | None, then: Node | None, else_: Node | None
) -> Node:
    _require(NodeKind.TERNARY, "condition", condition)
    _require(NodeKind.TERNARY, "then-expression", then)
    _require(NodeKind.TERNARY, "else-expression", else_)
    return _link(NodeKind.TERNARY, condition, then, else_)


def new_return(expr: Node | None = None) -> Node:
    return _link(NodeKind.RETURN, expr)


def new_break() -> Node:
    return _link(NodeKind.BREAK)


def new_continue() -> Node:
    return _link(NodeKind.CONTINUE)


def new_while(condition: Node | None, block: Node | None) -> Node:
    _require(NodeKind.WHILE, "condition", condition)
    _require(NodeKind.WHILE, "body", block, NodeKind.SEQUENCE)
    return _link(NodeKind.WHILE, condition, block)


def new_for(
    identifier: Node | None, iterable: Node | None, block: Node | None
) -> Node:
    _require(NodeKind.FOR, "identifier", identifier, NodeKind.STR)
    _require(NodeKind.FOR, "iterable", iterable)
    _require(NodeKind.FOR, "body", block, NodeKind.SEQUENCE)
    return _link(NodeKind.FOR, identifier, iterable, block)


def new_vardecl(sigvar: Node | None, value: Node | None = None) -> Node:
    _require(NodeKind.VAR_DECL, "signature", sigvar, NodeKind.SIG_VAR)
    return _link(NodeKind.VAR_DECL, sigvar, value)


def new_class(identifier: Node | None, spec: Node | None) -> Node:
    _require(NodeKind.CLASS, "identifier", identifier, NodeKind.STR)
    _require(NodeKind.CLASS, "specification", spec, NodeKind.CLASS_SPEC)
    return _link(NodeKind.CLASS, identifier, spec)


def new_class_spec(head: Node | None = None) -> Node:
    """Create a ``ClassSpec`` holding member facts and functions."""
    return _link(NodeKind.CLASS_SPEC, chain=head)


def new_fact(relation: Node | None, args: Node | None = None) -> Node:
    """Create a first-order ``Fact``: relation scope plus address arguments."""
    _require(NodeKind.FACT, "relation", relation, NodeKind.SCOPE)
    for arg in iter_chain(args):
        if arg.kind is not NodeKind.ADDRESS:
            raise TreeConstructionError(
                NodeKind.FACT, f"argument must be Address, got {arg.kind.value}"
            )
    return _link(NodeKind.FACT, relation, chain=args)


def new_triple_fact(
    subject: Node | None, relation: Node | None, obj: Node | None = None
) -> Node:
    """Create a ``TripleFact`` written as ``subject relation object``.

    The relation becomes the first child, the subject its sibling and the
    optional object the subject's sibling.
    """
    _require(NodeKind.TRIPLE_FACT, "relation", relation, NodeKind.SCOPE)
    _require(NodeKind.TRIPLE_FACT, "subject", subject, NodeKind.ADDRESS)
    _check_optional(NodeKind.TRIPLE_FACT, "object", obj, NodeKind.ADDRESS)
    return _link(NodeKind.TRIPLE_FACT, relation, subject, obj)


def new_trans_unit(first: Node | None = None) -> Node:
    """Create the ``TransUnit`` root; ``first`` heads the top-level chain."""
    return _link(NodeKind.TRANS_UNIT, chain=first)


# ---------------------------------------------------------------------------
# Chain manipulation
# ---------------------------------------------------------------------------


def _append(head: Node, successor: Node) -> None:
    _check_free(None, successor)
    _check_acyclic(head, successor)
    cursor = head
    while cursor.sibling is not None:
        cursor = cursor.sibling
    cursor.sibling = successor
    successor.attached = True


def add_sibling(node: Node | None, successor: Node) -> Node:
    """Append ``successor`` to the end of ``node``'s sibling chain.

    Returns ``node`` so calls can be nested while building statement lists.
    """
    if node is None:
        raise TreeConstructionError(None, "cannot add a sibling to a missing node")
    _append(node, successor)
    return node


def add_child(node: Node | None, successor: Node) -> Node:
    """Append ``successor`` to the end of ``node``'s child chain."""
    if node is None:
        raise TreeConstructionError(None, "cannot add a child to a missing node")
    if node.child is None:
        _check_free(None, successor)
        _check_acyclic(node, successor)
        node.child = successor
        successor.attached = True
    else:
        _append(node.child, successor)
    return node


# ---------------------------------------------------------------------------
# Traversal and release
# ---------------------------------------------------------------------------


def iter_chain(start: Node | None) -> Iterator[Node]:
    """Yield ``start`` and every node along its sibling chain."""
    cursor = start
    while cursor is not None:
        yield cursor
        cursor = cursor.sibling


def walk(root: Node | None) -> Iterator[Node]:
    """Yield every node reachable from ``root`` in pre-order.

    ``root``'s own siblings are included, matching the reach of ``release``.
    """
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node
        if node.sibling is not None:
            stack.append(node.sibling)
        if node.child is not None:
            stack.append(node.child)


def release(
    root: Node | None, on_release: Callable[[Node], None] | None = None
) -> int:
    """Release every node reachable from ``root`` through child and sibling links.

    Nodes are released in post-order (child chain, then sibling chain, then
    the node itself).  Each node is unlinked, each ``Str`` payload is
    cleared, and ``on_release`` is called exactly once per node.

    Parameters
    ----------
    root:
        Usually the ``TransUnit`` node.  ``None`` is a no-op.
    on_release:
        Optional accounting callback.

    Returns
    -------
    int
        The number of released nodes.
    """
    if root is None:
        return 0

    pending = [root]
    order: list[Node] = []
    while pending:
        node = pending.pop()
        order.append(node)
        if node.child is not None:
            pending.append(node.child)
        if node.sibling is not None:
            pending.append(node.sibling)

    for node in reversed(order):
        if isinstance(node, StrNode):
            node.value = None
        node.child = None
        node.sibling = None
        node.attached = False
        if on_release is not None:
            on_release(node)

    logger.debug("Released %d node(s)", len(order))
    return len(order)


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def str_value(node: Node | None) -> str | None:
    """Return the payload of a ``Str`` node, or ``None`` for anything else."""
    if isinstance(node, StrNode):
        return node.value
    return None


def scope_names(scope: Node) -> list[str]:
    """Return the namespace parts of a ``Scope`` in order."""
    return [
        part.value
        for part in scope.children()
        if isinstance(part, StrNode) and part.value is not None
    ]


def address_name(address: Node | None) -> str | None:
    """Return the dotted name an ``Address`` refers to.

    The parameter part, if any, is not part of the name.
    """
    if address is None or address.kind is not NodeKind.ADDRESS:
        return None
    scope = address.child
    if scope is None or scope.kind is not NodeKind.SCOPE:
        return None
    names = scope_names(scope)
    return ".".join(names) if names else None


def function_name(func: Node) -> str | None:
    """Return a ``Func`` node's identifier, or ``None`` if the signature is invalid."""
    sig = func.child
    if sig is None or sig.kind is not NodeKind.SIGNATURE:
        return None
    return str_value(sig.child)


def function_body(func: Node) -> Iterator[Node]:
    """Iterate over the top-level statements of a ``Func`` body."""
    sig = func.child
    return iter_chain(sig.sibling if sig is not None else None)


def call_parts(call: Node) -> tuple[Node, Node | None]:
    """Return ``(callee, first_argument)`` of a ``Call`` node."""
    callee = call.child
    if callee is None:
        raise TreeConstructionError(NodeKind.CALL, "call without a callee")
    return callee, callee.sibling


def triple_parts(fact: Node) -> tuple[Node, Node, Node | None]:
    """Return ``(relation, subject, object)`` of a ``TripleFact`` node."""
    relation = fact.child
    subject = relation.sibling if relation is not None else None
    if relation is None or subject is None:
        raise TreeConstructionError(
            NodeKind.TRIPLE_FACT, "triple fact without relation and subject"
        )
    return relation, subject, subject.sibling


def fact_parts(fact: Node) -> tuple[Node, list[Node]]:
    """Return ``(relation, arguments)`` of a ``Fact`` node."""
    relation = fact.child
    if relation is None:
        raise TreeConstructionError(NodeKind.FACT, "fact without a relation")
    return relation, list(iter_chain(relation.sibling))


def top_level(root: Node) -> Iterator[Node]:
    """Iterate over the top-level children of a ``TransUnit``."""
    return root.children()


def find_function(root: Node, name: str) -> Node | None:
    """Return the first top-level ``Func`` named ``name`` in declaration order."""
    for node in top_level(root):
        if node.kind is NodeKind.FUNC and function_name(node) == name:
            return node
    return None
