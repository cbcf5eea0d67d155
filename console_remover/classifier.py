from __future__ import annotations

from tree_sitter import Node

CONSOLE_NAME = "console"

# Property access forms: ``console.log`` and ``console["log"]``.
MEMBER_TYPES: frozenset[str] = frozenset({"member_expression", "subscript_expression"})
COMMENT_TYPES: frozenset[str] = frozenset({"comment", "html_comment"})


def unwrap_parens(node: Node) -> Node:
    """Strip any number of redundant parentheses around an expression."""
    while node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type not in COMMENT_TYPES]
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def is_optional(node: Node) -> bool:
    """Whether ``node`` is itself an optional link (``?.``) of a chain."""
    if node.child_by_field_name("optional_chain") is not None:
        return True
    return any(child.type in ("optional_chain", "?.") for child in node.children)


def is_console_call(node: Node) -> bool:
    """Check if a call expression node is a ``console.*`` call.

    The callee has to be a plain property access on the identifier
    ``console``. The method name is not inspected and no scope analysis is
    done, so a locally bound ``console`` matches as well. Optional calls and
    tagged templates are not plain calls and never match.
    """
    if node.type != "call_expression" or is_optional(node):
        return False
    arguments = node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return False
    callee = node.child_by_field_name("function")
    if callee is None:
        return False
    callee = unwrap_parens(callee)
    if callee.type not in MEMBER_TYPES or is_optional(callee):
        return False
    base = callee.child_by_field_name("object")
    if base is None:
        return False
    base = unwrap_parens(base)
    return base.type == "identifier" and base.text == CONSOLE_NAME.encode()


def is_console_expression(node: Node) -> bool:
    """``is_console_call`` that sees through parentheses around the call."""
    return is_console_call(unwrap_parens(node))
