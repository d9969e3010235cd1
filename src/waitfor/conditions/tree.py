"""
Combinator Tree — AND/OR composition of conditions.

Nodes evaluate lazily left to right: the left child is always evaluated, the
right child only when the left one doesn't decide the result. Because leaves
carry observation memory, operand order is observable: in ``a | b`` a true
``a`` means ``b`` never gets to record its baseline on that pass.
"""

from typing import Union

from waitfor.conditions.primitives import Condition


class Node:
    """Base class for tree nodes."""

    def evaluate(self) -> bool:
        raise NotImplementedError

    def negate(self) -> "Node":
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def wait(self, interval) -> int:
        from waitfor.core.driver import wait
        return wait(self, interval)

    def __and__(self, other) -> "And":
        if not isinstance(other, (Condition, Node)):
            return NotImplemented
        return both(self, other)

    def __or__(self, other) -> "Or":
        if not isinstance(other, (Condition, Node)):
            return NotImplemented
        return either(self, other)

    def __invert__(self) -> "Node":
        return self.negate()

    def __str__(self) -> str:
        return self.describe()


Operand = Union[Condition, Node]


class Leaf(Node):
    """Wraps a single primitive condition."""

    def __init__(self, condition: Condition):
        self.condition = condition

    def evaluate(self) -> bool:
        return self.condition.evaluate()

    def negate(self) -> "Leaf":
        self.condition.negate()
        return self

    def describe(self) -> str:
        return self.condition.describe()


class And(Node):
    def __init__(self, left: Node, right: Node):
        self.left = left
        self.right = right

    def evaluate(self) -> bool:
        return self.left.evaluate() and self.right.evaluate()

    def negate(self) -> "Or":
        """not(A and B) → not(A) or not(B), negating the children in place."""
        return Or(self.left.negate(), self.right.negate())

    def describe(self) -> str:
        return f"({self.left.describe()} and {self.right.describe()})"


class Or(Node):
    def __init__(self, left: Node, right: Node):
        self.left = left
        self.right = right

    def evaluate(self) -> bool:
        return self.left.evaluate() or self.right.evaluate()

    def negate(self) -> "And":
        """not(A or B) → not(A) and not(B), negating the children in place."""
        return And(self.left.negate(), self.right.negate())

    def describe(self) -> str:
        return f"({self.left.describe()} or {self.right.describe()})"


def as_node(operand: Operand) -> Node:
    """Wrap a bare condition in a Leaf; nodes pass through untouched."""
    if isinstance(operand, Node):
        return operand
    if isinstance(operand, Condition):
        return Leaf(operand)
    raise TypeError(f"expected a Condition or Node, got {type(operand).__name__}")


def both(left: Operand, right: Operand) -> And:
    """AND two operands into a new node that takes ownership of them."""
    return And(as_node(left), as_node(right))


def either(left: Operand, right: Operand) -> Or:
    """OR two operands into a new node that takes ownership of them."""
    return Or(as_node(left), as_node(right))
