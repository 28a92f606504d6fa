"""Composable predicates with readable descriptions.

Predicates are plain tagged values (``Leaf``, ``And``, ``Or``, ``Not``)
interpreted by :func:`evaluate`; :func:`describe` renders them as text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Union


class _Combinable:
    def __and__(self, other: "Predicate") -> "And":
        return And(self, other)  # type: ignore[arg-type]

    def __or__(self, other: "Predicate") -> "Or":
        return Or(self, other)  # type: ignore[arg-type]

    def __invert__(self) -> "Not":
        return Not(self)  # type: ignore[arg-type]

    def __call__(self, value: Any) -> bool:
        return evaluate(self, value)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return describe(self)  # type: ignore[arg-type]


@dataclass(frozen=True, eq=False, repr=False)
class Leaf(_Combinable):
    test: Callable[[Any], bool]
    description: str


@dataclass(frozen=True, eq=False, repr=False)
class And(_Combinable):
    left: "Predicate"
    right: "Predicate"


@dataclass(frozen=True, eq=False, repr=False)
class Or(_Combinable):
    left: "Predicate"
    right: "Predicate"


@dataclass(frozen=True, eq=False, repr=False)
class Not(_Combinable):
    operand: "Predicate"


Predicate = Union[Leaf, And, Or, Not]


def create(test: Callable[[Any], bool], description: str) -> Leaf:
    if test is None:
        raise TypeError("predicate function must not be None")
    return Leaf(test, description)


def evaluate(predicate: Predicate, value: Any) -> bool:
    if isinstance(predicate, Leaf):
        return bool(predicate.test(value))
    if isinstance(predicate, And):
        return evaluate(predicate.left, value) and evaluate(predicate.right, value)
    if isinstance(predicate, Or):
        return evaluate(predicate.left, value) or evaluate(predicate.right, value)
    if isinstance(predicate, Not):
        return not evaluate(predicate.operand, value)
    raise TypeError(f"not a predicate: {predicate!r}")


def describe(predicate: Predicate) -> str:
    if isinstance(predicate, Leaf):
        return predicate.description
    if isinstance(predicate, And):
        return f"({describe(predicate.left)} && {describe(predicate.right)})"
    if isinstance(predicate, Or):
        return f"({describe(predicate.left)} || {describe(predicate.right)})"
    if isinstance(predicate, Not):
        return f"!({describe(predicate.operand)})"
    raise TypeError(f"not a predicate: {predicate!r}")
