import pytest

from view_core import predicates
from view_core.predicates import And, Leaf, Not, Or, describe, evaluate

POSITIVE = Leaf(lambda v: v > 0, "positive")
EVEN = Leaf(lambda v: v % 2 == 0, "even")


def test_leaf_and_combinators_evaluate() -> None:
    assert evaluate(POSITIVE, 3)
    assert evaluate(And(POSITIVE, EVEN), 4)
    assert not evaluate(And(POSITIVE, EVEN), 3)
    assert evaluate(Or(POSITIVE, EVEN), -2)
    assert not evaluate(Or(POSITIVE, EVEN), -3)
    assert evaluate(Not(POSITIVE), -1)


def test_descriptions_compose() -> None:
    assert describe(And(POSITIVE, EVEN)) == "(positive && even)"
    assert describe(Or(POSITIVE, EVEN)) == "(positive || even)"
    assert describe(Not(POSITIVE)) == "!(positive)"
    assert describe((POSITIVE | EVEN) & ~EVEN) == "((positive || even) && !(even))"


def test_operators_build_tagged_variants() -> None:
    combined = POSITIVE & ~EVEN
    assert isinstance(combined, And)
    assert isinstance(combined.right, Not)
    assert combined(3) is True
    assert combined(4) is False
    assert str(POSITIVE | EVEN) == "(positive || even)"


def test_and_short_circuits() -> None:
    calls = []
    recorder = Leaf(lambda v: calls.append(v) or True, "recorder")
    assert not evaluate(Not(POSITIVE) & recorder, 5)
    assert calls == []


def test_create_and_invalid_input() -> None:
    leaf = predicates.create(lambda v: v is None, "isNone")
    assert leaf(None)
    assert str(leaf) == "isNone"
    with pytest.raises(TypeError):
        predicates.create(None, "nothing")
    with pytest.raises(TypeError):
        evaluate("not a predicate", 1)  # type: ignore[arg-type]
