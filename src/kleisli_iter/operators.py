"""
Arrow Operators - Building Blocks for Kleisli Pipelines

This module provides small arrows and arrow combinators that compose with
``kleisli_compose``:
- unit / zero: the one-element and empty arrows
- lift: turn a plain function into an arrow
- when / unless: guards that keep or drop the input
- branch: backtracking alternatives
- tap: side effects without changing the value
- closure: fixed point of an arrow, for path queries

Every arrow built here is lazy: its body runs when the consumer pulls.
"""

from typing import Any, Callable, Hashable, Iterable, Iterator, Tuple, TypeVar

from .exceptions import ensure_arrow

T = TypeVar("T")
U = TypeVar("U")

_EXHAUSTED = object()


# =============================================================================
# Identity and Zero
# =============================================================================

def unit(a: T) -> Tuple[T]:
    """Arrow yielding its input once. Identity for composition."""
    return (a,)


def zero(a: Any) -> Tuple[()]:
    """Arrow yielding nothing."""
    return ()


def lift(fn: Callable[[T], U]) -> Callable[[T], Iterator[U]]:
    """
    Turn a plain function into an arrow yielding its result once.

    Example:
        k = kleisli_compose(lift(str.upper), lookup_by_name)

    Args:
        fn: Function from one value to one value

    Returns:
        Arrow yielding ``fn(a)``
    """
    ensure_arrow(fn, "fn")

    def _lift(a: T) -> Iterator[U]:
        yield fn(a)
    return _lift


# =============================================================================
# Conditional Operators
# =============================================================================

def when(pred: Callable[[T], bool]) -> Callable[[T], Iterator[T]]:
    """
    Guard arrow: yields the input only when the predicate holds.

    Example:
        adults = kleisli_compose(people_in_city, when(lambda p: p.age >= 18))

    Args:
        pred: Predicate on the input

    Returns:
        Arrow yielding ``a`` once if ``pred(a)``, else nothing
    """
    ensure_arrow(pred, "pred")

    def _when(a: T) -> Iterator[T]:
        if pred(a):
            yield a
    return _when


def unless(pred: Callable[[T], bool]) -> Callable[[T], Iterator[T]]:
    """
    Guard arrow (inverted): yields the input only when the predicate fails.

    Args:
        pred: Predicate that returns True when the input should be DROPPED

    Returns:
        Arrow yielding ``a`` once if not ``pred(a)``, else nothing
    """
    ensure_arrow(pred, "pred")

    def _unless(a: T) -> Iterator[T]:
        if not pred(a):
            yield a
    return _unless


# =============================================================================
# Branching Operators
# =============================================================================

def branch(*arrows: Callable[[T], Iterable[U]]) -> Callable[[T], Iterator[U]]:
    """
    Alternatives: yields everything from each arrow in turn.

    On a backtracking search each arrow is a branch; the next branch is only
    entered once the previous one is exhausted.

    Example:
        neighbours = branch(out_edges, in_edges)

    Args:
        arrows: Arrows tried left to right

    Returns:
        Arrow yielding ``arrows[0](a)``, then ``arrows[1](a)``, ...
    """
    for i, arrow in enumerate(arrows):
        ensure_arrow(arrow, f"arrows[{i}]")

    def _branch(a: T) -> Iterator[U]:
        for arrow in arrows:
            yield from arrow(a)
    return _branch


def tap(fn: Callable[[T], Any]) -> Callable[[T], Iterator[T]]:
    """
    Call ``fn`` for its side effect and pass the input through.

    Example:
        traced = kleisli_compose(parents, tap(visited.append))
    """
    ensure_arrow(fn, "fn")

    def _tap(a: T) -> Iterator[T]:
        fn(a)
        yield a
    return _tap


# =============================================================================
# Fixed Point
# =============================================================================

def closure(
    f: Callable[[T], Iterable[T]],
    reflexive: bool = True,
    unique: bool = True,
) -> Callable[[T], Iterator[T]]:
    """
    Fixed point of an arrow: everything reachable by applying it repeatedly.

    Traversal is depth-first and left to right, the same order a chain of
    ``kleisli_compose(f, f)`` would produce. Each reached value is expanded
    right after it is yielded.

    Example:
        ancestors = closure(parents, reflexive=False)
        list(ancestors("alice"))

    Args:
        f: Arrow from a node to its successors
        reflexive: Yield the start value first
        unique: Yield each value at most once. Needed for cyclic graphs to
            terminate; values must then be hashable.

    Returns:
        Arrow yielding the start value (if reflexive) and every value
        reachable from it
    """
    ensure_arrow(f, "f")

    def _closure(a: T) -> Iterator[T]:
        seen: set[Hashable] = set()
        if reflexive:
            if unique:
                seen.add(a)
            yield a

        stack = [iter(f(a))]
        while stack:
            b = next(stack[-1], _EXHAUSTED)
            if b is _EXHAUSTED:
                stack.pop()
                continue
            if unique:
                if b in seen:
                    continue
                seen.add(b)
            yield b
            stack.append(iter(f(b)))
    return _closure


__all__ = [
    "unit",
    "zero",
    "lift",
    "when",
    "unless",
    "branch",
    "tap",
    "closure",
]
