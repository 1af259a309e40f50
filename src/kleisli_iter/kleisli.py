"""
Kleisli Composition of Sequence-Producing Arrows

An *arrow* maps one value to a lazily produced sequence of values:

    f: A -> Iterable[B]
    g: B -> Iterable[C]

``kleisli_compose(f, g)`` pairs them into a single arrow ``A -> Iterable[C]``
(the fish operator, ``>=>``). Pairing is purely structural: nothing is
evaluated until a consumer pulls.

Two evaluations are provided for an input ``a``:

- ``apply(k, a)``: head-only. Every pull re-invokes ``f(a)``, flat-maps the
  result through ``g`` and returns the first element. Repeated pulls yield
  the same element forever, or nothing every time.
- ``apply_flat(k, a)``: full flattening. Yields every ``c`` of every ``g(b)``
  for every ``b`` of ``f(a)``, once each, depth-first and left to right.

Calling a composed arrow directly, ``k(a)``, is ``apply_flat``, which is what
makes composed arrows composable again:

    k = kleisli_compose(f, g) >> h

Inputs are re-supplied on every pull, so they should be immutable values.
Sequences captured inside arrows that are scanned more than once must be
restartable (see ``kleisli_iter.cursors``).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from itertools import chain as _chain
from typing import (
    Any, Callable, Generic, Iterable, Iterator, Optional, Protocol, TypeVar
)

from .exceptions import ensure_arrow
from .operators import unit

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
A_contra = TypeVar("A_contra", contravariant=True)
B_co = TypeVar("B_co", covariant=True)

_EXHAUSTED = object()


# =============================================================================
# Arrow Types
# =============================================================================

class Arrow(Protocol[A_contra, B_co]):
    """A callable from one value to a lazily produced sequence of values."""

    def __call__(self, a: A_contra) -> Iterable[B_co]:
        ...


class StatefulArrow(ABC, Generic[A, B]):
    """
    Base class for arrows that keep their captured state in explicit fields.

    Subclasses implement ``apply``; instances are called like any other
    arrow. State may be mutated across calls, and since head-only evaluation
    re-invokes its arrows on every pull, so may any side effect.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a type-class.
    ::: This is stateful.
    """

    @abstractmethod
    def apply(self, a: A) -> Iterable[B]:
        """Produce the sequence for one input."""
        raise NotImplementedError

    def __call__(self, a: A) -> Iterable[B]:
        return self.apply(a)

    def __rshift__(self, g: Callable[[B], Iterable[C]]) -> "KleisliCompose[A, B, C]":
        """Syntactic sugar: f >> g == kleisli_compose(f, g)"""
        return kleisli_compose(self, g)

    def __rrshift__(self, f: Callable[[Any], Iterable[A]]) -> "KleisliCompose[Any, A, B]":
        """Syntactic sugar for a plain callable on the left: f >> arrow"""
        return kleisli_compose(f, self)


# =============================================================================
# Composition
# =============================================================================

@dataclass(frozen=True)
class KleisliCompose(Generic[A, B, C]):
    """
    Immutable pairing of two arrows ``f: A -> [B]`` and ``g: B -> [C]``.

    Construction never invokes ``f`` or ``g``. A composed arrow is itself an
    arrow: calling it yields the full flattening, so it can be stored, passed
    and composed again.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a value-object.
    ::: This is stateless.
    """
    f: Callable[[A], Iterable[B]]
    g: Callable[[B], Iterable[C]]

    def __post_init__(self) -> None:
        ensure_arrow(self.f, "f")
        ensure_arrow(self.g, "g")

    def apply(self, a: A) -> "ApplyKleisliCompose[A, C]":
        """Head-only application to ``a``."""
        return ApplyKleisliCompose(a, self)

    def apply_flat(self, a: A) -> "FlatApplyKleisliCompose[A, C]":
        """Full-flattening application to ``a``."""
        return FlatApplyKleisliCompose(a, self)

    def __call__(self, a: A) -> Iterator[C]:
        return self.apply_flat(a)

    def then(self, h: Callable[[C], Iterable[Any]]) -> "KleisliCompose[A, C, Any]":
        """Compose ``h`` after this arrow."""
        return kleisli_compose(self, h)

    def __rshift__(self, h: Callable[[C], Iterable[Any]]) -> "KleisliCompose[A, C, Any]":
        """Syntactic sugar: k >> h == kleisli_compose(k, h)"""
        return kleisli_compose(self, h)

    def __rrshift__(self, f: Callable[[Any], Iterable[A]]) -> "KleisliCompose[Any, A, C]":
        """Syntactic sugar for a plain callable on the left: f >> k"""
        return kleisli_compose(f, self)

    def __repr__(self) -> str:
        return f"KleisliCompose({_arrow_name(self.f)} >=> {_arrow_name(self.g)})"


def kleisli_compose(
    f: Callable[[A], Iterable[B]],
    g: Callable[[B], Iterable[C]],
) -> KleisliCompose[A, B, C]:
    """
    Compose two arrows left to right (``f >=> g``).

    Example:
        parents = lambda n: edges.restart().filter(lambda e: e[1] == n).map(first)
        grandparents = kleisli_compose(parents, parents)
        next(apply(grandparents, "alice"))

    Args:
        f: Arrow from ``A`` to a sequence of ``B``
        g: Arrow from ``B`` to a sequence of ``C``

    Returns:
        KleisliCompose pairing ``f`` and ``g``; neither is invoked

    Raises:
        NotAnArrowError: if ``f`` or ``g`` is not callable
    """
    k = KleisliCompose(f, g)
    logger.debug("compose %r", k)
    return k


def chain(*arrows: Callable[[Any], Iterable[Any]]) -> Callable[[Any], Iterable[Any]]:
    """
    Fold arrows left to right into one composed arrow.

    ``chain(f, g, h)`` is ``kleisli_compose(kleisli_compose(f, g), h)``.
    A single arrow is returned as is; no arrows gives ``unit``.
    """
    if not arrows:
        return unit
    composed = ensure_arrow(arrows[0], "arrows[0]")
    for arrow in arrows[1:]:
        composed = kleisli_compose(composed, arrow)
    return composed


# =============================================================================
# Application
# =============================================================================

class ApplyKleisliCompose(Generic[A, C]):
    """
    Head-only application of a composed arrow to one input.

    Each ``__next__`` re-evaluates ``f(a)`` from scratch, flat-maps it through
    ``g`` and returns only the first element, so the iterator never advances:
    a non-empty application repeats its head forever and an empty one is
    exhausted on every pull. Arrow side effects and failures happen on every
    pull. Do not ``list()`` a non-empty instance; use ``next``, ``head`` or
    ``itertools.islice``.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a lazy-sequence.
    ::: This is stateless.
    """

    __slots__ = ("a", "k")

    def __init__(self, a: A, k: KleisliCompose[A, Any, C]):
        self.a = a
        self.k = k

    def __iter__(self) -> "ApplyKleisliCompose[A, C]":
        return self

    def __next__(self) -> C:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("pull head of %r on %r", self.k, self.a)
        flattened = _chain.from_iterable(map(self.k.g, self.k.f(self.a)))
        c = next(flattened, _EXHAUSTED)
        if c is _EXHAUSTED:
            raise StopIteration
        return c

    def head(self, default: Optional[C] = None) -> Optional[C]:
        """Pull once, returning ``default`` when the flattening is empty."""
        return next(self, default)

    def clone(self) -> "ApplyKleisliCompose[A, C]":
        return ApplyKleisliCompose(self.a, self.k)

    def __repr__(self) -> str:
        return f"ApplyKleisliCompose({self.a!r}, {self.k!r})"


class FlatApplyKleisliCompose(Generic[A, C]):
    """
    Full-flattening application of a composed arrow to one input.

    Keeps a cursor into ``f(a)`` and into the current ``g(b)`` across pulls,
    yielding every element once, depth-first and left to right. ``f(a)`` is
    invoked on the first pull and each ``g(b)`` when its turn comes.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a lazy-sequence.
    ::: This is stateful.
    """

    __slots__ = ("a", "k", "_outer", "_inner", "_done")

    def __init__(self, a: A, k: KleisliCompose[A, Any, C]):
        self.a = a
        self.k = k
        self._outer: Optional[Iterator[Any]] = None
        self._inner: Optional[Iterator[C]] = None
        self._done = False

    def __iter__(self) -> "FlatApplyKleisliCompose[A, C]":
        return self

    def __next__(self) -> C:
        if self._done:
            raise StopIteration
        if self._outer is None:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("start flattening %r on %r", self.k, self.a)
            self._outer = iter(self.k.f(self.a))

        while True:
            if self._inner is not None:
                c = next(self._inner, _EXHAUSTED)
                if c is not _EXHAUSTED:
                    return c
                self._inner = None
            b = next(self._outer, _EXHAUSTED)
            if b is _EXHAUSTED:
                self._outer = None
                self._done = True
                raise StopIteration
            self._inner = iter(self.k.g(b))

    def clone(self) -> "FlatApplyKleisliCompose[A, C]":
        """A fresh traversal from the beginning for the same input."""
        return FlatApplyKleisliCompose(self.a, self.k)

    restart = clone

    def __repr__(self) -> str:
        return f"FlatApplyKleisliCompose({self.a!r}, {self.k!r})"


def apply(k: KleisliCompose[A, Any, C], a: A) -> ApplyKleisliCompose[A, C]:
    """Head-only application of ``k`` to ``a``."""
    return k.apply(a)


def apply_flat(k: KleisliCompose[A, Any, C], a: A) -> FlatApplyKleisliCompose[A, C]:
    """Full-flattening application of ``k`` to ``a``."""
    return k.apply_flat(a)


def _arrow_name(arrow: Any) -> str:
    if isinstance(arrow, KleisliCompose):
        return f"({_arrow_name(arrow.f)} >=> {_arrow_name(arrow.g)})"
    return getattr(arrow, "__qualname__", None) or type(arrow).__name__


__all__ = [
    "Arrow",
    "StatefulArrow",
    "KleisliCompose",
    "ApplyKleisliCompose",
    "FlatApplyKleisliCompose",
    "kleisli_compose",
    "chain",
    "apply",
    "apply_flat",
]
