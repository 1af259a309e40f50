"""
kleisli_iter - Kleisli composition for sequence-producing arrows

An arrow maps one value to a lazily produced sequence of values. Composing
arrows end to end builds multi-stage, backtracking query pipelines (chained
relational lookups, graph-path expansion) without materializing intermediate
collections.

    from kleisli_iter import kleisli_compose, apply, apply_flat, restartable

    rows = restartable(db)
    f = lambda t: rows.restart().map(lambda x: x[1]).filter(lambda x: x == t[0])
    g = lambda s: rows.restart().map(lambda x: x[1]).filter(lambda x: x == s)
    k = kleisli_compose(f, g)

    next(apply(k, (2, 3)))      # head only, the same on every pull
    list(apply_flat(k, (2, 3))) # every element once
"""

__version__ = "0.1.0"

from .exceptions import (
    KleisliError,
    NotAnArrowError,
    SourceError,
    NotRestartableError,
    UnknownColumnError,
    ConfigError,
)
from .config import TraceConfig
from .logging_config import configure_logging, get_trace_logger
from .operators import unit, zero, lift, when, unless, branch, tap, closure
from .kleisli import (
    Arrow,
    StatefulArrow,
    KleisliCompose,
    ApplyKleisliCompose,
    FlatApplyKleisliCompose,
    kleisli_compose,
    chain,
    apply,
    apply_flat,
)
from .cursors import (
    Cursor,
    SequenceCursor,
    TableCursor,
    MapCursor,
    FilterCursor,
    restartable,
)

__all__ = [
    # Composition
    "Arrow",
    "StatefulArrow",
    "KleisliCompose",
    "ApplyKleisliCompose",
    "FlatApplyKleisliCompose",
    "kleisli_compose",
    "chain",
    "apply",
    "apply_flat",
    # Operators
    "unit",
    "zero",
    "lift",
    "when",
    "unless",
    "branch",
    "tap",
    "closure",
    # Restartable sources
    "Cursor",
    "SequenceCursor",
    "TableCursor",
    "MapCursor",
    "FilterCursor",
    "restartable",
    # Errors
    "KleisliError",
    "NotAnArrowError",
    "SourceError",
    "NotRestartableError",
    "UnknownColumnError",
    "ConfigError",
    # Configuration
    "TraceConfig",
    "configure_logging",
    "get_trace_logger",
]
