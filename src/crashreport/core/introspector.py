"""Error introspection.

Turns any error value into a :class:`NormalizedError`. The introspector only
relies on the optional capabilities in
:mod:`crashreport.interfaces.capabilities` and never raises: whatever cannot
be determined is left empty.
"""

from __future__ import annotations

from typing import Any

import structlog

from crashreport.core.extractor import extract_stack_trace
from crashreport.core.stack_dump import MAX_STACK_BYTES
from crashreport.interfaces.capabilities import HasCause, HasClass, HasData
from crashreport.models.error import NormalizedError

log = structlog.get_logger()

# Guard against cyclic cause chains
DEFAULT_MAX_CAUSE_DEPTH = 100


def resolve_cause(
    err: BaseException | None,
    max_depth: int = DEFAULT_MAX_CAUSE_DEPTH,
) -> BaseException | None:
    """Return the root cause of an error.

    Follows ``cause()`` while the error defines it, or the ``__cause__`` set
    by ``raise ... from ...`` otherwise. Unwrapping stops at the first error
    whose cause is None. If the error is None, None is returned.

    Args:
        err: Error to unwrap
        max_depth: Maximum number of links to follow

    Returns:
        The innermost reachable error
    """
    if err is None:
        return None

    depth = 0
    while (cause := _direct_cause(err)) is not None:
        if depth >= max_depth:
            log.warning("cause_chain_too_deep", max_depth=max_depth, error_type=type(err).__name__)
            break
        err = cause
        depth += 1

    return err


def class_of(err: BaseException) -> str:
    """Return the class tag declared by ``error_class()``, or an empty string."""
    if not isinstance(err, HasClass):
        return ""

    try:
        value = err.error_class()
        return "" if value is None else str(value)
    except Exception as e:
        log.debug("class_probe_failed", error_type=type(err).__name__, exception=str(e))
        return ""


def data_of(err: BaseException) -> Any:
    """Return the payload declared by ``data()``, or None."""
    if not isinstance(err, HasData):
        return None

    try:
        return err.data()
    except Exception as e:
        log.debug("data_probe_failed", error_type=type(err).__name__, exception=str(e))
        return None


def introspect(
    err: BaseException | NormalizedError | None,
    max_cause_depth: int = DEFAULT_MAX_CAUSE_DEPTH,
    capture_limit: int = MAX_STACK_BYTES,
) -> NormalizedError:
    """Normalize an error into a serializable report record.

    An error that is already normalized is returned unchanged. When the
    error carries no stack of its own, the trace starts at the caller of
    this function.

    Args:
        err: Error to normalize
        max_cause_depth: Maximum cause chain length to follow
        capture_limit: Size bound for raw stack captures, in bytes

    Returns:
        A new NormalizedError describing the error

    Example:
        try:
            process(order)
        except Exception as e:
            report = introspect(e)
            print(report.message, len(report.stack_trace))
    """
    if isinstance(err, NormalizedError):
        return err

    if err is None:
        return NormalizedError(message="<nil>")

    root = resolve_cause(err, max_cause_depth)

    return NormalizedError(
        message=describe(err),
        inner_error=describe(root) if root is not None and root is not err else "",
        class_name=class_of(err),
        data=data_of(err),
        stack_trace=extract_stack_trace(err, capture_limit),
    )


def describe(err: BaseException) -> str:
    """Return an error's own text, falling back to its type name."""
    try:
        text = str(err)
    except Exception:
        text = ""
    return text or type(err).__name__


def _direct_cause(err: BaseException) -> BaseException | None:
    if isinstance(err, HasCause) and callable(err.cause):
        try:
            cause = err.cause()
        except Exception as e:
            log.debug("cause_probe_failed", error_type=type(err).__name__, exception=str(e))
            return None
        return cause if isinstance(cause, BaseException) else None

    return err.__cause__
