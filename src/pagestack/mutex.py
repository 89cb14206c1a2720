"""Mutex coordinator — serialize or dedupe concurrent async operations.

Wraps an async operation with one of three policies. While an invocation
is in flight, later calls are:

- **discard**: answered immediately with a fixed result, never invoked.
  Repeated taps on a submit button only submit once.
- **merge**: parked until the in-flight invocation settles, then handed
  the very same result (or the very same exception). Concurrent logins
  only log in once.
- **wait**: queued; each runs after the previous one finishes, strictly
  in arrival order. Concurrent dialogs show one after another.

Two flavours:

- ``make_no_concurrent()``: the lock belongs to the wrapped operation.
- ``make_mutex()``: the lock lives in a ``MutexNamespace`` under an id,
  so several operations sharing the id exclude each other.

Wrapping is explicit composition at registration time::

    navigate = make_mutex(namespace=context.locks, mutex_id="navigate",
                          discard_result=DISCARDED)
    self.open = navigate(self._open)
    self.reset = navigate(self._reset)

    login = merging_step(login)

Release protocol:
    When the active invocation finishes (success or failure) the listener
    queue is drained in FIFO order, every drained listener receiving the
    finished outcome. A blocking (wait-mode) listener stops the drain and
    inherits the lock; its own invocation drains the rest when it
    finishes. The lock is released only when the queue empties without
    reaching a blocking listener.

    An invocation aborted by cancellation shares no outcome: the lock
    passes to the first queued caller, which then runs the operation
    itself.

Misuse (a namespace that is not a ``MutexNamespace``, an unknown mode) is
logged and leaves the operation unguarded rather than raising.
"""

import inspect
import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from functools import wraps
from typing import Any

import anyio

from pagestack._internal.types import AsyncOperation

logger = logging.getLogger("pagestack.mutex")

Guard = Callable[[AsyncOperation], AsyncOperation]


class MutexMode(StrEnum):
    DISCARD = "discard"
    MERGE = "merge"
    WAIT = "wait"


@dataclass(slots=True)
class _Outcome:
    """Settled value of an invocation: a result or the exception it raised."""

    value: Any = None
    error: Exception | None = None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


@dataclass(slots=True, eq=False)
class _Listener:
    blocking: bool
    event: anyio.Event = field(default_factory=anyio.Event)
    outcome: _Outcome | None = None
    owns_lock: bool = False


@dataclass(slots=True)
class MutexState:
    """Lock state for one mutex id."""

    running: bool = False
    listeners: deque[_Listener] = field(default_factory=deque)

    async def wait_turn(self, *, blocking: bool) -> _Outcome | None:
        """Queue behind the running invocation.

        Returns the running invocation's outcome, or ``None`` once the lock
        was handed to this caller. Blocking listeners always get the lock;
        others get it only when the running invocation was aborted.
        """
        listener = _Listener(blocking=blocking)
        self.listeners.append(listener)
        try:
            await listener.event.wait()
        except BaseException:
            if listener in self.listeners:
                self.listeners.remove(listener)
            elif listener.owns_lock:
                # Ownership was already handed to us; pass it on
                self.abandon()
            raise
        if listener.owns_lock:
            return None
        return listener.outcome

    def release(self, outcome: _Outcome) -> None:
        """Drain listeners with *outcome*; free the lock if nobody blocks."""
        while self.listeners:
            listener = self.listeners.popleft()
            if listener.blocking:
                listener.owns_lock = True
                listener.event.set()
                return
            listener.outcome = outcome
            listener.event.set()
        self.running = False

    def abandon(self) -> None:
        """Hand the lock to the next listener without an outcome to share."""
        if self.listeners:
            listener = self.listeners.popleft()
            listener.owns_lock = True
            listener.event.set()
            return
        self.running = False


class MutexNamespace:
    """Lock states shared by every operation that must mutually exclude.

    States are created lazily on first use of a mutex id.
    """

    __slots__ = ("_states",)

    def __init__(self) -> None:
        self._states: dict[str, MutexState] = {}

    def state(self, mutex_id: str) -> MutexState:
        state = self._states.get(mutex_id)
        if state is None:
            state = self._states[mutex_id] = MutexState()
        return state

    def __contains__(self, mutex_id: object) -> bool:
        return mutex_id in self._states

    def __repr__(self) -> str:
        return f"MutexNamespace({sorted(self._states)!r})"


def _unguarded(operation: AsyncOperation) -> AsyncOperation:
    return operation


def _operation_name(operation: Callable[..., Any]) -> str:
    return getattr(operation, "__qualname__", None) or repr(operation)


def _coerce_mode(mode: MutexMode | str) -> MutexMode | None:
    try:
        return MutexMode(mode)
    except ValueError:
        logger.error("Unknown mutex mode %r; operation left unguarded", mode)
        return None


def _guard(
    operation: AsyncOperation,
    state_for: Callable[[], MutexState],
    mode: MutexMode,
    discard_result: Any,
) -> AsyncOperation:
    name = _operation_name(operation)

    @wraps(operation)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        state = state_for()
        if state.running:
            if mode is MutexMode.DISCARD:
                logger.debug("%s discarded: previous call still running", name)
                return discard_result
            outcome = await state.wait_turn(blocking=mode is MutexMode.WAIT)
            if outcome is not None:
                return outcome.unwrap()

        state.running = True
        try:
            result = operation(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            else:
                logger.error(
                    "%s is guarded by a mutex but returned %s, not an awaitable",
                    name,
                    type(result).__name__,
                )
        except Exception as exc:
            logger.debug("%s failed while holding its mutex", name, exc_info=True)
            state.release(_Outcome(error=exc))
            raise
        except BaseException:
            # Cancellation belongs to this caller alone
            logger.debug("%s aborted while holding its mutex", name)
            state.abandon()
            raise
        state.release(_Outcome(value=result))
        return result

    return wrapper


def make_no_concurrent(
    *,
    mode: MutexMode | str = MutexMode.DISCARD,
    discard_result: Any = None,
) -> Guard:
    """Guard factory with a lock private to each wrapped operation.

    Args:
        mode: ``discard`` (default), ``merge`` or ``wait``.
        discard_result: Returned to discarded calls in discard mode.
    """
    resolved = _coerce_mode(mode)
    if resolved is None:
        return _unguarded

    def guard(operation: AsyncOperation) -> AsyncOperation:
        state = MutexState()
        return _guard(operation, lambda: state, resolved, discard_result)

    return guard


def make_mutex(
    *,
    namespace: MutexNamespace,
    mutex_id: str | None = None,
    mode: MutexMode | str = MutexMode.DISCARD,
    discard_result: Any = None,
) -> Guard:
    """Guard factory for operations that exclude each other.

    Operations wrapped with the same *namespace* and *mutex_id* never run
    concurrently. *mutex_id* defaults to the operation's ``__name__``.
    """
    if not isinstance(namespace, MutexNamespace):
        logger.error(
            "make_mutex() needs a MutexNamespace shared by all mutex operations, got %r; "
            "operation left unguarded",
            namespace,
        )
        return _unguarded
    resolved = _coerce_mode(mode)
    if resolved is None:
        return _unguarded

    def guard(operation: AsyncOperation) -> AsyncOperation:
        lock_id = mutex_id or getattr(operation, "__name__", _operation_name(operation))
        return _guard(operation, lambda: namespace.state(lock_id), resolved, discard_result)

    return guard


no_concurrent = make_no_concurrent(mode=MutexMode.DISCARD)
merging_step = make_no_concurrent(mode=MutexMode.MERGE)
single_aisle = make_no_concurrent(mode=MutexMode.WAIT)
