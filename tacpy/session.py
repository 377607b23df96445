"""Process-wide session state and the broadcast capability.

A computation may need a back end (for example a message passing layer) that
is initialised once per process and torn down once, after every holder has
released it. ``init`` is idempotent; ``finalize`` only runs the registered
teardown callbacks when the session was initialised, has not been finalised
yet and no holder remains.
"""

import logging
import threading
from typing import Any, Callable, Protocol

_log = logging.getLogger(__name__)
_lock = threading.Lock()
_state = {"initialized": False, "finalized": False, "references": 0}
_teardown: list[Callable[[], None]] = []


def init() -> None:
    with _lock:
        if _state["initialized"]:
            return
        _state["initialized"] = True
        _log.debug("Session initialised")


def initialized() -> bool:
    return _state["initialized"]


def finalized() -> bool:
    return _state["finalized"]


def references() -> int:
    return _state["references"]


def on_finalize(callback: Callable[[], None]) -> None:
    """Register a teardown callback, run once by :func:`finalize`."""
    with _lock:
        _teardown.append(callback)


def acquire() -> None:
    with _lock:
        if _state["finalized"]:
            raise RuntimeError("The session has already been finalised")
        _state["references"] += 1


def release() -> None:
    with _lock:
        if _state["references"] == 0:
            raise RuntimeError("The session has no holder to release")
        _state["references"] -= 1


def finalize() -> None:
    with _lock:
        if _state["finalized"] or not _state["initialized"]:
            return
        if _state["references"] > 0:
            _log.warning(
                f"Session still held by {_state['references']} owner(s), not finalising"
            )
            return
        while _teardown:
            _teardown.pop()()
        _state["finalized"] = True
        _log.debug("Session finalised")


class Session:
    """Context manager holding the process-wide session.

    The process session is initialised on entry; finalising it is left to
    the application, see :func:`finalize`.
    """

    def __enter__(self):
        init()
        acquire()
        return self

    def __exit__(self, *exc):
        release()
        return False


class Broadcaster(Protocol):
    """Distributes a value from the ``root`` process to every process."""

    def broadcast(self, value: Any, root: int = 0) -> Any: ...


class NullBroadcaster:
    """Single process broadcaster; every value is already everywhere."""

    rank = 0
    size = 1

    def broadcast(self, value: Any, root: int = 0) -> Any:
        if root != 0:
            raise ValueError(f"Root {root} does not exist in a single process session")
        return value
