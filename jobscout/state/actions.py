"""Actions dispatched to the store and the tagged results returned by thunks."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from jobscout.errors import JobScoutError
from jobscout.log import get_logger

if TYPE_CHECKING:
    from jobscout.state.store import RootState, Store

log = get_logger(__name__)

PENDING = "pending"
FULFILLED = "fulfilled"
REJECTED = "rejected"


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None
    error: BaseException | None = None
    meta: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


def lifecycle(prefix: str, stage: str) -> str:
    return f"{prefix}/{stage}"


@dataclass(frozen=True)
class Fulfilled:
    type: str
    payload: Any
    request_id: int = 0
    # False when the in-memory update committed but the storage write failed.
    persisted: bool = True
    # True when a newer request of the same kind won and this payload was dropped.
    superseded: bool = False

    ok = True

    def unwrap(self) -> Any:
        return self.payload


@dataclass(frozen=True)
class Rejected:
    type: str
    error: BaseException
    request_id: int = 0

    ok = False

    @property
    def message(self) -> str:
        return str(self.error)

    def unwrap(self) -> Any:
        raise self.error


Result = Fulfilled | Rejected


def run_async_action(
    store: Store,
    prefix: str,
    work: Callable[[], Any],
    arg: Any = None,
    is_stale: Callable[[RootState, int], bool] | None = None,
) -> Result:
    """Run *work* inside a pending -> fulfilled/rejected lifecycle.

    Expected failures (``JobScoutError``) become a rejected action and a
    ``Rejected`` result; anything else propagates to the caller.
    """
    request_id = store.next_request_id()
    meta = {"arg": arg, "request_id": request_id}
    store.dispatch(Action(lifecycle(prefix, PENDING), meta=meta))
    try:
        payload = work()
    except JobScoutError as exc:
        log.warning("%s rejected: %s", prefix, exc)
        store.dispatch(Action(lifecycle(prefix, REJECTED), error=exc, meta=meta))
        return Rejected(prefix, exc, request_id)
    state = store.dispatch(Action(lifecycle(prefix, FULFILLED), payload=payload, meta=meta))
    superseded = bool(is_stale and is_stale(state, request_id))
    if superseded:
        log.debug("%s #%d superseded by a newer request", prefix, request_id)
    return Fulfilled(prefix, payload, request_id, superseded=superseded)
