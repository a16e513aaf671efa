"""Snapshot, execute and restore the clipboard around one hotkey action."""

from __future__ import annotations

import enum
import logging
from collections import deque
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterator, List, Mapping, Optional, TypeVar

from config.constants import (
    DEFAULT_CHANGE_TIMEOUT,
    DEFAULT_PASTE_SETTLE,
    DEFAULT_POLL_INTERVAL,
)

from .errors import ClipboardError
from .interfaces import Clipboard, InputInjector

T = TypeVar("T")

HISTORY_LIMIT = 32


class TransactionState(enum.Enum):
    IDLE = "idle"
    SNAPSHOTTED = "snapshotted"
    EXECUTING = "executing"
    RESTORED = "restored"


@dataclass(frozen=True)
class ClipboardTiming:
    poll_interval: float = DEFAULT_POLL_INTERVAL
    change_timeout: float = DEFAULT_CHANGE_TIMEOUT
    paste_settle: float = DEFAULT_PASTE_SETTLE


def wait_for_change(
    clipboard: Clipboard,
    old_revision: int,
    timeout: float = DEFAULT_CHANGE_TIMEOUT,
    interval: float = DEFAULT_POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    extra: Optional[dict] = None,
) -> bool:
    """Poll until the clipboard revision moves past *old_revision*.

    Returns ``False`` on timeout; callers carry on with whatever the
    clipboard holds.
    """

    deadline = clock() + timeout
    while True:
        if clipboard.revision_counter() != old_revision:
            return True
        if clock() >= deadline:
            logging.warning(
                "Clipboard did not change within %.2fs", timeout, extra=extra
            )
            return False
        sleep(interval)


class ClipboardTransaction:
    """Handle given to the body of a transaction."""

    def __init__(self, coordinator: "ClipboardTransactionCoordinator", tag: str) -> None:
        self._coordinator = coordinator
        self.tag = tag

    @property
    def clipboard(self) -> Clipboard:
        return self._coordinator.clipboard

    def log(self, level: int, message: str, *args) -> None:
        logging.log(level, message, *args, extra={"transaction": self.tag})

    def copy_selection(self) -> bool:
        coordinator = self._coordinator
        old_revision = self.clipboard.revision_counter()
        coordinator.injector.simulate_copy()
        return wait_for_change(
            self.clipboard,
            old_revision,
            timeout=coordinator.timing.change_timeout,
            interval=coordinator.timing.poll_interval,
            sleep=coordinator.sleep,
            clock=coordinator.clock,
            extra={"transaction": self.tag},
        )

    def paste(self) -> None:
        self._coordinator.injector.simulate_paste()
        self._coordinator.sleep(self._coordinator.timing.paste_settle)

    def available_flavors(self) -> List[str]:
        return list(self.clipboard.available_flavors())

    def read_flavor(self, flavor: str) -> Optional[bytes]:
        return self.clipboard.read_flavor(flavor)

    def read_flavors(self) -> Dict[str, bytes]:
        flavors = {}
        for flavor in self.available_flavors():
            data = self.read_flavor(flavor)
            if data is not None:
                flavors[flavor] = data
        return flavors

    def replace_contents(self, flavors: Mapping[str, bytes]) -> None:
        self.clipboard.clear()
        for flavor, data in flavors.items():
            self.clipboard.write_flavor(flavor, data)
        self.log(logging.DEBUG, "Clipboard replaced with %s", ", ".join(flavors))


class ClipboardTransactionCoordinator:
    """Run workflows between a clipboard snapshot and its restoration.

    The snapshot is restored exactly once on every exit path.  Only one
    transaction may be in flight at a time.
    """

    def __init__(
        self,
        clipboard: Clipboard,
        injector: InputInjector,
        timing: Optional[ClipboardTiming] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.clipboard = clipboard
        self.injector = injector
        self.timing = timing or ClipboardTiming()
        self.sleep = sleep
        self.clock = clock
        # Only the most recent transactions are kept.
        self.history: Deque[TransactionState] = deque(maxlen=HISTORY_LIMIT)
        self._state = TransactionState.IDLE
        self._state_lock = threading.Lock()
        self._counter = 0

    @property
    def state(self) -> TransactionState:
        return self._state

    def _set_state(self, state: TransactionState) -> None:
        self._state = state
        self.history.append(state)

    @contextmanager
    def transaction(self, label: str = "transaction") -> Iterator[ClipboardTransaction]:
        with self._state_lock:
            if self._state is not TransactionState.IDLE:
                raise ClipboardError("a clipboard transaction is already in flight")
            self._counter += 1
            tag = f"[{label}#{self._counter}] "
            self._state = TransactionState.SNAPSHOTTED

        try:
            snapshot = self.clipboard.snapshot_all()
        except Exception as exc:
            self._state = TransactionState.IDLE
            raise ClipboardError("could not snapshot the clipboard") from exc

        self.history.append(TransactionState.SNAPSHOTTED)
        logging.debug(
            "Clipboard snapshot taken (%d item(s))", len(snapshot),
            extra={"transaction": tag},
        )

        self._set_state(TransactionState.EXECUTING)
        try:
            yield ClipboardTransaction(self, tag)
        finally:
            try:
                self.clipboard.restore(snapshot)
                logging.debug("Clipboard restored", extra={"transaction": tag})
            except Exception as exc:
                raise ClipboardError("could not restore the clipboard") from exc
            finally:
                self._set_state(TransactionState.RESTORED)
                self._set_state(TransactionState.IDLE)

    def run(self, label: str, body: Callable[[ClipboardTransaction], T]) -> T:
        with self.transaction(label) as txn:
            return body(txn)
