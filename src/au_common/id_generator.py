"""Snowflake-style ID generator for listing and bid IDs.

IDs are decimal strings that sort in creation order within one process,
which keeps the bid ledger's insertion order recoverable from the ID alone.
"""

import threading
import time


class SnowflakeIdGenerator:
    """Simple snowflake ID generator.

    Layout (64 bits):
      - 41 bits: millisecond timestamp (since custom epoch)
      - 10 bits: worker_id (0-1023)
      - 12 bits: sequence (0-4095 per millisecond)
    """

    _EPOCH_MS = 1_735_689_600_000  # 2025-01-01T00:00:00Z
    _WORKER_BITS = 10
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, worker_id: int = 0) -> None:
        if not (0 <= worker_id < (1 << self._WORKER_BITS)):
            raise ValueError(f"worker_id must be 0-{(1 << self._WORKER_BITS) - 1}")
        self._worker_id = worker_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            # Never go below the last issued millisecond, so a wall clock that
            # steps back keeps issuing increasing ids without waiting
            ts = max(self._current_ms(), self._last_ms)
            if ts == self._last_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    # Sequence exhausted: borrow the next logical millisecond
                    ts = self._last_ms + 1
            else:
                self._sequence = 0

            self._last_ms = ts
            id_int = (
                ((ts - self._EPOCH_MS) << (self._WORKER_BITS + self._SEQUENCE_BITS))
                | (self._worker_id << self._SEQUENCE_BITS)
                | self._sequence
            )
            return str(id_int)

    def _current_ms(self) -> int:
        return int(time.time() * 1000)


_default_generator = SnowflakeIdGenerator()


def generate_id() -> str:
    """Generate a unique ID using the module-level default generator."""
    return _default_generator.next_id()
