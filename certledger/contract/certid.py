"""Certificate identifier generation."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class CertificateIdGenerator:
    """Issues ``<prefix>-<n>`` ids where ``n`` is a nanosecond clock reading.

    Readings are forced strictly increasing within the process, so ids are
    unique and sort in issue order even when the clock stalls or steps back.
    """

    def __init__(self, prefix: str = "CERT", clock_ns: Optional[Callable[[], int]] = None):
        self.prefix = prefix
        self._clock_ns = clock_ns or time.time_ns
        self._lock = threading.Lock()
        self._last = 0

    def next_id(self) -> str:
        with self._lock:
            n = max(self._clock_ns(), self._last + 1)
            self._last = n
        return f"{self.prefix}-{n}"

    __call__ = next_id


__all__ = ["CertificateIdGenerator"]
