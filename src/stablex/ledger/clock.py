"""Clock — источник текущего времени для оценки ордеров.

Время в целых секундах Unix. Источник монотонный: никогда не возвращает
значение меньше ранее выданного.
"""

import threading
import time
from typing import Optional, Protocol


class Clock(Protocol):
    """Источник времени, потребляемый площадкой."""

    def now(self) -> int:
        ...


class SystemClock:
    """Системные часы (time.time), округлённые вниз до секунды.

    Если системное время откатилось назад, возвращается последнее
    выданное значение.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last: Optional[int] = None

    def now(self) -> int:
        current = int(time.time())
        with self._lock:
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
            return current


class ManualClock:
    """Управляемые часы для тестов и симуляций."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Сдвиг часов вперёд; возвращает новое время."""
        if seconds < 0:
            raise ValueError(f"clock cannot move backwards: advance({seconds})")
        self._now += seconds
        return self._now

    def set(self, ts: int) -> None:
        if ts < self._now:
            raise ValueError(f"clock cannot move backwards: {ts} < {self._now}")
        self._now = ts
