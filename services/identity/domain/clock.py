"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import abc
import threading
import time


class Clock(abc.ABC):
    """ Source of millisecond timestamps. """

    @abc.abstractmethod
    def now_ms(self) -> int:
        """ Current time in milliseconds. """


class SystemClock(Clock):
    """
    Wall clock in Unix milliseconds that never goes backwards, even when
    the host clock is stepped back.
    """

    def __init__(self):
        self._last: int = 0
        self._lock = threading.Lock()

    def now_ms(self) -> int:
        current = time.time_ns() // 1_000_000
        with self._lock:
            self._last = max(self._last, current)
            return self._last
