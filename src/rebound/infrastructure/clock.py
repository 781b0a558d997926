"""Clock abstraction so time can be faked in tests"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    @abstractmethod
    def now(self) -> float:
        """Current epoch time in seconds"""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block the calling thread"""


class SystemClock(Clock):
    """Wall clock"""

    def now(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
