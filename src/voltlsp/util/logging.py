import threading
from collections import deque

from voltlsp.constants import DIAGNOSTIC_BUFFER_SIZE


class DiagnosticBuffer:
    """
    Keeps the most recent lines written to a host's diagnostic sink; older lines are dropped.
    """

    def __init__(self, max_lines: int = DIAGNOSTIC_BUFFER_SIZE) -> None:
        self._lines: deque[str] = deque(maxlen=max_lines)
        self._lock = threading.Lock()

    def append(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)

    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)
