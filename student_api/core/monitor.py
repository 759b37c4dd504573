import logging
import time
from typing import Optional

monitor_logger = logging.getLogger("student_api.monitor")


class StepMonitor:
    """Time one step of a request and log how it ended.

    ``request_id`` is the id the route logs for the same request, so monitor
    lines can be matched with it. Extra keyword fields are appended as
    ``key=value`` pairs. Exceptions are logged and re-raised.
    """

    def __init__(self, step_name: str, request_id: str, **fields):
        self.step_name = step_name
        self.request_id = request_id
        self.fields = fields
        self._started: Optional[float] = None
        self.duration: Optional[float] = None

    def _line(self, outcome: str) -> str:
        parts = [f"req={self.request_id}", f"step={self.step_name}", outcome]
        parts.extend(f"{key}={value}" for key, value in self.fields.items())
        if self.duration is not None:
            parts.append(f"duration={self.duration:.3f}s")
        return " | ".join(parts)

    def __enter__(self):
        self._started = time.perf_counter()
        monitor_logger.info(self._line("started"))
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.duration = time.perf_counter() - self._started
        if exc_type:
            monitor_logger.error(f"{self._line('failed')} | {exc_type.__name__}: {exc_value}")
        else:
            monitor_logger.info(self._line("succeeded"))
        return False
