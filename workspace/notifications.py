import itertools
import time
from dataclasses import dataclass

TOAST_DURATION_MS = 3000
SEVERITIES = ("info", "success", "error")


def monotonic_ms():
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class ToastMessage:
    id: int
    text: str
    severity: str
    created_at: float


class NotificationQueue:
    """
    Transient toasts. Each one expires ``TOAST_DURATION_MS`` after creation,
    independently of the others.

    ``scheduler(ms, callback)`` (Tk's ``after``) removes toasts actively; without
    one, expired toasts are dropped whenever ``active`` is read.
    """

    def __init__(self, clock=monotonic_ms, scheduler=None, duration_ms=TOAST_DURATION_MS):
        self.clock = clock
        self.scheduler = scheduler
        self.duration_ms = duration_ms
        self.toasts: list[ToastMessage] = []
        self._ids = itertools.count(1)

    def push(self, text, severity="info") -> ToastMessage:
        if severity not in SEVERITIES:
            raise ValueError(f"unknown toast severity: {severity}")
        toast = ToastMessage(id=next(self._ids), text=str(text), severity=severity, created_at=self.clock())
        self.toasts.append(toast)
        if self.scheduler is not None:
            self.scheduler(self.duration_ms, lambda: self.expire(toast.id))
        return toast

    def expire(self, toast_id):
        self.toasts = [t for t in self.toasts if t.id != toast_id]

    def prune(self, now_ms=None):
        now = self.clock() if now_ms is None else now_ms
        self.toasts = [t for t in self.toasts if now - t.created_at < self.duration_ms]

    def active(self, now_ms=None) -> list[ToastMessage]:
        self.prune(now_ms)
        return list(self.toasts)

    def clear(self):
        self.toasts = []
