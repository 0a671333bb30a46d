import logging
import queue
import threading

from workspace.errors import CollaboratorFailure

log = logging.getLogger(__name__)


class ActionDispatcher:
    """
    Runs outbound calls off the UI thread.

    Completions are queued and only run from ``drain`` (called on the UI tick), so
    continuations never race with gesture handling. No retries.
    """

    def __init__(self, synchronous=False):
        self.synchronous = synchronous
        self.results = queue.Queue()

    def submit(self, fn, *args, on_success=None, on_failure=None):
        def worker():
            try:
                value = fn(*args)
            except CollaboratorFailure as exc:
                log.warning("%s failed: %s", getattr(fn, "__name__", fn), exc.reason)
                self.results.put((on_failure, exc))
                return
            except Exception as exc:
                log.exception("%s raised unexpectedly", getattr(fn, "__name__", fn))
                self.results.put((on_failure, CollaboratorFailure(exc)))
                return
            self.results.put((on_success, value))

        if self.synchronous:
            worker()
            self.drain()
            return
        threading.Thread(target=worker, daemon=True).start()

    def drain(self) -> int:
        handled = 0
        while True:
            try:
                callback, value = self.results.get_nowait()
            except queue.Empty:
                return handled
            handled += 1
            if callback is not None:
                callback(value)
