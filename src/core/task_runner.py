"""Cancellable background tasks with a discriminated outcome."""
import threading
import traceback
from typing import Callable, Optional

from model_types import TaskOutcome
from utils.error_messages import get_user_friendly_error
from utils.symbols import LogSymbols
from .errors import TaskCancelled, InstallerError, ErrorKind


class TaskHandle:
    """A running task: cancel() sets its event, result() joins and returns the TaskOutcome."""
    
    def __init__(self, cancel_event: threading.Event):
        self._thread = None
        self.cancel_event = cancel_event
        self._outcome = None
    
    def cancel(self):
        self.cancel_event.set()
    
    def is_running(self) -> bool:
        return self._thread.is_alive()
    
    def result(self, timeout: Optional[float] = None) -> Optional[TaskOutcome]:
        """Wait for the task. Returns None if it is still running after timeout."""
        self._thread.join(timeout)
        if self._thread.is_alive():
            return None
        return self._outcome


class TaskRunner:
    """Runs one background task at a time and turns its exit into a TaskOutcome.
    
    The task is called as task(cancel_event). Its return value becomes the
    outcome: a TaskOutcome is passed through, anything else is wrapped in
    SUCCESS. TaskCancelled maps to CANCELLED, InstallerError to FAILED with the
    error's kind, and any other exception to FAILED/unexpected.
    """
    
    def __init__(self, log_callback=None):
        self.log_callback = log_callback
        self._lock = threading.Lock()
        self._active = None
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    @property
    def busy(self) -> bool:
        with self._lock:
            return self._active is not None and self._active.is_running()
    
    def start(self, task: Callable[[threading.Event], object], name: str = "InstallerTask",
              cancel_event: Optional[threading.Event] = None) -> TaskHandle:
        with self._lock:
            if self._active is not None and self._active.is_running():
                raise RuntimeError("A task is already running")
            handle = TaskHandle(cancel_event or threading.Event())
            handle._thread = threading.Thread(target=self._run, args=(task, handle), name=name, daemon=True)
            self._active = handle
            handle._thread.start()
            return handle
    
    def run(self, task: Callable[[threading.Event], object], name: str = "InstallerTask",
            cancel_event: Optional[threading.Event] = None) -> TaskOutcome:
        """Start task and block until it finishes."""
        return self.start(task, name, cancel_event).result()
    
    def _run(self, task, handle: TaskHandle):
        handle._outcome = self.execute(task, handle.cancel_event)
    
    def execute(self, task, cancel_event: threading.Event) -> TaskOutcome:
        """Call task on the current thread and classify how it ended."""
        try:
            value = task(cancel_event)
        except TaskCancelled as e:
            self._log(f"{LogSymbols.WARNING} Task cancelled: {e}", warning=True)
            return TaskOutcome.cancelled()
        except InstallerError as e:
            self._log(f"{LogSymbols.ERROR} {type(e).__name__}: {e}", error=True)
            return TaskOutcome.failed(e.kind, get_user_friendly_error(e.message_key, str(e)))
        except Exception as e:
            self._log(f"{LogSymbols.ERROR} Unexpected error: {e}\n{traceback.format_exc()}", error=True)
            return TaskOutcome.failed(ErrorKind.UNEXPECTED, get_user_friendly_error('unexpected', str(e)))
        
        if isinstance(value, TaskOutcome):
            return value
        return TaskOutcome.success(value)
