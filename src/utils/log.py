"""Installer log callback: timestamped file log plus console echo."""
import sys
import threading
from datetime import datetime
from pathlib import Path


class InstallerLog:
    """Callable log sink with the log(message, error=..., info=..., ...) signature.
    
    Every component takes one of these as its log_callback.
    """
    
    def __init__(self, log_file=None, log_level='INFO', echo=True, stream=None):
        self.log_file = Path(log_file) if log_file else None
        self.log_level = log_level
        self.echo = echo
        self.stream = stream
        self._lock = threading.Lock()
    
    def __call__(self, message, error=False, info=False, warning=False, debug=False, success=False):
        self.log(message, error=error, info=info, warning=warning, debug=debug, success=success)
    
    def log(self, message, error=False, info=False, warning=False, debug=False, success=False):
        """Append a message to the log with different severity levels.
        
        Args:
            message: Message to log
            error: If True, log as an error
            info: If True, log as informational
            warning: If True, log as a warning
            debug: If True, only logged when log_level is DEBUG
            success: If True, log as a success message
        """
        if debug and self.log_level != 'DEBUG':
            return
        
        log_entry, tag = self._format_log_entry(message, error=error, info=info, warning=warning, debug=debug, success=success)
        with self._lock:
            self._write_log_to_file(log_entry)
            if self.echo:
                stream = self.stream or (sys.stderr if tag == 'error' else sys.stdout)
                print(message, file=stream)
    
    def _format_log_entry(self, message, error=False, info=False, warning=False, debug=False, success=False):
        """Format log entry with timestamp and level prefix.
        
        Returns:
            tuple: (formatted_entry: str, tag: str)
        """
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        
        if error:
            prefix, tag = 'ERROR: ', 'error'
        elif warning:
            prefix, tag = 'WARN: ', 'warning'
        elif info:
            prefix, tag = 'INFO: ', 'info'
        elif debug:
            prefix, tag = 'DEBUG: ', 'debug'
        elif success:
            prefix, tag = '', 'success'
        else:
            prefix, tag = '', 'normal'
        
        return f"[{timestamp}] {prefix}{message}\n", tag
    
    def _write_log_to_file(self, log_entry):
        if not self.log_file:
            return
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(log_entry)
        except OSError:
            pass
