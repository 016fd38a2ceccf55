"""In-memory settings shared by the validation phases of one installer run."""
import threading
from typing import Optional


class SettingsStore:
    """Thread-safe store of the values produced by the validation phases.
    
    Fields are None until the phase that owns them succeeds; presence of a
    field is the "phase already done" guard. Nothing here is persisted.
    
    Phase A (mirror resolution): mod_urls, remote_download_page,
    basic_config_mods, remote_version.
    Phase B (catalog build): mod_nodes.
    """
    
    PHASE_A_FIELDS = ('mod_urls', 'remote_version', 'remote_download_page')
    PHASE_B_FIELDS = ('mod_nodes',)
    FIELDS = (
        'mod_urls', 'remote_version', 'remote_download_page', 'basic_config_mods',
        'mod_nodes', 'proxy', 'connector',
    )
    
    def __init__(self):
        self.lock = threading.RLock()
        self.mod_urls = None
        self.remote_version = None
        self.remote_download_page = None
        self.basic_config_mods = None
        self.mod_nodes = None
        self.proxy = None
        self.connector = None
        self.checked_directories = set()
    
    def get(self, name):
        self._check_field(name)
        with self.lock:
            return getattr(self, name)
    
    def set(self, name, value):
        self._check_field(name)
        with self.lock:
            setattr(self, name, value)
    
    def has(self, name) -> bool:
        return self.get(name) is not None
    
    def clear(self, *names):
        with self.lock:
            for name in names:
                self._check_field(name)
                setattr(self, name, None)
    
    def rollback_phase_a(self):
        """Forget a partially resolved remote version and URL list."""
        self.clear(*self.PHASE_A_FIELDS)
    
    def rollback_phase_b(self):
        """Forget a partially built mod catalog."""
        self.clear(*self.PHASE_B_FIELDS)
    
    def is_directory_checked(self, directory) -> bool:
        with self.lock:
            return str(directory) in self.checked_directories
    
    def mark_directory_checked(self, directory):
        with self.lock:
            self.checked_directories.add(str(directory))
    
    def _check_field(self, name: Optional[str]):
        if name not in self.FIELDS:
            raise KeyError(f"Unknown setting: {name}")
