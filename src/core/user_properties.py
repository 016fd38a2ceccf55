"""Durable user properties: destination directory, proxy, and installed mod versions."""
import json
import threading
from pathlib import Path
from typing import Optional

from model_types import ProxyConfig
from .config_manager import atomic_save_json
from .constants import PREFS_FILE


class UserProperties:
    """JSON-backed key/value store that survives between installer runs.
    
    Installed versions are keyed by ModNode.tree_name.
    """
    
    def __init__(self, prefs_file=None, log_callback=None):
        self.prefs_file = Path(prefs_file) if prefs_file else PREFS_FILE
        self.log_callback = log_callback
        self._lock = threading.RLock()
        self._data = {'installed_versions': {}}
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    def load(self):
        """Load properties from disk; a missing or corrupt file leaves the defaults."""
        if not self.prefs_file.exists():
            return self
        try:
            with open(self.prefs_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._log(f"Error loading user properties: {e}", error=True)
            return self
        
        if isinstance(data, dict):
            with self._lock:
                if not isinstance(data.get('installed_versions'), dict):
                    data['installed_versions'] = {}
                self._data = data
        return self
    
    def save(self) -> bool:
        with self._lock:
            snapshot = json.loads(json.dumps(self._data))
        try:
            atomic_save_json(self.prefs_file, snapshot)
            return True
        except OSError as e:
            self._log(f"Error saving {self.prefs_file.name}: {e}", error=True)
            return False
    
    # Installation directory and proxy
    
    @property
    def application_dir(self) -> Optional[str]:
        return self._data.get('application_dir')
    
    def set_application_dir(self, directory):
        with self._lock:
            self._data['application_dir'] = str(directory)
    
    @property
    def proxy(self) -> Optional[ProxyConfig]:
        host = self._data.get('proxy_host')
        port = self._data.get('proxy_port')
        if host is None or port is None or port < 0:
            return None
        return ProxyConfig(host, port)
    
    def set_proxy(self, proxy: Optional[ProxyConfig]):
        with self._lock:
            self._data['proxy_host'] = proxy.host if proxy else None
            self._data['proxy_port'] = proxy.port if proxy else -1
    
    # Installed versions
    
    def has_version(self, tree_name) -> bool:
        with self._lock:
            return tree_name in self._data['installed_versions']
    
    def get_version(self, tree_name) -> Optional[str]:
        with self._lock:
            return self._data['installed_versions'].get(tree_name)
    
    def set_version(self, tree_name, version):
        with self._lock:
            self._data['installed_versions'][tree_name] = version
    
    def installed_versions(self):
        with self._lock:
            return dict(self._data['installed_versions'])
