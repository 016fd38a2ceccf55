"""Phase A: find the mirror with the highest installer version and read its manifest list."""
import threading
from typing import Callable, List, Optional

from model_types import RemoteManifestSet
from utils.file_utils import read_text_file_cleanly, strip_blank_lines, create_temp_file, delete_if_exists
from utils.network_utils import mirror_document_url
from utils.symbols import LogSymbols
from utils.version_utils import compare_versions
from .constants import (
    VERSION_DOCUMENT,
    FILENAMES_DOCUMENT,
    BASIC_CONFIG_DOCUMENT,
    BASELINE_VERSION,
    TEMP_FILE_PREFIX,
)
from .errors import TaskCancelled, NoMirrorsError, FilesystemPermissionError
from .settings import SettingsStore


class ManifestResolver:
    """Walks the mirror list in order and records the best one in the settings store.
    
    A mirror replaces the current best only when its version is higher AND its
    filenames document downloads with at least one entry. The remote version
    is written last because its presence marks the phase as done.
    """
    
    def __init__(self, mirrors: List[str], downloader, settings: SettingsStore,
                 cancel_event: Optional[threading.Event] = None, log_callback=None,
                 temp_file_factory: Callable = create_temp_file):
        self.mirrors = list(mirrors)
        self.downloader = downloader
        self.settings = settings
        self.cancel_event = cancel_event or threading.Event()
        self.log_callback = log_callback
        self.temp_file_factory = temp_file_factory
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    def _check_cancelled(self):
        if self.cancel_event.is_set():
            raise TaskCancelled("Mirror resolution interrupted")
    
    def _fetch_lines(self, url, temp_file) -> Optional[List[str]]:
        """Download url into temp_file. None on failure; raises TaskCancelled if interrupted."""
        if not self.downloader.download(url, temp_file):
            self._check_cancelled()
            return None
        return read_text_file_cleanly(temp_file)
    
    def resolve(self) -> RemoteManifestSet:
        """Run the mirror walk. Raises NoMirrorsError if no mirror yields a usable version."""
        try:
            temp_version = self.temp_file_factory(f"{TEMP_FILE_PREFIX}version")
            temp_filenames = self.temp_file_factory(f"{TEMP_FILE_PREFIX}filenames")
            temp_basic_config = self.temp_file_factory(f"{TEMP_FILE_PREFIX}basicconfig")
        except OSError as e:
            self._log(f"{LogSymbols.ERROR} Error creating temporary file: {e}", error=True)
            raise FilesystemPermissionError(str(e), message_key='temp_file') from e
        
        try:
            best = self._walk_mirrors(temp_version, temp_filenames, temp_basic_config)
        finally:
            for temp_file in (temp_version, temp_filenames, temp_basic_config):
                delete_if_exists(temp_file)
        
        if best is None:
            raise NoMirrorsError("No mirror returned version information")
        return best
    
    def _walk_mirrors(self, temp_version, temp_filenames, temp_basic_config) -> Optional[RemoteManifestSet]:
        max_version = BASELINE_VERSION
        best = None
        
        for base_url in self.mirrors:
            self._check_cancelled()
            self._log(f"Accessing version info from {base_url}...", debug=True)
            
            version_lines = self._fetch_lines(mirror_document_url(base_url, VERSION_DOCUMENT), temp_version)
            if not version_lines:
                self._log(f"  No version information at {base_url}", debug=True)
                continue
            
            this_version = version_lines[0]
            self._log(f"Version at this URL is {this_version}", info=True)
            if compare_versions(this_version, max_version) <= 0:
                continue
            
            filename_lines = self._fetch_lines(mirror_document_url(base_url, FILENAMES_DOCUMENT), temp_filenames)
            if not filename_lines:
                self._log(f"  {LogSymbols.WARNING} Could not read {FILENAMES_DOCUMENT} from {base_url}", warning=True)
                continue
            
            max_version = this_version
            download_page = version_lines[1] if len(version_lines) > 1 else None
            
            basic_config = self._fetch_lines(mirror_document_url(base_url, BASIC_CONFIG_DOCUMENT), temp_basic_config)
            basic_config = strip_blank_lines(basic_config) if basic_config else None
            
            best = RemoteManifestSet(this_version, download_page, filename_lines, basic_config or None)
            self._record(best)
        
        return best
    
    def _record(self, manifest_set: RemoteManifestSet):
        with self.settings.lock:
            if manifest_set.basic_config:
                self.settings.set('basic_config_mods', list(manifest_set.basic_config))
            self.settings.set('mod_urls', list(manifest_set.mod_urls))
            self.settings.set('remote_download_page', manifest_set.download_page)
            self.settings.set('remote_version', manifest_set.version)
