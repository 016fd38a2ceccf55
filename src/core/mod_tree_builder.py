"""Phase B: download every package manifest and build the mod catalog."""
import threading
from typing import Callable, List, Optional

from utils.file_utils import create_temp_file, delete_if_exists
from utils.network_utils import is_valid_url
from utils.symbols import LogSymbols
from .constants import TEMP_FILE_PREFIX
from .errors import TaskCancelled, EmptyCatalogError, ManifestParseError, FilesystemPermissionError
from .manifest_parser import read_install_file
from .mod_node import ModNode, find_duplicate_tree_names


class ModTreeBuilder:
    """Turns the manifest URL list into a flat list of top-level ModNodes.
    
    Per-URL failures (download, malformed manifest) are logged and skipped;
    only an empty catalog is fatal.
    """
    
    def __init__(self, downloader, cancel_event: Optional[threading.Event] = None, log_callback=None,
                 temp_file_factory: Callable = create_temp_file, parse_manifest: Callable = read_install_file):
        self.downloader = downloader
        self.cancel_event = cancel_event or threading.Event()
        self.log_callback = log_callback
        self.temp_file_factory = temp_file_factory
        self.parse_manifest = parse_manifest
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    def build(self, urls: List[str]) -> List[ModNode]:
        """Raises TaskCancelled if interrupted, EmptyCatalogError if nothing could be parsed."""
        mod_nodes = []
        
        for url in urls or []:
            if self.cancel_event.is_set():
                raise TaskCancelled("Mod catalog download interrupted")
            if not is_valid_url(url):
                self._log(f"  {LogSymbols.ERROR} Something went wrong with the URL: {url!r}", error=True)
                continue
            mod_nodes.extend(self._load_manifest(url))
        
        if not mod_nodes:
            raise EmptyCatalogError("No mods available for download")
        
        for tree_name in find_duplicate_tree_names(mod_nodes):
            self._log(f"  {LogSymbols.WARNING} Mod '{tree_name}' is listed more than once", warning=True)
        return mod_nodes
    
    def _load_manifest(self, url) -> List[ModNode]:
        try:
            temp_mod_file = self.temp_file_factory(f"{TEMP_FILE_PREFIX}mod")
        except OSError as e:
            self._log(f"{LogSymbols.ERROR} Error creating temporary file: {e}", error=True)
            raise FilesystemPermissionError(str(e), message_key='temp_file') from e
        
        try:
            if not self.downloader.download(url, temp_mod_file):
                if self.cancel_event.is_set():
                    raise TaskCancelled("Mod catalog download interrupted")
                self._log(f"  {LogSymbols.WARNING} Could not download mod information from '{url}'", warning=True)
                return []
            
            try:
                nodes = self.parse_manifest(temp_mod_file)
            except ManifestParseError as e:
                self._log(f"  {LogSymbols.WARNING} There was an error parsing the mod file at '{url}': {e}", warning=True)
                return []
            except OSError as e:
                self._log(f"  {LogSymbols.ERROR} Error reading the downloaded mod file from '{url}': {e}", error=True)
                return []
            
            for node in nodes:
                self._log(f"  {LogSymbols.SUCCESS} Successfully added {node.name}")
            return nodes
        finally:
            delete_if_exists(temp_mod_file)
