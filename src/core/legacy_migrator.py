"""Carry installed versions forward from the previous installer's ledger.

The old installer kept ``temp/installedversions.txt`` in the destination
directory: a stream of NAME/value and VERSION/value records. Versions found
there are copied into the user properties under each node's tree name; the
ledger is deleted once the properties are saved.
"""
from pathlib import Path
from typing import List, Optional

from model_types import MigrationResult
from utils.file_utils import read_text_file_cleanly, delete_if_exists
from utils.symbols import LogSymbols
from .constants import (
    LEGACY_DIR_NAME,
    LEGACY_LEDGER_NAME,
    LEGACY_EXTRA_FILES,
    LEDGER_NAME_MARKER,
    LEDGER_VERSION_MARKER,
)
from .mod_node import ModNode


class DuplicateLedgerEntry(Exception):
    """The ledger holds more than one NAME record for the same mod."""


def find_legacy_version(name: str, ledger_lines: List[str]) -> Optional[str]:
    """Scan the ledger token stream for the version recorded under name.
    
    A NAME marker consumes the following value; any other token is skipped on
    its own. After a matching NAME, tokens are consumed until a VERSION marker,
    whose value is the result. Raises DuplicateLedgerEntry on a second match.
    """
    version = None
    matched = False
    i = 0
    count = len(ledger_lines)
    
    while i < count:
        token = ledger_lines[i]
        i += 1
        if token.upper() != LEDGER_NAME_MARKER or i >= count:
            continue
        value = ledger_lines[i]
        i += 1
        if value != name:
            continue
        
        if matched:
            raise DuplicateLedgerEntry(name)
        matched = True
        
        while i < count:
            marker = ledger_lines[i]
            i += 1
            if marker.upper() == LEDGER_VERSION_MARKER:
                if i < count:
                    version = ledger_lines[i]
                    i += 1
                break
    
    return version


class LegacyVersionMigrator:
    
    def __init__(self, properties, log_callback=None):
        self.properties = properties
        self.log_callback = log_callback
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    def migrate(self, nodes: List[ModNode], ledger_lines: List[str]) -> MigrationResult:
        """Back-fill installed versions for every node (depth-first) without one."""
        result = MigrationResult({}, [])
        for node in nodes:
            self._migrate_node(node, ledger_lines, result)
        return result
    
    def _migrate_node(self, node: ModNode, ledger_lines, result: MigrationResult):
        property_name = node.tree_name
        self._log(property_name, debug=True)
        
        if not self.properties.has_version(property_name):
            try:
                version = find_legacy_version(node.name, ledger_lines)
            except DuplicateLedgerEntry:
                self._log(f"{LogSymbols.WARNING} The installedversions file contains more than one version "
                          f"for the name '{node.name}'!", warning=True)
                result.conflicts.append(node.name)
                version = None
            
            if version is not None:
                self.properties.set_version(property_name, version)
                result.migrated[property_name] = version
                self._log(f"  {LogSymbols.MIGRATED} {property_name}: {version}", debug=True)
        
        for child in node.children:
            self._migrate_node(child, ledger_lines, result)
    
    def migrate_directory(self, destination_dir, nodes: List[ModNode]) -> Optional[MigrationResult]:
        """Migrate and clean up the legacy files under destination_dir.
        
        Returns None when there is no ledger. The ledger is deleted only if the
        properties were saved; the other legacy files and the empty folder are
        always removed.
        """
        legacy_dir = Path(destination_dir) / LEGACY_DIR_NAME
        if not legacy_dir.is_dir():
            return None
        
        result = None
        ledger = legacy_dir / LEGACY_LEDGER_NAME
        if ledger.exists():
            self._log("Found legacy version information; migrating...", info=True)
            result = self.migrate(nodes, read_text_file_cleanly(ledger))
            if self.properties.save():
                delete_if_exists(ledger)
            else:
                self._log(f"{LogSymbols.WARNING} Could not save migrated versions; keeping {ledger.name}", warning=True)
        
        for name in LEGACY_EXTRA_FILES:
            delete_if_exists(legacy_dir / name)
        try:
            if not any(legacy_dir.iterdir()):
                legacy_dir.rmdir()
        except OSError as e:
            self._log(f"Could not remove {legacy_dir}: {e}", debug=True)
        
        return result
