"""Run the EXEC hook commands a mod declares in its manifest."""
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from utils.exec_utils import run_exec_command
from utils.symbols import LogSymbols
from .mod_node import ModNode


def hook_directory(node: ModNode, install_dir) -> Path:
    """Hooks run inside the mod's folder when it exists, otherwise in the install directory."""
    install_dir = Path(install_dir)
    if node.folder:
        folder = install_dir / node.folder.strip('/\\')
        if folder.is_dir():
            return folder
    return install_dir


def run_node_hooks(node: ModNode, install_dir, cancel_event: Optional[threading.Event] = None,
                   log_callback=None) -> List[Tuple[str, int]]:
    """Run node's hook commands in order. Returns (command, exit code) pairs.
    
    Stops at the first command that exits non-zero.
    """
    def log(msg, **kwargs):
        if log_callback:
            log_callback(msg, **kwargs)
    
    results = []
    run_dir = hook_directory(node, install_dir)
    for command in node.exec_commands:
        log(f"  Running hook for {node.name}: {command}", info=True)
        exit_code = run_exec_command(run_dir, command, cancel_event)
        results.append((command, exit_code))
        if exit_code != 0:
            log(f"  {LogSymbols.ERROR} Hook '{command}' exited with code {exit_code}", error=True)
            break
    return results
