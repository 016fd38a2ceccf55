"""Run shell commands for install hooks, one external process at a time.

Output of the child process is drained on two reader threads and forwarded to
the ``ExternalProcess`` logger: stdout at INFO, stderr at ERROR.
"""
import logging
import platform
import subprocess
import threading
from pathlib import Path
from typing import List, Optional, Union

from core.errors import TaskCancelled


logger = logging.getLogger(__name__)
process_logger = logging.getLogger("ExternalProcess")

_exec_lock = threading.Lock()

POLL_INTERVAL = 0.1


def select_shell(os_name: Optional[str] = None, os_release: Optional[str] = None) -> List[str]:
    """Return the shell prefix for the host: [shell, flag]."""
    os_name = (os_name or platform.system()).lower()
    if os_name.startswith('windows'):
        release = (os_release if os_release is not None else platform.release()).lower()
        if release in ('95', '98', 'me'):
            logger.debug("Detected Windows 9X/ME; using COMMAND.COM...")
            return ['command', '/C']
        logger.debug("Detected Windows; using CMD.EXE...")
        return ['cmd', '/C']
    return ['/bin/sh', '-c']


def build_exec_command(run_directory: Union[str, Path], command: Union[str, List[str]]) -> List[str]:
    """Build the argv that runs command through the platform shell.
    
    A list of command parts is joined with spaces. Raises ValueError if the
    run directory is missing or the command is blank.
    """
    if not Path(run_directory).is_dir():
        raise ValueError("Run directory must exist and be a directory!")
    if isinstance(command, (list, tuple)):
        command = " ".join(command)
    if not command or not command.strip():
        raise ValueError("Command must not be blank!")
    
    logger.info("Command to run: %s", command)
    return select_shell() + [command]


def _drain(stream, level, preamble):
    try:
        for line in iter(stream.readline, ''):
            process_logger.log(level, "%s: %s", preamble, line.rstrip('\r\n'))
    finally:
        stream.close()


def run_process(argv: List[str], cwd: Union[str, Path], logging_preamble: str,
                cancel_event: Optional[threading.Event] = None) -> int:
    """Start argv in cwd, stream its output to the log and return the exit code."""
    with _exec_lock:
        process = subprocess.Popen(
            argv,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding='utf-8',
            errors='replace',
        )
        
        readers = [
            threading.Thread(target=_drain, args=(process.stdout, logging.INFO, logging_preamble),
                             name="ExternalProcess-stdout", daemon=True),
            threading.Thread(target=_drain, args=(process.stderr, logging.ERROR, logging_preamble),
                             name="ExternalProcess-stderr", daemon=True),
        ]
        for reader in readers:
            reader.start()
        
        cancelled = False
        while True:
            try:
                exit_code = process.wait(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                if cancel_event is not None and cancel_event.is_set():
                    process.terminate()
                    exit_code = process.wait()
                    cancelled = True
                    break
        
        for reader in readers:
            reader.join()
        
        if cancelled:
            raise TaskCancelled(f"Command cancelled: {logging_preamble}")
        return exit_code


def run_exec_command(run_directory: Union[str, Path], command: Union[str, List[str]],
                     cancel_event: Optional[threading.Event] = None) -> int:
    """Run command through the platform shell in run_directory. Returns the exit code."""
    run_directory = Path(run_directory)
    argv = build_exec_command(run_directory, command)
    preamble = f"{run_directory.resolve()} $ {argv[-1]}"
    return run_process(argv, run_directory, preamble, cancel_event)
