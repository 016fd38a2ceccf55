"""
Tests for running hook commands through the platform shell.
"""
import logging
import sys
import threading

import pytest

from core.errors import TaskCancelled
from core.hooks import hook_directory, run_node_hooks
from core.mod_node import ModNode
from utils.exec_utils import build_exec_command, run_exec_command, select_shell


posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="uses /bin/sh")


class TestSelectShell:
    
    @pytest.mark.parametrize("release", ["95", "98", "ME"])
    def test_windows_9x(self, release):
        assert select_shell("Windows", release) == ['command', '/C']
    
    def test_windows_nt(self):
        assert select_shell("Windows", "10") == ['cmd', '/C']
    
    @pytest.mark.parametrize("os_name", ["Linux", "Darwin", "FreeBSD"])
    def test_posix(self, os_name):
        assert select_shell(os_name) == ['/bin/sh', '-c']


class TestBuildExecCommand:
    
    def test_missing_directory(self, tmp_path):
        with pytest.raises(ValueError):
            build_exec_command(tmp_path / "missing", "echo hi")
    
    @pytest.mark.parametrize("command", ["", "   ", []])
    def test_blank_command(self, tmp_path, command):
        with pytest.raises(ValueError):
            build_exec_command(tmp_path, command)
    
    def test_parts_are_joined(self, tmp_path):
        assert build_exec_command(tmp_path, ["echo", "hi"])[-1] == "echo hi"


@posix_only
class TestRunExecCommand:
    
    def test_output_goes_to_process_logger(self, tmp_path, caplog):
        caplog.set_level(logging.INFO, logger="ExternalProcess")
        
        exit_code = run_exec_command(tmp_path, "echo hello; echo oops 1>&2")
        
        assert exit_code == 0
        records = [r for r in caplog.records if r.name == "ExternalProcess"]
        assert any(r.levelno == logging.INFO and "hello" in r.getMessage() for r in records)
        assert any(r.levelno == logging.ERROR and "oops" in r.getMessage() for r in records)
        assert all(r.getMessage().startswith(f"{tmp_path.resolve()} $ ") for r in records)
    
    def test_large_output_on_both_streams(self, tmp_path, caplog):
        caplog.set_level(logging.INFO, logger="ExternalProcess")
        command = ("head -c 200000 /dev/zero | tr '\\0' a; "
                   "head -c 200000 /dev/zero | tr '\\0' b 1>&2")
        result = []
        worker = threading.Thread(target=lambda: result.append(run_exec_command(tmp_path, command)), daemon=True)
        
        worker.start()
        worker.join(30)
        
        assert not worker.is_alive()
        assert result == [0]
        records = [r for r in caplog.records if r.name == "ExternalProcess"]
        stdout_bytes = sum(len(r.getMessage()) for r in records if r.levelno == logging.INFO)
        assert stdout_bytes > 200000
        assert any(r.levelno == logging.ERROR and "bbbb" in r.getMessage() for r in records)
    
    def test_exit_code_is_returned(self, tmp_path):
        assert run_exec_command(tmp_path, "exit 3") == 3
    
    def test_runs_in_directory(self, tmp_path):
        run_exec_command(tmp_path, "touch created.txt")
        assert (tmp_path / "created.txt").exists()
    
    def test_cancel_terminates_process(self, tmp_path):
        cancel_event = threading.Event()
        timer = threading.Timer(0.2, cancel_event.set)
        timer.start()
        try:
            with pytest.raises(TaskCancelled):
                run_exec_command(tmp_path, "sleep 10", cancel_event)
        finally:
            timer.cancel()


class TestHooks:
    
    def test_hook_directory_prefers_mod_folder(self, tmp_path):
        (tmp_path / "BluePlanet").mkdir()
        node = ModNode("Blue Planet", folder="/BluePlanet")
        
        assert hook_directory(node, tmp_path) == tmp_path / "BluePlanet"
        assert hook_directory(ModNode("Other", folder="/Missing"), tmp_path) == tmp_path
    
    @posix_only
    def test_stops_at_first_failure(self, tmp_path, logger):
        node = ModNode("Mod")
        node.exec_commands = ["touch one", "exit 2", "touch three"]
        
        results = run_node_hooks(node, tmp_path, log_callback=logger)
        
        assert results == [("touch one", 0), ("exit 2", 2)]
        assert (tmp_path / "one").exists()
        assert not (tmp_path / "three").exists()
        assert logger.errors
