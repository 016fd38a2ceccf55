"""Destination directory checks run before anything is installed."""
import uuid
from pathlib import Path
from typing import List

from model_types import InstallationProfile, TaskOutcome
from utils.error_messages import get_user_friendly_error, get_prompt_message
from utils.symbols import LogSymbols
from .constants import INSTALLER_TITLE, PROBE_FILE_PREFIX, PROBE_FILE_SUFFIX
from .errors import ErrorKind, TaskCancelled


class DirectoryState:
    UNCHECKED = 'unchecked'
    READ_CHECKED = 'read_checked'
    WRITE_CHECKED = 'write_checked'
    ASSET_CHECKED = 'asset_checked'
    EXTRA_FILES_CHECKED = 'extra_files_checked'
    VALIDATED = 'validated'


class DirectoryValidator:
    """Checks read/write/delete access, base game presence and stray package files.
    
    validate() walks the states in order. A permission failure returns a
    FAILED outcome; a "no" to a prompt returns DECLINED. Either way the state
    goes back to UNCHECKED so the next attempt starts over.
    """
    
    def __init__(self, profile: InstallationProfile, log_callback=None, prompt_callback=None, cancel_event=None):
        self.profile = profile
        self.cancel_event = cancel_event
        self.log_callback = log_callback
        self.prompt_callback = prompt_callback
        self.state = DirectoryState.UNCHECKED
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    def _prompt(self, message):
        if self.prompt_callback:
            return self.prompt_callback(INSTALLER_TITLE, message)
        return True  # Default to continue if no callback
    
    def _fail(self, message_key, log_message):
        self._log(f"{LogSymbols.ERROR} {log_message}", error=True)
        self.state = DirectoryState.UNCHECKED
        return TaskOutcome.failed(ErrorKind.FILESYSTEM_PERMISSION, get_user_friendly_error(message_key))
    
    def _halt(self):
        self.state = DirectoryState.UNCHECKED
        return TaskOutcome.declined()
    
    def validate(self, directory) -> TaskOutcome:
        directory = Path(directory)
        self.state = DirectoryState.UNCHECKED
        
        self._log("Checking for read access...", info=True)
        try:
            contents = list(directory.iterdir())
        except OSError as e:
            return self._fail('read_access', f"Could not list {directory}: {e}")
        self.state = DirectoryState.READ_CHECKED
        
        self._log("Checking for write and delete access...", info=True)
        unique = f"{PROBE_FILE_PREFIX}{uuid.uuid4().hex}{PROBE_FILE_SUFFIX}"
        writing_test = directory / unique
        try:
            writing_test.touch(exist_ok=False)
        except OSError as e:
            return self._fail('write_access', f"Creating a temporary file '{unique}' failed: {e}")
        try:
            writing_test.unlink()
        except OSError as e:
            return self._fail('delete_access', f"Deleting a temporary file '{unique}' failed: {e}")
        self.state = DirectoryState.WRITE_CHECKED
        
        files = [entry for entry in contents if entry.is_file()]
        
        if self.profile.requires_base_game:
            self._log(f"Checking for {self.profile.base_asset_name}...", info=True)
            if not self.has_base_asset(files):
                self._log(f"{LogSymbols.WARNING} {self.profile.base_asset_name} not found", warning=True)
                if not self._prompt(get_prompt_message('missing_base_game')):
                    return self._halt()
        self.state = DirectoryState.ASSET_CHECKED
        
        self._log("Checking for extra packages in the directory", info=True)
        extra_packages = self.find_extra_packages(files)
        if extra_packages:
            self._log(f"{LogSymbols.WARNING} Extra packages: {', '.join(extra_packages)}", warning=True)
            if not self._prompt(get_prompt_message('extra_packages', extra_packages)):
                return self._halt()
        self.state = DirectoryState.EXTRA_FILES_CHECKED
        
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.state = DirectoryState.UNCHECKED
            raise TaskCancelled("Directory check interrupted")
        
        self.state = DirectoryState.VALIDATED
        self._log(f"{LogSymbols.SUCCESS} Done checking {directory}")
        return TaskOutcome.success(str(directory))
    
    def has_base_asset(self, files: List[Path]) -> bool:
        target = self.profile.base_asset_name.lower()
        return any(f.name.lower() == target for f in files)
    
    def find_extra_packages(self, files: List[Path]) -> List[str]:
        """Package archives that are not on the allow-list, in directory order."""
        extension = self.profile.package_extension.lower()
        allowed = {name.lower() for name in self.profile.allowed_packages}
        return [
            f.name for f in files
            if f.name.lower().endswith(extension) and f.name.lower() not in allowed
        ]
