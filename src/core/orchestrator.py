"""Validation pipeline run when the user leaves the configuration page.

Phases, each skipped when its settings are already present:

    destination directory -> proxy -> save user properties -> mirrors (phase A)
    -> upgrade prompt -> mod catalog (phase B) -> legacy version migration

The directory checks (DirectoryValidator) run afterwards, only for a
directory that has not been checked yet in this run.
"""
import threading
from pathlib import Path
from typing import Optional

from model_types import TaskOutcome, InstallationProfile
from utils.error_messages import get_user_friendly_error, get_prompt_message
from utils.file_utils import create_temp_file
from utils.symbols import LogSymbols
from utils.version_utils import is_newer_version
from .connector import Connector, Downloader, create_proxy
from .constants import INSTALLER_TITLE, INSTALLER_VERSION
from .directory_validator import DirectoryValidator
from .errors import ErrorKind, TaskCancelled, EmptyCatalogError, InvalidProxyError
from .legacy_migrator import LegacyVersionMigrator
from .manifest_resolver import ManifestResolver
from .mod_tree_builder import ModTreeBuilder
from .settings import SettingsStore
from .task_runner import TaskRunner
from .user_properties import UserProperties


RESULT_POLL_INTERVAL = 0.2


def validate_application_dir(directory_text) -> Optional[Path]:
    """Turn the directory text into an absolute Path, or None if it is blank."""
    if directory_text is None or not str(directory_text).strip():
        return None
    return Path(str(directory_text).strip()).expanduser().absolute()


class InstallationOrchestrator:
    
    def __init__(self, settings: SettingsStore, properties: UserProperties, profile: InstallationProfile,
                 log_callback=None, prompt_callback=None, task_runner: Optional[TaskRunner] = None,
                 connector_factory=Connector, downloader_factory=Downloader,
                 installer_version=INSTALLER_VERSION, temp_file_factory=create_temp_file):
        self.settings = settings
        self.properties = properties
        self.profile = profile
        self.log_callback = log_callback
        self.prompt_callback = prompt_callback
        self.task_runner = task_runner or TaskRunner(log_callback)
        self.connector_factory = connector_factory
        self.downloader_factory = downloader_factory
        self.installer_version = installer_version
        self.temp_file_factory = temp_file_factory
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    def _prompt(self, message):
        if self.prompt_callback:
            return self.prompt_callback(INSTALLER_TITLE, message)
        return False
    
    # ============================================================================
    # Page hand-off
    # ============================================================================
    
    def prepare_to_leave(self, directory_text, using_proxy=False, host_text=None, port_text=None,
                         cancel_event: Optional[threading.Event] = None) -> TaskOutcome:
        """Run validation, then the directory checks if needed, each on a background worker.
        
        The directory is added to the checked set here, on the calling thread,
        once its worker has succeeded.
        """
        cancel_event = cancel_event or threading.Event()
        
        outcome = self._run_in_background(
            lambda event: self._validate(directory_text, using_proxy, host_text, port_text, event),
            "SuperValidationTask", cancel_event)
        if not outcome.ok:
            return outcome
        
        directory = outcome.value
        if self.settings.is_directory_checked(directory):
            self._log(f"{directory} already checked in this session", debug=True)
            return outcome
        
        dir_outcome = self._run_in_background(
            lambda event: self.check_directory(directory, event),
            "DirectoryTask", cancel_event)
        if not dir_outcome.ok:
            return dir_outcome
        
        self.settings.mark_directory_checked(directory)
        return outcome
    
    def _run_in_background(self, task, name, cancel_event) -> TaskOutcome:
        handle = self.task_runner.start(task, name, cancel_event)
        try:
            outcome = handle.result(RESULT_POLL_INTERVAL)
            while outcome is None:
                outcome = handle.result(RESULT_POLL_INTERVAL)
            return outcome
        except KeyboardInterrupt:
            self._log(f"{LogSymbols.WARNING} Cancelling...", warning=True)
            handle.cancel()
            return handle.result()
    
    def check_directory(self, directory, cancel_event: Optional[threading.Event] = None) -> TaskOutcome:
        """Directory permission/content checks; does not touch the checked set."""
        validator = DirectoryValidator(self.profile, self.log_callback, self.prompt_callback, cancel_event)
        return validator.validate(directory)
    
    # ============================================================================
    # Validation
    # ============================================================================
    
    def validate(self, directory_text, using_proxy=False, host_text=None, port_text=None,
                 cancel_event: Optional[threading.Event] = None) -> TaskOutcome:
        """Run the validation phases on the current thread and classify the result."""
        cancel_event = cancel_event or threading.Event()
        return self.task_runner.execute(
            lambda event: self._validate(directory_text, using_proxy, host_text, port_text, event),
            cancel_event)
    
    def _rollback_phase_a(self):
        self._log("Rolling back Phase A validation", info=True)
        self.settings.rollback_phase_a()
        return TaskOutcome.cancelled()
    
    def _rollback_phase_b(self):
        self._log("Rolling back Phase B validation", info=True)
        self.settings.rollback_phase_b()
        return TaskOutcome.cancelled()
    
    def _validate(self, directory_text, using_proxy, host_text, port_text, cancel_event) -> TaskOutcome:
        self._log("Validating user input...", info=True)
        
        destination_dir = validate_application_dir(directory_text)
        if destination_dir is None:
            return TaskOutcome.failed(ErrorKind.INVALID_INPUT, get_user_friendly_error('invalid_directory'))
        
        if not destination_dir.exists():
            if not self._prompt(get_prompt_message('create_directory')):
                return TaskOutcome.declined()
            self._log("Attempting to create directory/ies...", info=True)
            try:
                destination_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                self._log(f"{LogSymbols.ERROR} Could not create {destination_dir}: {e}", error=True)
                return TaskOutcome.failed(ErrorKind.FILESYSTEM_PERMISSION,
                                          get_user_friendly_error('create_directory_failed'))
            self._log("Directory creation successful.", info=True)
        elif not destination_dir.is_dir():
            return TaskOutcome.failed(ErrorKind.INVALID_INPUT, get_user_friendly_error('invalid_directory'))
        
        proxy = None
        if using_proxy:
            self._log("Checking proxy...", info=True)
            try:
                proxy = create_proxy(host_text, port_text)
            except ValueError:
                return TaskOutcome.failed(ErrorKind.INVALID_INPUT, get_user_friendly_error('invalid_proxy_port'))
            except InvalidProxyError as e:
                self._log(f"{LogSymbols.ERROR} Proxy could not be created: {e}", error=True)
                return TaskOutcome.failed(ErrorKind.INVALID_INPUT, get_user_friendly_error('invalid_proxy'))
        self.settings.set('proxy', proxy)
        
        self._log("Validation succeeded!", info=True)
        
        self.properties.set_application_dir(destination_dir)
        self.properties.set_proxy(proxy)
        self.properties.save()
        
        previous = self.settings.get('connector')
        connector = self.connector_factory(proxy)
        self.settings.set('connector', connector)
        if previous is not None and previous is not connector:
            previous.close()
        downloader = self.downloader_factory(connector, cancel_event, self.log_callback)
        
        if not self.settings.has('remote_version'):
            outcome = self._resolve_mirrors(downloader, connector, cancel_event)
            if outcome is not None:
                return outcome
        
        if cancel_event.is_set():
            return self._rollback_phase_a()
        
        if not self.settings.has('mod_nodes'):
            outcome = self._build_catalog(downloader, cancel_event)
            if outcome is not None:
                return outcome
        
        if cancel_event.is_set():
            return self._rollback_phase_b()
        
        # checked every time: the user may have picked another directory
        self._log("Checking for legacy version information...", info=True)
        LegacyVersionMigrator(self.properties, self.log_callback).migrate_directory(
            destination_dir, self.settings.get('mod_nodes'))
        
        if cancel_event.is_set():
            return TaskOutcome.cancelled()
        
        self._log(f"{LogSymbols.SUCCESS} Done with validation!")
        return TaskOutcome.success(str(destination_dir))
    
    def _resolve_mirrors(self, downloader, connector, cancel_event) -> Optional[TaskOutcome]:
        """Phase A. Returns an outcome to stop with, or None to continue."""
        self._log("Checking installer version...", info=True)
        self._log(f"This version is {self.installer_version}", info=True)
        
        resolver = ManifestResolver(self.profile.mirrors, downloader, self.settings, cancel_event,
                                    self.log_callback, self.temp_file_factory)
        try:
            best = resolver.resolve()
        except TaskCancelled:
            return self._rollback_phase_a()
        
        # re-offered on every run until the installer is upgraded
        if is_newer_version(best.version, self.installer_version):
            self._log("Installer is out-of-date; prompting user to download new version...", info=True)
            if self._prompt(get_prompt_message('outdated_installer')):
                if best.download_page and connector.browse_to_url(best.download_page):
                    return TaskOutcome.exit()
                self._log(f"{LogSymbols.ERROR} Could not open {best.download_page}", error=True)
                return TaskOutcome.failed(ErrorKind.CONNECTIVITY, get_user_friendly_error('browser_failed'))
        return None
    
    def _build_catalog(self, downloader, cancel_event) -> Optional[TaskOutcome]:
        """Phase B. Returns an outcome to stop with, or None to continue."""
        self._log("Downloading mod information...", info=True)
        urls = self.settings.get('mod_urls')
        if not urls:
            raise EmptyCatalogError("The mirror did not list any mod manifests")
        
        builder = ModTreeBuilder(downloader, cancel_event, self.log_callback, self.temp_file_factory)
        try:
            mod_nodes = builder.build(urls)
        except TaskCancelled:
            return self._rollback_phase_b()
        
        self.settings.set('mod_nodes', mod_nodes)
        self._log(f"{LogSymbols.SUCCESS} {len(mod_nodes)} mod(s) available")
        return None
