"""Validation pipeline of the FreeSpace Open installer."""

from .constants import INSTALLER_TITLE, INSTALLER_VERSION, LOG_FILE
from .errors import ErrorKind, InstallerError, TaskCancelled
from .mod_node import ModNode
from .orchestrator import InstallationOrchestrator
from .settings import SettingsStore
from .task_runner import TaskRunner
from .user_properties import UserProperties

__all__ = [
    'INSTALLER_TITLE', 'INSTALLER_VERSION', 'LOG_FILE',
    'ErrorKind', 'InstallerError', 'TaskCancelled',
    'ModNode', 'InstallationOrchestrator', 'SettingsStore', 'TaskRunner', 'UserProperties',
]
