"""Installer error taxonomy.

Every failure that reaches the user carries a kind; the kind selects the
message from utils.error_messages. Cancellation is not an error and has its
own exception.
"""


class ErrorKind:
    CONNECTIVITY = 'connectivity'
    DATA_INTEGRITY = 'data_integrity'
    FILESYSTEM_PERMISSION = 'filesystem_permission'
    INVALID_INPUT = 'invalid_input'
    UNEXPECTED = 'unexpected'


class TaskCancelled(Exception):
    """The cancel event was set while a phase was running."""


class InstallerError(Exception):
    """Base class for user-visible installer failures."""
    
    kind = ErrorKind.UNEXPECTED
    message_key = 'unexpected'
    
    def __init__(self, message, message_key=None):
        super().__init__(message)
        if message_key:
            self.message_key = message_key


class ConnectivityError(InstallerError):
    kind = ErrorKind.CONNECTIVITY
    message_key = 'no_mirrors'


class NoMirrorsError(ConnectivityError):
    """No mirror returned a usable version document."""


class DataIntegrityError(InstallerError):
    kind = ErrorKind.DATA_INTEGRITY
    message_key = 'empty_catalog'


class EmptyCatalogError(DataIntegrityError):
    """Manifests were found but none of them produced a mod node."""


class ManifestParseError(DataIntegrityError):
    """A package manifest could not be parsed."""
    
    def __init__(self, message, line_number=None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class FilesystemPermissionError(InstallerError):
    kind = ErrorKind.FILESYSTEM_PERMISSION
    message_key = 'write_access'


class InvalidInputError(InstallerError):
    kind = ErrorKind.INVALID_INPUT
    message_key = 'invalid_directory'


class InvalidProxyError(InvalidInputError):
    message_key = 'invalid_proxy'
