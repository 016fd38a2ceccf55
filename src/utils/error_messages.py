"""User-friendly error message templates."""

from utils.symbols import LogSymbols


SUPPORT_HINT = "visit Hard Light Productions for technical support"


def get_user_friendly_error(error_type, error_details=""):
    """Convert error type to user-friendly message with actionable steps."""
    messages = {
        'no_mirrors': (
            f"{LogSymbols.ERROR_BOLD} Remote sites unreachable\n\n"
            "There was a problem accessing the remote sites.\n\n"
            "Try:\n"
            f"{LogSymbols.BULLET} Check your network connection\n"
            f"{LogSymbols.BULLET} Check your proxy settings\n"
            f"{LogSymbols.BULLET} Try again later"
        ),
        
        'empty_catalog': (
            f"{LogSymbols.ERROR_BOLD} No mods available\n\n"
            "For some reason, there are no mods available for download. "
            "This is not an error with the network, but rather with the remote mod repositories.\n\n"
            "We can only suggest that you try again later."
        ),
        
        'invalid_directory': (
            f"{LogSymbols.ERROR_BOLD} Invalid destination directory\n\n"
            "The destination directory is not valid.\n\n"
            "Try:\n"
            f"{LogSymbols.BULLET} Select another directory"
        ),
        
        'create_directory_failed': (
            f"{LogSymbols.ERROR_BOLD} Could not create directory\n\n"
            "Could not create the destination directory.\n\n"
            "Try:\n"
            f"{LogSymbols.BULLET} Select another directory\n"
            f"{LogSymbols.BULLET} Check the permissions of the parent folder"
        ),
        
        'read_access': (
            f"{LogSymbols.ERROR_BOLD} Permission denied (read)\n\n"
            "The installer could not read from the destination directory.\n\n"
            "Try:\n"
            f"{LogSymbols.BULLET} Ensure that the directory is readable\n"
            f"{LogSymbols.BULLET} Choose another directory, or {SUPPORT_HINT}"
        ),
        
        'write_access': (
            f"{LogSymbols.ERROR_BOLD} Permission denied (write)\n\n"
            "The installer could not create a temporary file in the destination directory.\n\n"
            "Try:\n"
            f"{LogSymbols.BULLET} Ensure that the directory is writable\n"
            f"{LogSymbols.BULLET} Run the installer as Administrator (Windows)\n"
            f"{LogSymbols.BULLET} Choose another directory, or {SUPPORT_HINT}"
        ),
        
        'delete_access': (
            f"{LogSymbols.ERROR_BOLD} Permission denied (delete)\n\n"
            "The installer could not delete a temporary file in the destination directory.\n\n"
            "Try:\n"
            f"{LogSymbols.BULLET} Ensure that the directory is not read-only\n"
            f"{LogSymbols.BULLET} Choose another directory, or {SUPPORT_HINT}"
        ),
        
        'invalid_proxy_port': (
            LogSymbols.WARNING + " Invalid proxy port\n\n"
            "The proxy port could not be parsed as an integer.\n\n"
            "Please enter a correct proxy port."
        ),
        
        'invalid_proxy': (
            f"{LogSymbols.ERROR_BOLD} Invalid proxy\n\n"
            "This proxy appears to be invalid!\n\n"
            "Check that you have entered the host and port correctly."
        ),
        
        'temp_file': (
            f"{LogSymbols.ERROR_BOLD} Temporary file error\n\n"
            "There was an error creating a temporary file!\n\n"
            "This application may need elevated privileges to run."
        ),
        
        'browser_failed': (
            f"{LogSymbols.ERROR_BOLD} Could not open download page\n\n"
            "There was a problem bringing up the download link.\n\n"
            "Try re-downloading the installer using your favorite Internet browser."
        ),
        
        'cancelled': (
            LogSymbols.WARNING + " Validation was cancelled!"
        ),
        
        'unexpected': (
            f"{LogSymbols.ERROR_BOLD} An unexpected runtime exception occurred\n\n"
            f"Technical details: {error_details}\n\n"
            f"Please {SUPPORT_HINT}. Make sure you provide the log file."
        ),
    }
    
    default_message = (
        f"{LogSymbols.ERROR_BOLD} An error occurred\n\n"
        f"Technical details: {error_details}\n\n"
        f"Try:\n"
        f"{LogSymbols.BULLET} Check the log for more information\n"
        f"{LogSymbols.BULLET} Restart the installer\n"
        f"{LogSymbols.BULLET} If it persists, {SUPPORT_HINT}"
    )
    
    return messages.get(error_type, default_message)


def get_prompt_message(prompt_type, details=None):
    """Text of the yes/no questions asked during validation."""
    if prompt_type == 'create_directory':
        return "The destination directory does not exist.  Do you want to create it?"
    if prompt_type == 'outdated_installer':
        return (
            "This version of the installer is out-of-date.  Would you like to bring up the "
            "download page for the most recent version?\n\n(If you click Yes, the program will exit.)"
        )
    if prompt_type == 'missing_base_game':
        return (
            "The destination directory does not appear to contain a retail installation of "
            "FreeSpace 2.  FreeSpace 2 is required to run FreeSpace Open as well as any mods "
            "you download.\n\nDo you want to continue anyway?"
        )
    if prompt_type == 'extra_packages':
        names = "\n".join(f"{LogSymbols.BULLET} {name}" for name in (details or []))
        return (
            "The destination directory contains several extra VPs beyond the standard ones "
            f"that should be there:\n\n{names}\n\n"
            "These are likely to cause problems, and you are encouraged to move or delete them "
            "before running the game.  Do you want to continue with the installation?"
        )
    raise ValueError(f"Unknown prompt type: {prompt_type}")
