"""Installation profile loading and atomic JSON writes to prevent corruption."""
import json
import os
import tempfile
from pathlib import Path

from model_types import InstallationProfile
from .constants import (
    CONFIG_FILE,
    INSTALLER_HOME_URLS,
    DEFAULT_INSTALL_DIR,
    REQUIRES_BASE_GAME,
    BASE_ASSET_NAME,
    PACKAGE_EXTENSION,
    ALLOWED_PACKAGES,
)


def atomic_save_json(file_path, data, indent=2, ensure_ascii=False):
    """Atomic write: temp file + replace. Raises OSError if the file can't be written."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f'.tmp_{file_path.stem}_',
        suffix='.json'
    )
    try:
        with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii)
        os.replace(temp_path, file_path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def default_profile():
    return InstallationProfile(
        mirrors=list(INSTALLER_HOME_URLS),
        default_dir=DEFAULT_INSTALL_DIR,
        requires_base_game=REQUIRES_BASE_GAME,
        base_asset_name=BASE_ASSET_NAME,
        package_extension=PACKAGE_EXTENSION,
        allowed_packages=list(ALLOWED_PACKAGES),
    )


class ConfigManager:
    """Loads and saves the installation profile (mirrors, required assets, allowed packages)."""
    
    def __init__(self, log_callback=None, config_file=None):
        self.config_file = Path(config_file) if config_file else CONFIG_FILE
        self.log_callback = log_callback
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    def load_profile(self) -> InstallationProfile:
        """Load the profile; missing keys take their defaults, a missing/corrupt file gives the default profile."""
        defaults = default_profile()
        if not self.config_file.exists():
            return defaults
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._log(f"Error loading installer config: {e}", error=True)
            return defaults
        
        if not isinstance(data, dict):
            self._log("Installer config must be a JSON object; using defaults", warning=True)
            return defaults
        
        profile = defaults._replace(**{k: v for k, v in data.items() if k in InstallationProfile._fields})
        is_valid, error = self.validate_profile(profile)
        if not is_valid:
            self._log(f"Invalid installer config ({error}); using defaults", warning=True)
            return defaults
        return profile._replace(allowed_packages=[name.lower() for name in profile.allowed_packages])
    
    def save_profile(self, profile: InstallationProfile) -> bool:
        try:
            atomic_save_json(self.config_file, profile._asdict())
            return True
        except OSError as e:
            self._log(f"Error saving {self.config_file.name}: {e}", error=True)
            return False
    
    def validate_profile(self, profile):
        """Validate profile structure.
        
        Returns:
            tuple: (is_valid: bool, error_message: str or None)
        """
        if not isinstance(profile.mirrors, list) or not all(isinstance(url, str) for url in profile.mirrors):
            return (False, "'mirrors' must be a list of URLs")
        if not profile.mirrors:
            return (False, "'mirrors' must not be empty")
        if not isinstance(profile.allowed_packages, list):
            return (False, "'allowed_packages' must be a list")
        if not isinstance(profile.requires_base_game, bool):
            return (False, "'requires_base_game' must be true or false")
        if not profile.package_extension.startswith('.'):
            return (False, "'package_extension' must start with '.'")
        return (True, None)
