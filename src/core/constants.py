# -*- coding: utf-8 -*-
"""Application constants, paths, network settings and installation profile defaults."""
import sys
from pathlib import Path


# Base directory resolution (script vs PyInstaller bundle)
if hasattr(sys, '_MEIPASS'):
    # PyInstaller: _MEIPASS is temp extraction folder
    if sys.platform == "darwin" and '.app' in sys.executable:
        # macOS .app: executable is Contents/MacOS/app_name, go up to parent of .app
        BASE_DIR = Path(sys.executable).resolve().parent.parent.parent.parent
    else:
        # Windows/Linux: executable directory
        BASE_DIR = Path(sys.executable).resolve().parent
else:
    # Script mode: project root (3 levels up from src/core/constants.py)
    BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Installer identity
INSTALLER_TITLE = "FreeSpace Open Installer"
INSTALLER_VERSION = "2.3.5"

# Mirrors hosting version.txt / filenames.txt / basic_config.txt
INSTALLER_HOME_URLS = [
    "https://www.fsoinstaller.com/files/installer/java/",
    "https://scp.indiegames.us/fsoinstaller/",
]
VERSION_DOCUMENT = "version.txt"
FILENAMES_DOCUMENT = "filenames.txt"
BASIC_CONFIG_DOCUMENT = "basic_config.txt"
BASELINE_VERSION = "0.0.0.0"

# Paths
CONFIG_FILE = BASE_DIR / "config" / "installer_config.json"
PREFS_FILE = BASE_DIR / "config" / "installer_prefs.json"
LOG_FILE = BASE_DIR / "fso_installer.log"

# Network timeouts & download
REQUEST_TIMEOUT = 30
CHUNK_SIZE = 8192
TEMP_FILE_PREFIX = "fsoinstaller_"

# Retry & backoff
MAX_RETRIES = 3
RETRY_DELAY = 2
BACKOFF_MULTIPLIER = 2

# Legacy installer leftovers, relative to the destination directory
LEGACY_DIR_NAME = "temp"
LEGACY_LEDGER_NAME = "installedversions.txt"
LEGACY_EXTRA_FILES = ("latest.txt", "version.txt")
LEDGER_NAME_MARKER = "NAME"
LEDGER_VERSION_MARKER = "VERSION"

# Installation profile defaults
DEFAULT_INSTALL_DIR = str(Path.home() / "Games" / "FreeSpace2")
REQUIRES_BASE_GAME = True
BASE_ASSET_NAME = "root_fs2.vp"
PACKAGE_EXTENSION = ".vp"
ALLOWED_PACKAGES = [
    "root_fs2.vp",
    "smarty_fs2.vp",
    "sparky_fs2.vp",
    "sparky_hi_fs2.vp",
    "stu_fs2.vp",
    "tango1_fs2.vp",
    "tango2_fs2.vp",
    "tango3_fs2.vp",
    "warble_fs2.vp",
    "hud_fs2.vp",
    "multi-mission-pack.vp",
    "multi-voice-pack.vp",
    "fs2_ogg.vp",
]
PROBE_FILE_PREFIX = "installer_"
PROBE_FILE_SUFFIX = ".tmp"
