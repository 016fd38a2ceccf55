"""Utility modules for the FreeSpace Open installer."""

from .version_utils import compare_versions
from .log import InstallerLog

__all__ = ['compare_versions', 'InstallerLog']
