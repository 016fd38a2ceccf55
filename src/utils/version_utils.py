"""Dotted version string comparison used for installer and mod versions."""
import logging


logger = logging.getLogger(__name__)


def _parse_component(component: str, version: str) -> int:
    try:
        return int(component)
    except ValueError:
        logger.warning("Could not parse version string '%s'!", version)
        return 0


def compare_versions(version1: str, version2: str) -> int:
    """Compare MAJOR.MINOR.BUILD... versions. Returns 1 if v1>v2, -1 if v1<v2, 0 if equal.
    
    Missing trailing components count as 0, so "1.2" equals "1.2.0".
    Unparsable components also count as 0 and are reported as a warning.
    """
    num1 = str(version1).strip().split('.')
    num2 = str(version2).strip().split('.')
    
    for i in range(max(len(num1), len(num2))):
        ver1 = _parse_component(num1[i], version1) if i < len(num1) else 0
        ver2 = _parse_component(num2[i], version2) if i < len(num2) else 0
        
        if ver1 > ver2:
            return 1
        elif ver1 < ver2:
            return -1
    return 0


def is_newer_version(candidate: str, current: str) -> bool:
    """True if candidate is strictly greater than current."""
    return compare_versions(candidate, current) > 0
