"""Type definitions for better code clarity and IDE support."""
from typing import Any, Dict, List, NamedTuple, Optional


class ProxyConfig(NamedTuple):
    """Proxy host and port; absence of a ProxyConfig means a direct connection."""
    host: str
    port: int
    
    def as_requests_proxies(self) -> Dict[str, str]:
        address = f"http://{self.host}:{self.port}"
        return {'http': address, 'https': address}


class RemoteManifestSet(NamedTuple):
    """Documents of the mirror carrying the highest version."""
    version: str
    download_page: Optional[str]
    mod_urls: List[str]
    basic_config: Optional[List[str]]


class MigrationResult(NamedTuple):
    """Result of back-filling installed versions from a legacy ledger."""
    migrated: Dict[str, str]
    conflicts: List[str]


class OutcomeStatus:
    SUCCESS = 'success'
    CANCELLED = 'cancelled'
    FAILED = 'failed'
    DECLINED = 'declined'
    EXIT = 'exit'


class TaskOutcome(NamedTuple):
    """Discriminated result of a background task."""
    status: str
    value: Any = None
    error_kind: Optional[str] = None
    message: Optional[str] = None
    
    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS
    
    @classmethod
    def success(cls, value=None):
        return cls(OutcomeStatus.SUCCESS, value)
    
    @classmethod
    def cancelled(cls):
        return cls(OutcomeStatus.CANCELLED)
    
    @classmethod
    def declined(cls):
        return cls(OutcomeStatus.DECLINED)
    
    @classmethod
    def exit(cls):
        return cls(OutcomeStatus.EXIT)
    
    @classmethod
    def failed(cls, error_kind, message=None):
        return cls(OutcomeStatus.FAILED, None, error_kind, message)


class InstallationProfile(NamedTuple):
    """What the destination directory must look like, and where to look for mods."""
    mirrors: List[str]
    default_dir: str
    requires_base_game: bool
    base_asset_name: str
    package_extension: str
    allowed_packages: List[str]
