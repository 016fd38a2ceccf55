import sys
import threading
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.settings import SettingsStore
from core.user_properties import UserProperties
from model_types import InstallationProfile


class Logger:
    def __init__(self):
        self.messages = []
    
    def __call__(self, msg, error=False, **kwargs):
        self.messages.append((msg, error))
    
    def contains(self, text):
        return any(text in msg for msg, _ in self.messages)
    
    @property
    def errors(self):
        return [msg for msg, error in self.messages if error]


class FakeDownloader:
    """Serves in-memory documents; a URL missing from documents fails to download.
    
    Downloading cancel_at sets the cancel event and fails, like a fetch
    interrupted by the user.
    """
    
    def __init__(self, documents, cancel_event=None, cancel_at=None):
        self.documents = documents
        self.cancel_event = cancel_event or threading.Event()
        self.cancel_at = cancel_at
        self.requested = []
    
    def download(self, url, destination):
        self.requested.append(url)
        if url == self.cancel_at:
            self.cancel_event.set()
            return False
        if self.cancel_event.is_set():
            return False
        content = self.documents.get(url)
        if content is None:
            return False
        Path(destination).write_text(content, encoding='utf-8')
        return True


def mirror_documents(base, version, filenames=None, page=None, basic_config=None):
    """Documents served by one mirror. filenames=None makes filenames.txt fail."""
    docs = {f"{base}version.txt": f"{version}\n{page or base + 'download'}\n"}
    if filenames is not None:
        docs[f"{base}filenames.txt"] = "\n".join(filenames) + "\n"
    if basic_config is not None:
        docs[f"{base}basic_config.txt"] = basic_config
    return docs


def manifest(*names, version="1.0"):
    """A manifest with one leaf node per name."""
    blocks = []
    for name in names:
        blocks.append(f"NAME\n{name}\nVERSION\n{version}\nURL\nhttp://files.example.org/{name}.zip\nEND\n")
    return "".join(blocks)


@pytest.fixture
def logger():
    return Logger()


@pytest.fixture
def settings():
    return SettingsStore()


@pytest.fixture
def properties(tmp_path):
    return UserProperties(tmp_path / "config" / "installer_prefs.json")


@pytest.fixture
def profile():
    return InstallationProfile(
        mirrors=["http://m1.example.org/", "http://m2.example.org/"],
        default_dir="",
        requires_base_game=False,
        base_asset_name="root_fs2.vp",
        package_extension=".vp",
        allowed_packages=["root_fs2.vp", "sparky_fs2.vp"],
    )
