"""
Tests for mirror resolution (phase A).
"""
import threading

import pytest

from conftest import FakeDownloader, mirror_documents
from core.errors import NoMirrorsError, TaskCancelled, FilesystemPermissionError
from core.manifest_resolver import ManifestResolver


M1 = "http://m1.example.org/"
M2 = "http://m2.example.org/"
M3 = "http://m3.example.org/"


def make_resolver(documents, settings, mirrors=(M1, M2, M3), cancel_at=None, logger=None):
    cancel_event = threading.Event()
    downloader = FakeDownloader(documents, cancel_event, cancel_at)
    resolver = ManifestResolver(list(mirrors), downloader, settings, cancel_event, logger)
    return resolver, downloader


class TestMirrorSelection:
    
    def test_highest_version_wins(self, settings, logger):
        docs = {}
        docs.update(mirror_documents(M1, "1.0", ["http://files.example.org/a.txt"]))
        docs.update(mirror_documents(M2, "2.0", ["http://files.example.org/b.txt"], page="http://m2.example.org/get"))
        docs.update(mirror_documents(M3, "1.5"))
        resolver, downloader = make_resolver(docs, settings, logger=logger)
        
        best = resolver.resolve()
        
        assert best.version == "2.0"
        assert settings.get('remote_version') == "2.0"
        assert settings.get('mod_urls') == ["http://files.example.org/b.txt"]
        assert settings.get('remote_download_page') == "http://m2.example.org/get"
        # 1.5 is not newer than 2.0, so its filenames are never requested
        assert f"{M3}filenames.txt" not in downloader.requested
    
    def test_higher_version_without_filenames_keeps_previous_winner(self, settings, logger):
        docs = {}
        docs.update(mirror_documents(M1, "1.0", ["http://files.example.org/a.txt"]))
        docs.update(mirror_documents(M2, "2.0"))
        resolver, _ = make_resolver(docs, settings, mirrors=(M1, M2), logger=logger)
        
        best = resolver.resolve()
        
        assert best.version == "1.0"
        assert settings.get('mod_urls') == ["http://files.example.org/a.txt"]
        assert logger.contains("Could not read filenames.txt")
    
    def test_equal_version_does_not_replace(self, settings):
        docs = {}
        docs.update(mirror_documents(M1, "1.0", ["http://files.example.org/a.txt"]))
        docs.update(mirror_documents(M2, "1.0.0", ["http://files.example.org/b.txt"]))
        resolver, _ = make_resolver(docs, settings, mirrors=(M1, M2))
        
        assert resolver.resolve().mod_urls == ["http://files.example.org/a.txt"]
    
    def test_unreachable_mirrors_are_skipped(self, settings):
        docs = mirror_documents(M3, "3.1", ["http://files.example.org/c.txt"])
        resolver, _ = make_resolver(docs, settings)
        
        assert resolver.resolve().version == "3.1"
    
    def test_basic_config_is_optional(self, settings):
        docs = mirror_documents(M1, "1.0", ["http://files.example.org/a.txt"])
        resolver, _ = make_resolver(docs, settings, mirrors=(M1,))
        
        best = resolver.resolve()
        
        assert best.basic_config is None
        assert settings.get('basic_config_mods') is None
    
    def test_basic_config_is_recorded(self, settings):
        docs = mirror_documents(M1, "1.0", ["http://files.example.org/a.txt"],
                                basic_config="Core\n\nVoice Pack\n")
        resolver, _ = make_resolver(docs, settings, mirrors=(M1,))
        
        resolver.resolve()
        
        assert settings.get('basic_config_mods') == ["Core", "Voice Pack"]
    
    def test_missing_download_page_line(self, settings):
        docs = {f"{M1}version.txt": "1.0\n", f"{M1}filenames.txt": "http://files.example.org/a.txt\n"}
        resolver, _ = make_resolver(docs, settings, mirrors=(M1,))
        
        assert resolver.resolve().download_page is None
    
    def test_mirror_without_trailing_slash(self, settings):
        base = "http://m1.example.org/fso"
        docs = mirror_documents(base + "/", "1.0", ["http://files.example.org/a.txt"])
        resolver, _ = make_resolver(docs, settings, mirrors=(base,))
        
        assert resolver.resolve().version == "1.0"


class TestResolverFailures:
    
    def test_no_mirrors_respond(self, settings):
        resolver, _ = make_resolver({}, settings)
        
        with pytest.raises(NoMirrorsError):
            resolver.resolve()
        assert settings.get('remote_version') is None
    
    def test_baseline_version_is_not_accepted(self, settings):
        docs = mirror_documents(M1, "0.0.0.0", ["http://files.example.org/a.txt"])
        resolver, _ = make_resolver(docs, settings, mirrors=(M1,))
        
        with pytest.raises(NoMirrorsError):
            resolver.resolve()
    
    def test_cancel_during_walk(self, settings):
        docs = {}
        docs.update(mirror_documents(M1, "1.0", ["http://files.example.org/a.txt"]))
        docs.update(mirror_documents(M2, "2.0", ["http://files.example.org/b.txt"]))
        resolver, downloader = make_resolver(docs, settings, cancel_at=f"{M2}version.txt")
        
        with pytest.raises(TaskCancelled):
            resolver.resolve()
        assert f"{M3}version.txt" not in downloader.requested
    
    def test_temp_file_failure(self, settings, logger):
        def broken_factory(prefix):
            raise PermissionError("read-only temp dir")
        
        resolver = ManifestResolver([M1], FakeDownloader({}), settings, log_callback=logger,
                                    temp_file_factory=broken_factory)
        
        with pytest.raises(FilesystemPermissionError) as exc_info:
            resolver.resolve()
        assert exc_info.value.message_key == 'temp_file'
    
    def test_temp_files_are_removed(self, settings, tmp_path):
        created = []
        
        def factory(prefix):
            path = tmp_path / f"{prefix}{len(created)}.tmp"
            path.touch()
            created.append(path)
            return path
        
        docs = mirror_documents(M1, "1.0", ["http://files.example.org/a.txt"])
        resolver = ManifestResolver([M1], FakeDownloader(docs), settings, temp_file_factory=factory)
        resolver.resolve()
        
        assert len(created) == 3
        assert not any(path.exists() for path in created)
