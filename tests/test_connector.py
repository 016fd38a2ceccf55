"""
Tests for proxy handling and fetch-to-file downloads.
"""
import threading
from unittest.mock import Mock, patch

import pytest
import requests

from core.connector import Connector, Downloader, create_proxy
from core.errors import InvalidProxyError
from model_types import ProxyConfig
from utils.network_utils import is_valid_url, mirror_document_url, retry_with_backoff


class TestCreateProxy:
    
    def test_valid(self):
        assert create_proxy(" proxy.local ", "3128") == ProxyConfig("proxy.local", 3128)
    
    def test_non_numeric_port(self):
        with pytest.raises(ValueError):
            create_proxy("proxy.local", "abc")
    
    @pytest.mark.parametrize("port", [None, "", "  "])
    def test_missing_port(self, port):
        with pytest.raises(ValueError):
            create_proxy("proxy.local", port)
    
    @pytest.mark.parametrize("host,port", [("", "80"), ("bad host", "80"), ("proxy.local", "0"), ("proxy.local", "70000")])
    def test_invalid(self, host, port):
        with pytest.raises(InvalidProxyError):
            create_proxy(host, port)


class TestConnector:
    
    def test_session_uses_proxy(self):
        connector = Connector(ProxyConfig("proxy.local", 3128))
        assert connector.session.proxies['https'] == "http://proxy.local:3128"
        connector.close()
    
    def test_open_stream_raises_for_status(self):
        session = Mock()
        session.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
        
        with pytest.raises(requests.exceptions.HTTPError):
            Connector(session=session).open_stream("http://m1.example.org/version.txt")
        session.get.return_value.close.assert_called_once()
    
    def test_browse_to_url(self):
        with patch('utils.network_utils.webbrowser.open', return_value=True) as mock_open:
            assert Connector(session=Mock()).browse_to_url("http://m1.example.org/get")
        mock_open.assert_called_once_with("http://m1.example.org/get")
    
    def test_browse_to_invalid_url(self):
        assert not Connector(session=Mock()).browse_to_url("not a url")


def streaming_connector(*chunks, error=None):
    connector = Mock()
    if error is not None:
        connector.open_stream.side_effect = error
    else:
        connector.open_stream.return_value.iter_content.return_value = iter(chunks)
    return connector


class TestDownloader:
    
    def test_download_writes_file(self, tmp_path):
        destination = tmp_path / "version.txt"
        downloader = Downloader(streaming_connector(b"2.3.5\n", b"http://x/\n"), retry_delay=0)
        
        assert downloader.download("http://m1.example.org/version.txt", destination)
        assert destination.read_bytes() == b"2.3.5\nhttp://x/\n"
    
    def test_network_failure_removes_partial_file(self, tmp_path, logger):
        destination = tmp_path / "version.txt"
        destination.write_bytes(b"stale")
        connector = streaming_connector(error=requests.exceptions.ConnectionError("down"))
        downloader = Downloader(connector, log_callback=logger, max_retries=2, retry_delay=0)
        
        assert not downloader.download("http://m1.example.org/version.txt", destination)
        assert not destination.exists()
        assert connector.open_stream.call_count == 2
    
    def test_cancel_mid_stream(self, tmp_path):
        cancel_event = threading.Event()
        
        def chunks():
            yield b"first"
            cancel_event.set()
            yield b"second"
        
        connector = Mock()
        connector.open_stream.return_value.iter_content.return_value = chunks()
        destination = tmp_path / "big.bin"
        
        assert not Downloader(connector, cancel_event, retry_delay=0).download("http://x.org/big", destination)
        assert not destination.exists()
    
    def test_already_cancelled(self, tmp_path):
        cancel_event = threading.Event()
        cancel_event.set()
        connector = Mock()
        
        assert not Downloader(connector, cancel_event).download("http://x.org/f", tmp_path / "f")
        connector.open_stream.assert_not_called()


class TestNetworkUtils:
    
    def test_mirror_document_url(self):
        assert mirror_document_url("http://m.org/fso", "version.txt") == "http://m.org/fso/version.txt"
        assert mirror_document_url("http://m.org/fso/", "version.txt") == "http://m.org/fso/version.txt"
    
    @pytest.mark.parametrize("url,valid", [
        ("https://m.org/a.txt", True),
        ("ftp://m.org/a.txt", False),
        ("m.org/a.txt", False),
        ("", False),
    ])
    def test_is_valid_url(self, url, valid):
        assert is_valid_url(url) == valid
    
    def test_retry_succeeds_after_failure(self):
        func = Mock(side_effect=[requests.exceptions.Timeout(), "ok"])
        assert retry_with_backoff(func, max_retries=3, delay=0) == "ok"
    
    def test_retry_stops_when_asked(self):
        func = Mock(side_effect=requests.exceptions.Timeout())
        with pytest.raises(requests.exceptions.Timeout):
            retry_with_backoff(func, max_retries=5, delay=0, should_stop=lambda: True)
        assert func.call_count == 1


def http_error(status):
    response = Mock()
    response.status_code = status
    return requests.exceptions.HTTPError(f"{status} error", response=response)


class TestHttpErrors:
    
    def test_client_error_is_not_retried(self, tmp_path):
        connector = streaming_connector(error=http_error(404))
        destination = tmp_path / "basic_config.txt"
        
        assert not Downloader(connector, max_retries=3, retry_delay=0).download(
            "http://m1.example.org/basic_config.txt", destination)
        assert connector.open_stream.call_count == 1
        assert not destination.exists()
    
    def test_server_error_is_retried(self, tmp_path):
        connector = streaming_connector(error=http_error(503))
        
        assert not Downloader(connector, max_retries=3, retry_delay=0).download(
            "http://m1.example.org/version.txt", tmp_path / "version.txt")
        assert connector.open_stream.call_count == 3
