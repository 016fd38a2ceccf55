"""Network access for the validation phases: proxy-aware session and fetch-to-file downloads."""
import threading
from pathlib import Path
from typing import Optional

import requests

from model_types import ProxyConfig
from utils.file_utils import delete_if_exists
from utils.network_utils import retry_with_backoff, browse_to_url
from .constants import REQUEST_TIMEOUT, CHUNK_SIZE, MAX_RETRIES, RETRY_DELAY, BACKOFF_MULTIPLIER
from .errors import InvalidProxyError


MAX_PORT = 65535


def is_server_error(error: requests.exceptions.HTTPError) -> bool:
    """True for 5xx responses (worth retrying); client errors such as 404 are final."""
    status = getattr(error.response, "status_code", None)
    return status is None or status >= 500


def create_proxy(host: str, port) -> ProxyConfig:
    """Build a ProxyConfig from user input. Raises ValueError for a missing or non-integer port, InvalidProxyError otherwise."""
    if port is None or not str(port).strip():
        raise ValueError("Proxy port is missing")
    port = int(str(port).strip())
    host = (host or '').strip()
    if not host or any(c.isspace() for c in host) or '/' in host:
        raise InvalidProxyError(f"Invalid proxy host: {host!r}")
    if not 0 < port <= MAX_PORT:
        raise InvalidProxyError(f"Invalid proxy port: {port}")
    return ProxyConfig(host, port)


class Connector:
    """Holds the HTTP session (with proxy settings) used by every download of a run."""
    
    def __init__(self, proxy: Optional[ProxyConfig] = None, session=None):
        self.proxy = proxy
        self.session = session or requests.Session()
        if proxy is not None:
            self.session.proxies.update(proxy.as_requests_proxies())
    
    def open_stream(self, url: str):
        response = self.session.get(url, stream=True, timeout=REQUEST_TIMEOUT)
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError:
            response.close()
            raise
        return response
    
    def browse_to_url(self, url: str) -> bool:
        return browse_to_url(url)
    
    def close(self):
        self.session.close()


class Downloader:
    """Fetch-to-file contract used by the pipeline: download(url, destination) -> bool.
    
    A failed or cancelled download returns False and leaves no partial file.
    Callers tell the two apart by checking the cancel event.
    """
    
    def __init__(self, connector: Connector, cancel_event: Optional[threading.Event] = None,
                 log_callback=None, max_retries=MAX_RETRIES, retry_delay=RETRY_DELAY):
        self.connector = connector
        self.cancel_event = cancel_event or threading.Event()
        self.log_callback = log_callback
        self.max_retries = max_retries
        self.retry_delay = retry_delay
    
    def _log(self, message, **kwargs):
        if self.log_callback:
            self.log_callback(message, **kwargs)
    
    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()
    
    def download(self, url: str, destination) -> bool:
        destination = Path(destination)
        if self.cancelled:
            return False
        
        def attempt_download():
            try:
                response = self.connector.open_stream(url)
            except requests.exceptions.HTTPError as e:
                if not is_server_error(e):
                    self._log(f"  {url} answered {e}", debug=True)
                    return False
                raise
            try:
                with open(destination, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if self.cancelled:
                            return False
                        if chunk:
                            f.write(chunk)
            finally:
                response.close()
            return True
        
        try:
            completed = retry_with_backoff(attempt_download, max_retries=self.max_retries,
                                           delay=self.retry_delay, backoff=BACKOFF_MULTIPLIER,
                                           exceptions=(requests.exceptions.RequestException,),
                                           should_stop=lambda: self.cancelled)
        except requests.exceptions.RequestException as e:
            self._log(f"  Could not download {url}: {type(e).__name__}", debug=True)
            completed = False
        except OSError as e:
            self._log(f"  Could not write {destination}: {e}", error=True)
            completed = False
        
        if not completed and not delete_if_exists(destination):
            self._log(f"  Could not remove partial download {destination}", warning=True)
        return completed
