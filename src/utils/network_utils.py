import time
import webbrowser
from urllib.parse import urljoin, urlparse

import requests


def retry_with_backoff(func, max_retries=3, delay=1, backoff=2, 
                       exceptions=(requests.exceptions.RequestException,),
                       should_stop=None):
    """Retry function with exponential backoff.
    
    should_stop: optional () -> bool checked before each retry; when it returns
    True the last exception is raised immediately instead of sleeping.
    """
    last_exception = None
    current_delay = delay
    
    for attempt in range(max_retries):
        try:
            return func()
        except exceptions as e:
            last_exception = e
            if should_stop and should_stop():
                break
            if attempt < max_retries - 1:
                time.sleep(current_delay)
                current_delay *= backoff
    
    raise last_exception


def mirror_document_url(base_url: str, document: str) -> str:
    """Build the URL of a manifest document hosted on a mirror.
    
    Mirror base URLs are directories and always end up with a trailing slash.
    """
    if not base_url.endswith('/'):
        base_url += '/'
    return urljoin(base_url, document)


def is_valid_url(url: str) -> bool:
    """Check that url has an http(s) scheme and a host."""
    if not url:
        return False
    try:
        parsed = urlparse(url.strip())
    except (ValueError, AttributeError):
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def browse_to_url(url: str) -> bool:
    """Open url in the user's browser. Returns False if no browser could be launched."""
    if not is_valid_url(url):
        return False
    try:
        return webbrowser.open(url)
    except webbrowser.Error:
        return False
