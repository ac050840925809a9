from urllib3.util.retry import Retry
import requests
from requests.adapters import HTTPAdapter
from typing import Optional, Tuple

from .. import __version__


# Every request is exactly one API call; spacing and budget are handled by the caller
NO_RETRY_STRATEGY = Retry(
    total=0,
    connect=0,
    read=0,
    redirect=0,
    status=0,
    raise_on_status=False,
)


def new_session(auth: Optional[Tuple[str, str]] = None) -> requests.Session:
    """Create a new requests session that never retries on its own"""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=NO_RETRY_STRATEGY)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    if auth is not None:
        session.auth = auth

    # Set default headers
    session.headers.update(
        {
            "User-Agent": f"shopify-theme-downloader/{__version__}",
            "Accept": "application/json",
        }
    )

    return session
