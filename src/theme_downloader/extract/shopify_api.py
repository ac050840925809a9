"""
Shopify Admin API Client - Pure I/O Operations

This module handles the two theme asset calls the downloader needs and keeps
track of the call budget reported by the shop on every response.
"""

import requests
import time
from typing import Dict, List, Any, Optional
import logging

from ..coreutils.env import env_get, env_int
from ..coreutils.errors import AssetFetchError, ListingError
from ..coreutils.request import new_session
from .schemas import AssetContent, AssetDescriptor, AssetEncoding, ShopCredentials

logger = logging.getLogger(__name__)

# API Endpoints
ASSETS_ENDPOINT_TEMPLATE = "{prefix}/themes/{theme_id}/assets.json"

# Header carrying "used/limit" for the REST call bucket
CALL_LIMIT_HEADER = "X-Shopify-Shop-Api-Call-Limit"

API_VERSION = env_get("SHOPIFY_API_VERSION", "") or None
REQUEST_TIMEOUT = env_int("SHOPIFY_REQUEST_TIMEOUT", 30)


def parse_call_limit(header_value: Optional[str]) -> Optional[Dict[str, int]]:
    """
    Parse the call limit header

    Args:
        header_value: Raw header, e.g. "32/40"

    Returns:
        Optional[Dict]: {"made", "limit", "left"} or None when absent or malformed
    """
    if not header_value:
        return None

    try:
        made, limit = (int(part.strip()) for part in header_value.split("/", 1))
    except ValueError:
        logger.warning(f"⚠️ Ignoring malformed {CALL_LIMIT_HEADER}: {header_value!r}")
        return None

    return {"made": made, "limit": limit, "left": limit - made}


def parse_asset(key: str, body: Any) -> AssetContent:
    """
    Turn an asset response body into a tagged AssetContent

    Binary assets come back as base64 in "attachment", text assets in "value".

    Args:
        key: Asset key that was requested
        body: Decoded JSON response

    Returns:
        AssetContent: Asset payload with its encoding
    """
    asset = body.get("asset") if isinstance(body, dict) else None
    if not isinstance(asset, dict):
        raise AssetFetchError(key, f"Malformed asset response for {key}")

    attachment = asset.get("attachment")
    if isinstance(attachment, str):
        return AssetContent(key=key, payload=attachment, encoding=AssetEncoding.BASE64)

    value = asset.get("value")
    if isinstance(value, str):
        return AssetContent(key=key, payload=value, encoding=AssetEncoding.RAW)

    raise AssetFetchError(key, f"Asset {key} has neither a value nor an attachment")


def parse_asset_listing(body: Any) -> List[AssetDescriptor]:
    """
    Turn a listing response body into ordered AssetDescriptors

    Args:
        body: Decoded JSON response

    Returns:
        List[AssetDescriptor]: Assets in listing order
    """
    assets = body.get("assets") if isinstance(body, dict) else None
    if not isinstance(assets, list):
        raise ListingError("Malformed asset listing: 'assets' is missing")

    descriptors = []
    for position, entry in enumerate(assets, 1):
        if not isinstance(entry, dict) or not isinstance(entry.get("key"), str):
            raise ListingError(f"Malformed asset listing entry at position {position}")
        descriptors.append(AssetDescriptor(key=entry["key"]))

    return descriptors


class ShopifyAPIClient:
    """Pure API client for the theme asset endpoints"""

    def __init__(
        self,
        credentials: ShopCredentials,
        api_version: Optional[str] = API_VERSION,
        timeout: int = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.credentials = credentials
        self.base_url = f"https://{credentials.domain}"
        self.prefix = f"/admin/api/{api_version}" if api_version else "/admin"
        self.timeout = timeout
        self.session = session or new_session(auth=(credentials.key, credentials.secret))
        self.call_limit: Optional[Dict[str, int]] = None

    def assets_url(self, theme_id: int) -> str:
        """Full URL of a theme's assets endpoint"""
        path = ASSETS_ENDPOINT_TEMPLATE.format(prefix=self.prefix, theme_id=theme_id)
        return f"{self.base_url}{path}"

    def api_calls_left(self) -> Optional[int]:
        """Calls left in the REST bucket as of the last response, None if unknown"""
        if self.call_limit is None:
            return None
        return self.call_limit["left"]

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """GET a URL and remember the call budget reported with the response"""
        response = self.session.get(url, params=params, timeout=self.timeout)

        call_limit = parse_call_limit(response.headers.get(CALL_LIMIT_HEADER))
        if call_limit is not None:
            self.call_limit = call_limit
            logger.debug(
                f"API calls: {call_limit['made']}/{call_limit['limit']} "
                f"({call_limit['left']} left)"
            )

        return response

    def list_assets(self, theme_id: int) -> List[AssetDescriptor]:
        """
        Fetch the asset listing of a theme

        Args:
            theme_id: Theme identifier

        Returns:
            List[AssetDescriptor]: Assets in listing order
        """
        url = self.assets_url(theme_id)
        logger.info(f"Fetching asset listing from {url}")
        start_time = time.time()

        try:
            response = self._get(url)
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching asset listing for theme {theme_id}: {e}")
            raise ListingError(f"Asset listing failed for theme {theme_id}: {e}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON in asset listing for theme {theme_id}: {e}")
            raise ListingError(f"Invalid JSON in asset listing for theme {theme_id}") from e

        descriptors = parse_asset_listing(body)

        elapsed = time.time() - start_time
        logger.info(f"Fetched {len(descriptors)} asset keys: {elapsed:.2f} seconds")
        return descriptors

    def get_asset(self, theme_id: int, key: str) -> AssetContent:
        """
        Fetch a single asset

        Args:
            theme_id: Theme identifier
            key: Asset key, e.g. "templates/index.liquid"

        Returns:
            AssetContent: Asset payload tagged raw or base64
        """
        url = self.assets_url(theme_id)
        logger.debug(f"Fetching asset {key} from {url}")

        try:
            response = self._get(url, params={"asset[key]": key})
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching asset {key}: {e}")
            raise AssetFetchError(key, f"Request for asset {key} failed: {e}") from e

        if not response.ok:
            logger.error(f"Error fetching asset {key}: HTTP {response.status_code}")
            raise AssetFetchError(
                key,
                f"Asset {key} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON for asset {key}: {e}")
            raise AssetFetchError(key, f"Invalid JSON for asset {key}") from e

        return parse_asset(key, body)

    def close(self) -> None:
        """Close the underlying HTTP session"""
        self.session.close()
