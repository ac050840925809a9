"""
Extract Layer Schemas

Records for data coming from and going to the Shopify Admin API.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

SHOP_DOMAIN_SUFFIX = ".myshopify.com"


class AssetEncoding(str, Enum):
    """How an asset payload is carried in the API response"""

    RAW = "raw"
    BASE64 = "base64"


@dataclass(frozen=True)
class ShopCredentials:
    """Private app credentials for one shop"""

    domain: str
    key: str
    secret: str

    def __repr__(self) -> str:
        return f"ShopCredentials(domain={self.domain!r}, key={self.key!r}, secret='***')"


@dataclass(frozen=True)
class ThemeRef:
    """Identifies the remote asset collection"""

    shop_domain: str
    theme_id: int

    @property
    def output_name(self) -> str:
        """Base name shared by the output directory and the archive"""
        return f"{self.shop_domain}-{self.theme_id}"


@dataclass(frozen=True)
class AssetDescriptor:
    """One entry of the asset listing"""

    key: str


@dataclass(frozen=True)
class AssetContent:
    """Fetched asset body, tagged with its encoding"""

    key: str
    payload: Union[str, bytes]
    encoding: AssetEncoding = AssetEncoding.RAW


def shop_domain(shop: str) -> str:
    """Full shop domain for a shop name given without the suffix"""
    shop = shop.strip()
    if shop.endswith(SHOP_DOMAIN_SUFFIX):
        return shop
    return f"{shop}{SHOP_DOMAIN_SUFFIX}"
