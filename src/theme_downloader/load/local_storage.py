"""
Local Storage - Load Layer

Maps asset keys onto the output directory and writes asset bodies to disk.
"""

import base64
import binascii
import os
from pathlib import Path
from typing import Union
import logging

from ..coreutils.errors import AssetStoreError, SetupError
from ..extract.schemas import AssetContent, AssetEncoding

logger = logging.getLogger(__name__)

# Mode for asset directories, applied before the umask
DIRECTORY_MODE = 0o777


def setup_output_dir(output_dir: Union[str, Path]) -> Path:
    """
    Create the output directory, refusing to reuse an existing one

    Args:
        output_dir: Directory to create

    Returns:
        Path: The created directory
    """
    output_dir = Path(output_dir)

    if output_dir.exists():
        # Already exists, this is an issue, we need it removed
        logger.error(f"❌ Theme directory already exists: {output_dir}")
        raise SetupError(
            f"Theme directory {output_dir} already exists, please remove it first"
        )

    try:
        output_dir.mkdir(mode=DIRECTORY_MODE)
    except OSError as e:
        raise SetupError(f"Could not create theme directory {output_dir}: {e}") from e

    logger.info(f"Created output directory: {output_dir}")
    return output_dir


def asset_path(output_dir: Union[str, Path], key: str) -> Path:
    """
    Local path of an asset key

    Args:
        output_dir: Output directory
        key: Slash-delimited asset key

    Returns:
        Path: output_dir/key
    """
    root = Path(output_dir)
    relative = Path(*key.split("/")) if key else Path()

    if not key or key.startswith("/") or ".." in relative.parts:
        raise AssetStoreError(key, f"Asset key {key!r} escapes the output directory")

    return root / relative


def decode_payload(content: AssetContent) -> bytes:
    """
    Bytes to write for an asset

    Args:
        content: Fetched asset

    Returns:
        bytes: Decoded attachment or UTF-8 encoded value
    """
    payload = content.payload

    if content.encoding == AssetEncoding.BASE64:
        try:
            # Line breaks and other non-alphabet characters are skipped
            return base64.b64decode(payload)
        except (binascii.Error, ValueError) as e:
            raise AssetStoreError(
                content.key, f"Invalid base64 attachment for {content.key}: {e}"
            ) from e

    if isinstance(payload, bytes):
        return payload
    # Lone surrogates from JSON escapes are kept byte for byte
    return payload.encode("utf-8", errors="surrogatepass")


def save_asset(content: AssetContent, output_dir: Union[str, Path]) -> Path:
    """
    Write an asset under the output directory

    Args:
        content: Fetched asset
        output_dir: Output directory

    Returns:
        Path: Path of the written file
    """
    target = asset_path(output_dir, content.key)
    data = decode_payload(content)

    try:
        # Confirm the directory for output exists
        os.makedirs(target.parent, mode=DIRECTORY_MODE, exist_ok=True)

        with open(target, "wb") as f:
            f.write(data)

    except OSError as e:
        logger.error(f"❌ Failed to write {target}: {e}")
        raise AssetStoreError(content.key, f"Failed to write {target}: {e}") from e

    logger.debug(f"Saved {len(data)} bytes to {target}")
    return target


class AssetStore:
    """Writes assets of one run into its output directory"""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def setup(self) -> Path:
        return setup_output_dir(self.output_dir)

    def path_for(self, key: str) -> Path:
        return asset_path(self.output_dir, key)

    def save(self, content: AssetContent) -> Path:
        return save_asset(content, self.output_dir)
