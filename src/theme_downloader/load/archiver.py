"""
Archiver - Load Layer

Packs a finished output directory into a single uncompressed tar archive.
"""

import os
import tarfile
from pathlib import Path
from typing import List, Union
import logging

from ..coreutils.errors import ArchiveError

logger = logging.getLogger(__name__)


def _archive_members(source_dir: Path) -> List[Path]:
    """Directories and files under source_dir, sorted for a stable member order"""
    members = []
    for root, dirs, files in os.walk(source_dir, onerror=_raise_walk_error):
        dirs.sort()
        root_path = Path(root)
        for name in dirs:
            members.append(root_path / name)
        for name in sorted(files):
            members.append(root_path / name)
    return members


def _raise_walk_error(error: OSError) -> None:
    raise error


def _normalize(tarinfo: tarfile.TarInfo) -> tarfile.TarInfo:
    """Drop local ownership from archive members"""
    tarinfo.uid = tarinfo.gid = 0
    tarinfo.uname = tarinfo.gname = ""
    return tarinfo


def pack(source_dir: Union[str, Path], archive_path: Union[str, Path]) -> Path:
    """
    Build a tar archive from a directory tree

    Members are named by their path relative to source_dir.

    Args:
        source_dir: Directory holding the downloaded assets
        archive_path: Archive file to create

    Returns:
        Path: The created archive
    """
    source_dir = Path(source_dir)
    archive_path = Path(archive_path)

    if not source_dir.is_dir():
        raise ArchiveError(f"Source directory not found: {source_dir}")

    logger.info(f"Packing {source_dir} into {archive_path}")

    created = False
    try:
        members = _archive_members(source_dir)
        with tarfile.open(archive_path, "w") as tf:
            created = True
            for member in members:
                tf.add(
                    member,
                    arcname=member.relative_to(source_dir).as_posix(),
                    recursive=False,
                    filter=_normalize,
                )

    except (OSError, tarfile.TarError) as e:
        logger.error(f"❌ Failed to build archive {archive_path}: {e}")
        if created and archive_path.is_file():
            archive_path.unlink()
        raise ArchiveError(f"Failed to build archive {archive_path}: {e}") from e

    logger.info(f"Archived {len(members)} entries into {archive_path}")
    return archive_path
