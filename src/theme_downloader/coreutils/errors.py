"""
Error Taxonomy

Every fatal condition of a theme download maps to one exception class and one
process exit code. Library code raises; only the CLI entry point turns an
error into an exit status.
"""

from typing import Optional

EXIT_SUCCESS = 0
EXIT_SETUP_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_LISTING_ERROR = 3
EXIT_ASSET_FETCH_ERROR = 4
EXIT_IO_ERROR = 5
EXIT_ARCHIVE_ERROR = 6
EXIT_INTERRUPTED = 130


class ThemeDownloadError(Exception):
    """Base class for errors that abort a theme download"""

    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SetupError(ThemeDownloadError):
    """Output directory already exists or cannot be created"""

    exit_code = EXIT_SETUP_ERROR


class CredentialsError(ThemeDownloadError):
    """Shop, API combo or theme arguments are malformed"""

    exit_code = EXIT_USAGE_ERROR


class ListingError(ThemeDownloadError):
    """Asset listing call failed or returned a malformed body"""

    exit_code = EXIT_LISTING_ERROR


class AssetFetchError(ThemeDownloadError):
    """A single asset could not be fetched"""

    exit_code = EXIT_ASSET_FETCH_ERROR

    def __init__(self, key: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.key = key
        self.status_code = status_code


class AssetStoreError(ThemeDownloadError):
    """Local write of an asset failed"""

    exit_code = EXIT_IO_ERROR

    def __init__(self, key: str, message: str):
        super().__init__(message)
        self.key = key


class ArchiveError(ThemeDownloadError):
    """Packaging the output directory failed; downloaded files stay on disk"""

    exit_code = EXIT_ARCHIVE_ERROR
