"""
Theme Download Pipeline

Init -> DirectorySetup -> Listing -> Downloading(1..N) -> Packaging -> Done,
with Aborted reachable from every state. The run stops at the first error and
leaves whatever was written so far on disk; the archive is only built once
every asset is stored.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union
import logging

from ..coreutils.errors import CredentialsError, ThemeDownloadError
from ..extract.rate_limiter import RateLimiter
from ..extract.schemas import ShopCredentials, ThemeRef, shop_domain
from ..extract.shopify_api import ShopifyAPIClient
from ..load.archiver import pack
from ..load.local_storage import AssetStore
from .progress import AssetStatus, ProgressCallback, ProgressEvent

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    INIT = "init"
    DIRECTORY_SETUP = "directory_setup"
    LISTING = "listing"
    DOWNLOADING = "downloading"
    PACKAGING = "packaging"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class DownloadResult:
    theme: ThemeRef
    output_dir: Path
    archive_path: Path
    total_assets: int


class AssetFetcher:
    """Lists a theme's assets, then fetches and stores them one by one"""

    def __init__(
        self,
        api: ShopifyAPIClient,
        store: AssetStore,
        rate_limiter: RateLimiter,
        progress: Optional[ProgressCallback] = None,
    ):
        self.api = api
        self.store = store
        self.rate_limiter = rate_limiter
        self.progress = progress
        self.state = RunState.INIT

    def _emit(self, index: int, total: int, key: str, status: AssetStatus) -> None:
        if self.progress is not None:
            self.progress(ProgressEvent(index=index, total=total, key=key, status=status))

    def run(self, theme: ThemeRef) -> int:
        """
        Download every asset of a theme into the store

        Args:
            theme: Theme to download

        Returns:
            int: Number of assets stored
        """
        self.state = RunState.LISTING
        assets = self.api.list_assets(theme.theme_id)
        total_assets = len(assets)
        logger.info(f"Total assets: {total_assets}")

        # The listing was the last call; space the first fetch from it
        self.rate_limiter.mark()

        self.state = RunState.DOWNLOADING
        for index, descriptor in enumerate(assets, 1):
            self._emit(index, total_assets, descriptor.key, AssetStatus.DOWNLOADING)

            self.rate_limiter.check_cycle()
            content = self.api.get_asset(theme.theme_id, descriptor.key)
            self.store.save(content)

            self._emit(index, total_assets, descriptor.key, AssetStatus.DOWNLOADED)

        return total_assets


def parse_api_combo(api: str) -> tuple:
    """Split a "key:secret" argument"""
    key, sep, secret = api.partition(":")
    if not sep or not key or not secret:
        raise CredentialsError("API credentials must be given as key:secret")
    return key, secret


def parse_theme_id(theme: Union[str, int]) -> int:
    try:
        theme_id = int(theme)
    except (TypeError, ValueError):
        raise CredentialsError(f"Theme ID must be numeric, got {theme!r}")
    if theme_id <= 0:
        raise CredentialsError(f"Theme ID must be positive, got {theme_id}")
    return theme_id


class ThemeDownloadPipeline:
    """Drives one theme download from directory setup to the final archive"""

    def __init__(
        self,
        credentials: ShopCredentials,
        theme: ThemeRef,
        cwd: Optional[Union[str, Path]] = None,
        verbose: bool = False,
        progress: Optional[ProgressCallback] = None,
        api: Optional[ShopifyAPIClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.credentials = credentials
        self.theme = theme
        self.cwd = Path(cwd) if cwd is not None else Path(os.getcwd())
        self.verbose = verbose
        self.progress = progress
        self.api = api
        self.rate_limiter = rate_limiter
        self.state = RunState.INIT

    @property
    def output_dir(self) -> Path:
        return self.cwd / self.theme.output_name

    @property
    def archive_path(self) -> Path:
        return self.cwd / f"{self.theme.output_name}.tar"

    def run(self) -> DownloadResult:
        """
        Run the download and package the result

        Returns:
            DownloadResult: Paths and counts of the finished run
        """
        logger.info(
            f"🚀 Downloading theme {self.theme.theme_id} from {self.theme.shop_domain}"
        )

        try:
            self.state = RunState.DIRECTORY_SETUP
            store = AssetStore(self.output_dir)
            store.setup()

            # Set up the API only once the directory check has passed
            api = self.api if self.api is not None else ShopifyAPIClient(self.credentials)
            rate_limiter = self.rate_limiter
            if rate_limiter is None:
                rate_limiter = RateLimiter(api.api_calls_left, verbose=self.verbose)

            fetcher = AssetFetcher(api, store, rate_limiter, progress=self.progress)
            try:
                total_assets = fetcher.run(self.theme)
            finally:
                self.state = fetcher.state
                if self.api is None:
                    api.close()

            self.state = RunState.PACKAGING
            pack(self.output_dir, self.archive_path)

        except ThemeDownloadError as e:
            logger.error(f"❌ Theme download aborted during {self.state.value}: {e}")
            self.state = RunState.ABORTED
            raise

        self.state = RunState.DONE
        logger.info(f"Completed download, {self.archive_path.name} is available.")

        return DownloadResult(
            theme=self.theme,
            output_dir=self.output_dir,
            archive_path=self.archive_path,
            total_assets=total_assets,
        )


def run_theme_download(
    shop: str,
    api: str,
    theme: Union[str, int],
    verbose: bool = False,
    cwd: Optional[Union[str, Path]] = None,
    progress: Optional[ProgressCallback] = None,
) -> DownloadResult:
    """
    Download a theme from CLI-style arguments

    Args:
        shop: Shop name without the .myshopify.com suffix
        api: "key:secret" private app credentials
        theme: Theme ID
        verbose: Log rate-limit sleeps
        cwd: Directory receiving the output directory and archive
        progress: Callback receiving per-asset progress events

    Returns:
        DownloadResult: Paths and counts of the finished run
    """
    if not shop or not shop.strip():
        raise CredentialsError("Shop name must not be empty")

    domain = shop_domain(shop)
    key, secret = parse_api_combo(api)
    theme_id = parse_theme_id(theme)

    credentials = ShopCredentials(domain=domain, key=key, secret=secret)
    pipeline = ThemeDownloadPipeline(
        credentials,
        ThemeRef(shop_domain=domain, theme_id=theme_id),
        cwd=cwd,
        verbose=verbose,
        progress=progress,
    )
    return pipeline.run()
