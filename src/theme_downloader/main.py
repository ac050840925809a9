"""
Main Entry Point - Theme Download CLI

Usage:
    shopify-theme-download download <shop> <key:secret> <theme_id> [-v]

The shop name is given without the .myshopify.com suffix. The theme lands in
./<shop>.myshopify.com-<theme_id>/ and is packed into
./<shop>.myshopify.com-<theme_id>.tar.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .coreutils.errors import (
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
    EXIT_USAGE_ERROR,
    ThemeDownloadError,
)
from .coreutils.logging import setup_logging
from .orchestration.pipeline import run_theme_download
from .orchestration.progress import ConsoleProgress

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shopify-theme-download", description="Downloads Shopify themes"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    download = subparsers.add_parser("download", help="Downloads Shopify themes")
    download.add_argument("shop", help="The shop domain name")
    download.add_argument("api", help="The API key:password combo")
    download.add_argument("theme", help="The theme's ID")
    download.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every rate-limit sleep",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging()

    if args.command == "download":
        progress = ConsoleProgress()
        progress.attach_to_logging()

        try:
            result = run_theme_download(
                args.shop,
                args.api,
                args.theme,
                verbose=args.verbose,
                progress=progress,
            )
        except ThemeDownloadError as e:
            logger.error(f"❌ {e}")
            return e.exit_code
        except KeyboardInterrupt:
            logger.info("🛑 Download stopped by user")
            return EXIT_INTERRUPTED

        print(f"✅ Download completed: {result.total_assets} assets in {result.archive_path}")
        return EXIT_SUCCESS

    parser.print_usage(sys.stderr)
    return EXIT_USAGE_ERROR


if __name__ == "__main__":
    sys.exit(main())
