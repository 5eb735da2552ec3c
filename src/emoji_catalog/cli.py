# src/emoji_catalog/cli.py
import argparse
import logging
import sys
from typing import List, Optional

from .config import CatalogConfig
from .errors import EmojiCatalogError
from .pipeline import EmojiCatalogGenerator
from .selftest import run_self_test

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Logs to the console and, when given, to a log file as well."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    # httpx logs every request at INFO; our own attempt messages already cover that.
    logging.getLogger('httpx').setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="emoji-catalog",
        description="Build JSON emoji catalogs from the Unicode emoji charts.",
    )
    p.add_argument("command", nargs="?", choices=["generate", "selftest"], default="generate",
                   help="'generate' downloads and writes the catalog, 'selftest' checks the parser offline")
    p.add_argument("--test", action="store_true", help="Same as the 'selftest' command")
    p.add_argument("--root", type=str, default=None, help="Directory the JSON files are written to")
    p.add_argument("--force", action="store_true", help="Skip the version check and always regenerate")
    p.add_argument("--no-raw-html", action="store_true", help="Do not keep copies of the downloaded pages")
    p.add_argument("--timeout", type=float, default=None, help="Seconds allowed per request attempt")
    p.add_argument("--retries", type=int, default=None, help="Retries after the first failed attempt")
    p.add_argument("--retry-delay", type=float, default=None, help="Seconds to wait between attempts")
    p.add_argument("--log-file", type=str, default=None, help="Also write the log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> CatalogConfig:
    return CatalogConfig.from_env().with_overrides(
        output_root=args.root,
        timeout=args.timeout,
        max_retries=args.retries,
        retry_delay=args.retry_delay,
        keep_raw_html=False if args.no_raw_html else None,
    )


def self_test() -> int:
    try:
        run_self_test()
    except EmojiCatalogError as e:
        logging.error(f"Self-test failed: {e}")
        return 1
    return 0


def run_self_test_entrypoint() -> int:
    """Entry point for the 'ec-selftest' command."""
    setup_logging()
    return self_test()


def run_generate(config: CatalogConfig, force: bool = False) -> int:
    print("--- Running Emoji Catalog Generator ---")
    try:
        report = EmojiCatalogGenerator(config).run(force=force)
    except EmojiCatalogError as e:
        logging.error(f"Error: {e}")
        return 1
    except Exception:
        logging.error("Unexpected failure while generating the emoji catalog.", exc_info=True)
        return 1

    if not report.updated:
        logging.info(report.reason)
        return 0
    logging.info(f"Emoji data generated successfully! {len(report.written)} files written to '{config.output_root}'.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)
    if args.test or args.command == "selftest":
        return self_test()
    try:
        config = build_config(args)
    except ValueError as e:
        logging.error(f"Invalid configuration: {e}")
        return 1
    return run_generate(config, force=args.force)


# This block runs when you execute `python -m emoji_catalog.cli generate`
if __name__ == "__main__":
    sys.exit(main())
