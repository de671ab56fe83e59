#!/usr/bin/env python3
"""
Sync published Webflow CMS items into the site's markdown documentation.

Usage:
    python scripts/sync_webflow_docs.py
    python scripts/sync_webflow_docs.py --docs-dir src/content/docs --env-file .env.ci

Credentials are read from WEBFLOW_API_TOKEN and WEBFLOW_ARTICLES_COLLECTION_ID, after
loading the configured dot-env files (".env", then ".env.local") from the project root.
When either is missing the script logs a notice and exits with status 0 without touching
any file, so it is safe to run as an unconditional pre-build step.

Exit status is 0 on success or skip and 1 on any error.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Allow running by path from the project root without installing the package
PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from config import CONFIG, PROJECT_ROOT, resolve_project_path  # noqa: E402
from config.env_files import load_env_files  # noqa: E402
from config.logging_config import setup_app_logging  # noqa: E402
from services.content_sync import SyncSettings, run_sync  # noqa: E402

logger = logging.getLogger("webflow_sync")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sync published Webflow CMS items to local markdown docs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/sync_webflow_docs.py
  python scripts/sync_webflow_docs.py --docs-dir src/content/docs
        """
    )
    parser.add_argument(
        '--docs-dir',
        help='Target documents directory (default: CONFIG["sync"]["docs_dir"])'
    )
    parser.add_argument(
        '--env-file',
        action='append',
        dest='env_files',
        help='Dot-env file to load, relative to the project root; repeatable. '
             'Replaces the configured list when given.'
    )
    parser.add_argument(
        '--log-level',
        help='Override the configured log level (e.g. DEBUG)'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the sync once and return the process exit status.

    Args:
        argv (List[str], optional): Command-line arguments; defaults to sys.argv[1:].

    Returns:
        int: 0 on success or when credentials are missing, 1 on any error.
    """
    args = build_parser().parse_args(argv)

    logging_cfg = dict(CONFIG.get('logging', {}))
    if args.log_level:
        logging_cfg['level'] = args.log_level
    setup_app_logging(config=logging_cfg)

    try:
        load_env_files(PROJECT_ROOT, args.env_files or CONFIG['sync']['env_files'])
        settings = SyncSettings.from_config(CONFIG)
        if args.docs_dir:
            settings.docs_dir = resolve_project_path(args.docs_dir)
        run_sync(settings)
    except Exception as exc:
        logger.error("Webflow sync failed: %s", exc, exc_info=logger.isEnabledFor(logging.DEBUG))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
