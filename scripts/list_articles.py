#!/usr/bin/env python3
"""Page through ``ARTIKEL.GET`` on a live WEBWARE instance.

Usage
-----
Set environment variables and run::

    export WWSVC_WEBWARE_URL="https://webware.example.com:8080"
    export WWSVC_VENDOR_HASH="..."
    export WWSVC_APP_HASH="..."
    export WWSVC_APP_SECRET="1"
    export WWSVC_REVISION="1"
    # optional, skips REGISTER:
    export WWSVC_SERVICE_PASS="..."
    export WWSVC_APP_ID="..."
    python scripts/list_articles.py

Options::

    --page-size N        Items per page (default: 100)
    --max-pages N        Stop after N pages (default: all)
    --show-request       Print the first request as HTTP text and exit
    --verbose / -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import ClassVar

from pydantic import Field

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pywwsvc import WebwareClient, WwsvcConfig, WwsvcError, WwsvcRecord  # noqa: E402


class Article(WwsvcRecord):
    wwsvc_function: ClassVar[str] = "ARTIKEL"

    article_number: str = Field(alias="ART_1_25")


async def run(args: argparse.Namespace) -> int:
    config = WwsvcConfig.from_env()

    async with WebwareClient(config) as client:
        async with client.registered():
            if args.show_request:
                request = await client.prepare_request("PUT", "ARTIKEL.GET", 1, {"FELDER": Article.wwsvc_fields()})
                print(request.to_http_string())
                return 0

            pages = client.get_cursored(Article, page_size=args.page_size)
            total = 0
            page_count = 0
            async for batch in pages:
                page_count += 1
                total += len(batch)
                print(f"Page {page_count}: {len(batch)} items")
                for item in batch:
                    print(f"  {item.article_number}")
                if args.max_pages and page_count >= args.max_pages:
                    break

            print(f"\n{total} articles in {page_count} pages")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="List articles through the WEBSERVICES cursor.")
    parser.add_argument("--page-size", type=int, default=100, help="Items per page")
    parser.add_argument("--max-pages", type=int, default=0, help="Stop after N pages (0 = all)")
    parser.add_argument("--show-request", action="store_true", help="Print the first request and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        sys.exit(asyncio.run(run(args)))
    except WwsvcError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
