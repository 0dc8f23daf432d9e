import argparse
import asyncio
import sys

from loguru import logger

from .api import DEFAULT_API_URL, FinderAPI
from .render import render_dashboard
from .state import CLIENT_PER_PAGE, FinderStore


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search GitHub repositories and browse stored searches")
    parser.add_argument("--api-url", default=DEFAULT_API_URL, help="Base URL of the finder API")
    parser.add_argument("--per-page", type=int, default=CLIENT_PER_PAGE, help="Repositories to store per search")
    parser.add_argument("--log-level", default="WARNING", help="Log level for client diagnostics")
    return parser.parse_args(argv)


async def interact(store: FinderStore, lines) -> None:
    await store.initialize()
    print(render_dashboard(store))
    for line in lines:
        keyword = line.rstrip("\n")
        if keyword.strip().lower() in ("quit", "exit"):
            break
        await store.submit(keyword)
        print(render_dashboard(store))


async def main_async(args: argparse.Namespace) -> None:
    api = FinderAPI(args.api_url)
    store = FinderStore(api, per_page=args.per_page)
    try:
        await interact(store, sys.stdin)
    finally:
        await api.aclose()


def main(argv=None) -> None:
    args = parse_args(argv)
    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())
    try:
        asyncio.run(main_async(args))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
