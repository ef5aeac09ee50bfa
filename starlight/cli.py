"""
Starlight - Command-line entry point.

Loads the application index, then searches, lists or launches.

Usage:
  starlight search fire          # apps containing "fire"
  starlight search "r: htop"     # PATH executables
  starlight search "w: asyncio"  # web search URLs
  starlight launch firefox       # by descriptor key
  starlight --debug list
"""

import argparse
import asyncio
import sys

from loguru import logger

from . import __version__
from .desktop.discovery import DiscoveryCoordinator, default_search_paths
from .errors import DiscoveryError, LaunchError
from .search.handlers import AppSearchHandler, RunCommandHandler, WebSearchHandler
from .search.handlers.web_search import strip_prefix
from .search.router import QueryRouter
from .services.applications import ApplicationIndex
from .services.launcher import Launcher
from .utils.helpers import launch_app, load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="starlight", description="Search and launch applications")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-d", "--debug", action="store_true", help="show debug logs")
    parser.add_argument("--config", metavar="PATH", help="settings file to use")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list all applications")
    sub.add_parser("paths", help="print the application search paths")

    search = sub.add_parser("search", help="search applications (r: and w: prefixes work too)")
    search.add_argument("query", nargs="?", default="")
    search.add_argument("--categories", action="store_true", help="also match category names")
    search.add_argument("--limit", type=int, default=None)

    category = sub.add_parser("category", help="list applications in a category")
    category.add_argument("name")

    launch = sub.add_parser("launch", help="launch an application by key")
    launch.add_argument("key")

    run = sub.add_parser("run", help="run a shell command detached")
    run.add_argument("cmdline")
    run.add_argument("-t", "--terminal", action="store_true", help="run inside a terminal emulator")

    web = sub.add_parser("web", help="open a web search")
    web.add_argument("query")
    web.add_argument("--engine", default=None, help="engine name (default: first configured)")

    return parser


def configure_logging(debug: bool, level: str) -> None:
    """Send log output to stderr at the requested level."""
    logger.remove()
    requested = "DEBUG" if debug else str(level).upper()
    try:
        logger.add(sys.stderr, level=requested)
    except ValueError:
        handler_id = logger.add(sys.stderr, level="WARNING")
        logger.warning(f"Unknown log level '{level}', using ERROR")
        logger.remove(handler_id)
        logger.add(sys.stderr, level="ERROR")


def search_paths_from_settings(settings: dict) -> list:
    return default_search_paths() + list(settings["discovery"]["extra_paths"])


def build_router(index, launcher, settings: dict) -> QueryRouter:
    router = QueryRouter()
    router.register(WebSearchHandler(launcher, settings["web_search"]["engines"] or None))
    router.register(RunCommandHandler(launcher))
    router.register(AppSearchHandler(
        index,
        launcher,
        max_results=settings["search"]["max_results"],
        include_categories=settings["search"]["include_categories"],
    ))
    return router


async def _run(args, settings: dict) -> int:
    launcher = Launcher(terminals=settings["launcher"]["terminals"])

    if args.command == "paths":
        for path in search_paths_from_settings(settings):
            print(path)
        return 0

    if args.command == "run":
        runner = launcher.run_in_terminal if args.terminal else launcher.run_command
        try:
            runner(args.cmdline)
        except LaunchError as e:
            print(f"starlight: {e}", file=sys.stderr)
            return 1
        return 0

    if args.command == "web":
        handler = WebSearchHandler(launcher, settings["web_search"]["engines"] or None)
        results = handler.search_engines_for_query(strip_prefix(args.query))
        if args.engine:
            results = [r for r in results if r.search_engine == args.engine]
        if not results:
            print(f"starlight: unknown search engine '{args.engine}'", file=sys.stderr)
            return 1
        try:
            launcher.open_url(results[0].url)
        except LaunchError as e:
            print(f"starlight: {e}", file=sys.stderr)
            return 1
        return 0

    index = ApplicationIndex(DiscoveryCoordinator(search_paths_from_settings(settings)))
    try:
        count = await index.load()
    except DiscoveryError as e:
        print(f"starlight: {e}", file=sys.stderr)
        return 1
    logger.debug(f"Successfully loaded {count} applications")

    if args.command == "list":
        for record in sorted(await index.list(), key=lambda r: r.name.lower()):
            print(f"{record.key}\t{record.name}")
        return 0

    if args.command == "category":
        for record in await index.by_category(args.name):
            print(f"{record.key}\t{record.name}")
        return 0

    if args.command == "launch":
        try:
            await launch_app(index, args.key, launcher)
        except LaunchError as e:
            print(f"starlight: {e}", file=sys.stderr)
            return 1
        logger.debug(f"Launched {args.key} successfully")
        return 0

    # search
    if args.categories:
        settings["search"]["include_categories"] = True
    router = build_router(index, launcher, settings)
    handler_name, results = await router.route(args.query)
    if args.limit is not None:
        results = results[:args.limit]

    if not results and handler_name == "app_search":
        if args.query.strip():
            print(f"No applications found for '{args.query}'")
        else:
            print("No applications installed")
        return 0

    for item in results:
        if item.record is not None:
            print(f"{item.record.key}\t{item.title}\t{item.description}")
        elif item.url:
            print(f"{item.title}\t{item.url}")
        else:
            print(item.title)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug, "ERROR")
    settings = load_settings(args.config)
    configure_logging(args.debug, settings["logging"]["level"])
    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
