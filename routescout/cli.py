"""Command line entry point.

Usage:
    routescout converge https://www.example.com [--route-file routes.txt]
    routescout screenshots [--pages-file pages.txt] [--screenshots-dir ./screenshots]
"""

import argparse
import asyncio
import functools
import sys
import traceback
from typing import List, Optional

from routescout.adapters.console import ask_yes_no
from routescout.adapters.sandbox.runner import SandboxRunner
from routescout.adapters.storage.route_file import RouteFileStore
from routescout.config import AppConfig, expand_path
from routescout.domain.convergence import ConvergenceLoop
from routescout.domain.screenshots import ScreenshotSweep, load_pages
from routescout.domain.session import BrowserSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routescout",
        description="Find the network destinations a sandboxed browser needs.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    converge = sub.add_parser("converge", help="Grow a route file until the app works")
    converge.add_argument("urls", nargs="+", help="URLs the application must load")
    converge.add_argument("--route-file", help="Route file to create or extend")

    shots = sub.add_parser("screenshots", help="Capture one screenshot per page")
    shots.add_argument("--pages-file", help="File with one page per line")
    shots.add_argument("--screenshots-dir", help="Where screenshots are saved")
    shots.add_argument("--route-file", help="Route file to start the browser with")

    return parser


async def converge(config: AppConfig, urls: List[str]) -> int:
    loop = ConvergenceLoop(
        sandbox=SandboxRunner(config.runner),
        store=RouteFileStore(config.route_file),
        confirm=ask_yes_no,
        logs=config.logs,
    )
    result = await loop.run(urls)
    print(f"Converged after {result.iterations} iteration(s): {len(result.hosts)} allowed host(s)")
    return 0


async def screenshots(config: AppConfig, pages_file: Optional[str]) -> int:
    from routescout.adapters.desktop.screen import PyAutoGuiScreen
    from routescout.adapters.desktop.win32_desktop import Win32Desktop

    session_factory = functools.partial(
        BrowserSession,
        SandboxRunner(config.runner),
        Win32Desktop(),
        PyAutoGuiScreen(),
        route_file=config.route_file,
        discovery=config.discovery,
    )
    sweep = ScreenshotSweep(session_factory, config.screenshot_dir, config.page_load_delay)
    saved = await sweep.run(load_pages(pages_file))
    print(f"Saved {len(saved)} screenshot(s) to {config.screenshot_dir}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = AppConfig.from_env()
        if args.route_file:
            config.route_file = expand_path(args.route_file)

        if args.command == "converge":
            return asyncio.run(converge(config, args.urls))

        if args.screenshots_dir:
            config.screenshot_dir = expand_path(args.screenshots_dir)
        pages_file = str(expand_path(args.pages_file)) if args.pages_file else None
        return asyncio.run(screenshots(config, pages_file))
    except Exception as e:
        print(e, file=sys.stderr)
        print(traceback.format_exc(), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
