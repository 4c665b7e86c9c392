# src/aliaslookup/main.py — v1
"""CLI entry point: script filter for links and keys.

Usage:
    aliaslookup links [query] [--refresh]
    aliaslookup keys [query] [--refresh]
    aliaslookup {links,keys} --download      (background refresh worker)

Query mode prints the feedback JSON on stdout and never touches the
network. Download mode fetches the dataset and rewrites the cache.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from aliaslookup.config.settings import ConfigurationError, Settings, load_settings
from aliaslookup.core.errors import AliasLookupError
from aliaslookup.feedback.builder import (
    build_keys_feedback,
    build_links_feedback,
    error_feedback,
)
from aliaslookup.feedback.models import Feedback
from aliaslookup.icons.icon_cache import IconCache
from aliaslookup.logging.context import set_resource_context
from aliaslookup.logging.logger import setup_logging
from aliaslookup.refresh.context import WorkflowContext
from aliaslookup.refresh.coordinator import RefreshCoordinator
from aliaslookup.refresh.resource import RefreshableResource, build_resources
from aliaslookup.version import __version__

logger = logging.getLogger(__name__)

_BUILDERS = {
    "links": build_links_feedback,
    "keys": build_keys_feedback,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = load_settings()
    except (ConfigurationError, ValueError) as exc:
        print(error_feedback(exc).to_json())
        return 1

    _setup_logging(settings, args.verbose)
    context = WorkflowContext.from_settings(settings)
    try:
        return args.func(args, context)
    finally:
        context.close()


def run() -> None:
    sys.exit(main())


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="aliaslookup",
        description=f"aliaslookup v{__version__}: golink and SSH key lookup",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("query", nargs="?", default="", help="Filter query")
    common.add_argument(
        "-download", "--download", dest="download", action="store_true",
        help="Run as background refresh worker",
    )
    common.add_argument(
        "-refresh", "--refresh", dest="refresh", action="store_true",
        help="Force a background refresh",
    )
    common.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="resource")
    for name, help_text in (("links", "Look up golinks"), ("keys", "Look up SSH public keys")):
        sub = subparsers.add_parser(name, parents=[common], help=help_text)
        sub.set_defaults(func=_cmd_resource)

    return parser


def _cmd_resource(args: argparse.Namespace, context: WorkflowContext) -> int:
    resource = build_resources(context.settings)[args.resource]

    if args.download:
        set_resource_context(resource.name, job=resource.job_tag)
        from aliaslookup.fetch.worker import run_refresh_job
        return asyncio.run(run_refresh_job(resource, context))

    set_resource_context(resource.name)
    try:
        feedback = query_feedback(resource, context, args.query, force=args.refresh)
    except AliasLookupError as exc:
        logger.error("Fatal error: %s", exc)
        print(error_feedback(exc).to_json())
        return 1

    print(feedback.to_json())
    return 0


def query_feedback(
    resource: RefreshableResource,
    context: WorkflowContext,
    query: str,
    force: bool = False,
) -> Feedback:
    """Serve one query from cache and render the feedback.

    Raises:
        CacheCorruptedError: If the cache entry cannot be read back.
        LaunchError: If a needed refresh job cannot be started.
    """
    coordinator = RefreshCoordinator(context)
    result = coordinator.get_data(resource, force=force)

    build = _BUILDERS[resource.name]
    feedback = build(
        result,
        query=query.strip(),
        job_running=coordinator.is_refreshing(resource),
        icons=IconCache(context.settings.icons_path),
    )
    feedback.rerun = context.rerun
    return feedback


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
