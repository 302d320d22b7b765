"""Command-line entry point for Anchor Client."""

import argparse
import asyncio
import json
import sys
from typing import Any, List, Optional

from pydantic import BaseModel

from anchor_client.config import get_settings
from anchor_client.managers import Orchestrator
from anchor_client.models import Container, Image, SearchResults, Volume
from anchor_client.query import apply_query, display_name
from anchor_client.utils import get_logger, setup_logging

logger = get_logger(__name__)


def _record(value: BaseModel) -> dict[str, Any]:
    data = value.model_dump(mode="json")
    if isinstance(value, (Container, Image, Volume)):
        data["display_name"] = display_name(value)
    return data


def _dump(value: Any) -> str:
    if isinstance(value, SearchResults):
        value = {
            kind: [_record(item) for item in getattr(value, kind)]
            for kind in ("containers", "images", "volumes")
        }
    elif isinstance(value, BaseModel):
        value = _record(value)
    elif isinstance(value, list):
        value = [_record(v) if isinstance(v, BaseModel) else v for v in value]
    return json.dumps(value, indent=2, default=str)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anchor-client",
        description="Observe and control a container runtime through its control-plane API.",
    )
    parser.add_argument("--api-url", default=None, help="Control-plane API base URL")
    parser.add_argument(
        "--log-level", default=None, help="Logging level (default from settings)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Connect, load everything and print global statistics")
    sub.add_parser("refresh", help="Refresh every resource kind and print the summary")
    sub.add_parser("health", help="Run the daemon health check")

    list_parser = sub.add_parser("list", help="List one resource kind")
    list_parser.add_argument("kind", choices=["containers", "images", "volumes"])
    list_parser.add_argument("--query", "-q", default="", help="Free-text or prefix:term query")
    list_parser.add_argument("--status", "-s", default="all", help="Status filter")
    list_parser.add_argument("--sort", default=None, help="Sort key")
    list_parser.add_argument("--desc", action="store_true", help="Sort descending")

    search_parser = sub.add_parser("search", help="Search every resource kind")
    search_parser.add_argument("query")

    deps_parser = sub.add_parser("deps", help="Show containers depending on an image or volume")
    deps_parser.add_argument("resource_type", choices=["image", "volume"])
    deps_parser.add_argument("resource_id")

    cleanup_parser = sub.add_parser("cleanup", help="Remove stopped and unused resources")
    cleanup_parser.add_argument(
        "--containers", action="store_true", help="Remove stopped containers"
    )
    cleanup_parser.add_argument("--images", action="store_true", help="Prune dangling images")
    cleanup_parser.add_argument("--volumes", action="store_true", help="Prune unused volumes")
    cleanup_parser.add_argument("--system", action="store_true", help="Prune daemon data")

    return parser


async def run(args: argparse.Namespace, orchestrator: Orchestrator) -> int:
    """
    Execute one parsed command.

    Args:
        args: Parsed arguments
        orchestrator: Orchestrator to run against

    Returns:
        Process exit code
    """
    if args.command == "status":
        init = await orchestrator.initialize()
        if not init.success:
            print(_dump(init))
            return 1
        print(_dump(orchestrator.get_global_stats()))
        return 0

    if args.command == "refresh":
        refresh = await orchestrator.refresh_all()
        print(_dump(refresh))
        return 0 if refresh.success else 1

    if args.command == "health":
        report = await orchestrator.system.run_health_check()
        print(_dump(report))
        return 0 if report.healthy else 1

    if args.command == "list":
        repository = getattr(orchestrator, args.kind)
        fetched = await repository.fetch_all()
        if not fetched.success:
            print(_dump(fetched))
            return 1
        view = apply_query(
            repository.items,
            args.kind,
            query=args.query,
            status=args.status,
            sort_by=args.sort,
            descending=args.desc,
        )
        print(_dump(view))
        return 0

    if args.command == "search":
        refresh = await orchestrator.refresh_all()
        if not refresh.success:
            print(_dump(refresh))
            return 1
        print(_dump(orchestrator.search_all(args.query)))
        return 0

    if args.command == "deps":
        fetched = await orchestrator.containers.fetch_all()
        if not fetched.success:
            print(_dump(fetched))
            return 1
        report = orchestrator.check_dependencies(args.resource_type, args.resource_id)
        print(_dump(report))
        return 0 if report.success else 1

    if args.command == "cleanup":
        await orchestrator.refresh_all()
        result = await orchestrator.cleanup(
            containers=args.containers,
            images=args.images,
            volumes=args.volumes,
            system=args.system,
        )
        print(_dump(result))
        return 0 if result.success else 1

    return 2


async def _main(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.api_url:
        settings = settings.model_copy(update={"api_base_url": args.api_url})
    async with Orchestrator(settings) as orchestrator:
        return await run(args, orchestrator)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the anchor-client command."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    try:
        setup_logging(
            log_level=args.log_level or settings.log_level,
            log_format=settings.log_format,
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    except Exception as e:
        # Argument errors such as an unknown sort key end up here
        logger.error("Command failed", extra={"command": args.command, "error": str(e)})
        print(f"error: {e}", file=sys.stderr)
        return 1
