# src/main.py — v1
"""CLI entry point — run, render, protected, domains commands.

Usage:
    neuroreport run <subject> [--force-regenerate] [--no-protect-edits] [--single-stage]
    neuroreport render <subject> [--two-stage]
    neuroreport protected
    neuroreport domains
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from neuroreport.version import __version__

if TYPE_CHECKING:
    from neuroreport.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from pydantic import ValidationError

    from neuroreport.config.settings import ConfigurationError

    try:
        settings = _load_settings(args)
    except (ConfigurationError, ValidationError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)
    previous_handler = signal.signal(signal.SIGTERM, _raise_on_sigterm)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1
    finally:
        signal.signal(signal.SIGTERM, previous_handler)


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="neuroreport",
        description=f"neuroreport v{__version__}: neuropsychological report generator",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-w", "--workspace", type=Path, default=None,
        help="Report workspace directory (default: WORKSPACE_DIR or .)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- run ---
    p_run = subparsers.add_parser(
        "run", help="Generate domain sections and render the report",
    )
    p_run.add_argument("subject", help="Subject name used for the report")
    p_run.add_argument(
        "--force-regenerate", action="store_true",
        help="Regenerate every domain, overwriting manual edits",
    )
    p_run.add_argument(
        "--no-protect-edits", action="store_true",
        help="Do not skip domains whose files were edited by hand",
    )
    p_run.add_argument(
        "--single-stage", action="store_true",
        help="Render once, without waiting for enrichment",
    )
    p_run.add_argument(
        "--no-render", action="store_true",
        help="Generate sections and the manifest only",
    )
    p_run.set_defaults(func=_cmd_run)

    # --- render ---
    p_render = subparsers.add_parser(
        "render", help="Re-render the report from the existing manifest",
    )
    p_render.add_argument("subject", help="Subject name used for the report")
    p_render.add_argument(
        "--two-stage", action="store_true",
        help="Trigger enrichment and render twice",
    )
    p_render.set_defaults(func=_cmd_render)

    # --- protected ---
    p_protected = subparsers.add_parser(
        "protected", help="List manually edited (protected) sections",
    )
    p_protected.set_defaults(func=_cmd_protected)

    # --- domains ---
    p_domains = subparsers.add_parser(
        "domains", help="List registered report domains",
    )
    p_domains.set_defaults(func=_cmd_domains)

    return parser


async def _cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    """Generate sections, write the manifest, and render."""
    from neuroreport.api.facade import run_workflow
    from neuroreport.api.models import RunOptions
    from neuroreport.tracking.formatter import format_report

    options = RunOptions(
        render=not args.no_render,
        force_regenerate=True if args.force_regenerate else None,
        protect_edits=False if args.no_protect_edits else None,
        two_stage=False if args.single_stage else None,
    )
    result = await run_workflow(args.subject, options, settings=settings)

    if result.report is not None:
        print(format_report(result.report))
    print(f"Manifest: {result.manifest_path} ({len(result.manifest_entries)} sections)")
    if result.output_path is not None:
        print(f"Report:   {result.output_path}")
    return 0


async def _cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    """Render only, reusing the current manifest."""
    from neuroreport.api.facade import run_workflow
    from neuroreport.api.models import RunOptions

    options = RunOptions(generate=False, two_stage=args.two_stage)
    result = await run_workflow(args.subject, options, settings=settings)
    print(f"Report: {result.output_path}")
    return 0


async def _cmd_protected(args: argparse.Namespace, settings: Settings) -> int:
    """List artifacts that a regular run would leave untouched."""
    from neuroreport.api.facade import list_protected_artifacts

    protected = list_protected_artifacts(settings=settings)
    if not protected:
        print("No protected sections.")
        return 0

    print(f"{len(protected)} protected section(s):")
    for item in protected:
        edited = item.content_mtime.strftime("%Y-%m-%d %H:%M:%S")
        marker = "no marker" if item.generated_at is None else "edited"
        print(f"  {item.domain_key:<14s} {item.path}  ({marker}, modified {edited})")
    return 0


async def _cmd_domains(args: argparse.Namespace, settings: Settings) -> int:
    """Print the domain registry."""
    from neuroreport.pipeline.registry import DomainRegistry

    for spec in DomainRegistry.from_table().list_specs():
        raters = " [raters]" if spec.rater_capable else ""
        print(
            f"{spec.section_ordinal:02d} {spec.key:<14s} {spec.data_source:<11s}"
            f"{raters} {'; '.join(spec.sorted_labels)}"
        )
    return 0


def _load_settings(args: argparse.Namespace) -> Settings:
    """Load settings, applying the --workspace override."""
    from neuroreport.config.settings import load_settings

    overrides: dict[str, object] = {}
    if args.workspace is not None:
        overrides["workspace_dir"] = args.workspace
    return load_settings(**overrides)


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from neuroreport.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file or None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


def _raise_on_sigterm(signum: int, frame: object) -> None:
    """Turn SIGTERM into SystemExit so the run lock is released."""
    raise SystemExit(128 + signum)


if __name__ == "__main__":
    sys.exit(main())
