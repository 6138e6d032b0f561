from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Optional

import yaml

from buildconf.config import (
    BuildConfigLoader,
    LoadConfigInit,
    LoadConfigResults,
    ProjectConfigSummary,
    ValidatedConfig,
)
from buildconf.diagnostics import Diagnostic, has_error
from buildconf.logging import LoggingSettings, init_logging
from buildconf.system import Platform, detect_platform

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="buildconf", description="Build configuration loader")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the config file (default: inline configuration only)",
    )
    parser.add_argument(
        "--sandboxed",
        action="store_true",
        help="Evaluate the config file in the sandbox instead of importing it.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--verbose", action="store_true", help="Alias of --debug")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error"],
        default=None,
        help="Log level to use unless --debug or --verbose is given",
    )
    parser.add_argument(
        "--env-prefix",
        default=None,
        help="Read DEBUG, VERBOSE and LOG_LEVEL flags from environment variables with this prefix (e.g. BUILDCONF_)",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Read environment flags from this .env file as well; the process environment wins",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: check
    subparsers.add_parser("check", help="Load the configuration and report diagnostics")

    # Command: show
    subparsers.add_parser("show", help="Load the configuration and print it as YAML")

    return parser


def _build_init(args: argparse.Namespace) -> LoadConfigInit:
    # Only flags given on the command line, so environment flags can fill the rest.
    flags: dict[str, Any] = {}
    if args.debug:
        flags["debug"] = True
    if args.verbose:
        flags["verbose"] = True
    if args.log_level is not None:
        flags["log_level"] = args.log_level
    return LoadConfigInit(
        config={"flags": flags},
        config_path=args.config,
        dotenv_path=args.dotenv,
        env_prefix=args.env_prefix,
    )


def _build_platform(args: argparse.Namespace) -> Platform:
    platform = detect_platform()
    if args.sandboxed:
        return Platform(name=platform.name, native_modules=False)
    return platform


def _format_diagnostic(diagnostic: Diagnostic) -> str:
    location = ""
    if diagnostic.abs_file_path:
        line = f":{diagnostic.line_number}" if diagnostic.line_number else ""
        location = f" ({diagnostic.abs_file_path}{line})"
    return f"[{diagnostic.level}] {diagnostic.header}: {diagnostic.message_text}{location}"


def _results_as_dict(config: ValidatedConfig, project: ProjectConfigSummary) -> dict[str, Any]:
    return {
        "config": config.model_dump(mode="json"),
        "project": {
            "path": project.path,
            "compiler_options": project.compiler_options,
            "files": project.files,
            "include": project.include,
            "exclude": project.exclude,
            "extends": project.extends,
        },
    }


async def _load(args: argparse.Namespace) -> LoadConfigResults:
    loader = BuildConfigLoader(platform=_build_platform(args))
    return await loader.load(_build_init(args))


async def _main_async(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    level = args.log_level or ("debug" if args.debug or args.verbose else "info")
    init_logging(LoggingSettings(level=level))

    results = await _load(args)
    for diagnostic in results.diagnostics:
        print(_format_diagnostic(diagnostic), file=sys.stderr)

    if has_error(results.diagnostics):
        logger.info("Configuration is invalid. errors=%s", sum(d.level == "error" for d in results.diagnostics))
        return 1

    if args.command == "show":
        yaml.safe_dump(_results_as_dict(results.config, results.project), sys.stdout, sort_keys=False)
    else:
        logger.info("Configuration is valid. config_path=%s", results.config.config_path)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    try:
        return asyncio.run(_main_async(argv))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
