from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, resolution of the
configuration hierarchy (defaults, JSON file, command-line overrides),
dispatch to the analysis services and rendering of the results as text or
JSON.

Exit codes: 0 success, 1 analysis failure (syntax error, oversized file,
unexpected error), 2 missing input path.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from p5analysis.core.analysis.free_variables import find_free_variables, find_global_names
from p5analysis.core.analysis.member_references import find_namespace_member_references
from p5analysis.core.analysis.parser import parse_file
from p5analysis.core.services.classifier import is_sketch_markup, is_sketch_script
from p5analysis.core.services.diagnostics import check_script
from p5analysis.core.services.listing import build_directory_listing, resolve_project_title
from p5analysis.core.services.scanner import scan_directory
from p5analysis.core.services.validator import validate_config
from p5analysis.domain.config import AnalysisSettings, get_default_config, load_config
from p5analysis.domain.errors import JavascriptSyntaxError, P5AnalysisError
from p5analysis.domain.project_models import Project
from p5analysis.infra.logging import LoggingConfig, configure_logging, get_logger
from p5analysis.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MISSING_PATH = 2
EXIT_USAGE = 2


# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve base configuration (Default vs Persistent state)
    if args.use_defaults:
        base_conf = get_default_config()
    else:
        base_conf = load_config(args.config_path)

    # 3. Merge command-line overrides and validate
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    # 4. Logging bootstrap (stderr, plus the rotating log file when configured)
    configure_logging(LoggingConfig.from_config(clean_conf, console=True))
    logger.debug("CLI execution initiated.")

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # Short-circuit if configuration dump is requested
    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if not args.command:
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    settings = AnalysisSettings.from_config(clean_conf)

    # 5. Pre-flight input verification
    paths = args.paths if args.command == "classify" else [args.path]
    for path in paths:
        if not os.path.exists(path):
            msg = f"Path does not exist: {path}"
            logger.error(msg)
            print(f"ERROR: {msg}", file=sys.stderr)
            return EXIT_MISSING_PATH

    # 6. Command execution phase
    handler = _COMMANDS[args.command]
    try:
        return handler(args, settings)
    except JavascriptSyntaxError as e:
        logger.debug(f"Parse failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except P5AnalysisError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130
    except Exception as e:
        logger.critical(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE


# -----------------------------------------------------------------------------
# COMMAND HANDLERS
# -----------------------------------------------------------------------------

def _cmd_scan(args, settings: AnalysisSettings) -> int:
    result = scan_directory(args.path, settings)

    if args.json_output:
        _print_json({
            "projects": [_project_to_dict(p) for p in result.projects],
            "files": result.files,
        })
        return EXIT_OK

    if not result.projects:
        print("No sketches found.")
    for project in result.projects:
        print(f"{resolve_project_title(project)}: {', '.join(project.files)}")
    if result.files:
        print(f"\nOther entries: {len(result.files)}")
        for name in result.files:
            print(f"  - {name}")
    return EXIT_OK


def _cmd_classify(args, settings: AnalysisSettings) -> int:
    rows: List[Dict[str, Any]] = []
    for path in args.paths:
        rows.append({
            "path": path,
            "sketch_script": is_sketch_script(path, settings),
            "sketch_markup": is_sketch_markup(path, settings),
        })

    if args.json_output:
        _print_json(rows)
        return EXIT_OK

    for row in rows:
        if row["sketch_markup"]:
            label = "sketch page"
        elif row["sketch_script"]:
            label = "sketch script"
        else:
            label = "not a sketch"
        print(f"{row['path']}: {label}")
    return EXIT_OK


def _cmd_free_vars(args, settings: AnalysisSettings) -> int:
    program = parse_file(args.path, settings.max_file_bytes)
    names = find_free_variables(program)
    if args.exclude_globals:
        names -= find_global_names(program)

    _print_names(sorted(names), args.json_output)
    return EXIT_OK


def _cmd_members(args, settings: AnalysisSettings) -> int:
    program = parse_file(args.path, settings.max_file_bytes)
    names = find_namespace_member_references(program, settings.namespace)

    _print_names(sorted(names), args.json_output)
    return EXIT_OK


def _cmd_check(args, settings: AnalysisSettings) -> int:
    report = check_script(args.path, settings.max_file_bytes)

    if args.json_output:
        _print_json({"path": args.path, "ok": report is None, "report": report})
    elif report is None:
        print(f"{args.path}: OK")
    else:
        print(report, end="")
    return EXIT_OK if report is None else EXIT_FAILURE


def _cmd_listing(args, settings: AnalysisSettings) -> int:
    listing = build_directory_listing(args.path, settings)

    if args.json_output:
        _print_json({
            "title": listing.title,
            "projects": [_project_to_dict(p) for p in listing.projects],
            "directories": listing.directories,
            "files": listing.files,
            "readme": listing.readme,
        })
        return EXIT_OK

    print(listing.title)
    print("=" * len(listing.title))
    for project in listing.projects:
        print(f"[sketch] {resolve_project_title(project)} ({project.root_file})")
    for name in listing.directories:
        print(f"[dir]    {name}/")
    for name in listing.files:
        print(f"         {name}")
    if listing.readme:
        print(f"\nReadme: {listing.readme}")
    return EXIT_OK


_COMMANDS = {
    "scan": _cmd_scan,
    "classify": _cmd_classify,
    "free-vars": _cmd_free_vars,
    "members": _cmd_members,
    "check": _cmd_check,
    "listing": _cmd_listing,
}


# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys are merged.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = ["namespace", "sketch_functions", "max_file_bytes", "log_level", "log_file"]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _project_to_dict(project: Project) -> Dict[str, Any]:
    return {
        "title": resolve_project_title(project),
        "dir_path": project.dir_path,
        "markup_file": project.markup_file,
        "script_file": project.script_file,
        "files": project.files,
    }


def _print_names(names: List[str], as_json: bool) -> None:
    if as_json:
        _print_json(names)
        return
    for name in names:
        print(name)


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
