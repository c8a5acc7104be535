from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema: global configuration and output
flags plus one subcommand per analysis operation. Provides logic to
translate the parsed namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the p5analysis CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="p5analysis",
        description="Detect p5.js sketches and analyze their scripts.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Read configuration from this JSON file instead of the user data directory.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore any configuration file and use the built-in defaults.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to this rotating log file.",
    )

    # --- Detection Overrides ---
    p.add_argument(
        "--sketch-functions",
        dest="sketch_functions",
        default=None,
        help="Comma-separated entry-point names that mark a sketch script.",
    )
    p.add_argument(
        "--max-file-bytes",
        dest="max_file_bytes",
        type=int,
        default=None,
        help="Skip files larger than this many bytes (0 for no limit).",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit machine-readable JSON instead of text.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    scan = sub.add_parser("scan", help="List the sketch projects in a directory.")
    scan.add_argument("path", help="Directory to scan.")

    classify = sub.add_parser("classify", help="Tell whether files are sketch scripts or pages.")
    classify.add_argument("paths", nargs="+", help="Files to classify.")

    free_vars = sub.add_parser("free-vars", help="List names a script's functions use but do not define.")
    free_vars.add_argument("path", help="Script to analyze.")
    free_vars.add_argument(
        "--exclude-globals",
        action="store_true",
        help="Also drop names bound by top-level var/let/const declarations.",
    )

    members = sub.add_parser("members", help="List the namespace members a script accesses.")
    members.add_argument("path", help="Script to analyze.")
    members.add_argument(
        "--namespace",
        default=None,
        help="Identifier whose members are collected (default from configuration).",
    )

    check = sub.add_parser("check", help="Report a script's syntax error, if any.")
    check.add_argument("path", help="Script to check.")

    listing = sub.add_parser("listing", help="Show the directory index data for a directory.")
    listing.add_argument("path", help="Directory to list.")

    return p


# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration overrides dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.debug:
        overrides["log_level"] = "DEBUG"
    if args.log_file:
        overrides["log_file"] = args.log_file
    if args.sketch_functions:
        overrides["sketch_functions"] = _split_csv(args.sketch_functions)
    if args.max_file_bytes is not None:
        overrides["max_file_bytes"] = args.max_file_bytes

    # Subcommand-scoped override
    if getattr(args, "namespace", None):
        overrides["namespace"] = args.namespace

    return overrides


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
