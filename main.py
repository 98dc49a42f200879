"""Main entry point for cmdrecall."""

import argparse
import asyncio
import importlib.metadata
from pathlib import Path

from config import Config
from interactive import run_interactive_mode
from templates import SelectionStateError, TemplateRegistry
from utils import get_log_file_path, setup_logger, terminal_ui
from utils.runtime import ensure_runtime_dirs

EXIT_OK = 0
EXIT_CANCELLED = 1
EXIT_NO_TEMPLATES = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build shell commands from remembered templates, one choice at a time"
    )

    try:
        version = importlib.metadata.version("cmdrecall")
    except importlib.metadata.PackageNotFoundError:
        version = "dev"
    parser.add_argument("--version", "-V", action="version", version=f"cmdrecall {version}")

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging to ~/.cmdrecall/logs/",
    )
    parser.add_argument(
        "--list",
        "-l",
        action="store_true",
        help="List available command templates and exit",
    )
    parser.add_argument(
        "--query",
        "-q",
        type=str,
        help="Filter templates; a query matching exactly one template opens it directly",
    )
    parser.add_argument(
        "--commands",
        "-c",
        type=Path,
        action="append",
        default=[],
        metavar="FILE",
        help="Additional YAML command definitions (may be repeated)",
    )
    parser.add_argument(
        "--theme",
        choices=["dark", "light"],
        help="Color theme (overrides TUI_THEME)",
    )
    return parser


def load_registry(extra_files: list[Path]) -> TemplateRegistry:
    """Build the registry from built-in, user and extra definition files."""
    registry = TemplateRegistry(duplicate_policy=Config.DUPLICATE_POLICY)
    asyncio.run(
        registry.load(
            user_file=Path(Config.USER_COMMANDS_FILE),
            extra_files=extra_files,
            include_builtin=Config.LOAD_BUILTIN,
        )
    )
    terminal_ui.print_definition_errors(registry.errors)
    return registry


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    # Initialize runtime directories (create logs dir only in verbose mode)
    ensure_runtime_dirs(create_logs=args.verbose)

    # Initialize logging only in verbose mode
    if args.verbose:
        setup_logger()

    if args.theme:
        Config.TUI_THEME = args.theme

    # Validate config
    try:
        Config.validate()
    except ValueError as e:
        terminal_ui.print_error(str(e), title="Configuration Error")
        return EXIT_NO_TEMPLATES

    terminal_ui.apply_theme(Config.TUI_THEME)

    registry = load_registry(args.commands)
    if not len(registry):
        terminal_ui.print_error(
            "No command templates available. Add some to "
            f"{Config.USER_COMMANDS_FILE} or pass --commands FILE.",
            title="No Templates",
        )
        return EXIT_NO_TEMPLATES

    if args.list:
        templates = registry.search(args.query) if args.query else registry.list_templates()
        terminal_ui.print_header("cmdrecall", f"{len(templates)} of {len(registry)} templates")
        terminal_ui.print_templates(templates)
        return EXIT_OK

    try:
        command = asyncio.run(run_interactive_mode(registry, query=args.query))
    except SelectionStateError as e:
        terminal_ui.print_error(str(e), title="Internal Error")
        log_file = get_log_file_path()
        if log_file:
            terminal_ui.print_log_location(log_file)
        return EXIT_CANCELLED
    except KeyboardInterrupt:
        command = None

    if command is None:
        terminal_ui.print_warning("Cancelled")
        return EXIT_CANCELLED

    terminal_ui.print_command(command)
    # stdout carries only the command
    print(command)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
