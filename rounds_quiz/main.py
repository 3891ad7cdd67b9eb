"""Composition root for the Rounds quiz core.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Dependency injection
- Entry point selection (interactive CLI or one-shot announcement check)
"""

import asyncio
import json
import logging
import sys
from typing import Any

from rounds_quiz.adapters.announcements.http import HttpAnnouncementSource
from rounds_quiz.adapters.cli.commands import CLICommandHandler, run_command
from rounds_quiz.adapters.registry.json_files import JsonCaseLibrary, JsonDiagnosisRegistry
from rounds_quiz.adapters.store.sqlite import SQLiteKeyValueStore
from rounds_quiz.config import load_settings
from rounds_quiz.core.content_gate import ContentGate
from rounds_quiz.core.lexicon import NameSuggester


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface for the quiz commands.

    Args:
        cli_handler: CLICommandHandler instance for executing commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            # Read command from stdin in a thread to avoid blocking
            command_line = await loop.run_in_executor(None, input, "rounds> ")
            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue

            if not isinstance(args, dict):
                logger.error("Arguments must be a JSON object. Use 'help' for command syntax.")
                continue

            try:
                result = await run_command(cli_handler, command, args)
                print(json.dumps(result, indent=2, default=str))
            except Exception as e:
                logger.error(f"Command execution error: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            # Ctrl+D to exit
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  suggest
    Autocomplete a partial diagnosis name (at most 10 results).
    Required: query

    Example: suggest {"query": "pulm"}

  match
    Resolve a guess to its canonical diagnosis.
    Required: guess

    Example: match {"guess": "heart attack"}

  guess
    Check a guess against a case, accepting any registry name.
    Required: case, guess

    Example: guess {"case": "Myocardial Infarction", "guess": "MI"}

  whats-new
    Load the announcement (remote, then cache, then bundled) and report
    whether it should be shown.
    Optional: timeout, format ("json" or "text")

    Example: whats-new {"format": "text"}

  dismiss
    Mark the loaded announcement as seen.

  force
    Show the announcement regardless of the seen marker.

  reset
    Clear the seen marker.

  help
    Show this help message.

  exit
    Exit the CLI.

Note: All commands accept arguments as a single JSON object.
Provide the JSON after the command name on the same line.
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


async def _run_check(cli_handler: CLICommandHandler) -> dict[str, Any]:
    """Load the announcement once and print the result."""
    result = await cli_handler.check_whats_new(format="text")
    print(json.dumps(result, indent=2, default=str))
    return result


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the application.

    This is the composition root: the single place where all components
    are instantiated and wired together.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters with configuration
    4. Initialize core services
    5. Select and start run mode
    """
    # Step 1: Load configuration
    settings = load_settings()

    # Step 2: Configure logging
    configure_logging("DEBUG" if settings.debug else settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading Rounds quiz core...")

    # Step 3: Instantiate adapters
    registry = JsonDiagnosisRegistry.from_file(settings.registry_path or None)
    case_library = JsonCaseLibrary.from_file(settings.case_library_path or None)
    logger.info(
        f"Name sources: {len(registry.definitions)} diagnoses, "
        f"{len(case_library.cases)} cases"
    )

    store = SQLiteKeyValueStore(db_path=settings.kv_store_path)
    logger.info(f"Key-value store initialized: {settings.kv_store_path}")

    source = HttpAnnouncementSource(
        url=settings.whats_new_url,
        timeout_seconds=settings.whats_new_timeout_seconds,
    )

    # Step 4: Initialize core services
    suggester = NameSuggester(registry=registry, case_library=case_library)
    gate = ContentGate(
        source=source,
        store=store,
        fetch_timeout=settings.whats_new_timeout_seconds,
    )
    cli_handler = CLICommandHandler(suggester, gate)

    # Step 5: Select run mode and start
    logger.info(f"Starting in {settings.run_mode} mode...")

    try:
        if settings.run_mode == "cli":
            await _run_cli_interactive(cli_handler)
        elif settings.run_mode == "check":
            await _run_check(cli_handler)
        else:
            logger.error(f"Unknown run mode: {settings.run_mode}")
            sys.exit(1)
    finally:
        await source.close()
        await store.close_pool()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
