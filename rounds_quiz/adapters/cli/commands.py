"""CLI command implementations for the Rounds quiz core.

This adapter maps CLI commands (suggest, match, guess, whats-new, dismiss,
force, reset) onto NameSuggester and ContentGate operations. It handles
CLI-specific formatting and error reporting.
"""

import logging
from typing import Any

from rounds_quiz.core.content_gate import ContentGate
from rounds_quiz.core.lexicon import NameSuggester
from rounds_quiz.core.models import AnnouncementPayload

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to the core services.

    Every command returns a JSON-ready dictionary whose "status" is
    either "success" or "error".
    """

    def __init__(self, suggester: NameSuggester, gate: ContentGate):
        """Initialize the CLI command handler.

        Args:
            suggester: NameSuggester serving autocomplete.
            gate: ContentGate managing the announcement.
        """
        self.suggester = suggester
        self.gate = gate

    def suggest(self, query: str) -> dict[str, Any]:
        """Autocomplete a partial diagnosis name."""
        suggestions = self.suggester.suggest(query)
        return {
            "status": "success",
            "operation": "suggest",
            "query": query,
            "suggestions": suggestions,
        }

    def match_guess(self, guess: str) -> dict[str, Any]:
        """Resolve a guess to its canonical diagnosis.

        Returns:
            Dictionary with the matched definition, or an error result
            when no diagnosis is known under that name.
        """
        try:
            definition = self.suggester.find_diagnosis(guess)
            if definition is None:
                raise ValueError(f"No diagnosis matches '{guess}'")

            return {
                "status": "success",
                "operation": "match",
                "guess": guess,
                "data": {
                    "id": definition.id,
                    "canonical_name": definition.canonical_name,
                    "alternative_names": list(definition.alternative_names),
                    "category": definition.category,
                },
            }

        except ValueError as e:
            logger.info(f"Guess did not match: {e}")
            return {
                "status": "error",
                "operation": "match",
                "guess": guess,
                "message": str(e),
            }

    def check_guess(self, case: str, guess: str) -> dict[str, Any]:
        """Check a guess against the case with the given diagnosis.

        Returns:
            Dictionary with a "correct" flag, or an error result when the
            case library has no such case.
        """
        try:
            record = self.suggester.find_case(case)
            if record is None:
                raise ValueError(f"No case with diagnosis '{case}'")

            return {
                "status": "success",
                "operation": "guess",
                "case_id": str(record.id),
                "guess": guess,
                "correct": self.suggester.is_correct_guess(record, guess),
            }

        except ValueError as e:
            logger.info(f"Guess check failed: {e}")
            return {
                "status": "error",
                "operation": "guess",
                "guess": guess,
                "message": str(e),
            }

    async def check_whats_new(
        self, timeout: float | None = None, format: str = "json"
    ) -> dict[str, Any]:
        """Load the announcement and report whether it should be shown.

        Args:
            timeout: Optional remote fetch timeout in seconds.
            format: Output format ('json', 'text'). Default 'json'.
        """
        if format not in ("json", "text"):
            return {
                "status": "error",
                "operation": "whats_new",
                "message": f"Unsupported format: {format}",
            }

        payload = await self.gate.load(timeout=timeout)
        last_fetch = await self.gate.last_fetch_time()

        result: dict[str, Any] = {
            "status": "success",
            "operation": "whats_new",
            "provenance": self.gate.provenance.value if self.gate.provenance else None,
            "should_display": self.gate.should_display,
            "seen_version": await self.gate.seen_marker(),
            "last_fetch": last_fetch.isoformat() if last_fetch else None,
        }
        if format == "json":
            result["data"] = payload.to_dict()
        else:
            result["data"] = self._format_announcement_as_text(payload)
        return result

    async def dismiss(self) -> dict[str, Any]:
        """Mark the loaded announcement as seen."""
        try:
            if self.gate.payload is None:
                raise ValueError("No announcement loaded; run 'whats-new' first")

            await self.gate.mark_seen()
            return {
                "status": "success",
                "operation": "dismiss",
                "message": f"Announcement {self.gate.payload.version} marked as seen",
            }

        except ValueError as e:
            logger.error(f"Failed to dismiss announcement: {e}")
            return {
                "status": "error",
                "operation": "dismiss",
                "message": str(e),
            }

    def force_show(self, format: str = "json") -> dict[str, Any]:
        """Show the announcement regardless of the seen marker."""
        payload = self.gate.force_show()
        return {
            "status": "success",
            "operation": "force_show",
            "provenance": self.gate.provenance.value if self.gate.provenance else None,
            "should_display": self.gate.should_display,
            "data": payload.to_dict() if format == "json" else self._format_announcement_as_text(payload),
        }

    async def reset_seen(self) -> dict[str, Any]:
        """Forget which announcement version was last dismissed."""
        await self.gate.reset_seen_status()
        return {
            "status": "success",
            "operation": "reset_seen",
            "message": "Seen marker cleared",
        }

    @staticmethod
    def _format_announcement_as_text(payload: AnnouncementPayload) -> str:
        """Format an announcement as human-readable text."""
        lines = [payload.title, f"Version {payload.version}", ""]

        for feature in payload.features:
            lines.append(f"  [{feature.icon}] {feature.title}")
            lines.append(f"      {feature.description}")
        lines.append("")

        if payload.footer:
            lines.append(payload.footer)
        lines.append(f"<{payload.dismiss_label}>")

        return "\n".join(lines)


async def run_command(
    handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        handler: CLICommandHandler wired to the core services.
        command: Command name.
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If the command is not recognized or a required
            argument is missing.
    """
    if command == "suggest":
        if "query" not in args:
            raise ValueError("Missing required parameter: query")
        return handler.suggest(args["query"])

    elif command == "match":
        if "guess" not in args:
            raise ValueError("Missing required parameter: guess")
        return handler.match_guess(args["guess"])

    elif command == "guess":
        for name in ("case", "guess"):
            if name not in args:
                raise ValueError(f"Missing required parameter: {name}")
        return handler.check_guess(args["case"], args["guess"])

    elif command == "whats-new":
        return await handler.check_whats_new(
            timeout=args.get("timeout"),
            format=args.get("format", "json"),
        )

    elif command == "dismiss":
        return await handler.dismiss()

    elif command == "force":
        return handler.force_show(format=args.get("format", "json"))

    elif command == "reset":
        return await handler.reset_seen()

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")
