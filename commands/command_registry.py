"""
Command Registry
Centralized slash-command registration and lookup
"""

import re
from typing import Any, Awaitable, Callable, Dict, List, Optional

from managers.cooldown_registry import DEFAULT_COOLDOWN_SECONDS
from utils.logger import get_logger

# Command handler type alias: (interaction, client) -> awaitable
CommandHandler = Callable[[Any, Any], Awaitable[Any]]

# Discord's CHAT_INPUT naming rule, lower-case only
NAME_PATTERN = re.compile(r"^[-_a-z0-9]{1,32}$")

CHAT_INPUT = 1


class CommandDefinition:
    """Definition of a command."""

    def __init__(
        self,
        name: str,
        description: str = "",
        cooldown: int = DEFAULT_COOLDOWN_SECONDS,
        options: Optional[List[Dict[str, Any]]] = None,
    ):
        if not NAME_PATTERN.match(name):
            raise ValueError(f"Invalid command name: {name!r}")
        if isinstance(cooldown, bool) or not isinstance(cooldown, int) or cooldown <= 0:
            raise ValueError(f"Cooldown for {name} must be a positive integer, got {cooldown!r}")

        self.name = name
        self.description = description or name
        self.cooldown = cooldown
        self.options = options or []


class Command:
    """Registered command with definition and handler."""

    def __init__(self, definition: CommandDefinition, handler: CommandHandler):
        self.definition = definition
        self.handler = handler

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def cooldown(self) -> int:
        return self.definition.cooldown

    @property
    def options(self) -> List[Dict[str, Any]]:
        return self.definition.options

    async def execute(self, interaction: Any, client: Any) -> Any:
        """Run the command handler."""
        return await self.handler(interaction, client)

    def to_payload(self) -> Dict[str, Any]:
        """Application command JSON for the Discord API."""
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description[:100],
            "type": CHAT_INPUT,
        }
        if self.options:
            payload["options"] = self.options
        return payload


class CommandRegistry:
    """Centralized command registration and management."""

    def __init__(self):
        self.logger = get_logger("CommandRegistry")
        self.commands: Dict[str, Command] = {}

    def register(
        self,
        config: Dict[str, Any],
        handler: CommandHandler,
    ) -> "CommandRegistry":
        """
        Register a command.

        Args:
            config: Command configuration dict with keys:
                - name: Command name (required)
                - description: Command description
                - cooldown: Cooldown in seconds (default 3)
                - options: Application command option payloads
            handler: Async function taking (interaction, client)

        Returns:
            Self for chaining
        """
        definition = CommandDefinition(
            name=config["name"],
            description=config.get("description", ""),
            cooldown=config.get("cooldown", DEFAULT_COOLDOWN_SECONDS),
            options=config.get("options"),
        )

        if definition.name in self.commands:
            raise ValueError(f"Command already registered: {definition.name}")

        self.commands[definition.name] = Command(definition, handler)
        self.logger.debug(f"Registered command: {definition.name}")
        return self

    def get(self, name: str) -> Optional[Command]:
        """
        Get a command by name.

        Args:
            name: Command name

        Returns:
            Command or None if not found
        """
        return self.commands.get(name)

    def has(self, name: str) -> bool:
        return name in self.commands

    def get_all(self) -> List[Command]:
        """
        Get all registered commands.

        Returns:
            List of all commands
        """
        return list(self.commands.values())

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self.commands)

    def to_payload(self) -> List[Dict[str, Any]]:
        """Application command payloads for every registered command."""
        return [command.to_payload() for command in self.commands.values()]

    def generate_help(self) -> str:
        """
        Generate help text for all commands.

        Returns:
            Formatted help string
        """
        lines = ["📖 **Commands**", ""]

        for cmd in sorted(self.commands.values(), key=lambda c: c.name):
            lines.append(f"• `/{cmd.name}` - {cmd.description} ({cmd.cooldown}s cooldown)")

        return "\n".join(lines)
