"""
Command Deployment
Pushes registered slash-command metadata to Discord
"""

from typing import Any, Optional

from commands.command_registry import CommandRegistry
from utils.logger import get_logger

logger = get_logger("Deploy")


async def deploy_commands(
    client: Any,
    registry: CommandRegistry,
    application_id: str,
    guild_id: Optional[str] = None,
) -> int:
    """
    Overwrite the application's commands with the registry contents.

    Guild-scoped registration takes effect immediately and is meant for
    development; global registration can take a while to propagate.

    Args:
        client: Logged-in discord.Client
        registry: Commands to publish
        application_id: Application (client) ID
        guild_id: Optional guild to scope the commands to

    Returns:
        Number of commands published
    """
    payload = registry.to_payload()

    if guild_id:
        logger.info(f"Registering {len(payload)} commands in guild {guild_id}...")
        await client.http.bulk_upsert_guild_commands(int(application_id), int(guild_id), payload)
    else:
        logger.info(f"Registering {len(payload)} global commands...")
        await client.http.bulk_upsert_global_commands(int(application_id), payload)

    logger.info("Commands registered successfully")
    return len(payload)
