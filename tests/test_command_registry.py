"""
Unit tests for CommandRegistry, built-in commands and deployment.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from commands import build_registry, deploy_commands
from commands.command_registry import CommandRegistry
from managers.ticket_manager import TicketManager


async def noop(interaction, client):
    return None


class TestRegister:
    def test_defaults(self, registry):
        registry.register({"name": "ping"}, noop)

        command = registry.get("ping")
        assert command.cooldown == 3
        assert command.description == "ping"
        assert "ping" in registry
        assert len(registry) == 1

    def test_unknown_command(self, registry):
        assert registry.get("nope") is None
        assert not registry.has("nope")

    def test_duplicate_name_is_rejected(self, registry):
        registry.register({"name": "ping"}, noop)

        with pytest.raises(ValueError):
            registry.register({"name": "ping"}, noop)

    @pytest.mark.parametrize("name", ["", "Ping", "has space", "x" * 33])
    def test_invalid_name_is_rejected(self, registry, name):
        with pytest.raises(ValueError):
            registry.register({"name": name}, noop)

    @pytest.mark.parametrize("cooldown", [0, -1, 1.5, True])
    def test_invalid_cooldown_is_rejected(self, registry, cooldown):
        with pytest.raises(ValueError):
            registry.register({"name": "ping", "cooldown": cooldown}, noop)

    def test_chaining(self, registry):
        registry.register({"name": "a"}, noop).register({"name": "b"}, noop)

        assert [c.name for c in registry.get_all()] == ["a", "b"]


class TestPayload:
    def test_payload(self, registry):
        options = [{"type": 3, "name": "reason", "description": "Why", "required": False}]
        registry.register({"name": "ticket", "description": "Open a ticket", "options": options}, noop)
        registry.register({"name": "ping", "description": "Pong"}, noop)

        assert registry.to_payload() == [
            {"name": "ticket", "description": "Open a ticket", "type": 1, "options": options},
            {"name": "ping", "description": "Pong", "type": 1},
        ]

    def test_help_lists_commands(self, registry):
        registry.register({"name": "ping", "description": "Pong", "cooldown": 3}, noop)

        assert "`/ping` - Pong (3s cooldown)" in registry.generate_help()


@pytest.mark.asyncio
class TestExecute:
    async def test_execute_passes_interaction_and_client(self, registry):
        handler = AsyncMock(return_value="done")
        registry.register({"name": "ping"}, handler)

        result = await registry.get("ping").execute("interaction", "client")

        assert result == "done"
        handler.assert_awaited_once_with("interaction", "client")


class TestBuiltins:
    def test_build_registry(self):
        registry = build_registry()

        assert registry.has("ping")
        assert registry.has("help")
        assert not registry.has("ticket")

    def test_build_registry_with_tickets(self):
        registry = build_registry(TicketManager())

        assert registry.get("ticket").cooldown == 10


@pytest.mark.asyncio
class TestBuiltinHandlers:
    async def test_ping_reports_latency(self):
        registry = build_registry()
        interaction = MagicMock()
        interaction.response.send_message = AsyncMock()
        client = MagicMock(latency=0.042)

        await registry.get("ping").execute(interaction, client)

        interaction.response.send_message.assert_awaited_once_with("🏓 Pong! Latency: 42ms")

    async def test_help_is_ephemeral(self):
        registry = build_registry()
        interaction = MagicMock()
        interaction.response.send_message = AsyncMock()

        await registry.get("help").execute(interaction, MagicMock())

        args, kwargs = interaction.response.send_message.call_args
        assert "/ping" in args[0]
        assert kwargs == {"ephemeral": True}


@pytest.mark.asyncio
class TestDeploy:
    async def test_global_registration(self, registry):
        registry.register({"name": "ping"}, noop)
        client = MagicMock()
        client.http.bulk_upsert_global_commands = AsyncMock()

        count = await deploy_commands(client, registry, "123")

        assert count == 1
        client.http.bulk_upsert_global_commands.assert_awaited_once_with(123, registry.to_payload())

    async def test_guild_registration(self, registry):
        registry.register({"name": "ping"}, noop)
        client = MagicMock()
        client.http.bulk_upsert_guild_commands = AsyncMock()
        client.http.bulk_upsert_global_commands = AsyncMock()

        await deploy_commands(client, registry, "123", guild_id="456")

        client.http.bulk_upsert_guild_commands.assert_awaited_once_with(123, 456, registry.to_payload())
        client.http.bulk_upsert_global_commands.assert_not_awaited()
