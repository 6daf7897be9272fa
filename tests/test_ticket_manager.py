"""
Unit tests for TicketManager, the ticket_* component delegate.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from managers.ticket_manager import CLOSE_TICKET_ID, OPEN_TICKET_ID, TicketManager
from tests.conftest import make_component_interaction
from utils.error_handler import ERROR_REPLY, ErrorHandler


def text_channel():
    channel = MagicMock(spec=discord.TextChannel)
    thread = MagicMock()
    thread.id = 999
    thread.name = "ticket-alice"
    thread.mention = "<#999>"
    thread.add_user = AsyncMock()
    thread.send = AsyncMock()
    channel.create_thread = AsyncMock(return_value=thread)
    return channel, thread


@pytest.mark.asyncio
class TestOpenTicket:
    async def test_creates_private_thread(self):
        tickets = TicketManager()
        channel, thread = text_channel()
        interaction = make_component_interaction(OPEN_TICKET_ID, 1, "alice", channel=channel)

        await tickets.handle_button(interaction, client=None)

        channel.create_thread.assert_awaited_once_with(
            name="ticket-alice",
            type=discord.ChannelType.private_thread,
            invitable=False,
        )
        thread.add_user.assert_awaited_once_with(interaction.user)
        assert tickets.open_tickets == {1: 999}
        assert interaction.response.deferred == {"ephemeral": True, "thinking": True}
        assert interaction.followup.messages == [("Ticket created: <#999>", {"ephemeral": True})]

    async def test_failed_setup_reports_through_followup(self):
        tickets = TicketManager()
        channel, _ = text_channel()
        channel.create_thread.side_effect = RuntimeError("503 Service Unavailable")
        interaction = make_component_interaction(OPEN_TICKET_ID, 1, "alice", channel=channel)

        async with ErrorHandler().contain(interaction, OPEN_TICKET_ID, "alice"):
            await tickets.handle_button(interaction, client=None)

        assert interaction.response.messages == []
        assert interaction.followup.messages == [(ERROR_REPLY, {"ephemeral": True})]
        assert tickets.open_tickets == {}

    async def test_one_open_ticket_per_user(self):
        tickets = TicketManager()
        tickets.open_tickets[1] = 555
        channel, _ = text_channel()
        interaction = make_component_interaction(OPEN_TICKET_ID, 1, channel=channel)

        await tickets.handle_button(interaction, client=None)

        channel.create_thread.assert_not_awaited()
        assert interaction.response.messages == [("You already have an open ticket: <#555>", {"ephemeral": True})]

    async def test_requires_text_channel(self):
        tickets = TicketManager()
        interaction = make_component_interaction(OPEN_TICKET_ID, channel=MagicMock())

        await tickets.handle_button(interaction, client=None)

        content, kwargs = interaction.response.messages[0]
        assert "server text channel" in content
        assert kwargs == {"ephemeral": True}


@pytest.mark.asyncio
class TestCloseTicket:
    async def test_archives_and_locks_thread(self):
        tickets = TicketManager()
        tickets.open_tickets[1] = 999
        thread = MagicMock()
        thread.id = 999
        thread.edit = AsyncMock()
        interaction = make_component_interaction(CLOSE_TICKET_ID, 2, "staff", channel=thread)

        await tickets.handle_button(interaction, client=None)

        thread.edit.assert_awaited_once_with(archived=True, locked=True)
        assert tickets.open_tickets == {}
        assert interaction.response.messages == [("Ticket closed by <@2>.", {})]

    async def test_failed_archive_keeps_ticket_tracked(self):
        tickets = TicketManager()
        tickets.open_tickets[1] = 999
        thread = MagicMock()
        thread.id = 999
        thread.edit = AsyncMock(side_effect=RuntimeError("Missing Permissions"))
        interaction = make_component_interaction(CLOSE_TICKET_ID, 2, "staff", channel=thread)

        with pytest.raises(RuntimeError):
            await tickets.handle_button(interaction, client=None)

        assert tickets.open_tickets == {1: 999}

    async def test_outside_a_ticket(self):
        tickets = TicketManager()
        channel = MagicMock()
        channel.id = 123
        interaction = make_component_interaction(CLOSE_TICKET_ID, channel=channel)

        await tickets.handle_button(interaction, client=None)

        assert interaction.response.messages == [("This is not an open ticket.", {"ephemeral": True})]


@pytest.mark.asyncio
async def test_unknown_ticket_action_is_ignored():
    tickets = TicketManager()
    interaction = make_component_interaction("ticket_reopen")

    await tickets.handle_button(interaction, client=None)

    assert interaction.all_messages == []


@pytest.mark.asyncio
async def test_panel_has_open_button():
    view = TicketManager().build_panel()

    assert [item.custom_id for item in view.children] == [OPEN_TICKET_ID]


@pytest.mark.asyncio
async def test_initialize_resets_state():
    tickets = TicketManager()
    tickets.open_tickets[1] = 2

    await tickets.initialize(client=None)

    assert tickets.open_tickets == {}
