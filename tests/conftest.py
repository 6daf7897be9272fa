"""
Pytest configuration and fixtures for the interaction bot tests.

Provides fake Discord interactions, a controllable clock and pre-wired
router components so tests never touch the network.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import discord
import pytest

from commands.command_registry import CommandRegistry
from managers.cooldown_registry import CooldownRegistry
from managers.interaction_router import InteractionRouter
from utils import logger as logger_module
from utils.error_handler import ErrorHandler
from utils.monitoring import Monitoring


class FakeClock:
    """Wall clock the test moves by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeUser:
    def __init__(self, user_id: int, name: str):
        self.id = user_id
        self.name = name
        self.mention = f"<@{user_id}>"

    def __str__(self) -> str:
        return self.name


class FakeResponse:
    """Stands in for discord.InteractionResponse."""

    def __init__(self, fail: bool = False):
        self._done = False
        self.fail = fail
        self.messages: List[Tuple[Optional[str], Dict[str, Any]]] = []
        self.deferred: Optional[Dict[str, Any]] = None

    def is_done(self) -> bool:
        return self._done

    async def send_message(self, content: Optional[str] = None, **kwargs: Any) -> None:
        if self.fail:
            raise RuntimeError("Unknown interaction")
        if self._done:
            raise RuntimeError("This interaction has already been responded to before")
        self._done = True
        self.messages.append((content, kwargs))

    async def defer(self, **kwargs: Any) -> None:
        if self.fail:
            raise RuntimeError("Unknown interaction")
        self._done = True
        self.deferred = kwargs


class FakeFollowup:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: List[Tuple[Optional[str], Dict[str, Any]]] = []

    async def send(self, content: Optional[str] = None, **kwargs: Any) -> None:
        if self.fail:
            raise RuntimeError("Unknown webhook")
        self.messages.append((content, kwargs))


class FakeInteraction:
    """Minimal discord.Interaction look-alike."""

    def __init__(
        self,
        interaction_type: discord.InteractionType,
        data: Dict[str, Any],
        user: FakeUser,
        channel: Any = None,
    ):
        self.type = interaction_type
        self.data = data
        self.user = user
        self.channel = channel
        self.response = FakeResponse()
        self.followup = FakeFollowup()

    @property
    def all_messages(self) -> List[Tuple[Optional[str], Dict[str, Any]]]:
        return self.response.messages + self.followup.messages


def make_command_interaction(name: str, user_id: int = 1, user_name: str = "alice") -> FakeInteraction:
    return FakeInteraction(
        discord.InteractionType.application_command,
        {"type": discord.AppCommandType.chat_input.value, "name": name},
        FakeUser(user_id, user_name),
    )


def make_component_interaction(
    custom_id: str,
    user_id: int = 1,
    user_name: str = "alice",
    channel: Any = None,
) -> FakeInteraction:
    return FakeInteraction(
        discord.InteractionType.component,
        {"custom_id": custom_id, "component_type": discord.ComponentType.button.value},
        FakeUser(user_id, user_name),
        channel=channel,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cooldowns(clock: FakeClock) -> CooldownRegistry:
    return CooldownRegistry(clock=clock)


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def monitoring() -> Monitoring:
    return Monitoring()


@pytest.fixture
def client() -> Any:
    return object()


@pytest.fixture
def router(client, registry, cooldowns, monitoring) -> InteractionRouter:
    return InteractionRouter(client, registry, cooldowns, ErrorHandler(monitoring), monitoring)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any setup_logging() a test performed."""
    yield
    app_logger = logging.getLogger(logger_module.APP_LOGGER)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)
    logger_module._configured = None
