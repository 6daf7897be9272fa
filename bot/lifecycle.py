"""
Lifecycle Manager
Startup validation, gateway connection, graceful shutdown and crash handling
"""

import asyncio
import signal
from contextlib import suppress
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Tuple

from bot.config import Config, ConfigError
from utils.logger import get_logger

# Startup action type alias: (client) -> awaitable
StartupAction = Callable[[Any], Awaitable[Any]]


class LifecycleState(Enum):
    """Process lifecycle states, in order."""

    UNINITIALIZED = "uninitialized"
    VALIDATING = "validating"
    CONNECTING = "connecting"
    READY = "ready"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


TRANSITIONS: Dict[LifecycleState, Set[LifecycleState]] = {
    LifecycleState.UNINITIALIZED: {LifecycleState.VALIDATING},
    # Startup failures exit without a shutdown phase
    LifecycleState.VALIDATING: {LifecycleState.CONNECTING, LifecycleState.TERMINATED},
    LifecycleState.CONNECTING: {
        LifecycleState.READY,
        LifecycleState.SHUTTING_DOWN,
        LifecycleState.TERMINATED,
    },
    LifecycleState.READY: {LifecycleState.SHUTTING_DOWN},
    LifecycleState.SHUTTING_DOWN: {LifecycleState.TERMINATED},
    LifecycleState.TERMINATED: set(),
}

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class LifecycleError(RuntimeError):
    """Raised on an illegal lifecycle transition."""


class LifecycleManager:
    """
    Owns the bot's process lifecycle.

    run() validates configuration, logs in, keeps the gateway session open
    and returns the exit status once the process should end. Shutdown is
    triggered by SIGINT/SIGTERM (exit 0) or by a fault that escaped every
    handler (exit 1) and runs at most once.
    """

    def __init__(
        self,
        config: Config,
        client: Any,
        startup_actions: Optional[List[Tuple[str, StartupAction]]] = None,
        keep_alive: Optional[Any] = None,
        grace_period: Optional[float] = None,
        crash_delay: Optional[float] = None,
    ):
        self.logger = get_logger("Lifecycle")
        self.config = config
        self.client = client
        self.startup_actions: List[Tuple[str, StartupAction]] = list(startup_actions or [])
        self.keep_alive = keep_alive
        self.grace_period = config.SHUTDOWN_GRACE_SECONDS if grace_period is None else grace_period
        self.crash_delay = config.CRASH_FLUSH_SECONDS if crash_delay is None else crash_delay

        self.state = LifecycleState.UNINITIALIZED
        self.exit_code: Optional[int] = None

        self._terminated = asyncio.Event()
        self._crashing = False
        self._aborting = False
        self._gateway_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._previous_exception_handler: Optional[Callable] = None

    @property
    def is_ready(self) -> bool:
        return self.state == LifecycleState.READY

    def add_startup_action(self, name: str, action: StartupAction) -> None:
        """Run action(client) once, when the gateway first reports ready."""
        self.startup_actions.append((name, action))

    def _transition(self, new_state: LifecycleState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise LifecycleError(f"Illegal lifecycle transition: {self.state.value} -> {new_state.value}")
        self.logger.debug(f"Lifecycle: {self.state.value} -> {new_state.value}")
        self.state = new_state

    def _terminate(self, exit_code: int) -> None:
        self._transition(LifecycleState.TERMINATED)
        self.exit_code = exit_code
        self._terminated.set()

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # Startup

    def validate(self) -> bool:
        """
        Check required configuration.

        Returns:
            True if the bot may connect. On failure every missing variable
            is logged and the lifecycle ends with exit code 1.
        """
        self._transition(LifecycleState.VALIDATING)

        try:
            self.config.validate()
        except ConfigError as e:
            self.logger.error("Error: Missing required environment variables:")
            for name in e.missing:
                self.logger.error(f"- {name}")
            self.logger.error("Please add them to your .env file and restart the bot.")
            self._terminate(1)
            return False

        return True

    async def run(self) -> int:
        """
        Run the bot until it terminates.

        Returns:
            Process exit status
        """
        if not self.validate():
            return self.exit_code

        self._transition(LifecycleState.CONNECTING)
        loop = asyncio.get_running_loop()
        self.install_handlers(loop)

        try:
            await self._connect()
            await self._terminated.wait()

            if self._gateway_task is not None and not self._gateway_task.done():
                self._gateway_task.cancel()
                with suppress(asyncio.CancelledError):
                    await self._gateway_task
        finally:
            self.remove_handlers(loop)

        return self.exit_code

    async def _connect(self) -> None:
        self.logger.info("Starting bot...")

        if self.keep_alive is not None:
            await self.keep_alive.start()

        try:
            await self.client.login(self.config.DISCORD_TOKEN)
        except Exception as e:
            self.logger.error(f"Initialization error: {e}")
            await self._abort()
            return

        self._gateway_task = asyncio.create_task(self.client.connect(), name="gateway")
        self._gateway_task.add_done_callback(self._on_gateway_done)

    def _on_gateway_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or self.state in (LifecycleState.SHUTTING_DOWN, LifecycleState.TERMINATED):
            return

        error = task.exception()

        if self.state == LifecycleState.CONNECTING:
            if error is not None:
                self.logger.error(f"Failed to connect to Discord: {error}")
            else:
                self.logger.error("Gateway session closed before the bot became ready")
            self._spawn(self._abort())
        elif error is not None:
            self.handle_fault(error, "Gateway connection lost")
        else:
            self._spawn(self.shutdown("gateway closed", exit_code=0))

    async def _abort(self) -> None:
        """End a failed startup: release what was opened, exit 1."""
        if self.state != LifecycleState.CONNECTING or self._aborting:
            return
        self._aborting = True
        if not self.client.is_closed():
            try:
                await self.client.close()
            except Exception as e:
                self.logger.debug(f"Error closing client after failed startup: {e}")
        await self._stop_keep_alive()
        self._terminate(1)

    async def mark_ready(self) -> bool:
        """
        Enter the ready state and run startup actions.

        Called from the gateway's ready event. Later ready events (session
        resumes) are no-ops.

        Returns:
            True on the first call while connecting
        """
        if self.state != LifecycleState.CONNECTING:
            return False

        self._transition(LifecycleState.READY)
        self.logger.info(f"Bot is online! Logged in as {self.client.user}")

        for name, action in self.startup_actions:
            try:
                await action(self.client)
            except Exception as e:
                self.logger.error(f"Startup action '{name}' failed: {e}", exc_info=True)

        return True

    # Shutdown

    async def shutdown(self, reason: str, exit_code: int = 0) -> bool:
        """
        Graceful shutdown. Only the first call does anything.

        Args:
            reason: What triggered the shutdown (signal name, fault)
            exit_code: 0 for a requested stop, 1 for a fault

        Returns:
            True if this call performed the shutdown
        """
        if self.state in (LifecycleState.SHUTTING_DOWN, LifecycleState.TERMINATED) or self._aborting:
            self.logger.debug(f"Shutdown already in progress, ignoring {reason}")
            return False
        if self.state not in (LifecycleState.CONNECTING, LifecycleState.READY):
            self.logger.warning(f"Shutdown requested ({reason}) before the bot started")
            return False

        self._transition(LifecycleState.SHUTTING_DOWN)
        self.logger.info(f"Bot shutdown initiated ({reason})")
        self.logger.info("Shutting down gracefully...")

        if not self.client.is_closed():
            try:
                await self.client.close()
                self.logger.info("Discord client destroyed")
            except Exception as e:
                self.logger.error(f"Error closing Discord client: {e}")

        await self._stop_keep_alive()

        # Give in-flight handlers and log handlers time to finish
        await asyncio.sleep(self.grace_period)

        self.logger.info("Bot shutdown complete")
        self._terminate(exit_code)
        return True

    async def _stop_keep_alive(self) -> None:
        if self.keep_alive is None:
            return
        try:
            await self.keep_alive.stop()
        except Exception as e:
            self.logger.error(f"Error stopping keep-alive server: {e}")

    # Process-level handlers

    def install_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install signal handlers and the loop exception handler."""
        self._previous_exception_handler = loop.get_exception_handler()
        loop.set_exception_handler(self._async_exception_handler)

        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self._signal_handler, sig)
            except (NotImplementedError, RuntimeError):
                # Windows doesn't support add_signal_handler
                self.logger.debug(f"Signal handler for {sig.name} not supported on this platform")

    def remove_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        loop.set_exception_handler(self._previous_exception_handler)
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass

    def _signal_handler(self, sig: signal.Signals) -> None:
        """Handle shutdown signals."""
        self._spawn(self.shutdown(sig.name, exit_code=0))

    def _async_exception_handler(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        """Handle exceptions nothing else caught."""
        exception = context.get("exception")
        message = context.get("message", "Unhandled error in event loop")

        if exception is None:
            self.logger.error(f"Async error: {message}")
            return

        self.handle_fault(exception, message)

    def handle_fault(self, error: BaseException, origin: str = "Uncaught exception") -> None:
        """
        Log a process-level fault and schedule a crash shutdown.

        Args:
            error: The exception that escaped
            origin: Where it was caught
        """
        self.logger.error(
            f"{origin}: {error}",
            exc_info=(type(error), error, error.__traceback__),
        )

        if self._crashing or self.state in (LifecycleState.SHUTTING_DOWN, LifecycleState.TERMINATED):
            return

        self._crashing = True
        self._spawn(self._crash())

    async def _crash(self) -> None:
        # Give log handlers time to write before exiting
        await asyncio.sleep(self.crash_delay)
        self.logger.error("An uncaught exception caused the bot to crash. Exiting...")
        if self.state == LifecycleState.CONNECTING:
            # Failures before ready skip the shutdown phase
            await self._abort()
        else:
            await self.shutdown("fatal error", exit_code=1)
