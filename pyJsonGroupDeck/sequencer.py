"""Sequential execution of command lists with interleaved delays.

:meth:`CommandSequencer.run_sequence` executes commands strictly one
after another.  After command *i* (for *i > 0*) has **succeeded**, the
sequencer waits ``delays[i - 1]`` milliseconds before starting command
*i + 1*.  A failing command is logged and the sequence moves on to the
next command immediately, without the scheduled delay::

    commands:  A ──► B ──(d1)──► C ──(d2)──►
    A fails:   A ✗ ► B ──(d1)──► C ──(d2)──►
    B fails:   A ──► B ✗ ──────► C ──(d2)──►

Set *honor_delay_on_failure* to always wait regardless of the outcome.
A missing delay entry counts as no delay.  Failures never abort the
sequence.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence

from pyJsonGroupDeck.errors import CommandFailedError
from pyJsonGroupDeck.runner import CommandRunner, ExecutableCommand

#: Signature of the sleep coroutine (seconds).
SleepFunc = Callable[[float], Awaitable[None]]


class CommandSequencer:
    """Runs command lists through one :class:`CommandRunner`.

    Parameters
    ----------
    runner:
        Runner for the individual commands.  A default
        :class:`CommandRunner` is created when omitted.
    honor_delay_on_failure:
        When ``True``, the configured delay is applied after a failed
        step as well.
    sleep:
        Sleep coroutine, ``asyncio.sleep`` by default.
    logger:
        Logger for step failures.  Defaults to the module logger.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        *,
        honor_delay_on_failure: bool = False,
        sleep: SleepFunc = asyncio.sleep,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._runner = runner or CommandRunner()
        self._honor_delay_on_failure = honor_delay_on_failure
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    @property
    def honor_delay_on_failure(self) -> bool:
        return self._honor_delay_on_failure

    async def run_sequence(
        self,
        commands: Sequence[ExecutableCommand],
        delays: Sequence[float],
    ) -> int:
        """Execute *commands* in order with *delays* (ms) between them.

        Returns
        -------
        int
            Number of failed steps.
        """
        failures = 0
        total = len(commands)
        for i, command in enumerate(commands):
            try:
                await self._runner.run(command)
            except CommandFailedError as exc:
                failures += 1
                self._logger.error("Step %d/%d failed: %s", i + 1, total, exc)
                if not self._honor_delay_on_failure:
                    continue
            if i > 0:
                delay = self._delay_seconds(delays, i - 1)
                if delay > 0:
                    await self._sleep(delay)

        if failures:
            self._logger.warning(
                "Sequence finished with %d of %d steps failed", failures, total
            )
        else:
            self._logger.debug("Sequence of %d steps finished", total)
        return failures

    @staticmethod
    def _delay_seconds(delays: Sequence[float], position: int) -> float:
        if position < len(delays):
            try:
                return max(float(delays[position]), 0.0) / 1000.0
            except (TypeError, ValueError):
                return 0.0
        return 0.0

    def __repr__(self) -> str:
        return (
            f"CommandSequencer({self._runner!r}, "
            f"honor_delay_on_failure={self._honor_delay_on_failure})"
        )
