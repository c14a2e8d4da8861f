"""External command runner.

Every configured action — a script file, an inline command string or a
rendered OSC message — ends up as an :data:`ExecutableCommand` and is run
by :class:`CommandRunner` in an external interpreter process (PowerShell
``pwsh`` by default)::

    pwsh <script> <args...>       # ScriptFile
    pwsh -Command <source>        # InlineCommand

The runner captures stdout and stderr, returns the trimmed stdout on
success and raises :class:`~pyJsonGroupDeck.errors.CommandFailedError`
when the process exits non-zero or cannot be spawned.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, NamedTuple, Optional, Tuple, Union

from pyJsonGroupDeck.errors import CommandFailedError

#: Interpreter used when none is configured.
DEFAULT_INTERPRETER: str = "pwsh"


class ScriptFile(NamedTuple):
    """A script file invocation."""

    path: str
    args: Tuple[str, ...] = ()


class InlineCommand(NamedTuple):
    """An inline command string passed to the interpreter."""

    source: str


#: Anything :class:`CommandRunner` can execute.
ExecutableCommand = Union[ScriptFile, InlineCommand]


def script_commands(paths: Iterable[str]) -> List[ScriptFile]:
    """Wrap script paths (the ``scripts`` setting) as commands."""
    return [ScriptFile(str(path)) for path in paths]


def inline_commands(sources: Iterable[str]) -> List[InlineCommand]:
    """Wrap inline command strings (the ``scriptCmds`` setting)."""
    return [InlineCommand(str(source)) for source in sources]


class CommandRunner:
    """Runs :data:`ExecutableCommand` values in an interpreter process.

    Parameters
    ----------
    interpreter:
        Executable used for every command.
    logger:
        Logger for command output.  Defaults to the module logger.
    """

    def __init__(
        self,
        interpreter: str = DEFAULT_INTERPRETER,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._interpreter = interpreter
        self._logger = logger or logging.getLogger(__name__)

    @property
    def interpreter(self) -> str:
        return self._interpreter

    def argv(self, command: ExecutableCommand) -> List[str]:
        """Return the full argument vector for *command*."""
        if isinstance(command, ScriptFile):
            return [self._interpreter, command.path, *command.args]
        if isinstance(command, InlineCommand):
            return [self._interpreter, "-Command", command.source]
        raise TypeError(f"Unsupported command type: {type(command).__name__}")

    async def run(self, command: ExecutableCommand) -> str:
        """Execute *command* and return its trimmed stdout.

        Raises
        ------
        CommandFailedError
            On a non-zero exit code (``exit_code`` set) or when the
            interpreter cannot be started or the arguments cannot be
            passed to it, e.g. an embedded NUL (``exit_code is None``).
        """
        argv = self.argv(command)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            raise CommandFailedError(None, str(exc)) from exc

        stdout_data, stderr_data = await proc.communicate()
        stdout = stdout_data.decode("utf-8", errors="replace")
        stderr = stderr_data.decode("utf-8", errors="replace")

        if proc.returncode != 0:
            raise CommandFailedError(proc.returncode, stderr.strip())

        self._logger.debug(
            "%s exited 0: %s", argv[1], stdout.strip() or "<no output>"
        )
        return stdout.strip()

    async def run_script(self, path: str, *args: str) -> str:
        """Shorthand for ``run(ScriptFile(path, args))``."""
        return await self.run(ScriptFile(path, tuple(args)))

    async def run_inline(self, source: str) -> str:
        """Shorthand for ``run(InlineCommand(source))``."""
        return await self.run(InlineCommand(source))

    def __repr__(self) -> str:
        return f"CommandRunner({self._interpreter!r})"
