"""Rendering of OSC messages into interpreter commands.

OSC messages are not sent from this process.  Each :class:`OscCommand`
is rendered into a small PowerShell snippet that imports an OSC-sending
module and calls ``Send-OscMessage``; the snippet then goes through the
same :class:`~pyJsonGroupDeck.runner.CommandRunner` and failure policy as
every other command::

    Import-Module SendOscModule
    Send-OscMessage -IPAddress "127.0.0.1" -Port 8000 -AddressPattern /a -Arguments @(1,on)

The target address and port are fixed by the engine configuration; the
per-command ``osc_port`` from the descriptor is only used when no fixed
port is configured.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from pyJsonGroupDeck.runner import InlineCommand
from pyJsonGroupDeck.settings import OscCommand, OscValue

#: Target address of every rendered OSC message.
OSC_LOOPBACK_IP: str = "127.0.0.1"

#: Target port of every rendered OSC message.
OSC_DEFAULT_PORT: int = 8000

#: PowerShell module providing ``Send-OscMessage``.
OSC_MODULE: str = "SendOscModule"

_OSC_TEMPLATE = (
    "\n"
    "Import-Module {module}\n"
    'Send-OscMessage -IPAddress "{ip}" -Port {port} '
    "-AddressPattern {path} -Arguments @({arguments})\n"
)


def format_osc_value(value: OscValue) -> str:
    """Format one argument; integral floats lose their ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_osc_command(
    command: OscCommand,
    *,
    ip: str = OSC_LOOPBACK_IP,
    port: Optional[int] = OSC_DEFAULT_PORT,
    module: str = OSC_MODULE,
) -> InlineCommand:
    """Render *command* as an :class:`InlineCommand`.

    Pass ``port=None`` to use the port configured on *command*.
    """
    arguments = ",".join(format_osc_value(v) for v in command.values)
    return InlineCommand(
        _OSC_TEMPLATE.format(
            module=module,
            ip=ip,
            port=command.port if port is None else port,
            path=command.path,
            arguments=arguments,
        )
    )


def render_osc_commands(
    commands: Iterable[OscCommand],
    *,
    ip: str = OSC_LOOPBACK_IP,
    port: Optional[int] = OSC_DEFAULT_PORT,
    module: str = OSC_MODULE,
) -> List[InlineCommand]:
    """Render every command of *commands*, preserving order."""
    return [
        render_osc_command(cmd, ip=ip, port=port, module=module)
        for cmd in commands
    ]
