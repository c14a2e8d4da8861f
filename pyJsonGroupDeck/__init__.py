"""pyJsonGroupDeck - JSON-descriptor driven button groups for control surfaces."""

__version__ = "0.1.0"

from pyJsonGroupDeck.errors import (  # noqa: F401 – re-export for convenience
    CommandFailedError,
    DescriptorUnavailableError,
    ImageUnavailableError,
    JsonGroupError,
)

from pyJsonGroupDeck.conformity import (  # noqa: F401
    DEFAULT_DELAY_MS,
    check_length_conformity,
    enforce_length_conformity,
)

from pyJsonGroupDeck.settings import (  # noqa: F401
    ButtonIdentity,
    ButtonSettings,
    OscCommand,
)

from pyJsonGroupDeck.descriptor import (  # noqa: F401
    DescriptorResolver,
    ResolvedButton,
)

from pyJsonGroupDeck.projector import ButtonAppearance, project  # noqa: F401

from pyJsonGroupDeck.runner import (  # noqa: F401
    CommandRunner,
    ExecutableCommand,
    InlineCommand,
    ScriptFile,
    inline_commands,
    script_commands,
)

from pyJsonGroupDeck.osc import (  # noqa: F401
    render_osc_command,
    render_osc_commands,
)

from pyJsonGroupDeck.sequencer import CommandSequencer  # noqa: F401

from pyJsonGroupDeck.persistence import SettingsStore  # noqa: F401

from pyJsonGroupDeck.host import (  # noqa: F401
    ActionHandle,
    ActionRegistry,
    StoredAction,
)

from pyJsonGroupDeck.group import GroupSynchronizer  # noqa: F401

from pyJsonGroupDeck.actions import ActionHandler  # noqa: F401

from pyJsonGroupDeck.button_action import (  # noqa: F401
    BUTTON_ACTION_UUID,
    ButtonAction,
    PressDisambiguator,
    PressOutcome,
)

from pyJsonGroupDeck.refresh_action import (  # noqa: F401
    REFRESH_ACTION_UUID,
    RefreshAction,
)

from pyJsonGroupDeck.config import EngineConfig, load_config  # noqa: F401

from pyJsonGroupDeck.plugin import Plugin, create_plugin  # noqa: F401
