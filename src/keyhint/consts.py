from __future__ import annotations

# column at which the binding text starts in a binding report
BINDING_COLUMN = 32

GLOBAL_BINDINGS_LABEL = "Global Bindings:"
COLUMN_HEADER = "key             binding"
COLUMN_UNDERLINE = "---             -------"

# keys starting with this character are menu entries or other pseudo keys
PLACEHOLDER_MARKER = "<"

# typing a character carries nothing worth teaching
SELF_INSERT_COMMAND = "self-insert-command"

NO_BINDINGS_MESSAGE = "No key bindings available here."

DEFAULT_IDLE_DELAY = 60.0
DEFAULT_UPDATE_INTERVAL = 12.0
