import os

SHELL_NAME = "smallsh"

# Words past this bound are dropped from the line
MAX_WORDS = 512

HISTORY_FILE = os.path.expanduser(os.getenv("SMALLSH_HISTFILE", "~/.smallsh_history"))
MAX_HISTORY = 1000  # entries kept in the history file

# Mode for files created by > and >> (umask still applies)
CREATE_MODE = 0o777

BACKGROUND_MARKER = "&"
REDIRECT_OPERATORS = ("<", ">", ">>")
