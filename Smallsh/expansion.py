import os
import re

# $$, $!, $? or ${name}; '${' is closed by the next '}'
PARAM_RE = re.compile(r"\$(?:([$!?])|\{([^}]*)\})")

SPECIAL_DEFAULTS = {"$": "", "!": "", "?": "0"}


class ParameterTable:
    """
    Special parameters ($, ! and ?) plus environment variables.

    The special parameters live in the same mapping as ordinary variables
    (os.environ by default), so child processes inherit them.
    """

    def __init__(self, environ=None):
        self.environ = os.environ if environ is None else environ

    def init_special(self, pid=None):
        self.environ["$"] = str(os.getpid() if pid is None else pid)
        self.environ["?"] = "0"
        self.environ["!"] = ""

    def get(self, name, default=""):
        return self.environ.get(name, default)

    @property
    def pid(self):
        return self.get("$")

    @property
    def last_status(self):
        return self.get("?", "0")

    @property
    def last_background(self):
        return self.get("!")

    def set_last_status(self, status):
        self.environ["?"] = str(status)

    def set_last_background(self, pid):
        self.environ["!"] = str(pid)


def expand(word, params):
    """
    Replace $$, $!, $? and ${name} in a word.
    An unclosed '${' is kept as literal text.
    Returns: expanded word
    """
    def resolve(m):
        special, name = m.group(1), m.group(2)
        if special:
            return params.get(special, SPECIAL_DEFAULTS[special])
        return params.get(name, "")

    return PARAM_RE.sub(resolve, word)


def expand_words(words, params):
    return [expand(w, params) for w in words]
