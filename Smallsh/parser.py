import string
from dataclasses import dataclass, field
from typing import List

from Smallsh.config import MAX_WORDS, BACKGROUND_MARKER, REDIRECT_OPERATORS

WHITESPACE = frozenset(string.whitespace)


class RedirectionError(ValueError):
    """Redirection operator with no path after it."""


@dataclass
class Redirection:
    operator: str
    path: str

    @property
    def kind(self):
        return {"<": "input", ">": "output-truncate", ">>": "output-append"}[self.operator]


@dataclass
class Command:
    argv: List[str] = field(default_factory=list)
    redirections: List[Redirection] = field(default_factory=list)
    background: bool = False

    @property
    def name(self):
        return self.argv[0] if self.argv else None


def wordsplit(line, max_words=MAX_WORDS):
    """
    Split a line into words.
    Whitespace separates words, '#' at the start of a word comments out the
    rest of the line and a backslash makes the next character literal.
    Returns: list of words (empty for a blank or comment-only line)
    """
    words = []
    i, n = 0, len(line)

    while i < n and line[i] in WHITESPACE:
        i += 1

    while i < n:
        if len(words) == max_words:
            break
        if line[i] == "#":
            break

        buf = []
        while i < n and line[i] not in WHITESPACE:
            if line[i] == "\\":
                i += 1
                if i == n:
                    break
            buf.append(line[i])
            i += 1
        words.append("".join(buf))

        while i < n and line[i] in WHITESPACE:
            i += 1

    return words


def parse_command(words):
    """
    Separate redirections and the background marker from the argument vector.
    Redirections are stripped first, then a trailing '&' is looked for in
    what is left.
    Returns: Command
    """
    cmd = Command()
    i = 0

    while i < len(words):
        tok = words[i]
        if tok in REDIRECT_OPERATORS:
            if i + 1 >= len(words):
                raise RedirectionError(f"{tok}: missing redirection target")
            cmd.redirections.append(Redirection(tok, words[i + 1]))
            i += 2
        else:
            cmd.argv.append(tok)
            i += 1

    if cmd.argv and cmd.argv[-1] == BACKGROUND_MARKER:
        cmd.argv.pop()
        cmd.background = True

    return cmd
