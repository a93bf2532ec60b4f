"""Forward raw git output to the output channel as tidy entries."""

from __future__ import annotations

import re

from gitboot.host import OutputChannel

__all__ = ["GitOutputSink"]

_LINE_BREAK = re.compile(r"\r?\n")
_BLANK = re.compile(r"^\s*$")


class GitOutputSink:
    """Turn a chunk of subprocess output into one output-channel entry.

    Trailing whitespace-only lines are dropped; blank lines in the middle
    are kept.

    Example:
        >>> sink = GitOutputSink(channel)
        >>> sink.append("> git status\\r\\nOn branch main\\n\\n\\n")
        # channel.append_line("> git status\\nOn branch main")
    """

    def __init__(self, channel: OutputChannel) -> None:
        self._channel = channel

    def append(self, raw: str) -> None:
        lines = _LINE_BREAK.split(raw)

        while lines and _BLANK.match(lines[-1]):
            lines.pop()

        self._channel.append_line("\n".join(lines))

    __call__ = append
