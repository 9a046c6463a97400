"""A minimal cursor over text for hand-written file parsers."""

from __future__ import annotations

import io
import re

_SEPARATORS = re.compile(r"[ \t\n\r]*")


class SimplestParsing:
    """Text with a read position, and a few primitives to move it."""

    def __init__(self, text: str = ""):
        self._stream = io.StringIO(text)

    def load(self, filename) -> None:
        """Append the contents of ``filename``; the read position is kept."""
        try:
            with open(filename, encoding="utf-8", newline="") as handle:
                content = handle.read()
        except OSError as exc:
            raise ValueError(f"Unable to open file {filename}") from exc
        position = self._stream.tell()
        self._stream.seek(0, io.SEEK_END)
        self._stream.write(content)
        self._stream.seek(position)

    def __call__(self) -> io.StringIO:
        """The underlying stream, positioned at the read cursor."""
        return self._stream

    def _text_and_position(self) -> tuple[str, int]:
        return self._stream.getvalue(), self._stream.tell()

    def find(self, s: str) -> bool:
        """Move past the next occurrence of ``s``.

        If there is none, the cursor ends at the end of the text and False
        is returned.
        """
        text, position = self._text_and_position()
        found = text.find(s, position)
        if found < 0:
            self._stream.seek(len(text))
            return False
        self._stream.seek(found + len(s))
        return True

    def jump_separators(self) -> bool:
        """Skip spaces, tabs and line breaks; False if the text ends first."""
        text, position = self._text_and_position()
        end = _SEPARATORS.match(text, position).end()
        self._stream.seek(end)
        return end < len(text)

    def check_if_next_string(self, s: str) -> bool:
        """Consume ``s`` if the text continues with it; otherwise stay put."""
        text, position = self._text_and_position()
        if text.startswith(s, position):
            self._stream.seek(position + len(s))
            return True
        return False