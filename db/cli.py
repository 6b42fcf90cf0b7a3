"""
Console reporting for seed scripts.

Lines are coloured only when the stream is a terminal so captured output stays plain.
"""

from __future__ import annotations

import sys
from typing import TextIO


RESET = "\x1b[0m"
BOLD = "\x1b[1m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RED = "\x1b[31m"


class Console:
    def __init__(self, stream: TextIO | None = None, color: bool | None = None):
        self.stream = stream or sys.stdout
        self.color = self.stream.isatty() if color is None else color

    def _write(self, text: str, *codes: str) -> None:
        if self.color and codes:
            text = "".join(codes) + text + RESET
        print(text, file=self.stream)

    def subheading(self, text: str) -> None:
        self._write(text, BOLD)

    def success(self, text: str) -> None:
        self._write(text, GREEN)

    def warn(self, text: str) -> None:
        self._write(text, YELLOW)

    def error(self, text: str) -> None:
        self._write(text, RED)

    def print_errors(self, errors: dict[str, list[str]]) -> None:
        """One line per field error, e.g. `  email has already been taken`."""
        for field, messages in errors.items():
            for message in messages:
                self.error(f"  {field} {message}")
        self._write("")
