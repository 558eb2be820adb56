"""Quote and comment aware delimiter scanning.

The scanner is a small state machine over ``LexMode``. Structural characters
(braces, brackets, parens, commas...) are only reported while the scanner is
outside every string, template and comment, so callers can count depth
without tripping over ``'{'`` inside a literal or ``// }`` in a comment.
"""

from enum import Enum
from typing import Dict, Iterator, Tuple

NOT_FOUND = -1


class LexMode(Enum):
    """Lexical modes the scanner can be in."""
    OUTSIDE = "outside"
    SINGLE_QUOTE = "single_quote"
    DOUBLE_QUOTE = "double_quote"
    TEMPLATE = "template"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


_OPENING_QUOTES: Dict[str, LexMode] = {
    "'": LexMode.SINGLE_QUOTE,
    '"': LexMode.DOUBLE_QUOTE,
    "`": LexMode.TEMPLATE,
}
_CLOSING_QUOTES: Dict[LexMode, str] = {mode: quote for quote, mode in _OPENING_QUOTES.items()}

BRACKET_PAIRS: Dict[str, str] = {"{": "}", "(": ")", "[": "]"}


class LexicalScanner:
    """Character scanner that remembers its lexical mode between feeds."""

    def __init__(self):
        self.mode = LexMode.OUTSIDE
        self._escaped = False
        self._prev = ""
        self.saw_comment = False

    def feed(self, text: str, start: int = 0) -> Iterator[Tuple[int, str]]:
        """Yield ``(index, char)`` for every character outside all modes."""
        index = start
        length = len(text)

        while index < length:
            char = text[index]

            if self.mode is LexMode.LINE_COMMENT:
                if char == "\n":
                    self.mode = LexMode.OUTSIDE
            elif self.mode is LexMode.BLOCK_COMMENT:
                if self._prev == "*" and char == "/":
                    self.mode = LexMode.OUTSIDE
                    char = ""
            elif self.mode in _CLOSING_QUOTES:
                if self._escaped:
                    self._escaped = False
                elif char == "\\":
                    self._escaped = True
                elif char == _CLOSING_QUOTES[self.mode]:
                    self.mode = LexMode.OUTSIDE
            elif char == "/" and text[index + 1:index + 2] in ("/", "*"):
                if text[index + 1] == "/":
                    self.mode = LexMode.LINE_COMMENT
                else:
                    self.mode = LexMode.BLOCK_COMMENT
                self.saw_comment = True
                self._prev = ""
                index += 2
                continue
            elif char in _OPENING_QUOTES:
                self.mode = _OPENING_QUOTES[char]
            else:
                yield index, char

            self._prev = char
            index += 1


class DepthTracker:
    """Running bracket depth over text fed line by line."""

    def __init__(self, open_chars: str = "{([") -> None:
        self._scanner = LexicalScanner()
        self._closers = {BRACKET_PAIRS[char]: char for char in open_chars}
        self.depths: Dict[str, int] = {char: 0 for char in open_chars}
        self.opened = False
        # Last fed line without comments and string contents
        self.last_code = ""

    def feed_line(self, line: str) -> None:
        code = []
        for _, char in self._scanner.feed(f"{line}\n"):
            code.append(char)
            if char in self.depths:
                self.depths[char] += 1
                self.opened = True
            elif char in self._closers:
                self.depths[self._closers[char]] -= 1
        self.last_code = "".join(code).strip()

    @property
    def in_block_comment(self) -> bool:
        return self._scanner.mode is LexMode.BLOCK_COMMENT

    def depth(self, open_char: str = "{") -> int:
        return self.depths[open_char]

    @property
    def balanced(self) -> bool:
        """True when no tracked bracket kind is left open."""
        return all(depth <= 0 for depth in self.depths.values())

    @property
    def at_zero(self) -> bool:
        return all(depth == 0 for depth in self.depths.values())


def find_matching_close(
    text: str, open_index: int, open_char: str = "{", close_char: str = "}"
) -> int:
    """Return the index of the delimiter closing the one at ``open_index``.

    Returns ``NOT_FOUND`` when the text ends before the depth returns to zero.
    """
    depth = 0
    for index, char in LexicalScanner().feed(text, open_index):
        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return index
    return NOT_FOUND


def find_next_open(text: str, from_index: int, open_char: str = "{") -> int:
    """Return the index of the next unquoted, uncommented ``open_char``."""
    for index, char in LexicalScanner().feed(text, from_index):
        if char == open_char:
            return index
    return NOT_FOUND


def contains_comment(text: str) -> bool:
    """True when ``text`` has a line or block comment outside string literals."""
    scanner = LexicalScanner()
    for _ in scanner.feed(text):
        pass
    return scanner.saw_comment
