"""
JavaScript compaction.

A single left-to-right scan removes whitespace and comments while keeping the
token stream intact. At every cursor position the recognizers are tried in a
fixed order and the first that matches wins:

    1. regex literal, only when preceded by a context that cannot end an
       operand (start of input, an operator/punctuator, ``return``/``throw``)
    2. quoted string
    3. word (identifier, keyword or number)
    4. run of ``+``/``-`` characters
    5. any single character

Each token also swallows the insignificant run (whitespace, ``//`` and
``/* */`` comments) that follows it. Separators are only re-inserted where
dropping them would change the meaning:

    var x      -> var\\nx      two words must not fuse
    return x   -> return x
    a + +b     -> a+\\n+b      "++" would be an increment

This is not a parser. Nothing is validated, unterminated strings and regex
literals fall through to the single-character recognizer, and a number
followed by a member access (``1 .toString()``) is not protected.
"""

from __future__ import annotations

import re

_INSIGNIFICANT_RE = re.compile(r"(?:[ \t\n\r\f\v]|//[^\n]*\n|/\*.*?\*/)*", re.DOTALL)
_STRING_RE = re.compile(r"""'(?:\\.|[^\n'\\])*'|"(?:\\.|[^\n"\\])*\"""", re.DOTALL)
_WORD_RE = re.compile(r"[\w$]+")
_OPERATOR_RE = re.compile(r"[-+]+")

# Characters after which a "/" starts a regex literal rather than a division.
REGEX_CONTEXT_CHARS = frozenset("-+([{}=,:;!%^&*|?~")
REGEX_CONTEXT_WORDS = ("return", "throw")
# Words that must keep a space before the expression that follows them.
SPACED_KEYWORDS = frozenset({"return", "throw", "break"})

# Values of JsScanner.last besides an operator character.
LAST_NONE = ""
LAST_WORD = "word"
LAST_RETURN = "return"


class JsScanner:
    """
    Scanner state for one compaction.

    ``last`` classifies the previously emitted token: ``""`` (nothing that
    needs separating), ``"word"``, ``"return"`` (a keyword that takes an
    operand) or the first character of an operator run.
    """

    def __init__(self, source: str):
        # A trailing newline terminates a final "//" comment.
        self.text = source + "\n"
        self.pos = 0
        self.last = LAST_NONE

    def scan(self) -> str:
        """Compact the whole input and return the result."""
        self.pos = 0
        self.last = LAST_NONE
        if self.match_regex(0) is None:
            self.pos = self.skip_insignificant(0)

        out: list[str] = []
        while self.pos < len(self.text):
            out.append(self.step())
        return "".join(out)

    def step(self) -> str:
        """Consume one token plus trailing insignificant run; return its output."""
        pos = self.pos
        text = self.text

        regex = self.match_regex(pos)
        if regex is not None:
            context, literal, end = regex
            token = context + ("\n" if context == "/" else "") + literal
            # "else return /x/" and "a - -/x/" must not fuse into "elsereturn" or "--"
            fuses = self.last == LAST_WORD if context in REGEX_CONTEXT_WORDS else context == self.last
            if context and fuses:
                token = "\n" + token
            self.last = LAST_NONE
            self.pos = self.skip_insignificant(end)
            return token

        end = self.match_string(pos)
        if end is not None:
            self.pos = self.skip_insignificant(end)
            self.last = LAST_NONE
            return text[pos:end]

        end = self.match_word(pos)
        if end is not None:
            self.pos = self.skip_insignificant(end)
            return self._emit_word(text[pos:end])

        end = self.match_operator(pos)
        if end is not None:
            self.pos = self.skip_insignificant(end)
            return self._emit_operator(text[pos:end])

        self.pos = self.skip_insignificant(pos + 1)
        self.last = LAST_NONE
        return text[pos]

    def _emit_word(self, word: str) -> str:
        if self.last == LAST_WORD:
            prefix = "\n"
        elif self.last == LAST_RETURN:
            prefix = " "
        else:
            prefix = ""
        self.last = LAST_RETURN if word in SPACED_KEYWORDS else LAST_WORD
        return prefix + word

    def _emit_operator(self, run: str) -> str:
        prefix = "\n" if self.last == run[0] else ""
        self.last = run[0]
        return prefix + run

    # --- Recognizers: each returns the end offset of its match, or None ---

    def skip_insignificant(self, pos: int) -> int:
        return _INSIGNIFICANT_RE.match(self.text, pos).end()

    def match_string(self, pos: int) -> int | None:
        m = _STRING_RE.match(self.text, pos)
        return m.end() if m else None

    def match_word(self, pos: int) -> int | None:
        m = _WORD_RE.match(self.text, pos)
        return m.end() if m else None

    def match_operator(self, pos: int) -> int | None:
        m = _OPERATOR_RE.match(self.text, pos)
        return m.end() if m else None

    def match_regex(self, pos: int) -> tuple[str, str, int] | None:
        """
        Match a regex literal together with the context that precedes it.

        Returns ``(context, literal, end)`` where ``context`` is the consumed
        context text (empty at start of input).
        """
        text = self.text
        for context in self._contexts(pos):
            start = self.skip_insignificant(pos + len(context))
            end = self.regex_literal_end(start)
            if end is not None:
                return context, text[start:end], end
        return None

    def _contexts(self, pos: int) -> list[str]:
        text = self.text
        contexts = [""] if pos == 0 else []
        if pos >= len(text):
            return contexts
        char = text[pos]
        if char in REGEX_CONTEXT_CHARS:
            contexts.append(char)
        elif char == "/" and text[pos + 1 : pos + 2] not in ("/", "*"):
            contexts.append(char)
        else:
            for word in REGEX_CONTEXT_WORDS:
                if text.startswith(word, pos):
                    contexts.append(word)
        return contexts

    def regex_literal_end(self, pos: int) -> int | None:
        """End offset of a ``/.../`` literal starting at ``pos``, or None."""
        text = self.text
        n = len(text)
        if pos >= n or text[pos] != "/" or text[pos + 1 : pos + 2] in ("/", "*"):
            return None

        i = pos + 1
        pieces = 0
        while i < n:
            char = text[i]
            if char == "\\":
                if i + 1 >= n or text[i + 1] == "\n":
                    break
                i += 2
            elif char == "[":
                j = self._class_end(i + 1)
                if j == i + 1:
                    break
                i = j
            elif char in "\n/":
                break
            else:
                while i < n and text[i] not in "[\n/\\":
                    i += 1
            pieces += 1

        if pieces and i < n and text[i] == "/":
            return i + 1
        return None

    def _class_end(self, pos: int) -> int:
        """Consume character-class content up to (not including) ``]``."""
        text = self.text
        n = len(text)
        i = pos
        while i < n:
            if text[i] == "\\" and i + 1 < n and text[i + 1] != "\n":
                i += 2
            elif text[i] != "]":
                i += 1
            else:
                break
        return i


def compact_js(buffer: str) -> str:
    """Compact JavaScript source."""
    return JsScanner(buffer).scan()
