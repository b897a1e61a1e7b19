"""
Step declaration grammar for JavaScript/TypeScript step files.

    declaration := KEYWORD ws* "(" ws* STRING [ws* "," handler] ... ")" [";"]
    KEYWORD     := "Given" | "When" | "Then" | "And" | "But"
    STRING      := '...' | "..." | `...`      (backslash escapes allowed)

The scanner walks the source once and skips comments and string literals,
so a keyword that only appears inside either is never reported. Regular
expression literals are not recognised; a quote inside one can confuse
the scan of the rest of that line.
"""
import bisect
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from core.domain.step import StepCall, StepKeyword

QUOTES = "'\"`"

_SIMPLE_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v', '0': '\0'
}


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _line_starts(source: str) -> List[int]:
    starts = [0]
    for index, ch in enumerate(source):
        if ch == "\n":
            starts.append(index + 1)
    return starts


def _skip_line_comment(source: str, i: int) -> int:
    end = source.find("\n", i)
    return len(source) if end == -1 else end


def _skip_block_comment(source: str, i: int) -> int:
    end = source.find("*/", i + 2)
    return len(source) if end == -1 else end + 2


def _skip_trivia(source: str, i: int) -> int:
    """Skip whitespace and comments starting at ``i``."""
    n = len(source)
    while i < n:
        if source[i].isspace():
            i += 1
        elif source.startswith("//", i):
            i = _skip_line_comment(source, i)
        elif source.startswith("/*", i):
            i = _skip_block_comment(source, i)
        else:
            break
    return i


def _decode_escape(source: str, i: int) -> Tuple[str, int]:
    """Decode the escape sequence whose backslash is at ``i - 1``.

    Returns:
        (decoded text, index after the sequence)
    """
    ch = source[i]
    if ch in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[ch], i + 1
    if ch == "\n":
        # Line continuation
        return "", i + 1
    if ch in "xu":
        width = 2 if ch == "x" else 4
        digits = source[i + 1:i + 1 + width]
        if len(digits) == width and all(c in "0123456789abcdefABCDEF" for c in digits):
            return chr(int(digits, 16)), i + 1 + width
    return ch, i + 1


def read_string(source: str, i: int) -> Tuple[Optional[str], int]:
    """Read the string literal whose opening quote is at ``i``.

    Returns:
        (decoded value, index after the closing quote). The value is None
        for an unterminated literal; a single- or double-quoted literal ends
        at the first raw newline.
    """
    quote = source[i]
    n = len(source)
    chunks = []
    j = i + 1
    while j < n:
        ch = source[j]
        if ch == "\\" and j + 1 < n:
            decoded, j = _decode_escape(source, j + 1)
            chunks.append(decoded)
            continue
        if ch == quote:
            return "".join(chunks), j + 1
        if ch == "\n" and quote != "`":
            return None, j
        chunks.append(ch)
        j += 1
    return None, n


def find_call_end(source: str, open_paren: int) -> int:
    """Return the offset just past the ``)`` matching ``open_paren``.

    A ``;`` directly after the parenthesis (spaces allowed) is included.
    An unbalanced call runs to the end of the source.
    """
    n = len(source)
    depth = 0
    i = open_paren
    while i < n:
        ch = source[i]
        if source.startswith("//", i):
            i = _skip_line_comment(source, i)
            continue
        if source.startswith("/*", i):
            i = _skip_block_comment(source, i)
            continue
        if ch in QUOTES:
            _, i = read_string(source, i)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                end = i + 1
                k = end
                while k < n and source[k] in " \t":
                    k += 1
                if k < n and source[k] == ";":
                    end = k + 1
                return end
        i += 1
    return n


class StepDeclarationParser:
    """Tokenizes step-definition source into keyword calls."""

    def __init__(self, keywords: Iterable[StepKeyword] = tuple(StepKeyword)):
        """Initialize parser.

        Args:
            keywords: Keywords recognised as step calls
        """
        self._keywords: Dict[str, StepKeyword] = {k.value: k for k in keywords}

    def iter_calls(self, source: str) -> Iterator[StepCall]:
        """Yield every ``Keyword(`` call in document order."""
        line_starts = _line_starts(source)
        n = len(source)
        i = 0
        while i < n:
            ch = source[i]
            if source.startswith("//", i):
                i = _skip_line_comment(source, i)
            elif source.startswith("/*", i):
                i = _skip_block_comment(source, i)
            elif ch in QUOTES:
                _, i = read_string(source, i)
            elif _is_ident_start(ch) and not (i > 0 and _is_ident_part(source[i - 1])):
                j = i + 1
                while j < n and _is_ident_part(source[j]):
                    j += 1
                keyword = self._keywords.get(source[i:j])
                k = _skip_trivia(source, j) if keyword else j
                if keyword and k < n and source[k] == "(":
                    yield self._read_call(source, i, k, keyword, line_starts)
                    # Resume inside the call so the arguments are scanned too
                    i = k + 1
                else:
                    i = j
            else:
                i += 1

    def _read_call(
        self,
        source: str,
        start: int,
        open_paren: int,
        keyword: StepKeyword,
        line_starts: List[int]
    ) -> StepCall:
        pattern = None
        k = _skip_trivia(source, open_paren + 1)
        if k < len(source) and source[k] in QUOTES:
            value, _ = read_string(source, k)
            # Interpolated template literals are not fixed patterns
            if value is not None and not (source[k] == "`" and "${" in value):
                pattern = value

        line = bisect.bisect_right(line_starts, start)
        line_start = line_starts[line - 1]
        return StepCall(
            keyword=keyword,
            start=start,
            end=find_call_end(source, open_paren),
            line=line,
            pattern=pattern,
            at_line_start=source[line_start:start].strip() == "",
        )

    def parse(self, source: str) -> List[StepCall]:
        """Return the step declarations (primary keyword + pattern) in source."""
        return [call for call in self.iter_calls(source) if call.is_declaration]

    def extract_pairs(self, source: str) -> List[Tuple[StepKeyword, str]]:
        """Return ``(keyword, pattern)`` for every declaration in source."""
        return [(call.keyword, call.pattern) for call in self.parse(source)]


def call_text(source: str, call: StepCall) -> str:
    """Source text of a whole call, from the keyword to its closing parenthesis."""
    return source[call.start:call.end]
