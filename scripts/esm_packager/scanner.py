from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

QUOTES = ("'", '"', "`")

IMPORT_FROM_RE = re.compile(
    r"(?<![\w$.])import\b(?!\s*[.(])\s*(?:[^'\"`;()=]*?\bfrom\s*)?(['\"])([^'\"\r\n]+)\1"
)
EXPORT_FROM_RE = re.compile(
    r"(?<![\w$.])export\b\s*(?:type\b\s*)?(?:\*\s*(?:as\s+[\w$]+\s*)?|\{[^}]*\}\s*)from\s*(['\"])([^'\"\r\n]+)\1"
)
IMPORT_REQUIRE_RE = re.compile(
    r"(?<![\w$.])import\s+(?:type\s+)?[\w$]+\s*=\s*require\s*\(\s*(['\"])([^'\"\r\n]+)\1\s*\)"
)
DYNAMIC_IMPORT_RE = re.compile(r"(?<![\w$.])import\s*\(\s*(['\"])([^'\"\r\n]+)\1\s*[,)]")

IMPORT_PATTERNS = (IMPORT_FROM_RE, EXPORT_FROM_RE, IMPORT_REQUIRE_RE, DYNAMIC_IMPORT_RE)


@dataclass(frozen=True)
class ImportReference:
    """An import specifier found in a file.

    ``start`` is the offset of the opening quote and ``end`` the offset of the
    closing quote, so ``text[start + 1:end] == specifier``.
    """

    specifier: str
    start: int
    end: int


Scanner = Callable[[str], List[ImportReference]]


def _mask_regions(text: str) -> Tuple[str, str]:
    """Return (comments blanked, comments and string bodies blanked).

    Both views keep every offset and newline of the original text.
    """
    no_comments: List[str] = []
    code_only: List[str] = []
    quote = ""
    escape = False
    idx = 0
    length = len(text)
    while idx < length:
        ch = text[idx]
        if quote:
            no_comments.append(ch)
            if escape:
                escape = False
                code_only.append(" " if ch != "\n" else ch)
            elif ch == "\\":
                escape = True
                code_only.append(" ")
            elif ch == quote:
                quote = ""
                code_only.append(ch)
            elif ch == "\n" and quote != "`":
                # Only template literals span lines; an unclosed ' or " ends here.
                quote = ""
                code_only.append(ch)
            else:
                code_only.append(ch if ch == "\n" else " ")
            idx += 1
            continue
        if ch in QUOTES:
            quote = ch
            no_comments.append(ch)
            code_only.append(ch)
            idx += 1
            continue
        if ch == "/" and idx + 1 < length:
            nxt = text[idx + 1]
            if nxt == "/":
                end = text.find("\n", idx + 2)
                if end == -1:
                    end = length
            elif nxt == "*":
                end = text.find("*/", idx + 2)
                end = length if end == -1 else end + 2
            else:
                end = -1
            if end != -1:
                blank = "".join(c if c in "\r\n" else " " for c in text[idx:end])
                no_comments.append(blank)
                code_only.append(blank)
                idx = end
                continue
        no_comments.append(ch)
        code_only.append(ch)
        idx += 1
    return "".join(no_comments), "".join(code_only)


def mask_comments(text: str) -> str:
    """Replace // and /* */ comments with spaces, keeping offsets stable."""
    return _mask_regions(text)[0]


def scan_imports(text: str) -> List[ImportReference]:
    no_comments, code_only = _mask_regions(text)
    found: Dict[int, ImportReference] = {}
    for pattern in IMPORT_PATTERNS:
        for match in pattern.finditer(no_comments):
            keyword_end = match.start() + 6
            if code_only[match.start() : keyword_end] != no_comments[match.start() : keyword_end]:
                continue
            start = match.start(1)
            if start in found:
                continue
            found[start] = ImportReference(
                specifier=match.group(2),
                start=start,
                end=match.end(2),
            )
    return [found[start] for start in sorted(found)]
