"""
Text normalization for snippet comparison.

Strict normalization tolerates formatting (whitespace, curly quotes) but not
content changes. Loose normalization also erases case, quotes, comments and
repeated semicolons so minified or reformatted tags still compare equal; a
match found that way is always reported as fuzzy.
"""
import re

_WHITESPACE_RE = re.compile(r"\s+")
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_SEMICOLONS_RE = re.compile(r";+")
_QUOTES_RE = re.compile(r"[\"'`]")
_PAREN_BRACE_RE = re.compile(r"\)\s*\{")
_BRACE_PAREN_RE = re.compile(r"\}\s*\)")

# One character in, one character out: offsets survive quote mapping.
_CURLY_QUOTES = str.maketrans({
    "“": '"', "”": '"', "„": '"', "‟": '"',
    "‘": "'", "’": "'", "‚": "'", "‛": "'",
})

_BASIC_ENTITIES = [
    ("&quot;", '"'),
    ("&#34;", '"'),
    ("&apos;", "'"),
    ("&#39;", "'"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
]


def collapse_whitespace(s: str) -> str:
    return _WHITESPACE_RE.sub(" ", s or "").strip()


def normalize_strict(s: str) -> str:
    return collapse_whitespace(s).translate(_CURLY_QUOTES)


def normalize_loose(s: str) -> str:
    s = (s or "").lower()
    s = _COMMENT_RE.sub("", s)
    s = _WHITESPACE_RE.sub("", s)
    s = _SEMICOLONS_RE.sub(";", s)
    s = _QUOTES_RE.sub("", s)
    s = _PAREN_BRACE_RE.sub("){", s)
    return _BRACE_PAREN_RE.sub("})", s)


def decode_basic_entities(s: str) -> str:
    """Decode the handful of entities CMSs use to escape inline pixel code."""
    for entity, char in _BASIC_ENTITIES:
        s = s.replace(entity, char)
    return s
