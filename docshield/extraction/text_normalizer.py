import re

_LINE_BREAK_RE = re.compile(r"\r\n?")
_HORIZONTAL_SPACE_RE = re.compile(r"[ \t]+")
_BLANK_LINE_RE = re.compile(r"\n\s+\n")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Canonicalize whitespace in extracted text.

    Line endings become ``\\n``, non-breaking spaces become spaces, runs of
    spaces/tabs collapse to one space, and runs of blank lines collapse to a
    single blank line. The result is stripped.
    """
    text = _LINE_BREAK_RE.sub("\n", text)
    text = text.replace("\u00a0", " ")
    text = _HORIZONTAL_SPACE_RE.sub(" ", text)
    text = _BLANK_LINE_RE.sub("\n\n", text)
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    return text.strip()
