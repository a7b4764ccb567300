"""Line grammar for model replies.

    line     := ws* "[" category "]" ws* value
    category := (letter | "_")+
    value    := any text to end of line, trimmed

Lines that do not match are ignored. A match is accepted when its value is
longer than two characters; in strict mode placeholder-looking values are
rejected as well.
"""

import re

from docshield.scan.models import Finding

MIN_VALUE_LENGTH = 3

_LINE_RE = re.compile(r"^\[([A-Z_]+)\]\s*(.*)$", re.IGNORECASE)
_PLACEHOLDER_RE = re.compile(
    r"\[.*\]|example|not specified|information not|synthetic|(?-i:\b[A-Z]+(?:_[A-Z]+)*_\d+\b)",
    re.IGNORECASE,
)


def parse_line(line: str) -> Finding | None:
    """Parse one line into a Finding, or None when it does not match the grammar."""
    match = _LINE_RE.match(line.strip())
    if match is None:
        return None
    category = match.group(1).upper()
    value = match.group(2).strip()
    if len(value) < MIN_VALUE_LENGTH:
        return None
    return Finding(category=category, value=value)


def is_placeholder(value: str) -> bool:
    return _PLACEHOLDER_RE.search(value) is not None


def parse_response(raw: str, *, strict: bool = False) -> list[Finding]:
    """Extract findings from a model reply, in line order (duplicates kept)."""
    findings: list[Finding] = []
    for line in raw.splitlines():
        finding = parse_line(line)
        if finding is None:
            continue
        if strict and is_placeholder(finding.value):
            continue
        findings.append(finding)
    return findings
