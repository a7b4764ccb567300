from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from docshield.scan.models import Finding


@dataclass(frozen=True)
class ScanState:
    """Accumulator threaded through the merge step of every batch.

    Immutable: ``merge`` returns a new state. ``seen_keys`` holds
    ``lowercase(value) + "|" + category`` for every finding; the first
    occurrence of a key wins and keys are never removed.
    """

    known_values: tuple[str, ...] = ()
    seen_keys: frozenset[str] = frozenset()
    findings: tuple[Finding, ...] = ()

    def recent_known_values(self, window: int) -> list[str]:
        """Most recent *window* accepted values, oldest first."""
        if window <= 0:
            return []
        return list(self.known_values[-window:])

    def merge(self, candidates: Iterable[Finding]) -> ScanState:
        known = list(self.known_values)
        seen = set(self.seen_keys)
        findings = list(self.findings)
        for finding in candidates:
            key = finding.dedup_key
            if key in seen:
                continue
            seen.add(key)
            findings.append(finding)
            known.append(finding.value)
        return ScanState(
            known_values=tuple(known),
            seen_keys=frozenset(seen),
            findings=tuple(findings),
        )
