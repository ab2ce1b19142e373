from __future__ import annotations

from typing import Iterable

from rostercheck.domain.models import Finding


def findings_by_email(findings: Iterable[Finding]) -> dict[str, list[Finding]]:
    """
    Назначение:
        Группирует замечания по email для привязки к строкам при отображении.

    Инварианты:
        - Несколько замечаний на один email сохраняются в исходном порядке.
    """
    grouped: dict[str, list[Finding]] = {}
    for finding in findings:
        grouped.setdefault(finding.email, []).append(finding)
    return grouped


def count_by_kind(findings: Iterable[Finding]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for finding in findings:
        counts[finding.kind.code] = counts.get(finding.kind.code, 0) + 1
    return counts
