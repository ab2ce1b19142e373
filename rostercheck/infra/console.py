from __future__ import annotations

from typing import Iterable

import typer

from rostercheck.domain.models import Finding, RosterRecord, row_index_for
from rostercheck.domain.reporting.grouping import count_by_kind, findings_by_email

STYLE_BY_CODE = {
    "HIERARCHY_VIOLATION": typer.colors.RED,
    "MULTIPLE_SUPERVISORS": typer.colors.YELLOW,
    "CYCLE_DETECTED": typer.colors.MAGENTA,
    "INVALID_SUPERVISOR": typer.colors.RED,
    "DUPLICATE_EMAIL": typer.colors.CYAN,
    "INVALID_ROLE": typer.colors.BLUE,
}


def formatRecordLine(rowIndex: int, record: RosterRecord, findings: list[Finding]) -> str:
    """
    Назначение:
        Строка таблицы: номер строки, поля записи и виды замечаний (или OK).
    """
    kinds = ", ".join(dict.fromkeys(f.kind.value for f in findings)) if findings else "OK"
    return (
        f"{rowIndex:>5}  {record.email:<32} {record.full_name:<24} "
        f"{record.role:<8} {record.reports_to or '-':<32} {kinds}"
    )


def printRosterTable(records: Iterable[RosterRecord], findings: list[Finding]) -> None:
    """
    Назначение:
        Печатает ростер с отметками замечаний, затем список замечаний и итог.
    """
    grouped = findings_by_email(findings)
    typer.echo(f"{'row':>5}  {'email':<32} {'full name':<24} {'role':<8} {'reports to':<32} status")
    rows = 0
    for position, record in enumerate(records):
        rows += 1
        typer.echo(formatRecordLine(row_index_for(position), record, grouped.get(record.email, [])))

    for finding in findings:
        label = typer.style(finding.kind.value, fg=STYLE_BY_CODE.get(finding.kind.code))
        typer.echo(f"row {finding.row_index} {finding.email}: {label}: {finding.detail}")

    counts = count_by_kind(findings)
    by_kind = " ".join(f"{code}={count}" for code, count in counts.items())
    typer.echo(f"rows={rows} findings={len(findings)}" + (f" {by_kind}" if by_kind else ""))
