from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ReportMeta:
    """
    Назначение:
        Метаданные запуска команды.
    """

    run_id: str
    command: str
    started_at: str
    source_path: str | None = None
    finished_at: str | None = None
    duration_ms: int | None = None
    items_limit: int | None = None
    items_truncated: bool = False
    app_version: str | None = None


@dataclass
class ReportSummary:
    """
    Назначение:
        Счётчики проверки ростера.
    """

    rows_total: int = 0
    rows_passed: int = 0
    rows_flagged: int = 0
    rows_skipped: int = 0
    findings_total: int = 0
    by_kind: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ReportDiagnostic:
    """
    Назначение:
        Замечание по конкретной записи в отчёте.
    """

    code: str
    label: str
    row_index: int
    message: str


@dataclass
class ReportItem:
    """
    Назначение:
        Единица отчёта: запись ростера и её замечания.
    """

    status: str
    row_index: int
    email: str
    payload: dict[str, Any] | None = None
    diagnostics: list[ReportDiagnostic] = field(default_factory=list)


@dataclass
class ReportEnvelope:
    """
    Назначение:
        Корневой объект отчёта.
    """

    status: str
    meta: ReportMeta
    summary: ReportSummary
    items: list[ReportItem]
    context: dict[str, Any] = field(default_factory=dict)
