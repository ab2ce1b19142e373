from __future__ import annotations

from dataclasses import asdict
from typing import Any, Iterable

from rostercheck.common.time import getNowIso
from rostercheck.domain.models import Finding, RosterRecord
from rostercheck.domain.reporting.models import (
    ReportDiagnostic,
    ReportEnvelope,
    ReportItem,
    ReportMeta,
    ReportSummary,
)

STATUS_OK = "OK"
STATUS_FLAGGED = "FLAGGED"


class ReportCollector:
    """
    Назначение/ответственность:
        Единый сборщик отчёта команды: мета, счётчики, записи с замечаниями, контекст.
    """

    def __init__(self, run_id: str, command: str, started_at: str | None = None) -> None:
        self.meta = ReportMeta(
            run_id=run_id,
            command=command,
            started_at=started_at or getNowIso(),
        )
        self.summary = ReportSummary()
        self.items: list[ReportItem] = []
        self.context: dict[str, Any] = {}
        self.status: str | None = None

    def set_meta(
        self,
        *,
        source_path: str | None = None,
        items_limit: int | None = None,
        app_version: str | None = None,
    ) -> None:
        if source_path is not None:
            self.meta.source_path = source_path
        if items_limit is not None:
            self.meta.items_limit = items_limit
        if app_version is not None:
            self.meta.app_version = app_version

    def set_context(self, name: str, value: dict[str, Any]) -> None:
        self.context[name] = value

    def fail(self, reason: str, details: dict[str, Any] | None = None) -> None:
        """
        Назначение:
            Фиксирует критическую ошибку запуска (например, неверный заголовок).
        """
        self.status = "FAILED"
        self.set_context("error", {"message": reason, **(details or {})})

    def add_record(
        self,
        *,
        row_index: int,
        record: RosterRecord,
        findings: Iterable[Finding],
        store: bool = True,
    ) -> None:
        finding_list = list(findings)
        status = STATUS_FLAGGED if finding_list else STATUS_OK

        self.summary.rows_total += 1
        if finding_list:
            self.summary.rows_flagged += 1
        else:
            self.summary.rows_passed += 1

        if not store:
            return
        if self._should_store_item():
            self.items.append(
                ReportItem(
                    status=status,
                    row_index=row_index,
                    email=record.email,
                    payload={
                        "email": record.email,
                        "full_name": record.full_name,
                        "role": record.role,
                        "reports_to": record.reports_to,
                        "line_no": record.line_no,
                    },
                    diagnostics=[self._from_finding(finding) for finding in finding_list],
                )
            )
        else:
            self.meta.items_truncated = True

    def count_findings(self, findings: Iterable[Finding]) -> None:
        for finding in findings:
            self.summary.findings_total += 1
            key = finding.kind.code
            self.summary.by_kind[key] = self.summary.by_kind.get(key, 0) + 1

    def finish(self, finished_at: str | None = None, duration_ms: int | None = None) -> None:
        self.meta.finished_at = finished_at or getNowIso()
        self.meta.duration_ms = duration_ms
        if self.status is None:
            self.status = self._derive_status()

    def build(self) -> ReportEnvelope:
        return ReportEnvelope(
            status=self.status or self._derive_status(),
            meta=self.meta,
            summary=self.summary,
            items=self.items,
            context=self.context,
        )

    def _should_store_item(self) -> bool:
        limit = self.meta.items_limit
        if limit is None:
            return True
        return len(self.items) < limit

    def _derive_status(self) -> str:
        if self.summary.findings_total == 0:
            return "SUCCESS"
        return "INVALID"

    @staticmethod
    def _from_finding(finding: Finding) -> ReportDiagnostic:
        return ReportDiagnostic(
            code=finding.kind.code,
            label=finding.kind.value,
            row_index=finding.row_index,
            message=finding.detail,
        )


def asdict_report(envelope: ReportEnvelope) -> dict[str, Any]:
    """
    Назначение:
        Сериализация отчёта в dict для JSON.
    """
    return {
        "status": envelope.status,
        "meta": asdict(envelope.meta),
        "summary": asdict(envelope.summary),
        "items": [
            {
                "status": item.status,
                "row_index": item.row_index,
                "email": item.email,
                "payload": item.payload,
                "diagnostics": [asdict(diag) for diag in item.diagnostics],
            }
            for item in envelope.items
        ],
        "context": envelope.context,
    }
