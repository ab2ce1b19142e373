from __future__ import annotations

import logging
from typing import Iterator

from rostercheck.domain.models import Finding, FindingKind, RosterRecord, row_index_for

logger = logging.getLogger(__name__)

CYCLE_ARROW = " → "

_EXHAUSTED = object()


class CycleDetector:
    """
    Назначение/ответственность:
        Поиск циклов в графе подчинения (подчинённый -> каждый его руководитель).

    Инварианты:
        - Состояние обхода (visited) принадлежит экземпляру; экземпляр создаётся на один запуск.
        - Обход итеративный, глубина цепочек не ограничена стеком вызовов.
        - Ссылка на отсутствующего руководителя - тупик: цикла не образует и замечаний не даёт.
        - Каждый узел обходится один раз; цикл, найденный через уже обойдённый узел, повторно не сообщается.
    """

    def __init__(self, records: list[RosterRecord], index: dict[str, RosterRecord]) -> None:
        self.records = records
        self.index = index
        self.visited: set[str] = set()

    def detect(self) -> list[Finding]:
        findings: list[Finding] = []
        for record in self.records:
            if not record.email or record.email in self.visited:
                continue
            for cycle in self._explore(record.email):
                logger.debug("cycle found from %s: %s", record.email, CYCLE_ARROW.join(cycle))
                findings.extend(self._report(cycle))
        return findings

    def _edges(self, email: str) -> Iterator[str]:
        record = self.index.get(email)
        if record is None or not record.reports_to:
            return iter(())
        return (reference for reference in record.supervisors if reference)

    def _explore(self, start: str) -> list[list[str]]:
        """
        Назначение:
            DFS от start. Возвращает найденные циклы (путь от первого вхождения
            узла до него же) в порядке обнаружения.

        Поведение:
            - Ребро в узел на текущем пути даёт цикл; дальше по этому ребру обход не идёт,
              остальные рёбра узла проверяются.
            - Узел снимается с пути только после просмотра всех его рёбер, поэтому
              посещённый узел вне пути всегда полностью обойдён.
        """
        cycles: list[list[str]] = []
        self.visited.add(start)
        path = [start]
        on_path = {start}
        pending = [self._edges(start)]
        while pending:
            target = next(pending[-1], _EXHAUSTED)
            if target is _EXHAUSTED:
                pending.pop()
                on_path.discard(path.pop())
                continue
            if target in on_path:
                cycles.append(path[path.index(target):] + [target])
                continue
            if target in self.visited:
                continue
            self.visited.add(target)
            path.append(target)
            on_path.add(target)
            pending.append(self._edges(target))
        return cycles

    def _report(self, cycle: list[str]) -> list[Finding]:
        members = set(cycle)
        detail = f"Part of reporting cycle: {CYCLE_ARROW.join(cycle)}"
        return [
            Finding(
                row_index=row_index_for(position),
                email=record.email,
                full_name=record.full_name,
                kind=FindingKind.CYCLE_DETECTED,
                detail=detail,
            )
            for position, record in enumerate(self.records)
            if record.email in members
        ]


def detect_cycles(records: list[RosterRecord], index: dict[str, RosterRecord]) -> list[Finding]:
    return CycleDetector(records, index).detect()
