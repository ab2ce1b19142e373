from __future__ import annotations

from collections import Counter
from typing import Iterable

from rostercheck.domain.models import RosterRecord


def build_index(records: Iterable[RosterRecord]) -> dict[str, RosterRecord]:
    """
    Назначение:
        Строит индекс email -> запись для поиска руководителей.

    Инварианты:
        - Повторный email перезаписывает предыдущий (побеждает последняя запись).
    """
    index: dict[str, RosterRecord] = {}
    for record in records:
        index[record.email] = record
    return index


def find_duplicate_emails(records: Iterable[RosterRecord]) -> dict[str, int]:
    """
    Назначение:
        Возвращает email, встречающиеся больше одного раза, с числом вхождений.
    """
    counts = Counter(record.email for record in records)
    return {email: count for email, count in counts.items() if count > 1}
