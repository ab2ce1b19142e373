from __future__ import annotations

from dataclasses import dataclass

from rostercheck.domain.models import Role


@dataclass(frozen=True)
class SupervisorRequirement:
    """
    Назначение:
        Какие роли допустимы у руководителя для роли подчинённого.

    Поля:
        allowed: допустимые роли руководителя.
        wording: формулировка требования для текста замечания.
    """

    allowed: frozenset[Role]
    wording: str

    def permits(self, supervisor_role: str) -> bool:
        return Role.parse(supervisor_role) in self.allowed


ROLE_POLICY: dict[Role, SupervisorRequirement] = {
    Role.ADMIN: SupervisorRequirement(frozenset({Role.ROOT}), "only to Root"),
    Role.MANAGER: SupervisorRequirement(frozenset({Role.ADMIN, Role.MANAGER}), "to Admin or Manager"),
    Role.CALLER: SupervisorRequirement(frozenset({Role.MANAGER}), "only to Manager"),
}


def requirement_for(role: str) -> SupervisorRequirement | None:
    """
    Назначение:
        Требование к руководителю для роли подчинённого.
        Root и неизвестные роли не проверяются -> None.
    """
    parsed = Role.parse(role)
    if parsed is None:
        return None
    return ROLE_POLICY.get(parsed)
