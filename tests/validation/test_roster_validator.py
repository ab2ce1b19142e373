from rostercheck.domain.models import FindingKind, RosterRecord
from rostercheck.domain.parsing.roster_parser import parse_roster
from rostercheck.domain.validation import RosterValidator, ValidationOptions, validate_roster


def _rec(email: str, role: str, reports_to: str = "") -> RosterRecord:
    return RosterRecord(email=email, full_name=email.split("@")[0], role=role, reports_to=reports_to)


def test_cycle_findings_follow_rule_findings():
    records = [
        _rec("a@x.io", "Manager", "b@x.io"),
        _rec("b@x.io", "Manager", "a@x.io"),
        _rec("c@x.io", "Caller", "ghost@x.io"),
    ]
    findings = validate_roster(records)

    assert [(f.email, f.kind) for f in findings] == [
        ("c@x.io", FindingKind.INVALID_SUPERVISOR),
        ("a@x.io", FindingKind.CYCLE_DETECTED),
        ("b@x.io", FindingKind.CYCLE_DETECTED),
    ]


def test_cycle_with_role_violations_reports_both():
    records = [
        _rec("a@x.io", "Admin", "b@x.io"),
        _rec("b@x.io", "Manager", "c@x.io"),
        _rec("c@x.io", "Caller", "a@x.io"),
    ]
    findings = validate_roster(records)

    rule_kinds = [f.kind for f in findings[:3]]
    assert rule_kinds == [FindingKind.HIERARCHY_VIOLATION] * 3
    cycle = findings[3:]
    assert [f.email for f in cycle] == ["a@x.io", "b@x.io", "c@x.io"]
    assert all("a@x.io" in f.detail and "b@x.io" in f.detail and "c@x.io" in f.detail for f in cycle)


def test_validation_is_idempotent():
    records = [
        _rec("root@x.io", "Root"),
        _rec("a@x.io", "Admin", "root@x.io;m@x.io"),
        _rec("m@x.io", "Manager", "a@x.io"),
        _rec("c@x.io", "Caller", "a@x.io;ghost@x.io"),
    ]
    validator = RosterValidator()

    assert validator.validate(records) == validator.validate(records)
    assert validate_roster(records) == validate_roster(tuple(records))


def test_empty_roster_has_no_findings():
    assert validate_roster([]) == []


def test_invalid_roles_reported_when_enabled():
    records = [_rec("root@x.io", "Root"), _rec("x@x.io", "Intern", "root@x.io")]

    assert validate_roster(records) == []

    findings = validate_roster(records, ValidationOptions(report_invalid_roles=True))
    assert [f.kind for f in findings] == [FindingKind.INVALID_ROLE]
    assert findings[0].detail == "Unknown role 'Intern'; expected one of Root, Admin, Manager, Caller"
    assert findings[0].row_index == 3


def test_duplicate_emails_reported_when_enabled():
    records = [
        _rec("root@x.io", "Root"),
        _rec("a@x.io", "Admin", "root@x.io"),
        _rec("a@x.io", "Admin", "root@x.io"),
    ]

    assert validate_roster(records) == []

    findings = validate_roster(records, ValidationOptions(report_duplicate_emails=True))
    assert [(f.row_index, f.kind) for f in findings] == [
        (3, FindingKind.DUPLICATE_EMAIL),
        (4, FindingKind.DUPLICATE_EMAIL),
    ]
    assert findings[0].detail == "Email a@x.io appears 2 times; the last occurrence (row 4) is used as supervisor"


def test_optional_findings_precede_multiple_supervisors():
    records = [_rec("x@x.io", "Boss", "a@x.io;b@x.io"), _rec("x@x.io", "Boss")]
    options = ValidationOptions(report_duplicate_emails=True, report_invalid_roles=True)
    findings = validate_roster(records, options)

    assert [f.kind for f in findings[:5]] == [
        FindingKind.INVALID_ROLE,
        FindingKind.DUPLICATE_EMAIL,
        FindingKind.MULTIPLE_SUPERVISORS,
        FindingKind.INVALID_SUPERVISOR,
        FindingKind.INVALID_SUPERVISOR,
    ]


def test_parse_then_validate_end_to_end():
    text = "\n".join(
        [
            "Email,FullName,Role,ReportsTo",
            "root@acme.io,Ada Root,Root,",
            'admin@acme.io,"Admin, Bob",Admin,root@acme.io',
            "mgr@acme.io,Mia Manager,Manager,admin@acme.io",
            "",
            "c1@acme.io,Cal One,Caller,admin@acme.io",
            '"c2@acme.io","Cal Two",Caller,"mgr@acme.io;nobody@acme.io"',
        ]
    )
    findings = validate_roster(parse_roster(text))

    assert [(f.row_index, f.email, f.kind) for f in findings] == [
        (5, "c1@acme.io", FindingKind.HIERARCHY_VIOLATION),
        (6, "c2@acme.io", FindingKind.MULTIPLE_SUPERVISORS),
        (6, "c2@acme.io", FindingKind.INVALID_SUPERVISOR),
    ]


def test_rule_order_follows_options():
    assert [rule.name for rule in RosterValidator().rules] == ["multiple_supervisors", "supervisor"]

    validator = RosterValidator(ValidationOptions(report_duplicate_emails=True, report_invalid_roles=True))
    assert [rule.name for rule in validator.rules] == [
        "invalid_role",
        "duplicate_email",
        "multiple_supervisors",
        "supervisor",
    ]
