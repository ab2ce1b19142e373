from rostercheck.domain.models import FindingKind, RosterRecord
from rostercheck.domain.validation.cycles import CycleDetector, detect_cycles
from rostercheck.domain.validation.index import build_index


def _rec(email: str, reports_to: str = "", role: str = "Manager") -> RosterRecord:
    return RosterRecord(email=email, full_name=email.split("@")[0], role=role, reports_to=reports_to)


def _detect(records):
    return detect_cycles(records, build_index(records))


def test_three_node_cycle_reports_each_member_once():
    records = [_rec("a@x.io", "b@x.io"), _rec("b@x.io", "c@x.io"), _rec("c@x.io", "a@x.io")]
    findings = _detect(records)

    assert [f.email for f in findings] == ["a@x.io", "b@x.io", "c@x.io"]
    assert all(f.kind is FindingKind.CYCLE_DETECTED for f in findings)
    assert {f.detail for f in findings} == {"Part of reporting cycle: a@x.io → b@x.io → c@x.io → a@x.io"}
    assert [f.row_index for f in findings] == [2, 3, 4]


def test_cycle_path_starts_at_first_occurrence():
    records = [_rec("d@x.io", "a@x.io"), _rec("a@x.io", "b@x.io"), _rec("b@x.io", "a@x.io")]
    findings = _detect(records)

    assert [f.email for f in findings] == ["a@x.io", "b@x.io"]
    assert findings[0].detail == "Part of reporting cycle: a@x.io → b@x.io → a@x.io"


def test_members_emitted_in_roster_order():
    records = [_rec("c@x.io", "a@x.io"), _rec("b@x.io", "c@x.io"), _rec("a@x.io", "b@x.io")]
    findings = _detect(records)

    assert [f.email for f in findings] == ["c@x.io", "b@x.io", "a@x.io"]
    assert findings[0].detail == "Part of reporting cycle: c@x.io → a@x.io → b@x.io → c@x.io"


def test_self_reference_is_a_cycle():
    findings = _detect([_rec("m@x.io", "m@x.io")])

    assert len(findings) == 1
    assert findings[0].detail == "Part of reporting cycle: m@x.io → m@x.io"


def test_disjoint_chains_have_no_cycles():
    records = [
        _rec("r1@x.io"),
        _rec("a@x.io", "r1@x.io"),
        _rec("b@x.io", "a@x.io"),
        _rec("r2@x.io"),
        _rec("c@x.io", "r2@x.io"),
        _rec("d@x.io", "r2@x.io"),
    ]

    assert _detect(records) == []


def test_shared_supervisor_is_not_a_cycle():
    records = [_rec("a@x.io", "m@x.io;n@x.io"), _rec("m@x.io", "r@x.io"), _rec("n@x.io", "r@x.io"), _rec("r@x.io")]

    assert _detect(records) == []


def test_dangling_reference_is_inert():
    records = [_rec("a@x.io", "ghost@x.io"), _rec("b@x.io", "a@x.io")]

    assert _detect(records) == []


def test_independent_cycles_are_all_reported():
    records = [
        _rec("a@x.io", "b@x.io"),
        _rec("b@x.io", "a@x.io"),
        _rec("c@x.io", "d@x.io"),
        _rec("d@x.io", "c@x.io"),
    ]
    findings = _detect(records)

    assert [f.email for f in findings] == ["a@x.io", "b@x.io", "c@x.io", "d@x.io"]
    assert findings[2].detail == "Part of reporting cycle: c@x.io → d@x.io → c@x.io"


def test_entry_into_reported_cycle_is_not_reported_again():
    records = [_rec("a@x.io", "b@x.io"), _rec("b@x.io", "a@x.io"), _rec("x@x.io", "a@x.io")]
    findings = _detect(records)

    assert [f.email for f in findings] == ["a@x.io", "b@x.io"]


def test_cycle_behind_reported_cycle_is_still_found():
    records = [_rec("a@x.io", "b@x.io;c@x.io"), _rec("b@x.io", "a@x.io"), _rec("c@x.io", "a@x.io")]
    findings = _detect(records)

    assert [f.email for f in findings] == ["a@x.io", "b@x.io", "a@x.io", "c@x.io"]
    assert findings[0].detail == "Part of reporting cycle: a@x.io → b@x.io → a@x.io"
    assert findings[2].detail == "Part of reporting cycle: a@x.io → c@x.io → a@x.io"


def test_longer_cycle_sharing_an_edge_with_reported_cycle():
    records = [
        _rec("a@x.io", "b@x.io"),
        _rec("b@x.io", "a@x.io;c@x.io"),
        _rec("c@x.io", "d@x.io"),
        _rec("d@x.io", "a@x.io"),
    ]
    findings = _detect(records)

    assert [f.email for f in findings] == ["a@x.io", "b@x.io", "a@x.io", "b@x.io", "c@x.io", "d@x.io"]
    assert findings[-1].detail == "Part of reporting cycle: a@x.io → b@x.io → c@x.io → d@x.io → a@x.io"


def test_cycle_through_second_supervisor():
    records = [_rec("a@x.io", "r@x.io;b@x.io"), _rec("b@x.io", "a@x.io"), _rec("r@x.io")]
    findings = _detect(records)

    assert [f.email for f in findings] == ["a@x.io", "b@x.io"]


def test_long_chain_does_not_hit_recursion_limit():
    size = 5000
    records = [_rec(f"u{i}@x.io", f"u{i + 1}@x.io") for i in range(size - 1)] + [_rec(f"u{size - 1}@x.io")]

    assert _detect(records) == []

    closed = records[:-1] + [_rec(f"u{size - 1}@x.io", "u0@x.io")]
    findings = _detect(closed)
    assert len(findings) == size


def test_detector_state_is_per_instance():
    records = [_rec("a@x.io", "b@x.io"), _rec("b@x.io", "a@x.io")]
    index = build_index(records)

    first = CycleDetector(records, index).detect()
    second = CycleDetector(records, index).detect()

    assert first == second
    assert len(first) == 2
