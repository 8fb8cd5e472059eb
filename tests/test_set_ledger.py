import pytest

from backend.set_ledger import SetLedger, SetRecord, parse_reps, parse_weight


@pytest.mark.parametrize(
    "value, expected",
    [
        (10, 10),
        ("12", 12),
        (" 8 ", 8),
        (5.0, 5),
        (None, None),
        ("", None),
        (0, None),
        ("0", None),
        (-3, None),
        ("-3", None),
        ("ten", None),
        (7.5, None),
        (True, None),
    ],
)
def test_parse_reps(value, expected):
    assert parse_reps(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("42.5", 42.5),
        (100, 100.0),
        ("", None),
        (None, None),
        ("0", None),
        ("heavy", None),
        ("nan", None),
    ],
)
def test_parse_weight(value, expected):
    assert parse_weight(value) == expected


def test_set_numbers_run_from_one():
    ledger = SetLedger(2)
    for reps in (10, 9, 8, 8):
        ledger.record_set(0, reps, now="2024-01-01T00:00:00Z")
    sets = ledger.sets_for(0)
    assert [record.set_number for record in sets] == [1, 2, 3, 4]
    assert [record.reps for record in sets] == [10, 9, 8, 8]
    assert ledger.sets_for(1) == ()
    assert ledger.total_sets() == 4


@pytest.mark.parametrize("reps", ["", 0, "abc", None])
def test_invalid_reps_are_not_recorded(reps):
    ledger = SetLedger(1)
    ledger.record_set(0, 5)
    assert ledger.record_set(0, reps, 20) is None
    assert len(ledger.sets_for(0)) == 1


def test_record_set_for_unknown_exercise():
    ledger = SetLedger(1)
    assert ledger.record_set(3, 10) is None
    assert ledger.total_sets() == 0


def test_record_timestamp_is_utc():
    record = SetLedger(1).record_set(0, 6, "22.5")
    assert record.weight == pytest.approx(22.5)
    assert record.timestamp.endswith("Z")


def test_seed_tolerates_old_records():
    ledger = SetLedger(1)
    ledger.seed(0, [{"set": 1, "reps": 10, "weight": 50}, {"reps": "8"}, "junk"])
    first, second = ledger.sets_for(0)
    assert first == SetRecord(1, 10, 50.0, "")
    assert second.set_number == 2
    assert second.reps == 8
    assert ledger.record_set(0, 7).set_number == 3


def test_to_dict_carries_both_number_keys():
    record = SetRecord(2, 10, None, "2024-05-01T10:00:00Z")
    assert record.to_dict() == {
        "set": 2,
        "setNumber": 2,
        "reps": 10,
        "weight": None,
        "timestamp": "2024-05-01T10:00:00Z",
    }


def test_records_are_immutable():
    record = SetRecord(1, 5, None, "")
    with pytest.raises(AttributeError):
        record.reps = 6
