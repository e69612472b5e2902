from roster.admission import RegistrationLedger


class FakeClock:
    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_ledger(cooldown=60):
    clock = FakeClock()
    return RegistrationLedger(cooldown_seconds=cooldown, clock=clock), clock


def test_make_key_uses_unknown_for_missing_student_id():
    assert RegistrationLedger.make_key("10.0.0.1", "21-A-00001") == "10.0.0.1:21-A-00001"
    assert RegistrationLedger.make_key("10.0.0.1", None) == "10.0.0.1:unknown"


def test_second_attempt_within_window_is_refused():
    ledger, clock = make_ledger()
    key = ledger.make_key("10.0.0.1", "21-A-00001")

    assert ledger.check_and_record(key) is None
    clock.advance(15)
    assert ledger.check_and_record(key) == 45


def test_remaining_seconds_rounds_up():
    ledger, clock = make_ledger()
    key = ledger.make_key("10.0.0.1", "21-A-00001")
    ledger.check_and_record(key)
    clock.advance(59.2)
    assert ledger.check_and_record(key) == 1


def test_attempt_after_window_is_recorded():
    ledger, clock = make_ledger()
    key = ledger.make_key("10.0.0.1", "21-A-00001")
    ledger.check_and_record(key)
    clock.advance(60)
    assert ledger.check_and_record(key) is None
    # The new attempt restarts the window
    clock.advance(1)
    assert ledger.check_and_record(key) == 59


def test_refused_attempt_does_not_extend_window():
    ledger, clock = make_ledger()
    key = ledger.make_key("10.0.0.1", "21-A-00001")
    ledger.check_and_record(key)
    clock.advance(30)
    ledger.check_and_record(key)
    clock.advance(30)
    assert ledger.check_and_record(key) is None


def test_distinct_keys_are_independent():
    ledger, _ = make_ledger()
    assert ledger.check_and_record(ledger.make_key("10.0.0.1", "21-A-00001")) is None
    assert ledger.check_and_record(ledger.make_key("10.0.0.2", "21-A-00001")) is None
    assert ledger.check_and_record(ledger.make_key("10.0.0.1", "21-A-00002")) is None
    assert len(ledger) == 3


def test_sweep_removes_only_stale_entries():
    ledger, clock = make_ledger()
    old = ledger.make_key("10.0.0.1", "21-A-00001")
    recent = ledger.make_key("10.0.0.2", "21-A-00002")

    ledger.check_and_record(old)
    clock.advance(45)
    ledger.check_and_record(recent)
    clock.advance(20)

    assert ledger.sweep() == 1
    assert old not in ledger
    assert recent in ledger


def test_clear_empties_ledger():
    ledger, _ = make_ledger()
    ledger.check_and_record("a:b")
    ledger.clear()
    assert len(ledger) == 0
