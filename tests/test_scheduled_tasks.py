import roster.extensions
from roster.admission import LEDGER_EXTENSION_KEY, RegistrationLedger
from roster.scheduled_tasks import init_scheduled_tasks, sweep_registration_ledger_job


class FakeScheduler:
    def __init__(self, running=False):
        self.running = running
        self.jobs = []

    def add_job(self, **kwargs):
        self.jobs.append(kwargs)

    def start(self):
        self.running = True


def test_scheduler_not_started_in_testing(app):
    assert app.config["ENV"] == "testing"
    assert roster.extensions.scheduler.running is False


def test_init_registers_sweep_job(app, monkeypatch):
    fake = FakeScheduler()
    monkeypatch.setattr(roster.extensions, "scheduler", fake)

    init_scheduled_tasks(app)

    assert fake.running is True
    assert len(fake.jobs) == 1
    job = fake.jobs[0]
    assert job["id"] == "sweep_registration_ledger"
    assert job["trigger"] == "interval"
    assert job["seconds"] == app.extensions[LEDGER_EXTENSION_KEY].cooldown_seconds
    assert job["max_instances"] == 1


def test_init_skips_running_scheduler(app, monkeypatch):
    fake = FakeScheduler(running=True)
    monkeypatch.setattr(roster.extensions, "scheduler", fake)
    init_scheduled_tasks(app)
    assert fake.jobs == []


def test_sweep_job_drops_stale_entries(app, monkeypatch):
    now = [0.0]
    ledger = RegistrationLedger(cooldown_seconds=60, clock=lambda: now[0])
    ledger.check_and_record("10.0.0.1:21-A-00001")
    monkeypatch.setitem(app.extensions, LEDGER_EXTENSION_KEY, ledger)

    now[0] = 61.0
    sweep_registration_ledger_job(app)
    assert len(ledger) == 0


def test_sweep_job_logs_failures(app, monkeypatch, caplog):
    class BrokenLedger:
        def sweep(self):
            raise RuntimeError("boom")

    monkeypatch.setitem(app.extensions, LEDGER_EXTENSION_KEY, BrokenLedger())
    sweep_registration_ledger_job(app)
    assert "Registration ledger sweep failed: boom" in caplog.text
