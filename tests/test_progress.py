import time
from dataclasses import dataclass

from gcdsudoku.solver.progress import ProgressMonitor, ProgressUpdate, print_progress


@dataclass
class Counter:
    candidate_tries: int = 0


def test_reports_until_stopped():
    source = Counter()
    updates: list[ProgressUpdate] = []
    with ProgressMonitor(12345679, source, interval=0.01, callback=updates.append) as monitor:
        for _ in range(10):
            source.candidate_tries += 100
            time.sleep(0.01)
    assert not monitor.is_alive()

    n_updates = len(updates)
    time.sleep(0.05)
    assert len(updates) == n_updates
    assert n_updates > 0
    assert all(update.divisor == 12345679 for update in updates)
    tries = [update.candidate_tries for update in updates]
    assert tries == sorted(tries)
    elapsed = [update.elapsed for update in updates]
    assert elapsed == sorted(elapsed)


def test_monitor_does_not_touch_source():
    source = Counter(candidate_tries=7)
    with ProgressMonitor(9, source, interval=0.001, callback=lambda update: None):
        time.sleep(0.02)
    assert source.candidate_tries == 7


def test_long_interval_reports_nothing():
    updates = []
    with ProgressMonitor(9, Counter(), interval=60, callback=updates.append):
        pass
    assert updates == []


def test_snapshot():
    monitor = ProgressMonitor(21, Counter(candidate_tries=5), interval=1)
    update = monitor.snapshot()
    assert update.divisor == 21
    assert update.candidate_tries == 5
    assert update.elapsed >= 0


def test_print_progress(capsys):
    print_progress(ProgressUpdate(divisor=37, candidate_tries=1234567, elapsed=75.5))
    out = capsys.readouterr().out
    assert out.strip() == (
        "Progress - divisor: 37, candidates tried: 1,234,567, elapsed: 00:01:15.50"
    )
