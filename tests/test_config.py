import pytest
from pydantic import ValidationError

from gcdsudoku.solver.config import SolverConfig


def test_defaults():
    settings = SolverConfig()
    assert settings.progress_interval > 0
    assert settings.divisor_prefilter_rows >= 0


@pytest.mark.parametrize("interval", [0, -1.0])
def test_progress_interval_must_be_positive(interval):
    with pytest.raises(ValidationError):
        SolverConfig(progress_interval=interval)


def test_progress_interval_from_environment(monkeypatch):
    monkeypatch.setenv("GCDSUDOKU_PROGRESS_INTERVAL", "0")
    with pytest.raises(ValidationError):
        SolverConfig()
    monkeypatch.setenv("GCDSUDOKU_PROGRESS_INTERVAL", "2.5")
    assert SolverConfig().progress_interval == 2.5


def test_unknown_setting_rejected():
    with pytest.raises(ValidationError):
        SolverConfig(colour="red")
