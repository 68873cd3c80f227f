"""End-to-end run of the driver script on a small box."""
from collections import Counter

import monte_carlo


def test_driver_resolves_overlapping_actions(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("REACTIONS_DB_PATH", str(tmp_path / "missing.db"))
    outcomes = monte_carlo.main(["--pairs", "30", "--overlap", "1.0", "--seed", "4", "--log-level", "WARNING"])

    statuses = Counter(o.status.value for o in outcomes)
    assert len(outcomes) == 60
    assert statuses["committed"] > 0
    assert statuses["invalid"] > 0
    assert all(o.conservation["conserved"] for o in outcomes if o.committed)
    assert "Resolution complete" in capsys.readouterr().out


def test_driver_is_reproducible(monkeypatch, tmp_path):
    monkeypatch.setenv("REACTIONS_DB_PATH", str(tmp_path / "missing.db"))
    args = ["--pairs", "10", "--seed", "8", "--log-level", "ERROR"]
    first = [(o.status, o.id_process) for o in monte_carlo.main(args)]
    second = [(o.status, o.id_process) for o in monte_carlo.main(args)]
    assert first == second
