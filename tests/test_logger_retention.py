import os

from logger.file import enforce_retention


def test_retention_prunes_old_logs(tmp_path):
    for i in range(5):
        path = tmp_path / f"{i}.log"
        path.write_text("x")
        os.utime(path, (1_000_000 + i, 1_000_000 + i))

    removed = enforce_retention(tmp_path, keep=2)

    assert removed == 3
    assert sorted(p.name for p in tmp_path.glob("*.log")) == ["3.log", "4.log"]


def test_retention_disabled_keeps_everything(tmp_path):
    for i in range(3):
        (tmp_path / f"{i}.log").write_text("x")

    assert enforce_retention(tmp_path, keep=0) == 0
    assert len(list(tmp_path.glob("*.log"))) == 3
