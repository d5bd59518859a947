"""End-to-end runs of the coordinator against the in-memory service."""

import io
from pathlib import Path

import pytest

from drive_mirror.config import load_config
from drive_mirror.models import Job, RemoteEntry, TransferStatus
from drive_mirror.pipeline import MirrorCoordinator
from drive_mirror.pipeline import coordinator as coordinator_mod
from drive_mirror.pipeline.discovery import DiscoveryWalker
from drive_mirror.pipeline.jobqueue import JobQueue
from drive_mirror.pipeline.progress import ProgressCounters
from drive_mirror.pipeline.workers import WorkerPool
from drive_mirror.utils.errors import FolderNotFoundError

from conftest import FakeDrive


def _run(drive, root, **kwargs):
    kwargs.setdefault("workers", 4)
    kwargs.setdefault("show_progress", False)
    out = io.StringIO()
    summary = MirrorCoordinator(drive, root, stream=out, **kwargs).run("root")
    return summary, out.getvalue()


def test_first_run_mirrors_scenario(scenario_drive, tmp_path):
    root = tmp_path / "root"
    summary, out = _run(scenario_drive, root)

    assert (root / "F" / "a.txt").read_bytes() == b"0123456789"
    assert (root / "F" / "Doc.docx").read_bytes() == b"exported-docx"
    assert (summary.found, summary.completed, summary.skipped) == (2, 2, 0)
    assert summary.failed == 0
    assert summary.transferred == 2
    assert out.strip() == "Progress: 2 / 2 done (Skipped: 0, Failed: 0) - Finished!"


def test_second_run_skips_everything(scenario_drive, tmp_path):
    root = tmp_path / "root"
    _run(scenario_drive, root)
    scenario_drive.calls.clear()

    summary, _ = _run(scenario_drive, root)
    assert (summary.found, summary.completed, summary.skipped) == (2, 2, 2)
    assert scenario_drive.count("download") == 0
    assert scenario_drive.count("export") == 0
    assert {r.status for r in summary.results} == {TransferStatus.SKIPPED}


def test_pre_existing_file_is_never_overwritten(scenario_drive, tmp_path):
    root = tmp_path / "root"
    (root / "F").mkdir(parents=True)
    (root / "F" / "a.txt").write_bytes(b"local copy")
    summary, _ = _run(scenario_drive, root)
    assert (root / "F" / "a.txt").read_bytes() == b"local copy"
    assert summary.skipped == 1
    assert scenario_drive.count("download") == 0


def test_completed_converges_with_failures(tmp_path):
    drive = FakeDrive(page_size=7)
    for n in range(40):
        drive.add_file("root", f"f{n}", f"f{n}.bin", bytes([n]) * 12)
    drive.add_file("root", "form", "Form", mime_type="application/vnd.google-apps.form")
    for n in range(0, 40, 5):
        drive.download_errors.add(f"f{n}")

    summary, out = _run(drive, tmp_path / "m", workers=6, queue_size=3)
    assert summary.found == 41
    assert summary.completed == summary.found
    assert summary.failed == 8
    assert summary.skipped == 0
    assert len(summary.results) == 41
    assert len(summary.failures) == 8
    assert not list((tmp_path / "m").glob("*.tmp"))
    assert "Failed: 8" in out


def test_unresolvable_source_aborts_before_pipeline(fake_drive, tmp_path):
    with pytest.raises(FolderNotFoundError):
        MirrorCoordinator(fake_drive, tmp_path / "m", show_progress=False).run("missing")
    assert not (tmp_path / "m").exists()


def test_source_path_is_resolved(tmp_path):
    drive = FakeDrive()
    drive.add_folder("root", "p", "Projects")
    drive.add_folder("p", "y", "2024")
    drive.add_file("y", "r", "report.txt", b"hello")
    drive.add_file("root", "other", "other.txt", b"nope")
    out = io.StringIO()
    summary = MirrorCoordinator(
        drive, tmp_path / "m", workers=2, show_progress=False, stream=out
    ).run("Projects/2024")
    assert summary.folder_id == "y"
    assert (tmp_path / "m" / "report.txt").read_bytes() == b"hello"
    assert not (tmp_path / "m" / "other.txt").exists()


def test_dry_run_creates_dirs_only(scenario_drive, tmp_path):
    summary, _ = _run(scenario_drive, tmp_path / "m", dry_run=True)
    assert (tmp_path / "m" / "F").is_dir()
    assert list((tmp_path / "m" / "F").iterdir()) == []
    assert summary.completed == 2
    assert {r.status for r in summary.results} == {TransferStatus.DRY_RUN}
    assert scenario_drive.count("download") == 0


def test_from_config(scenario_drive, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config(overrides={"target_root": tmp_path / "cfg", "transfers.workers": 3})
    coordinator = MirrorCoordinator.from_config(scenario_drive, cfg, show_progress=False)
    assert coordinator.workers == 3
    assert coordinator.temp_suffix == ".tmp"
    coordinator.stream = io.StringIO()
    summary = coordinator.run()
    assert summary.target_root == tmp_path / "cfg"
    assert (tmp_path / "cfg" / "F" / "Doc.docx").exists()


class ExplodingExecutor:
    def execute(self, job):
        raise KeyError("boom")


def test_worker_survives_unexpected_errors(tmp_path):
    counters = ProgressCounters()
    q = JobQueue(10)
    pool = WorkerPool(2, q, ExplodingExecutor(), counters)
    pool.start()
    for n in range(3):
        counters.found.increment()
        q.put(Job(entry=RemoteEntry(id=str(n), name="x"), target=Path(tmp_path / str(n))))
    q.close()
    pool.join()
    assert counters.completed.value == 3
    assert counters.failed.value == 3
    assert all(r.status is TransferStatus.FAILED for r in pool.results)


def test_worker_pool_rejects_zero_workers():
    with pytest.raises(ValueError):
        WorkerPool(0, JobQueue(1), ExplodingExecutor(), ProgressCounters())


def test_temp_named_file_and_plain_sibling_both_land(tmp_path):
    drive = FakeDrive()
    drive.add_file("root", "t", "a.tmp", b"temp-named")
    drive.add_file("root", "a-id", "a", b"plain")
    root = tmp_path / "m"

    summary, _ = _run(drive, root, workers=1)
    assert (root / "a.tmp").read_bytes() == b"temp-named"
    assert (root / "a [a-id]").read_bytes() == b"plain"
    assert (summary.found, summary.completed, summary.skipped, summary.failed) == (2, 2, 0, 0)

    drive.calls.clear()
    summary, _ = _run(drive, root, workers=1)
    assert summary.skipped == 2
    assert drive.count("download") == 0


class MalformedListing(FakeDrive):
    def list_children(self, folder_id, page_token=None):
        if folder_id == "bad":
            raise ValueError("malformed listing payload")
        return super().list_children(folder_id, page_token)


def test_malformed_listing_still_drains_queued_jobs(tmp_path):
    drive = MalformedListing()
    for n in range(5):
        drive.add_file("root", f"f{n}", f"f{n}.bin", b"x" * (n + 1))
    drive.add_folder("root", "bad", "bad")
    root = tmp_path / "m"

    summary, out = _run(drive, root, workers=2)
    assert summary.found == 5
    assert summary.completed == summary.found
    assert summary.failed == 0
    assert sorted(p.name for p in root.glob("*.bin")) == [f"f{n}.bin" for n in range(5)]
    assert not list(root.rglob("*.tmp"))
    assert "5 / 5 done" in out


class AbortingWalker(DiscoveryWalker):
    def walk(self, folder_id, local_dir):
        super().walk(folder_id, local_dir)
        raise RuntimeError("walk aborted")


def test_workers_are_joined_when_discovery_raises(tmp_path, monkeypatch):
    monkeypatch.setattr(coordinator_mod, "DiscoveryWalker", AbortingWalker)
    drive = FakeDrive()
    for n in range(5):
        drive.add_file("root", f"f{n}", f"f{n}.bin", bytes([n]) * 3)
    root = tmp_path / "m"

    with pytest.raises(RuntimeError, match="walk aborted"):
        _run(drive, root, workers=2)
    # Every queued job finished before the error reached the caller.
    assert len(list(root.glob("*.bin"))) == 5
    assert not list(root.rglob("*.tmp"))
