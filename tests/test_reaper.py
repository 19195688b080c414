"""Tests for the expired artifact reaper."""
import os
import time
import asyncio
import threading
from pathlib import Path

import pytest

from avifpress.core import reaper as reaper_module
from avifpress.core.reaper import Reaper


def touch(path: Path, age_seconds: float, now: float) -> Path:
    path.write_bytes(b"x")
    os.utime(path, (now - age_seconds, now - age_seconds))
    return path


@pytest.fixture
def directories(tmp_path):
    incoming = tmp_path / "tmp"
    derived = tmp_path / "compressed"
    incoming.mkdir()
    derived.mkdir()
    return incoming, derived


class TestSweep:

    def test_retention_boundary(self, directories):
        incoming, _ = directories
        now = time.time()
        old = touch(incoming / "old.jpg", 3601, now)
        fresh = touch(incoming / "fresh.jpg", 3599, now)

        deleted = Reaper(directories, retention_seconds=3600).sweep(now=now)

        assert deleted == 1
        assert not old.exists()
        assert fresh.exists()

    def test_sweeps_every_directory(self, directories):
        incoming, derived = directories
        now = time.time()
        touch(incoming / "a.jpg", 7200, now)
        touch(derived / "a_compressed_50%.avif", 7200, now)

        assert Reaper(directories).sweep(now=now) == 2
        assert list(incoming.iterdir()) == []
        assert list(derived.iterdir()) == []

    def test_missing_directory_is_skipped(self, tmp_path):
        assert Reaper([tmp_path / "missing"]).sweep() == 0

    def test_subdirectories_are_left_alone(self, directories):
        incoming, _ = directories
        now = time.time()
        nested = incoming / "nested"
        nested.mkdir()
        os.utime(nested, (now - 7200, now - 7200))

        assert Reaper(directories).sweep(now=now) == 0
        assert nested.is_dir()

    def test_delete_failure_does_not_stop_sweep(self, directories, monkeypatch, caplog):
        incoming, _ = directories
        now = time.time()
        locked = touch(incoming / "locked.jpg", 7200, now)
        other = touch(incoming / "other.jpg", 7200, now)

        original_unlink = Path.unlink

        def flaky_unlink(self, *args, **kwargs):
            if self.name == "locked.jpg":
                raise PermissionError("file is locked")
            return original_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", flaky_unlink)

        deleted = Reaper(directories).sweep(now=now)

        assert deleted == 1
        assert locked.exists()
        assert not other.exists()
        assert "locked.jpg" in caplog.text


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_start_sweeps_and_stop_ends_loop(self, directories):
        incoming, _ = directories
        stale = touch(incoming / "stale.jpg", 7200, time.time())
        reaper = Reaper(directories, interval_seconds=3600)

        await reaper.start()
        assert reaper.is_running
        for _ in range(50):
            if not stale.exists():
                break
            await asyncio.sleep(0.02)
        await reaper.stop()

        assert not stale.exists()
        assert not reaper.is_running

    @pytest.mark.asyncio
    async def test_start_twice_and_stop_twice_are_harmless(self, directories):
        reaper = Reaper(directories)
        await reaper.start()
        await reaper.start()
        await reaper.stop()
        await reaper.stop()
        assert not reaper.is_running

    @pytest.mark.asyncio
    async def test_stop_cancels_a_sweep_that_does_not_finish(self, directories, monkeypatch):
        monkeypatch.setattr(reaper_module, "STOP_TIMEOUT_SECONDS", 0.05)
        release = threading.Event()
        started = threading.Event()

        def blocking_sweep(now=None):
            started.set()
            release.wait(5)
            return 0

        reaper = Reaper(directories)
        monkeypatch.setattr(reaper, "sweep", blocking_sweep)

        try:
            await reaper.start()
            for _ in range(50):
                if started.is_set():
                    break
                await asyncio.sleep(0.01)
            assert started.is_set()

            await asyncio.wait_for(reaper.stop(), timeout=2)

            assert not reaper.is_running
            assert reaper._task is None
        finally:
            release.set()
