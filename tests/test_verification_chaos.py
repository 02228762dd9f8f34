"""Verification Test: Chaos Monkey - Random process termination resilience.

Processes are spawned and terminated while snapshots are taken and fed into
a Dashboard. Neither the psutil snapshot source nor the table refresh may
raise NoSuchProcess or any other error while processes come and go.
"""

import multiprocessing
import random
import time

import pytest

from proctop.engine import Dashboard
from proctop.monitor import PsutilSnapshotSource


def dummy_worker(duration: float = 60.0) -> None:
    """A dummy worker process that sleeps for a given duration."""
    try:
        time.sleep(duration)
    except (KeyboardInterrupt, SystemExit):
        pass


def _cleanup(processes: list) -> None:
    for p in processes:
        if p.is_alive():
            p.terminate()
    for p in processes:
        p.join(timeout=1.0)


class TestChaosMonkey:
    """Chaos Monkey verification suite tests."""

    def test_snapshots_survive_process_termination(self):
        """
        Test snapshots keep working when processes die between polls.

        The spawned processes must appear in a snapshot before they are
        killed, and later snapshots must not contain them any more.
        """
        processes = []
        for _ in range(20):
            p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
            p.start()
            processes.append(p)

        source = PsutilSnapshotSource()
        try:
            pids = {record.pid for record in source.get_snapshot()}
            assert {p.pid for p in processes} <= pids

            victims = random.sample(processes, 10)
            for p in victims:
                p.terminate()
            for p in victims:
                p.join(timeout=2.0)

            pids = {record.pid for record in source.get_snapshot()}
            assert not pids & {p.pid for p in victims}
        finally:
            _cleanup(processes)

    def test_dashboard_refresh_during_churn(self):
        """
        Test the dashboard keeps a consistent selection during rapid churn.

        Processes are created and killed while refreshes run; after every
        refresh the selection must still point inside the filtered view.
        """
        dashboard = Dashboard(PsutilSnapshotSource())
        processes = []

        try:
            start_time = time.time()
            while time.time() - start_time < 3.0:
                for _ in range(3):
                    p = multiprocessing.Process(target=dummy_worker, args=(10.0,))
                    p.start()
                    processes.append(p)

                alive = [p for p in processes if p.is_alive()]
                if len(alive) > 6:
                    for p in random.sample(alive, 3):
                        p.terminate()

                dashboard.move_previous()
                dashboard.refresh()

                selected = dashboard.state.selected_index
                view = dashboard.view()
                if view:
                    assert selected is None or 0 <= selected < len(view)
                else:
                    assert selected is None
                time.sleep(0.1)
        except Exception as e:
            pytest.fail(f"Dashboard crashed during churn: {e}")
        finally:
            _cleanup(processes)

    def test_snapshot_handles_terminated_process(self):
        """Test a process that has just exited does not break a snapshot."""
        p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
        p.start()
        time.sleep(0.1)
        p.terminate()
        p.join(timeout=1.0)

        records = PsutilSnapshotSource().get_snapshot()

        assert isinstance(records, list)
        assert p.pid not in {record.pid for record in records}

    def test_zombie_process_handling(self):
        """
        Test zombies are tolerated.

        A child that has exited but not been reaped is a zombie; it may or
        may not show up, but the snapshot must succeed.
        """
        p = multiprocessing.Process(target=dummy_worker, args=(0.1,))
        p.start()
        time.sleep(0.3)

        try:
            dashboard = Dashboard(PsutilSnapshotSource())
            for _ in range(3):
                dashboard.refresh()
            assert len(dashboard.view()) > 0
        finally:
            p.join(timeout=1.0)
