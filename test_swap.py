import pytest

from memory_manager import FrameAllocator, OutOfCapacityError, Statistics
from page_table import Process, ProcessState
from swap import SwapQueue, SwapScheduler

ESSENTIAL = 10


@pytest.fixture
def machine():
    """Three processes holding every frame of a 30 frame pool."""
    allocator = FrameAllocator(num_frames=3 * ESSENTIAL)
    processes = []
    for pid in range(3):
        process = Process(pid, 64, [0], num_pages=32)
        process.grant_essential_pages(allocator, ESSENTIAL)
        processes.append(process)
    stats = Statistics(num_processes=3)
    scheduler = SwapScheduler(allocator, processes, stats, essential_pages=ESSENTIAL)
    return allocator, processes, stats, scheduler


def evict(machine, pid):
    allocator, processes, _, scheduler = machine
    processes[pid].page_table.clear(allocator)
    scheduler.swap_out(pid)


class TestSwapQueue:

    def test_first_in_first_out(self):
        queue = SwapQueue()
        for pid in (4, 1, 3):
            queue.enqueue(pid)
        assert [queue.dequeue() for _ in range(3)] == [4, 1, 3]
        assert queue.is_empty()

    def test_capacity_is_enforced(self):
        queue = SwapQueue(capacity=2)
        queue.enqueue(0)
        queue.enqueue(1)
        with pytest.raises(OutOfCapacityError):
            queue.enqueue(2)


class TestSwapScheduler:

    def test_swap_out_deactivates_and_counts(self, machine, capsys):
        _, processes, stats, scheduler = machine
        evict(machine, 1)

        assert processes[1].state == ProcessState.SWAPPED_OUT
        assert processes[1].frames_allocated == 0
        assert len(scheduler.queue) == 1
        assert stats.num_swaps == 1
        assert stats.min_active_processes == 2
        assert "+++ Swapping out process   1 [  2 active processes]" in capsys.readouterr().out

    def test_swap_out_ignores_inactive_process(self, machine):
        _, _, stats, scheduler = machine
        evict(machine, 0)
        scheduler.swap_out(0)
        assert len(scheduler.queue) == 1
        assert stats.num_swaps == 1

    def test_readmission_in_eviction_order(self, machine):
        _, processes, _, scheduler = machine
        for pid in (2, 0, 1):
            evict(machine, pid)

        assert scheduler.try_readmit() == [2, 0, 1]
        assert all(p.is_runnable() for p in processes)
        assert all(p.frames_allocated == ESSENTIAL for p in processes)

    def test_readmission_waits_for_enough_frames(self, machine):
        allocator, processes, _, scheduler = machine
        for pid in (2, 0, 1):
            evict(machine, pid)
        for _ in range(3 * ESSENTIAL - ESSENTIAL + 1):
            allocator.allocate()

        assert scheduler.try_readmit() == []
        assert len(scheduler.queue) == 3
        assert all(p.state == ProcessState.SWAPPED_OUT for p in processes)

    def test_partial_readmission_keeps_rest_queued(self, machine):
        allocator, _, _, scheduler = machine
        for pid in (2, 0, 1):
            evict(machine, pid)
        for _ in range(ESSENTIAL):
            allocator.allocate()

        assert scheduler.try_readmit() == [2, 0]
        assert list(scheduler.queue.items) == [1]

    def test_swap_in_counts_and_reports(self, machine, capsys):
        _, _, stats, scheduler = machine
        evict(machine, 0)
        scheduler.try_readmit()

        assert stats.num_swaps == 2
        assert stats.swap_pairs == 1
        assert "+++ Swapping in process   0 [  3 active processes]" in capsys.readouterr().out

    def test_low_water_mark_tracks_evictions(self, machine):
        _, _, stats, _ = machine
        for pid in (2, 0, 1):
            evict(machine, pid)
        assert stats.min_active_processes == 0
