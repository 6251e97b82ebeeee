from collections import deque

from config import ESSENTIAL_PAGES, MAX_PROCESSES
from memory_manager import OutOfCapacityError
from page_table import ProcessState


class SwapQueue:
    """FIFO of process ids waiting to be swapped back in."""

    def __init__(self, capacity=MAX_PROCESSES):
        self.capacity = capacity
        self.items = deque()

    def __len__(self):
        return len(self.items)

    def is_empty(self):
        return not self.items

    def enqueue(self, pid):
        if len(self.items) >= self.capacity:
            raise OutOfCapacityError(f"Swap queue is full ({self.capacity} processes)")
        self.items.append(pid)

    def dequeue(self):
        return self.items.popleft()


class SwapScheduler:
    def __init__(self, allocator, processes, stats, essential_pages=ESSENTIAL_PAGES,
                 capacity=MAX_PROCESSES):
        self.allocator = allocator
        self.processes = processes
        self.stats = stats
        self.essential_pages = essential_pages
        self.queue = SwapQueue(capacity)

    def active_count(self):
        return sum(1 for p in self.processes if p.is_active())

    def swap_out(self, pid):
        """Deactivate a process whose frames have already been released."""
        process = self.processes[pid]
        if not process.is_runnable():
            return
        process.state = ProcessState.SWAPPED_OUT
        self.queue.enqueue(pid)
        self.stats.record_swap()

        active_count = self.active_count()
        self.stats.record_active_count(active_count)
        print(f"+++ Swapping out process {pid:3d} [{active_count:3d} active processes]")

    def swap_in(self, pid):
        process = self.processes[pid]
        process.grant_essential_pages(self.allocator, self.essential_pages)
        process.state = ProcessState.RUNNING
        self.stats.record_swap()
        print(f"+++ Swapping in process {pid:3d} [{self.active_count():3d} active processes]")

    def try_readmit(self):
        """Swap in queued processes in eviction order while frames allow.

        Returns the list of readmitted process ids.
        """
        readmitted = []
        while not self.queue.is_empty() and self.allocator.num_free() >= self.essential_pages:
            pid = self.queue.dequeue()
            if self.processes[pid].state != ProcessState.SWAPPED_OUT:
                continue
            self.swap_in(pid)
            readmitted.append(pid)
        return readmitted
