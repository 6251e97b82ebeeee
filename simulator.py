import sys

from config import (PAGE_SIZE, ELEMENT_SIZE, USER_FRAMES, PAGE_TABLE_SIZE,
                    ESSENTIAL_PAGES, MAX_PROCESSES, MAX_SEARCHES, DEFAULT_WORKLOAD_FILE)
from memory_manager import FrameAllocator, Statistics, OutOfCapacityError
from page_table import Process, ProcessState
from swap import SwapScheduler
from workload import WorkloadError, load_workload


class SimulationStalledError(RuntimeError):
    """No process can make progress but the run is not finished."""


def search_path(array_size, key):
    """Yield the midpoints a binary search for key probes, in order."""
    left = 0
    right = array_size - 1
    while left < right:
        mid = (left + right) // 2
        yield mid
        if key <= mid:
            right = mid
        else:
            left = mid + 1


class DemandPagingSimulator:

    def __init__(self, workload, user_frames=USER_FRAMES, page_size=PAGE_SIZE,
                 element_size=ELEMENT_SIZE, page_table_size=PAGE_TABLE_SIZE,
                 essential_pages=ESSENTIAL_PAGES, max_processes=MAX_PROCESSES,
                 max_searches=MAX_SEARCHES, verbose=False):
        if workload.num_processes > max_processes:
            raise OutOfCapacityError(
                f"{workload.num_processes} processes, limit is {max_processes}")
        self.page_size = page_size
        self.element_size = element_size
        self.essential_pages = essential_pages
        self.verbose = verbose

        self.allocator = FrameAllocator(num_frames=user_frames)
        self.processes = []
        for pid, (array_size, keys) in enumerate(workload.processes):
            process = Process(pid, array_size, keys, num_pages=page_table_size,
                              max_searches=max_searches)
            process.grant_essential_pages(self.allocator, essential_pages)
            self.processes.append(process)

        self.stats = Statistics(num_processes=len(self.processes))
        self.swapper = SwapScheduler(self.allocator, self.processes, self.stats,
                                     essential_pages=essential_pages,
                                     capacity=max_processes)
        self.next_pid = 0

    def page_number(self, index):
        return index * self.element_size // self.page_size + self.essential_pages

    def frames_needed(self, process):
        """Frames the current search of a process needs to run to the end."""
        pages = {self.page_number(mid)
                 for mid in search_path(process.array_size, process.current_key())}
        return self.essential_pages + len(pages)

    def handle_page_fault(self, process, page_num):
        """Map a frame for the faulting page, or swap the whole process out.

        Returns True if the page is now resident. False means the process
        was evicted and the current search must be abandoned.
        """
        frame_num = self.allocator.allocate()
        if frame_num is not None:
            process.page_table.install(page_num, frame_num)
            return True

        needed = self.frames_needed(process)
        if needed > self.allocator.num_frames:
            raise SimulationStalledError(
                f"Process {process.pid} needs {needed} frames for one search, "
                f"only {self.allocator.num_frames} exist")

        process.page_table.clear(self.allocator)
        self.swapper.swap_out(process.pid)
        return False

    def simulate_binary_search(self, process):
        """Run the current search of a process from the start.

        Returns True if the search finished, False if the process was
        swapped out part way through.
        """
        if not process.is_runnable():
            return False

        key = process.current_key()
        if self.verbose:
            print(f"\tSearch {process.current_search + 1} by Process {process.pid}")

        for mid in search_path(process.array_size, key):
            page_num = self.page_number(mid)
            self.stats.record_page_access()

            if process.page_table.translate(page_num) is None:
                self.stats.record_page_fault()
                if not self.handle_page_fault(process, page_num):
                    return False

        process.current_search += 1
        if process.current_search >= process.num_searches:
            self.complete_process(process)
        return True

    def complete_process(self, process):
        process.page_table.clear(self.allocator)
        process.state = ProcessState.COMPLETED
        self.swapper.try_readmit()

    def all_completed(self):
        return all(p.is_completed() for p in self.processes)

    def next_runnable(self):
        num_processes = len(self.processes)
        for offset in range(num_processes):
            pid = (self.next_pid + offset) % num_processes
            if self.processes[pid].is_runnable():
                return self.processes[pid]
        return None

    def step(self):
        """Run one search for the next runnable process.

        Returns False once every process has completed.
        """
        if self.all_completed():
            return False

        process = self.next_runnable()
        if process is None:
            # Everyone left is swapped out; readmission normally happens
            # only when a process completes
            if not self.swapper.try_readmit():
                raise SimulationStalledError(
                    f"{len(self.swapper.queue)} processes swapped out, "
                    f"{self.allocator.num_free()} frames free")
            process = self.next_runnable()

        self.simulate_binary_search(process)
        self.next_pid = (process.pid + 1) % len(self.processes)
        return True

    def run(self):
        while self.step():
            pass
        return self.stats

    def check_invariants(self):
        """Raise AssertionError if frames were lost, duplicated or shared."""
        held = []
        for process in self.processes:
            frames = process.page_table.resident_frames()
            if len(frames) != process.frames_allocated:
                raise AssertionError(
                    f"Process {process.pid} holds {len(frames)} frames, "
                    f"count says {process.frames_allocated}")
            held.extend(frames)

        if len(held) != len(set(held)):
            raise AssertionError("A frame is mapped by more than one page table entry")
        if len(held) + self.allocator.num_free() != self.allocator.num_frames:
            raise AssertionError(
                f"{len(held)} held + {self.allocator.num_free()} free "
                f"!= {self.allocator.num_frames} frames")
        if set(held) & set(self.allocator.free_frames):
            raise AssertionError("A mapped frame is also on the free list")


def run_simulation(filename, verbose=False):
    workload = load_workload(filename)
    print("+++ Simulation data read from file")
    simulator = DemandPagingSimulator(workload, verbose=verbose)
    print("+++ Kernel data initialized")
    stats = simulator.run()
    print(stats)
    return stats


def main(argv=None):
    if argv is None:
        argv = sys.argv
    args = argv[1:]
    verbose = '-v' in args
    args = [a for a in args if a != '-v']
    if len(args) > 1:
        print(f"Usage: {argv[0]} [-v] [workload-file]", file=sys.stderr)
        return 1
    filename = args[0] if args else DEFAULT_WORKLOAD_FILE

    try:
        run_simulation(filename, verbose=verbose)
    except OSError as e:
        print(f"Error opening input file: {e}", file=sys.stderr)
        return 1
    except WorkloadError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
