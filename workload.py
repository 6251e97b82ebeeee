import random

from config import (PAGE_SIZE, ELEMENT_SIZE, PAGE_TABLE_SIZE, ESSENTIAL_PAGES,
                    MAX_PROCESSES, MAX_SEARCHES)


class WorkloadError(ValueError):
    """The workload description is unreadable or out of bounds."""


class Workload:
    def __init__(self, num_searches, processes=None):
        self.num_searches = num_searches
        # Each item is (array_size, [search keys])
        self.processes = processes if processes is not None else []

    @property
    def num_processes(self):
        return len(self.processes)

    def __eq__(self, other):
        if not isinstance(other, Workload):
            return NotImplemented
        return self.num_searches == other.num_searches and self.processes == other.processes


def largest_array_size(page_size=PAGE_SIZE, element_size=ELEMENT_SIZE,
                       num_pages=PAGE_TABLE_SIZE, essential_pages=ESSENTIAL_PAGES):
    """Largest array whose last element still falls inside the page table."""
    data_pages = num_pages - essential_pages
    return data_pages * page_size // element_size


def parse_workload(text, page_size=PAGE_SIZE, element_size=ELEMENT_SIZE,
                   num_pages=PAGE_TABLE_SIZE, essential_pages=ESSENTIAL_PAGES,
                   max_processes=MAX_PROCESSES, max_searches=MAX_SEARCHES):
    tokens = iter(text.split())

    def next_int(message):
        try:
            return int(next(tokens))
        except (StopIteration, ValueError):
            raise WorkloadError(message) from None

    num_processes = next_int("Error reading process count and search count")
    num_searches = next_int("Error reading process count and search count")
    if not (1 <= num_processes <= max_processes and 1 <= num_searches <= max_searches):
        raise WorkloadError("Invalid number of processes or searches")

    largest = largest_array_size(page_size, element_size, num_pages, essential_pages)
    workload = Workload(num_searches)
    for pid in range(num_processes):
        array_size = next_int(f"Error reading array size for process {pid}")
        if not 1 <= array_size <= largest:
            raise WorkloadError(
                f"Array size {array_size} for process {pid} outside [1, {largest}]")
        keys = [next_int(f"Error reading search index {j} for process {pid}")
                for j in range(num_searches)]
        workload.processes.append((array_size, keys))
    return workload


def load_workload(filename, **limits):
    with open(filename, 'r', encoding='utf-8') as f:
        try:
            text = f.read()
        except UnicodeDecodeError as e:
            raise WorkloadError(f"Error reading workload file {filename}: {e.reason}") from None
    return parse_workload(text, **limits)


def format_workload(workload):
    lines = [f"{workload.num_processes} {workload.num_searches}"]
    for array_size, keys in workload.processes:
        lines.append(str(array_size))
        lines.append(' '.join(str(k) for k in keys))
    return '\n'.join(lines) + '\n'


def generate_workload(num_processes, num_searches, min_array_size=1_000,
                      max_array_size=1_000_000, seed=None):
    """Random workload with keys drawn uniformly from each array."""
    rng = random.Random(seed)
    workload = Workload(num_searches)
    for _ in range(num_processes):
        array_size = rng.randint(min_array_size, max_array_size)
        keys = [rng.randrange(array_size) for _ in range(num_searches)]
        workload.processes.append((array_size, keys))
    return workload
