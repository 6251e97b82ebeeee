from config import PAGE_TABLE_SIZE, MAX_SEARCHES
from memory_manager import OutOfCapacityError


class PageTableEntry:
    def __init__(self, virtual_page_num):
        self.virtual_page_num = virtual_page_num
        self.frame_num = None  # None means not resident

    def is_valid(self):
        return self.frame_num is not None


class PageTable:
    def __init__(self, num_pages=PAGE_TABLE_SIZE):
        self.entries = [PageTableEntry(i) for i in range(num_pages)]
        self.frames_allocated = 0

    def __len__(self):
        return len(self.entries)

    def translate(self, virtual_page_num):
        return self.entries[virtual_page_num].frame_num

    def install(self, virtual_page_num, frame_num):
        entry = self.entries[virtual_page_num]
        if entry.is_valid():
            raise ValueError(f"Page {virtual_page_num} is already mapped to frame {entry.frame_num}")
        entry.frame_num = frame_num
        self.frames_allocated += 1

    def clear(self, allocator):
        """Give every resident frame back to the allocator."""
        for entry in self.entries:
            if entry.is_valid():
                allocator.release(entry.frame_num)
                entry.frame_num = None
        self.frames_allocated = 0

    def resident_frames(self):
        return [entry.frame_num for entry in self.entries if entry.is_valid()]


class ProcessState:
    RUNNING = 'running'
    COMPLETED = 'completed'
    SWAPPED_OUT = 'swapped out'


class Process:
    def __init__(self, pid, array_size, search_keys, num_pages=PAGE_TABLE_SIZE,
                 max_searches=MAX_SEARCHES):
        if len(search_keys) > max_searches:
            raise OutOfCapacityError(
                f"Process {pid} has {len(search_keys)} searches, limit is {max_searches}")
        self.pid = pid
        self.array_size = array_size
        self.search_keys = list(search_keys)
        self.current_search = 0
        self.page_table = PageTable(num_pages)
        self.state = ProcessState.RUNNING

    @property
    def num_searches(self):
        return len(self.search_keys)

    @property
    def frames_allocated(self):
        return self.page_table.frames_allocated

    def current_key(self):
        return self.search_keys[self.current_search]

    def is_active(self):
        # Completed processes still count towards the degree of multiprogramming
        return self.state != ProcessState.SWAPPED_OUT

    def is_runnable(self):
        return self.state == ProcessState.RUNNING

    def is_completed(self):
        return self.state == ProcessState.COMPLETED

    def grant_essential_pages(self, allocator, essential_pages):
        """Map the pinned low pages to fresh frames. Returns the number granted."""
        granted = 0
        for page_num in range(essential_pages):
            frame_num = allocator.allocate()
            if frame_num is None:
                break
            self.page_table.install(page_num, frame_num)
            granted += 1
        return granted

    def __repr__(self):
        return (f"Process(pid={self.pid}, size={self.array_size}, "
                f"search={self.current_search}/{self.num_searches}, state={self.state})")
