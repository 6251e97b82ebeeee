from config import USER_FRAMES


class OutOfCapacityError(Exception):
    """A bounded container was asked to hold more than its capacity."""


class FrameAllocator:
    def __init__(self, num_frames=USER_FRAMES):
        self.num_frames = num_frames
        # Free frames kept as a stack; the top of the stack is handed out first
        self.free_frames = list(range(num_frames))
        self.allocated = [False] * num_frames

    def allocate(self):
        """Return a free frame number, or None when the pool is exhausted."""
        if not self.free_frames:
            return None
        frame_num = self.free_frames.pop()
        self.allocated[frame_num] = True
        return frame_num

    def release(self, frame_num):
        if not 0 <= frame_num < self.num_frames:
            raise ValueError(f"Frame {frame_num} out of range")
        if not self.allocated[frame_num]:
            raise ValueError(f"Frame {frame_num} is not allocated")
        self.allocated[frame_num] = False
        self.free_frames.append(frame_num)

    def num_free(self):
        return len(self.free_frames)


class Statistics:
    def __init__(self, num_processes=0):
        self.page_accesses = 0
        self.page_faults = 0
        self.num_swaps = 0
        # Low-water mark of active processes, sampled after each swap-out
        self.min_active_processes = num_processes

    def record_page_access(self):
        self.page_accesses += 1

    def record_page_fault(self):
        self.page_faults += 1

    def record_swap(self):
        # Swap-outs and swap-ins are both counted here
        self.num_swaps += 1

    def record_active_count(self, active_count):
        if active_count < self.min_active_processes:
            self.min_active_processes = active_count

    @property
    def swap_pairs(self):
        return self.num_swaps // 2

    def as_tuple(self):
        return (self.page_accesses, self.page_faults,
                self.swap_pairs, self.min_active_processes)

    def __str__(self):
        return ("+++ Page access summary\n"
                f"\tTotal number of page accesses  = {self.page_accesses:7d}\n"
                f"\tTotal number of page faults    = {self.page_faults:7d}\n"
                f"\tTotal number of swaps          = {self.swap_pairs:7d}\n"
                f"\tDegree of multiprogramming     = {self.min_active_processes:7d}")
