# Fixed machine parameters for the demand paging simulator.
# Components take these as keyword defaults so a smaller machine can be
# built for experiments.

# MEMORY ARCHITECTURE #
PAGE_SIZE = 4096  # bytes
ELEMENT_SIZE = 4  # bytes per array element
USER_FRAMES = 12288  # 48 MB of the 64 MB machine; the rest belongs to the kernel
PAGE_TABLE_SIZE = 2048  # virtual pages per process
ESSENTIAL_PAGES = 10  # pinned pages granted on admission

# WORKLOAD LIMITS #
MAX_PROCESSES = 500
MAX_SEARCHES = 100

DEFAULT_WORKLOAD_FILE = 'search.txt'
