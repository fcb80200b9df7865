"""Named defaults shared across pagediff modules."""

DEFAULT_VIEWPORT_WIDTH = 1028
DEFAULT_VIEWPORT_HEIGHT = 768
FULL_EXTENT = "all"

DEFAULT_OUTPUT_DIR = "."
DEFAULT_OUTPUT_FILE = "output.png"
DEFAULT_THRESHOLD = 0
MAX_THRESHOLD = 255

DEFAULT_PAGE_LOAD_TIMEOUT_MS = 30000
CAPTURE_CHUNK_SIZE = 64 * 1024

SCREEN_TOKEN = "screen"
DIFF_TOKEN = "diff"
STATS_SUFFIX = ".json"

BLOCK_COLOR = (255, 255, 0)
