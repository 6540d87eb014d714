"""Default display and scanning values."""

DEFAULT_FPS = 5  # screens per second while cycling frames
DEFAULT_LOOPS = 0  # 0 = cycle until the window is closed
DEFAULT_GRID_ROWS = 1
DEFAULT_GRID_COLS = 1
DEFAULT_ERROR_LEVEL = "m"  # QR error correction
DEFAULT_BORDER = 4  # QR quiet zone in modules
DEFAULT_SCALE = 8  # pixels per module when rendering QR
DEFAULT_GAP = 12  # pixels between QR cells
DEFAULT_COLOR_FG = 0  # black
DEFAULT_COLOR_BG = 255  # white
DEFAULT_IDLE_TIMEOUT = 30.0  # seconds without a new frame before giving up
DEFAULT_REPORT_INTERVAL = 1.0  # seconds between progress lines
WINDOW_NAME = "qrmux sender"
