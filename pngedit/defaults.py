"""Central place for PNGEditor default settings."""

# Pixel layout
CHANNELS: int = 4  # R, G, B, A
MAX_CHANNEL_VALUE: int = 255

# Channel scaling (per-channel multipliers applied after filters)
DEFAULT_CHANNEL_SCALE: float = 1.0
MIN_CHANNEL_SCALE: float = 0.0
MAX_CHANNEL_SCALE: float = 1.0

# Rotation (degrees, clockwise-positive)
DEFAULT_ROTATION_DEGREES: float = 0.0
MIN_ROTATION_DEGREES: float = -180.0
MAX_ROTATION_DEGREES: float = 180.0
TRANSPARENT_FILL: tuple[int, int, int, int] = (0, 0, 0, 0)

# Convolution
KERNEL_SIZE: int = 3
KERNEL_NORMALIZER: float = 9.0  # Every 3x3 kernel is divided by this

# File I/O
IMAGE_EXTENSIONS: tuple[str, ...] = (".png",)
DEFAULT_SAVE_FILENAME: str = "untitled.png"

# Window layout
WINDOW_TITLE: str = "PNGEditor"
SCREEN_WIDTH: int = 1280
SCREEN_HEIGHT: int = 720
MARGIN: int = 5

# UI interaction defaults
SLIDER_DEBOUNCE_SECONDS: float = 0.05  # Coalesce slider drags into one recompute
