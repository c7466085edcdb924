"""Configuration for livetop."""

from dataclasses import dataclass

# Sampling
REFRESH_INTERVAL = 2.0  # seconds between frames
MIN_REFRESH_INTERVAL = 0.1
CPU_SAMPLE_PAUSE = 0.5  # seconds between the two /proc/stat reads

# Host resources
PROC_ROOT = "/proc"

# Display
COMMAND_WIDTH = 50
BAR_WIDTH = 20
SEPARATOR_WIDTH = 50
TABLE_PADDING = 3
CLEAR_SCREEN = "\033[H\033[2J"

# Input
FILTER_PROMPT = "Enter a filter: "
INPUT_RETRY_INTERVAL = REFRESH_INTERVAL  # pause before reading again after end of input


@dataclass(slots=True, frozen=True)
class MonitorConfig:
    """Settings shared by the sampler and both frontends."""

    proc_root: str = PROC_ROOT
    refresh_interval: float = REFRESH_INTERVAL
    cpu_sample_pause: float = CPU_SAMPLE_PAUSE
    command_width: int = COMMAND_WIDTH
    bar_width: int = BAR_WIDTH
    strict: bool = False  # skip processes whose stat cannot be read

    def __post_init__(self) -> None:
        if self.refresh_interval < MIN_REFRESH_INTERVAL:
            object.__setattr__(self, "refresh_interval", MIN_REFRESH_INTERVAL)
