"""Console logging utilities for the CHIP-8 machine.

Provides a small level-filtered console logger and a machine-specific
variant with helpers for load, trace, sound and error messages. Long runs
can be wrapped in a tqdm progress bar.
"""

import time
import sys
from typing import Iterable, Optional

from tqdm import tqdm

from chip8vm.decode import disassemble


class ConsoleLogger:
    """Flexible console logger with level filtering and colors."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def is_enabled_for(self, level: str) -> bool:
        """Whether messages at ``level`` would be printed."""
        return self._should_log(level)

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class MachineLogger(ConsoleLogger):
    """Logger for machine lifecycle and instruction traces."""

    def __init__(self, name: str = "Machine", log_level: str = "WARNING", **kwargs):
        super().__init__(name, log_level=log_level, **kwargs)

    def log_load(self, size: int):
        self.info(f"Loaded {size} byte program at 0x200")

    def log_step(self, address: int, instruction: int):
        """Trace one instruction at DEBUG level."""
        if self.is_enabled_for("DEBUG"):
            self.debug(f"0x{address:03X}: {instruction:04X}  {disassemble(instruction)}")

    def log_sound(self, remaining: int):
        self.debug(f"Sound active, {remaining} ticks left")

    def log_error(self, error: Exception):
        self.error(f"{type(error).__name__}: {error}")


def progress(iterable: Iterable, total: Optional[int] = None, desc: str = "Cycles", enabled: bool = True):
    """Wrap ``iterable`` in a tqdm progress bar when ``enabled``."""
    if not enabled:
        return iterable
    return tqdm(iterable, total=total, desc=desc, unit="cycle", leave=False)
