"""Machine configuration."""

from typing import Optional

from flax.struct import dataclass

TIMER_MODES = ("cycle", "manual")


@dataclass
class MachineConfig:
    """Static options for a :class:`chip8vm.machine.Machine`.

    Attributes:
        shift_quirk: Read the 8XY6/8XYE shift source from VY instead of VX
        timer_mode: ``"cycle"`` decrements timers after every step,
            ``"manual"`` leaves it to the host calling ``tick_timers``
        key_wait_limit: Maximum polling-hook calls FX0A may make before
            giving up, or None to wait forever
        seed: Seed for the CXNN random number generator
    """
    shift_quirk: bool = False
    timer_mode: str = "cycle"
    key_wait_limit: Optional[int] = None
    seed: int = 0
