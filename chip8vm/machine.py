"""Stateful CHIP-8 machine built on the functional emulator core.

The :class:`Machine` owns a single :class:`~chip8vm.state.EmulatorState` and
replaces it after every successful cycle. It adds what the pure core cannot
express: validation that raises on bad opcodes, a blocking FX0A driven by a
host polling hook, and logging.
"""

from typing import Callable, List, Optional, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from chip8vm.config import MachineConfig, TIMER_MODES
from chip8vm.constants import NUM_KEYS
from chip8vm.decode import decode, is_known_opcode
from chip8vm.emulator import ProgramData, execute, fetch, tick_timers, load_program, program_bytes
from chip8vm.errors import (
    Chip8Error, UnknownOpcode, InvalidDigit, StackOverflow, StackUnderflow, KeyWaitTimeout,
)
from chip8vm.logging import MachineLogger, progress
from chip8vm.stack import is_empty, is_full, addresses
from chip8vm.state import EmulatorState, create_state

PollHook = Callable[[], None]

_execute = jax.jit(execute)
_tick_timers = jax.jit(tick_timers)


def is_wait_for_key(instruction: int) -> bool:
    """Check for FX0A."""
    return instruction & 0xF0FF == 0xF00A


def validate_instruction(state: EmulatorState, instruction: int, address: int):
    """Raise the error ``instruction`` would hit when executed on ``state``.

    ``state`` is the machine state at the time of execution; register and
    stack checks read concrete values from it.
    """
    if not is_known_opcode(instruction):
        raise UnknownOpcode(instruction, address)

    decoded = decode(instruction)
    if instruction == 0x00EE and is_empty(state.stack):
        raise StackUnderflow(address)
    if decoded.opcode == 0x2 and is_full(state.stack):
        raise StackOverflow(address)
    if decoded.opcode == 0xF and decoded.nn == 0x29:
        digit = int(state.V[decoded.x])
        if digit > 0xF:
            raise InvalidDigit(digit)


class Machine:
    """A CHIP-8 machine: memory, registers, stack, timers, display and keypad.

    Typical use::

        machine = Machine()
        machine.load_program(rom_bytes)
        while running:
            machine.step(poll_input=handle_events)
            if machine.draw_flag:
                render(machine.display)
    """

    def __init__(self, config: Optional[MachineConfig] = None, logger: Optional[MachineLogger] = None):
        """Create and initialize a machine.

        Args:
            config: Quirk and timer options, defaults to ``MachineConfig()``
            logger: Logger for load, trace and error messages
        """
        self.config = config if config is not None else MachineConfig()
        if self.config.timer_mode not in TIMER_MODES:
            raise ValueError(
                f"Unsupported timer_mode '{self.config.timer_mode}'. "
                f"Supported modes: {TIMER_MODES}"
            )
        self.logger = logger if logger is not None else MachineLogger()
        self.state: EmulatorState
        self.initialize()

    def initialize(self):
        """Reset all state, reload the font table and point PC at 0x200."""
        self.state = create_state(jax.random.PRNGKey(self.config.seed), shift_quirk=self.config.shift_quirk)

    def load_program(self, data: ProgramData):
        """Copy a program image into memory at 0x200.

        Raises:
            OversizedProgram: If the image is larger than 3584 bytes. The
                machine state is left untouched.
        """
        rom = program_bytes(data)
        try:
            self.state = load_program(self.state, rom)
        except Chip8Error as error:
            self.logger.log_error(error)
            raise
        self.logger.log_load(rom.size)

    def load_rom(self, filename: str):
        """Read a ROM file and load it as the program image."""
        with open(filename, 'rb') as f:
            self.load_program(f.read())

    def step(self, poll_input: Optional[PollHook] = None):
        """Run one fetch-decode-execute cycle.

        Args:
            poll_input: Zero-argument hook called repeatedly while FX0A waits
                for a key. Without a hook FX0A does not block; PC stays on
                the instruction and the wait resumes on the next step.

        Raises:
            UnknownOpcode, InvalidDigit, StackOverflow, StackUnderflow,
            KeyWaitTimeout: Only the redraw and sound signals are reset
                when a step raises.
        """
        self._clear_signals()
        address = int(self.state.pc)
        state, instruction = fetch(self.state)
        instruction = int(instruction)
        self.logger.log_step(address, instruction)

        try:
            validate_instruction(state, instruction, address)
            if poll_input is not None and is_wait_for_key(instruction):
                self._wait_for_key(poll_input)
                # the hook may have pressed keys or ticked timers
                state, _ = fetch(self.state)
        except Chip8Error as error:
            self.logger.log_error(error)
            raise

        state = _execute(state, instruction)
        if self.config.timer_mode == "cycle":
            state = _tick_timers(state)
            if bool(state.sound_active):
                self.logger.log_sound(int(state.sound_timer))
        self.state = state

    def _clear_signals(self):
        """Reset per-cycle outputs. Manual timer mode keeps the last tick's sound signal."""
        signals = {"draw_flag": jnp.zeros((), dtype=jnp.bool_)}
        if self.config.timer_mode == "cycle":
            signals["sound_active"] = jnp.zeros((), dtype=jnp.bool_)
        self.state = self.state.replace(**signals)

    def _wait_for_key(self, poll_input: PollHook):
        """Call the polling hook until some key is pressed."""
        limit = self.config.key_wait_limit
        polls = 0
        while True:
            poll_input()
            polls += 1
            if bool(jnp.any(self.state.keypad)):
                return
            if limit is not None and polls >= limit:
                raise KeyWaitTimeout(polls)

    def tick_timers(self):
        """Decrement nonzero timers once, for hosts driving timers at 60 Hz."""
        self.state = _tick_timers(self.state)

    def press_key(self, key: int):
        self.set_key(key, True)

    def release_key(self, key: int):
        self.set_key(key, False)

    def set_key(self, key: int, pressed: bool):
        """Set the state of hex key ``key`` (0x0-0xF)."""
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in [0, {NUM_KEYS}), got {key}")
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(pressed))

    def set_keypad(self, pressed: Sequence[bool]):
        """Replace the whole keypad with 16 pressed/released flags."""
        keypad = jnp.asarray(pressed, dtype=jnp.bool_)
        if keypad.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
        self.state = self.state.replace(keypad=keypad)

    def is_key_pressed(self, key: int) -> bool:
        return bool(self.state.keypad[key])

    @property
    def display(self) -> np.ndarray:
        """The 64x32 framebuffer indexed ``[x, y]``, 0 or 1 per pixel."""
        return np.asarray(self.state.display)

    @property
    def draw_flag(self) -> bool:
        """Whether the display changed during the last step."""
        return bool(self.state.draw_flag)

    @property
    def sound_active(self) -> bool:
        """Whether the sound timer was running during the last timer tick."""
        return bool(self.state.sound_active)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def registers(self) -> List[int]:
        return [int(v) for v in np.asarray(self.state.V)]

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def stack(self) -> List[int]:
        """Return addresses on the call stack, oldest first."""
        return addresses(self.state.stack)

    def memory(self, start: int = 0, length: Optional[int] = None) -> bytes:
        """Copy of ``length`` bytes of memory from ``start``."""
        data = np.asarray(self.state.memory)
        end = len(data) if length is None else start + length
        return data[start:end].tobytes()


def run(machine: Machine, cycles: int, poll_input: Optional[PollHook] = None, show_progress: bool = False) -> int:
    """Step ``machine`` ``cycles`` times and return how many steps requested a redraw.

    Errors from ``Machine.step`` propagate unchanged.
    """
    redraws = 0
    for _ in progress(range(cycles), total=cycles, enabled=show_progress):
        machine.step(poll_input)
        if machine.draw_flag:
            redraws += 1
    return redraws
