"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
    MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS,
)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is indexed ``[x, y]`` and holds 0/1 pixels. ``draw_flag`` and
    ``sound_active`` describe the most recent cycle only.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.uint8))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    draw_flag: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    sound_active: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    shift_quirk: bool = field(pytree_node=False, default=False)


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0), shift_quirk: bool = False) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, shift_quirk=shift_quirk)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
