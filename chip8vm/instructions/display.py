"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FLAG_REGISTER, ADDRESS_MASK

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, wrapping at the screen edges."""
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    # Offsets of every screen cell relative to the sprite origin, modulo the screen size
    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < 8) & (row_offset < instruction.n)

    sprite_bytes = state.memory[(jnp.astype(state.I, jnp.int32) + row_offset) & ADDRESS_MASK]
    sprite = jnp.astype((sprite_bytes >> (7 - jnp.minimum(col_offset, 7))) & 1, jnp.uint8) * in_sprite

    collision = jnp.any((state.display & sprite) != 0)
    return state.replace(
        display=jnp.astype(state.display ^ sprite, jnp.uint8),
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        draw_flag=jnp.ones((), dtype=jnp.bool_)
    )
