"""CHIP-8 ALU operations (8xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.constants import FLAG_REGISTER
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction

# Each operation returns (result, flag, sets_flag). Only the arithmetic and
# shift operations touch VF.

def _no_flag(vx):
    return jnp.zeros((), dtype=jnp.uint8), jnp.zeros((), dtype=jnp.bool_)


def _flag(value):
    return jnp.astype(value, jnp.uint8), jnp.ones((), dtype=jnp.bool_)


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return (vy, *_no_flag(vx))


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return (vx | vy, *_no_flag(vx))


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return (vx & vy, *_no_flag(vx))


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return (vx ^ vy, *_no_flag(vx))


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    return (jnp.astype(result & 0xFF, jnp.uint8), *_flag(result > 255))


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    result = (jnp.astype(vx, jnp.int32) - jnp.astype(vy, jnp.int32)) & 0xFF
    return (jnp.astype(result, jnp.uint8), *_flag(vx >= vy))


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted-out bit."""
    return (vx >> 1, *_flag(vx & 1))


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    result = (jnp.astype(vy, jnp.int32) - jnp.astype(vx, jnp.int32)) & 0xFF
    return (jnp.astype(result, jnp.uint8), *_flag(vy >= vx))


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = shifted-out bit."""
    result = (jnp.astype(vx, jnp.int32) << 1) & 0xFF
    return (jnp.astype(result, jnp.uint8), *_flag((vx & 0x80) >> 7))


def alu_undefined(vx, vy):
    """Undefined ALU operation."""
    return (vx, *_no_flag(vx))


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    def _alu_shift_left(vx, vy):
        if state.shift_quirk:
            vx = vy
        return alu_shift_left(vx, vy)

    def _alu_shift_right(vx, vy):
        if state.shift_quirk:
            vx = vy
        return alu_shift_right(vx, vy)

    # Map 0-7 to themselves, E to 8 and everything else to the undefined handler
    op_index = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 9, 9, 9, 9, 9, 9, 8, 9])[instruction.n]

    result, vf, sets_flag = jax.lax.switch(
        op_index,
        [alu_set, alu_or, alu_and, alu_xor, alu_add,
         alu_sub_xy, _alu_shift_right, alu_sub_yx, _alu_shift_left, alu_undefined],
        vx, vy
    )

    # The flag is written first so that a result targeting VF wins
    new_V = state.V.at[FLAG_REGISTER].set(jnp.where(sets_flag, vf, state.V[FLAG_REGISTER]))
    new_V = new_V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    return state.replace(V=new_V)
