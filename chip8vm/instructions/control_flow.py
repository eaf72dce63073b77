"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN.

    The pushed address is the already-advanced PC, so a return resumes at
    the instruction following the call.
    """
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = (instruction.nnn + jnp.astype(state.V[0], jnp.uint16)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))
