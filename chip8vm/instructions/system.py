"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), draw_flag=jnp.ones((), dtype=jnp.bool_))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch 00E0 and 00EE. Any other 0NNN (machine code routine) is ignored."""
    index = jnp.where(instruction.raw == 0x00E0, 0, jnp.where(instruction.raw == 0x00EE, 1, 2))
    return jax.lax.switch(index, [execute_clear_screen, execute_return, no_op], state, instruction)
