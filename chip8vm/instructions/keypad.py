"""CHIP-8 keypad instructions (Exxx)."""

import jax
import jax.lax
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    key_index = state.V[instruction.x] & 0xF
    key_pressed = state.keypad[key_index]
    is_not_instruction = (instruction.nn == 0xA1)
    is_key_instruction = is_not_instruction | (instruction.nn == 0x9E)
    condition = (key_pressed ^ is_not_instruction) & is_key_instruction

    return jax.lax.cond(
        condition,
        lambda state: state.replace(pc=state.pc + 2),
        lambda state: state,
        state
    )
