"""Tests for system instructions (0xxx)."""

import jax.numpy as jnp
from chip8vm import execute


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(1))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert state.draw_flag


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_nested_calls_unwind_in_order(fresh_state):
    """Returns pop addresses in reverse call order."""
    state = fresh_state.replace(pc=jnp.astype(0x202, jnp.uint16))
    state = execute(state, 0x2300)
    state = state.replace(pc=jnp.astype(0x304, jnp.uint16))
    state = execute(state, 0x2400)
    assert state.stack.pointer == 2

    state = execute(state, 0x00EE)
    assert state.pc == 0x304
    state = execute(state, 0x00EE)
    assert state.pc == 0x202


def test_machine_code_call_ignored(fresh_state):
    """0NNN is a no-op in the pure core."""
    state = execute(fresh_state, 0x0123)

    assert state.pc == fresh_state.pc
    assert state.stack.pointer == 0
