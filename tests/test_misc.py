"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
from chip8vm import execute, FONT_DATA


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestIndexArithmetic:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        state = execute(fresh_state, 0xA300)
        state = execute(state, 0x6410)  # V4 = 0x10
        state = execute(state, 0xF41E)
        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_does_not_touch_vf(self, fresh_state):
        """FX1E - Going past 0xFFF sets no flag."""
        state = execute(fresh_state, 0xAFFF)
        state = execute(state, 0x6F07)  # VF = 7
        state = execute(state, 0x6102)
        state = execute(state, 0xF11E)
        assert state.I == 0x1001
        assert state.V[15] == 7


class TestBCD:
    """Test BCD conversion."""

    def test_misc_bcd_conversion(self, fresh_state):
        """Test BCD conversion with 156."""
        state = fresh_state

        state = execute(state, 0x609C)  # V0 = 156
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)  # BCD conversion

        assert state.memory[0x300] == 1  # Hundreds
        assert state.memory[0x301] == 5  # Tens
        assert state.memory[0x302] == 6  # Ones

    @pytest.mark.parametrize("value,digits", [(0, (0, 0, 0)), (7, (0, 0, 7)), (42, (0, 4, 2)), (255, (2, 5, 5))])
    def test_bcd_edge_cases(self, fresh_state, value, digits):
        """Test BCD with edge cases."""
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA400)
        state = execute(state, 0xF033)

        assert tuple(int(d) for d in state.memory[0x400:0x403]) == digits


class TestFont:
    """Test font character addressing."""

    def test_font_table_resident(self, fresh_state):
        """The glyphs live at 0x000-0x04F."""
        assert (fresh_state.memory[0x00:0x50] == FONT_DATA).all()
        assert fresh_state.memory[0x50] == 0

    def test_misc_font_character(self, fresh_state):
        """Test font character addressing."""
        state = execute(fresh_state, 0x600A)  # V0 = 0xA
        state = execute(state, 0xF029)  # I = font address for A

        assert state.I == 0xA * 5

    def test_font_all_characters(self, fresh_state):
        """Test font addressing for all hex digits."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)  # I = font address

            assert state.I == digit * 5, f"Font address wrong for digit {digit:X}"


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load_registers(self, fresh_state):
        """FX55/FX65 round trip with I unchanged."""
        state = fresh_state

        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0x6203)  # V2 = 3
        state = execute(state, 0xA300)  # I = 0x300

        state = execute(state, 0xF255)  # Store V0-V2
        assert state.I == 0x300
        assert [int(b) for b in state.memory[0x300:0x303]] == [1, 2, 3]

        state = execute(state, 0x6000)
        state = execute(state, 0x6100)
        state = execute(state, 0x6200)

        state = execute(state, 0xF265)  # Load V0-V2
        assert state.I == 0x300
        assert [int(v) for v in state.V[:3]] == [1, 2, 3]

    def test_store_only_up_to_x(self, fresh_state):
        """FX55 - Registers past VX are not written."""
        state = execute(fresh_state, 0x6011)
        state = execute(state, 0x6122)
        state = execute(state, 0xA300)

        state = execute(state, 0xF055)  # Store V0 only

        assert state.memory[0x300] == 0x11
        assert state.memory[0x301] == 0

    def test_load_only_up_to_x(self, fresh_state):
        """FX65 - Registers past VX are not read."""
        state = fresh_state.replace(memory=fresh_state.memory.at[0x300:0x302].set(0x99))
        state = execute(state, 0x6155)  # V1 = 0x55
        state = execute(state, 0xA300)

        state = execute(state, 0xF065)  # Load V0 only

        assert state.V[0] == 0x99
        assert state.V[1] == 0x55

    def test_store_all_registers(self, fresh_state):
        """FX55 with X = F stores all sixteen registers."""
        state = fresh_state
        for x in range(16):
            state = execute(state, 0x6000 | (x << 8) | (x + 1))
        state = execute(state, 0xA500)

        state = execute(state, 0xFF55)

        assert [int(b) for b in state.memory[0x500:0x510]] == list(range(1, 17))


class TestWaitForKey:
    """Test FX0A in the pure core."""

    def test_wait_rewinds_without_key(self, fresh_state):
        """FX0A - No key down: PC moves back onto the instruction."""
        state = fresh_state.replace(pc=fresh_state.pc + 2)  # as if fetched
        state = execute(state, 0xF30A)
        assert state.pc == fresh_state.pc

    def test_wait_stores_lowest_pressed_key(self, fresh_state):
        """FX0A - The lowest pressed key is stored in VX."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0xB].set(True).at[0x7].set(True))
        initial_pc = state.pc
        state = execute(state, 0xF30A)
        assert state.V[3] == 0x7
        assert state.pc == initial_pc


def test_unknown_misc_is_no_op(fresh_state):
    """FXNN with an unassigned NN changes nothing."""
    state = execute(fresh_state, 0xF0FF)
    assert (state.V == fresh_state.V).all()
    assert state.I == fresh_state.I
    assert state.pc == fresh_state.pc
