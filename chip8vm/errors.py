"""Errors raised by the CHIP-8 machine."""


class Chip8Error(Exception):
    """Base error for CHIP-8 machine failures."""


class OversizedProgram(Chip8Error):
    """Raised when a program image does not fit above the reserved region."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Program is {size} bytes, at most {limit} fit in memory")
        self.size = size
        self.limit = limit


class UnknownOpcode(Chip8Error):
    """Raised when an opcode matches no instruction pattern."""

    def __init__(self, value: int, address: int):
        super().__init__(f"Unknown opcode 0x{value:04X} at 0x{address:03X}")
        self.value = value
        self.address = address


class InvalidDigit(Chip8Error):
    """Raised by FX29 when VX is not a hexadecimal digit."""

    def __init__(self, value: int):
        super().__init__(f"Expected VX <= 0xF but found VX=0x{value:X}")
        self.value = value


class StackOverflow(Chip8Error):
    """Raised when a call would exceed the 16-level call stack."""

    def __init__(self, address: int):
        super().__init__(f"Call stack overflow at 0x{address:03X}")
        self.address = address


class StackUnderflow(Chip8Error):
    """Raised when returning with an empty call stack."""

    def __init__(self, address: int):
        super().__init__(f"Return with empty call stack at 0x{address:03X}")
        self.address = address


class KeyWaitTimeout(Chip8Error):
    """Raised when FX0A exhausts its polling budget without a key press."""

    def __init__(self, polls: int):
        super().__init__(f"No key pressed after {polls} polls")
        self.polls = polls
