"""CHIP-8 instruction decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


# (mask, value, mnemonic template); templates are filled from the operand fields
INSTRUCTION_PATTERNS = (
    (0xFFFF, 0x00E0, "CLS"),
    (0xFFFF, 0x00EE, "RET"),
    (0xF000, 0x1000, "JP 0x{nnn:03X}"),
    (0xF000, 0x2000, "CALL 0x{nnn:03X}"),
    (0xF000, 0x3000, "SE V{x:X}, 0x{nn:02X}"),
    (0xF000, 0x4000, "SNE V{x:X}, 0x{nn:02X}"),
    (0xF00F, 0x5000, "SE V{x:X}, V{y:X}"),
    (0xF000, 0x6000, "LD V{x:X}, 0x{nn:02X}"),
    (0xF000, 0x7000, "ADD V{x:X}, 0x{nn:02X}"),
    (0xF00F, 0x8000, "LD V{x:X}, V{y:X}"),
    (0xF00F, 0x8001, "OR V{x:X}, V{y:X}"),
    (0xF00F, 0x8002, "AND V{x:X}, V{y:X}"),
    (0xF00F, 0x8003, "XOR V{x:X}, V{y:X}"),
    (0xF00F, 0x8004, "ADD V{x:X}, V{y:X}"),
    (0xF00F, 0x8005, "SUB V{x:X}, V{y:X}"),
    (0xF00F, 0x8006, "SHR V{x:X}, V{y:X}"),
    (0xF00F, 0x8007, "SUBN V{x:X}, V{y:X}"),
    (0xF00F, 0x800E, "SHL V{x:X}, V{y:X}"),
    (0xF00F, 0x9000, "SNE V{x:X}, V{y:X}"),
    (0xF000, 0xA000, "LD I, 0x{nnn:03X}"),
    (0xF000, 0xB000, "JP V0, 0x{nnn:03X}"),
    (0xF000, 0xC000, "RND V{x:X}, 0x{nn:02X}"),
    (0xF000, 0xD000, "DRW V{x:X}, V{y:X}, {n}"),
    (0xF0FF, 0xE09E, "SKP V{x:X}"),
    (0xF0FF, 0xE0A1, "SKNP V{x:X}"),
    (0xF0FF, 0xF007, "LD V{x:X}, DT"),
    (0xF0FF, 0xF00A, "LD V{x:X}, K"),
    (0xF0FF, 0xF015, "LD DT, V{x:X}"),
    (0xF0FF, 0xF018, "LD ST, V{x:X}"),
    (0xF0FF, 0xF01E, "ADD I, V{x:X}"),
    (0xF0FF, 0xF029, "LD F, V{x:X}"),
    (0xF0FF, 0xF033, "LD B, V{x:X}"),
    (0xF0FF, 0xF055, "LD [I], V{x:X}"),
    (0xF0FF, 0xF065, "LD V{x:X}, [I]"),
)


def _match(instruction: int):
    for mask, value, template in INSTRUCTION_PATTERNS:
        if instruction & mask == value:
            return template
    return None


def is_known_opcode(instruction: int) -> bool:
    """Check whether a 16-bit opcode matches any CHIP-8 instruction."""
    return _match(int(instruction)) is not None


def disassemble(instruction: int) -> str:
    """Render an opcode as a mnemonic, e.g. ``DRW V0, V1, 5``.

    Unknown opcodes render as ``???``.
    """
    instruction = int(instruction)
    template = _match(instruction)
    if template is None:
        return "???"
    decoded = decode(instruction)
    return template.format(x=decoded.x, y=decoded.y, n=decoded.n, nn=decoded.nn, nnn=decoded.nnn)
