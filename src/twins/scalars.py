"""
Platform scalar types.

Python has a single ``int`` and ``float``; the digital twins platform and DTDL
distinguish integer widths, single/double precision and characters. The
``NewType`` aliases below let a twin declare those widths so both the wire
reader and the schema generator can dispatch on them:

    @digital_twin(display_name="Pump")
    class Pump(TwinBase):
        rpm: Optional[UnsignedShort] = twin_property()
"""

from dataclasses import dataclass
from typing import NewType


Byte = NewType("Byte", int)
UnsignedByte = NewType("UnsignedByte", int)
Short = NewType("Short", int)
UnsignedShort = NewType("UnsignedShort", int)
Integer = NewType("Integer", int)
UnsignedInteger = NewType("UnsignedInteger", int)
Long = NewType("Long", int)
UnsignedLong = NewType("UnsignedLong", int)
Float = NewType("Float", float)
Char = NewType("Char", str)


@dataclass(frozen=True)
class ETag:
    """
    Opaque concurrency tag used by the platform for optimistic concurrency.

    The platform hands out tags both bare (``W/"..."``) and quoted; the
    surrounding quote characters are trimmed so tags compare by content.
    """
    value: str = ""

    def __post_init__(self) -> None:
        value = self.value or ""
        if len(value) >= 2 and value[0] == value[-1] == '"':
            object.__setattr__(self, "value", value[1:-1])
        elif value != self.value:
            object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value

    def __bool__(self) -> bool:
        return bool(self.value)
