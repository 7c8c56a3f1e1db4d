"""Decoding of the Duden multi-byte text encoding and of Windows-1252 text."""

from __future__ import annotations


def _build_win1252_table() -> tuple[int, ...]:
    # Bytes that Windows-1252 leaves undefined map to the code point of the same value.
    table = []
    for value in range(256):
        try:
            table.append(ord(bytes((value,)).decode("cp1252")))
        except UnicodeDecodeError:
            table.append(value)
    return tuple(table)


_WIN1252 = _build_win1252_table()

_DUDEN_TABLE = (
    0x2992, 0x2694, 0x0000, 0x0294, 0x00AE, 0x2655, 0x26AE, 0x26AD, 0x007E,
    0x0000, 0x020D, 0x020E, 0x020F, 0x0210, 0x00E6, 0x00E7, 0x00F0, 0x00F8,
    0x0127, 0x014B, 0x0153, 0x03B2, 0x03B8, 0x0111, 0x0180, 0x021C, 0x0195,
    0x021E, 0x021F, 0x0220, 0x0061, 0x0062, 0x0063, 0x0064, 0x0065, 0x0066,
    0x0067, 0x0068, 0x0069, 0x006A, 0x006B, 0x006C, 0x006D, 0x006E, 0x006F,
    0x0070, 0x0071, 0x0072, 0x0073, 0x0074, 0x0075, 0x0076, 0x0077, 0x0078,
    0x0079, 0x007A, 0x023B, 0x023C, 0x023D, 0x023E, 0x023F, 0x0240, 0x0241,
    0x0242, 0x0152, 0x0153,
)

_SPECIAL_CHARS = {0x25FF: 0xA0, 0x25FE: 0x2012, 0x25FD: 0x2014}


def _duden_char_to_unicode(ch: int) -> int:
    if ch in _SPECIAL_CHARS:
        return _SPECIAL_CHARS[ch]
    table_index = (ch - 0x203) & 0xFFFF
    if table_index < len(_DUDEN_TABLE):
        return _DUDEN_TABLE[table_index]
    if ch == 0x36E:
        return 0x35C
    if ch == 0x36F:
        return 0
    return ch


def win1252_to_utf8(data: bytes) -> str:
    """Decode Windows-1252 bytes."""
    return "".join(chr(_WIN1252[byte]) for byte in data)


def duden_to_utf8(data: bytes) -> str:
    """Decode text in the Duden encoding.

    Text after ``\\w{`` or ``\\S{;`` is taken byte by byte up to ``}``, and a
    line introduced by ``@C`` is taken as Windows-1252.
    """
    data = bytes(data)
    length = len(data)
    pos = 0

    def next_byte() -> int:
        nonlocal pos
        if pos >= length:
            raise ValueError("bad encoding, expected more bytes")
        value = data[pos]
        pos += 1
        return value

    out: list[int] = []
    raw_mode = False

    while pos < length:
        first = next_byte()
        ch = first
        if not raw_mode:
            restart = pos
            if first >= 0xA0:
                ch = (ch << 8) | next_byte()
                if first >= 0xF6:
                    ch = (ch << 8) | next_byte()
                    if first >= 0xFC:
                        ch = (ch << 8) | next_byte()
            if ch >= 0xF600:
                pos = restart
                ch = ord("?")
            if ch < 0xA0:
                pass
            elif ch < 0xA100:
                ch &= 0xFF
            else:
                low = (ch - 0x21) & 0xFF
                if low > 0x5E:
                    low = (low - 0x21) & 0xFF
                ch = 0xBE * (((ch + 0x5EDF) & 0xFFFF) >> 8) + low + 0x100
            ch = _duden_char_to_unicode(ch)
            if ch < 256:
                ch = _WIN1252[ch]

        if ch:
            out.append(ch)

        if out and out[-1] == ord("}"):
            raw_mode = False

        if out[-3:] == [ord("\\"), ord("w"), ord("{")]:
            raw_mode = True
        if out[-4:] == [ord("\\"), ord("S"), ord("{"), ord(";")]:
            raw_mode = True

        if len(out) >= 2 and out[-2] == ord("@") and out[-1] == ord("C"):
            byte = next_byte()
            if byte == ord("%"):
                out.append(byte)
            else:
                out.append(_WIN1252[byte])
                while pos < length:
                    byte = next_byte()
                    out.append(_WIN1252[byte])
                    if byte == ord("\n"):
                        break

    return "".join(map(chr, out))