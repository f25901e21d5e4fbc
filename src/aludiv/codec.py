# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information
""" Conversion between '0'/'1' strings and unsigned integers.

Strings are big-endian: the first character is the most significant bit.
"""

from aludiv.exceptions import InvalidFormat


def decode(s):
    """ Decode a big-endian binary literal.

    The empty string decodes to 0.

    :param s: a string of '0' and '1' characters.
    :returns int: the unsigned value.
    :raises InvalidFormat: if any character is not '0' or '1'.
    """
    value = 0
    for position, c in enumerate(s):
        if c == '1':
            value = (value << 1) | 1
        elif c == '0':
            value <<= 1
        else:
            raise InvalidFormat(f"invalid binary operand {s!r}: "
                                f"{c!r} at position {position}",
                                operand=s, position=position)
    return value


def encode(value, width):
    """ Encode ``value`` as a ``width``-bit big-endian binary literal.

    Emits one bit per position from ``width - 1`` down to 0, subtracting
    that power of two whenever what is left of ``value`` reaches it.
    Output for values that don't fit in ``width`` bits is not meaningful.

    :param value: the unsigned value to encode.
    :param width: number of characters to produce.
    :returns str:
    """
    assert width >= 0
    out = []
    for i in reversed(range(width)):
        bit = 1 << i
        if value >= bit:
            value -= bit
            out.append('1')
        else:
            out.append('0')
    return "".join(out)


def split_sign(s):
    """ Split a signed-magnitude operand into its sign flag and magnitude.

    :param s: a binary literal whose first character is the sign flag.
    :returns tuple: ``(sign, magnitude_bits)`` where ``sign`` is 0 or 1.
    :raises InvalidFormat: if ``s`` is empty or not binary.
    """
    if not s:
        raise InvalidFormat("empty signed operand has no sign flag",
                            operand=s)
    decode(s)  # validate every character
    return int(s[0]), s[1:]
