# Common byte functions

from chip8sak.errors import Chip8SAKValueError


def hex_to_int(a_hex):
    if a_hex.startswith('$') or a_hex.startswith('#'):
        a_hex = a_hex[1:]
    elif a_hex.startswith('\\x') or a_hex.startswith('0x') or a_hex.startswith('0X'):
        a_hex = a_hex[2:]
    return int(a_hex, 16)


def parse_color(a_color):
    """
    Parses an RGBA8888 color.  Strings are always read as hex, with an optional
    '#', '0x' or '$' prefix.

    :param a_color: color as an int or a string
    :type a_color: int or str
    :return: 32-bit RGBA value
    :rtype: int
    """
    if isinstance(a_color, int) and not isinstance(a_color, bool):
        value = a_color
    elif isinstance(a_color, str):
        try:
            value = hex_to_int(a_color.strip())
        except ValueError:
            raise Chip8SAKValueError(
                'Error: "%s" is not a valid color in RGBA8888 format' % a_color) from None
    else:
        raise Chip8SAKValueError('Error: "%s" is not a valid color in RGBA8888 format' % a_color)

    if not 0 <= value <= 0xFFFFFFFF:
        raise Chip8SAKValueError('Error: color "%s" out of RGBA8888 range' % a_color)
    return value


def big_endian_bytes(a_num, min_bytes=2):
    retval = bytearray()
    remaining = a_num
    while remaining != 0:
        retval.append(remaining & 0xFF)
        remaining >>= 8
    while len(retval) < min_bytes:
        retval.append(0)
    return retval[::-1]


def big_endian_int(a_bytearray, signed=False):
    return int.from_bytes(a_bytearray, byteorder='big', signed=signed)


# group()/join()/hexdump_lines()
# adapted from http://code.activestate.com/recipes/579064-hex-dump/
def group(a, *ns):
    for n in ns:
        a = [a[i:i + n] for i in range(0, len(a), n)]
    return a


def join(a, *cs):
    return [cs[0].join(join(t, *cs[1:])) for t in a] if cs else a


def hexdump_lines(data, start=0):
    toHex = lambda c: '{:02X}'.format(c)
    toChr = lambda c: chr(c) if 32 <= c < 127 else '.'
    make = lambda f, *cs: join(group(list(map(f, data)), 8, 2), *cs)
    hs = make(toHex, '  ', ' ')
    cs = make(toChr, ' ', '')
    return ['{:04X}: {:48}  {:16}'.format(i * 16 + start, h, c) for i, (h, c) in enumerate(zip(hs, cs))]


def read_binary_file(path_and_filename):
    try:
        with open(path_and_filename, mode='rb') as in_file:
            return in_file.read()
    except FileNotFoundError:
        return None
