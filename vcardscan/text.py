import base64
import re


_UNESCAPE_CHARS = {'\\': '\\', ',': ',', 'n': '\n', 'N': '\n'}

_QUOTED_PRINTABLE_PATTERN = re.compile(r'=([0-9a-fA-F]{2})')
_NON_BASE64_PATTERN = re.compile(r'[^A-Za-z0-9+/]')
_DATA_URI_PATTERN = re.compile(r'data:(\w+)/(\w+);base64,', re.ASCII)


def ucfirst(string):
    return string[:1].upper() + string[1:]


def capitalize(string):
    return ucfirst(string.lower())


def unescape(string):
    chars = []
    index = 0
    end = len(string)

    while index < end:
        char = string[index]
        index += 1

        if char == '\\' and index < end:
            next_char = string[index]
            index += 1
            chars.append(_UNESCAPE_CHARS.get(next_char, next_char))
        else:
            chars.append(char)

    return ''.join(chars)


def split_list_value(string):
    # parts keep their escapes; None when there is no unescaped comma
    parts = []
    start = 0
    index = 0
    end = len(string)

    while index < end:
        char = string[index]

        if char == '\\':
            index += 2
            continue

        if char == ',':
            parts.append(string[start:index])
            start = index + 1

        index += 1

    if not parts:
        return None

    parts.append(string[start:])

    while parts and not parts[-1]:
        parts.pop()

    return parts


def decode_quoted_printable(string):
    return _QUOTED_PRINTABLE_PATTERN.sub(lambda m: chr(int(m.group(1), 16)), string)


def decode_base64(string):
    data = _NON_BASE64_PATTERN.sub('', string.split('=', 1)[0])

    if len(data) % 4 == 1:
        # a lone trailing character holds no complete byte
        data = data[:-1]

    data += '=' * (-len(data) % 4)
    return base64.b64decode(data)


def decode_utf8(string):
    # lines are lexed as latin-1, so this recovers the original bytes
    return string.encode('latin-1', 'replace').decode('utf-8', 'replace')


def decode_vcard_text(value, encoding=None):
    encoding = encoding.lower() if encoding else ''

    if encoding in ('b', 'base64'):
        return decode_base64(value)

    if encoding == 'quoted-printable':
        value = decode_quoted_printable(value)

    value = decode_utf8(value)
    parts = split_list_value(value)

    if parts is None:
        return unescape(value)

    return [unescape(part) for part in parts]


def strip_data_uri(value):
    match = _DATA_URI_PATTERN.match(value)

    if not match:
        return value, None

    suffix = capitalize(match.group(1)) + capitalize(match.group(2))
    return value[match.end():], suffix
