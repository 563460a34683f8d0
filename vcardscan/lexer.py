import re

from vcardscan.text import capitalize, ucfirst, unescape


UNRECOGNIZED_LINE = 'Unrecognized line in VCard file'
INVALID_LINE = 'Invalid line in VCard file'

# [group.]tag(;param[=value[,value...]])*:value
NAME_TOKEN = re.compile(r'[-A-Za-z0-9.]+')
PARAM_NAME = re.compile(r'[-A-Za-z0-9]*')

_BARE_TOKEN_DELIMITERS = '";:,'


class LineError(ValueError):
    pass


class Scanner:
    def __init__(self, string):
        self.string = string
        self.pos = 0

    def peek(self):
        return self.string[self.pos:self.pos + 1]

    def accept(self, char):
        if self.string.startswith(char, self.pos):
            self.pos += len(char)
            return True

        return False

    def match(self, pattern):
        match = pattern.match(self.string, self.pos)

        if match is None:
            return None

        self.pos = match.end()
        return match.group()

    def rest(self):
        return self.string[self.pos:]


class PropertyLine:
    def __init__(self, group, tag, parameters, value):
        self.group = group
        self.tag = tag
        self.parameters = parameters
        self.value = value

    def __repr__(self):
        return f'PropertyLine({self.group!r}, {self.tag!r}, {self.parameters!r}, {self.value!r})'


def normalize_tag(tag):
    # all-caps tag ids are case-insensitive by convention, so tone them down
    if any(char.islower() for char in tag):
        return ucfirst(tag)

    return ucfirst(tag.lower())


def split_group(token):
    group, dot, tag = token.rpartition('.')

    if not dot:
        return None, token

    return capitalize(group) or None, tag


def read_quoted_token(scanner):
    if scanner.peek() != '"':
        return None

    end = scanner.string.find('"', scanner.pos + 1)

    if end < 0:
        return None

    token = scanner.string[scanner.pos + 1:end]
    scanner.pos = end + 1
    scanner.accept(',')
    return token


def read_bare_token(scanner):
    string = scanner.string
    start = scanner.pos
    index = start
    end = len(string)

    while index < end:
        char = string[index]

        if char == '\\':
            index += 2
            continue

        if char in _BARE_TOKEN_DELIMITERS:
            break

        index += 1

    index = min(index, end)

    if index == start:
        return None

    if string.startswith(',', index):
        index += 1

    scanner.pos = index
    return string[start:index]


def read_parameter(scanner, parameters):
    if not scanner.accept(';'):
        return False

    mark = scanner.pos
    name = scanner.match(PARAM_NAME)

    if scanner.accept('='):
        name = name.lower()
    else:
        # vCard 2.1 style ";HOME" is a bare TYPE value
        scanner.pos = mark
        name = 'type'

    values = []

    while True:
        token = read_quoted_token(scanner)

        if token is None:
            token = read_bare_token(scanner)

        if token is None:
            break

        values.append(capitalize(token) if name == 'type' else token)

    if values:
        parameters[name] = parameters.get(name, '') + unescape(''.join(values))
    else:
        parameters.setdefault(name, '')

    return True


def parse_property_line(line):
    scanner = Scanner(line)
    token = scanner.match(NAME_TOKEN)

    if not token:
        raise LineError(UNRECOGNIZED_LINE)

    group, tag = split_group(token)

    if not tag:
        raise LineError(UNRECOGNIZED_LINE)

    parameters = {}

    while read_parameter(scanner, parameters):
        pass

    if not scanner.accept(':'):
        raise LineError(INVALID_LINE)

    return PropertyLine(group, normalize_tag(tag), parameters, scanner.rest())
