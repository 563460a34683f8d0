import re

from vcardscan.lexer import UNRECOGNIZED_LINE, LineError, parse_property_line
from vcardscan.sink import Warnings
from vcardscan.tags import TagInfo, default_tag_table
from vcardscan.text import decode_vcard_text, strip_data_uri, ucfirst


NEWLINE = b'\r\n'
MISSING_END = 'Missing VCard end'

_SIGNATURE_PATTERN = re.compile(rb'BEGIN:VCARD\r\n', re.IGNORECASE)
_MARKER_PATTERN = re.compile(r'(BEGIN|END):VCARD', re.IGNORECASE)

_LOCATION_INFO = TagInfo('', 'Location')


class TextReader:
    # lines come back as latin-1 so every byte survives lexing

    def __init__(self, stream):
        self.stream = stream
        self.line_number = 0

        self._next_line = None

    def _read_physical_line(self):
        chunks = []

        while True:
            chunk = self.stream.readline()

            if not chunk:
                break

            chunks.append(chunk)

            if chunk.endswith(NEWLINE):
                break

        return b''.join(chunks).decode('latin-1')

    def readline(self):
        if self._next_line is None:
            line = self._read_physical_line()
        else:
            line = self._next_line
            self._next_line = None

        if line:
            self.line_number += 1

        return line

    def peekline(self):
        if self._next_line is None:
            self._next_line = self._read_physical_line()

        return self._next_line


def _chomp(line):
    return line[:-2] if line.endswith('\r\n') else line


def unfold_lines(reader):
    while True:
        line = reader.readline()

        if not line:
            return

        line_number = reader.line_number
        fragments = [_chomp(line)]

        while reader.peekline()[:1] in (' ', '\t'):
            fragments.append(_chomp(reader.readline())[1:])

        yield line_number, ''.join(fragments)


class DocumentTracker:
    OUTSIDE = 'outside'
    INSIDE_BEFORE_END = 'inside-before-end'
    INSIDE_AFTER_END = 'inside-after-end'

    def __init__(self, first_document=0):
        self.state = self.OUTSIDE
        self.document = first_document

    @property
    def inside(self):
        return self.state == self.INSIDE_BEFORE_END

    @property
    def complete(self):
        return self.state == self.INSIDE_AFTER_END

    def feed(self, line):
        match = _MARKER_PATTERN.fullmatch(line)

        if not match:
            if self.state == self.INSIDE_AFTER_END:
                # a property after END starts the next card
                self.document += 1
                self.state = self.INSIDE_BEFORE_END

            return False

        if match.group(1).upper() == 'BEGIN':
            if self.state == self.INSIDE_AFTER_END:
                self.document += 1

            self.state = self.INSIDE_BEFORE_END
        elif self.state == self.INSIDE_BEFORE_END:
            self.state = self.INSIDE_AFTER_END

        return True


def is_vcard(stream):
    position = stream.tell()

    try:
        head = stream.read(16)
    finally:
        stream.seek(position)

    return _SIGNATURE_PATTERN.match(head) is not None


def resolve_tag(tag, parameters, tag_info):
    if tag_info is not None:
        name = tag_info.name
    elif tag[:2].upper() == 'X-':
        name = ucfirst(tag[2:])
    else:
        name = ucfirst(tag)

    type_ = parameters.get('type')

    if type_:
        tag += type_
        name += type_

    return tag, name


class VCardParser:
    def __init__(self, tag_table=None, first_document=0):
        self.tag_table = tag_table
        self.first_document = first_document

    def process(self, stream, sink, warnings=None):
        # None means not a vcard, otherwise the number of warnings issued
        if not is_vcard(stream):
            return None

        if warnings is None:
            warnings = Warnings()

        issued = len(warnings)
        tag_table = self.tag_table if self.tag_table is not None else default_tag_table()
        tracker = DocumentTracker(self.first_document)

        for _, line in unfold_lines(TextReader(stream)):
            if not line or tracker.feed(line):
                continue

            if not tracker.inside:
                warnings.warn_once(UNRECOGNIZED_LINE)
                continue

            try:
                prop = parse_property_line(line)
                self._emit_property(prop, tracker.document, tag_table, sink)
            except LineError as exc:
                warnings.warn_once(str(exc))

        if not tracker.complete:
            warnings.warn(MISSING_END)

        return len(warnings) - issued

    def _emit_property(self, prop, document, tag_table, sink):
        parameters = prop.parameters
        source_info = tag_table.lookup(prop.tag)
        tag, name = resolve_tag(prop.tag, parameters, source_info)
        encoding = parameters.get('encoding')

        value, suffix = strip_data_uri(prop.value)

        if suffix:
            tag += suffix
            name += suffix
            encoding = parameters['encoding'] = 'base64'

        language = parameters.get('language') or None
        value = decode_vcard_text(value, encoding)
        sink.emit(document, prop.group, tag, name, parameters, value, language, source_info)

        for key in ('geo', 'label'):
            if key not in parameters:
                continue

            extra = parameters[key]
            extra_info = None

            if key == 'geo':
                extra_info = _LOCATION_INFO
                extra = extra[4:] if extra.startswith('geo:') else extra

            sink.emit(document, prop.group, tag + ucfirst(key), name + ucfirst(key), parameters,
                      decode_vcard_text(extra), language, extra_info)


def process_vcard(stream, sink, warnings=None, tag_table=None, first_document=0):
    return VCardParser(tag_table, first_document).process(stream, sink, warnings)
