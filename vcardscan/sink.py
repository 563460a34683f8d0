import logging

from vcardscan.tags import TagTable


logger = logging.getLogger(__name__)


class Warnings:
    def __init__(self, source=None):
        self.source = source
        self.messages = []

    def __len__(self):
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)

    def warn(self, message):
        self.messages.append(message)

        if self.source:
            logger.warning('"%s": %s', self.source, message)
        else:
            logger.warning('%s', message)

    def warn_once(self, message):
        if message not in self.messages:
            self.warn(message)


class PropertyEvent:
    def __init__(self, document, group, tag, name, parameters, value, language=None, tag_info=None):
        self.document = document
        self.group = group
        self.tag = tag
        self.name = name
        self.parameters = parameters
        self.value = value
        self.language = language
        self.tag_info = tag_info

    def __repr__(self):
        return f'PropertyEvent({self.document}, {self.group!r}, {self.tag!r}, {self.value!r})'


class VCardMetadata:
    def __init__(self, tag_table=None):
        self.tag_table = tag_table if tag_table is not None else TagTable()
        self.events = []

    def emit(self, document, group, tag, name, parameters, value, language=None, source_info=None):
        tag_info = self.tag_table.add_if_absent(tag, name, source_info)
        tag, tag_info = self.tag_table.lang_variant(tag, tag_info, language)

        event = PropertyEvent(document, group, tag, tag_info.name, parameters, value, language, tag_info)
        self.events.append(event)
        return event

    def documents(self):
        return sorted({event.document for event in self.events})

    def events_for(self, document):
        return [event for event in self.events if event.document == document]

    def get(self, name, document=0):
        for event in self.events:
            if event.document == document and name in (event.name, event.tag):
                return event.value

        return None

    @staticmethod
    def print_value(event):
        value = event.value

        if isinstance(value, bytes):
            return f'(Binary data {len(value)} bytes)'

        print_conv = event.tag_info.print_conv if event.tag_info else None

        if isinstance(value, list):
            if print_conv:
                value = [print_conv(v) for v in value]

            return ', '.join(value)

        return print_conv(value) if print_conv else value
