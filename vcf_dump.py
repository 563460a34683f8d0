import logging

from vcardscan.core import VCardParser
from vcardscan.sink import VCardMetadata, Warnings
from vcardscan.tags import default_tag_table


_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

logger = logging.getLogger('vcardscan')
logger.setLevel(logging.INFO)
logger.addHandler(_handler)


def format_event(metadata, event, *, short=False, raw=False):
    label = event.tag if short else event.name

    if event.group:
        label = f'{event.group}:{label}'

    if raw and not isinstance(event.value, bytes):
        value = event.value if isinstance(event.value, str) else ', '.join(event.value)
    else:
        value = metadata.print_value(event)

    return f'{label:<32}: {value}'


def dump_vcard_stream(input_stream, output_stream, source=None, *, short=False, raw=False, first_document=0):
    tag_table = default_tag_table()
    metadata = VCardMetadata(tag_table)
    warnings = Warnings(source)
    result = VCardParser(tag_table, first_document).process(input_stream, metadata, warnings)

    if result is None:
        return None

    for document in metadata.documents():
        output_stream.write(f'---- Document {document} ----\n')

        for event in metadata.events_for(document):
            output_stream.write(format_event(metadata, event, short=short, raw=raw))
            output_stream.write('\n')

    return result


def main():
    import os
    import glob
    import sys
    import argparse

    parser = argparse.ArgumentParser(description='extract properties from vcard files.')
    parser.add_argument('-i', dest='input_files', action='append', required=True, metavar='INPUT',
                        help='specify input vcard files. supports wildcards.')
    parser.add_argument('-s', dest='short', action='store_true',
                        help='print tag ids instead of tag names.')
    parser.add_argument('-n', dest='raw', action='store_true',
                        help='print values without print conversion.')
    parser.add_argument('--first-document', dest='first_document', type=int, default=0, metavar='N',
                        help='index of the first card in each file (default: 0).')
    parser.add_argument('-v', dest='verbose', action='store_true',
                        help='enable debug logging.')
    args = parser.parse_args()

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    input_files = set()

    for pathname in args.input_files:
        if glob.has_magic(pathname):
            for p in glob.glob(pathname, recursive=True):
                if os.path.isfile(p):
                    input_files.add(p)
        else:
            if not os.path.exists(pathname):
                parser.exit(-1, f'"{pathname}" does not exist.')

            if not os.path.isfile(pathname):
                parser.exit(-1, f'"{pathname}" is not a file.')

            input_files.add(pathname)

    if not input_files:
        parser.exit(0)

    errors = 0

    for input_pathname in sorted(input_files):
        logger.info('reading "%s"', input_pathname)

        try:
            with open(input_pathname, 'rb') as input_stream:
                result = dump_vcard_stream(input_stream, sys.stdout, input_pathname, short=args.short,
                                           raw=args.raw, first_document=args.first_document)
        except OSError as exc:
            logger.error(f'"{input_pathname}": {exc}')
            errors += 1
            continue

        if result is None:
            logger.error(f'"{input_pathname}": not a vcard file')
            errors += 1

    sys.exit(errors)


if __name__ == '__main__':
    main()
