import logging
import re


logger = logging.getLogger(__name__)

_AB_LABEL_PATTERN = re.compile(r'^_\$!<(.*)>!\$_$', re.DOTALL)


def _ab_label_print_conv(value):
    # Apple address book wraps its predefined labels as "_$!<Label>!$_"
    return _AB_LABEL_PATTERN.sub(r'\1', value)


class TagInfo:
    def __init__(self, name, category='Document', print_conv=None):
        self.name = name
        self.category = category
        self.print_conv = print_conv

    def copy(self, name=None):
        return TagInfo(self.name if name is None else name, self.category, self.print_conv)

    def __repr__(self):
        return f'TagInfo({self.name!r}, {self.category!r})'


# tag ids are the normalized forms produced by the lexer: "TEL" -> "Tel",
# "X-AIM" -> "X-aim", mixed-case ids such as "X-ABLabel" are kept
VCARD_TAGS = {
    'Version': TagInfo('VCardVersion'),
    'Fn': TagInfo('FormattedName', 'Author'),
    'N': TagInfo('Name', 'Author'),
    'Bday': TagInfo('Birthday', 'Time'),
    'Tz': TagInfo('TimeZone', 'Time'),
    'Adr': TagInfo('Address', 'Location'),
    'Geo': TagInfo('Geolocation', 'Location'),
    'Anniversary': TagInfo('Anniversary'),
    'Email': TagInfo('Email'),
    'Gender': TagInfo('Gender'),
    'Impp': TagInfo('IMPP'),
    'Lang': TagInfo('Language'),
    'Logo': TagInfo('Logo'),
    'Nickname': TagInfo('Nickname'),
    'Note': TagInfo('Note'),
    'Org': TagInfo('Organization'),
    'Photo': TagInfo('Photo'),
    'Prodid': TagInfo('Software'),
    'Rev': TagInfo('Revision'),
    'Sound': TagInfo('Sound'),
    'Tel': TagInfo('Telephone'),
    'Title': TagInfo('JobTitle'),
    'Uid': TagInfo('UID'),
    'Url': TagInfo('URL'),
    'X-ABLabel': TagInfo('ABLabel', print_conv=_ab_label_print_conv),
    'X-abdate': TagInfo('ABDate', 'Time'),
    'X-aim': TagInfo('AIM'),
    'X-icq': TagInfo('ICQ'),
    'X-abuid': TagInfo('AB_UID'),
    'X-abrelatednames': TagInfo('ABRelatedNames'),
    'X-socialprofile': TagInfo('SocialProfile'),
}


class TagTable:
    def __init__(self, tags=None):
        self.tags = dict(VCARD_TAGS if tags is None else tags)

    def __contains__(self, tag):
        return tag in self.tags

    def __len__(self):
        return len(self.tags)

    def lookup(self, tag):
        return self.tags.get(tag)

    def add_if_absent(self, tag, name, source_info=None):
        tag_info = self.tags.get(tag)

        if tag_info is None:
            tag_info = source_info.copy(name) if source_info else TagInfo(name)
            logger.debug('adding %s', tag)
            self.tags[tag] = tag_info

        return tag_info

    def lang_variant(self, tag, tag_info, language):
        if not language:
            return tag, tag_info

        variant = f'{tag}-{language}'
        return variant, self.add_if_absent(variant, f'{tag_info.name}-{language}', tag_info)


def default_tag_table():
    return TagTable(VCARD_TAGS)
