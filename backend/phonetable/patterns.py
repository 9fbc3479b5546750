"""
Compiled regex families shared by the extraction stages
Phone surface forms, table layout cues and metadata value families
"""

import re
from typing import Dict, Pattern


# ==================== PHONE NUMBERS ====================

# Whole-cell Singapore surface forms, checked in order
PHONE_EXACT_PATTERNS: Dict[str, Pattern] = {
    'eightDigit': re.compile(r'^[689]\d{7}$'),

    # +65 prefixed
    'internationalPlus': re.compile(r'^\+65[689]\d{7}$'),
    'internationalPlusSpaced': re.compile(r'^\+65\s[689]\d{7}$'),
    'internationalPlusFormatted': re.compile(r'^\+65[689]\d{3}-\d{4}$'),
    'internationalPlusSpaceFormatted': re.compile(r'^\+65\s[689]\d{3}\s\d{4}$'),
    'internationalPlusSpaceDashed': re.compile(r'^\+65\s[689]\d{3}-\d{4}$'),

    # 65 prefixed, no plus
    'internationalPrefix': re.compile(r'^65[689]\d{7}$'),
    'internationalPrefixSpaced': re.compile(r'^65\s[689]\d{7}$'),
    'internationalPrefixFormatted': re.compile(r'^65[689]\d{3}-\d{4}$'),
    'internationalPrefixSpaceFormatted': re.compile(r'^65\s[689]\d{3}\s\d{4}$'),

    # Grouped local forms
    'formatted': re.compile(r'^[689]\d{3}-\d{4}$'),
    'spaceFormatted': re.compile(r'^[689]\d{3}\s\d{4}$'),
    'multiSpaceFormatted': re.compile(r'^[689]\d{3}\s+\d{4}$'),
    'dotFormatted': re.compile(r'^[689]\d{3}\.\d{4}$'),
    'underscoreFormatted': re.compile(r'^[689]\d{3}_\d{4}$'),
    'mixedSeparators': re.compile(r'^[689]\d{3}[-\s._]\d{4}$'),

    # Parenthesised country code
    'parentheses': re.compile(r'^\(65\)\s?[689]\d{3}-?\d{4}$'),
    'parenthesesSpaced': re.compile(r'^\(\+65\)\s[689]\d{3}\s\d{4}$'),
    'parenthesesFormatted': re.compile(r'^\(65\)\s[689]\d{3}-\d{4}$'),

    # Dotted international
    'internationalDotFormatted': re.compile(r'^65\.[689]\d{3}\.\d{4}$'),
    'plusDotFormatted': re.compile(r'^\+65\.[689]\d{3}\.\d{4}$'),

    # Bracketed / quoted
    'bracketed': re.compile(r'^\[[689]\d{3}-\d{4}\]$'),
    'bracketedInternational': re.compile(r'^\[\+65[689]\d{3}-\d{4}\]$'),
    'quoted': re.compile(r'^"[689]\d{3}-\d{4}"$'),
    'quotedInternational': re.compile(r'^"\+65[689]\d{3}-\d{4}"$'),

    # Country name / label prefixed
    'withCountryName': re.compile(r'^Singapore\s[689]\d{3}-\d{4}$', re.IGNORECASE),
    'withCountryCode': re.compile(r'^SG\s[689]\d{3}-\d{4}$', re.IGNORECASE),
    'withLabel': re.compile(
        r'^(?:Tel|Phone|Mobile|Mob|Cell|HP|Contact|Office)\.?:?\s*(?:\+?65\s?)?[689]\d{3}[-\s.]?\d{4}$',
        re.IGNORECASE
    ),
}

# Free-text scanning, most specific first. Digit-bounded so longer
# numeric runs are not carved into phone numbers.
PHONE_EMBEDDED_PATTERNS: Dict[str, Pattern] = {
    'withParentheses': re.compile(r'\((?:\+65|65)\)\s?[689]\d{3}[-\s._]?\d{4}(?!\d)'),
    'withBrackets': re.compile(r'\[(?:\+65|65)?[689]\d{3}[-\s._]?\d{4}\]'),
    'withQuotes': re.compile(r'"(?:\+65|65)?[689]\d{3}[-\s._]?\d{4}"'),
    'internationalFormatted': re.compile(r'(?<!\d)(?:\+65|65)[\s.-]?[689]\d{3}[-\s._]\d{4}(?!\d)'),
    'international': re.compile(r'(?<!\d)(?:\+65|65)[\s.-]?[689]\d{7}(?!\d)'),
    'formatted': re.compile(r'(?<!\d)[689]\d{3}[-\s._]\d{4}(?!\d)'),
    'basic': re.compile(r'(?<!\d)[689]\d{7}(?!\d)'),
}

CANONICAL_PHONE = re.compile(r'^[689]\d{7}$')
INTERNATIONAL_DIGITS = re.compile(r'^65[689]\d{7}$')

# Multi-number cell delimiters
PHONE_DELIMITERS = re.compile(r'[,;/|\n]|\s+(?:and|or|&)\s+', re.IGNORECASE)

# Normalization cleanup
PHONE_LABEL_PREFIX = re.compile(r'^(?:Phone|Tel|Mobile|Mob|Cell|HP|Contact|Office)\.?:?\s*', re.IGNORECASE)
PHONE_EXTENSION_SUFFIX = re.compile(r'\s*(?:ext\.?\s*\d+|extension\s*\d+|x\d{1,5})$', re.IGNORECASE)
PHONE_WRAPPERS = re.compile(r'[\[\]"\'()]')
PHONE_COUNTRY_NAME = re.compile(r'^(?:Singapore|SG)\s*', re.IGNORECASE)


# ==================== TABLE LAYOUT ====================

BORDERED_PATTERNS: Dict[str, Pattern] = {
    'heavy': re.compile(r'[│┃║|]{2,}|[─┄━═]{3,}|[┌┐└┘├┤┬┴┼]'),
    'light': re.compile(r'\|+.*\|+'),
    'ascii': re.compile(r'[+\-=]{3,}|\|'),
    'mixed': re.compile(r'[│┃║|\-─┄━═┌┐└┘├┤┬┴┼+]'),
}

BORDERED_SEPARATORS: Dict[str, str] = {
    'heavy-bordered': r'[│┃║|]+',
    'light-bordered': r'\|+',
    'ascii-bordered': r'[|+]+',
    'mixed-bordered': r'[|│┃║+]+',
}

TAB_PATTERNS: Dict[str, Pattern] = {
    'multiple': re.compile(r'\t{2,}'),
    'single': re.compile(r'\t'),
    'mixed': re.compile(r'\t+\s*'),
}

SPACE_PATTERNS: Dict[str, Pattern] = {
    'wide': re.compile(r'\s{4,}'),
    'medium': re.compile(r'\s{3}'),
    'narrow': re.compile(r'\s{2}'),
}

SPACE_SEPARATORS: Dict[str, str] = {
    'wide-spaced': r'\s{4,}',
    'medium-spaced': r'\s{3,}',
    'narrow-spaced': r'\s{2,}',
}

DEFAULT_SPACE_SEPARATOR = r'\s{2,}'
TAB_SEPARATOR = r'\t+'

ALIGNED_PATTERNS: Dict[str, Pattern] = {
    'consistent': re.compile(r'^\s*\S+(?:\s{2,}\S+)+\s*$'),
    'left': re.compile(r'^\S+(?:\s{2,}\S+)+'),
    'right': re.compile(r'\s+\S+(?:\s{2,}\S+)*$'),
    'centered': re.compile(r'^\s+\S+(?:\s{2,}\S+)*\s+$'),
}

HEADER_PATTERNS: Dict[str, Pattern] = {
    'underlined': re.compile(r'^.+\n[-=_]{3,}', re.MULTILINE),
    'capitalized': re.compile(r'^[A-Z\s]{3,}$'),
    'keywords': re.compile(r'\b(?:ID|PHONE|NUMBER|NAME|COMPANY|EMAIL|ADDRESS|WEBSITE)\b', re.IGNORECASE),
    'numbered': re.compile(r'^\s*\d+[.)]\s+'),
}

SEPARATOR_LINE_PATTERNS = [
    re.compile(r'^[-=_+*#]{3,}$'),
    re.compile(r'^[│┃║|]+$'),
    re.compile(r'^[─┄━═]+$'),
    # Box rules with corners and junctions
    re.compile(r'^[─┄━═┌┐└┘├┤┬┴┼│┃║\s]+$'),
    re.compile(r'^[|+](?=.*[-=]{3,})[-=:+|\s]+$'),
]

HEADER_LINE_PATTERNS = [
    re.compile(r'^(?:id|identifier|phone|number|name|company|email|address|website)\b', re.IGNORECASE),
    re.compile(r'^(?:s/n|serial|no\b\.?|#)', re.IGNORECASE),
]

MERGED_CELL_PATTERNS = [
    re.compile(r'^\s*[A-Za-z\s]+\s{10,}'),
    re.compile(r'\s{10,}[A-Za-z\s]+\s*$'),
    re.compile(r'^[^|]*\|[^|]{20,}\|'),
]

DATA_TYPE_PATTERNS: Dict[str, Pattern] = {
    'numeric': re.compile(r'^\d+$'),
    'alphanumeric': re.compile(r'^[A-Za-z0-9]+$'),
    'mixed': re.compile(r'^[A-Za-z0-9\s\-_.]+$'),
}

NUMERIC_VALUE = re.compile(r'^\d+(?:\.\d+)?$')
ID_VALUE = re.compile(r'^[A-Za-z0-9\-_]{1,20}$')

STRONG_ID_PATTERNS = [
    re.compile(r'^\d{1,10}$'),
    re.compile(r'^[A-Z]\d+$'),
    re.compile(r'^[A-Z]{2,3}\d+$'),
    re.compile(r'^\d+[A-Z]$'),
    re.compile(r'^[A-Z0-9]{3,15}$'),
]

DATE_PATTERNS = [
    re.compile(r'^\d{1,2}/\d{1,2}/\d{2,4}$'),
    re.compile(r'^\d{1,2}-\d{1,2}-\d{2,4}$'),
    re.compile(r'^\d{4}-\d{1,2}-\d{1,2}$'),
    re.compile(r'^(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{1,2},?\s+\d{4}$', re.IGNORECASE),
]

# Column relationship cues
NAME_PART = re.compile(r'^[A-Z][a-z]+$')
AREA_CODE_PART = re.compile(r'^[689]\d{0,2}$')
PHONE_BODY_PART = re.compile(r'^\d{4,7}$')
STREET_PART = re.compile(r'\d+[A-Za-z\s]+')
CITY_PART = re.compile(r'^[A-Z][a-z\s]+$')


# ==================== METADATA FAMILIES ====================

_STREET_SUFFIX = (
    r'(?:Street|St|Road|Rd|Avenue|Ave|Drive|Dr|Lane|Ln|Boulevard|Blvd|Close|Cl|Crescent|Cres|'
    r'Place|Pl|Walk|Park|Gardens?|Heights?|View|Hill|Rise|Terrace|Ter)'
)

COMPANY_PATTERNS: Dict[str, Pattern] = {
    'standard': re.compile(r"^[A-Z][A-Za-z\s&.,'-]{2,100}$"),
    'withLtd': re.compile(
        r"^[A-Za-z\s&.,'-]+(?:Ltd|Limited|Inc|Corp|Corporation|Pte|Private|Sdn|Bhd)\.?$",
        re.IGNORECASE
    ),
    'withNumbers': re.compile(r"^[A-Za-z0-9\s&.,'-]{3,100}$"),
    'abbreviated': re.compile(r'^[A-Z]{2,10}(?:\s[A-Za-z]+)*$'),
    'withSymbols': re.compile(r"^[A-Za-z0-9\s&.,'\-()@#]{3,100}$"),
    'allCaps': re.compile(r"^[A-Z\s&.,'-]{3,100}$"),
    'mixed': re.compile(r"^[A-Za-z][A-Za-z0-9\s&.,'\-()]{2,100}$"),
}

_EMAIL = r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}'

EMAIL_PATTERNS: Dict[str, Pattern] = {
    'standard': re.compile(r'^' + _EMAIL + r'$'),
    'embedded': re.compile(_EMAIL),
    'withSpaces': re.compile(r'[a-zA-Z0-9._%+-]+\s*@\s*[a-zA-Z0-9.-]+\s*\.\s*[a-zA-Z]{2,}'),
    'withText': re.compile(r'.*(' + _EMAIL + r').*'),
    'multiple': re.compile(r'(' + _EMAIL + r')[,;\s]+(' + _EMAIL + r')'),
}

_DOMAIN = r'(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,}'

WEBSITE_PATTERNS: Dict[str, Pattern] = {
    'full': re.compile(r'^https?://(?:www\.)?' + _DOMAIN + r'(?:/\S*)?$'),
    'withWww': re.compile(r'^www\.' + _DOMAIN + r'(?:/\S*)?$'),
    'domain': re.compile(r'^' + _DOMAIN + r'(?:/\S*)?$'),
    'embedded': re.compile(r'(?:https?://)?(?:www\.)?' + _DOMAIN + r'(?:/\S*)?'),
    'withText': re.compile(r'.*((?:https?://)?(?:www\.)?' + _DOMAIN + r'(?:/\S*)?).*'),
}

ADDRESS_PATTERNS: Dict[str, Pattern] = {
    'singapore': re.compile(
        r'\d+[A-Za-z]?\s+[A-Za-z\s]+\b' + _STREET_SUFFIX + r'\b\s*#?\d*-?\d*,?\s*(?:Singapore\s+)?\d{6}',
        re.IGNORECASE
    ),
    'international': re.compile(r'\d+[A-Za-z]?\s+[A-Za-z\s,.-]+\b' + _STREET_SUFFIX + r'\b', re.IGNORECASE),
    'simple': re.compile(r'\d+[A-Za-z\s,.-]+\b(?:Street|St|Road|Rd|Avenue|Ave|Drive|Dr|Lane|Ln|Boulevard|Blvd)\b', re.IGNORECASE),
    'withPostal': re.compile(r'.*\d{6}.*Singapore', re.IGNORECASE),
    'block': re.compile(r'Blk\s+\d+[A-Za-z]?\s+[A-Za-z\s]+', re.IGNORECASE),
    'unit': re.compile(r'#\d+-\d+'),
}

CONTACT_PATTERNS: Dict[str, Pattern] = {
    'fax': re.compile(r'\b(?:Fax|F):?\s*\+?[\d\s\-()]{7,15}', re.IGNORECASE),
    'mobile': re.compile(r'\b(?:Mobile|Cell|HP|M):?\s*\+?[\d\s\-()]{7,15}', re.IGNORECASE),
    'office': re.compile(r'\b(?:Office|Tel|Phone|P):?\s*\+?[\d\s\-()]{7,15}', re.IGNORECASE),
    'extension': re.compile(r'\b(?:Ext|Extension):?\s*\d{2,6}', re.IGNORECASE),
}

# Identifier bodies must carry at least one digit
_REG_BODY = r'(?=[A-Z0-9]*\d)'

BUSINESS_PATTERNS: Dict[str, Pattern] = {
    'registration': re.compile(
        r'\b(?:Reg|Registration|UEN|Company)\s*(?:No|Number)?\.?:?\s*' + _REG_BODY + r'[A-Z0-9]{8,20}',
        re.IGNORECASE
    ),
    'gst': re.compile(r'\b(?:GST|Tax)\s*(?:No|Number)?\.?:?\s*' + _REG_BODY + r'[A-Z0-9]{8,15}', re.IGNORECASE),
    'license': re.compile(r'\b(?:License|Licence)\s*(?:No|Number)?\.?:?\s*' + _REG_BODY + r'[A-Z0-9]{5,20}', re.IGNORECASE),
}

PERSON_NAME_PATTERNS: Dict[str, Pattern] = {
    'full': re.compile(r'^[A-Z][a-z]+\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*$'),
    'withTitle': re.compile(r'^(?:Mr|Ms|Mrs|Dr|Prof)\.?\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*$', re.IGNORECASE),
    'initials': re.compile(r'^[A-Z]\.?\s*[A-Z]\.?\s*[A-Z][a-z]+$'),
    'asian': re.compile(r'^[A-Z][a-z]+(?:\s+[A-Z][a-z]+){0,3}$'),
}

JOB_TITLE_PATTERNS: Dict[str, Pattern] = {
    'standard': re.compile(
        r'^(?:Manager|Director|CEO|CTO|CFO|President|Vice President|Senior|Junior|Assistant|Executive|'
        r'Officer|Coordinator|Specialist|Analyst|Engineer|Developer|Designer|Consultant|Advisor)',
        re.IGNORECASE
    ),
    'withDepartment': re.compile(r'^[A-Za-z\s]+(?:Manager|Director|Head|Lead|Chief|Officer)$', re.IGNORECASE),
}

DEPARTMENT_PATTERNS: Dict[str, Pattern] = {
    'common': re.compile(
        r'^(?:Sales|Marketing|Finance|HR|Human Resources|IT|Information Technology|Operations|'
        r'Customer Service|Support|Administration|Legal|Procurement|R&D|Research|Development)$',
        re.IGNORECASE
    ),
    'withDept': re.compile(r'^[A-Za-z\s]+(?:Department|Dept|Division|Unit|Team)$', re.IGNORECASE),
}

STREET_CUE = re.compile(r'\d+.*(?:Street|Road|Avenue)')
