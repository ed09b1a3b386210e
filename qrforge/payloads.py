"""
Payload strings for the supported content types.

These produce the text that scanning apps recognise: plain URLs and text,
``WIFI:`` network credentials, vCard 3.0 contact cards and ``mailto:`` links.
An empty string means "nothing to encode yet".
"""

import re
from urllib.parse import quote

from .errors import InvalidInputError

WIFI_ENCRYPTIONS = ("WPA", "WEP", "nopass")

_WIFI_SPECIAL = re.compile(r'([\\;,:"])')


def escape_wifi(text: str) -> str:
    """Backslash-escape the characters the WIFI: syntax reserves."""
    return _WIFI_SPECIAL.sub(r'\\\1', text or '')


def url_payload(url: str) -> str:
    return (url or '').strip()


def text_payload(text: str) -> str:
    return text or ''


def wifi_payload(ssid: str, password: str = '', encryption: str = 'WPA') -> str:
    """Network credentials; an open network ("nopass") carries no password."""
    ssid = escape_wifi((ssid or '').strip())
    password = escape_wifi((password or '').strip())
    if encryption not in WIFI_ENCRYPTIONS:
        raise InvalidInputError(f"Unknown WiFi encryption: {encryption!r}")
    if not ssid:
        return ''
    if encryption == 'nopass':
        return f"WIFI:T:nopass;S:{ssid};;"
    return f"WIFI:T:{encryption};S:{ssid};P:{password};;"


def vcard_payload(name: str = '', phone: str = '', email: str = '',
                  company: str = '', website: str = '') -> str:
    fields = [(value or '').strip() for value in (name, phone, email, company, website)]
    if not any(fields):
        return ''
    name, phone, email, company, website = fields
    return "\n".join([
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{name}",
        f"ORG:{company}",
        f"TEL:{phone}",
        f"EMAIL:{email}",
        f"URL:{website}",
        "END:VCARD",
    ])


def email_payload(address: str, subject: str = '', body: str = '') -> str:
    address = (address or '').strip()
    if not address:
        return ''
    # Same escaping as encodeURIComponent
    subject = quote((subject or '').strip(), safe="-_.!~*'()")
    body = quote((body or '').strip(), safe="-_.!~*'()")
    return f"mailto:{address}?subject={subject}&body={body}"


BUILDERS = {
    'url': url_payload,
    'text': text_payload,
    'wifi': wifi_payload,
    'vcard': vcard_payload,
    'email': email_payload,
}


def build_payload(kind: str, **fields) -> str:
    """Dispatch to the builder for ``kind`` (url, text, wifi, vcard, email)."""
    try:
        builder = BUILDERS[kind]
    except KeyError:
        raise InvalidInputError(f"Unknown content type: {kind!r}") from None
    return builder(**fields)
