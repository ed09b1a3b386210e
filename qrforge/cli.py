"""
qrforge - Create QR codes from URLs, text, WiFi credentials, contact cards
and email links.
"""

import argparse
import logging
import sys

from PIL import ImageColor

from . import config
from .encoder import encode
from .errors import QRForgeError
from .payloads import build_payload
from .render import save, to_text


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return number


def _payload_from_args(args) -> str:
    if args.type == 'wifi':
        return build_payload('wifi', ssid=args.ssid, password=args.password,
                             encryption=args.encryption)
    if args.type == 'vcard':
        return build_payload('vcard', name=args.name, phone=args.phone, email=args.email,
                             company=args.company, website=args.website)
    if args.type == 'email':
        return build_payload('email', address=args.address, subject=args.subject,
                             body=args.body)
    if args.type == 'url':
        return build_payload('url', url=args.data)
    return build_payload('text', text=args.data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='qrforge', description=__doc__.strip())
    parser.add_argument('data', nargs='?', default='',
                        help='Text or URL to encode (for --type url/text)')
    parser.add_argument('--type', choices=['url', 'text', 'wifi', 'vcard', 'email'],
                        default='text', help='Content type (default: text)')
    parser.add_argument('-o', '--output',
                        help='Output file (.png, .svg, ...); prints to the terminal if omitted')
    parser.add_argument('--error', choices=['L', 'M', 'Q', 'H'], default=config.DEFAULT_EC_LEVEL,
                        help='Error correction level: L=7%%, M=15%%, Q=25%%, H=30%% '
                             '(default: %(default)s)')
    parser.add_argument('--size', type=_positive_int, default=config.DEFAULT_SIZE,
                        help='Image size in pixels (default: %(default)s)')
    parser.add_argument('--border', type=_non_negative_int, default=config.DEFAULT_BORDER,
                        help='Quiet zone in modules (default: %(default)s)')
    parser.add_argument('--fg', default=config.DEFAULT_FG, help='Dark module colour')
    parser.add_argument('--bg', default=config.DEFAULT_BG, help='Light module colour')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log encoder steps')

    wifi = parser.add_argument_group('wifi')
    wifi.add_argument('--ssid', default='')
    wifi.add_argument('--password', default='')
    wifi.add_argument('--encryption', choices=['WPA', 'WEP', 'nopass'], default='WPA')

    vcard = parser.add_argument_group('vcard')
    vcard.add_argument('--name', default='')
    vcard.add_argument('--phone', default='')
    vcard.add_argument('--email', default='')
    vcard.add_argument('--company', default='')
    vcard.add_argument('--website', default='')

    email = parser.add_argument_group('email')
    email.add_argument('--address', default='')
    email.add_argument('--subject', default='')
    email.add_argument('--body', default='')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(name)s: %(message)s')

    try:
        payload = _payload_from_args(args)
        if not payload:
            print("Error: nothing to encode", file=sys.stderr)
            return 1
        for colour in (args.fg, args.bg):
            ImageColor.getrgb(colour)
        grid = encode(payload, args.error)
        if args.output:
            path = save(grid, args.output, size=args.size, fg=args.fg, bg=args.bg,
                        border=args.border)
            print(f"QR code saved to: {path} (version {grid.version}, "
                  f"{grid.side_length}x{grid.side_length})")
        else:
            print(to_text(grid, border=max(args.border, 2)))
    except (QRForgeError, ValueError) as e:
        print(f"Error generating QR code: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error writing {args.output}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
