import argparse
import logging
import sys

from pngsm import commands
from pngsm import exceptions as exc
from pngsm.version import __version__

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='pngsm',
        description='Hide text messages in PNG chunks.',
    )
    parser.add_argument('--version', action='version', version=__version__)
    parser.add_argument(
        '-v', '--verbose', action='store_true', help='log debug output')
    parser.add_argument('path', metavar='FILE', help='png file')
    subparsers = parser.add_subparsers(dest='command', required=True)

    encode = subparsers.add_parser(
        'encode', help='add a secret message to the png file')
    encode.add_argument('chunk_type', help='chunk type for the message')
    encode.add_argument('message', help='the message to store')
    encode.add_argument(
        '-o', '--output', action='store_true', help='print the message')

    decode = subparsers.add_parser(
        'decode', help='show the secret messages of a chunk type')
    decode.add_argument('chunk_type', help='chunk type to show')

    remove = subparsers.add_parser(
        'remove', help='remove a message from the png file')
    remove.add_argument('chunk_type', help='chunk type to remove')
    remove.add_argument(
        '-i', '--index', type=int, default=None,
        help='which chunk of that type to remove, without asking')

    subparsers.add_parser('print', help='print all messages in the png file')
    return parser


def run(args, out):
    if args.command == 'encode':
        commands.encode(args.path, args.chunk_type, args.message)
        if args.output:
            print(args.message, file=out)
    elif args.command == 'decode':
        messages = commands.decode(args.path, args.chunk_type)
        if not messages:
            print("No chunk with chunk type {}".format(args.chunk_type),
                  file=out)
        for message in messages:
            print("chunk type : {}\nmessage : {}\n".format(
                args.chunk_type, message), file=out)
    elif args.command == 'remove':
        chunk = commands.remove(args.path, args.chunk_type, index=args.index)
        print("removed chunk type : {}".format(chunk.chunk_type), file=out)
    elif args.command == 'print':
        for chunk_type, message in commands.print_chunks(args.path):
            print("chunk type : {}\nmessage : {}\n".format(
                chunk_type, message), file=out)


def main(argv=None, out=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    try:
        run(args, out or sys.stdout)
    except (exc.PNGError, OSError) as e:
        logger.error("%s: %s", args.path, e)
        return 1
    return 0
