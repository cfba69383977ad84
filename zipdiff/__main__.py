"""
Command-line interface to the zipdiff module.
"""

import argparse
import logging
import pathlib as pl
import sys

from zipdiff.archive_diff import ArchiveDiffer
from zipdiff.archive_format_handler import ArchiveReadError
from zipdiff.config import ComparisonConfig, ConfigurationError
from zipdiff.output import ENCODING, RENDERERS, renderer_for_destination

EXIT_SAME = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """
    :return: Parser of the command line arguments.
    """
    parser = argparse.ArgumentParser('zipdiff', description='''Compares the entries of two zip,
                                     jar, war, ear or rar archives.''')
    parser.add_argument('file1',
                        type=pl.Path,
                        metavar='FILE_1',
                        help='First archive file.')
    parser.add_argument('file2',
                        type=pl.Path,
                        metavar='FILE_2',
                        help='Second archive file.')
    parser.add_argument('--output', '-o',
                        type=pl.Path,
                        help='Destination file. The suffix .html or .xml selects the report format,'
                             ' every other name gets a text report. By default the report is'
                             ' printed to the standard output.')
    parser.add_argument('--format',
                        choices=sorted(RENDERERS),
                        help='Report format, overrides the format derived from the destination.')
    parser.add_argument('--ignore-timestamps',
                        action='store_true',
                        help='Ignores the modification times of the entries.')
    parser.add_argument('--ignore-crc',
                        action='store_true',
                        help='Does not compare the CRC32 checksums of the entries.')
    parser.add_argument('--ignore-cvs-files',
                        action='store_true',
                        help='Ignores all entries below a CVS/ directory.')
    parser.add_argument('--exclude',
                        action='append',
                        default=[],
                        metavar='REGEX',
                        help='Ignores entries whose full name matches the regular expression.'
                             ' Can be given multiple times.')
    parser.add_argument('--skip-unreadable-nested',
                        action='store_true',
                        help='Compares nested archives that cannot be read as plain files instead'
                             ' of failing.')
    parser.add_argument('--quiet', '-q',
                        action='store_true',
                        help='Only print a summary line if the archives differ. The --output'
                             ' file is still written.')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Prints debug messages.')
    return parser


def main(argv=None) -> int:
    """
    Main method that handles the command line interface of zipdiff.

    :param argv: Command line arguments, defaults to `sys.argv`.
    :return: 0 if the archives are equal, 1 if they differ and 2 on errors.
    """
    args = create_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        config = ComparisonConfig(
            ignore_timestamps=args.ignore_timestamps,
            compare_checksums=not args.ignore_crc,
            ignore_version_control_artifacts=args.ignore_cvs_files,
            exclusion_patterns=frozenset(args.exclude),
            skip_unreadable_nested_archives=args.skip_unreadable_nested,
        )
        result = ArchiveDiffer(config).compute_diff(args.file1, args.file2)
    except (ArchiveReadError, ConfigurationError) as error:
        print(f'zipdiff: {error}', file=sys.stderr)
        return EXIT_ERROR

    exit_code = EXIT_DIFFERENT if result.has_differences() else EXIT_SAME

    if args.format is not None:
        renderer = RENDERERS[args.format]()
    elif args.output is not None:
        renderer = renderer_for_destination(args.output)
    else:
        renderer = RENDERERS['text']()

    if args.output is not None:
        try:
            renderer.render_to_file(result, args.output)
        except OSError as error:
            print(f'zipdiff: cannot write {args.output}: {error}', file=sys.stderr)
            return EXIT_ERROR

    if args.quiet:
        if result.has_differences():
            stats = result.stats()
            print(f'Different: added={stats["added"]} removed={stats["removed"]}'
                  f' changed={stats["changed"]}')
    elif args.output is None:
        sys.stdout.write(renderer.render_to_bytes(result).decode(ENCODING))

    return exit_code


if __name__ == '__main__':
    sys.exit(main())
