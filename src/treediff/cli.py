import argparse
import logging
import sys
import textwrap
import tomllib
from pathlib import Path

from .commands.diff_tree import PathNotFound, do_diff_tree
from .report.writer import DEFAULT_OUTPUT_PATH
from .settings import (
    DiffSettings,
    SETTING_CHECKSUM_ALGORITHM,
    SETTING_LOGGING_LEVEL,
    SETTING_LOGGING_PATH,
    SETTING_OPEN_REPORT,
    SETTING_RECORDS_PATH,
    SETTING_REPORT_PATH,
)
from .utils.logs import configure_logging

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='treediff',
        description='Recursively compare a baseline directory tree with a modified one and report every file '
                    'and directory that was added, removed or modified. Files are compared by content '
                    'checksum, not by timestamps.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              treediff /path/to/baseline /path/to/modified
              treediff --output changes.txt --records changes.msgpack old/ new/
              treediff --open --algorithm sha512 old/ new/

            Settings may also be given in .treediff.toml in the working directory:
              [report]
              path = "changes.txt"
              open = true

              [checksum]
              algorithm = "sha256"

              [logging]
              path = "treediff.log"
              level = "DEBUG"
            ''').strip()
    )
    parser.add_argument(
        'baseline',
        metavar='BASELINE',
        help='Root of the baseline ("before") directory tree')
    parser.add_argument(
        'modified',
        metavar='MODIFIED',
        help='Root of the modified ("after") directory tree')
    parser.add_argument(
        '--output',
        metavar='PATH',
        help=f'Path of the text report, overwritten on every run (default: report.path setting or '
             f'{DEFAULT_OUTPUT_PATH})')
    parser.add_argument(
        '--records',
        metavar='PATH',
        help='Also write the difference records to PATH as a msgpack stream')
    parser.add_argument(
        '--open',
        action='store_true',
        default=None,
        help='Open the text report in the default viewer when the comparison completes')
    parser.add_argument(
        '--algorithm',
        metavar='NAME',
        help='Hash algorithm used for content checksums (default: checksum.algorithm setting or sha256)')
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Path to a TOML settings file (default: .treediff.toml in the working directory, if present)')
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log every directory visited and every checksum computed')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file for operation logging. If not provided, uses logging.path from settings or no '
             'log file.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=LOG_LEVELS,
        help='Logging level (DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL). Defaults to INFO, or DEBUG with '
             '--verbose.')
    return parser


def treediff_main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = DiffSettings.load(args.config)
    except (OSError, tomllib.TOMLDecodeError) as e:
        parser.error(f"cannot load settings: {e}")

    # Command-line options take precedence over settings
    log_level = args.log_level
    if log_level is None:
        log_level = 'DEBUG' if args.verbose else settings.get(SETTING_LOGGING_LEVEL, 'INFO')
    if not isinstance(log_level, str) or log_level.upper() not in LOG_LEVELS:
        parser.error(f"{SETTING_LOGGING_LEVEL} must be one of {', '.join(LOG_LEVELS)}, not {log_level!r}")

    open_result = args.open
    if open_result is None:
        open_result = settings.get(SETTING_OPEN_REPORT, False)
        if not isinstance(open_result, bool):
            parser.error(f"{SETTING_OPEN_REPORT} must be true or false")

    log_file = args.log_file or settings.get(SETTING_LOGGING_PATH)
    try:
        configure_logging(log_level, log_file)
    except OSError as e:
        parser.error(f"cannot open log file: {e}")

    output_path = Path(args.output or settings.get(SETTING_REPORT_PATH, str(DEFAULT_OUTPUT_PATH)))
    records_setting = args.records or settings.get(SETTING_RECORDS_PATH)
    records_path = None if records_setting is None else Path(records_setting)
    algorithm = args.algorithm or settings.get(SETTING_CHECKSUM_ALGORITHM)

    try:
        do_diff_tree(
            Path(args.baseline),
            Path(args.modified),
            output_path,
            records_path=records_path,
            algorithm=algorithm,
            open_result=open_result
        )
    except PathNotFound:
        # Already reported by the differ with its role
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Comparison failed: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(treediff_main())
