"""Rendering and persistence of difference records."""

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path, PurePath
from typing import Iterable, Iterator

import msgpack

from .record import DifferenceRecord, DifferenceType, ItemKind
from ..utils.logs import log_success

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = Path('results.txt')
SEPARATOR_WIDTH = 50


class ReportWriter:
    """Writes difference records to a human-readable text report.

    Each record becomes a block of lines:

        File: /baseline/a/x.txt
        Type: Modified
        Size: 2 bytes
        Checksum: 8f43...
        Modified File: /modified/a/x.txt
        Modified Size: 2 bytes
        Modified Checksum: 1ab0...
        --------------------------------------------------

    Size and checksum lines only appear for files, and the "Modified" lines only for
    modified entities.
    """

    def __init__(self, output_path: str | os.PathLike = DEFAULT_OUTPUT_PATH, logger: logging.Logger | None = None):
        self._output_path = Path(output_path)
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    @property
    def output_path(self) -> Path:
        return self._output_path

    @staticmethod
    def render(differences: Iterable[DifferenceRecord]) -> Iterator[str]:
        """Yield the report lines for the records, without line terminators."""
        for record in differences:
            yield f"{record.kind}: {record.path}"
            yield f"Type: {record.type}"

            if record.kind == ItemKind.FILE:
                yield f"Size: {record.size} bytes"
                yield f"Checksum: {record.checksum}"

            if record.type == DifferenceType.MODIFIED and record.counterpart_path is not None:
                yield f"Modified {record.kind}: {record.counterpart_path}"
                if record.kind == ItemKind.FILE:
                    yield f"Modified Size: {record.counterpart_size} bytes"
                    yield f"Modified Checksum: {record.counterpart_checksum}"

            yield '-' * SEPARATOR_WIDTH

    def write(self, differences: Iterable[DifferenceRecord], baseline: PurePath, modified: PurePath) -> Path:
        """Write the report, replacing any previous content of the output file.

        Args:
            differences: Records in emission order
            baseline: Root of the "before" tree
            modified: Root of the "after" tree

        Returns:
            Path of the written report

        Raises:
            OSError: The report could not be written. The failure is logged before it
                     is re-raised.
        """
        self._logger.info(f"Writing results to {self._output_path}")
        try:
            with open(self._output_path, 'w', encoding='utf-8', newline='\n') as f:
                for line in self.render(differences):
                    f.write(line)
                    f.write('\n')
        except OSError as e:
            self._logger.error(f"Failed to write results to {self._output_path}: {e}")
            raise

        log_success(self._logger, f"Comparison of {baseline} and {modified} completed. "
                                  f"Results written to {self._output_path}")
        return self._output_path


def write_records(differences: Iterable[DifferenceRecord], path: str | os.PathLike) -> None:
    """Dump records as a stream of msgpack arrays, one per record.

    Raises:
        OSError: The file could not be written. The failure is logged before it is
                 re-raised.
    """
    try:
        with open(path, 'wb') as f:
            for record in differences:
                f.write(record.to_msgpack())
    except OSError as e:
        logger.error(f"Failed to write records to {path}: {e}")
        raise
    logger.info(f"Records written to {path}")


def read_records(path: str | os.PathLike) -> Iterator[DifferenceRecord]:
    """Load records dumped by write_records(), in their original order."""
    with open(path, 'rb') as f:
        unpacker = msgpack.Unpacker(f)
        for values in unpacker:
            yield DifferenceRecord.from_msgpack_list(values)


# Commands tried in order, by platform; Windows goes through os.startfile
VIEWER_COMMANDS = {
    'darwin': ('open', 'xdg-open'),
}
DEFAULT_VIEWER_COMMANDS = ('xdg-open',)


def find_viewer() -> str | None:
    """Return the executable of the first viewer command available on this platform."""
    for command in VIEWER_COMMANDS.get(sys.platform, DEFAULT_VIEWER_COMMANDS):
        executable = shutil.which(command)
        if executable is not None:
            return executable
    return None


def open_report(path: str | os.PathLike) -> bool:
    """Launch the report in the platform's default viewer without waiting for it.

    Returns:
        True if a viewer was launched, False otherwise. Failures are only logged.
    """
    report = Path(path).resolve()
    if not report.is_file():
        logger.warning(f"Report {report} does not exist, not opening it")
        return False

    try:
        if sys.platform == 'win32':
            os.startfile(report)  # type: ignore[attr-defined]
        else:
            viewer = find_viewer()
            if viewer is None:
                logger.warning(f"No viewer found to open {report}")
                return False
            subprocess.Popen([viewer, str(report)], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as e:
        logger.warning(f"Could not open {report}: {e}")
        return False

    logger.debug(f"Opened {report}")
    return True
