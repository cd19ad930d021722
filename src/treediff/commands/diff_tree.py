"""Diff-tree command comparing a baseline directory tree with a modified one."""

import logging
from collections import Counter
from pathlib import Path, PurePath

from ..report.record import DifferenceRecord, DifferenceType, ItemKind
from ..report.writer import ReportWriter, write_records, open_report
from ..utils.checksum import ChecksumProvider
from ..utils.filesystem import FileSystem, LocalFileSystem
from ..utils.logs import log_success

logger = logging.getLogger(__name__)

BASELINE = 'baseline'
MODIFIED = 'modified'


class PathNotFound(FileNotFoundError):
    """A root of the comparison does not exist or is not a directory.

    Attributes:
        path: The offending root path
        role: Which root it is, "baseline" or "modified"
    """

    def __init__(self, path: PurePath, role: str):
        super().__init__(f"{role.capitalize()} path does not exist: {path}")
        self.path = path
        self.role = role


class TreeDiffer:
    """Recursive, checksum-based comparison of two directory trees.

    Trees are walked depth-first in lock-step. At each level the files are compared
    before descending into subdirectories, and differences found on the baseline side
    are emitted before those found on the modified side. Within a level the order
    follows the filesystem's enumeration order.

    Subdirectories present on only one side are emitted as a single directory record
    followed by one record per descendant, all tagged with the same type. Such
    subtrees are enumerated exactly once.

    Any OSError raised while listing a directory or reading a file aborts the whole
    comparison.
    """

    def __init__(
            self,
            filesystem: FileSystem | None = None,
            checksum_provider: ChecksumProvider | None = None,
            logger: logging.Logger | None = None):
        """
        Args:
            filesystem: Filesystem to compare trees on (defaults to the local filesystem)
            checksum_provider: Provider of file checksums (defaults to SHA-256 over filesystem)
            logger: Receiver of progress events (defaults to this module's logger)
        """
        self._filesystem = filesystem if filesystem is not None else LocalFileSystem()
        self._checksums = checksum_provider if checksum_provider is not None \
            else ChecksumProvider(self._filesystem)
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def diff(self, baseline: PurePath, modified: PurePath) -> list[DifferenceRecord]:
        """Compare two directory trees.

        Args:
            baseline: Root of the "before" tree
            modified: Root of the "after" tree

        Returns:
            Difference records in emission order

        Raises:
            PathNotFound: Either root does not exist or is not a directory
            OSError: A directory could not be listed or a file could not be read
        """
        self.validate_root(baseline, BASELINE)
        self.validate_root(modified, MODIFIED)

        differences: list[DifferenceRecord] = []
        self._compare_directories(baseline, modified, differences)
        return differences

    def validate_root(self, path: PurePath, role: str) -> None:
        if not self._filesystem.is_dir(path):
            self._logger.error(f"{role.capitalize()} path does not exist: {path}")
            raise PathNotFound(path, role)
        log_success(self._logger, f"{role.capitalize()} path: {path}")

    def _compare_directories(
            self,
            baseline_dir: PurePath,
            modified_dir: PurePath,
            differences: list[DifferenceRecord]) -> None:
        # Roots are validated up front, so a missing side only shows up here when the tree
        # changed underneath us.
        if not self._filesystem.exists(baseline_dir):
            self._emit_subtree(modified_dir, DifferenceType.ADDED, differences)
            return
        if not self._filesystem.exists(modified_dir):
            self._emit_subtree(baseline_dir, DifferenceType.REMOVED, differences)
            return

        self._logger.debug(f"Starting directory comparison: {baseline_dir} vs {modified_dir}")

        baseline_listing = self._filesystem.list_directory(baseline_dir)
        modified_listing = self._filesystem.list_directory(modified_dir)

        self._compare_files(baseline_dir, baseline_listing.files, modified_dir, modified_listing.files,
                            differences)
        self._compare_subdirectories(baseline_dir, baseline_listing.directories,
                                     modified_dir, modified_listing.directories, differences)

        self._logger.debug(f"Completed directory comparison: {baseline_dir} vs {modified_dir}")

    def _compare_files(
            self,
            baseline_dir: PurePath,
            baseline_files: list[str],
            modified_dir: PurePath,
            modified_files: list[str],
            differences: list[DifferenceRecord]) -> None:
        modified_names = set(modified_files)
        baseline_names = set(baseline_files)

        for name in baseline_files:
            baseline_file = baseline_dir / name
            if name not in modified_names:
                self._emit_file(baseline_file, DifferenceType.REMOVED, differences)
                continue

            counterpart_file = modified_dir / name
            baseline_digest = self._checksums.digest(baseline_file)
            counterpart_digest = self._checksums.digest(counterpart_file)
            if baseline_digest == counterpart_digest:
                continue

            self._logger.info(f"File modified: {baseline_file}")
            differences.append(DifferenceRecord(
                baseline_file,
                DifferenceType.MODIFIED,
                ItemKind.FILE,
                baseline_digest.size,
                baseline_digest.checksum,
                counterpart_file,
                counterpart_digest.size,
                counterpart_digest.checksum))

        for name in modified_files:
            if name not in baseline_names:
                self._emit_file(modified_dir / name, DifferenceType.ADDED, differences)

    def _compare_subdirectories(
            self,
            baseline_dir: PurePath,
            baseline_subdirs: list[str],
            modified_dir: PurePath,
            modified_subdirs: list[str],
            differences: list[DifferenceRecord]) -> None:
        modified_names = set(modified_subdirs)
        baseline_names = set(baseline_subdirs)

        for name in baseline_subdirs:
            if name in modified_names:
                self._compare_directories(baseline_dir / name, modified_dir / name, differences)
            else:
                self._emit_subtree(baseline_dir / name, DifferenceType.REMOVED, differences)

        for name in modified_subdirs:
            if name not in baseline_names:
                self._emit_subtree(modified_dir / name, DifferenceType.ADDED, differences)

    def _emit_subtree(self, directory: PurePath, type: DifferenceType, differences: list[DifferenceRecord]) -> None:
        """Emit a record for directory itself, then for everything beneath it."""
        self._emit_directory(directory, type, differences)
        self._emit_descendants(directory, type, differences)

    def _emit_descendants(self, directory: PurePath, type: DifferenceType,
                          differences: list[DifferenceRecord]) -> None:
        listing = self._filesystem.list_directory(directory)

        for name in listing.files:
            self._emit_file(directory / name, type, differences)

        for name in listing.directories:
            self._emit_subtree(directory / name, type, differences)

    def _emit_file(self, path: PurePath, type: DifferenceType, differences: list[DifferenceRecord]) -> None:
        digest = self._checksums.digest(path)
        self._logger.info(f"File {type.lower()}: {path}")
        differences.append(DifferenceRecord(path, type, ItemKind.FILE, digest.size, digest.checksum))

    def _emit_directory(self, path: PurePath, type: DifferenceType, differences: list[DifferenceRecord]) -> None:
        self._logger.info(f"Directory {type.lower()}: {path}")
        differences.append(DifferenceRecord(path, type, ItemKind.DIRECTORY))


def diff_trees(
        baseline: PurePath,
        modified: PurePath,
        filesystem: FileSystem | None = None,
        algorithm: str | None = None) -> list[DifferenceRecord]:
    """Compare two directory trees with a default-configured TreeDiffer.

    See TreeDiffer.diff() for the semantics and the raised exceptions.
    """
    checksum_provider = None
    if algorithm is not None:
        checksum_provider = ChecksumProvider(filesystem, algorithm)
    return TreeDiffer(filesystem, checksum_provider).diff(baseline, modified)


def summarize(differences: list[DifferenceRecord]) -> Counter:
    """Count difference records by type."""
    return Counter(record.type for record in differences)


def do_diff_tree(
        baseline: Path,
        modified: Path,
        output_path: Path,
        records_path: Path | None = None,
        algorithm: str | None = None,
        open_result: bool = False) -> list[DifferenceRecord]:
    """Compare two directory trees and write the results.

    Args:
        baseline: Root of the "before" tree
        modified: Root of the "after" tree
        output_path: Path of the text report, overwritten if it exists
        records_path: Path of an optional msgpack dump of the records
        algorithm: Hash algorithm name (defaults to sha256)
        open_result: Launch the text report in the platform's default viewer afterwards

    Returns:
        Difference records in emission order

    Raises:
        PathNotFound: Either root does not exist or is not a directory
        OSError: A tree could not be read or a result file could not be written
    """
    differences = diff_trees(baseline, modified, algorithm=algorithm)

    counts = summarize(differences)
    logger.info(f"Found {len(differences)} differences between {baseline} and {modified} "
                f"({counts[DifferenceType.ADDED]} added, {counts[DifferenceType.REMOVED]} removed, "
                f"{counts[DifferenceType.MODIFIED]} modified)")

    writer = ReportWriter(output_path)
    writer.write(differences, baseline, modified)

    if records_path is not None:
        write_records(differences, records_path)

    if open_result:
        open_report(output_path)

    return differences
