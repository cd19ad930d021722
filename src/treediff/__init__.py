from .commands.diff_tree import TreeDiffer, PathNotFound, diff_trees, do_diff_tree
from .report.record import DifferenceRecord, DifferenceType, ItemKind
from .report.writer import ReportWriter, read_records, write_records
from .settings import DiffSettings
from .utils.checksum import ChecksumProvider, FileDigest
from .utils.filesystem import FileSystem, LocalFileSystem, DirectoryListing
