import hashlib
import logging
from pathlib import PurePath
from typing import NamedTuple

from .filesystem import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = 'sha256'


class FileDigest(NamedTuple):
    """Size and content checksum of a single file.

    Two digests compare equal only when both the byte length and the checksum match.
    """
    size: int
    checksum: str


class ChecksumProvider:
    """Computes content checksums of files.

    The file content is streamed through the hash function, so large files are never
    loaded into memory at once. Every call opens and closes its own handle. Errors
    raised while opening or reading a file are propagated to the caller.
    """

    def __init__(self, filesystem: FileSystem | None = None, algorithm: str = DEFAULT_ALGORITHM):
        """
        Args:
            filesystem: Filesystem to read files from (defaults to the local filesystem)
            algorithm: Name of a hashlib algorithm

        Raises:
            ValueError: The algorithm is not supported by hashlib
        """
        # shake digests have no fixed length, so they cannot be rendered without one
        if algorithm not in hashlib.algorithms_available or algorithm.startswith('shake_'):
            raise ValueError(f"Unknown hash algorithm: {algorithm}")

        self._filesystem = filesystem if filesystem is not None else LocalFileSystem()
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def checksum(self, path: PurePath) -> str:
        """Compute the lowercase hexadecimal checksum of the file at path.

        Raises:
            OSError: The file cannot be opened or read
        """
        logger.debug(f"Computing {self._algorithm} checksum for: {path}")
        with self._filesystem.open_binary(path) as f:
            # noinspection PyTypeChecker
            return hashlib.file_digest(f, self._algorithm).hexdigest()

    def digest(self, path: PurePath) -> FileDigest:
        return FileDigest(self._filesystem.size(path), self.checksum(path))

    def files_are_different(self, a: PurePath, b: PurePath) -> bool:
        """Tell whether two files differ in length or content."""
        return self.digest(a) != self.digest(b)
