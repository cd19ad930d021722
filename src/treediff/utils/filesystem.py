import os
import stat
from abc import ABC, abstractmethod
from pathlib import Path, PurePath
from typing import BinaryIO, NamedTuple


class DirectoryListing(NamedTuple):
    """Immediate children of a directory, split by kind.

    Attributes:
        files: Names of regular files, in enumeration order
        directories: Names of subdirectories, in enumeration order
    """
    files: list[str]
    directories: list[str]


class FileSystem(ABC):
    """Filesystem access capability used by the differ and the checksum provider.

    Implementations only need to answer the handful of questions a tree comparison
    asks. Paths are passed as PurePath instances and joined with the / operator, so
    any PurePath flavour works as long as the implementation understands it.
    """

    @abstractmethod
    def exists(self, path: PurePath) -> bool:
        ...

    @abstractmethod
    def is_dir(self, path: PurePath) -> bool:
        ...

    @abstractmethod
    def list_directory(self, path: PurePath) -> DirectoryListing:
        """List the immediate regular files and subdirectories of path.

        Raises:
            OSError: The directory cannot be listed
        """
        ...

    @abstractmethod
    def open_binary(self, path: PurePath) -> BinaryIO:
        """Open a regular file for binary reading.

        Raises:
            OSError: The file cannot be opened
        """
        ...

    @abstractmethod
    def size(self, path: PurePath) -> int:
        ...


class LocalFileSystem(FileSystem):
    """FileSystem backed by the operating system.

    Entries are classified without following symlinks. Symlinks and special files
    (devices, sockets, FIFOs) are reported as neither files nor directories, so they
    never take part in a comparison. Names are sorted to keep reports stable across
    runs and platforms.
    """

    def exists(self, path: PurePath) -> bool:
        return Path(path).exists()

    def is_dir(self, path: PurePath) -> bool:
        return Path(path).is_dir()

    def list_directory(self, path: PurePath) -> DirectoryListing:
        files: list[str] = []
        directories: list[str] = []

        with os.scandir(Path(path)) as entries:
            for entry in entries:
                st = entry.stat(follow_symlinks=False)
                if stat.S_ISREG(st.st_mode):
                    files.append(entry.name)
                elif stat.S_ISDIR(st.st_mode):
                    directories.append(entry.name)

        files.sort()
        directories.sort()
        return DirectoryListing(files, directories)

    def open_binary(self, path: PurePath) -> BinaryIO:
        return open(Path(path), "rb")

    def size(self, path: PurePath) -> int:
        return Path(path).stat(follow_symlinks=False).st_size
