"""Difference records produced by a tree comparison."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePath, Path

import msgpack


class DifferenceType(StrEnum):
    ADDED = 'Added'
    REMOVED = 'Removed'
    MODIFIED = 'Modified'


class ItemKind(StrEnum):
    FILE = 'File'
    DIRECTORY = 'Directory'


@dataclass(frozen=True)
class DifferenceRecord:
    """One changed file or directory found while comparing two trees.

    Attributes:
        path: Path of the entity in its home tree. For removed and modified entities
              this is the baseline tree, for added entities the modified tree.
        type: Whether the entity was added, removed or modified
        kind: Whether the entity is a file or a directory
        size: Byte length of the file (0 for directories)
        checksum: Content checksum of the file (None for directories)
        counterpart_path: Path of the same entity in the modified tree. Only set for
                          modified entities.
        counterpart_size: Byte length of the counterpart file (modified files only)
        counterpart_checksum: Content checksum of the counterpart file (modified files only)

    The counterpart path is present if and only if the type is MODIFIED.
    """
    path: PurePath
    type: DifferenceType
    kind: ItemKind
    size: int = 0
    checksum: str | None = None
    counterpart_path: PurePath | None = None
    counterpart_size: int | None = None
    counterpart_checksum: str | None = None

    def __post_init__(self):
        object.__setattr__(self, 'type', DifferenceType(self.type))
        object.__setattr__(self, 'kind', ItemKind(self.kind))

        if (self.type == DifferenceType.MODIFIED) != (self.counterpart_path is not None):
            raise ValueError(f"counterpart path must be given exactly for modified entities: {self.path}")

        if self.type != DifferenceType.MODIFIED and (
                self.counterpart_size is not None or self.counterpart_checksum is not None):
            raise ValueError(f"counterpart size and checksum are only kept for modified entities: {self.path}")

        if self.kind == ItemKind.DIRECTORY and (self.size != 0 or self.checksum is not None):
            raise ValueError(f"directories carry neither size nor checksum: {self.path}")

    def to_msgpack(self) -> bytes:
        """Serialize to msgpack format.

        Returns:
            Msgpack-encoded bytes containing [path, type, kind, size, checksum, counterpart_path,
            counterpart_size, counterpart_checksum] where paths are strings or None
        """
        result = msgpack.dumps(self.to_msgpack_list())
        assert isinstance(result, bytes)
        return result

    def to_msgpack_list(self) -> list:
        return [
            str(self.path),
            str(self.type),
            str(self.kind),
            self.size,
            self.checksum,
            None if self.counterpart_path is None else str(self.counterpart_path),
            self.counterpart_size,
            self.counterpart_checksum,
        ]

    @classmethod
    def from_msgpack_list(cls, values: list) -> 'DifferenceRecord':
        """Rebuild a record from the array written by to_msgpack(), restoring paths as Path objects."""
        path, type_, kind, size, checksum, counterpart_path, counterpart_size, counterpart_checksum = values
        return cls(
            Path(path),
            DifferenceType(type_),
            ItemKind(kind),
            size,
            checksum,
            None if counterpart_path is None else Path(counterpart_path),
            counterpart_size,
            counterpart_checksum)
