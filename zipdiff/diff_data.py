"""
Data classes representing archive entries and the difference between two archives.
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class ArchiveEntryRecord:
    """
    Metadata of a single entry observed while walking an archive. The name is fully-qualified,
    i.e. it carries the prefix of the nested archive the entry was found in.
    """
    name: str
    is_directory: bool
    uncompressed_size: int
    compressed_size: int
    modified_time: Tuple[int, ...]
    checksum: int

    @classmethod
    def from_zip_info(cls, name: str, info: zipfile.ZipInfo) -> ArchiveEntryRecord:
        """
        Creates a record from the central directory information of a zip entry.

        :param name: Fully-qualified name of the entry.
        :param info: Zip entry information.
        :return: New entry record.
        """
        return cls(
            name=name,
            is_directory=info.is_dir(),
            uncompressed_size=info.file_size,
            compressed_size=info.compress_size,
            modified_time=tuple(info.date_time),
            checksum=info.CRC,
        )


# Mapping from fully-qualified entry name to the entry record, built from exactly one archive.
ArchiveIndex = Dict[str, ArchiveEntryRecord]

PARTITIONS = ('added', 'removed', 'changed', 'ignored')


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class DifferenceResult:
    """
    This class contains the full results of an archive comparison.

    ``added`` holds entries only present in the second archive, ``removed`` entries only present in
    the first one and ``changed`` the pairs of records of entries present in both archives that
    are not equivalent. ``ignored`` is part of the interface but is not populated by the
    comparison.
    """
    source_label1: Optional[str] = None
    source_label2: Optional[str] = None
    added: Mapping[str, ArchiveEntryRecord] = field(default_factory=dict)
    removed: Mapping[str, ArchiveEntryRecord] = field(default_factory=dict)
    changed: Mapping[str, Tuple[ArchiveEntryRecord, ArchiveEntryRecord]] = \
        field(default_factory=dict)
    ignored: Mapping[str, ArchiveEntryRecord] = field(default_factory=dict)

    def __post_init__(self):
        for partition in PARTITIONS:
            object.__setattr__(self, partition, _freeze(getattr(self, partition)))

    def has_differences(self) -> bool:
        """
        :return: True, if any entry was added, removed or changed.
        """
        return bool(self.added or self.removed or self.changed)

    def total_differences(self) -> int:
        """
        :return: Number of added, removed and changed entries.
        """
        return len(self.added) + len(self.removed) + len(self.changed)

    def stats(self) -> Dict[str, int]:
        """
        Computes the number of entries per partition.
        :return: Dict mapping the partition name to the corresponding entry count.
        """
        return {partition: len(getattr(self, partition)) for partition in PARTITIONS}

    def sorted_names(self, partition: str) -> List[str]:
        """
        :param partition: One of 'added', 'removed', 'changed' or 'ignored'.
        :return: The entry names of the partition in lexicographic order.
        """
        if partition not in PARTITIONS:
            raise ValueError(f'Unknown partition: {partition}')
        return sorted(getattr(self, partition))
