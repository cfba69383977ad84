"""
Diffing implementation.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from zipdiff.archive_format_handler import ArchiveSource, ZipIndexBuilder, describe_source
from zipdiff.config import ComparisonConfig
from zipdiff.diff_data import ArchiveEntryRecord, ArchiveIndex, DifferenceResult

logger = logging.getLogger(__name__)


def entries_match(entry1: ArchiveEntryRecord, entry2: ArchiveEntryRecord,
                  config: ComparisonConfig) -> bool:
    """
    Checks if two entries with the same name are equivalent. Type, name, size and compressed size
    must always agree, the modification time unless timestamps are ignored and the checksum if
    checksums are compared.

    :param entry1: Entry of the first archive.
    :param entry2: Entry of the second archive.
    :param config: Comparison settings.
    :return: True, if the entries are equivalent.
    """
    result = (entry1.is_directory == entry2.is_directory
              and entry1.uncompressed_size == entry2.uncompressed_size
              and entry1.compressed_size == entry2.compressed_size
              and entry1.name == entry2.name)

    if not config.ignore_timestamps:
        result = result and entry1.modified_time == entry2.modified_time

    if config.compare_checksums:
        result = result and entry1.checksum == entry2.checksum

    return result


def compare_indices(index1: Mapping[str, ArchiveEntryRecord],
                    index2: Mapping[str, ArchiveEntryRecord],
                    config: Optional[ComparisonConfig] = None,
                    label1: Optional[str] = None,
                    label2: Optional[str] = None) -> DifferenceResult:
    """
    Computes the differences between two archive indices. Entries are matched by their
    fully-qualified name, excluded names are skipped.

    :param index1: Index of the first archive.
    :param index2: Index of the second archive.
    :param config: Comparison settings, the defaults are used if None.
    :param label1: Display label of the first archive.
    :param label2: Display label of the second archive.
    :return: Added, removed and changed entries.
    """
    config = config if config is not None else ComparisonConfig()
    exclusions = config.exclusion_filter

    added, removed, changed = {}, {}, {}
    for name in sorted(index1.keys() | index2.keys()):
        if exclusions.should_exclude('', name):
            continue

        in_first = name in index1
        in_second = name in index2
        if in_first and not in_second:
            removed[name] = index1[name]
        elif in_second and not in_first:
            added[name] = index2[name]
        elif in_first and in_second:
            entry1, entry2 = index1[name], index2[name]
            if not entries_match(entry1, entry2, config):
                changed[name] = (entry1, entry2)
        else:
            raise AssertionError(f'Entry {name} is in neither archive index.')

    logger.debug('Found %d added, %d removed and %d changed entries',
                 len(added), len(removed), len(changed))

    return DifferenceResult(
        source_label1=label1,
        source_label2=label2,
        added=added,
        removed=removed,
        changed=changed,
    )


class ArchiveDiffer:
    """
    Basic archive diffing tool.
    """

    def __init__(self, config: Optional[ComparisonConfig] = None):
        """
        :param config: Comparison settings shared by index building and comparison.
        """
        self.config = config if config is not None else ComparisonConfig()
        self._index_builder = ZipIndexBuilder(self.config)

    def compute_index(self, source: ArchiveSource) -> ArchiveIndex:
        """
        Enumerates the contents of the provided archive, including nested archives.

        :param source: Path or binary file object of the archive.
        :raises ArchiveReadError: If the archive is not accessible or not a valid zip file.
        :return: Index of the archive contents.
        """
        return self._index_builder.build_index(source)

    def compute_diff(self, left_archive: ArchiveSource,
                     right_archive: ArchiveSource) -> DifferenceResult:
        """
        Computes a full diff between the given archives.
        :param left_archive: First archive.
        :param right_archive: Second archive.
        :raises ArchiveReadError: If one of the archives cannot be read.
        :return: Diff between the archives.
        """
        index1 = self.compute_index(left_archive)
        index2 = self.compute_index(right_archive)

        return compare_indices(index1, index2, self.config,
                               label1=describe_source(left_archive),
                               label2=describe_source(right_archive))
