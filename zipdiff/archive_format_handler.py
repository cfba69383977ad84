"""
Builds the flattened entry index of zip-family archives, including the contents of nested
archives.
"""
from __future__ import annotations

import io
import logging
import lzma
import os
import zipfile
import zlib
from typing import BinaryIO, Optional, Union

from zipdiff.config import ComparisonConfig
from zipdiff.diff_data import ArchiveEntryRecord, ArchiveIndex

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSIONS = ('.zip', '.jar', '.war', '.ear', '.rar')

# Errors the zipfile module raises for missing, truncated or otherwise unreadable archives,
# including decompressor errors for corrupt entry data.
_READ_ERRORS = (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError, RuntimeError,
                NotImplementedError, zlib.error, lzma.LZMAError)

ArchiveSource = Union[str, os.PathLike, BinaryIO]


class ArchiveReadError(Exception):
    """
    Error raised if an archive cannot be opened or its structure is unreadable.
    """


class NestedArchiveReadError(ArchiveReadError):
    """
    Error raised if an entry with an archive extension cannot be read as an archive.
    """


def is_archive_name(name: Optional[str]) -> bool:
    """
    Checks if the name has an extension of the zip family, i.e. zip, jar, war, ear or rar.

    :param name: Entry name.
    :return: True, if the entry is treated as a nested archive.
    """
    if name is None:
        return False
    return name.lower().endswith(ARCHIVE_EXTENSIONS)


def describe_source(source: ArchiveSource) -> Optional[str]:
    """
    :param source: Path or file object of an archive.
    :return: A display label for the archive, None if the source has no name.
    """
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    name = getattr(source, 'name', None)
    return name if isinstance(name, str) else None


class ZipIndexBuilder:
    """
    Walks a zip archive and records every entry under its fully-qualified name. Entries with an
    archive extension are expanded recursively, their contents are recorded with the local name of
    the nested archive followed by '/' as prefix.
    """

    def __init__(self, config: Optional[ComparisonConfig] = None):
        """
        :param config: Comparison settings, the defaults are used if None.
        """
        self.config = config if config is not None else ComparisonConfig()

    def build_index(self, source: ArchiveSource) -> ArchiveIndex:
        """
        Lists the entries of the given archive and of all archives nested inside it.

        :param source: Path to the archive or a seekable binary file object.
        :raises ArchiveReadError: If the archive is missing, cannot be opened or is corrupt.
        :return: Mapping from fully-qualified entry name to the entry record.
        """
        label = describe_source(source)
        try:
            archive = zipfile.ZipFile(source, 'r')
        except FileNotFoundError as error:
            raise ArchiveReadError(f'Archive not found: {label}') from error
        except _READ_ERRORS as error:
            raise ArchiveReadError(f'Cannot read archive {label}: {error}') from error

        index = {}
        with archive:
            self._walk(archive, '', index)
        return index

    def _walk(self, archive: zipfile.ZipFile, prefix: str, index: ArchiveIndex) -> None:
        """
        Records all entries of an opened archive in the index.

        :param archive: Opened archive.
        :param prefix: Prefix prepended to every entry name, empty for the top level archive.
        :param index: Index the records are added to. Later records replace earlier ones with the
            same name.
        """
        exclusions = self.config.exclusion_filter
        for info in archive.infolist():
            name = prefix + info.filename
            if exclusions.should_exclude(prefix, name):
                logger.debug('Ignoring entry: %s', name)
                continue

            logger.debug('Processing entry: %s', name)
            if not info.is_dir() and is_archive_name(name):
                self._walk_nested(archive, info, index)
            index[name] = ArchiveEntryRecord.from_zip_info(name, info)

    def _walk_nested(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo,
                     index: ArchiveIndex) -> None:
        """
        Reads an entry as archive and records its contents.

        :param archive: Archive containing the entry.
        :param info: Entry with an archive extension.
        :param index: Index the records are added to.
        :raises NestedArchiveReadError: If the entry is not a readable archive and unreadable nested
            archives are not skipped.
        """
        data = self._read_entry(archive, info)
        try:
            nested = zipfile.ZipFile(io.BytesIO(data), 'r')
        except _READ_ERRORS as error:
            if self.config.skip_unreadable_nested_archives:
                logger.warning('Nested archive %s is not readable, comparing it as a plain file:'
                               ' %s', info.filename, error)
                return
            raise NestedArchiveReadError(
                f'Cannot read nested archive {info.filename}: {error}') from error

        logger.debug('Entering nested archive: %s', info.filename)
        with nested:
            self._walk(nested, info.filename + '/', index)

    @staticmethod
    def _read_entry(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
        """
        :return: The uncompressed contents of the entry.
        :raises ArchiveReadError: If the entry data is corrupt or cannot be decompressed.
        """
        try:
            with archive.open(info, 'r') as file:
                return file.read()
        except _READ_ERRORS as error:
            raise ArchiveReadError(f'Cannot read entry {info.filename}: {error}') from error


def build_index(source: ArchiveSource, config: Optional[ComparisonConfig] = None) -> ArchiveIndex:
    """
    Shortcut for `ZipIndexBuilder(config).build_index(source)`.
    """
    return ZipIndexBuilder(config).build_index(source)
