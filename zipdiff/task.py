"""
Build automation task running a comparison and writing the report to a destination file.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from zipdiff.archive_diff import ArchiveDiffer
from zipdiff.archive_format_handler import ArchiveReadError
from zipdiff.config import ComparisonConfig, ConfigurationError
from zipdiff.diff_data import DifferenceResult
from zipdiff.output import write_diff

logger = logging.getLogger(__name__)


class TaskError(Exception):
    """
    Error signalling that the task failed, e.g. because of missing attributes or unreadable
    archives.
    """


class ZipDiffTask:
    """
    Compares two archives and writes the differences to `destfile`. The report format follows the
    destination suffix, see `renderer_for_destination`.
    """

    def __init__(self, filename1: Optional[str] = None, filename2: Optional[str] = None,
                 destfile: Optional[str] = None, ignore_timestamps: bool = False,
                 ignore_cvs_files: bool = False, compare_crc_values: bool = True,
                 exclusion_patterns: Iterable[str] = ()):
        self.filename1 = filename1
        self.filename2 = filename2
        self.destfile = destfile
        self.ignore_timestamps = ignore_timestamps
        self.ignore_cvs_files = ignore_cvs_files
        self.compare_crc_values = compare_crc_values
        self.exclusion_patterns = exclusion_patterns

    def validate(self) -> None:
        """
        :raises TaskError: If one of the file names is missing.
        """
        if not self.filename1:
            raise TaskError('filename1 is required')
        if not self.filename2:
            raise TaskError('filename2 is required')
        if not self.destfile:
            raise TaskError('destfile is required')

    def create_config(self) -> ComparisonConfig:
        """
        :raises ConfigurationError: If an exclusion pattern is invalid.
        :return: Comparison settings built from the task attributes.
        """
        return ComparisonConfig(
            ignore_timestamps=self.ignore_timestamps,
            compare_checksums=self.compare_crc_values,
            ignore_version_control_artifacts=self.ignore_cvs_files,
            exclusion_patterns=frozenset(self.exclusion_patterns or ()),
        )

    def execute(self) -> DifferenceResult:
        """
        Runs the comparison and writes the report.

        :raises TaskError: If the task is misconfigured, an archive cannot be read or the
            destination cannot be written.
        :return: The comparison result.
        """
        self.validate()
        logger.debug('filename1=%s filename2=%s destfile=%s',
                     self.filename1, self.filename2, self.destfile)

        try:
            differ = ArchiveDiffer(self.create_config())
            result = differ.compute_diff(self.filename1, self.filename2)
        except (ArchiveReadError, ConfigurationError) as error:
            raise TaskError(str(error)) from error

        try:
            write_diff(result, self.destfile)
        except OSError as error:
            raise TaskError(f'Cannot write {self.destfile}: {error}') from error

        return result
