"""
Decides which archive entries are left out of a comparison.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Iterable, Optional, Pattern

if TYPE_CHECKING:
    from zipdiff.config import ComparisonConfig

logger = logging.getLogger(__name__)

VERSION_CONTROL_SEGMENT = 'CVS/'


class ConfigurationError(ValueError):
    """
    Error raised if the comparison configuration is invalid, e.g. an exclusion pattern is not a
    valid regular expression.
    """


def compile_exclusion_patterns(patterns: Optional[Iterable[str]]) -> Optional[Pattern]:
    """
    Combines the patterns into a single alternation.

    :param patterns: Regular expressions, may be empty or None.
    :raises ConfigurationError: If the combined expression does not compile.
    :return: Compiled expression or None if there are no patterns.
    """
    if not patterns:
        return None

    # Combined in sorted order.
    regex = '|'.join(f'({pattern})' for pattern in sorted(patterns))
    try:
        compiled = re.compile(regex)
    except re.error as error:
        raise ConfigurationError(f'Invalid exclusion pattern: {error}') from error

    logger.debug('Exclusion regular expression is: %s', regex)
    return compiled


class ExclusionFilter:
    """
    Filter combining version-control artifact detection and regular expression exclusions.
    """

    def __init__(self, patterns: Optional[Iterable[str]] = None,
                 ignore_version_control_artifacts: bool = False):
        """
        :param patterns: Regular expressions, an entry is excluded if its whole name matches one.
        :param ignore_version_control_artifacts: True to exclude everything below a 'CVS/' path.
        :raises ConfigurationError: If a pattern is not a valid regular expression.
        """
        self.ignore_version_control_artifacts = ignore_version_control_artifacts
        self._pattern = compile_exclusion_patterns(patterns)

    def __repr__(self):
        pattern = self._pattern.pattern if self._pattern is not None else None
        return f'ExclusionFilter({pattern!r}, {self.ignore_version_control_artifacts})'

    @staticmethod
    def is_version_control_artifact(prefix: str, name: str) -> bool:
        """
        :param prefix: Nesting prefix of the entry.
        :param name: Fully-qualified entry name.
        :return: True, if the prefix or the name contains a 'CVS/' segment.
        """
        return VERSION_CONTROL_SEGMENT in (prefix or '') or VERSION_CONTROL_SEGMENT in name

    def should_exclude(self, prefix: str, name: Optional[str]) -> bool:
        """
        Checks if the entry must be left out of the comparison.

        :param prefix: Nesting prefix of the entry, empty at the top level.
        :param name: Fully-qualified entry name. None is never excluded.
        :return: True, if the entry is excluded.
        """
        if name is None:
            return False

        if self.ignore_version_control_artifacts and \
                self.is_version_control_artifact(prefix, name):
            return True

        if self._pattern is None:
            return False

        if self._pattern.fullmatch(name) is not None:
            logger.debug('Found a match against %s, excluding it', name)
            return True
        return False


def should_exclude(prefix: str, name: Optional[str], config: ComparisonConfig) -> bool:
    """
    Checks the entry against the exclusion filter compiled for the given configuration.
    """
    return config.exclusion_filter.should_exclude(prefix, name)
