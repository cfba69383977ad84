"""
Comparison settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from zipdiff.exclusion import ConfigurationError, ExclusionFilter

__all__ = ['ComparisonConfig', 'ConfigurationError']


@dataclass(frozen=True)
class ComparisonConfig:
    """
    Settings of a single comparison run. The exclusion patterns are compiled on construction, so an
    invalid pattern fails before any archive is read.

    :param ignore_timestamps: True to ignore modification times when comparing entries.
    :param compare_checksums: True to require matching CRC32 values for equal entries.
    :param ignore_version_control_artifacts: True to leave out everything below 'CVS/' paths.
    :param exclusion_patterns: Regular expressions of entry names to leave out.
    :param skip_unreadable_nested_archives: True to keep a nested archive that cannot be parsed as
        an opaque entry instead of failing the whole comparison.
    """
    ignore_timestamps: bool = False
    compare_checksums: bool = True
    ignore_version_control_artifacts: bool = False
    exclusion_patterns: FrozenSet[str] = frozenset()
    skip_unreadable_nested_archives: bool = False
    exclusion_filter: ExclusionFilter = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        patterns = frozenset(self.exclusion_patterns or ())
        object.__setattr__(self, 'exclusion_patterns', patterns)
        object.__setattr__(self, 'exclusion_filter', ExclusionFilter(
            patterns, ignore_version_control_artifacts=self.ignore_version_control_artifacts))
