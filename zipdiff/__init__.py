"""
Zip archive diff tool
"""

from .__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __version__,
)

from .diff_data import (
    ArchiveEntryRecord,
    ArchiveIndex,
    DifferenceResult,
)

from .config import (
    ComparisonConfig,
    ConfigurationError,
)

from .exclusion import (
    ExclusionFilter,
    should_exclude,
)

from .archive_format_handler import (
    ArchiveReadError,
    NestedArchiveReadError,
    ZipIndexBuilder,
    build_index,
    is_archive_name,
)

from .archive_diff import (
    ArchiveDiffer,
    compare_indices,
    entries_match,
)

from .output import (
    DiffRenderer,
    TextRenderer,
    XmlRenderer,
    HtmlRenderer,
    renderer_for_destination,
    write_diff,
)

from .task import (
    TaskError,
    ZipDiffTask,
)
