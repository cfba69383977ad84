"""
Test cases.
"""
import dataclasses
import itertools
import pathlib as pl
import tempfile
import unittest
from unittest import TestCase

from zip_fixtures import FIXED_TIME, write_zip, zip_bytes
from zipdiff.archive_diff import ArchiveDiffer, compare_indices, entries_match
from zipdiff.archive_format_handler import ArchiveReadError
from zipdiff.config import ComparisonConfig
from zipdiff.diff_data import ArchiveEntryRecord


def record(name, size=10, compressed_size=None, time=FIXED_TIME, checksum=0x1234,
           is_directory=False):
    """
    Creates an entry record with default metadata.
    """
    return ArchiveEntryRecord(
        name=name,
        is_directory=is_directory,
        uncompressed_size=size,
        compressed_size=size if compressed_size is None else compressed_size,
        modified_time=time,
        checksum=checksum,
    )


def index_of(*records):
    return {r.name: r for r in records}


class TestEntriesMatch(TestCase):
    """
    Tests the entry equivalence rules.
    """

    def test_equal_entries(self):
        """
        Entries with the same metadata are equivalent under every setting.
        """
        for ignore_timestamps, compare_checksums in itertools.product([False, True], repeat=2):
            config = ComparisonConfig(ignore_timestamps=ignore_timestamps,
                                      compare_checksums=compare_checksums)
            self.assertTrue(entries_match(record('A'), record('A'), config))

    def test_size_mismatch(self):
        """
        Differing sizes or compressed sizes always make entries differ.
        """
        config = ComparisonConfig(ignore_timestamps=True, compare_checksums=False)
        self.assertFalse(entries_match(record('A', size=1), record('A', size=2), config))
        self.assertFalse(entries_match(record('A', compressed_size=1),
                                       record('A', compressed_size=2), config))

    def test_type_mismatch(self):
        """
        A directory never matches a file.
        """
        self.assertFalse(entries_match(record('A', is_directory=True), record('A'),
                                       ComparisonConfig()))

    def test_timestamps(self):
        """
        Modification times are only compared if timestamps are not ignored.
        """
        left = record('A', time=(2020, 1, 1, 0, 0, 0))
        right = record('A', time=(2021, 1, 1, 0, 0, 0))
        self.assertFalse(entries_match(left, right, ComparisonConfig()))
        self.assertTrue(entries_match(left, right, ComparisonConfig(ignore_timestamps=True)))

    def test_checksums(self):
        """
        Checksums are only compared if enabled.
        """
        left = record('A', checksum=1)
        right = record('A', checksum=2)
        self.assertFalse(entries_match(left, right, ComparisonConfig()))
        self.assertTrue(entries_match(left, right, ComparisonConfig(compare_checksums=False)))


class TestCompareIndices(TestCase):
    """
    Tests the comparison of two archive indices.
    """

    def test_compare_simple(self):
        """
        Simple diff with all difference states.
        """
        left = index_of(record('only_left'), record('different', checksum=1), record('same'))
        right = index_of(record('only_right'), record('different', checksum=2), record('same'))

        result = compare_indices(left, right, label1='left.zip', label2='right.zip')

        self.assertEqual(['only_right'], list(result.added))
        self.assertEqual(['only_left'], list(result.removed))
        self.assertEqual(['different'], list(result.changed))
        self.assertEqual((left['different'], right['different']), result.changed['different'])
        self.assertEqual({}, dict(result.ignored))
        self.assertEqual('left.zip', result.source_label1)
        self.assertEqual('right.zip', result.source_label2)
        self.assertTrue(result.has_differences())
        self.assertEqual(3, result.total_differences())

    def test_disjoint_entries(self):
        """
        Archives with different single entries report one removal and one addition.
        """
        result = compare_indices(index_of(record('X')), index_of(record('Y')))

        self.assertEqual({'X'}, set(result.removed))
        self.assertEqual({'Y'}, set(result.added))
        self.assertEqual({}, dict(result.changed))

    def test_identical_indices(self):
        """
        Equal indices have no differences under every setting.
        """
        index = index_of(record('dir/', is_directory=True, size=0), record('dir/A'), record('B'))
        for ignore_timestamps, compare_checksums in itertools.product([False, True], repeat=2):
            config = ComparisonConfig(ignore_timestamps=ignore_timestamps,
                                      compare_checksums=compare_checksums)
            result = compare_indices(index, dict(index), config)
            self.assertFalse(result.has_differences())
            self.assertEqual(0, result.total_differences())

    def test_excluded_names(self):
        """
        Excluded names never appear in any partition.
        """
        left = index_of(record('A.log'), record('CVS/Root'), record('changed.log', checksum=1))
        right = index_of(record('B.log'), record('src/CVS/Entries'),
                         record('changed.log', checksum=2))
        config = ComparisonConfig(ignore_version_control_artifacts=True,
                                  exclusion_patterns={r'.*\.log'})

        result = compare_indices(left, right, config)

        self.assertFalse(result.has_differences())
        self.assertEqual({}, dict(result.ignored))

    def test_partitions_disjoint(self):
        """
        Every name ends up in at most one partition.
        """
        left = index_of(*(record(f'{i}', checksum=i % 3) for i in range(0, 20)))
        right = index_of(*(record(f'{i}', checksum=i % 2) for i in range(10, 30)))

        result = compare_indices(left, right)

        added, removed, changed = set(result.added), set(result.removed), set(result.changed)
        self.assertFalse(added & removed)
        self.assertFalse(added & changed)
        self.assertFalse(removed & changed)
        self.assertEqual({f'{i}' for i in range(20, 30)}, added)
        self.assertEqual({f'{i}' for i in range(0, 10)}, removed)

    def test_result_is_read_only(self):
        """
        The result and its partitions cannot be modified.
        """
        result = compare_indices(index_of(record('X')), {})

        with self.assertRaises(TypeError):
            result.removed['Y'] = record('Y')
        with self.assertRaises(dataclasses.FrozenInstanceError):
            result.added = {}


class TestArchiveDiffer(TestCase):
    """
    Tests comparing archive files.
    """

    def setUp(self):
        self._tmp_dir = tempfile.TemporaryDirectory()
        self.root = pl.Path(self._tmp_dir.name)

    def tearDown(self):
        self._tmp_dir.cleanup()

    def test_same_archive(self):
        """
        An archive compared to itself has no differences.
        """
        path = write_zip(self.root / 'a.jar', [('dir/', b''), ('A', b'a' * 2048)])
        for ignore_timestamps, compare_checksums in itertools.product([False, True], repeat=2):
            config = ComparisonConfig(ignore_timestamps=ignore_timestamps,
                                      compare_checksums=compare_checksums)
            result = ArchiveDiffer(config).compute_diff(path, path)
            self.assertFalse(result.has_differences())

    def test_same_entries(self):
        """
        Two archive files with the same entries have no differences.
        """
        entries = [('A', b'a' * 2048), ('B', b'b')]
        path1 = write_zip(self.root / 'a1.jar', entries)
        path2 = write_zip(self.root / 'a2.jar', entries)

        result = ArchiveDiffer().compute_diff(path1, path2)

        self.assertFalse(result.has_differences())
        self.assertEqual(str(path1), result.source_label1)
        self.assertEqual(str(path2), result.source_label2)

    def test_different_entries(self):
        """
        Entries present in only one archive are added or removed.
        """
        path1 = write_zip(self.root / 'a.jar', [('A', b'a')])
        path2 = write_zip(self.root / 'b.jar', [('B', b'b')])

        result = ArchiveDiffer().compute_diff(path1, path2)

        self.assertEqual(['B'], list(result.added))
        self.assertEqual(['A'], list(result.removed))
        self.assertEqual(0, len(result.changed))

    def test_changed_contents(self):
        """
        Contents of the same size are only detected through the checksum.
        """
        path1 = write_zip(self.root / 'a.jar', [('A', b'a' * 2048)])
        path2 = write_zip(self.root / 'b.jar', [('A', b'b' * 2048)])

        result = ArchiveDiffer().compute_diff(path1, path2)
        self.assertEqual(['A'], list(result.changed))

        result = ArchiveDiffer(ComparisonConfig(compare_checksums=False)).compute_diff(path1, path2)
        self.assertFalse(result.has_differences())

    def test_changed_timestamp(self):
        """
        A different modification time changes an entry unless timestamps are ignored.
        """
        path1 = write_zip(self.root / 'a.jar', [('A', b'a', (2020, 1, 1, 0, 0, 0))])
        path2 = write_zip(self.root / 'b.jar', [('A', b'a', (2021, 6, 1, 0, 0, 0))])

        self.assertEqual(['A'], list(ArchiveDiffer().compute_diff(path1, path2).changed))
        config = ComparisonConfig(ignore_timestamps=True)
        self.assertFalse(ArchiveDiffer(config).compute_diff(path1, path2).has_differences())

    def test_nested_archive_changed(self):
        """
        A change inside a nested archive is reported for the nested entry.
        """
        path1 = write_zip(self.root / 'a.war', [
            ('WEB-INF/lib/', b''),
            ('inner.jar', zip_bytes([('E', b'aaaa'), ('F', b'same')])),
        ])
        path2 = write_zip(self.root / 'b.war', [
            ('WEB-INF/lib/', b''),
            ('inner.jar', zip_bytes([('E', b'bbbb'), ('F', b'same')])),
        ])

        result = ArchiveDiffer().compute_diff(path1, path2)

        self.assertIn('inner.jar/E', result.changed)
        self.assertIn('inner.jar', result.changed)
        self.assertNotIn('inner.jar/F', result.changed)
        self.assertEqual(0, len(result.added) + len(result.removed))

    def test_excluded_entries(self):
        """
        Excluded entries are not reported, regardless of which archive contains them.
        """
        path1 = write_zip(self.root / 'a.jar', [('A', b'a'), ('CVS/Root', b'x'), ('x.tmp', b'1')])
        path2 = write_zip(self.root / 'b.jar', [('A', b'a'), ('y.tmp', b'2')])
        config = ComparisonConfig(ignore_version_control_artifacts=True,
                                  exclusion_patterns={r'.*\.tmp'})

        result = ArchiveDiffer(config).compute_diff(path1, path2)

        self.assertFalse(result.has_differences())
        self.assertEqual({}, dict(result.ignored))

    def test_unreadable_archive(self):
        """
        A missing archive fails the comparison.
        """
        path = write_zip(self.root / 'a.jar', [('A', b'a')])
        with self.assertRaises(ArchiveReadError):
            ArchiveDiffer().compute_diff(path, self.root / 'missing.jar')


if __name__ == '__main__':
    unittest.main()
