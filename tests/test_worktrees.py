"""Tests for parsing ``git worktree list`` output and ordering entries.

Covers the line grammar, listing-level skip/abort rules, and date ordering.
"""

from __future__ import annotations

import datetime
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treeofwork.errors import ListingError, ParseError
from treeofwork.worktrees import Entry, modified_date, parse_line, parse_listing, sort_entries


def _entry(name: str, modified_at: str) -> Entry:
    return Entry(name=name, revision_id="abc1234", branch_name=name, modified_at=modified_at)


class ParseLineTests(unittest.TestCase):
    def test_parses_path_revision_and_branch(self) -> None:
        with mock.patch("treeofwork.worktrees.modified_date", return_value="2024-01-02") as date_mock:
            entry = parse_line("/repos/bare/dummy-tree-3 a1b2c3d [dummy-tree-3]")

        self.assertEqual(entry.name, "dummy-tree-3")
        self.assertEqual(entry.revision_id, "a1b2c3d")
        self.assertEqual(entry.branch_name, "dummy-tree-3")
        self.assertEqual(entry.modified_at, "2024-01-02")
        self.assertEqual(entry.path, "/repos/bare/dummy-tree-3")
        date_mock.assert_called_once_with("/repos/bare/dummy-tree-3")

    def test_branch_name_differs_from_worktree_name(self) -> None:
        with mock.patch("treeofwork.worktrees.modified_date", return_value="2024-01-02"):
            entry = parse_line("/repos/bare/fix   0123abc [feature/login-fix]   locked")

        self.assertEqual(entry.name, "fix")
        self.assertEqual(entry.branch_name, "feature/login-fix")

    def test_detached_head_has_empty_branch(self) -> None:
        with mock.patch("treeofwork.worktrees.modified_date", return_value="2024-01-02"):
            entry = parse_line("/repos/bare/probe 0123abc (detached HEAD)")

        self.assertEqual(entry.branch_name, "")

    def test_too_few_fields_is_a_parse_error(self) -> None:
        with self.assertRaises(ParseError):
            parse_line("/repos/bare/dummy a1b2c3d")

    def test_path_without_separator_is_a_parse_error(self) -> None:
        with self.assertRaises(ParseError):
            parse_line("dummy a1b2c3d [dummy]")

    def test_unexpected_branch_token_is_a_parse_error(self) -> None:
        with mock.patch("treeofwork.worktrees.modified_date", return_value="2024-01-02"):
            with self.assertRaises(ParseError) as ctx:
                parse_line("/repos/bare/dummy a1b2c3d dummy")

        self.assertIn("dummy", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ListingError)


class ModifiedDateTests(unittest.TestCase):
    def test_reads_local_calendar_date_from_mtime(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            stamp = datetime.datetime(2024, 3, 15, 12, 0, 0).timestamp()
            os.utime(tmp, (stamp, stamp))
            self.assertEqual(modified_date(tmp), "2024-03-15")

    def test_missing_path_is_a_listing_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "gone"
            with self.assertRaises(ListingError):
                modified_date(str(missing))


class SortEntriesTests(unittest.TestCase):
    def test_orders_by_modification_date_ascending(self) -> None:
        entries = [_entry("c", "2024-01-03"), _entry("a", "2024-01-01"), _entry("b", "2024-01-02")]

        ordered = sort_entries(entries)

        self.assertEqual([entry.modified_at for entry in ordered], ["2024-01-01", "2024-01-02", "2024-01-03"])
        self.assertEqual([ordered.index(entry) for entry in ordered], [0, 1, 2])

    def test_ties_keep_listing_order(self) -> None:
        entries = [_entry("x", "2024-01-02"), _entry("y", "2024-01-01"), _entry("z", "2024-01-02")]

        ordered = sort_entries(entries)

        self.assertEqual([entry.name for entry in ordered], ["y", "x", "z"])
        self.assertEqual(sort_entries(list(reversed(entries)))[0].name, "y")


class ParseListingTests(unittest.TestCase):
    def test_skips_bare_header_and_blank_lines_then_sorts(self) -> None:
        report = (
            "/repos/bare                 (bare)\n"
            "/repos/bare/newer  1111111 [newer]\n"
            "\n"
            "/repos/bare/older  2222222 [older]\n"
        )
        dates = {"/repos/bare/newer": "2024-02-01", "/repos/bare/older": "2023-12-24"}

        with mock.patch("treeofwork.worktrees.modified_date", side_effect=dates.__getitem__):
            entries = parse_listing(report)

        self.assertEqual([entry.name for entry in entries], ["older", "newer"])

    def test_empty_report_gives_empty_collection(self) -> None:
        self.assertEqual(parse_listing(""), ())
        self.assertEqual(parse_listing("/repos/bare  (bare)\n"), ())

    def test_malformed_line_aborts_whole_listing(self) -> None:
        report = "/repos/bare  (bare)\n/repos/bare/ok 1111111 [ok]\ngarbage\n"

        with mock.patch("treeofwork.worktrees.modified_date", return_value="2024-01-01"):
            with self.assertRaises(ParseError):
                parse_listing(report)

    def test_unreadable_modification_time_aborts_whole_listing(self) -> None:
        report = "/repos/bare  (bare)\n/repos/bare/ok 1111111 [ok]\n"

        with mock.patch(
            "treeofwork.worktrees.modified_date",
            side_effect=ListingError("cannot read modification time"),
        ):
            with self.assertRaises(ListingError):
                parse_listing(report)


if __name__ == "__main__":
    unittest.main()
