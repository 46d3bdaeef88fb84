# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

from unittest import mock

from diffstatcheck import (
    Backend,
    Command,
    CommandNotFound,
    ComparisonResult,
    DiffstatComparator,
    RepositoryDescriptor,
    SubprocessError,
)

from test.lib import StubTool, TestBase, command_error, fixture

HEADER = b"INSERTED,DELETED,MODIFIED,FILENAME\n"
SHA = "d6b0a2b3e1f4c5d6e7f8091a2b3c4d5e6f708192"


class TestComparisonResult(TestBase):
    def test_identical_outputs_match(self):
        self.assertTrue(ComparisonResult("1", HEADER, HEADER).matches)

    def test_any_difference_is_a_mismatch(self):
        a = HEADER + b"1,0,0,a.c\n2,0,0,b.c\n"
        for other in (
            HEADER + b"2,0,0,b.c\n1,0,0,a.c\n",
            HEADER + b"1,0,0,a.c\n2,0,0,b.c",
            HEADER + b"1,0,0,a.c\r\n2,0,0,b.c\r\n",
            HEADER + b"1,0,0,a.c\n2,0,0,b.c \n",
        ):
            self.assertFalse(ComparisonResult("1", a, other).matches)


class TestDiffstatComparator(TestBase):
    def _comparator(self, backend, url, diffstats, outputs):
        command = Command()
        patcher = mock.patch.object(Command, "execute", side_effect=outputs)
        self.execute = patcher.start()
        self.addCleanup(patcher.stop)
        self.tool = StubTool(diffstats=diffstats, command=command)
        return DiffstatComparator(RepositoryDescriptor(backend, url), self.tool, command)

    def test_git_reference_pipes_native_diff_into_diffstat(self):
        diff = fixture("git_diff_tree")
        table = fixture("diffstat_table")
        comparator = self._comparator(Backend.GIT, "/home/me/project", {SHA: table}, [diff, table])

        result = comparator.compare(SHA)

        self.assertTrue(result.matches)
        self.assertEqual(result.revision, SHA)
        self.assertEqual(self.tool.calls, [("diffstat", "/home/me/project", SHA)])
        self.assertEqual(
            self.execute.call_args_list,
            [
                mock.call(
                    ["git", "diff-tree", "-U", "--no-renames", "--root", SHA],
                    istream=None,
                    cwd="/home/me/project",
                ),
                mock.call(["diffstat", "-t", "-p1"], istream=diff, cwd="/home/me/project"),
            ],
        )

    def test_subversion_reference_uses_url_and_no_strip(self):
        url = "file:///srv/repo"
        comparator = self._comparator(
            Backend.SUBVERSION,
            url,
            {"42": HEADER + b"3,1,0,foo.c\n"},
            [b"Index: foo.c\n", HEADER + b"3,0,0,foo.c\n"],
        )

        result = comparator.compare("42")

        self.assertFalse(result.matches)
        self.assertEqual(result.candidate_output, HEADER + b"3,1,0,foo.c\n")
        self.assertEqual(result.reference_output, HEADER + b"3,0,0,foo.c\n")
        self.assertEqual(self.execute.call_args_list[0][0][0], ["svn", "diff", "-c", "42", url])
        self.assertIsNone(self.execute.call_args_list[0][1]["cwd"])
        self.assertEqual(self.execute.call_args_list[1][0][0], ["diffstat", "-t", "-p0"])

    def test_mercurial_reference(self):
        comparator = self._comparator(Backend.MERCURIAL, "/repo", {}, [b"diff -r 1 -r 2\n", HEADER])
        self.assertEqual(comparator.reference("abc123def"), HEADER)
        self.assertEqual(self.execute.call_args_list[0][0][0], ["hg", "diff", "-c", "abc123def"])

    def test_reference_range(self):
        comparator = self._comparator(Backend.SUBVERSION, "file:///srv/repo", {}, [b"diff", HEADER])
        self.assertEqual(comparator.reference_range("41", "43"), HEADER)
        self.assertEqual(
            self.execute.call_args_list[0][0][0],
            ["svn", "diff", "-r", "41:43", "file:///srv/repo"],
        )

    def test_failing_native_diff(self):
        cause = command_error("git", "diff-tree", status=128)
        comparator = self._comparator(Backend.GIT, "/repo", {SHA: HEADER}, [cause])
        with self.assertRaises(SubprocessError) as ctx:
            comparator.compare(SHA)
        err = ctx.exception
        self.assertEqual((err.revision, err.role, err.status), (SHA, "native diff", 128))
        self.assertIs(err.cause, cause)
        self.assertIn(SHA, str(err))
        self.assertEqual(self.execute.call_count, 1)

    def test_failing_diffstat(self):
        comparator = self._comparator(Backend.GIT, "/repo", {SHA: HEADER}, [b"diff", command_error("diffstat")])
        with self.assertRaises(SubprocessError) as ctx:
            comparator.compare(SHA)
        self.assertEqual(ctx.exception.role, "diffstat")

    def test_failing_tool(self):
        comparator = self._comparator(Backend.GIT, "/repo", {SHA: command_error("pepper")}, [])
        with self.assertRaises(SubprocessError) as ctx:
            comparator.compare(SHA)
        self.assertEqual(ctx.exception.role, "candidate")
        self.assertEqual(self.execute.call_count, 0)

    def test_missing_executable_is_not_wrapped(self):
        missing = CommandNotFound(["diffstat"], FileNotFoundError("diffstat"))
        comparator = self._comparator(Backend.GIT, "/repo", {SHA: HEADER}, [b"diff", missing])
        self.assertRaises(CommandNotFound, comparator.compare, SHA)
