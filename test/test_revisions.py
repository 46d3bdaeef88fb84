# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

import logging
from unittest import mock

from diffstatcheck import Backend, Command, RepositoryDescriptor, list_revisions, spec
from diffstatcheck.revisions import extract_revisions

from test.lib import TestBase, fixture


class TestRevisions(TestBase):
    def test_subversion_log(self):
        revisions = extract_revisions(spec("subversion"), fixture("svn_log_q").decode())
        self.assertEqual(revisions, ["43", "42", "7"])

    def test_mercurial_log_yields_node_ids(self):
        revisions = extract_revisions(spec("mercurial"), fixture("hg_log_q").decode())
        self.assertEqual(revisions, ["abc123def456", "0f1e2d3c4b5a", "9988776655aa"])

    def test_git_rev_list_drops_blank_lines(self):
        revisions = extract_revisions(spec("git"), fixture("git_rev_list").decode())
        self.assertEqual(
            revisions,
            [
                "d6b0a2b3e1f4c5d6e7f8091a2b3c4d5e6f708192",
                "3a1f5e0c9b8d7a6f5e4d3c2b1a0f9e8d7c6b5a49",
                "5b26bd2e9e0c3c6b1e1a0c8c2f4e6a7b8c9d0e1f",
            ],
        )

    def test_empty_log(self):
        self.assertEqual(extract_revisions(spec("subversion"), ""), [])

    def test_dropped_lines_are_logged(self):
        with self.assertLogs("diffstatcheck.revisions", level=logging.DEBUG) as log_watcher:
            extract_revisions(spec("subversion"), fixture("svn_log_q").decode())
        self.assertIn("3 revision(s), 4 line(s) dropped", log_watcher.output[0])

    def test_extraction_is_deterministic(self):
        log = fixture("hg_log_q").decode()
        self.assertEqual(extract_revisions(spec("mercurial"), log), extract_revisions(spec("mercurial"), log))

    @mock.patch.object(Command, "execute")
    def test_subversion_log_gets_url(self, execute):
        execute.return_value = fixture("svn_log_q").decode()
        descriptor = RepositoryDescriptor(Backend.SUBVERSION, "file:///srv/repo")
        self.assertEqual(list_revisions(descriptor, Command()), ["43", "42", "7"])
        execute.assert_called_once_with(
            ["svn", "log", "-q", "file:///srv/repo"],
            cwd=None,
            stdout_as_string=True,
        )

    @mock.patch.object(Command, "execute")
    def test_mercurial_log_runs_in_checkout(self, execute):
        execute.return_value = fixture("hg_log_q").decode()
        descriptor = RepositoryDescriptor(Backend.MERCURIAL, "/home/me/project")
        self.assertEqual(len(list_revisions(descriptor)), 3)
        execute.assert_called_once_with(["hg", "log", "-q"], cwd="/home/me/project", stdout_as_string=True)
