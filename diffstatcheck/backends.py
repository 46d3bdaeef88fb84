# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

"""Registry of the supported version control backends.

Each backend is described by an immutable :class:`BackendSpec` holding the argument
lists of the native commands the checker runs and the rules to parse their output.
Commands are built as argument lists, values are substituted into single arguments
and never pass through a shell.
"""

__all__ = ["Backend", "BackendSpec", "BACKENDS", "spec"]

from dataclasses import dataclass
import enum
import re
from types import MappingProxyType

from diffstatcheck.exc import UnsupportedBackendError

# typing ------------------------------------------------------------------

from typing import List, Mapping, Optional, Pattern, Tuple, Union

# ---------------------------------------------------------------------------


@enum.unique
class Backend(str, enum.Enum):
    """The version control systems a repository can be stored in.

    The values are the type names the tool under test reports for a repository.
    """

    SUBVERSION = "subversion"
    GIT = "git"
    MERCURIAL = "mercurial"

    @classmethod
    def from_name(cls, name: str) -> "Backend":
        """:return: The backend called `name`

        :raise diffstatcheck.exc.UnsupportedBackendError:
            If `name` is not exactly one of the supported type names."""
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedBackendError(name) from None

    def __str__(self) -> str:
        return self.value


def _substitute(template: Tuple[str, ...], **values: str) -> List[str]:
    return [arg.format(**values) for arg in template]


@dataclass(frozen=True)
class BackendSpec:
    """Commands and parsing rules of a single backend.

    ``log_command``
        Lists the revision history, one revision per matching line.

    ``log_line_pattern``
        Pattern with exactly one group, applied to every line of the log output. The
        group is the revision id. Lines not matching are not revisions. If ``None``,
        every non-empty line is a revision id.

    ``single_revision_diff_command``, ``double_revision_diff_command``
        Native diff of one revision, or between two revisions.

    ``pass_url_explicitly``
        If set, the repository URL is part of the commands. Otherwise commands run
        inside the repository checkout and get no URL argument.

    ``diffstat_strip_level``
        Number of leading path components ``diffstat`` strips from the file names
        in the diff headers.
    """

    backend: Backend
    log_command: Tuple[str, ...]
    log_line_pattern: Optional[Pattern[str]]
    single_revision_diff_command: Tuple[str, ...]
    double_revision_diff_command: Tuple[str, ...]
    pass_url_explicitly: bool
    diffstat_strip_level: int

    def log(self, url: str = "") -> List[str]:
        """:return: Argument list printing the revision history of the repository at `url`"""
        return _substitute(self.log_command, url=url)

    def diff(self, revision: str, url: str = "") -> List[str]:
        """:return: Argument list printing the changes introduced by `revision`"""
        return _substitute(self.single_revision_diff_command, rev=revision, url=url)

    def diff_range(self, from_revision: str, to_revision: str, url: str = "") -> List[str]:
        """:return: Argument list printing the changes between two revisions"""
        return _substitute(
            self.double_revision_diff_command,
            rev1=from_revision,
            rev2=to_revision,
            url=url,
        )

    def diffstat(self) -> List[str]:
        """:return: Argument list turning a diff read from stdin into a diffstat table"""
        return ["diffstat", "-t", "-p%d" % self.diffstat_strip_level]

    def extract_revision(self, line: str) -> Optional[str]:
        """:return: The revision id listed on a log `line`, or ``None`` if the line
            does not list a revision"""
        if self.log_line_pattern is None:
            return line or None
        match = self.log_line_pattern.match(line)
        if match is None:
            return None
        return match.group(1) or None


BACKENDS: Mapping[Backend, BackendSpec] = MappingProxyType(
    {
        Backend.SUBVERSION: BackendSpec(
            backend=Backend.SUBVERSION,
            log_command=("svn", "log", "-q", "{url}"),
            log_line_pattern=re.compile(r"^r([0-9]+)"),
            single_revision_diff_command=("svn", "diff", "-c", "{rev}", "{url}"),
            double_revision_diff_command=("svn", "diff", "-r", "{rev1}:{rev2}", "{url}"),
            pass_url_explicitly=True,
            diffstat_strip_level=0,
        ),
        Backend.GIT: BackendSpec(
            backend=Backend.GIT,
            log_command=("git", "rev-list", "HEAD"),
            log_line_pattern=None,
            single_revision_diff_command=("git", "diff-tree", "-U", "--no-renames", "--root", "{rev}"),
            double_revision_diff_command=("git", "diff-tree", "-U", "--no-renames", "{rev1}", "{rev2}"),
            pass_url_explicitly=False,
            diffstat_strip_level=1,
        ),
        Backend.MERCURIAL: BackendSpec(
            backend=Backend.MERCURIAL,
            log_command=("hg", "log", "-q"),
            log_line_pattern=re.compile(r"^[0-9]+:(.*)"),
            single_revision_diff_command=("hg", "diff", "-c", "{rev}"),
            double_revision_diff_command=("hg", "diff", "-r", "{rev1}", "-r", "{rev2}"),
            pass_url_explicitly=False,
            diffstat_strip_level=1,
        ),
    }
)
"""Read-only mapping of every :class:`Backend` to its :class:`BackendSpec`."""

assert set(BACKENDS) == set(Backend), "every backend needs a BackendSpec"


def spec(backend: Union[str, Backend]) -> BackendSpec:
    """Look up the commands and parsing rules of a backend.

    :param backend:
        A :class:`Backend`, or its type name as reported by the tool under test.

    :raise diffstatcheck.exc.UnsupportedBackendError:
        If `backend` names no supported backend.
    """
    if not isinstance(backend, Backend):
        backend = Backend.from_name(backend)
    return BACKENDS[backend]
