# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

"""Comparison of the diffstat computed by the tool under test with the reference
diffstat derived from the backend's native diff."""

__all__ = ["ComparisonResult", "DiffstatComparator"]

from dataclasses import dataclass
import logging

from diffstatcheck.cmd import Command
from diffstatcheck.exc import CommandError, CommandNotFound, SubprocessError
from diffstatcheck.repo import RepositoryDescriptor
from diffstatcheck.tool import Tool

# typing -------------------------------------------------------------------

from typing import List, Optional

# --------------------------------------------------------------------------

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonResult:
    """Both diffstats of a single revision."""

    revision: str
    candidate_output: bytes
    reference_output: bytes

    @property
    def matches(self) -> bool:
        """Whether both outputs are identical, byte for byte"""
        return self.candidate_output == self.reference_output


class DiffstatComparator:
    """Computes and compares the two diffstats of revisions of one repository.

    The candidate diffstat comes from the tool under test. The reference diffstat is
    the native diff of the revision piped through ``diffstat -t``, stripping as many
    leading path components as the backend's diff headers carry.

    Outputs are compared as they are. Neither side is normalized, so differences in
    file order or formatting are reported like differences in the numbers.
    """

    __slots__ = ("descriptor", "tool", "command")

    def __init__(
        self,
        descriptor: RepositoryDescriptor,
        tool: Tool,
        command: Optional[Command] = None,
    ) -> None:
        self.descriptor = descriptor
        self.tool = tool
        self.command = command or Command()

    def _run(self, revision: str, role: str, argv: List[str], istream: Optional[bytes] = None) -> bytes:
        try:
            return self.command.execute(argv, istream=istream, cwd=self.descriptor.working_dir)
        except CommandNotFound:
            raise
        except CommandError as err:
            raise SubprocessError(revision, role, err) from err

    def candidate(self, revision: str) -> bytes:
        """:return: The diffstat table of `revision` as printed by the tool under test

        :raise diffstatcheck.exc.SubprocessError:
            If the tool fails."""
        try:
            return self.tool.diffstat(self.descriptor.url, revision)
        except CommandNotFound:
            raise
        except CommandError as err:
            raise SubprocessError(revision, "candidate", err) from err

    def _diffstat(self, revision: str, diff: bytes) -> bytes:
        return self._run(revision, "diffstat", self.descriptor.spec.diffstat(), istream=diff)

    def reference(self, revision: str) -> bytes:
        """:return: The diffstat table of the native diff of `revision`

        :raise diffstatcheck.exc.SubprocessError:
            If the native diff or ``diffstat`` fail."""
        spec = self.descriptor.spec
        diff = self._run(revision, "native diff", spec.diff(revision, self.descriptor.command_url))
        return self._diffstat(revision, diff)

    def reference_range(self, from_revision: str, to_revision: str) -> bytes:
        """:return: The diffstat table of the native diff between two revisions"""
        spec = self.descriptor.spec
        label = "%s..%s" % (from_revision, to_revision)
        diff = self._run(
            label,
            "native diff",
            spec.diff_range(from_revision, to_revision, self.descriptor.command_url),
        )
        return self._diffstat(label, diff)

    def compare(self, revision: str) -> ComparisonResult:
        """Compute both diffstats of `revision`.

        :raise diffstatcheck.exc.SubprocessError:
            If any of the commands involved fails. Outputs of failed commands are
            never compared.
        """
        candidate = self.candidate(revision)
        reference = self.reference(revision)
        result = ComparisonResult(revision, candidate, reference)
        _logger.debug("Revision %s: %s", revision, "match" if result.matches else "MISMATCH")
        return result
