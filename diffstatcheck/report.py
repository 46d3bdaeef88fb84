# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

__all__ = ["MismatchReporter", "RunSummary"]

from dataclasses import dataclass, field
import logging
import os
import os.path as osp
import sys

from diffstatcheck.diffstat import ComparisonResult
from diffstatcheck.exc import OutputDirectoryError

# typing -------------------------------------------------------------------

from typing import List, Optional, TextIO, Tuple

from diffstatcheck.types import PathLike

# --------------------------------------------------------------------------

_logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of a run over the history of a repository."""

    total: int
    checked: int = 0
    mismatches: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.mismatches


class MismatchReporter:
    """Persists both outputs of every mismatching revision and shows progress.

    Artifacts are written to `output_dir` as ``candidate_<rev>.txt`` and
    ``reference_<rev>.txt``. Matching revisions leave no trace besides the
    progress indicator ``i/total``, which is redrawn in place on `stream`.

    :raise diffstatcheck.exc.OutputDirectoryError:
        If `output_dir` is not an existing directory.
    """

    candidate_tag = "candidate"
    reference_tag = "reference"

    def __init__(
        self,
        total: int,
        output_dir: Optional[PathLike] = None,
        stream: Optional[TextIO] = None,
        show_progress: bool = True,
    ) -> None:
        self.output_dir = os.fspath(output_dir) if output_dir is not None else os.getcwd()
        self.stream = stream if stream is not None else sys.stdout
        self.show_progress = show_progress
        self.summary = RunSummary(total)
        self._progress_shown = False
        if not osp.isdir(self.output_dir):
            raise OutputDirectoryError(self.output_dir, "not a directory")

    def artifact_paths(self, revision: str) -> Tuple[str, str]:
        """:return: tuple(candidate_path, reference_path) of the artifacts of `revision`"""
        name = revision.replace("/", "_").replace(os.sep, "_")
        return (
            osp.join(self.output_dir, "%s_%s.txt" % (self.candidate_tag, name)),
            osp.join(self.output_dir, "%s_%s.txt" % (self.reference_tag, name)),
        )

    def report(self, result: ComparisonResult) -> None:
        """Record the comparison of one revision. A mismatch is never fatal."""
        self.summary.checked += 1
        if not result.matches:
            candidate_path, reference_path = self.artifact_paths(result.revision)
            self._write(candidate_path, result.candidate_output)
            self._write(reference_path, result.reference_output)
            self.summary.mismatches.append(result.revision)
            _logger.warning(
                "Diffstat mismatch for revision %s, see %s and %s",
                result.revision,
                candidate_path,
                reference_path,
            )
        # END handle mismatch

        if self.show_progress:
            self.stream.write("\r%d/%d" % (self.summary.checked, self.summary.total))
            self.stream.flush()
            self._progress_shown = True

    def _write(self, path: str, data: bytes) -> None:
        try:
            with open(path, "wb") as fp:
                fp.write(data)
        except OSError as err:
            raise OutputDirectoryError(self.output_dir, str(err)) from err

    def end_progress(self) -> None:
        """Terminate the progress line if one was drawn. Safe to call repeatedly."""
        if self._progress_shown:
            self.stream.write("\n")
            self.stream.flush()
            self._progress_shown = False

    def finish(self) -> RunSummary:
        """Terminate the progress line and log the outcome of the run."""
        self.end_progress()
        _logger.info(
            "Checked %d of %d revision(s), %d mismatch(es)",
            self.summary.checked,
            self.summary.total,
            len(self.summary.mismatches),
        )
        return self.summary
