# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

__all__ = ["extract_revisions", "list_revisions"]

import logging

from diffstatcheck.backends import BackendSpec
from diffstatcheck.cmd import Command
from diffstatcheck.repo import RepositoryDescriptor

# typing -------------------------------------------------------------------

from typing import List, Optional

# --------------------------------------------------------------------------

_logger = logging.getLogger(__name__)


def extract_revisions(spec: BackendSpec, log_output: str) -> List[str]:
    """Parse the output of a backend's log command.

    :return: The revision ids in the order they are listed. Lines that do not list
        a revision are dropped.
    """
    revisions = []
    lines = log_output.splitlines()
    for line in lines:
        revision = spec.extract_revision(line)
        if revision is not None:
            revisions.append(revision)
    # END for each line
    _logger.debug(
        "%s log: %d revision(s), %d line(s) dropped",
        spec.backend,
        len(revisions),
        len(lines) - len(revisions),
    )
    return revisions


def list_revisions(descriptor: RepositoryDescriptor, command: Optional[Command] = None) -> List[str]:
    """List the revisions of a repository in the order its log command reports them.

    :return: Possibly empty list of revision ids.

    :raise diffstatcheck.exc.CommandError:
        If the log command fails.
    """
    command = command or Command()
    spec = descriptor.spec
    output = command.execute(
        spec.log(descriptor.command_url),
        cwd=descriptor.working_dir,
        stdout_as_string=True,
    )
    return extract_revisions(spec, output)
