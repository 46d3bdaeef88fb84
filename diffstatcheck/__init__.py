# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

__all__ = [
    "BACKENDS",
    "Backend",
    "BackendSpec",
    "Command",
    "CommandError",
    "CommandNotFound",
    "ComparisonResult",
    "DiffstatCheckError",
    "DiffstatComparator",
    "MismatchReporter",
    "OutputDirectoryError",
    "ProbeFailedError",
    "RepositoryDescriptor",
    "RunSummary",
    "SubprocessError",
    "Tool",
    "UnsupportedBackendError",
    "check",
    "list_revisions",
    "probe",
    "spec",
]

__version__ = "diffstatcheck"

from diffstatcheck.exc import (
    CommandError,
    CommandNotFound,
    DiffstatCheckError,
    OutputDirectoryError,
    ProbeFailedError,
    SubprocessError,
    UnsupportedBackendError,
)
from diffstatcheck.backends import BACKENDS, Backend, BackendSpec, spec
from diffstatcheck.cmd import Command
from diffstatcheck.tool import Tool
from diffstatcheck.repo import RepositoryDescriptor, probe
from diffstatcheck.revisions import list_revisions
from diffstatcheck.diffstat import ComparisonResult, DiffstatComparator
from diffstatcheck.report import MismatchReporter, RunSummary
from diffstatcheck.main import check
