# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

"""Command line interface: check every revision of a repository."""

__all__ = ["check", "main"]

import argparse
import logging
import os
import os.path as osp
import sys

from diffstatcheck import __version__
from diffstatcheck.cmd import Command
from diffstatcheck.diffstat import DiffstatComparator
from diffstatcheck.exc import CommandError, OutputDirectoryError, ProbeFailedError, UnsupportedBackendError
from diffstatcheck.repo import probe
from diffstatcheck.report import MismatchReporter, RunSummary
from diffstatcheck.revisions import list_revisions
from diffstatcheck.tool import Tool

# typing -------------------------------------------------------------------

from typing import Optional, Sequence, TextIO

from diffstatcheck.types import PathLike

# --------------------------------------------------------------------------

_logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PROBE_FAILED = 1
EXIT_COMMAND_FAILED = 2
EXIT_OUTPUT_FAILED = 3
EXIT_INTERRUPTED = 130


def check(
    repository: str,
    tool: Optional[Tool] = None,
    output_dir: Optional[PathLike] = None,
    revisions: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
    stream: Optional[TextIO] = None,
    show_progress: bool = True,
) -> RunSummary:
    """Compare the diffstats of the revisions of `repository`, one at a time.

    :param repository:
        Path or URL of the repository, as understood by the tool under test.

    :param tool:
        The tool under test. Defaults to a :class:`~diffstatcheck.tool.Tool` found
        through the environment.

    :param output_dir:
        Where mismatch artifacts are written, defaults to the current directory.

    :param revisions:
        Revisions to check instead of the whole history, in the given order.

    :param limit:
        Check at most this many revisions, must not be negative.

    :return: A :class:`~diffstatcheck.report.RunSummary`. Mismatches do not raise.

    :raise ValueError:
        If `limit` is negative.

    :raise diffstatcheck.exc.OutputDirectoryError:
        If `output_dir` is not an existing directory, checked before anything runs,
        or if an artifact cannot be written to it.

    :raise diffstatcheck.exc.ProbeFailedError:
    :raise diffstatcheck.exc.UnsupportedBackendError:
    :raise diffstatcheck.exc.CommandError:
        If any command fails, including :class:`~diffstatcheck.exc.SubprocessError`
        for the commands run per revision.
    """
    if limit is not None and limit < 0:
        raise ValueError("limit must not be negative, got %d" % limit)
    if output_dir is not None and not osp.isdir(output_dir):
        raise OutputDirectoryError(os.fspath(output_dir), "not a directory")

    tool = tool or Tool()
    command = tool.command
    descriptor = probe(repository, tool)

    if revisions is None:
        revisions = list_revisions(descriptor, command)
    revisions = list(revisions)
    if limit is not None:
        revisions = revisions[:limit]

    if not revisions:
        _logger.info("No revisions to check")
        return RunSummary(0)

    comparator = DiffstatComparator(descriptor, tool, command)
    reporter = MismatchReporter(len(revisions), output_dir, stream, show_progress)
    try:
        for revision in revisions:
            reporter.report(comparator.compare(revision))
    finally:
        reporter.end_progress()
    return reporter.finish()


def _limit(value: str) -> int:
    limit = int(value)
    if limit < 0:
        raise argparse.ArgumentTypeError("must not be negative: %d" % limit)
    return limit


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diffstat-check",
        description="Compare the diffstats computed by pepper with those of the native "
        "version control client, for every revision of a repository.",
    )
    parser.add_argument("repository", help="path or URL of the repository")
    parser.add_argument(
        "tool",
        nargs="?",
        default=None,
        help="path to the pepper executable (default: $DIFFSTATCHECK_TOOL or pepper on the PATH)",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=None,
        help="directory for mismatch artifacts (default: current directory)",
    )
    parser.add_argument(
        "-r",
        "--revision",
        dest="revisions",
        action="append",
        default=None,
        metavar="REV",
        help="check only this revision, may be given multiple times",
    )
    parser.add_argument("--limit", type=_limit, default=None, metavar="N", help="check at most N revisions")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="log every command run")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only show warnings and errors")
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parser().parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)

    try:
        check(
            args.repository,
            tool=Tool(args.tool, Command()),
            output_dir=args.output_dir,
            revisions=args.revisions,
            limit=args.limit,
            show_progress=not args.quiet,
        )
    except (ProbeFailedError, UnsupportedBackendError) as err:
        _logger.error("%s", err)
        return EXIT_PROBE_FAILED
    except CommandError as err:
        _logger.error("%s", err)
        return EXIT_COMMAND_FAILED
    except OutputDirectoryError as err:
        _logger.error("%s", err)
        return EXIT_OUTPUT_FAILED
    except KeyboardInterrupt:
        _logger.error("Interrupted")
        return EXIT_INTERRUPTED
    return EXIT_OK
