# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

__all__ = [
    "fixture_path",
    "fixture",
    "fake_executable",
    "with_rw_directory",
    "TestBase",
    "StubTool",
    "command_error",
]

from functools import wraps
import gc
import logging
import os.path as osp
from pathlib import Path
import shutil
import tempfile
from unittest import TestCase

from diffstatcheck.exc import CommandError

_logger = logging.getLogger(__name__)

# { Routines


def fixture_path(name):
    return osp.join(osp.dirname(__file__), "..", "fixtures", name)


def fixture(name):
    with open(fixture_path(name), "rb") as fd:
        return fd.read()


def fake_executable(directory, name, body):
    """Write a POSIX shell script called `name` into `directory`.

    :return: Absolute path of the executable script
    """
    path = Path(directory, name)
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(0o755)
    return str(path.absolute())


# } END routines

# { Decorators


def with_rw_directory(func):
    """Create a temporary directory which can be written to, remove it if the
    test succeeds, but leave it otherwise to aid additional debugging."""

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        path = tempfile.mkdtemp(prefix=func.__name__)
        keep = False
        try:
            return func(self, path, *args, **kwargs)
        except Exception:
            _logger.info(
                "Test %s.%s failed, output is at %r\n",
                type(self).__name__,
                func.__name__,
                path,
            )
            keep = True
            raise
        finally:
            gc.collect()
            if not keep:
                shutil.rmtree(path)

    return wrapper


# } END decorators

# { Stubs


class StubTool:
    """Stands in for :class:`diffstatcheck.tool.Tool`, answering from fixed outputs.

    :param probe_output:
        Bytes returned by :meth:`probe`, or a :class:`CommandError` to raise.

    :param diffstats:
        Mapping of revision ids to the bytes returned by :meth:`diffstat`.
    """

    def __init__(self, probe_output=b"", diffstats=None, command=None):
        self.probe_output = probe_output
        self.diffstats = dict(diffstats or {})
        self.command = command
        self.calls = []

    def probe(self, repository):
        self.calls.append(("probe", repository))
        if isinstance(self.probe_output, Exception):
            raise self.probe_output
        return self.probe_output

    def diffstat(self, repository, revision):
        self.calls.append(("diffstat", repository, revision))
        value = self.diffstats[revision]
        if isinstance(value, Exception):
            raise value
        return value


def command_error(*argv, status=1, stderr=b"boom"):
    return CommandError(list(argv), status, stderr)


# } END stubs


class TestBase(TestCase):
    """Base class providing a fresh scratch directory to each test as ``self.rw_dir``,
    without changing the working directory of the test process."""

    def setUp(self):
        super().setUp()
        self.rw_dir = tempfile.mkdtemp(prefix=type(self).__name__)
        self.addCleanup(shutil.rmtree, self.rw_dir, True)
