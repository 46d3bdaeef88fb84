# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

"""Exceptions thrown throughout the diffstatcheck package."""

__all__ = [
    "DiffstatCheckError",
    "CommandError",
    "CommandNotFound",
    "SubprocessError",
    "ProbeFailedError",
    "UnsupportedBackendError",
    "OutputDirectoryError",
]

from diffstatcheck.compat import safe_decode

# typing ----------------------------------------------------

from typing import List, Optional, Sequence, Union

# ------------------------------------------------------------------


class DiffstatCheckError(Exception):
    """Base class for all package exceptions."""


class CommandError(DiffstatCheckError):
    """Base class for exceptions thrown at every stage of `Popen` execution.

    :param command:
        A non-empty list of argv comprising the command-line.
    """

    _msg = "Cmd('%s') failed%s"

    def __init__(
        self,
        command: Sequence[str],
        status: Union[str, int, None, Exception] = None,
        stderr: Union[bytes, str, None] = None,
        stdout: Union[bytes, str, None] = None,
    ) -> None:
        if not isinstance(command, (tuple, list)):
            command = str(command).split()
        self.command: List[str] = list(command)
        self.status = status
        if status:
            if isinstance(status, Exception):
                status = "%s('%s')" % (type(status).__name__, safe_decode(str(status)))
            else:
                try:
                    status = "exit code(%s)" % int(status)
                except (ValueError, TypeError):
                    s = safe_decode(str(status))
                    status = "'%s'" % s if isinstance(status, str) else s

        self._cmd = safe_decode(self.command[0]) if self.command else ""
        self._cmdline = " ".join(safe_decode(i) for i in self.command)
        self._cause = status and " due to: %s" % status or "!"
        self.stdout = stdout
        self.stderr = stderr

    def __str__(self) -> str:
        text = (self._msg % (self._cmdline, self._cause)) + "\n  cmdline: %s" % self._cmdline
        stderr = safe_decode(self.stderr)
        if stderr:
            text += "\n  stderr: '%s'" % stderr.strip()
        return text


class CommandNotFound(CommandError, OSError):
    """Thrown if the executable of a command cannot be found on the ``PATH`` or at
    the path configured for it."""

    def __init__(self, command: Sequence[str], cause: Union[str, Exception]) -> None:
        super().__init__(command, cause)
        self._msg = "Cmd('%s') not found%s"


class SubprocessError(CommandError):
    """Thrown if one of the commands run to compare a single revision fails.

    The wrapped :class:`CommandError` is available as ``cause``.
    """

    def __init__(self, revision: str, role: str, cause: CommandError) -> None:
        super().__init__(cause.command, cause.status, cause.stderr, cause.stdout)
        self.revision = revision
        self.role = role
        self.cause = cause

    def __str__(self) -> str:
        return "%s command for revision %s failed: %s" % (self.role, self.revision, self.cause)


class ProbeFailedError(DiffstatCheckError):
    """Thrown if the tool under test could not report the type and URL of a
    repository."""

    def __init__(self, repository: str, reason: str, cause: Optional[Exception] = None) -> None:
        super().__init__(repository, reason)
        self.repository = repository
        self.reason = reason
        self.cause = cause

    def __str__(self) -> str:
        return "Unable to probe repository '%s': %s" % (self.repository, self.reason)


class UnsupportedBackendError(DiffstatCheckError, ValueError):
    """Thrown if a backend name is not one of the supported version control
    systems."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return "Unsupported repository backend: %r" % (self.name,)


class OutputDirectoryError(DiffstatCheckError):
    """Thrown if mismatch artifacts cannot be written to the output directory."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return "Cannot write artifacts to '%s': %s" % (self.path, self.reason)
