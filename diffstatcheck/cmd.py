# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

__all__ = ["Command"]

import logging
import os
import os.path as osp
from subprocess import PIPE, Popen

from diffstatcheck.compat import safe_decode
from diffstatcheck.exc import CommandError, CommandNotFound

# typing ---------------------------------------------------------------------------

from typing import Dict, Mapping, Optional, Sequence, Tuple, Union, overload

from diffstatcheck.types import Literal, PathLike

# ---------------------------------------------------------------------------------

_logger = logging.getLogger(__name__)


class Command:
    """Runs the external programs the checker relies on.

    Every program is started from an explicit argument list, never through a shell.
    The first item of a command names the program. It is looked up in the executable
    table, so ``["svn", "log", "-q", url]`` runs whatever ``DIFFSTATCHECK_SVN_EXECUTABLE``
    points to, or ``svn`` from the ``PATH`` if the variable is unset.

    ``Debugging``
        Set the ``DIFFSTATCHECK_TRACE`` environment variable to log each invocation
        at INFO level. Set its value to ``full`` to also see the exit status and the
        size of the returned output.
    """

    __slots__ = ("_executables",)

    # CONFIGURATION

    DIFFSTATCHECK_TRACE = os.environ.get("DIFFSTATCHECK_TRACE", "")
    """Enables tracing of the commands run, see class documentation."""

    executable_env_vars: Dict[str, str] = {
        "svn": "DIFFSTATCHECK_SVN_EXECUTABLE",
        "git": "DIFFSTATCHECK_GIT_EXECUTABLE",
        "hg": "DIFFSTATCHECK_HG_EXECUTABLE",
        "diffstat": "DIFFSTATCHECK_DIFFSTAT_EXECUTABLE",
    }
    """Environment variables overriding the path of a program, keyed by program name."""

    def __init__(self, executables: Optional[Mapping[str, str]] = None) -> None:
        """Initialize this instance with:

        :param executables:
            Optional mapping of program names to the executable to run instead. It
            takes precedence over the environment variables.
        """
        self._executables = dict(executables or {})

    def executable(self, name: str) -> str:
        """:return: The executable to run for the program `name`."""
        if name in self._executables:
            return self._executables[name]
        env_var = self.executable_env_vars.get(name)
        if env_var:
            return os.environ.get(env_var) or name
        return name

    @overload
    def execute(
        self,
        command: Sequence[str],
        *,
        istream: Optional[bytes] = None,
        cwd: Optional[PathLike] = None,
        stdout_as_string: Literal[False] = False,
        with_exceptions: bool = True,
        with_extended_output: Literal[False] = False,
    ) -> bytes:
        ...

    @overload
    def execute(
        self,
        command: Sequence[str],
        *,
        istream: Optional[bytes] = None,
        cwd: Optional[PathLike] = None,
        stdout_as_string: Literal[True],
        with_exceptions: bool = True,
        with_extended_output: Literal[False] = False,
    ) -> str:
        ...

    @overload
    def execute(
        self,
        command: Sequence[str],
        *,
        istream: Optional[bytes] = None,
        cwd: Optional[PathLike] = None,
        stdout_as_string: bool = False,
        with_exceptions: bool = True,
        with_extended_output: Literal[True],
    ) -> Tuple[int, Union[str, bytes], bytes]:
        ...

    def execute(
        self,
        command: Sequence[str],
        *,
        istream: Optional[bytes] = None,
        cwd: Optional[PathLike] = None,
        stdout_as_string: bool = False,
        with_exceptions: bool = True,
        with_extended_output: bool = False,
    ) -> Union[str, bytes, Tuple[int, Union[str, bytes], bytes]]:
        """Execute a command and return its standard output once it has exited.

        :param command:
            The command argument list to execute. The first item names the program.

        :param istream:
            Bytes written to the standard input of the process. If ``None``, the
            process inherits our standard input.

        :param cwd:
            Working directory of the process. If ``None``, it runs in the current
            directory of this process. Our own working directory is never changed.

        :param stdout_as_string:
            Whether to decode the output using :func:`~diffstatcheck.compat.safe_decode`.
            Output is returned as raw bytes otherwise, exactly as the program wrote
            it, including trailing newlines.

        :param with_exceptions:
            Whether to raise an exception when the program returns a non-zero status.

        :param with_extended_output:
            Whether to return a (status, stdout, stderr) tuple.

        :return:
            * stdout if `with_extended_output` is ``False`` (default)
            * tuple(int(status), stdout, bytes(stderr)) otherwise

        :raise diffstatcheck.exc.CommandNotFound:
            If the program cannot be started.

        :raise diffstatcheck.exc.CommandError:
            If the program exits with a non-zero status and `with_exceptions` is set.
        """
        if not command:
            raise ValueError("Empty command")
        argv = [self.executable(command[0])] + [str(arg) for arg in command[1:]]

        if self.DIFFSTATCHECK_TRACE:
            _logger.info(" ".join(argv))

        _logger.debug(
            "Popen(%s, cwd=%s, stdin=%s, shell=False)",
            argv,
            cwd,
            "<%d bytes>" % len(istream) if istream is not None else None,
        )
        try:
            proc = Popen(
                argv,
                cwd=cwd,
                stdin=PIPE if istream is not None else None,
                stdout=PIPE,
                stderr=PIPE,
                shell=False,
            )
        except FileNotFoundError as err:
            if cwd is not None and not osp.isdir(cwd):
                raise CommandError(argv, "No such working directory: %s" % os.fspath(cwd)) from err
            raise CommandNotFound(argv, err) from err
        except PermissionError as err:
            raise CommandNotFound(argv, err) from err

        # Leaving the block closes all pipes and reaps the process, on errors too.
        with proc:
            stdout_value, stderr_value = proc.communicate(istream)
            status = proc.returncode

        if self.DIFFSTATCHECK_TRACE == "full":
            _logger.info(
                "%s -> %d; stdout: %d bytes; stderr: '%s'",
                " ".join(argv),
                status,
                len(stdout_value),
                safe_decode(stderr_value).rstrip(),
            )

        if with_exceptions and status != 0:
            raise CommandError(argv, status, stderr_value, stdout_value)

        stdout_result: Union[str, bytes] = stdout_value
        if stdout_as_string:
            stdout_result = safe_decode(stdout_value)

        if with_extended_output:
            return (status, stdout_result, stderr_value)
        return stdout_result
