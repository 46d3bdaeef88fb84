# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

"""Interface to the tool under test, the pepper statistics report generator.

pepper runs report scripts written in Lua. The checker drives it with small
generated scripts and reads what they print.
"""

__all__ = ["Tool", "lua_string", "PROBE_SCRIPT", "diffstat_script"]

import logging
import os
import tempfile

from diffstatcheck.cmd import Command
from diffstatcheck.compat import force_bytes

# typing ---------------------------------------------------------------------

from typing import Optional

# ----------------------------------------------------------------------------

_logger = logging.getLogger(__name__)

PROBE_SCRIPT = """\
-- Prints the backend type and the canonical URL of the repository
function run(self)
	local repo = self:repository()
	print(repo:type())
	print(repo:url())
end
"""

_DIFFSTAT_SCRIPT = """\
-- Prints the diffstat of a single revision as a diffstat(1) table
function run(self)
	local stat = self:repository():revision(%s):diffstat()
	print("INSERTED,DELETED,MODIFIED,FILENAME")
	for _, file in ipairs(stat:files()) do
		print(stat:lines_added(file) .. "," .. stat:lines_removed(file) .. ",0," .. file)
	end
end
"""

_LUA_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\0": "\\0",
}


def lua_string(value: str) -> str:
    """:return: `value` as a double-quoted Lua string literal"""
    return '"%s"' % "".join(_LUA_ESCAPES.get(c, c) for c in value)


def diffstat_script(revision: str) -> str:
    """:return: Script printing the diffstat of `revision`, one
        ``added,removed,0,filename`` row per changed file below a header row.

    :note:
        The third column is always ``0``, pepper has no notion of modified lines.
    """
    return _DIFFSTAT_SCRIPT % lua_string(revision)


class Tool:
    """The report tool under test, run once per script.

    :param executable:
        Program to run. Defaults to ``DIFFSTATCHECK_TOOL`` from the environment, or
        ``pepper`` looked up on the ``PATH``.

    :param command:
        The :class:`~diffstatcheck.cmd.Command` used to start the tool.
    """

    __slots__ = ("executable", "command")

    default_executable = "pepper"

    def __init__(self, executable: Optional[str] = None, command: Optional[Command] = None) -> None:
        self.executable = executable or os.environ.get("DIFFSTATCHECK_TOOL") or self.default_executable
        self.command = command or Command()

    def __repr__(self) -> str:
        return "<%s %r>" % (type(self).__name__, self.executable)

    def run_script(self, script: str, repository: str, cache: bool = True) -> bytes:
        """Run a report script against a repository.

        The script is written to a temporary file which is removed again once the
        tool exited, whether it succeeded or not.

        :param script:
            Lua source of the report.

        :param repository:
            Path or URL of the repository, passed to the tool verbatim.

        :param cache:
            If ``False``, the tool is told not to use its revision cache.

        :return:
            Everything the tool wrote to its standard output.

        :raise diffstatcheck.exc.CommandError:
            If the tool exits with a non-zero status.
        """
        fd, path = tempfile.mkstemp(prefix="diffstatcheck-", suffix=".lua")
        try:
            with os.fdopen(fd, "wb") as fp:
                fp.write(force_bytes(script))
            argv = [self.executable]
            if not cache:
                argv.append("--no-cache")
            argv.extend((path, repository))
            return self.command.execute(argv)
        finally:
            os.remove(path)

    def probe(self, repository: str) -> bytes:
        """:return: Raw output of the probe script, the backend type and URL of
            `repository` on two lines"""
        return self.run_script(PROBE_SCRIPT, repository)

    def diffstat(self, repository: str, revision: str) -> bytes:
        """:return: Raw diffstat table of `revision` as computed by the tool, with
            caching disabled"""
        _logger.debug("Computing candidate diffstat of %s in %s", revision, repository)
        return self.run_script(diffstat_script(revision), repository, cache=False)
