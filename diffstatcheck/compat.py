# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

"""Helpers converting between the bytes produced by subprocesses and text."""

import sys

from gitdb.utils.encoding import force_bytes  # noqa: F401  # @UnusedImport

# typing --------------------------------------------------------------------

from typing import AnyStr, Optional, Union, overload

# ---------------------------------------------------------------------------

defenc = sys.getfilesystemencoding()
"""Encoding used for command lines, file names and the output of commands."""


@overload
def safe_decode(s: None) -> None:
    ...


@overload
def safe_decode(s: AnyStr) -> str:
    ...


def safe_decode(s: Union[AnyStr, None]) -> Optional[str]:
    """Safely decode a binary string to Unicode."""
    if isinstance(s, str):
        return s
    elif isinstance(s, bytes):
        return s.decode(defenc, "surrogateescape")
    elif s is None:
        return None
    else:
        raise TypeError("Expected bytes or text, but got %r" % (s,))

