# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

__all__ = ["RepositoryDescriptor", "normalize_url", "url_to_path", "probe"]

from dataclasses import dataclass
import logging
from urllib.parse import unquote, urlsplit

from diffstatcheck.backends import Backend, BackendSpec, spec
from diffstatcheck.compat import safe_decode
from diffstatcheck.exc import CommandError, ProbeFailedError
from diffstatcheck.tool import Tool

# typing -------------------------------------------------------------------

from typing import Optional

# --------------------------------------------------------------------------

_logger = logging.getLogger(__name__)


def normalize_url(backend: Backend, url: str) -> str:
    """:return: `url` in the form the native client of `backend` expects.

    Subversion needs an URL, so absolute paths get a ``file://`` scheme. Every other
    URL is returned unchanged.
    """
    if backend is Backend.SUBVERSION and url.startswith("/"):
        return "file://" + url
    return url


def url_to_path(url: str) -> str:
    """:return: The local file system path of a ``file://`` URL, or `url` itself if
        it has no such scheme"""
    if not url.startswith("file://"):
        return url
    return unquote(urlsplit(url).path)


@dataclass(frozen=True)
class RepositoryDescriptor:
    """The backend and canonical URL of the repository under check.

    For Git and Mercurial repositories the URL is the path of the local checkout.
    """

    backend: Backend
    url: str

    @classmethod
    def from_probe(cls, backend_name: str, raw_url: str) -> "RepositoryDescriptor":
        """Create a descriptor from the values reported by the tool under test,
        normalizing the URL.

        :raise diffstatcheck.exc.UnsupportedBackendError:
            If `backend_name` is unknown.
        """
        backend = Backend.from_name(backend_name)
        return cls(backend, normalize_url(backend, raw_url))

    @property
    def spec(self) -> BackendSpec:
        return spec(self.backend)

    @property
    def command_url(self) -> str:
        """The URL substituted into commands, empty if the backend takes none"""
        return self.url if self.spec.pass_url_explicitly else ""

    @property
    def working_dir(self) -> Optional[str]:
        """Directory to run native commands in, ``None`` if they are given the URL"""
        if self.spec.pass_url_explicitly:
            return None
        return url_to_path(self.url)


def probe(repository: str, tool: Tool) -> RepositoryDescriptor:
    """Ask the tool under test for the backend type and URL of a repository.

    :param repository:
        Path or URL of the repository as given by the user.

    :raise diffstatcheck.exc.ProbeFailedError:
        If the tool fails or prints less than two lines.

    :raise diffstatcheck.exc.UnsupportedBackendError:
        If the tool reports a backend type that is not supported.
    """
    try:
        output = tool.probe(repository)
    except CommandError as err:
        raise ProbeFailedError(repository, str(err), err) from err

    lines = safe_decode(output).splitlines()
    if len(lines) < 2:
        raise ProbeFailedError(
            repository,
            "expected backend type and URL on two lines, got %d line(s)" % len(lines),
        )
    if not lines[1]:
        raise ProbeFailedError(repository, "empty repository URL")

    descriptor = RepositoryDescriptor.from_probe(lines[0], lines[1])
    _logger.info("Checking %s repository at %s", descriptor.backend, descriptor.url)
    return descriptor
