"""Pluggable download executors: the only network I/O boundary.

Defines the ``DownloadExecutor`` Protocol that the acquisition engine calls,
along with the transport variants shipped by default:

1. **CommandDownloadExecutor**: renders a command template (curl, wget)
   and runs it as a subprocess.
2. **HttpDownloadExecutor**: in-process ``urllib`` transfer.
3. **MirrorDownloadExecutor**: rewrites source URLs onto a mirror and
   delegates to another executor.

Executors own timeouts; the engine never enforces one.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Mapping
from http.client import HTTPException
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.error import URLError
from urllib.request import urlopen

from kubebin.errors import DownloadExecutionError

logger = logging.getLogger(__name__)

CURL_TEMPLATE = "curl -L -o {destination} {source}"
WGET_TEMPLATE = "wget -O {destination} {source}"


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class DownloadExecutor(Protocol):
    """Protocol for download backends.

    Any object with ``describe`` and ``execute`` methods satisfies this
    protocol; tests inject in-memory fakes.
    """

    def describe(self, destination: Path, source: str) -> str:
        """Return a human-readable rendering of the download action."""
        ...

    def execute(self, destination: Path, source: str) -> None:
        """Transfer *source* to *destination*.

        Raises
        ------
        DownloadExecutionError
            If the transfer fails.  ``output`` carries diagnostics.
        """
        ...


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------


class CommandDownloadExecutor:
    """Runs a download command rendered from a template.

    The template is split into argv before substitution, so paths and URLs
    are never interpreted by a shell.

    Parameters
    ----------
    template:
        Command with ``{destination}`` and ``{source}`` placeholders.
    timeout:
        Seconds before the subprocess is killed.  ``None`` waits forever.
    """

    def __init__(self, template: str = CURL_TEMPLATE, *, timeout: float | None = None) -> None:
        self.template = template
        self.timeout = timeout

    def argv(self, destination: Path, source: str) -> list[str]:
        return [
            token.format(destination=str(destination), source=source)
            for token in shlex.split(self.template)
        ]

    def describe(self, destination: Path, source: str) -> str:
        return shlex.join(self.argv(destination, source))

    def execute(self, destination: Path, source: str) -> None:
        argv = self.argv(destination, source)
        logger.debug("Running download command: %s", shlex.join(argv))
        try:
            completed = subprocess.run(
                argv,
                check=False,
                text=True,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise DownloadExecutionError(
                f"Download command timed out after {self.timeout}s",
                output=_decode(exc.stdout) + _decode(exc.stderr),
            ) from exc
        except OSError as exc:
            raise DownloadExecutionError(f"Download command could not start: {exc}") from exc

        if completed.returncode != 0:
            raise DownloadExecutionError(
                f"Download command exited with status {completed.returncode}",
                output=(completed.stdout + completed.stderr).strip(),
            )


class HttpDownloadExecutor:
    """Fetches over HTTP(S) with ``urllib``.

    Content is streamed to ``<destination>.part`` and renamed into place, so
    an interrupted transfer never leaves a truncated file at *destination*.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        self.timeout = timeout

    def describe(self, destination: Path, source: str) -> str:
        return f"GET {source} -> {destination}"

    def execute(self, destination: Path, source: str) -> None:
        destination = Path(destination)
        partial = destination.with_name(destination.name + ".part")
        try:
            with urlopen(source, timeout=self.timeout) as response:  # noqa: S310 - checksum gate is applied by the engine
                with partial.open("wb") as handle:
                    shutil.copyfileobj(response, handle)
            os.replace(partial, destination)
        except (URLError, HTTPException, OSError, ValueError) as exc:
            # ValueError: malformed source URL; HTTPException: e.g. IncompleteRead
            partial.unlink(missing_ok=True)
            raise DownloadExecutionError(f"HTTP download of {source} failed: {exc}") from exc


class MirrorDownloadExecutor:
    """Rewrites source URL prefixes onto mirrors before delegating.

    Parameters
    ----------
    inner:
        Executor that performs the actual transfer.
    mirrors:
        Mapping of upstream URL prefix to mirror prefix.  The first matching
        prefix wins; unmatched sources pass through unchanged.
    """

    def __init__(self, inner: DownloadExecutor, mirrors: Mapping[str, str]) -> None:
        self.inner = inner
        self.mirrors = dict(mirrors)

    def rewrite(self, source: str) -> str:
        for upstream, mirror in self.mirrors.items():
            if source.startswith(upstream):
                return mirror + source[len(upstream):]
        return source

    def describe(self, destination: Path, source: str) -> str:
        return self.inner.describe(destination, self.rewrite(source))

    def execute(self, destination: Path, source: str) -> None:
        self.inner.execute(destination, self.rewrite(source))


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
