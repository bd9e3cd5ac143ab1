"""Runtime configuration: env-driven via pydantic-settings.

Reads from a .env file and KUBEBIN_* environment variables.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console
from rich.logging import RichHandler

from kubebin.core.checksums import ChecksumTable
from kubebin.core.executors import (
    CURL_TEMPLATE,
    WGET_TEMPLATE,
    CommandDownloadExecutor,
    DownloadExecutor,
    HttpDownloadExecutor,
)


class KubebinSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export KUBEBIN_BASE_PATH=/var/lib/kubebin
        export KUBEBIN_ZONE=cn
        export KUBEBIN_CHECKSUM_FILE=/etc/kubebin/checksums.json
        export KUBEBIN_DOWNLOAD_TOOL=wget
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="KUBEBIN_",
        env_file_encoding="utf-8",
    )

    # Default level for configure_logging
    log_level: str = "INFO"

    # Binaries root; descriptors lay out {kind}/{version}/{arch} below it
    base_path: Path = Path(".kubebin/binaries")
    # "cn" selects the mirror hosts
    zone: str = ""

    checksum_file: Path | None = None
    download_tool: Literal["curl", "wget", "http"] = "curl"
    download_timeout_seconds: int | None = None

    def build_executor(self) -> DownloadExecutor:
        """Return the download executor selected by ``download_tool``."""
        timeout = self.download_timeout_seconds
        if self.download_tool == "http":
            return HttpDownloadExecutor(timeout=timeout)
        template = WGET_TEMPLATE if self.download_tool == "wget" else CURL_TEMPLATE
        return CommandDownloadExecutor(template, timeout=timeout)

    def load_checksums(self) -> ChecksumTable:
        """Load the reference checksum table, empty when none is configured."""
        if self.checksum_file is None:
            return ChecksumTable()
        return ChecksumTable.from_json(self.checksum_file)


def configure_logging(level: str | int | None = None, console: Console | None = None) -> logging.Logger:
    """Attach a Rich handler to the ``kubebin`` logger for operator-facing runs.

    *level* defaults to ``settings.log_level``.
    """
    log = logging.getLogger("kubebin")
    log.setLevel(settings.log_level if level is None else level)
    if not any(isinstance(h, RichHandler) for h in log.handlers):
        log.addHandler(
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
                markup=False,
            )
        )
    return log


# Module-level singleton: import as `from kubebin.config import settings`
settings = KubebinSettings()
