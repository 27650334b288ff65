"""
Reference resolver and cache.

Compiling the generated source needs the reference assemblies of the
current runtime. They ship in the ``Microsoft.NETCore.App.Ref`` NuGet
package, which is downloaded once per runtime version and kept in the
per-user application data directory.
"""
import logging
import os
import tempfile
import zipfile
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path, PurePosixPath
from typing import List, Optional

import anyio
import httpx

from ..config import Settings, settings as default_settings
from ..utils.cancellation import CancellationToken, ensure_token
from ..utils.retry import async_retry
from .runtime import (
    PlatformNotSupportedError, ReferenceResolutionError, RuntimeIdentity, detect_runtime,
)

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "ref/"
REFERENCE_SUFFIX = ".dll"


class ReferencesUnavailableError(ReferenceResolutionError):
    """The cached package yielded no reference assemblies."""
    pass


@dataclass(frozen=True)
class ReferenceHandle:
    """One reference assembly image held in memory."""
    name: str
    image: bytes = field(repr=False)


def cache_file_name(version: str) -> str:
    return f"AppRef_{version}_Package.zip"


def _write_atomic(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def read_reference_package(path: Path) -> List[ReferenceHandle]:
    """Load every ``ref/**.dll`` entry of a reference package into memory."""
    handles = []
    with zipfile.ZipFile(path) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            if not info.filename.startswith(REFERENCE_PREFIX):
                continue
            if not info.filename.lower().endswith(REFERENCE_SUFFIX):
                continue
            handles.append(ReferenceHandle(PurePosixPath(info.filename).name, archive.read(info)))
    return handles


@async_retry(catch_exceptions=httpx.TransportError)
async def download_package(client: httpx.AsyncClient, url: str, destination: Path) -> int:
    """
    Fetch ``url`` and store the body at ``destination``.

    The body is written to a temporary sibling and renamed into place, so a
    concurrent reader never sees a partial file.

    Returns:
        The number of bytes written.

    Raises:
        httpx.HTTPStatusError: On a 4xx/5xx response.
        httpx.TransportError: When the request fails after all retries.
    """
    logger.info("Downloading reference package from %s", url)
    response = await client.get(url)
    response.raise_for_status()
    data = response.content
    await anyio.to_thread.run_sync(_write_atomic, destination, data)
    logger.info("Stored %d bytes at %s", len(data), destination)
    return len(data)


class ReferenceResolver:
    """
    Resolves the reference assemblies for the installed runtime.

    Args:
        config: Settings to use; the module-level settings by default.
        runtime: A known runtime identity; detected on first use otherwise.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        *,
        runtime: Optional[RuntimeIdentity] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or default_settings
        self.runtime = runtime
        self._transport = transport

    def cache_path(self, version: str) -> Path:
        return Path(self.config.CACHE_DIR) / cache_file_name(version)

    def package_url(self, version: str) -> str:
        return self.config.REF_PACKAGE_URL.format(version=version)

    async def resolve(self, token: Optional[CancellationToken] = None) -> List[ReferenceHandle]:
        """
        Return the runtime's reference assemblies, downloading them if needed.

        Raises:
            PlatformNotSupportedError: If the runtime family is not .NET Core or .NET.
            ReferencesUnavailableError: If the package holds no reference assemblies.
            httpx.HTTPError: If the package download fails.
            zipfile.BadZipFile: If the cached package is corrupt.
            OperationCancelledError: If the token is cancelled.
        """
        token = ensure_token(token)

        if self.runtime is None:
            self.runtime = await detect_runtime(self.config, token)
        runtime = self.runtime
        if not runtime.supported:
            raise PlatformNotSupportedError(
                f"Platform not supported: {runtime.framework_description} "
                f"({runtime.framework_type.value}). Only .NET Core and .NET provide reference packages."
            )

        path = self.cache_path(runtime.version)
        token.raise_if_cancelled()
        await anyio.to_thread.run_sync(partial(path.parent.mkdir, parents=True, exist_ok=True))

        if not path.is_file() or path.stat().st_size == 0:
            token.raise_if_cancelled()
            async with httpx.AsyncClient(
                timeout=self.config.HTTP_TIMEOUT_S,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                await download_package(
                    client, self.package_url(runtime.version), path,
                    retries=self.config.DOWNLOAD_RETRIES,
                )
        else:
            logger.debug("Using cached reference package %s", path)

        token.raise_if_cancelled()
        handles = await anyio.to_thread.run_sync(read_reference_package, path)
        if not handles:
            raise ReferencesUnavailableError(
                f"Cannot obtain runtime reference assemblies: '{path}' contains no "
                f"{REFERENCE_PREFIX}*{REFERENCE_SUFFIX} entries."
            )

        logger.info("Resolved %d reference assemblies for %s", len(handles), runtime.version)
        return handles
