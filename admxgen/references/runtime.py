"""
Runtime identity detection.

The generated library is compiled against the reference assemblies of the
.NET runtime installed on this machine, so the resolver first needs to know
which runtime family and version that is.
"""
import asyncio
import logging
import os
import re
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import semver

from ..config import Settings, settings as default_settings
from ..utils.cancellation import CancellationToken, ensure_token

logger = logging.getLogger(__name__)

_RUNTIME_LINE = re.compile(r"^Microsoft\.NETCore\.App\s+(?P<version>\S+)\s+\[(?P<path>[^\]]*)\]")


class ReferenceResolutionError(Exception):
    """Base class for failures while obtaining reference assemblies."""
    pass


class PlatformNotSupportedError(ReferenceResolutionError):
    """The current runtime family cannot provide reference assemblies."""
    pass


class FrameworkType(str, Enum):
    NATIVE = "native"
    FRAMEWORK = "framework"
    CORE = "core"
    MODERN = "modern"
    UNKNOWN = "unknown"


# Order matters: ".NET" is a prefix of every other description.
_FRAMEWORK_PREFIXES: List[Tuple[str, FrameworkType]] = [
    (".NET Native", FrameworkType.NATIVE),
    (".NET Framework", FrameworkType.FRAMEWORK),
    (".NET Core", FrameworkType.CORE),
    (".NET", FrameworkType.MODERN),
]

SUPPORTED_FRAMEWORKS = frozenset({FrameworkType.CORE, FrameworkType.MODERN})


def classify_framework(description: Optional[str]) -> FrameworkType:
    """Map a framework description such as ".NET 8.0.5" to its family."""
    text = (description or "").strip()
    for prefix, framework_type in _FRAMEWORK_PREFIXES:
        if text.lower().startswith(prefix.lower()):
            return framework_type
    return FrameworkType.UNKNOWN


@dataclass(frozen=True)
class RuntimeIdentity:
    framework_description: str
    version: str

    @property
    def framework_type(self) -> FrameworkType:
        return classify_framework(self.framework_description)

    @property
    def supported(self) -> bool:
        return self.framework_type in SUPPORTED_FRAMEWORKS


def parse_version(version: str) -> Optional[semver.Version]:
    """Parse a runtime or SDK version; None for names that are not versions."""
    try:
        return semver.Version.parse(version, optional_minor_and_patch=True)
    except ValueError:
        return None


def latest_version(versions: Iterable[str]) -> Optional[str]:
    """Highest semantic version among ``versions``; other names are ignored."""
    parsed = [(parse_version(v), v) for v in versions]
    candidates = [(p, v) for p, v in parsed if p is not None]
    if not candidates:
        return None
    return max(candidates, key=lambda pair: pair[0])[1]


def describe_version(version: str) -> str:
    major = version.split(".", 1)[0]
    if major.isdigit() and int(major) < 5:
        return f".NET Core {version}"
    return f".NET {version}"


def find_dotnet(config: Optional[Settings] = None) -> Optional[str]:
    """Locate the dotnet host executable, or None."""
    config = config or default_settings
    if config.DOTNET_PATH:
        return config.DOTNET_PATH

    root = os.getenv("DOTNET_ROOT")
    if root:
        candidate = os.path.join(root, "dotnet.exe" if os.name == "nt" else "dotnet")
        if os.path.isfile(candidate):
            return candidate
    return shutil.which("dotnet")


def parse_runtime_list(output: str) -> List[str]:
    """Versions of Microsoft.NETCore.App in `dotnet --list-runtimes` output."""
    versions = []
    for line in output.splitlines():
        match = _RUNTIME_LINE.match(line.strip())
        if match:
            versions.append(match.group("version"))
    return versions


async def detect_runtime(
    config: Optional[Settings] = None,
    token: Optional[CancellationToken] = None,
) -> RuntimeIdentity:
    """
    Identify the runtime whose reference assemblies should be used.

    ``ADMXGEN_RUNTIME_VERSION`` wins when set; otherwise the highest
    Microsoft.NETCore.App reported by the dotnet host is used.

    Raises:
        PlatformNotSupportedError: If no supported runtime can be found.
    """
    config = config or default_settings
    token = ensure_token(token)

    if config.RUNTIME_VERSION:
        version = config.RUNTIME_VERSION
        description = config.FRAMEWORK_DESCRIPTION or describe_version(version)
        return RuntimeIdentity(description, version)

    dotnet = find_dotnet(config)
    if not dotnet:
        raise PlatformNotSupportedError(
            "No .NET runtime was found. Install the .NET SDK or set ADMXGEN_RUNTIME_VERSION."
        )

    token.raise_if_cancelled()
    proc = await asyncio.create_subprocess_exec(
        dotnet, "--list-runtimes",
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise PlatformNotSupportedError(
            f"'{dotnet} --list-runtimes' failed with exit code {proc.returncode}: "
            f"{stderr.decode(errors='ignore').strip()}"
        )

    versions = parse_runtime_list(stdout.decode(errors="ignore"))
    if not versions:
        raise PlatformNotSupportedError("The dotnet host reports no Microsoft.NETCore.App runtime.")

    version = latest_version(versions)
    if version is None:
        raise PlatformNotSupportedError(f"No usable runtime version in {versions}.")
    description = config.FRAMEWORK_DESCRIPTION or describe_version(version)
    logger.debug("Detected runtime %s (%s)", version, description)
    return RuntimeIdentity(description, version)
