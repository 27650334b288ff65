"""
Compiler backend boundary and the Roslyn ``csc`` implementation.

The orchestrator hands a backend the complete source text, the resolved
reference images and the three output paths; the backend reports success
and every diagnostic it produced.
"""
import asyncio
import logging
import re
import shutil
import tempfile
from enum import Enum
from functools import partial
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import anyio
from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings, settings as default_settings
from ..references.resolver import ReferenceHandle
from ..references.runtime import find_dotnet, latest_version
from ..utils.cancellation import CancellationToken, OperationCancelledError, ensure_token

logger = logging.getLogger(__name__)


# ===== Exceptions =====

class CompilerBackendError(Exception):
    """The compiler could not be run to completion."""
    pass


class CompilerNotFoundError(CompilerBackendError):
    pass


# ===== Boundary types =====

class DiagnosticSeverity(str, Enum):
    HIDDEN = "hidden"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """One compiler message. ``line`` and ``column`` are 1-based."""
    model_config = ConfigDict(frozen=True)

    severity: DiagnosticSeverity
    id: str = ""
    message: str
    line: Optional[int] = Field(default=None, ge=1)
    column: Optional[int] = Field(default=None, ge=1)

    @property
    def surfaced(self) -> bool:
        return self.severity in (DiagnosticSeverity.WARNING, DiagnosticSeverity.ERROR)


class BackendResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    diagnostics: Tuple[Diagnostic, ...] = ()


@runtime_checkable
class CompilerBackend(Protocol):
    async def emit(
        self,
        source_text: str,
        assembly_name: str,
        references: Sequence[ReferenceHandle],
        *,
        pe_path: Path,
        pdb_path: Path,
        xml_path: Path,
        token: Optional[CancellationToken] = None,
    ) -> BackendResult: ...


# ===== csc output parsing =====

_DIAGNOSTIC_LINE = re.compile(
    r"^(?:(?P<file>.*?)(?:\((?P<line>\d+),(?P<column>\d+)(?:,\d+,\d+)?\))?\s*:\s*)?"
    r"(?P<severity>error|warning|info|hidden)\s+(?P<id>[A-Za-z]+\d+)\s*:\s*(?P<message>.*)$"
)


def parse_compiler_output(output: str) -> List[Diagnostic]:
    """Extract diagnostics from csc console output; other lines are ignored."""
    diagnostics = []
    seen = set()
    for line in output.splitlines():
        match = _DIAGNOSTIC_LINE.match(line.strip())
        if not match:
            continue
        diagnostic = Diagnostic(
            severity=DiagnosticSeverity(match.group("severity")),
            id=match.group("id"),
            message=match.group("message").strip(),
            line=int(match.group("line")) if match.group("line") else None,
            column=int(match.group("column")) if match.group("column") else None,
        )
        # csc repeats some diagnostics in its summary output
        if diagnostic in seen:
            continue
        seen.add(diagnostic)
        diagnostics.append(diagnostic)
    return diagnostics


def find_compiler(config: Optional[Settings] = None) -> List[str]:
    """
    Command prefix that runs the C# compiler.

    Raises:
        CompilerNotFoundError: If no compiler can be located.
    """
    config = config or default_settings

    if config.CSC_PATH:
        if config.CSC_PATH.lower().endswith(".dll"):
            dotnet = find_dotnet(config)
            if not dotnet:
                raise CompilerNotFoundError(f"'{config.CSC_PATH}' needs the dotnet host, which was not found.")
            return [dotnet, config.CSC_PATH]
        return [config.CSC_PATH]

    dotnet = find_dotnet(config)
    if dotnet:
        sdk_dir = Path(dotnet).resolve().parent / "sdk"
        if sdk_dir.is_dir():
            candidates = [p.name for p in sdk_dir.iterdir() if (p / "Roslyn" / "bincore" / "csc.dll").is_file()]
            sdk = latest_version(candidates)
            if sdk:
                return [dotnet, str(sdk_dir / sdk / "Roslyn" / "bincore" / "csc.dll")]

    csc = shutil.which("csc")
    if csc:
        return [csc]

    raise CompilerNotFoundError(
        "The C# compiler was not found. Install the .NET SDK or set ADMXGEN_CSC_PATH."
    )


# csc ignores this option inside a response file.
NO_CONFIG_OPTION = "-noconfig"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


class CscBackend:
    """Runs the Roslyn command-line compiler as a subprocess."""

    SOURCE_FILE_NAME = "Generated.cs"

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def _stage(self, staging: Path, source_text: str, references: Sequence[ReferenceHandle]) -> Tuple[Path, List[Path]]:
        source_path = staging / self.SOURCE_FILE_NAME
        source_path.write_text(source_text, encoding="utf-8", newline="\n")

        reference_dir = staging / "references"
        reference_dir.mkdir()
        paths = []
        for index, handle in enumerate(references):
            target = reference_dir / handle.name
            if target.exists():
                target = reference_dir / str(index) / handle.name
                target.parent.mkdir()
            target.write_bytes(handle.image)
            paths.append(target)
        return source_path, paths

    def build_arguments(
        self,
        source_path: Path,
        reference_paths: Sequence[Path],
        *,
        pe_path: Path,
        pdb_path: Path,
        xml_path: Path,
    ) -> List[str]:
        args = [
            "-nologo",
            "-nostdlib+",
            "-target:library",
            "-deterministic",
            "-debug:portable",
            "-utf8output",
            f"-out:{_quote(str(pe_path))}",
            f"-pdb:{_quote(str(pdb_path))}",
            f"-doc:{_quote(str(xml_path))}",
        ]
        args.extend(f"-reference:{_quote(str(path))}" for path in reference_paths)
        args.append(_quote(str(source_path)))
        return args

    async def _communicate(self, proc: asyncio.subprocess.Process, token: CancellationToken) -> bytes:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.COMPILE_TIMEOUT_S
        communicate = asyncio.ensure_future(proc.communicate())
        try:
            while True:
                done, _ = await asyncio.wait({communicate}, timeout=0.2)
                if done:
                    stdout, _ = communicate.result()
                    return stdout or b""
                if token.cancelled:
                    raise OperationCancelledError()
                if loop.time() > deadline:
                    raise CompilerBackendError(
                        f"The compiler did not finish within {self.config.COMPILE_TIMEOUT_S:.0f}s."
                    )
        finally:
            if not communicate.done():
                logger.warning("Stopping compiler process %s", proc.pid)
                proc.kill()
                await communicate

    async def emit(
        self,
        source_text: str,
        assembly_name: str,
        references: Sequence[ReferenceHandle],
        *,
        pe_path: Path,
        pdb_path: Path,
        xml_path: Path,
        token: Optional[CancellationToken] = None,
    ) -> BackendResult:
        token = ensure_token(token)
        command = find_compiler(self.config)

        with tempfile.TemporaryDirectory(prefix="admxgen-") as tmp:
            staging = Path(tmp)
            source_path, reference_paths = await anyio.to_thread.run_sync(
                self._stage, staging, source_text, references
            )
            response_file = staging / "csc.rsp"
            args = self.build_arguments(
                source_path, reference_paths, pe_path=pe_path, pdb_path=pdb_path, xml_path=xml_path,
            )
            await anyio.to_thread.run_sync(partial(response_file.write_text, "\n".join(args), encoding="utf-8"))

            token.raise_if_cancelled()
            logger.info("Compiling %s with %d references", assembly_name, len(reference_paths))
            logger.debug("Compiler command: %s %s @%s", " ".join(command), NO_CONFIG_OPTION, response_file)
            proc = await asyncio.create_subprocess_exec(
                *command, NO_CONFIG_OPTION, f"@{response_file}",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=tmp,
            )
            output = (await self._communicate(proc, token)).decode("utf-8", errors="replace")

        diagnostics = parse_compiler_output(output)
        success = proc.returncode == 0 and not any(d.severity is DiagnosticSeverity.ERROR for d in diagnostics)
        if proc.returncode != 0 and not diagnostics:
            logger.error("Compiler exited with code %s: %s", proc.returncode, output.strip())
            diagnostics = [Diagnostic(
                severity=DiagnosticSeverity.ERROR,
                message=output.strip() or f"The compiler exited with code {proc.returncode}.",
            )]
        return BackendResult(success=success, diagnostics=tuple(diagnostics))
