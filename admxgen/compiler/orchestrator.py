"""
Compilation orchestrator.

Drives one compilation request end to end: resolve references, render the
policy model to a temporary source file, normalize it into the final
``<name>.cs``, hand it to the compiler backend and build the EmitResult.
"""
import logging
from functools import partial
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import anyio

from ..references.resolver import ReferenceResolver, ReferencesUnavailableError
from ..render.engine import SourceRenderer, get_renderer
from ..utils.cancellation import CancellationToken, ensure_token
from .backend import CompilerBackend, CscBackend, Diagnostic
from .models import EmitResult
from .normalize import normalize_whitespace

logger = logging.getLogger(__name__)

SOURCE_ENCODING = "utf-8"


def format_diagnostic(diagnostic: Diagnostic, source_lines: Sequence[str]) -> str:
    """
    Format a diagnostic as ``[ln.N] message - line text``.

    Diagnostics without a location are reported against line 1. A line
    outside the source yields empty line text.
    """
    index = (diagnostic.line - 1) if diagnostic.line else 0
    line_text = source_lines[index] if 0 <= index < len(source_lines) else ""
    return f"[ln.{index + 1}] {diagnostic.message} - {line_text}"


def _render_to_file(
    renderer: SourceRenderer,
    model: Any,
    assembly_name: str,
    path: Path,
    token: CancellationToken,
) -> None:
    with open(path, "w", encoding=SOURCE_ENCODING, newline="\n") as f:
        renderer.render(model, assembly_name, f, token)


def _normalize_file(temp_path: Path, source_path: Path) -> str:
    with open(temp_path, encoding=SOURCE_ENCODING, newline="") as f:
        source_text = normalize_whitespace(f.read())
    with open(source_path, "w", encoding=SOURCE_ENCODING, newline="\n") as f:
        f.write(source_text)
    temp_path.unlink(missing_ok=True)
    return source_text


async def emit_compiled_assembly(
    model: Any,
    assembly_name: str,
    output_directory: Union[str, Path],
    *,
    token: Optional[CancellationToken] = None,
    resolver: Optional[ReferenceResolver] = None,
    backend: Optional[CompilerBackend] = None,
    renderer: Optional[SourceRenderer] = None,
) -> EmitResult:
    """
    Compile a loaded policy model into ``<output_directory>/<assembly_name>.dll``.

    Args:
        model: A loaded policy model.
        assembly_name: Assembly name; also names every produced file.
        output_directory: Target directory, created when missing.
        token: Cancellation token checked before each step.
        resolver: Reference resolver; a default ReferenceResolver otherwise.
        backend: Compiler backend; CscBackend otherwise.
        renderer: Source renderer; the shared renderer otherwise.

    Returns:
        The EmitResult. Artifact paths are only set when the build succeeded.

    Raises:
        ValueError: If the assembly name is blank or the model is not loaded.
        ReferenceResolutionError: If the reference assemblies cannot be obtained.
        OperationCancelledError: If the token is cancelled.
    """
    token = ensure_token(token)
    if assembly_name is None or not assembly_name.strip():
        raise ValueError("Assembly name cannot be empty or white space.")
    if model is None or not model.loaded:
        raise ValueError("Please load the policy model before compiling.")

    resolver = resolver or ReferenceResolver()
    backend = backend or CscBackend()
    renderer = renderer or get_renderer()

    output_dir = Path(output_directory)
    token.raise_if_cancelled()
    await anyio.to_thread.run_sync(partial(output_dir.mkdir, parents=True, exist_ok=True))

    references = await resolver.resolve(token)
    if not references:
        raise ReferencesUnavailableError("Cannot obtain runtime reference assemblies.")

    temp_source_path = output_dir / f"{assembly_name}_temp.cs"
    source_path = output_dir / f"{assembly_name}.cs"

    token.raise_if_cancelled()
    await anyio.to_thread.run_sync(_render_to_file, renderer, model, assembly_name, temp_source_path, token)

    token.raise_if_cancelled()
    source_text = await anyio.to_thread.run_sync(_normalize_file, temp_source_path, source_path)

    pe_path = output_dir / f"{assembly_name}.dll"
    pdb_path = output_dir / f"{assembly_name}.pdb"
    xml_path = output_dir / f"{assembly_name}.xml"

    token.raise_if_cancelled()
    logger.info("Compiling '%s'...", assembly_name)
    backend_result = await backend.emit(
        source_text,
        assembly_name,
        references,
        pe_path=pe_path,
        pdb_path=pdb_path,
        xml_path=xml_path,
        token=token,
    )

    source_lines = source_text.split("\n")
    messages: List[str] = [
        format_diagnostic(d, source_lines) for d in backend_result.diagnostics if d.surfaced
    ]

    if not backend_result.success:
        logger.warning("Build of '%s' failed with %d diagnostics", assembly_name, len(messages))
        return EmitResult(
            assembly_name=assembly_name,
            output_directory_path=output_dir,
            build_succeeded=False,
            diagnostics=tuple(messages),
        )

    logger.info("Built %s", pe_path)
    return EmitResult(
        assembly_name=assembly_name,
        output_directory_path=output_dir,
        build_succeeded=True,
        diagnostics=tuple(messages),
        source_file_path=source_path,
        build_output_path=pe_path,
        debug_symbol_file_path=pdb_path,
        xml_document_file_path=xml_path,
    )
