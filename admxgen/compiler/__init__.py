"""Compilation of rendered policy source into a class library."""
from .artifacts import generate_build_log, generate_linqpad_script, generate_sdk_style_project
from .backend import (
    BackendResult, CompilerBackend, CompilerBackendError, CompilerNotFoundError, CscBackend,
    Diagnostic, DiagnosticSeverity,
)
from .models import EmitResult
from .normalize import normalize_whitespace
from .orchestrator import emit_compiled_assembly, format_diagnostic

__all__ = [
    "BackendResult",
    "CompilerBackend",
    "CompilerBackendError",
    "CompilerNotFoundError",
    "CscBackend",
    "Diagnostic",
    "DiagnosticSeverity",
    "EmitResult",
    "emit_compiled_assembly",
    "format_diagnostic",
    "generate_build_log",
    "generate_linqpad_script",
    "generate_sdk_style_project",
    "normalize_whitespace",
]
