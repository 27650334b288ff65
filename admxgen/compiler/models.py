"""
Compilation result models.
"""
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class EmitResult(BaseModel):
    """
    Outcome of one compilation request.

    Artifact paths are only set when the build succeeded; a failed build
    carries its diagnostics and nothing else.
    """
    model_config = ConfigDict(frozen=True)

    assembly_name: str = Field(description="Name of the produced assembly")
    output_directory_path: Path = Field(description="Directory holding every artifact")
    build_succeeded: bool = False
    diagnostics: Tuple[str, ...] = Field(default=(), description="Formatted warnings and errors")
    source_file_path: Optional[Path] = Field(default=None, description="Normalized C# source")
    build_output_path: Optional[Path] = Field(default=None, description="Compiled .dll")
    debug_symbol_file_path: Optional[Path] = Field(default=None, description="Portable .pdb")
    xml_document_file_path: Optional[Path] = Field(default=None, description="XML documentation")
