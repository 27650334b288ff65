"""
Artifact post-processors.

Optional companions written next to a successfully built assembly: the
build log, an SDK-style test project with its solution, and a LINQPad
script that references the library.
"""
import logging
import uuid
from pathlib import Path
from typing import Dict, List

import anyio
from jinja2 import Environment, StrictUndefined

from .models import EmitResult

logger = logging.getLogger(__name__)

# Project type GUID of SDK-style C# projects in solution files.
CSHARP_PROJECT_TYPE_GUID = "9A19103F-16F7-4668-BE54-9A1E7A4F7556"
DEFAULT_TARGET_FRAMEWORK = "net8.0-windows"

CSPROJ_TEMPLATE = """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <OutputType>Exe</OutputType>
    <TargetFramework>{{ target_framework|e }}</TargetFramework>
    <ApplicationManifest>app.manifest</ApplicationManifest>
  </PropertyGroup>
  <ItemGroup>
    <Compile Remove="*.cs" />
    <Compile Include="Program.cs" />
  </ItemGroup>
  <ItemGroup>
    <None Remove="{{ assembly_name|e }}.dll" />
    <None Remove="{{ assembly_name|e }}.linq" />
    <None Remove="{{ assembly_name|e }}.pdb" />
    <None Remove="{{ assembly_name|e }}.xml" />
    <None Remove="{{ assembly_name|e }}.log" />
  </ItemGroup>
  <ItemGroup>
    <Reference Include="{{ assembly_name|e }}">
      <HintPath>{{ assembly_name|e }}.dll</HintPath>
    </Reference>
  </ItemGroup>
</Project>
"""

APP_MANIFEST_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<assembly manifestVersion="1.0" xmlns="urn:schemas-microsoft-com:asm.v1">
  <assemblyIdentity version="1.0.0.0" name="{{ project_name|e }}.app"/>
  <trustInfo xmlns="urn:schemas-microsoft-com:asm.v2">
    <security>
      <requestedPrivileges xmlns="urn:schemas-microsoft-com:asm.v3">
        <requestedExecutionLevel level="highestAvailable" uiAccess="false" />
      </requestedPrivileges>
    </security>
  </trustInfo>
  <compatibility xmlns="urn:schemas-microsoft-com:compatibility.v1">
    <application>
      <!-- Windows Vista, 7, 8, 8.1 and 10/11 -->
      <supportedOS Id="{e2011457-1546-43c5-a5fe-008deee3d3f0}" />
      <supportedOS Id="{35138b9a-5d96-4fbd-8e2d-a2440225f93a}" />
      <supportedOS Id="{4a2f28e3-53b9-4441-ba9c-d69d4a4a6e38}" />
      <supportedOS Id="{1f676c76-80e1-4239-95bb-83d0f6d0da78}" />
      <supportedOS Id="{8e0f7a12-bfb3-4fe8-b9a5-48fd50a15a9a}" />
    </application>
  </compatibility>
</assembly>
"""

PROGRAM_TEMPLATE = """using System;

internal static class Program
{
    [STAThread]
    private static void Main()
    {
        /* Test your code here */
    }
}
"""

SOLUTION_TEMPLATE = """
Microsoft Visual Studio Solution File, Format Version 12.00
# Visual Studio Version 17
VisualStudioVersion = 17.10.35004.147
MinimumVisualStudioVersion = 10.0.40219.1
Project("{{ '{' }}{{ project_type_guid }}}") = "{{ project_name }}", "{{ project_name }}.csproj", "{{ '{' }}{{ project_guid }}}"
EndProject
Global
	GlobalSection(SolutionConfigurationPlatforms) = preSolution
		Debug|Any CPU = Debug|Any CPU
		Release|Any CPU = Release|Any CPU
	EndGlobalSection
	GlobalSection(ProjectConfigurationPlatforms) = postSolution
		{{ '{' }}{{ project_guid }}}.Debug|Any CPU.ActiveCfg = Debug|Any CPU
		{{ '{' }}{{ project_guid }}}.Debug|Any CPU.Build.0 = Debug|Any CPU
		{{ '{' }}{{ project_guid }}}.Release|Any CPU.ActiveCfg = Release|Any CPU
		{{ '{' }}{{ project_guid }}}.Release|Any CPU.Build.0 = Release|Any CPU
	EndGlobalSection
	GlobalSection(SolutionProperties) = preSolution
		HideSolutionNode = FALSE
	EndGlobalSection
	GlobalSection(ExtensibilityGlobals) = postSolution
		SolutionGuid = {{ '{' }}{{ solution_guid }}}
	EndGlobalSection
EndGlobal
"""

LINQPAD_TEMPLATE = """<Query Kind="Statements">
  <Reference Relative="{{ assembly_name|e }}.dll">{{ assembly_name|e }}.dll</Reference>
  <IncludeUncapsulator>false</IncludeUncapsulator>
</Query>

/* Test your code here */
"""

_env = Environment(undefined=StrictUndefined, keep_trailing_newline=True, autoescape=False)


def _render(template: str, **context: str) -> str:
    return _env.from_string(template).render(**context)


def _write_files(files: Dict[Path, str]) -> None:
    for path, content in files.items():
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)


def _require_successful_build(emit_result: EmitResult) -> Path:
    """Return the output directory of a usable build, or raise."""
    if emit_result is None:
        raise ValueError("Emit result cannot be None.")
    if not emit_result.build_succeeded:
        raise RuntimeError("Cannot generate artifacts from a failed build result.")
    if not emit_result.assembly_name or not emit_result.assembly_name.strip():
        raise ValueError("Assembly name cannot be empty or white space.")

    output_dir = Path(emit_result.output_directory_path)
    if not output_dir.is_dir():
        raise FileNotFoundError(f"'{output_dir}' does not exist.")
    return output_dir


async def generate_build_log(emit_result: EmitResult) -> Path:
    """Write the formatted diagnostics to ``<assembly>.log``, one per line."""
    output_dir = _require_successful_build(emit_result)
    path = output_dir / f"{emit_result.assembly_name}.log"
    content = "".join(f"{line}\n" for line in emit_result.diagnostics)
    await anyio.to_thread.run_sync(_write_files, {path: content})
    logger.info("Wrote build log %s", path)
    return path


async def generate_sdk_style_project(
    emit_result: EmitResult,
    project_name: str,
    target_framework: str = DEFAULT_TARGET_FRAMEWORK,
) -> List[Path]:
    """
    Write an SDK-style console project that references the built assembly.

    Produces ``<project>.csproj``, ``app.manifest``, ``Program.cs`` and
    ``<assembly>.sln`` in the output directory.

    Raises:
        RuntimeError: If the build did not succeed.
        ValueError: If a name is blank or the project and assembly names match.
        FileNotFoundError: If the output directory is gone.
    """
    output_dir = _require_successful_build(emit_result)
    if not project_name or not project_name.strip():
        raise ValueError("Project name cannot be empty or white space.")

    assembly_name = emit_result.assembly_name
    if project_name.casefold() == assembly_name.casefold():
        raise ValueError("Project name and assembly name cannot be the same.")

    files = {
        output_dir / f"{project_name}.csproj": _render(
            CSPROJ_TEMPLATE, assembly_name=assembly_name, target_framework=target_framework,
        ),
        output_dir / "app.manifest": _render(APP_MANIFEST_TEMPLATE, project_name=project_name),
        output_dir / "Program.cs": PROGRAM_TEMPLATE,
        output_dir / f"{assembly_name}.sln": _render(
            SOLUTION_TEMPLATE,
            project_name=project_name,
            project_type_guid=CSHARP_PROJECT_TYPE_GUID,
            project_guid=str(uuid.uuid4()).upper(),
            solution_guid=str(uuid.uuid4()).upper(),
        ),
    }
    await anyio.to_thread.run_sync(_write_files, files)
    logger.info("Wrote project %s", project_name)
    return list(files)


async def generate_linqpad_script(emit_result: EmitResult, file_name: str) -> Path:
    """Write a LINQPad statements script referencing the built assembly."""
    output_dir = _require_successful_build(emit_result)
    if not file_name or not file_name.strip():
        raise ValueError("Script file name cannot be empty or white space.")

    path = output_dir / file_name
    await anyio.to_thread.run_sync(
        _write_files, {path: _render(LINQPAD_TEMPLATE, assembly_name=emit_result.assembly_name)}
    )
    logger.info("Wrote LINQPad script %s", path)
    return path
