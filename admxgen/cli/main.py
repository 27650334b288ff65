import logging
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape

from .. import __version__
from ..compiler.artifacts import generate_build_log, generate_linqpad_script, generate_sdk_style_project
from ..compiler.orchestrator import emit_compiled_assembly
from ..policy.source import PolicyDirectory, open_policy_model
from ..utils.cancellation import CancellationToken
from ..utils.logging import setup_logging
from .utils import console, err_console, handle_async_command

logger = logging.getLogger(__name__)


@click.command(name="admxgen")
@click.argument("assembly_name")
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
@click.argument("output_path", type=click.Path(file_okay=False, path_type=Path))
@click.option("--generate-csproj", "csproj_name", metavar="NAME", help="Generate an SDK style .csproj test project.")
@click.option("--generate-linqpad", "linqpad_file", metavar="FILE", help="Generate a LINQPad script file.")
@click.option("--generate-buildlog/--no-generate-buildlog", default=True, show_default=True,
              help="Write the build diagnostics to <ASSEMBLY_NAME>.log.")
@click.option('--verbose', '-v', is_flag=True, help='Enables verbose mode.')
@click.option('--quiet', '-q', is_flag=True, help='Enables quiet mode.')
@click.version_option(__version__, prog_name="admxgen")
@handle_async_command
async def app(
    assembly_name: str,
    input_path: Path,
    output_path: Path,
    csproj_name: Optional[str],
    linqpad_file: Optional[str],
    generate_buildlog: bool,
    verbose: bool,
    quiet: bool,
    token: CancellationToken,
) -> int:
    """
    Policy definitions to C# code generator.

    Compiles the policies under INPUT_PATH (a definition file or a directory
    of them) into OUTPUT_PATH/ASSEMBLY_NAME.dll.
    """
    if verbose:
        setup_logging(level=logging.DEBUG)
    elif quiet:
        setup_logging(level=logging.ERROR)
    else:
        setup_logging()
    console.quiet = quiet

    model = open_policy_model(input_path)
    if isinstance(model, PolicyDirectory):
        console.print(f"Loading policy definitions from '{escape(str(input_path))}' directory...")
    else:
        console.print(f"Loading '{escape(str(input_path))}' policy definition file...")
    await model.load(token)

    console.print(f"Compiling '{escape(assembly_name)}'...")
    emit_result = await emit_compiled_assembly(model, assembly_name, output_path, token=token)

    if not emit_result.build_succeeded:
        err_console.print("[red]Build failed with one or more errors:[/red]")
        for diagnostic in emit_result.diagnostics:
            err_console.print(f"* {diagnostic}", markup=False, highlight=False)
        return 1

    console.print("[green]Build succeeded.[/green]")
    for diagnostic in emit_result.diagnostics:
        console.print(f"* {diagnostic}", markup=False, highlight=False)

    if generate_buildlog:
        console.print("Generating build log file...")
        await generate_build_log(emit_result)

    if csproj_name:
        console.print("Generating SDK style .csproj file...")
        await generate_sdk_style_project(emit_result, csproj_name)

    if linqpad_file:
        console.print("Generating LINQPad script file...")
        await generate_linqpad_script(emit_result, linqpad_file)

    console.print(f"Output: {escape(str(emit_result.build_output_path))}")
    return 0


if __name__ == '__main__':
    app()
