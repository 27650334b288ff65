import asyncio
import functools
import signal
import sys
import threading

from rich.console import Console
from rich.markup import escape

from ..utils.cancellation import CancellationToken, OperationCancelledError

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

# Conventional exit status for a run stopped by SIGINT.
EXIT_CANCELLED = 130


def _install_interrupt_handler(token: CancellationToken):
    """Route Ctrl+C to the token. Returns the previous handler, or None."""
    if threading.current_thread() is not threading.main_thread():
        return None

    def on_interrupt(signum, frame):
        err_console.print("[yellow]Cancelling...[/yellow]")
        token.cancel()

    return signal.signal(signal.SIGINT, on_interrupt)


def handle_async_command(async_func):
    """Decorator to handle async CLI commands.

    The wrapped coroutine receives a ``token`` keyword argument that is
    cancelled on SIGINT. A non-zero integer result becomes the exit code.
    """
    @functools.wraps(async_func)
    def wrapper(*args, **kwargs):
        token = CancellationToken()
        previous = _install_interrupt_handler(token)
        try:
            exit_code = asyncio.run(async_func(*args, token=token, **kwargs))
        except (OperationCancelledError, KeyboardInterrupt):
            err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(EXIT_CANCELLED)
        except Exception as e:
            err_console.print(f"[red]Error: {escape(str(e))}[/red]")
            sys.exit(1)
        finally:
            if previous is not None:
                signal.signal(signal.SIGINT, previous)
        if exit_code:
            sys.exit(exit_code)
        return exit_code
    return wrapper
