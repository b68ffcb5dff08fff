"""
Shared reply builders for method handlers.
"""

from ..services.context import ServiceContext


def command_output(ctx: ServiceContext, argv: list[str]) -> dict:
    """Run a command and reply with its output lines as stdOut"""
    result = ctx.runner.run_or_raise(argv)
    return {"stdOut": result.lines}


def file_dump(ctx: ServiceContext, path: str) -> dict:
    """Reply with the content of a kernel file, one stdOut entry per line"""
    return command_output(ctx, [ctx.config.tools.cat, path])
