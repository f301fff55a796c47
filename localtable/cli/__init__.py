# LocalTable CLI Package
# ======================
# Command-line front end: argument parsing, dispatch, result rendering.
# Entry point: localtable.cli.main:main

from localtable.cli.main import parse_args, run_command, Options, UsageError
from localtable.cli.renderer import Renderer
