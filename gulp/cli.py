"""
CLI — Headless command shell entry point

Startup runs the three initializer phases in headless mode, then
hands the terminal to the shell:

    gulp                          # interactive shell
    gulp -c "encode base64 hi"    # one command
    gulp --script commands.txt    # one command per line
    gulp --settings settings.json # apply listeners/rules after startup

Exit status: 0 ok, 1 initialization failure, 130 initialization aborted.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import get_config
from .errors import InitializationAborted
from .exclusion import ExclusionRuleManager
from .initializer import AppInitializer
from .logs import shutdown_logging
from .output import ConsoleOutput, get_style
from .shell import CommandContext, Services, Shell

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_ABORTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gulp",
        description="gulp -- headless proxy command shell",
    )

    parser.add_argument(
        '--settings', '-s',
        metavar='PATH',
        help='JSON settings applied after startup (listen ports, exclusion rules)'
    )

    parser.add_argument(
        '--color',
        choices=['auto', 'always', 'never'],
        help='Colored output (default: GULP_COLOR, config, or auto)'
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        '--command', '-c',
        metavar='LINE',
        help='Run one shell command and exit'
    )
    source.add_argument(
        '--script',
        metavar='FILE',
        help='Run shell commands from a file, one per line'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'gulp {__version__}'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the gulp shell.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    config = get_config()
    if args.color:
        config.display.color = args.color

    exclusions = ExclusionRuleManager()
    initializer = AppInitializer(
        headless=True,
        settings_path=args.settings,
        config=config,
        exclusions=exclusions,
    )

    # Exits the process itself on failure
    initializer.init_core()

    try:
        initializer.init_gulp()
        initializer.init_components()
    except InitializationAborted:
        logger.error("Initialization aborted")
        sys.stderr.write("Initialization aborted\n")
        _shutdown(initializer)
        return EXIT_ABORTED
    except Exception as e:
        logger.exception("Initialization failed")
        sys.stderr.write(f"[ERROR] Initialization failed: {e}\n")
        _shutdown(initializer)
        return EXIT_FAILURE

    components = initializer.components
    services = Services(
        exclusions=exclusions,
        encoders=components.encoders,
        vulcheckers=components.vulcheckers,
        logs=initializer.recent_logs,
    )
    output = ConsoleOutput(style=get_style(config.display.color))
    shell = Shell(CommandContext(output=output, services=services))

    try:
        if args.command:
            return shell.run_batch([args.command])
        if args.script:
            try:
                lines = Path(args.script).read_text(encoding="utf-8").splitlines()
            except OSError as e:
                sys.stderr.write(f"[ERROR] Cannot read script: {e}\n")
                return EXIT_FAILURE
            return shell.run_batch(lines)
        return shell.run()
    finally:
        _shutdown(initializer)


def _shutdown(initializer: AppInitializer) -> None:
    initializer.components.store.close()
    shutdown_logging()


if __name__ == '__main__':
    sys.exit(main())
