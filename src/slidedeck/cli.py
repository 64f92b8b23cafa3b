"""Command-line interface for the slideshow renderer."""

import argparse
import logging
import sys
from typing import List, Optional

from .builder import SlideshowBuilder
from .config import Config, parse_log_level, setup_logging
from .errors import SlidedeckError
from .watcher import watch


def _log_level(value: str) -> str:
    try:
        parse_log_level(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog='slidedeck',
        description='A Markdown-based slideshow rendering tool.'
    )

    parser.add_argument(
        '--config',
        help='Path to a YAML configuration file'
    )

    parser.add_argument(
        '--log-level', '--trace-level',
        dest='log_level',
        type=_log_level,
        help='Log level: 1-5 or error, warn, info, debug, trace '
             '(case-insensitive, default: warn)'
    )

    parser.add_argument(
        '-w', '--watch',
        action='store_true',
        default=None,
        help='Watch for changes to files and keep re-rendering'
    )

    parser.add_argument(
        '--debounce-ms',
        type=int,
        help='Debounce filesystem events to a given granularity, in milliseconds (default: 250)'
    )

    parser.add_argument(
        '--static-dir',
        help='Directory of static files, copied unmodified into the output directory (default: static)'
    )

    parser.add_argument(
        '--template',
        help='Slideshow template (default: template.html)'
    )

    parser.add_argument(
        'input',
        nargs='?',
        help='Input Markdown file'
    )

    parser.add_argument(
        'output_dir',
        nargs='?',
        help='Output directory (default: out)'
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Layer command-line arguments over the configuration file."""
    return Config(args.config, overrides={
        'paths.input': args.input,
        'paths.output_dir': args.output_dir,
        'paths.static_dir': args.static_dir,
        'paths.template': args.template,
        'settings.logging.level': args.log_level,
        'settings.watch.enabled': args.watch,
        'settings.watch.debounce_ms': args.debounce_ms,
    })


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, 1 for error, 130 when interrupted)
    """
    args = parse_arguments(argv)

    try:
        config = build_config(args)
        config.validate_settings()
        setup_logging(config.log_level)
        config.validate_paths()
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        print(f"Error loading configuration: {e}")
        return 1

    logging.info(f"Input:      {config.input_path}")
    logging.info(f"Template:   {config.template_path}")
    logging.info(f"Static dir: {config.static_dir}")
    logging.info(f"Output:     {config.output_file}")

    builder = SlideshowBuilder(config)
    try:
        if config.watch_enabled:
            watch(builder, config.debounce_ms)
        else:
            builder.build()
    except SlidedeckError as e:
        print(e)
        return 1
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == '__main__':
    sys.exit(main())
