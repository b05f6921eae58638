#!/usr/bin/env python3
"""
Command line interface for inspecting a bootwire project.
Shows the merged configuration, clears its cache and runs the application.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Optional

import yaml

from .bootstrap import Bootstrap
from .exceptions import BootwireError, UnknownApplicationError
from .navigator import Navigator
from .providers import ConfigServiceProvider, list_providers

logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

_MISSING = object()


class BootwireCLI:
    """CLI commands operating on a bootstrapped project."""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.bootstrap: Optional[Bootstrap] = None

    def setup(self) -> Bootstrap:
        navigator = Navigator(self.args.root)
        self.bootstrap = Bootstrap(navigator, environment=self.args.env)
        if self.args.verbose:
            environment = self.bootstrap.container.get('environment')
            print(f"✓ Bootstrapped {navigator.root_dir()} ({environment})")
        return self.bootstrap

    def close(self) -> None:
        if self.bootstrap is not None:
            self.bootstrap.close()

    def show_config(self, output_format: str = 'yaml', key: Optional[str] = None) -> int:
        """Print the merged configuration, or a single value of it."""
        config = self.setup().container.get('config')

        data: Any = config.to_dict()
        if key:
            data = config.get_value(key, _MISSING)
            if data is _MISSING:
                print(f"Error: Configuration key '{key}' not found")
                return 1

        if output_format == 'json':
            print(json.dumps(data, indent=2, default=str))
        else:
            print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end='')
        return 0

    def clear_cache(self) -> int:
        """Delete the configuration cache artifact."""
        container = self.setup().container
        factory = ConfigServiceProvider(container).make_factory(container)

        if factory.clear_cache():
            if not self.args.quiet:
                print(f"Removed {factory.cache.path_prefix}/{factory.cache_file}")
        elif not self.args.quiet:
            print("No configuration cache to remove")
        return 0

    def list_providers(self) -> int:
        print("Available providers:")
        for name in list_providers():
            print(f"  - {name}")
        return 0

    def run_application(self) -> int:
        try:
            output = self.setup().run()
        except UnknownApplicationError as e:
            print(f"Error: {e}")
            return 1

        print(output)
        return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='bootwire',
        description="Inspect and run a bootwire project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s config show                      # Print the merged configuration
  %(prog)s config show --key database.host  # Print a single value
  %(prog)s --env production config show     # Use the production environment
  %(prog)s config clear-cache               # Delete the configuration cache
  %(prog)s providers                        # List registered providers
  %(prog)s run                              # Run the application handler
        """
    )

    # Global options
    parser.add_argument('--root', default=os.getcwd(),
                        help='Project root directory (default: current directory)')
    parser.add_argument('--env', help='Environment name (overrides BOOTWIRE_ENVIRONMENT)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    parser.add_argument('-q', '--quiet', action='store_true', help='Quiet mode')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    config_parser = subparsers.add_parser('config', help='Configuration commands')
    config_subparsers = config_parser.add_subparsers(dest='config_command')

    show_parser = config_subparsers.add_parser('show', help='Print the merged configuration')
    show_parser.add_argument('--format', choices=['yaml', 'json'], default='yaml',
                             help='Output format (default: yaml)')
    show_parser.add_argument('--key', help='Dot-separated key to print')

    config_subparsers.add_parser('clear-cache', help='Delete the configuration cache')

    subparsers.add_parser('providers', help='List registered service providers')
    subparsers.add_parser('run', help='Run the application handler')

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose and args.quiet:
        print("Error: Cannot use both --verbose and --quiet")
        return 1

    # Set logging level based on verbosity
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger('bootwire').setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    cli = BootwireCLI(args)

    try:
        if args.command == 'providers':
            return cli.list_providers()

        elif args.command == 'run':
            return cli.run_application()

        elif args.command == 'config':
            if args.config_command == 'show':
                return cli.show_config(args.format, args.key)
            elif args.config_command == 'clear-cache':
                return cli.clear_cache()

        parser.print_help()
        return 1

    except BootwireError as e:
        logger.error(f"Bootstrap failed: {e}")
        print(f"Error: {e}")
        return 1
    finally:
        cli.close()


if __name__ == '__main__':
    sys.exit(main())
