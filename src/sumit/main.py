"""Sumit entry point."""

import asyncio
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import create_cli
from .errors import ConfigError


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    try:
        cli = create_cli()
    except ConfigError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    try:
        exit_code = asyncio.run(cli.run())
    except KeyboardInterrupt:
        cli.shutdown(interrupted=True)
        sys.exit(0)

    cli.shutdown()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
