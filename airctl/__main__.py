"""
Entry point for `airctl` and `python -m airctl`.
"""

import sys

from loguru import logger

from airctl.cli.main import app, console


def main():
    try:
        app()
    except KeyboardInterrupt:
        # Ctrl-C while a probe or wait is running
        console.print("\nInterrupted.", style="yellow")
        sys.exit(130)
    except Exception as e:
        logger.opt(exception=e).debug("Unhandled error")
        console.print(f"\nUnexpected error: {e}", style="red", markup=False)
        sys.exit(1)


if __name__ == "__main__":
    main()
