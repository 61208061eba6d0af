"""Run the spectrum driver with ``python -m pyhawk``."""

from .driver import main as driver_main


def main() -> None:
    """Entry point for ``python -m pyhawk``."""
    driver_main()


if __name__ == "__main__":
    main()
