"""Main entry point for the lendinglib package."""

from lendinglib.cli import app


def main():
    """Run the lendinglib command-line interface."""
    app()


if __name__ == "__main__":
    main()
