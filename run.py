"""Entry point for the docchunk command-line interface."""

from docchunk.cli import app


def main() -> None:
    """Run the CLI with the process arguments."""
    app()


if __name__ == "__main__":
    main()
