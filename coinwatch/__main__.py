"""Package entrypoint so `python -m coinwatch ...` runs the CLI."""

from .cli import main

if __name__ == "__main__":
    # Hand off to the command-line interface.
    raise SystemExit(main())
