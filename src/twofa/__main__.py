"""Entry point for ``python -m twofa``."""

from twofa.cli import main

if __name__ == "__main__":
    main()
