"""Allow running limeade as a module: python -m limeade."""

from limeade.cli import main

if __name__ == "__main__":
    main()
