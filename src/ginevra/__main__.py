"""Allow ``python -m ginevra FILE``."""

from ginevra.cli.ginevra import main

if __name__ == "__main__":
    main()
