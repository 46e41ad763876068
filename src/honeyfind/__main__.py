"""Allow running as ``python -m honeyfind``."""

from honeyfind.cli import main


if __name__ == "__main__":
    main()
