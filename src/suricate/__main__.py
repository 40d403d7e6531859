"""Entry point for 'python -m suricate'."""

from suricate.cli import main

if __name__ == "__main__":
    main()
