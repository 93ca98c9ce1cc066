"""Allow running composectl with `python -m composectl`."""
from composectl.composectl import cli

if __name__ == "__main__":
    cli()
