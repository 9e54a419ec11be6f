# ADMS/__main__.py
# Entry point for `python -m ADMS`; dispatches to the click command group.
from .cli import cli

if __name__ == "__main__":
    cli()
