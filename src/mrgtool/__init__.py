"""mrgtool - merged glossary generator for terminology scopes.

Usage:
    mrgtool generate --saf saf.yaml
    mrgtool generate --saf saf.yaml --vsntag v1
    mrgtool versions --saf saf.yaml
"""

__version__ = "0.1.0"


def main():
    from mrgtool.cli import app

    app()


if __name__ == "__main__":
    main()
