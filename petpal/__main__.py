"""
Entry point for running PetPal via python -m petpal
"""

from .main import app


def main():
    app(prog_name="petpal")


if __name__ == "__main__":
    main()
