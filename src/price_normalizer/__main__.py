"""Allow ``python -m price_normalizer``."""

from price_normalizer.cli import app

if __name__ == "__main__":
    app()
