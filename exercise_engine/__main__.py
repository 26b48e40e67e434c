"""Entry point for `python -m exercise_engine`."""

from exercise_engine.cli.main import app

if __name__ == "__main__":
    app()
