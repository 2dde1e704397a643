"""Entry point: delegates to the CLI app."""

from rich.traceback import install

from rh_notifier.cli import app
from rh_notifier.utils.tracing import shutdown_tracing


def run() -> None:
    try:
        install(show_locals=False, max_frames=5, word_wrap=True)
        app()
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    run()
