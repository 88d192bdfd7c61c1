"""In-process topic event bus with per-topic workers, retrying handlers and examples."""

__version__ = "0.1.0"
__all__ = ["eventbus", "logger", "examples"]