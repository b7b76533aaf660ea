from .service import EmailNotifier

__all__ = ["EmailNotifier"]
