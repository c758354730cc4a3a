from .client import QOBUZ_API_URL, QobuzClient

__all__ = ["QOBUZ_API_URL", "QobuzClient"]
