from api.routers import health, signal


__all__ = ["health", "signal"]
