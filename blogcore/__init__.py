from blogcore.main import app

__all__ = ["app"]
