"""govanity - static go-import redirect pages for vanity import paths."""

__version__ = "0.1.0"
