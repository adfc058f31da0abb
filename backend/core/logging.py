"""Process-wide logging setup. Modules log through logging.getLogger(__name__)."""
import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger. Safe to call twice."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(h, "_pixel_checker", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._pixel_checker = True
    root.addHandler(handler)
