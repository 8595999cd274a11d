import logging

from commonlib.log import configure_logging


def test_configure_logging_is_idempotent():
    root = logging.getLogger()
    original_level = root.level
    try:
        configure_logging("DEBUG")
        configure_logging("WARNING")
        handlers = [h for h in root.handlers if getattr(h, "_catalog_console", False)]
        assert len(handlers) == 1
        assert root.level == logging.WARNING
    finally:
        for handler in [h for h in root.handlers if getattr(h, "_catalog_console", False)]:
            root.removeHandler(handler)
        root.setLevel(original_level)
