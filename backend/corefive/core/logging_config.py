import logging


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the root logger (idempotent)."""
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    if not any(getattr(h, "_corefive", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')
        )
        handler._corefive = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
