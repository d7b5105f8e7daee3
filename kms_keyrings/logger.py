import logging, json, sys, time, os

DEFAULT_LEVEL = "INFO"


def known_level(level) -> bool:
    if isinstance(level, int):
        return True
    return isinstance(logging.getLevelName(str(level).upper()), int)


def normalize_level(level):
    """Level name or number; unknown names fall back to INFO instead of failing."""
    if level is None or level == "":
        return DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    return name if known_level(name) else DEFAULT_LEVEL


def get_logger(name="kms_keyrings", level=None, to_file=None):
    """Structured JSON-line logger shared by all key ring components."""
    logger = logging.getLogger(name)
    if level is None:
        level = os.getenv("KMS_KEYRINGS_LOG_LEVEL")
    logger.setLevel(normalize_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # UTC timestamps
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def set_level(level, prefix="KMS"):
    """Apply a level to every logger under ``prefix`` created so far."""
    level = normalize_level(level)
    for name in list(logging.Logger.manager.loggerDict):
        if name == prefix or name.startswith(prefix + "."):
            logging.getLogger(name).setLevel(level)
