import logging

from reqtrace.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQL echo va por el logger de SQLAlchemy, no lo duplicamos aquí
    logging.getLogger("reqtrace").setLevel(level)
