from .logger import configure_logging, get_logger
from .text import content_tokens, normalize_text
