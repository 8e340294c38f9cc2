from .config import AppConfig, get_settings, reload_settings
from .domain import AlignmentResult, CaptionEntry, Question, TimedWord
from .errors import InputUnavailableError, MalformedCueError, QStampError
from .pipeline import VideoIndex, index_artifacts, index_video
from .utils.text import normalize_text
