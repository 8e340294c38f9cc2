from .artifacts import VideoArtifacts, load_artifacts, read_artifact
from .catalog import (
    Episode,
    discover_episodes,
    load_cached_result,
    save_result,
    split_staged_name,
)

__all__ = [
    "Episode",
    "VideoArtifacts",
    "discover_episodes",
    "load_artifacts",
    "load_cached_result",
    "read_artifact",
    "save_result",
    "split_staged_name",
]
