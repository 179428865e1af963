"Streaming ID3v2 tag rewriting for archived podcast episodes."

from importlib import metadata

from .assembler import TagAssembler
from .episode import EpisodeMetadata, FrameField, apply_episode_metadata
from .frames import Frame, FrameStore
from .models import TagError
from .tag_buffer import FeedResult, FeedStatus, TagBuffer

__all__ = [
    "__version__",
    "EpisodeMetadata",
    "FeedResult",
    "FeedStatus",
    "Frame",
    "FrameField",
    "FrameStore",
    "TagAssembler",
    "TagBuffer",
    "TagError",
    "apply_episode_metadata",
]


def __getattr__(name: str) -> str:
    if name == "__version__":
        try:
            return metadata.version("podcast-tags")
        except metadata.PackageNotFoundError:  # pragma: no cover - during editable dev installs
            return "0.0.0"
    raise AttributeError(name)
