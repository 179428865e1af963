from __future__ import annotations

from pathlib import Path

from ..config import Settings
from ..episode import EpisodeMetadata
from ..stream import read_tag, retag_file


def run(src: Path, dst: Path, episode: EpisodeMetadata, settings: Settings) -> int:
    if src.resolve() == dst.resolve():
        raise SystemExit("Source and destination must differ")
    written = retag_file(src, dst, episode, settings=settings)
    store = read_tag(dst, settings=settings)
    frames = len(store) if store is not None else 0
    print(f"Wrote {dst} ({written} bytes, {frames} frame(s))")
    return written
