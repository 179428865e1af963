from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from ..config import Settings
from ..episode import FrameField
from ..frames import Frame, describe_value
from ..stream import read_tag


def field_name(frame: Frame) -> Optional[str]:
    field = FrameField.from_id(frame.id)
    return field.name.lower() if field else None


def run(path: Path, settings: Settings, *, json_output: bool = False) -> bool:
    store = read_tag(path, settings=settings)
    if store is None:
        print(f"{path}: no ID3v2 tag")
        return False
    if json_output:
        payload = {
            "path": str(path),
            "version": store.version,
            "frames": [
                {"id": frame.id, "field": field_name(frame), "value": describe_value(frame)}
                for frame in store
            ],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return True
    print(f"{path}: ID3v2.{store.version}, {len(store)} frame(s)")
    for frame in store:
        name = field_name(frame)
        label = f"{frame.id} ({name})" if name else frame.id
        print(f"  {label}: {describe_value(frame)}")
    return True
