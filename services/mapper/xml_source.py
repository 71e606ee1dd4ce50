from __future__ import annotations
from pathlib import Path
from typing import Dict, List
import xml.etree.ElementTree as ET

CONFIG_ROOT = "AudioClipConfig"
MAPPING_ROOT = "AudioMappingTable"
ENTRY_TAG = "Entry"


class XMLSourceError(Exception):
    """A resource could not be read or is not the expected document."""


def read_entries(path: str | Path, root_tag: str) -> List[Dict[str, str]]:
    """Return the attributes of every <Entry> under `root_tag`, in document order.

    A document holding a single Entry yields a one-element list; one holding
    none yields an empty list.
    """
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as exc:
        raise XMLSourceError(f"cannot read {p}: {exc}") from exc
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise XMLSourceError(f"cannot parse {p}: {exc}") from exc
    if root.tag != root_tag:
        raise XMLSourceError(f"{p}: expected <{root_tag}> root, found <{root.tag}>")
    return [dict(el.attrib) for el in root.findall(ENTRY_TAG)]
