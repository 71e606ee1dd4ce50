from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
import logging
import posixpath
import re

from services.mapper.store import MappingStore, StoreRecord, composite_key

logger = logging.getLogger(__name__)

# LETTERS[DIGITS] then up to three LETTERS DIGITS pairs, anchored both ends
SEQUENCE_RE = re.compile(
    r"^([A-Z]+)([0-9]+)?(?:([A-Z]+)([0-9]+))?(?:([A-Z]+)([0-9]+))?(?:([A-Z]+)([0-9]+))?\Z"
)
DIGITS_RE = re.compile(r"[0-9]+")

DIR_PREFIX = "domestic\\"


@dataclass(frozen=True)
class ParsedSequence:
    primary: str
    secondary: str = ""
    tertiary: str = ""
    quaternary: str = ""
    numbers: Tuple[str, ...] = ()


def parse_sequence(seq: str) -> Optional[ParsedSequence]:
    """Split a sequence into up to four letter runs and their digit runs.

    Returns None when `seq` does not match the grammar.
    """
    m = SEQUENCE_RE.match(seq)
    if not m:
        return None
    primary, n1, secondary, n2, tertiary, n3, quaternary, n4 = m.groups()
    return ParsedSequence(
        primary=primary,
        secondary=secondary or "",
        tertiary=tertiary or "",
        quaternary=quaternary or "",
        numbers=tuple(n for n in (n1, n2, n3, n4) if n),
    )


def dash_key(seq: str) -> str:
    # "AB12CD34" -> "AB-CD-" -> "AB-CD"
    key = DIGITS_RE.sub("-", seq).strip()
    if key.endswith("-"):
        key = key[:-1]
    return key


def first_number(seq: str) -> Optional[str]:
    m = DIGITS_RE.search(seq)
    return m.group(0) if m else None


def normalize_dir(directory: str) -> str:
    return directory.replace(DIR_PREFIX, "", 1)


def join_path(directory: str, value: str) -> str:
    # "/" between non-empty parts; a leading "/" on value does not reset the path, a trailing one is kept
    joined = "/".join(part for part in (directory, value) if part)
    if not joined:
        return "."
    out = posixpath.normpath(joined)
    if joined.endswith("/") and not out.endswith("/"):
        out += "/"
    return out



def split_sequence_payload(text: str) -> List[str]:
    return text.split(":")


def _resolve_number(record: StoreRecord, number: str, key: str) -> Optional[str]:
    value = record.mappings.find(number)
    if value is None:
        logger.warning("No mapping for number: %s in %s (%s)", number, record.dir, key)
        return None
    logger.debug("Mapping found: %s -> %s", number, value)
    return join_path(normalize_dir(record.dir), value)


def resolve_sequence(store: MappingStore, seq: str) -> List[str]:
    """Resolve one sequence token into zero or more audio paths.

    Stage 1 probes the dash key. On a hit the first digit run is looked up in
    the dash entry and dash mode is on. Stage 2 parses the grammar and stage 3
    finds the "{primary}_{secondary}" base entry. Stage 4 maps each number in
    turn; in dash mode the first number is skipped (already consumed) and
    positions 1 and 2 resolve against the "{primary}_{tertiary}" and
    "{primary}_{quaternary}" entries instead of the base entry.
    """
    out: List[str] = []

    # 1) Dash probe
    dkey = dash_key(seq)
    dash_entry = store.lookup(dkey)
    dash_used = dash_entry is not None
    if dash_entry is not None:
        logger.debug("Found dash entry: %s -> %s", seq, dkey)
        num = first_number(seq)
        value = dash_entry.mappings.find(num) if num is not None else None
        if value is not None:
            logger.debug("Dash mapping found: %s -> %s", num, value)
            out.append(join_path(dash_entry.dir, value))
        else:
            logger.warning("No dash mapping for key: %s", num)
    else:
        logger.debug("No dash entry for: %s -> %s", seq, dkey)

    # 2) Structural parse
    parsed = parse_sequence(seq)
    if parsed is None:
        logger.warning("Failed to parse sequence: %s", seq)
        return out
    logger.debug("Parsed sequence: %s", parsed)

    # 3) Base entry
    base_key = composite_key(parsed.primary, parsed.secondary)
    base = store.lookup(base_key)
    if base is None:
        logger.warning("No entry for key: %s", base_key)
        return out

    # 4) Per-number resolution
    numbers = parsed.numbers[1:] if dash_used else parsed.numbers
    for index, num in enumerate(numbers):
        if dash_used and index == 1:
            key = composite_key(parsed.primary, parsed.tertiary)
        elif dash_used and index == 2:
            key = composite_key(parsed.primary, parsed.quaternary)
        else:
            key = base_key
        record = base if key == base_key else store.lookup(key)
        if record is None:
            logger.warning("No entry for key: %s (position %d of %s)", key, index, seq)
            continue
        path = _resolve_number(record, num, key)
        if path is not None:
            out.append(path)
    return out


def resolve_sequences(store: MappingStore, sequences: Iterable[str]) -> List[str]:
    """Resolve each sequence independently and concatenate the paths in input order."""
    sequences = list(sequences)
    logger.info("Processing sequences: %s", sequences)
    results: List[str] = []
    for seq in sequences:
        results.extend(resolve_sequence(store, seq))
    logger.info("Final audio paths: %s", results)
    return results
