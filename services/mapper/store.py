from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from services.mapper.xml_source import CONFIG_ROOT, MAPPING_ROOT, XMLSourceError, read_entries

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Configuration or mapping resource missing, unreadable or malformed."""


@dataclass(frozen=True)
class ConfigEntry:
    primary: str
    dir: str
    mapping: str
    secondary: str = ""

    @property
    def is_dash(self) -> bool:
        return "-" in self.primary


@dataclass(frozen=True)
class MappingRow:
    key: str
    value: str


@dataclass(frozen=True)
class MappingTable:
    rows: Tuple[MappingRow, ...] = ()

    def find(self, key: str) -> Optional[str]:
        # first declared row wins
        for row in self.rows:
            if row.key == key:
                return row.value
        return None

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class StoreRecord:
    dir: str
    mappings: MappingTable


def composite_key(primary: str, secondary: str | None = "") -> str:
    return f"{primary}_{secondary or ''}"


class MappingStore:
    """Read-only index of composite key -> StoreRecord."""

    def __init__(self, records: Mapping[str, StoreRecord] | None = None):
        self._records = MappingProxyType(dict(records or {}))

    @staticmethod
    def from_entries(entries: Iterable[ConfigEntry], tables: Mapping[str, MappingTable]) -> "MappingStore":
        """Index entries in declaration order; later entries overwrite earlier ones.

        Every entry is stored under "{primary}_{secondary}"; entries whose
        primary contains a hyphen are also stored under the bare primary.
        """
        records: Dict[str, StoreRecord] = {}
        for entry in entries:
            table = tables.get(entry.mapping)
            if table is None:
                raise ConfigError(f"no mapping table loaded for {entry.mapping!r}")
            record = StoreRecord(dir=entry.dir, mappings=table)
            records[composite_key(entry.primary, entry.secondary)] = record
            if entry.is_dash:
                records[entry.primary] = record
                logger.debug("Registered dash entry: %s", entry.primary)
        return MappingStore(records)

    def lookup(self, key: str) -> Optional[StoreRecord]:
        return self._records.get(key)

    def keys(self) -> List[str]:
        return list(self._records.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)


def _require(attrs: Mapping[str, str], name: str, source: Path) -> str:
    value = attrs.get(name)
    if value is None:
        raise ConfigError(f"{source}: Entry is missing required attribute '{name}'")
    return value


def parse_config_entries(config_path: str | Path) -> List[ConfigEntry]:
    path = Path(config_path)
    try:
        raw = read_entries(path, CONFIG_ROOT)
    except XMLSourceError as exc:
        raise ConfigError(str(exc)) from exc
    return [
        ConfigEntry(
            primary=_require(attrs, "primary", path),
            secondary=attrs.get("secondary") or "",
            dir=_require(attrs, "dir", path),
            mapping=_require(attrs, "mapping", path),
        )
        for attrs in raw
    ]


def load_mapping_table(mapping_path: str | Path) -> MappingTable:
    path = Path(mapping_path)
    try:
        raw = read_entries(path, MAPPING_ROOT)
    except XMLSourceError as exc:
        raise ConfigError(str(exc)) from exc
    return MappingTable(rows=tuple(
        MappingRow(key=_require(attrs, "key", path), value=_require(attrs, "value", path))
        for attrs in raw
    ))


def load_store(config_path: str | Path, mapping_base_dir: str | Path) -> MappingStore:
    """Load the configuration and every referenced mapping table into a MappingStore.

    Raises ConfigError if any resource cannot be read or parsed; no partial
    store is returned.
    """
    entries = parse_config_entries(config_path)
    logger.info("Preloading %d entries from %s", len(entries), config_path)

    tables: Dict[str, MappingTable] = {}
    for entry in entries:
        logger.debug(
            "Entry: primary=%s, secondary=%s, mapping=%s",
            entry.primary, entry.secondary, entry.mapping,
        )
        if entry.mapping not in tables:
            tables[entry.mapping] = load_mapping_table(Path(mapping_base_dir) / entry.mapping)

    store = MappingStore.from_entries(entries, tables)
    logger.info("Finished preloading XML files: %d keys", len(store))
    return store
