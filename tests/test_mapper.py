import tempfile
import unittest
from pathlib import Path

from services.mapper.store import (
    ConfigEntry, ConfigError, MappingRow, MappingStore, MappingTable,
    composite_key, load_mapping_table, load_store, parse_config_entries,
)

CONFIG_XML = """<?xml version="1.0" encoding="utf-8"?>
<AudioClipConfig>
  <Entry primary="WA" dir="domestic\\sounds\\wa" mapping="numbers.xml"/>
  <Entry primary="WA" secondary="BC" dir="sounds/wabc" mapping="numbers.xml"/>
  <Entry primary="AB-CD" dir="sounds/flight" mapping="flights.xml"/>
</AudioClipConfig>
"""

NUMBERS_XML = """<AudioMappingTable>
  <Entry key="1" value="one.mp3"/>
  <Entry key="2" value="two.mp3"/>
  <Entry key="1" value="shadowed.mp3"/>
</AudioMappingTable>
"""

FLIGHTS_XML = """<AudioMappingTable>
  <Entry key="12" value="flight12.mp3"/>
</AudioMappingTable>
"""


class TestMappingStore(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / 'mappings').mkdir()
        self.config = self.root / 'AudioClipConfig.xml'
        self.config.write_text(CONFIG_XML)
        (self.root / 'mappings' / 'numbers.xml').write_text(NUMBERS_XML)
        (self.root / 'mappings' / 'flights.xml').write_text(FLIGHTS_XML)

    def tearDown(self):
        self._tmp.cleanup()

    def _write_config(self, body: str) -> Path:
        self.config.write_text(f"<AudioClipConfig>{body}</AudioClipConfig>")
        return self.config

    def test_load_composite_keys(self):
        store = load_store(self.config, self.root / 'mappings')
        self.assertEqual(sorted(store.keys()), ['AB-CD', 'AB-CD_', 'WA_', 'WA_BC'])
        rec = store.lookup('WA_')
        self.assertEqual(rec.dir, 'domestic\\sounds\\wa')
        self.assertEqual(rec.mappings.find('2'), 'two.mp3')

    def test_dash_entry_shares_record(self):
        store = load_store(self.config, self.root / 'mappings')
        self.assertIs(store.lookup('AB-CD'), store.lookup('AB-CD_'))
        self.assertEqual(store.lookup('AB-CD').mappings.find('12'), 'flight12.mp3')

    def test_non_dash_primary_not_registered_alone(self):
        store = load_store(self.config, self.root / 'mappings')
        self.assertNotIn('WA', store)
        self.assertIsNone(store.lookup('WA'))

    def test_first_row_wins(self):
        table = load_mapping_table(self.root / 'mappings' / 'numbers.xml')
        self.assertEqual(len(table), 3)
        self.assertEqual(table.find('1'), 'one.mp3')
        self.assertIsNone(table.find('01'))

    def test_shared_mapping_loaded_once(self):
        store = load_store(self.config, self.root / 'mappings')
        self.assertIs(store.lookup('WA_').mappings, store.lookup('WA_BC').mappings)

    def test_single_entry_document(self):
        self._write_config('<Entry primary="XY" secondary="Z" dir="d" mapping="flights.xml"/>')
        store = load_store(self.config, self.root / 'mappings')
        self.assertEqual(store.keys(), ['XY_Z'])

    def test_empty_secondary_same_as_absent(self):
        entries = parse_config_entries(self._write_config(
            '<Entry primary="XY" secondary="" dir="d" mapping="m.xml"/>'
        ))
        self.assertEqual(entries, [ConfigEntry(primary='XY', secondary='', dir='d', mapping='m.xml')])
        self.assertEqual(composite_key('XY', None), 'XY_')

    def test_last_write_wins(self):
        self._write_config(
            '<Entry primary="WA" dir="first" mapping="numbers.xml"/>'
            '<Entry primary="WA" dir="second" mapping="flights.xml"/>'
        )
        store = load_store(self.config, self.root / 'mappings')
        self.assertEqual(len(store), 1)
        self.assertEqual(store.lookup('WA_').dir, 'second')

    def test_missing_config(self):
        with self.assertRaises(ConfigError):
            load_store(self.root / 'nope.xml', self.root / 'mappings')

    def test_missing_mapping_resource(self):
        self._write_config('<Entry primary="WA" dir="d" mapping="absent.xml"/>')
        with self.assertRaises(ConfigError) as ctx:
            load_store(self.config, self.root / 'mappings')
        self.assertIn('absent.xml', str(ctx.exception))

    def test_malformed_xml(self):
        (self.root / 'mappings' / 'numbers.xml').write_text('<AudioMappingTable><Entry key="1"')
        with self.assertRaises(ConfigError):
            load_store(self.config, self.root / 'mappings')

    def test_wrong_root(self):
        self.config.write_text('<Something><Entry primary="WA" dir="d" mapping="numbers.xml"/></Something>')
        with self.assertRaises(ConfigError):
            load_store(self.config, self.root / 'mappings')

    def test_missing_attribute(self):
        self._write_config('<Entry primary="WA" mapping="numbers.xml"/>')
        with self.assertRaises(ConfigError):
            parse_config_entries(self.config)

    def test_from_entries_without_table(self):
        with self.assertRaises(ConfigError):
            MappingStore.from_entries([ConfigEntry(primary='WA', dir='d', mapping='m.xml')], {})

    def test_store_is_read_only(self):
        table = MappingTable((MappingRow('1', 'one.mp3'),))
        store = MappingStore.from_entries([ConfigEntry(primary='A-B', dir='d', mapping='m')], {'m': table})
        with self.assertRaises(TypeError):
            store._records['X_'] = None
        self.assertEqual(sorted(store.keys()), ['A-B', 'A-B_'])


if __name__ == '__main__':
    unittest.main()
