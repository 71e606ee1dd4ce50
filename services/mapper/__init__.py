"""Mapper: XML-configured mapping tables for audio clip resolution.

- xml_source.py: reads AudioClipConfig / AudioMappingTable documents into attribute records
- store.py: builds the read-only MappingStore indexed by composite key
"""
