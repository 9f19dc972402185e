"""Filename parsing, audio pairing and per-level catalog assembly."""

from razlib.catalog.assembler import BookRecord, Numbering, assemble_catalog
from razlib.catalog.audio_index import AudioIndex, build_audio_index
from razlib.catalog.parsing import ParsedFilename, match_key, normalize_title, parse_filename
from razlib.catalog.report import BuildReport

__all__ = [
    "AudioIndex",
    "BookRecord",
    "BuildReport",
    "Numbering",
    "ParsedFilename",
    "assemble_catalog",
    "build_audio_index",
    "match_key",
    "normalize_title",
    "parse_filename",
]
