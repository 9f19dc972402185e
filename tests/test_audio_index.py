"""Tests for the per-level audio index."""

from __future__ import annotations

from razlib.catalog.audio_index import AudioIndex, build_audio_index
from razlib.catalog.parsing import ParsedFilename
from razlib.catalog.report import REASON_HIDDEN, REASON_UNPARSEABLE, BuildReport


class TestBuildAudioIndex:
    """Tests for build_audio_index()."""

    def test_indexes_by_match_key(self) -> None:
        index = build_audio_index(["01 Farm Animals.mp3", "Zoo_Trip.mp3"])
        assert index.by_key == {
            "01_farmanimals": "01 Farm Animals.mp3",
            "_zootrip": "Zoo_Trip.mp3",
        }
        assert len(index) == 2
        assert "01_farmanimals" in index

    def test_last_file_wins_on_shared_key(self) -> None:
        """Listing order decides; the later file overwrites the earlier one."""
        report = BuildReport(level="A")
        index = build_audio_index(["01 Farm Animals.mp3", "01-farm_animals.mp3"], report=report)

        assert index.by_key["01_farmanimals"] == "01-farm_animals.mp3"
        assert len(report.overwritten_audio) == 1
        overwrite = report.overwritten_audio[0]
        assert overwrite.replaced == "01 Farm Animals.mp3"
        assert overwrite.kept == "01-farm_animals.mp3"

    def test_near_miss_recorded_for_different_titles(self) -> None:
        """Different original titles collapsing to one key are flagged."""
        report = BuildReport(level="A")
        build_audio_index(["Farm Animals.mp3", "FarmAnimals!.mp3"], report=report)

        assert len(report.near_misses) == 1
        assert report.near_misses[0].titles == ("Farm Animals", "FarmAnimals!")

    def test_same_title_is_not_a_near_miss(self) -> None:
        """Identical cleaned titles are an overwrite but not a near miss."""
        report = BuildReport(level="A")
        build_audio_index(["Farm_Animals.mp3", "Farm-Animals.mp3"], report=report)

        assert len(report.overwritten_audio) == 1
        assert report.near_misses == []

    def test_skips_hidden_and_unparseable(self) -> None:
        report = BuildReport(level="A")
        index = build_audio_index(
            ["._01 Farm.mp3", "cover.jpg", "02 Moon.mp3"],
            report=report,
        )

        assert list(index.by_key.values()) == ["02 Moon.mp3"]
        assert [(s.filename, s.reason) for s in report.skipped] == [
            ("._01 Farm.mp3", REASON_HIDDEN),
            ("cover.jpg", REASON_UNPARSEABLE),
        ]
        assert all(s.kind == "audio" for s in report.skipped)

    def test_report_is_optional(self) -> None:
        index = build_audio_index(["a.mp3", "A.mp3", "notes.txt"])
        assert index.by_key == {"_a": "A.mp3"}

    def test_empty_listing(self) -> None:
        assert len(build_audio_index([])) == 0


class TestAudioIndexLookup:
    """Tests for AudioIndex.lookup()."""

    def test_exact_key(self) -> None:
        index = build_audio_index(["01 Farm Animals.mp3"])
        parsed = ParsedFilename(sequence_number="01", title="farm animals")
        assert index.lookup(parsed) == "01 Farm Animals.mp3"

    def test_sequence_number_must_match(self) -> None:
        """'02 Farm' does not pair with numberless 'Farm'."""
        index = build_audio_index(["Farm Animals.mp3"])
        parsed = ParsedFilename(sequence_number="02", title="Farm Animals")
        assert index.lookup(parsed) == ""

    def test_title_fallback(self) -> None:
        index = build_audio_index(["Farm Animals.mp3"])
        parsed = ParsedFilename(sequence_number="02", title="Farm Animals")
        assert index.lookup(parsed, title_fallback=True) == "Farm Animals.mp3"

    def test_miss_returns_empty_string(self) -> None:
        assert AudioIndex().lookup(ParsedFilename("1", "Nothing")) == ""

    def test_lookup_does_not_consume(self) -> None:
        """Several PDFs may pair with the same audio file."""
        index = build_audio_index(["Farm Animals.mp3"])
        parsed = ParsedFilename(sequence_number="", title="Farm-Animals")
        assert index.lookup(parsed) == "Farm Animals.mp3"
        assert index.lookup(parsed) == "Farm Animals.mp3"
