"""Tests for building, writing and loading catalogs."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from razlib.catalog.assembler import BookRecord, Numbering
from razlib.catalog.builder import (
    BuildOptions,
    build_catalog,
    build_level,
    load_catalog,
    write_catalog,
)
from razlib.exceptions import CatalogError
from razlib.sources import BucketLibrary, LocalLibrary
from tests.conftest import FakeS3Client


@pytest.fixture
def local(library_roots: tuple[Path, Path]) -> LocalLibrary:
    return LocalLibrary(*library_roots)


@pytest.fixture
def bucket() -> tuple[BucketLibrary, FakeS3Client]:
    client = FakeS3Client(
        {
            "pdf/A/1.Farm Animals.pdf": b"",
            "pdf/A/Sun.pdf": b"",
            "audio/A/1 farm animals.mp3": b"",
            "pdf/H/1.My House.pdf": b"",
            "audio/H/1-my house.mp3": b"",
        },
        page_size=2,
    )
    return BucketLibrary(client, "raz-files"), client


class TestBuildLevel:
    """Tests for build_level()."""

    def test_local_level(self, local: LocalLibrary) -> None:
        report = build_level(local, "A")

        assert [(b.id, b.title, b.audio_path) for b in report.books] == [
            ("01", "Farm Animals", "01 Farm Animals.mp3"),
            ("1", "Big Cat", "Big_Cat.MP3"),
            ("02", "Zoo Trip", ""),
        ]
        assert report.books[0].pdf_path == "01- Farm Animals_Password_Removed.pdf"
        assert report.unmatched_pdfs == ["02-Zoo Trip.pdf"]
        assert report.ok

    def test_every_record_carries_level(self, local: LocalLibrary) -> None:
        report = build_level(local, "H")
        assert [book.level for book in report.books] == ["H"]
        assert report.books[0].audio_path == "1-my house.mp3"

    def test_empty_level(self, local: LocalLibrary) -> None:
        report = build_level(local, "Q")
        assert report.books == []
        assert report.ok

    def test_options_passed_through(self, tmp_path: Path) -> None:
        local = LocalLibrary(tmp_path, tmp_path)
        pdf_root = tmp_path / "C级别PDF"
        pdf_root.mkdir()
        for name in ("1.One.pdf", "Loose.pdf"):
            (pdf_root / name).write_bytes(b"")

        sequential = build_level(local, "C")
        gaps = build_level(local, "C", options=BuildOptions(numbering=Numbering.gaps))

        assert [b.id for b in sequential.books] == ["1", "1"]
        assert [b.id for b in gaps.books] == ["1", "2"]
        assert sequential.books[1].title == "Loose"

    def test_bucket_level(self, bucket: tuple[BucketLibrary, FakeS3Client]) -> None:
        library, client = bucket
        report = build_level(library, "A")

        assert [(b.id, b.title, b.audio_path) for b in report.books] == [
            ("1", "Farm Animals", "1 farm animals.mp3"),
            ("1", "Sun", ""),
        ]
        assert [d.id for d in report.duplicate_ids] == ["1"]
        # Audio is listed before PDFs
        assert client.calls == [("list_objects_v2", "audio/A/"), ("list_objects_v2", "pdf/A/")]


class TestBuildCatalog:
    """Tests for build_catalog()."""

    def test_defaults_to_every_level(self, local: LocalLibrary) -> None:
        build = build_catalog(local)

        assert [report.level for report in build.reports][:3] == ["AA", "A", "B"]
        assert len(build.reports) == 29
        assert build.book_count == 4
        assert build.failed == []

    def test_failed_level_is_isolated(self, bucket: tuple[BucketLibrary, FakeS3Client]) -> None:
        library, client = bucket
        client.fail_prefixes.append("pdf/H/")

        build = build_catalog(library, ["A", "H"])

        assert [report.level for report in build.failed] == ["H"]
        failed = build.get("H")
        assert failed is not None
        assert failed.error and "pdf/H/" in failed.error
        assert len(build.get("A").books) == 2  # type: ignore[union-attr]
        assert build.to_dict()["H"] == []

    def test_get_unknown_level(self, local: LocalLibrary) -> None:
        assert build_catalog(local, ["A"]).get("H") is None


class TestCatalogJson:
    """Tests for serialization, write_catalog() and load_catalog()."""

    def test_json_shape(self, local: LocalLibrary) -> None:
        build = build_catalog(local, ["H"])
        expected = (
            "{\n"
            '  "H": [\n'
            "    {\n"
            '      "id": "1",\n'
            '      "number": "1",\n'
            '      "title": "My House",\n'
            '      "level": "H",\n'
            '      "pdfPath": "1.My House.pdf",\n'
            '      "audioPath": "1-my house.mp3"\n'
            "    }\n"
            "  ]\n"
            "}"
        )
        assert build.to_json() == expected

    def test_json_is_deterministic(self, local: LocalLibrary) -> None:
        first = build_catalog(local, ["A", "H"]).to_json()
        local.refresh()
        assert build_catalog(local, ["A", "H"]).to_json() == first

    def test_non_ascii_written_verbatim(self, tmp_path: Path) -> None:
        (tmp_path / "D级别PDF").mkdir()
        (tmp_path / "D级别PDF" / "3.小猫.pdf").write_bytes(b"")
        build = build_catalog(LocalLibrary(tmp_path, tmp_path), ["D"])

        assert '"title": "小猫"' in build.to_json()

    def test_write_and_load(self, local: LocalLibrary, tmp_path: Path) -> None:
        build = build_catalog(local, ["A", "H"])
        path = write_catalog(build, tmp_path / "out" / "books.json")

        text = path.read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert json.loads(text)["H"][0]["audioPath"] == "1-my house.mp3"

        loaded = load_catalog(path)
        assert list(loaded) == ["A", "H"]
        assert loaded["A"] == build.get("A").books  # type: ignore[union-attr]

    def test_write_failure(self, local: LocalLibrary, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(CatalogError, match="Cannot write catalog"):
            write_catalog(build_catalog(local, ["H"]), blocker / "books.json")

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "books.json")

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("{not json", "Cannot read catalog"),
            ("[]", "JSON object"),
            ('{"A": [{"title": "no id"}]}', "Malformed"),
            ('{"A": 5}', "Malformed"),
        ],
    )
    def test_load_malformed(self, tmp_path: Path, content: str, message: str) -> None:
        path = tmp_path / "books.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(CatalogError, match=message):
            load_catalog(path)

    def test_load_tolerates_null_audio(self, tmp_path: Path) -> None:
        path = tmp_path / "books.json"
        path.write_text(
            '{"B": [{"id": "7", "number": "7", "title": "T", "level": "B",'
            ' "pdfPath": "7.T.pdf", "audioPath": null}]}',
            encoding="utf-8",
        )
        assert load_catalog(path)["B"] == [
            BookRecord(id="7", number="7", title="T", level="B", pdf_path="7.T.pdf")
        ]
