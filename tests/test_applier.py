"""
Tests for applying a key manifest with fake translation backends.

Run with: pytest tests/test_applier.py -v
"""

import copy
import threading

import pytest

from fmtrans.applier import apply_manifest, resolve_manifest, translate_document
from fmtrans.document import Document, parse_document
from fmtrans.errors import BackendError, PathNotFound, TranslationMismatch
from fmtrans.paths import iter_leaves


class RecordingBackend:
    """Fake backend: tags every text with the target language and logs calls."""

    def __init__(self, transform=None):
        self.calls = []
        self._lock = threading.Lock()
        self._transform = transform or (lambda text, target: f"[{target}] {text}")

    def __call__(self, texts, source_language, target_language):
        with self._lock:
            self.calls.append((list(texts), source_language, target_language))
        return [self._transform(t, target_language) for t in texts]


def identity(texts, source_language, target_language):
    return list(texts)


@pytest.fixture
def document():
    return Document(
        metadata={
            "title": "Hello world",
            "count": 3,
            "draft": False,
            "tags": ["getting started", "API"],
            "author": {"name": "Ada", "bio": "Writes about engines."},
            "slug": "hello-world",
        },
        body="# Hello\n\nSome prose.\n",
    )


MANIFEST = ["$.title", "$.tags[0]", "$.author.bio"]


class TestResolveManifest:

    def test_resolves_in_manifest_order(self, document):
        resolved = resolve_manifest(document, ["$.author.bio", "$.title"])
        assert resolved == [
            (("author", "bio"), "Writes about engines."),
            (("title",), "Hello world"),
        ]

    def test_missing_path(self, document):
        with pytest.raises(PathNotFound) as info:
            resolve_manifest(document, ["$.missing.field"])
        assert info.value.expression == "$.missing.field"

    def test_non_string_target(self, document):
        with pytest.raises(PathNotFound):
            resolve_manifest(document, ["$.count"])

    def test_malformed_expression(self, document):
        with pytest.raises(PathNotFound):
            resolve_manifest(document, ["$.title["])


class TestApplyManifest:

    def test_identity_backend_is_idempotent(self):
        doc = Document(metadata={"title": "Hello"}, body="")
        report = apply_manifest(doc, ["$.title"], "en", ["fr"], identity)
        assert report.ok
        assert report.documents["fr"].metadata == {"title": "Hello"}

    def test_translates_only_manifested_paths(self, document):
        original = copy.deepcopy(document)
        report = apply_manifest(document, MANIFEST, "en", ["fr"], RecordingBackend())

        translated = report.documents["fr"].metadata
        assert translated["title"] == "[fr] Hello world"
        assert translated["tags"] == ["[fr] getting started", "API"]
        assert translated["author"]["bio"] == "[fr] Writes about engines."

        manifested = {("title",), ("tags", 0), ("author", "bio")}
        for path, value in iter_leaves(original.metadata):
            if path not in manifested:
                got = dict(iter_leaves(translated))[path]
                assert got == value
                assert type(got) is type(value)

        assert document == original

    def test_body_translated_separately(self, document):
        backend = RecordingBackend()
        report = apply_manifest(document, MANIFEST, "en", ["de"], backend)

        assert report.documents["de"].body == "[de] # Hello\n\nSome prose.\n"
        batches = sorted(call[0] for call in backend.calls)
        assert batches == sorted([
            ["Hello world", "getting started", "Writes about engines."],
            ["# Hello\n\nSome prose.\n"],
        ])
        assert all(call[1:] == ("en", "de") for call in backend.calls)

    def test_empty_body_skips_request(self):
        doc = Document(metadata={"title": "Hello"}, body="")
        backend = RecordingBackend()
        report = apply_manifest(doc, ["$.title"], "en", ["fr"], backend)
        assert len(backend.calls) == 1
        assert report.documents["fr"].body == ""

    def test_blank_body_kept_as_is(self):
        doc = Document(metadata={"title": "Hello"}, body="\n")
        backend = RecordingBackend()
        report = apply_manifest(doc, ["$.title"], "en", ["fr"], backend)
        assert len(backend.calls) == 1
        assert report.documents["fr"].body == "\n"

    def test_empty_manifest_translates_body_only(self, document):
        backend = RecordingBackend()
        report = apply_manifest(document, [], "en", ["fr"], backend)
        assert [call[0] for call in backend.calls] == [[document.body]]
        assert report.documents["fr"].metadata == document.metadata

    def test_multiple_languages_independent(self, document):
        report = apply_manifest(document, MANIFEST, "en", ["fr", "de", "ja"], RecordingBackend())
        assert list(report.documents) == ["fr", "de", "ja"]
        for language, doc in report.documents.items():
            assert doc.metadata["title"] == f"[{language}] Hello world"
        assert report.documents["fr"].metadata is not report.documents["de"].metadata

    def test_duplicate_languages_collapsed(self, document):
        backend = RecordingBackend()
        report = apply_manifest(document, MANIFEST, "en", ["fr", "fr"], backend)
        assert list(report.documents) == ["fr"]
        assert len(backend.calls) == 2

    def test_on_done_called_per_language(self, document):
        done = []
        apply_manifest(document, MANIFEST, "en", ["fr", "de"], identity, on_done=done.append)
        assert sorted(done) == ["de", "fr"]

    def test_front_matter_flag_carried(self):
        doc = Document(metadata={}, body="Text only.\n", has_front_matter=False)
        report = apply_manifest(doc, [], "en", ["fr"], RecordingBackend())
        assert report.documents["fr"].has_front_matter is False


class TestAliasedMetadata:
    """YAML anchors/aliases are separate locations once parsed."""

    ALIASED = "---\nen: &c {label: hello there}\nother: *c\n---\n"

    def test_translating_anchor_leaves_alias_alone(self):
        doc = parse_document(self.ALIASED)

        def upper(texts, source_language, target_language):
            return [t.upper() for t in texts]

        report = apply_manifest(doc, ["$.en.label"], "en", ["fr"], upper)
        translated = report.documents["fr"].metadata
        assert translated["en"]["label"] == "HELLO THERE"
        assert translated["other"]["label"] == "hello there"
        assert doc.metadata["en"]["label"] == "hello there"

    def test_shared_objects_in_hand_built_document(self):
        shared = {"label": "hello there"}
        doc = Document(metadata={"en": shared, "other": shared})
        report = apply_manifest(doc, ["$.en.label"], "en", ["fr"], RecordingBackend())
        assert report.documents["fr"].metadata["other"]["label"] == "hello there"
        assert shared["label"] == "hello there"


class TestFailures:
    """Fatal errors abort one language (or the whole run for bad paths)."""

    def test_path_miss_before_any_backend_call(self, document):
        backend = RecordingBackend()
        with pytest.raises(PathNotFound):
            apply_manifest(document, ["$.title", "$.missing.field"], "en", ["fr"], backend)
        assert backend.calls == []

    def test_length_mismatch(self):
        doc = Document(metadata={"a": "one", "b": "two", "c": "three"}, body="")

        def short(texts, source_language, target_language):
            return list(texts)[:2]

        report = apply_manifest(doc, ["$.a", "$.b", "$.c"], "en", ["fr"], short)
        assert not report.ok
        assert "fr" not in report.documents
        exc = report.failures["fr"]
        assert isinstance(exc, TranslationMismatch)
        assert (exc.expected, exc.actual) == (3, 2)
        assert "3" in str(exc) and "2" in str(exc)

    def test_body_length_mismatch(self, document):
        def drops_body(texts, source_language, target_language):
            return [] if len(texts) == 1 else list(texts)

        report = apply_manifest(document, MANIFEST, "en", ["fr"], drops_body)
        assert isinstance(report.failures["fr"], TranslationMismatch)

    def test_backend_error_isolated_to_language(self, document):
        def flaky(texts, source_language, target_language):
            if target_language == "de":
                raise RuntimeError("service unavailable")
            return [t.upper() for t in texts]

        report = apply_manifest(document, MANIFEST, "en", ["fr", "de", "es"], flaky)
        assert list(report.documents) == ["fr", "es"]
        assert report.documents["fr"].metadata["title"] == "HELLO WORLD"

        exc = report.failures["de"]
        assert isinstance(exc, BackendError)
        assert exc.language == "de"
        assert isinstance(exc.__cause__, RuntimeError)
        assert "service unavailable" in str(exc)

    def test_translate_document_raises_directly(self, document):
        resolved = resolve_manifest(document, MANIFEST)

        def broken(texts, source_language, target_language):
            raise TimeoutError("timed out")

        with pytest.raises(BackendError):
            translate_document(document, resolved, "en", "fr", broken)
