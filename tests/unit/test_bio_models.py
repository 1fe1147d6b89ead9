"""Tests for bio translation models and stored-data normalization."""

from datetime import datetime, timezone

from core.bio_translation.models import (
    ErrorKind,
    TranslatableProfile,
    TranslationEntry,
    TranslationError,
    TranslationStatus,
    normalize_translation_set,
)


class TestTranslationEntryFromValue:
    """Legacy and partial stored entries."""

    def test_bare_string_is_done(self):
        entry = TranslationEntry.from_value("  Olá  ")
        assert entry.status == TranslationStatus.DONE
        assert entry.text == "Olá"
        assert entry.attempts == 0

    def test_blank_string_is_dropped(self):
        assert TranslationEntry.from_value("   ") is None

    def test_unknown_status_with_text_is_done(self):
        entry = TranslationEntry.from_value({"text": "Hola", "status": "weird"})
        assert entry.status == TranslationStatus.DONE

    def test_unknown_status_without_text_is_pending(self):
        entry = TranslationEntry.from_value({"status": "weird"})
        assert entry.status == TranslationStatus.PENDING

    def test_done_without_text_is_pending(self):
        entry = TranslationEntry.from_value({"text": "", "status": "done", "attempts": 2})
        assert entry.status == TranslationStatus.PENDING
        assert entry.attempts == 2

    def test_bad_attempts_default_to_zero(self):
        assert TranslationEntry.from_value({"status": "failed", "attempts": "x"}).attempts == 0
        assert TranslationEntry.from_value({"status": "failed", "attempts": True}).attempts == 0
        assert TranslationEntry.from_value({"status": "failed", "attempts": -4}).attempts == 0

    def test_camel_case_timestamp(self):
        entry = TranslationEntry.from_value(
            {"text": "Hallo", "status": "done", "updatedAt": "2024-05-01T10:00:00Z"}
        )
        assert entry.updated_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_unusable_values(self):
        assert TranslationEntry.from_value(None) is None
        assert TranslationEntry.from_value(42) is None

    def test_to_dict(self):
        entry = TranslationEntry(
            text="",
            status=TranslationStatus.FAILED,
            attempts=1,
            error=TranslationError(ErrorKind.REJECTED, "translate_failed_400", "lt"),
        )
        data = entry.to_dict()
        assert data["status"] == "failed"
        assert data["error"] == {"kind": "rejected", "message": "translate_failed_400", "provider": "lt"}
        assert data["updated_at"] is None


class TestTranslationErrorFromValue:

    def test_dict(self):
        error = TranslationError.from_value({"kind": "quota_exceeded", "message": "mymemory_quota"})
        assert error.kind == ErrorKind.QUOTA_EXCEEDED
        assert error.message == "mymemory_quota"

    def test_legacy_translate_failed_string(self):
        error = TranslationError.from_value("translate_failed_503:busy")
        assert error.kind == ErrorKind.PROVIDER_UNAVAILABLE
        assert error.kind.is_unavailability

    def test_legacy_quota_string(self):
        assert TranslationError.from_value("mymemory_quota").kind == ErrorKind.QUOTA_EXCEEDED

    def test_other_legacy_string(self):
        error = TranslationError.from_value("translate_empty_result")
        assert error.kind == ErrorKind.INVALID_RESPONSE
        assert not error.kind.is_unavailability

    def test_empty(self):
        assert TranslationError.from_value("") is None
        assert TranslationError.from_value(None) is None


class TestNormalizeTranslationSet:

    def test_filters_targets_and_lowercases_keys(self):
        raw = {"PT": "Olá", "xx": "??", "es": {"status": "pending"}, "de": None}
        normalized = normalize_translation_set(raw, ["pt", "es", "de"])
        assert set(normalized) == {"pt", "es"}
        assert normalized["pt"].is_done

    def test_without_targets_keeps_every_language(self):
        assert set(normalize_translation_set({"xx": "a", "pt": "b"})) == {"xx", "pt"}

    def test_non_dict(self):
        assert normalize_translation_set(["pt"]) == {}
        assert normalize_translation_set(None) == {}


class TestTranslatableProfile:

    def test_missing_entry_reads_as_pending(self):
        profile = TranslatableProfile(id="p1", bio="Hi")
        entry = profile.entry("de")
        assert entry.status == TranslationStatus.PENDING
        assert entry.attempts == 0

    def test_source_text_is_trimmed(self):
        assert TranslatableProfile(id="p1", bio="  Hi \n").source_text == "Hi"
        assert TranslatableProfile(id="p1", bio=None).source_text == ""

    def test_to_dict_serializes_entries(self):
        profile = TranslatableProfile(
            id="p1", bio="Hi", bio_translations={"pt": TranslationEntry(text="Oi", status=TranslationStatus.DONE)}
        )
        data = profile.to_dict()
        assert data["bio_translations"]["pt"]["status"] == "done"
        assert data["bio_translations"]["pt"]["text"] == "Oi"
