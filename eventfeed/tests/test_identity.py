"""Event fingerprint tests"""

import datetime as dt
import hashlib

from eventfeed.pipeline.identity import content_hash_event, day_key, hash_event, title_key


class TestHashEvent:
    """Per-source identity"""

    def test_stable_across_calls(self):
        first = hash_event("Founders Breakfast", "2026-04-16", "luma-cue")
        second = hash_event("Founders Breakfast", "2026-04-16", "luma-cue")
        assert first == second

    def test_sixteen_hex_chars(self):
        value = hash_event("Founders Breakfast", "2026-04-16", "luma-cue")
        assert len(value) == 16
        int(value, 16)

    def test_differs_when_any_component_differs(self):
        base = hash_event("Founders Breakfast", "2026-04-16", "luma-cue")
        assert hash_event("Founders Lunch", "2026-04-16", "luma-cue") != base
        assert hash_event("Founders Breakfast", "2026-04-17", "luma-cue") != base
        assert hash_event("Founders Breakfast", "2026-04-16", "allia") != base

    def test_pipe_in_title_does_not_shift_fields(self):
        assert hash_event("Talk|2026-04-16", "2026-04-17", "s") != hash_event("Talk", "2026-04-16", "2026-04-17|s")

    def test_plain_fields_hash_as_pipe_joined(self):
        expected = hashlib.sha256("Founders Breakfast|2026-04-16|luma-cue".encode("utf-8")).hexdigest()[:16]
        assert hash_event("Founders Breakfast", "2026-04-16", "luma-cue") == expected

    def test_date_and_datetime_share_a_day(self):
        day = dt.date(2026, 4, 16)
        assert hash_event("X", day, "s") == hash_event("X", "2026-04-16", "s")
        assert hash_event("X", dt.datetime(2026, 4, 16, 18, 30), "s") == hash_event("X", day, "s")

    def test_unicode_normalization(self):
        composed = "Caf\u00e9 Scientifique"
        decomposed = "Cafe\u0301 Scientifique"
        assert hash_event(composed, "2026-04-16", "s") == hash_event(decomposed, "2026-04-16", "s")


class TestContentHash:
    """Cross-source identity"""

    def test_source_independent(self):
        day = "2026-04-16"
        assert content_hash_event("Founders Breakfast", day) == content_hash_event("Founders Breakfast", day)
        assert hash_event("Founders Breakfast", day, "luma-cue") != hash_event("Founders Breakfast", day, "allia")

    def test_ignores_case_and_punctuation(self):
        assert content_hash_event("AI: What's Next?", "2026-04-16") == content_hash_event("ai whats next", "2026-04-16")

    def test_speaker_suffix_dropped_for_long_titles(self):
        with_speaker = "What is Digital Identity? - Professor Jon Crowcroft"
        assert title_key(with_speaker) == "what is digital identity"
        assert content_hash_event(with_speaker, "2026-04-16") == content_hash_event("What is Digital Identity?", "2026-04-16")

    def test_short_titles_keep_suffix(self):
        assert content_hash_event("AI - Ethics", "2026-04-16") != content_hash_event("AI - Workshop", "2026-04-16")

    def test_day_key_truncates_timestamps(self):
        assert day_key("2026-04-16T18:00:00Z") == "2026-04-16"
