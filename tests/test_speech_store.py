"""Tests for :mod:`schooladmin.domain.speech_store`."""

from __future__ import annotations

import pytest

from schooladmin.domain.speech_store import SpeechStore
from schooladmin.errors import ConstraintViolation, ErrorCode, ValidationError
from schooladmin.models.speech import SpeechDraft


@pytest.fixture
def speeches(clock, ids) -> SpeechStore:
    return SpeechStore(clock=clock, id_factory=ids)


def _draft(day: str = "2024-01-15", **overrides: str) -> SpeechDraft:
    values = {"title": "Morning address", "content": "Welcome everyone", "scheduled_date": day}
    values.update(overrides)
    return SpeechDraft(**values)


class TestAddSpeech:
    def test_defaults(self, speeches: SpeechStore, clock) -> None:
        speech = speeches.add_speech(_draft())

        assert speech.status == "scheduled"
        assert speech.created_at == clock()
        assert speech.id == "id-1"

    def test_second_speech_on_same_date_is_refused(self, speeches: SpeechStore) -> None:
        first = speeches.add_speech(_draft())

        with pytest.raises(ConstraintViolation) as excinfo:
            speeches.add_speech(_draft(title="Another"))

        assert excinfo.value.error_code == ErrorCode.DUPLICATE_SCHEDULED_DATE
        assert excinfo.value.details["existing_id"] == first.id
        assert len(speeches) == 1

    @pytest.mark.parametrize("day", ["15-01-2024", "2024/01/15", "2024-02-30", "2023-02-29", ""])
    def test_bad_dates(self, speeches: SpeechStore, day: str) -> None:
        with pytest.raises(ValidationError) as excinfo:
            speeches.add_speech(_draft(day))

        assert excinfo.value.field_name == "scheduled_date"

    def test_leap_day_is_accepted(self, speeches: SpeechStore) -> None:
        assert speeches.add_speech(_draft("2024-02-29")).scheduled_date == "2024-02-29"

    def test_bad_status(self, speeches: SpeechStore) -> None:
        with pytest.raises(ValidationError) as excinfo:
            speeches.add_speech(_draft(status="draft"))

        assert excinfo.value.field_name == "status"

    @pytest.mark.parametrize("field_name", ["title", "content"])
    def test_blank_text(self, speeches: SpeechStore, field_name: str) -> None:
        with pytest.raises(ValidationError) as excinfo:
            speeches.add_speech(_draft(**{field_name: "  "}))

        assert excinfo.value.field_name == field_name


class TestUpdateAndDelete:
    def test_update_keeps_its_own_date(self, speeches: SpeechStore) -> None:
        speech = speeches.add_speech(_draft())

        updated = speeches.update_speech(speech.id, {"status": "published"})

        assert updated is not None
        assert updated.status == "published"
        assert updated.created_at == speech.created_at

    def test_update_onto_taken_date_is_refused(self, speeches: SpeechStore) -> None:
        speeches.add_speech(_draft("2024-01-15"))
        other = speeches.add_speech(_draft("2024-01-16"))

        with pytest.raises(ConstraintViolation):
            speeches.update_speech(other.id, {"scheduled_date": "2024-01-15"})

        assert speeches.get_speech(other.id).scheduled_date == "2024-01-16"

    def test_update_unknown(self, speeches: SpeechStore) -> None:
        assert speeches.update_speech("missing", _draft()) is None

    def test_delete_frees_the_date(self, speeches: SpeechStore) -> None:
        speech = speeches.add_speech(_draft())

        assert speeches.delete_speech(speech.id) is True
        assert speeches.delete_speech(speech.id) is False
        assert speeches.add_speech(_draft()).scheduled_date == "2024-01-15"


class TestLookups:
    @pytest.fixture(autouse=True)
    def _seed(self, speeches: SpeechStore) -> None:
        speeches.add_speech(_draft("2024-01-15", title="Winter term"))
        speeches.add_speech(_draft("2024-01-31", content="Exams START soon"))
        speeches.add_speech(_draft("2024-02-01"))

    def test_find_by_date(self, speeches: SpeechStore) -> None:
        assert speeches.find_by_date("2024-01-31").content == "Exams START soon"
        assert speeches.find_by_date("2024-03-01") is None

    def test_month_view(self, speeches: SpeechStore) -> None:
        month = speeches.speeches_for_month(2024, 1)

        assert sorted(month) == [15, 31]
        assert month[15].title == "Winter term"

    def test_month_out_of_range(self, speeches: SpeechStore) -> None:
        with pytest.raises(ValueError):
            speeches.speeches_for_month(2024, 13)

    def test_search(self, speeches: SpeechStore) -> None:
        assert [s.scheduled_date for s in speeches.search("winter")] == ["2024-01-15"]
        assert [s.scheduled_date for s in speeches.search("exams start")] == ["2024-01-31"]
        assert len(speeches.search("2024-01")) == 2
        assert len(speeches.search("")) == 3
