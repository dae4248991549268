"""
Tests pour la hierarchie d'erreurs du domaine.
"""

from pathlib import Path

import pytest

from anilib.core.errors import (
    AniLibError,
    DuplicatePathError,
    ExternalLookupError,
    IngestionError,
    NotFoundError,
    ProbeError,
    ProviderUnavailableError,
    StoreError,
    StoreWriteError,
    TranscodeError,
    UpdateInProgressError,
)


class TestIngestionErrors:
    """Les echecs locaux partagent IngestionError."""

    @pytest.mark.parametrize(
        "error_class",
        [ExternalLookupError, ProbeError, TranscodeError, DuplicatePathError],
    )
    def test_item_local_errors_are_ingestion_errors(self, error_class):
        assert issubclass(error_class, IngestionError)

    def test_message_includes_path(self):
        error = TranscodeError("ffmpeg a echoue", Path("/library/ep01.mkv"))
        assert error.message == "ffmpeg a echoue"
        assert error.path == Path("/library/ep01.mkv")
        assert str(error) == "/library/ep01.mkv: ffmpeg a echoue"

    def test_message_without_path(self):
        error = ExternalLookupError("aucun resultat")
        assert error.path is None
        assert str(error) == "aucun resultat"


class TestSharedFailures:
    """Les pannes partagees ne sont pas des echecs locaux."""

    @pytest.mark.parametrize(
        "error_class", [StoreError, StoreWriteError, ProviderUnavailableError]
    )
    def test_not_ingestion_errors(self, error_class):
        assert not issubclass(error_class, IngestionError)
        assert issubclass(error_class, AniLibError)

    def test_provider_unavailable_retry_after(self):
        error = ProviderUnavailableError("AniList injoignable", retry_after=30)
        assert error.retry_after == 30


class TestOtherErrors:
    def test_not_found_error(self):
        error = NotFoundError("Anime", "42")
        assert error.kind == "Anime"
        assert error.key == "42"
        assert "42" in str(error)

    def test_update_in_progress(self):
        assert "en cours" in str(UpdateInProgressError())
