"""
Tests de l'API web (FastAPI TestClient).

Le Container est configure sur une base SQLite en memoire via
les Settings de test.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from anilib.container import Container
from anilib.core.entities import Anime, AnimeTitle, Episode
from anilib.core.errors import ProviderUnavailableError, UpdateInProgressError
from anilib.services.library import LibraryService
from anilib.services.progress import ProgressBus
from anilib.utils.constants import USE_HARDWARE_ACCELERATION
from anilib.web.app import create_app


@pytest.fixture
def container(test_settings) -> Container:
    container = Container()
    container.config.override(providers.Object(test_settings))
    return container


@pytest.fixture
def client(container: Container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def anime(container: Container, client, tmp_path: Path) -> Anime:
    """Anime persiste (la base est initialisee par le lifespan du client)."""
    folder = tmp_path / "library" / "Cowboy Bebop"
    folder.mkdir(parents=True)
    return container.anime_repository().save(
        Anime(
            folder_path=folder,
            anilist_id=1,
            title=AnimeTitle(romaji="Cowboy Bebop", native="カウボーイビバップ"),
            genres=("Action", "Sci-Fi"),
            episodes=26,
        )
    )


def _mock_library() -> MagicMock:
    library = MagicMock(spec=LibraryService)
    library.progress = ProgressBus()
    library.is_updating = False
    return library


class TestAnimeRoutes:
    def test_list_animes_empty(self, client):
        response = client.get("/api/animes")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_and_get_anime(self, client, anime):
        response = client.get("/api/animes")

        assert response.status_code == 200
        [data] = response.json()
        assert data["id"] == anime.id
        assert data["title"] == "Cowboy Bebop"
        assert data["title_native"] == "カウボーイビバップ"
        assert data["genres"] == ["Action", "Sci-Fi"]

        detail = client.get(f"/api/animes/{anime.id}")
        assert detail.json()["folder_path"] == str(anime.folder_path)

    def test_unknown_anime_is_404(self, client):
        assert client.get("/api/animes/999").status_code == 404
        assert client.get("/api/animes/999/episodes").status_code == 404

    def test_episodes_sorted(self, client, container, anime):
        repo = container.episode_repository()
        for title in ("Episode 10", "Episode 2"):
            repo.save(
                Episode(
                    anime_id=anime.id,
                    title=title,
                    file_path=anime.folder_path / f"{title}.mp4",
                )
            )

        response = client.get(f"/api/animes/{anime.id}/episodes")

        assert [e["title"] for e in response.json()] == ["Episode 2", "Episode 10"]

    def test_subtitles(self, client, container, anime):
        episode = container.episode_repository().save(
            Episode(anime_id=anime.id, title="Episode 1", file_path=anime.folder_path / "ep01.mp4")
        )

        created = client.post(
            f"/api/episodes/{episode.id}/subtitles",
            json={"file_path": "/subs/ep01.fr.ass", "label": "Francais"},
        )
        listed = client.get(f"/api/episodes/{episode.id}/subtitles")

        assert created.status_code == 201
        assert created.json()["label"] == "Francais"
        assert [s["file_path"] for s in listed.json()] == ["/subs/ep01.fr.ass"]

    def test_episode_cover(self, client, container, anime, tmp_path):
        cover = tmp_path / "covers" / "ep01_episode_cover.jpg"
        cover.parent.mkdir(parents=True, exist_ok=True)
        cover.write_bytes(b"\xff\xd8jpeg")
        episode = container.episode_repository().save(
            Episode(
                anime_id=anime.id,
                title="Episode 1",
                file_path=anime.folder_path / "ep01.mp4",
                cover_image_path=cover,
            )
        )

        response = client.get(f"/api/episodes/{episode.id}/cover")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.content == b"\xff\xd8jpeg"

    def test_missing_cover_is_404(self, client, container, anime, tmp_path):
        without_cover = container.episode_repository().save(
            Episode(anime_id=anime.id, title="Episode 1", file_path=anime.folder_path / "ep01.mp4")
        )
        deleted_cover = container.episode_repository().save(
            Episode(
                anime_id=anime.id,
                title="Episode 2",
                file_path=anime.folder_path / "ep02.mp4",
                cover_image_path=tmp_path / "covers" / "gone.jpg",
            )
        )

        assert client.get(f"/api/episodes/{without_cover.id}/cover").status_code == 404
        assert client.get(f"/api/episodes/{deleted_cover.id}/cover").status_code == 404
        assert client.get("/api/episodes/999/cover").status_code == 404

    def test_subtitle_for_unknown_episode_is_404(self, client):
        response = client.post("/api/episodes/42/subtitles", json={"file_path": "/subs/a.ass"})
        assert response.status_code == 404


class TestConfigRoutes:
    def test_watch_directories(self, client, tmp_path):
        directory = tmp_path / "animes"
        directory.mkdir()

        created = client.post("/api/watch-directories", json={"path": str(directory)})
        listed = client.get("/api/watch-directories")

        assert created.status_code == 201
        assert created.json()["path"] == str(directory)
        assert [d["path"] for d in listed.json()] == [str(directory)]

    def test_missing_watch_directory_is_400(self, client, tmp_path):
        response = client.post(
            "/api/watch-directories", json={"path": str(tmp_path / "missing")}
        )
        assert response.status_code == 400

    def test_settings(self, client):
        listed = client.get("/api/settings")
        assert listed.json() == [{"name": USE_HARDWARE_ACCELERATION, "value": False}]

        updated = client.put(f"/api/settings/{USE_HARDWARE_ACCELERATION}", json={"value": True})
        assert updated.json()["value"] is True

    def test_unknown_setting_is_404(self, client):
        assert client.put("/api/settings/unknown", json={"value": True}).status_code == 404


class TestLibraryRoutes:
    def test_status(self, client, anime):
        response = client.get("/api/library/status")

        assert response.status_code == 200
        data = response.json()
        assert data["updating"] is False
        assert data["anime_count"] == 1
        assert data["last_report"] is None

    def test_start_update(self, container):
        library = _mock_library()
        container.library_service.override(providers.Object(library))

        with TestClient(create_app(container)) as client:
            response = client.post("/api/library/update")

        assert response.status_code == 202
        library.start_update.assert_called_once()

    def test_update_already_running_is_409(self, container):
        library = _mock_library()
        library.start_update.side_effect = UpdateInProgressError()
        container.library_service.override(providers.Object(library))

        with TestClient(create_app(container)) as client:
            response = client.post("/api/library/update")

        assert response.status_code == 409

    def test_provider_unavailable_is_503(self, container):
        library = _mock_library()
        library.start_update.side_effect = ProviderUnavailableError("AniList", retry_after=60)
        container.library_service.override(providers.Object(library))

        with TestClient(create_app(container)) as client:
            response = client.post("/api/library/update")

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "60"

    def test_cancel_without_update_is_409(self, client):
        assert client.delete("/api/library/update").status_code == 409

    def test_updates_stream_when_idle(self, client):
        response = client.get("/api/library/updates")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert "event: idle" in response.text

    def test_updates_stream_releases_subscription(self, container):
        library = _mock_library()
        container.library_service.override(providers.Object(library))

        with TestClient(create_app(container)) as client:
            client.get("/api/library/updates")
            client.get("/api/library/updates")

            assert library.progress.subscriber_count == 0
