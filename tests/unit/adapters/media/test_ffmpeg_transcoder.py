"""
Tests unitaires pour FFmpegTranscoder.

Le processus ffmpeg est remplace par un faux processus : les tests
verifient la ligne de commande, le fichier produit et la classification
des echecs.
"""

import asyncio
from pathlib import Path
from typing import Optional
from unittest.mock import patch

import pytest

from anilib.adapters.media.ffmpeg_transcoder import FFmpegTranscoder
from anilib.core.errors import TranscodeError


class FakeProcess:
    """Faux processus ffmpeg qui ecrit sa sortie en cas de succes."""

    def __init__(self, output: Path, returncode: int = 0, stderr: bytes = b"", hang: bool = False):
        self._output = output
        self._final_code = returncode
        self._stderr = stderr
        self._hang = hang
        self.returncode: Optional[int] = None
        self.killed = False

    async def communicate(self):
        if self._hang:
            await asyncio.sleep(3600)
        if self._final_code == 0:
            self._output.write_bytes(b"data")
        self.returncode = self._final_code
        return b"", self._stderr

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode


class FakeExec:
    """Remplace asyncio.create_subprocess_exec et memorise les commandes."""

    def __init__(self, **process_kwargs):
        self.commands: list[list[str]] = []
        self.processes: list[FakeProcess] = []
        self._process_kwargs = process_kwargs

    async def __call__(self, *cmd, **kwargs):
        self.commands.append(list(cmd))
        process = FakeProcess(Path(cmd[-1]), **self._process_kwargs)
        self.processes.append(process)
        return process


@pytest.fixture
def transcoder(tmp_path: Path) -> FFmpegTranscoder:
    return FFmpegTranscoder(covers_dir=tmp_path / "covers")


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "library" / "Cowboy Bebop - 01.mkv"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"mkv")
    return path


class TestTranscodeToMp4:
    @pytest.mark.asyncio
    async def test_software_encoding(self, transcoder, source):
        fake = FakeExec()

        with patch("asyncio.create_subprocess_exec", fake):
            output = await transcoder.transcode_to_mp4(
                source,
                output_dir=source.parent,
                output_name="Cowboy Bebop - 01 [ANILIB COMPATIBLE]",
                use_hardware_accel=False,
            )

        assert output == source.parent / "Cowboy Bebop - 01 [ANILIB COMPATIBLE].mp4"
        assert output.exists()
        assert source.exists()
        cmd = fake.commands[0]
        assert cmd[0] == "ffmpeg"
        assert "libx264" in cmd
        assert "aac" in cmd
        assert "-hwaccel" not in cmd
        # Aucun fichier partiel ne reste
        assert not list(source.parent.glob("*.part"))

    @pytest.mark.asyncio
    async def test_hardware_encoding(self, transcoder, source):
        fake = FakeExec()

        with patch("asyncio.create_subprocess_exec", fake):
            await transcoder.transcode_to_mp4(
                source, output_dir=source.parent, output_name="out", use_hardware_accel=True
            )

        cmd = fake.commands[0]
        assert cmd[cmd.index("-hwaccel") + 1] == "cuda"
        assert "h264_nvenc" in cmd

    @pytest.mark.asyncio
    async def test_failure_raises_transcode_error(self, transcoder, source):
        fake = FakeExec(returncode=1, stderr=b"line1\nline2\nInvalid data found\n")

        with patch("asyncio.create_subprocess_exec", fake):
            with pytest.raises(TranscodeError) as exc_info:
                await transcoder.transcode_to_mp4(
                    source, output_dir=source.parent, output_name="out", use_hardware_accel=False
                )

        assert "Invalid data found" in exc_info.value.message
        assert exc_info.value.path == source
        assert not (source.parent / "out.mp4").exists()

    @pytest.mark.asyncio
    async def test_missing_ffmpeg(self, transcoder, source):
        async def missing(*cmd, **kwargs):
            raise FileNotFoundError("ffmpeg")

        with patch("asyncio.create_subprocess_exec", missing):
            with pytest.raises(TranscodeError, match="lancement"):
                await transcoder.transcode_to_mp4(
                    source, output_dir=source.parent, output_name="out", use_hardware_accel=False
                )

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, tmp_path, source):
        transcoder = FFmpegTranscoder(covers_dir=tmp_path / "covers", timeout_seconds=0.01)
        fake = FakeExec(hang=True)

        with patch("asyncio.create_subprocess_exec", fake):
            with pytest.raises(TranscodeError, match="depasse"):
                await transcoder.transcode_to_mp4(
                    source, output_dir=source.parent, output_name="out", use_hardware_accel=False
                )

        assert fake.processes[0].killed


class TestExtractCoverImage:
    @pytest.mark.asyncio
    async def test_extracts_jpeg(self, transcoder, source, tmp_path):
        fake = FakeExec()

        with patch("asyncio.create_subprocess_exec", fake):
            cover = await transcoder.extract_cover_image(
                source, at_second=5, output_name="episode_cover", scale_width=1920
            )

        assert cover.parent == tmp_path / "covers"
        assert cover.name.endswith("_episode_cover.jpg")
        assert cover.exists()
        cmd = fake.commands[0]
        assert cmd[cmd.index("-ss") + 1] == "5"
        assert "scale=1920:-2" in cmd

    @pytest.mark.asyncio
    async def test_distinct_sources_get_distinct_covers(self, transcoder, source):
        other = source.with_name("Cowboy Bebop - 02.mkv")
        other.write_bytes(b"mkv")

        with patch("asyncio.create_subprocess_exec", FakeExec()):
            first = await transcoder.extract_cover_image(
                source, at_second=5, output_name="episode_cover", scale_width=1920
            )
            second = await transcoder.extract_cover_image(
                other, at_second=5, output_name="episode_cover", scale_width=1920
            )

        assert first != second

    @pytest.mark.asyncio
    async def test_failure_raises_transcode_error(self, transcoder, source):
        with patch("asyncio.create_subprocess_exec", FakeExec(returncode=1)):
            with pytest.raises(TranscodeError):
                await transcoder.extract_cover_image(
                    source, at_second=5, output_name="episode_cover", scale_width=1920
                )
