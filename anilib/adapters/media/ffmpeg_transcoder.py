"""
Conversion video et extraction d'images avec ffmpeg.

Implemente ITranscoder en lancant ffmpeg via asyncio.create_subprocess_exec.
La conversion ecrit d'abord dans un fichier temporaire .part renomme en
fin de succes : un scan concurrent ne voit jamais de MP4 incomplet.
"""

import asyncio
import hashlib
import os
from pathlib import Path

from loguru import logger

from anilib.core.errors import TranscodeError
from anilib.core.ports.media import ITranscoder

# Nombre de lignes de stderr ffmpeg conservees dans les messages d'erreur
_STDERR_TAIL_LINES = 3


class FFmpegTranscoder(ITranscoder):
    """
    Implementation de ITranscoder basee sur ffmpeg.

    Attributes:
        covers_dir: Repertoire des images de couverture extraites
    """

    def __init__(
        self,
        covers_dir: Path,
        ffmpeg_bin: str = "ffmpeg",
        timeout_seconds: float = 6 * 60 * 60,
    ) -> None:
        self.covers_dir = covers_dir
        self._ffmpeg_bin = ffmpeg_bin
        self._timeout_seconds = timeout_seconds

    async def extract_cover_image(
        self,
        path: Path,
        at_second: int,
        output_name: str,
        scale_width: int,
    ) -> Path:
        """
        Extrait une image JPEG a la seconde at_second.

        Le nom de l'image est prefixe par une empreinte du chemin source :
        deux episodes d'un meme dossier ne partagent jamais leur image.
        """
        self.covers_dir.mkdir(parents=True, exist_ok=True)
        digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:16]
        output = self.covers_dir / f"{digest}_{output_name}.jpg"

        cmd = [
            self._ffmpeg_bin,
            "-y",
            "-ss", str(at_second),
            "-i", str(path),
            "-frames:v", "1",
            "-vf", f"scale={scale_width}:-2",
            "-q:v", "2",
            str(output),
        ]
        await self._run(cmd, path, timeout=120)

        if not output.exists():
            raise TranscodeError("ffmpeg n'a produit aucune image", path)
        return output

    async def transcode_to_mp4(
        self,
        path: Path,
        output_dir: Path,
        output_name: str,
        use_hardware_accel: bool,
    ) -> Path:
        """
        Convertit en MP4 H.264/AAC dans output_dir.

        Avec use_hardware_accel, le decodage passe par CUDA et l'encodage
        par NVENC. Le fichier source n'est jamais modifie.
        """
        output = output_dir / f"{output_name}.mp4"
        partial = output_dir / f".{output_name}.mp4.part"

        cmd = [self._ffmpeg_bin, "-y"]
        if use_hardware_accel:
            cmd += ["-hwaccel", "cuda"]
        cmd += [
            "-i", str(path),
            "-map", "0:v:0",
            "-map", "0:a:0?",
            "-c:v", "h264_nvenc" if use_hardware_accel else "libx264",
            "-preset", "fast",
            "-pix_fmt", "yuv420p",
            "-c:a", "aac",
            "-b:a", "192k",
            "-movflags", "+faststart",
            "-f", "mp4",
            str(partial),
        ]

        logger.info(f"Conversion MP4: {path.name}")
        try:
            await self._run(cmd, path, timeout=self._timeout_seconds)
            os.replace(partial, output)
        except BaseException:
            # Echec, timeout ou annulation : ne rien laisser de partiel
            partial.unlink(missing_ok=True)
            raise

        logger.info(f"Conversion terminee: {output.name}")
        return output

    async def _run(self, cmd: list[str], source: Path, timeout: float) -> None:
        """
        Execute ffmpeg et attend sa fin.

        Le processus est tue si le delai expire ou si la tache est annulee.

        Raises:
            TranscodeError: ffmpeg absent, code de retour non nul ou timeout
        """
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise TranscodeError(f"lancement de ffmpeg impossible: {e}", source) from e

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError as e:
            await self._kill(process)
            raise TranscodeError(f"ffmpeg a depasse {timeout:.0f}s", source) from e
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        if process.returncode != 0:
            lines = stderr.decode(errors="replace").strip().splitlines()
            tail = " | ".join(lines[-_STDERR_TAIL_LINES:])
            raise TranscodeError(
                f"ffmpeg a echoue (code {process.returncode}): {tail}", source
            )

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            process.kill()
            await process.wait()
