# =============================================================================
# agents/video_assembler.py - Vertical Video Assembly
# =============================================================================
# Third stage of the generation pipeline. Builds a short vertical video
# (1080x1920, 15 s at 30 fps by default) from the generated image and the
# bundle's video script:
#
# - every frame draws the image centred on black, zoomed from 1.0 to 1.1
#   over the length of the video (Ken Burns)
# - a translucent band covers the bottom 200 px
# - the current scene's line of the script is drawn on the band in white
#   with a drop shadow, word-wrapped to the frame width minus 80 px
#
# Frames are written as PNGs to a temporary directory and encoded to H.264
# with the ffmpeg binary bundled by imageio-ffmpeg. Music campaigns get the
# source audio muxed in, cut to the shorter stream.
# =============================================================================

from __future__ import annotations

import io
import logging
import math
import os
import subprocess
import tempfile

import imageio_ffmpeg
from PIL import Image, ImageDraw, ImageFont

from app.config import settings
from agents.errors import GenerationError
from core.models.generation import GeneratedImage, GenerationStage

logger = logging.getLogger(__name__)

MAX_ZOOM = 0.1
BAND_HEIGHT = 200
BAND_COLOR = (0, 0, 0, 178)  # 70% black
TEXT_COLOR = (255, 255, 255, 255)
SHADOW_COLOR = (0, 0, 0, 204)
SHADOW_OFFSET = (2, 2)
TEXT_MARGIN = 80
LINE_HEIGHT = 60
FONT_SIZE = 48
FONT_NAME = "DejaVuSans-Bold.ttf"
FALLBACK_TEXT = "Your content here"


# =============================================================================
# Frame Math
# =============================================================================

def split_scenes(script: str | None) -> list[str]:
    """Non-blank lines of a video script, stripped."""
    if not script:
        return []
    return [line.strip() for line in script.splitlines() if line.strip()]


def scene_index(frame: int, total_frames: int, scene_count: int) -> int:
    """Scene shown on a frame: floor(frame / total_frames * scene_count)."""
    if scene_count <= 0 or total_frames <= 0:
        return 0
    return min(math.floor(frame / total_frames * scene_count), scene_count - 1)


def scene_text(frame: int, total_frames: int, scenes: list[str]) -> str:
    if not scenes:
        return FALLBACK_TEXT
    return scenes[scene_index(frame, total_frames, len(scenes))]


def zoom_for_frame(frame: int, total_frames: int) -> float:
    """Zoom factor growing linearly from 1.0 on the first frame towards 1.1."""
    if total_frames <= 0:
        return 1.0
    return 1.0 + (frame / total_frames) * MAX_ZOOM


def wrap_text(text: str, draw: ImageDraw.ImageDraw, font, max_width: int) -> list[str]:
    """
    Greedy word wrap.

    A word is moved to the next line once the current line would exceed
    max_width. A single word wider than max_width gets a line of its own.
    """
    lines: list[str] = []
    line = ""
    for word in text.split():
        candidate = f"{line} {word}" if line else word
        if line and draw.textlength(candidate, font=font) > max_width:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)
    return lines


def load_font(size: int = FONT_SIZE):
    try:
        return ImageFont.truetype(FONT_NAME, size)
    except OSError:
        logger.debug(f"{FONT_NAME} not available, using Pillow's default font")
        return ImageFont.load_default(size=size)


# =============================================================================
# Assembler
# =============================================================================

class VideoAssembler:
    """
    Renders and encodes the campaign video.

    Example:
        assembler = VideoAssembler()
        mp4_bytes = assembler.assemble(image, bundle.video_script, audio_path="song.mp3")
    """

    def __init__(
        self,
        width: int | None = None,
        height: int | None = None,
        duration_seconds: int | None = None,
        fps: int | None = None,
    ):
        self.width = width or settings.VIDEO_WIDTH
        self.height = height or settings.VIDEO_HEIGHT
        self.duration_seconds = duration_seconds or settings.VIDEO_DURATION_SECONDS
        self.fps = fps or settings.VIDEO_FPS
        self.font = load_font()
        self._overlay_cache: dict[str, Image.Image] = {}

    @property
    def total_frames(self) -> int:
        return self.duration_seconds * self.fps

    # -------------------------------------------------------------------------
    # Main Entry Point
    # -------------------------------------------------------------------------

    def assemble(
        self,
        image: GeneratedImage | bytes,
        script: str,
        audio_path: str | None = None,
    ) -> bytes:
        """
        Render every frame and encode the MP4.

        Args:
            image: Background image (GeneratedImage or raw bytes)
            script: Video script, one scene per line
            audio_path: Local audio file to mux in (music campaigns)

        Returns:
            MP4 file content

        Raises:
            GenerationError: If the image can't be read or ffmpeg fails
        """
        data = image.data if isinstance(image, GeneratedImage) else image
        try:
            background = Image.open(io.BytesIO(data)).convert("RGBA")
        except Exception as e:
            raise GenerationError(
                message=f"Failed to load background image: {e}",
                stage=GenerationStage.VIDEO,
                code="IMAGE_LOAD_ERROR",
                suggestion="Try generating again",
            )

        scenes = split_scenes(script)
        logger.info(
            f"Assembling {self.width}x{self.height} video: {self.total_frames} frames, "
            f"{len(scenes)} scenes, audio={'yes' if audio_path else 'no'}"
        )

        with tempfile.TemporaryDirectory(prefix="artomate_frames_") as frames_dir:
            for frame in range(self.total_frames):
                rendered = self.render_frame(background, frame, scenes)
                rendered.save(os.path.join(frames_dir, f"frame_{frame:04d}.png"))

            output_path = os.path.join(frames_dir, "video.mp4")
            self.encode(frames_dir, output_path, audio_path)

            with open(output_path, "rb") as f:
                video = f.read()

        logger.info(f"Video assembled ({len(video)} bytes)")
        return video

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render_frame(self, background: Image.Image, frame: int, scenes: list[str]) -> Image.Image:
        """Draw one frame: zoomed image on black, then the caption band."""
        canvas = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 255))

        scale = zoom_for_frame(frame, self.total_frames)
        scaled = background.resize(
            (max(1, round(background.width * scale)), max(1, round(background.height * scale))),
            Image.LANCZOS,
        )
        x = (self.width - scaled.width) // 2
        y = (self.height - scaled.height) // 2
        canvas.paste(scaled, (x, y), scaled)

        overlay = self._caption_overlay(scene_text(frame, self.total_frames, scenes))
        return Image.alpha_composite(canvas, overlay).convert("RGB")

    def _caption_overlay(self, text: str) -> Image.Image:
        """Band plus text for a scene; one layer per distinct scene line."""
        if text in self._overlay_cache:
            return self._overlay_cache[text]

        overlay = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        draw.rectangle(
            [(0, self.height - BAND_HEIGHT), (self.width, self.height)],
            fill=BAND_COLOR,
        )

        lines = wrap_text(text, draw, self.font, self.width - TEXT_MARGIN)
        center_x = self.width // 2
        y = self.height - BAND_HEIGHT // 2
        for line in lines:
            draw.text(
                (center_x + SHADOW_OFFSET[0], y + SHADOW_OFFSET[1]),
                line, font=self.font, fill=SHADOW_COLOR, anchor="mm",
            )
            draw.text((center_x, y), line, font=self.font, fill=TEXT_COLOR, anchor="mm")
            y += LINE_HEIGHT

        self._overlay_cache[text] = overlay
        return overlay

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def build_ffmpeg_command(
        self,
        frames_dir: str,
        output_path: str,
        audio_path: str | None = None,
    ) -> list[str]:
        ffmpeg_exe = imageio_ffmpeg.get_ffmpeg_exe()
        cmd = [ffmpeg_exe, "-y", "-r", str(self.fps), "-i", f"{frames_dir}/frame_%04d.png"]

        has_audio = bool(audio_path and os.path.exists(audio_path))
        if has_audio:
            cmd.extend(["-i", audio_path])

        cmd.extend(["-vcodec", "libx264", "-pix_fmt", "yuv420p"])

        if has_audio:
            cmd.extend(["-c:a", "aac", "-b:a", "192k", "-shortest"])

        cmd.append(output_path)
        return cmd

    def encode(self, frames_dir: str, output_path: str, audio_path: str | None = None) -> None:
        """
        Encode rendered frames to MP4.

        Raises:
            GenerationError: If ffmpeg exits with an error
        """
        cmd = self.build_ffmpeg_command(frames_dir, output_path, audio_path)
        logger.debug(f"Running ffmpeg: {' '.join(cmd)}")

        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except (subprocess.CalledProcessError, OSError) as e:
            stderr = getattr(e, "stderr", b"") or b""
            raise GenerationError(
                message=f"Video generation failed: {e}",
                stage=GenerationStage.VIDEO,
                code="FFMPEG_ERROR",
                suggestion="Try again; if it keeps failing, check the ffmpeg installation",
                details={"stderr": stderr.decode("utf-8", errors="replace")[-500:]}
            )
