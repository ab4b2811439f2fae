#!/usr/bin/env python3
"""Generate synthetic source videos for the clipstitch demo timeline.

Creates a handful of clips in examples/demo-clips/. Each clip is a solid
color with a distinct sine tone, and a white "END" frame at the end, so
trim points, cross-fades and audio alignment are easy to see and hear.
One clip is written without audio to exercise the no-waveform path.

Usage:
    python examples/generate_demo_clips.py
    # Then render:
    clipstitch render --manifest examples/demo-timeline.yaml \
        --output examples/demo-renders/timeline.mp4
"""

from pathlib import Path

import numpy as np
from moviepy import AudioClip, ColorClip, CompositeVideoClip, ImageClip
from PIL import Image, ImageDraw, ImageFont

OUTPUT_DIR = Path(__file__).resolve().parent / "demo-clips"
SIZE = (320, 240)
FPS = 30
AUDIO_FPS = 44100

# (name, color, duration, tone Hz or None for a silent clip)
CLIPS = [
    ("clip-01", (180, 60, 60),  6.0, 330.0),  # red
    ("clip-02", (60, 60, 180),  5.0, 440.0),  # blue
    ("clip-03", (60, 160, 60),  4.0, 550.0),  # green
    ("clip-04", (200, 130, 40), 4.0, None),   # orange, silent
]


def _make_end_frame(bg_color: tuple[int, int, int]) -> np.ndarray:
    """Create an 'END' frame: white text on a dimmed version of the clip color."""
    dim = tuple(max(c // 3, 20) for c in bg_color)
    img = Image.new("RGB", SIZE, dim)
    draw = ImageDraw.Draw(img)
    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 48
        )
    except OSError:
        font = ImageFont.load_default()
    bbox = draw.textbbox((0, 0), "END", font=font)
    tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
    draw.text(
        ((SIZE[0] - tw) / 2, (SIZE[1] - th) / 2),
        "END",
        fill=(255, 255, 255),
        font=font,
    )
    return np.array(img)


def _tone(freq: float, duration: float) -> AudioClip:
    """Stereo sine tone at a modest level."""
    def frame(t):
        wave = 0.3 * np.sin(2 * np.pi * freq * np.asarray(t))
        return np.stack([wave, wave], axis=-1)
    return AudioClip(frame, duration=duration, fps=AUDIO_FPS)


def main():
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    for name, color, duration, freq in CLIPS:
        out = OUTPUT_DIR / f"{name}.mp4"
        if out.exists():
            print(f"  skip {name} (exists)")
            continue

        # Main color body (all but last 0.5s)
        body_dur = max(duration - 0.5, 0.5)
        body = ColorClip(size=SIZE, color=color, duration=body_dur)

        # END frame (last 0.5s)
        end_frame = _make_end_frame(color)
        end_clip = ImageClip(end_frame, duration=0.5).with_start(body_dur)

        final = CompositeVideoClip([body, end_clip], size=SIZE)
        if freq is not None:
            final = final.with_audio(_tone(freq, final.duration))
        final.write_videofile(
            str(out), fps=FPS, audio_codec="aac", audio=freq is not None, logger=None,
        )
        print(f"  wrote {name} ({duration}s{'' if freq else ', silent'})")

    print(f"\nDone. {len(CLIPS)} clips in {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
