#!/usr/bin/env python3
"""
Run the generation pipeline locally and write the results to disk.

Uses the mock content writer and image generator unless --live is passed,
so it only needs ffmpeg (shipped with imageio-ffmpeg).

    python scripts/render_sample.py music "Summer vibes" --audio track.mp3
"""

import argparse
import json
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from agents.pipeline import run_generation_pipeline, default_agents
from agents.mock_content import MockContentWriter, MockImageGenerator
from agents.video_assembler import VideoAssembler
from core.models.campaign import ContentType
from core.models.generation import GenerationRequest


def print_progress(percent, stage, message):
    print(f"  [{percent:3d}%] {stage.value:<5} {message}")


def main():
    parser = argparse.ArgumentParser(description="Render a sample marketing package")
    parser.add_argument("content_type", choices=[c.value for c in ContentType])
    parser.add_argument("theme")
    parser.add_argument("--audio", help="Audio file to mux in (music only)")
    parser.add_argument("--out", default="sample_output", help="Output directory")
    parser.add_argument("--live", action="store_true", help="Call OpenAI instead of the mocks")
    args = parser.parse_args()

    if args.live:
        writer, image_generator, assembler = default_agents()
    else:
        writer, image_generator, assembler = MockContentWriter(), MockImageGenerator(), VideoAssembler()

    request = GenerationRequest(
        campaign_id="local-sample",
        content_type=ContentType(args.content_type),
        theme=args.theme,
        source_file=os.path.basename(args.audio) if args.audio else None,
        audio_path=args.audio,
    )

    print(f"\n{'='*60}")
    print(f"{args.content_type}: \"{args.theme}\"")
    print(f"{'='*60}")

    result = run_generation_pipeline(
        request,
        on_progress=print_progress,
        writer=writer,
        image_generator=image_generator,
        assembler=assembler,
    )

    os.makedirs(args.out, exist_ok=True)
    with open(os.path.join(args.out, "bundle.json"), "w") as f:
        json.dump(result.bundle.to_record(), f, indent=2)
    with open(os.path.join(args.out, "image.png"), "wb") as f:
        f.write(result.image.data)
    with open(os.path.join(args.out, "video.mp4"), "wb") as f:
        f.write(result.video)

    print(f"\nCaption A: {result.bundle.caption}")
    print(f"Caption B: {result.bundle.caption_b}")
    print(f"Hashtags:  {' '.join(result.bundle.hashtags)}")
    print(f"\nWrote bundle.json, image.png, video.mp4 to {args.out}/")


if __name__ == "__main__":
    main()
