#!/usr/bin/env python
"""Script to generate a design image from the command line without the API."""
from __future__ import annotations

import argparse
import asyncio
import base64
import mimetypes
import sys
from pathlib import Path

from app.config import get_settings
from app.models import GenerationRequest, InlineImage, build_payload
from app.services.gemini import GeminiAPIError, GeminiClient


def load_image(path: Path) -> InlineImage:
    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type is None or not mime_type.startswith("image/"):
        raise SystemExit(f"Cannot determine image type of {path}")
    return InlineImage(mime_type=mime_type, base64_data=base64.b64encode(path.read_bytes()).decode("ascii"))


async def run(job: GenerationRequest, output: Path) -> int:
    settings = get_settings()
    if not settings.gemini_api_key:
        print("GEMINI_API_KEY is not set", file=sys.stderr)
        return 1

    client = GeminiClient.from_settings(settings)
    try:
        base64_data = await client.generate(build_payload(job))
    except GeminiAPIError as exc:
        print(f"Request rejected ({exc.status}): {exc.details}", file=sys.stderr)
        return 1
    finally:
        await client.close()

    if not base64_data:
        print("Image data not found in API response.", file=sys.stderr)
        return 1

    output.write_bytes(base64.b64decode(base64_data))
    print(f"Wrote {output}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a t-shirt design image")
    parser.add_argument("--prompt")
    parser.add_argument("--image", type=Path, help="Reference image to edit")
    parser.add_argument("--output", type=Path, default=Path("design.png"))
    args = parser.parse_args()

    if not args.prompt and args.image is None:
        parser.error("one of --prompt or --image is required")

    job = GenerationRequest(prompt=args.prompt, image=load_image(args.image) if args.image else None)
    sys.exit(asyncio.run(run(job, args.output)))


if __name__ == "__main__":
    main()
