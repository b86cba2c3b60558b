"""Command-line interface for promptstudio."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from promptstudio.core.api.media.elevenlabs import ELEVEN_LABS_MODELS, ElevenLabsVoiceClient
from promptstudio.core.api.media.factory import (
    VOICE_VENDORS,
    create_image_client,
    create_script_client,
    create_voice_client,
)
from promptstudio.core.api.media.models import ImageRequest, StylePreset, VoiceResult
from promptstudio.core.config.loader import load_app_config
from promptstudio.core.config.models import AppConfig
from promptstudio.core.library import (
    LibraryError,
    LibraryKind,
    LibraryStore,
    audio_record,
    image_records,
    script_record,
    script_title,
)
from promptstudio.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)


def _require_text(value: str, label: str) -> str | None:
    text = value.strip()
    if not text:
        console.print(f"[red]ERROR: {label} cannot be empty[/red]")
        return None
    return text


def _require_key(value: str | None, env_var: str) -> str | None:
    if not value:
        console.print(f"[red]ERROR: No API key configured. Set {env_var} or add it to config[/red]")
        return None
    return value


def _fail(message: str | None) -> int:
    console.print(f"[red]ERROR: {escape(str(message))}[/red]")
    return 1


async def run_script(
    args: argparse.Namespace,
    app_config: AppConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Generate a script and print it.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    prompt = _require_text(args.prompt, "Prompt")
    api_key = _require_key(app_config.api_keys.gemini, "GEMINI_API_KEY")
    if prompt is None or api_key is None:
        return 1

    client = create_script_client(app_config, transport=transport)
    with console.status("Generating script..."):
        result = await client.generate_script(prompt, api_key)
    if not result.ok:
        return _fail(result.error)

    console.print(result.content, markup=False, highlight=False)

    if args.save:
        saved = LibraryStore(app_config.library_dir).add(script_record(prompt, result))
        console.print(f"\n[green]Saved script:[/green] {saved.id} ({escape(saved.title)})")
    return 0


async def run_image(
    args: argparse.Namespace,
    app_config: AppConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Generate images, optionally writing PNGs and saving to the library."""
    prompt = _require_text(args.prompt, "Prompt")
    api_key = _require_key(app_config.api_keys.stability, "STABILITY_API_KEY")
    if prompt is None or api_key is None:
        return 1

    try:
        params = ImageRequest(
            prompt=prompt,
            negative_prompt=args.negative,
            width=args.width,
            height=args.height,
            cfg_scale=args.cfg_scale,
            steps=args.steps,
            seed=args.seed,
            style=StylePreset(args.style) if args.style else app_config.image.default_style,
        )
    except (ValidationError, ValueError) as e:
        return _fail(f"Invalid image parameters: {e}")

    client = create_image_client(app_config, transport=transport)
    with console.status("Generating image..."):
        result = await client.generate_image(params, api_key)
    if not result.ok:
        return _fail(result.error)

    out_dir = Path(args.out) if args.out else None
    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)

    for image in result.images:
        console.print(f"[green]Generated:[/green] {image.id} (seed {image.seed})")
        if out_dir is not None:
            path = out_dir / f"{image.id}.png"
            path.write_bytes(image.to_bytes())
            console.print(f"   Written to {escape(str(path))}")

    if args.save:
        store = LibraryStore(app_config.library_dir)
        for record in image_records(result):
            store.add(record)
        console.print(f"[green]Saved {len(result.images)} image(s) to the library[/green]")
    return 0


async def run_voices(
    args: argparse.Namespace,
    app_config: AppConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """List the voices available for a vendor."""
    client = create_voice_client(app_config, args.vendor, transport=transport)
    if isinstance(client, ElevenLabsVoiceClient):
        catalog = await client.list_voices(app_config.api_keys.elevenlabs or "")
    else:
        catalog = client.list_voices()

    if catalog.used_fallback and catalog.error is not None:
        console.print(f"[yellow]Using built-in voices: {escape(catalog.error.message)}[/yellow]")

    table = Table(title=f"{args.vendor} voices")
    table.add_column("Voice ID")
    table.add_column("Name")
    table.add_column("Category")
    for voice in catalog.voices:
        table.add_row(escape(voice.voice_id), escape(voice.name), escape(voice.category or ""))
    console.print(table)
    return 0


async def run_speak(
    args: argparse.Namespace,
    app_config: AppConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Synthesize speech, optionally writing the audio and saving to the library."""
    text = _require_text(args.text, "Text")
    if args.vendor == "ttsmaker":
        ignored = [
            flag
            for flag, value in (
                ("--stability", args.stability),
                ("--clarity", args.clarity),
                ("--model", args.model),
            )
            if value is not None
        ]
        if ignored:
            return _fail(f"{', '.join(ignored)} not supported by ttsmaker")
        api_key = _require_key(app_config.api_keys.ttsmaker, "TTSMAKER_API_KEY")
    else:
        api_key = _require_key(app_config.api_keys.elevenlabs, "ELEVENLABS_API_KEY")
    if text is None or api_key is None:
        return 1

    client = create_voice_client(app_config, args.vendor, transport=transport)
    result: VoiceResult
    try:
        with console.status("Generating speech..."):
            if isinstance(client, ElevenLabsVoiceClient):
                result = await client.synthesize_speech(
                    api_key, args.voice, text, args.stability, args.clarity, model_id=args.model
                )
            else:
                result = await client.synthesize_speech(api_key, args.voice, text)
    except ValidationError as e:
        return _fail(f"Invalid speech parameters: {e}")
    if not result.ok:
        return _fail(result.error)

    if result.audio is not None:
        size = len(result.audio)
        content_type = escape(str(result.content_type))
        console.print(f"[green]Generated {size} bytes of {content_type}[/green]")
        if args.out:
            path = Path(args.out)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(result.audio)
            console.print(f"   Written to {escape(str(path))}")
    else:
        console.print(f"[green]Audio URL:[/green] {escape(str(result.audio_url))}")
        if args.out:
            console.print("[yellow]Audio is hosted by the vendor; nothing written locally[/yellow]")

    if args.save:
        title = args.title or script_title(text)
        saved = LibraryStore(app_config.library_dir).add(
            audio_record(title, text, result, voice_id=args.voice)
        )
        console.print(f"[green]Saved audio:[/green] {saved.id} ({escape(saved.title)})")
    return 0


def run_library(args: argparse.Namespace, app_config: AppConfig) -> int:
    """List or delete saved library items."""
    store = LibraryStore(app_config.library_dir)
    kind = LibraryKind(args.kind)

    if args.library_cmd == "delete":
        if not store.delete(kind, args.id):
            return _fail(f"No {kind.value} record with id {args.id}")
        console.print(f"[green]Deleted {escape(args.id)}[/green]")
        return 0

    records = store.list(kind)

    if not records:
        console.print(f"No saved {kind.value}")
        return 0

    table = Table(title=f"Saved {kind.value}")
    table.add_column("ID")
    table.add_column("Created")
    table.add_column("Title / Prompt")
    for record in records:
        label = getattr(record, "title", None) or getattr(record, "prompt", "")
        created = record.created_at.strftime("%Y-%m-%d %H:%M")
        table.add_row(escape(record.id), created, escape(label))
    console.print(table)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="promptstudio",
        description="promptstudio - AI scripts, images and voice from the command line",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to app config (.json/.yaml, default: promptstudio.json if present)",
    )
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    script = sub.add_parser("script", help="Generate a script with Gemini")
    script.add_argument("prompt", help="What the script should be about")
    script.add_argument("--save", action="store_true", help="Save the script to the library")

    image = sub.add_parser("image", help="Generate images with Stability")
    image.add_argument("prompt", help="Image description")
    image.add_argument("--negative", default=None, help="Things to keep out of the image")
    image.add_argument("--width", type=int, default=1024, choices=[512, 640, 768, 1024])
    image.add_argument("--height", type=int, default=1024, choices=[512, 640, 768, 1024])
    image.add_argument("--cfg-scale", type=float, default=7.0, help="Prompt adherence (0-35)")
    image.add_argument("--steps", type=int, default=30, help="Diffusion steps (10-50)")
    image.add_argument("--seed", type=int, default=None, help="Pin the seed (default: random)")
    image.add_argument(
        "--style", default=None, choices=[s.value for s in StylePreset], help="Style preset"
    )
    image.add_argument("--out", default=None, help="Directory to write PNG files to")
    image.add_argument("--save", action="store_true", help="Save the images to the library")

    voices = sub.add_parser("voices", help="List available voices")
    voices.add_argument("--vendor", default="elevenlabs", choices=VOICE_VENDORS)

    speak = sub.add_parser("speak", help="Synthesize speech")
    speak.add_argument("text", help="Text to speak")
    speak.add_argument("--voice", required=True, help="Voice ID (see `promptstudio voices`)")
    speak.add_argument("--vendor", default="elevenlabs", choices=VOICE_VENDORS)
    speak.add_argument("--stability", type=float, default=None, help="Voice stability (0-1)")
    speak.add_argument("--clarity", type=float, default=None, help="Similarity boost (0-1)")
    speak.add_argument("--model", default=None, choices=list(ELEVEN_LABS_MODELS))
    speak.add_argument("--out", default=None, help="File to write the audio to")
    speak.add_argument("--title", default=None, help="Library title (default: first words)")
    speak.add_argument("--save", action="store_true", help="Save the audio to the library")

    library = sub.add_parser("library", help="Manage saved items")
    library_sub = library.add_subparsers(dest="library_cmd", required=True)
    kinds = [k.value for k in LibraryKind]
    lib_list = library_sub.add_parser("list", help="List saved items, newest first")
    lib_list.add_argument("kind", choices=kinds)
    lib_delete = library_sub.add_parser("delete", help="Delete a saved item")
    lib_delete.add_argument("kind", choices=kinds)
    lib_delete.add_argument("id", help="Record ID")

    return p


_ASYNC_COMMANDS = {
    "script": run_script,
    "image": run_image,
    "voices": run_voices,
    "speak": run_speak,
}


def run(args: argparse.Namespace) -> int:
    """Load configuration, configure logging and dispatch a parsed command."""
    try:
        app_config = load_app_config(args.config)
    except Exception as e:
        console.print(f"[red]ERROR: Could not load config: {escape(str(e))}[/red]")
        return 1

    log = app_config.logging
    configure_logging(
        level=args.log_level or log.level, format_string=log.format, structured=log.structured
    )

    try:
        if args.cmd == "library":
            return run_library(args, app_config)
        return asyncio.run(_ASYNC_COMMANDS[args.cmd](args, app_config))
    except LibraryError as e:
        return _fail(str(e))


def main() -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args()
    sys.exit(run(args))
