"""Command-line front end: select two images, submit once, save or print the result."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from image_composer.compose.interfaces import ComposeEngineProtocol
from image_composer.config import ComposerConfig, load_config
from image_composer.errors import ComposerError, ConfigurationError
from image_composer.factory import create_composer
from image_composer.image.encoder import ACCEPTED_MEDIA_TYPES
from image_composer.logging_utils import RunLogger, create_logger
from image_composer.session import CompositionSession, ImageRole

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="image-composer",
        description="Composite a product into a photo of a person with a Gemini image model.",
    )
    ap.add_argument("--person", required=True, type=Path, help="Image of the person (PNG, JPEG or WEBP)")
    ap.add_argument("--product", required=True, type=Path, help="Image of the product (PNG, JPEG or WEBP)")
    ap.add_argument("--prompt", default=None, help="Instruction for the model (defaults to the configured instruction)")
    ap.add_argument("--output", type=Path, default=None, help="Write the generated image here instead of printing a data URI")
    ap.add_argument("--config", type=Path, default=None, help="YAML or JSON(C) configuration file")
    ap.add_argument("--model", default=None, help="Override the configured model name")
    ap.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARN", "ERROR"])
    ap.add_argument("--log-file", type=Path, default=None)
    return ap


def resolve_config(args: argparse.Namespace) -> ComposerConfig:
    config = load_config(args.config) if args.config else ComposerConfig.from_env()
    config = config.with_overrides(model=args.model)
    if args.log_level or args.log_file:
        config.logging.level = args.log_level or config.logging.level
        config.logging.logfile = args.log_file or config.logging.logfile
    return config


async def run(
    args: argparse.Namespace,
    config: ComposerConfig,
    composer: ComposeEngineProtocol,
    log: RunLogger,
) -> int:
    session = CompositionSession(composer=composer, instruction=config.default_instruction)

    for role, path in ((ImageRole.PERSON, args.person), (ImageRole.PRODUCT, args.product)):
        encoded = await log.atimed(
            "encode",
            lambda img, r=role: f"{r.value}: {img.media_type}" if img else f"{r.value}: not loaded",
            session.select_image(role, path),
        )
        if encoded is None:
            log.log("encode", session.error or f"{role.value} image missing", level="ERROR")
            return EXIT_FAILED
        if encoded.media_type not in ACCEPTED_MEDIA_TYPES:
            log.log("encode", f"{role.value} image has unusual type {encoded.media_type}", level="WARN")

    result = await log.atimed(
        "compose",
        lambda res: "image received" if res else "no result",
        session.submit(args.prompt),
    )
    if result is None:
        log.log("compose", session.error or "composition failed", level="ERROR")
        return EXIT_FAILED

    if result.caption:
        print(result.caption)
    if args.output:
        try:
            target = session.save_result(args.output)
        except ComposerError as exc:
            log.log("save", str(exc), level="ERROR")
            return EXIT_FAILED
        log.log("save", f"wrote {target}")
    else:
        print(result.image)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()
    try:
        config = resolve_config(args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    logging.basicConfig(
        level=logging.DEBUG if config.logging.level == "DEBUG" else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    log = create_logger(config.logging.level, config.logging.logfile)
    try:
        log.log("config", f"model={config.model}")
        return asyncio.run(run(args, config, create_composer(config), log))
    finally:
        log.close()


__all__ = ["build_parser", "main", "resolve_config", "run"]
