"""Точка входа: склейка изображений из командной строки."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from photojoin.controllers.join_controller import JoinController
from photojoin.models.errors import ConfigurationError, PhotoJoinError
from photojoin.models.join_options import Direction, JoinConfig, JoinOptions, ResizeFilter, Sizing

log = logging.getLogger("photojoin")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photojoin",
        description="Join photos side-by-side or stacked, resizing them to a common size",
    )
    parser.add_argument("-i", "--input", dest="inputs", nargs="+", action="extend", required=True,
                        help="Provides an input image or images to the joiner")
    parser.add_argument("-o", "--output", required=True, help="Set the image output file")
    parser.add_argument("-d", "--direction", required=True, type=str.lower, choices=Direction.choices(),
                        help="Set the direction of the output image")
    parser.add_argument("--filter", type=str.lower, choices=ResizeFilter.choices(),
                        default=ResizeFilter.GAUSSIAN.value, help="Set the filter to use when resizing images")
    parser.add_argument("-f", "--override_output", action="store_true",
                        help="Overrides the output file if it exists when present")
    parser.add_argument("-l", "--size_to_largest", action="store_true",
                        help="Resize all images (keeping the aspect ratio) to fit the size of the largest image")
    parser.add_argument("-s", "--size_to_smallest", action="store_true",
                        help="Resize all images (keeping the aspect ratio) to fit the size of the smallest image")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every overlay step")
    return parser


def config_from_args(args: argparse.Namespace) -> JoinConfig:
    """Собирает `JoinConfig` из аргументов.

    Raises:
        ConfigurationError: если одновременно заданы `--size_to_largest` и `--size_to_smallest`.
    """
    if args.size_to_largest and args.size_to_smallest:
        raise ConfigurationError("only one size argument may be provided")
    sizing = Sizing.TO_LARGEST if args.size_to_largest else Sizing.TO_SMALLEST

    options = JoinOptions(
        direction=Direction.parse(args.direction),
        sizing=sizing,
        filter=ResizeFilter.parse(args.filter),
    )
    return JoinConfig(
        inputs=tuple(Path(p) for p in args.inputs),
        output=Path(args.output),
        options=options,
        override_output=args.override_output,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Разбирает аргументы, запускает склейку и возвращает код выхода."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        log.error("%s", exc)
        return EXIT_CONFIG_ERROR

    try:
        JoinController().run(config)
    except (PhotoJoinError, OSError, ValueError) as exc:
        log.error("%s", exc)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
