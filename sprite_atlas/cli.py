"""Command line interface for sprite-atlas.

Usage:
    # Pack every PNG of a folder into build/atlas.png + build/atlas.json
    sprite-atlas pack sprites/hero --out-dir build --padding 2

    # Make magenta transparent
    sprite-atlas remove-colors sheet.png clean.png --color 255,0,255,10

    # Cut a sheet at y=64 and x=64,128
    sprite-atlas split clean.png cells --horizontal 64 --vertical 64 --vertical 128

    # Quantize to roughly 60% of the palette at half size
    sprite-atlas compress atlas.png atlas_small.png --quality 60 --scale 50
"""

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__, globs
from .errors import AtlasError
from .operators.atlas import SpriteInput, pack_atlas
from .operators.compress import compress_image, get_image_size
from .operators.files import save_image
from .operators.preprocess import remove_colors_image, split_image_cells
from .settings import AtlasSettings
from .utils.images import encode_png, open_image

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".webp", ".jpg", ".jpeg", ".bmp", ".gif")


def natural_key(s: str):
    return [int(t) if t.isdigit() else t.lower() for t in re.split(r"(\d+)", s)]


def collect_sprite_paths(sources: Sequence[str]) -> List[Path]:
    """Expand files and folders into image paths, folders in natural order."""
    paths = []
    for source in sources:
        path = Path(source)
        if path.is_dir():
            found = [p for p in path.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES]
            paths.extend(sorted(found, key=lambda p: natural_key(p.name)))
        else:
            paths.append(path)
    return paths


def load_offsets(path: Optional[str]) -> Dict[str, Tuple[int, int]]:
    """Read a {name: {"x": int, "y": int}} offsets file."""
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Offsets file must hold a JSON object, got {}".format(type(raw).__name__))

    offsets = {}
    for name, value in raw.items():
        try:
            offsets[name] = (int(value.get("x", 0)), int(value.get("y", 0)))
        except (AttributeError, TypeError, ValueError) as e:
            raise ValueError("Invalid offsets for {!r}: {!r}".format(name, value)) from e
    return offsets


def parse_color(text: str) -> Dict[str, int]:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) not in (3, 4):
        raise argparse.ArgumentTypeError("expected r,g,b or r,g,b,tolerance, got {!r}".format(text))
    try:
        values = [int(p) for p in parts]
    except ValueError:
        raise argparse.ArgumentTypeError("color components must be integers: {!r}".format(text)) from None
    tolerance = values[3] if len(values) == 4 else 10
    return {"r": values[0], "g": values[1], "b": values[2], "tolerance": tolerance}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprite-atlas",
        description="Prepare 2D sprite assets and pack them into texture atlases.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s {}".format(__version__))
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    pack = sub.add_parser("pack", help="Pack sprites into an atlas image and JSON manifest")
    pack.add_argument("sources", nargs="+", help="Sprite files or folders of sprites")
    pack.add_argument("-o", "--out-dir", default=".", help="Output directory (default: current directory)")
    pack.add_argument("--name", default="atlas", help="Base name of the output files (default: atlas)")
    pack.add_argument("--padding", type=int, default=2, help="Pixels around each sprite (default: 2)")
    pack.add_argument("--packer", default=globs.DEFAULT_PACKER,
                      choices=[globs.PackerTypes.SMALLEST_SECTION, globs.PackerTypes.MAX_RECTS,
                               globs.PackerTypes.BINARY_TREE],
                      help="Rectangle packing strategy")
    pack.add_argument("--max-size", type=int, default=globs.MAX_BIN_SIZE,
                      help="Largest atlas side at full resolution (default: {})".format(globs.MAX_BIN_SIZE))
    pack.add_argument("--fallback-max-size", type=int, default=globs.FALLBACK_MAX_BIN_SIZE,
                      help="Largest atlas side once downscaled (default: {})".format(globs.FALLBACK_MAX_BIN_SIZE))
    pack.add_argument("--offsets", default=None, help='JSON file of {"name": {"x": 0, "y": 0}} sprite offsets')
    pack.set_defaults(func=run_pack)

    remove = sub.add_parser("remove-colors", help="Make chroma-keyed colors transparent")
    remove.add_argument("input")
    remove.add_argument("output")
    remove.add_argument("--color", type=parse_color, action="append", required=True,
                        help="r,g,b[,tolerance] with tolerance 0-100 (default 10), repeatable")
    remove.set_defaults(func=run_remove_colors)

    split = sub.add_parser("split", help="Cut a sheet into cells along grid lines")
    split.add_argument("input")
    split.add_argument("out_dir")
    split.add_argument("--horizontal", type=int, action="append", default=[], help="y of a cut line, repeatable")
    split.add_argument("--vertical", type=int, action="append", default=[], help="x of a cut line, repeatable")
    split.set_defaults(func=run_split)

    compress = sub.add_parser("compress", help="Re-encode as a palette PNG")
    compress.add_argument("input")
    compress.add_argument("output")
    compress.add_argument("--quality", type=int, default=globs.DEFAULT_COMPRESS_QUALITY, help="0-100 (default: 80)")
    compress.add_argument("--scale", type=int, default=globs.DEFAULT_COMPRESS_SCALE, help="percent 1-100 (default: 100)")
    compress.set_defaults(func=run_compress)

    return parser


def run_pack(args: argparse.Namespace, console: Console) -> None:
    paths = collect_sprite_paths(args.sources)
    offsets = load_offsets(args.offsets)

    sprites = []
    for path in paths:
        offset_x, offset_y = offsets.get(path.stem, (0, 0))
        sprites.append(SpriteInput(path.stem, open_image(path), offset_x, offset_y))

    image_name = "{}.png".format(args.name)
    settings = AtlasSettings(
        max_size=args.max_size,
        fallback_max_size=args.fallback_max_size,
        packer_type=args.packer,
        image_name=image_name,
    )
    output = pack_atlas(sprites, args.padding, settings)
    image_path, json_path = output.save(args.out_dir, image_name, "{}.json".format(args.name))

    table = Table(title="Atlas")
    table.add_column("Sprites", justify="right")
    table.add_column("Size")
    table.add_column("Scale", justify="right")
    table.add_column("Image")
    table.add_column("Manifest")
    table.add_row(str(len(sprites)), "{}x{}".format(*output.size), str(output.scale), str(image_path), str(json_path))
    console.print(table)
    if output.scale != 1.0:
        console.print("[yellow]Sprites were downscaled to {} to fit.[/yellow]".format(output.scale))


def run_remove_colors(args: argparse.Namespace, console: Console) -> None:
    cleaned = remove_colors_image(open_image(args.input), args.color)
    save_image(encode_png(cleaned), args.output)
    console.print("[green]Saved[/green] {}".format(args.output))


def run_split(args: argparse.Namespace, console: Console) -> None:
    rows = split_image_cells(open_image(args.input), args.horizontal, args.vertical)
    out_dir = Path(args.out_dir)
    stem = Path(args.input).stem
    count = 0
    for row_idx, row in enumerate(rows):
        for col_idx, cell in enumerate(row):
            save_image(cell, out_dir / "{}_{}_{}.png".format(stem, row_idx, col_idx))
            count += 1
    console.print("[green]Saved[/green] {} cells ({} rows) to {}".format(count, len(rows), out_dir))


def run_compress(args: argparse.Namespace, console: Console) -> None:
    source = Path(args.input).read_bytes()
    result = compress_image(source, args.quality, args.scale)
    save_image(result["base64"], args.output)
    console.print(
        "[green]Saved[/green] {} ({}x{}, {} -> {} bytes)".format(
            args.output, result["width"], result["height"], get_image_size(source), result["size_bytes"]
        )
    )


def configure_logging(verbosity: int, console: Console) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    console = Console(stderr=False)
    configure_logging(args.verbose, Console(stderr=True))

    try:
        args.func(args, console)
    except (AtlasError, ValueError, OSError) as e:
        console.print("[bold red]Error:[/bold red] {}".format(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
