"""Command registry for sprite-atlas.

This module exposes every operation of the package as a named command
taking and returning plain JSON-compatible values, the shape a desktop
front-end sends over its bridge. Bad arguments and library failures never
escape as exceptions: each call yields a ``CommandResult`` holding either
the value or a single descriptive error message. Bugs inside a handler
propagate.
"""

import inspect
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .errors import AtlasError
from .operators.atlas import SpriteInput, pack_atlas
from .operators.compress import compress_image, get_image_size
from .operators.files import load_image, save_file, save_image
from .operators.preprocess import remove_colors, split_image
from .settings import AtlasSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    value: Any = None
    error: Optional[str] = None


def sprites_from_payload(sprites: Sequence[Mapping[str, Any]]) -> List[SpriteInput]:
    """Convert {'name', 'base64', 'offsetX', 'offsetY'} mappings to sprites.

    Missing offsets default to 0.
    """
    try:
        return [
            SpriteInput(
                name=str(sprite["name"]),
                image=sprite["base64"],
                offset_x=int(sprite.get("offsetX", 0)),
                offset_y=int(sprite.get("offsetY", 0)),
            )
            for sprite in sprites
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError("Invalid sprite payload: {}".format(e)) from e


def _create_atlas(sprites: Sequence[Mapping[str, Any]], padding: int = 0,
                  packer_type: Optional[str] = None) -> Dict[str, str]:
    settings = AtlasSettings(packer_type=packer_type) if packer_type else None
    output = pack_atlas(sprites_from_payload(sprites), padding, settings)
    return {"image_base64": output.image_base64, "json": output.json}


def _remove_colors(base64_input: str, colors: Sequence[Mapping[str, int]]) -> str:
    return remove_colors(base64_input, colors)


def _split_image(base64_input: str, config: Mapping[str, Any]) -> List[str]:
    return split_image(
        base64_input,
        config.get("horizontal_lines", ()),
        config.get("vertical_lines", ()),
    )


def _save_image(base64_input: str, path: str) -> None:
    save_image(base64_input, path)


def _save_file(content: str, path: str) -> None:
    save_file(content, path)


def _compress_image(base64_input: str, quality: int = 80, scale: int = 100) -> Dict[str, Any]:
    return compress_image(base64_input, quality, scale)


def _get_image_size(base64_input: str) -> int:
    return get_image_size(base64_input)


__commands = MappingProxyType({
    "load_image": load_image,
    "remove_colors": _remove_colors,
    "split_image": _split_image,
    "save_image": _save_image,
    "create_atlas": _create_atlas,
    "save_file": _save_file,
    "compress_image": _compress_image,
    "get_image_size": _get_image_size,
})


def get_commands() -> Mapping[str, Callable[..., Any]]:
    """Return the read-only mapping of command names to handlers."""
    return __commands


def invoke(command: str, **kwargs: Any) -> CommandResult:
    """Run a command by name.

    Args:
        command: Registered command name.
        **kwargs: The command's arguments.

    Returns:
        The command's value, or its failure as one message.
    """
    handler = __commands.get(command)
    if handler is None:
        return CommandResult(False, error="Unknown command: {}".format(command))

    try:
        bound = inspect.signature(handler).bind(**kwargs)
    except TypeError as e:
        logger.error("Command %s called with bad arguments: %s", command, e)
        return CommandResult(False, error="Invalid arguments for {}: {}".format(command, e))

    try:
        value = handler(*bound.args, **bound.kwargs)
    except (AtlasError, ValueError, OSError) as e:
        logger.error("Command %s failed: %s", command, e)
        return CommandResult(False, error=str(e))

    return CommandResult(True, value=value)
