"""Read command definition documents (YAML)."""

from __future__ import annotations

from pathlib import Path

import aiofiles
import aiofiles.os
import yaml

from .errors import DefinitionError

# Built-in commands are bundled with cmdrecall
BUILTIN_COMMANDS_FILE = Path(__file__).parent / "builtin.yaml"


async def read_text(path: Path) -> str:
    async with aiofiles.open(path, encoding="utf-8") as handle:
        return await handle.read()


def parse_document(text: str, source: str) -> list[object]:
    """Decode a definitions document into its list of command entries.

    Raises:
        DefinitionError: If the document is not valid YAML or has no `commands` list.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DefinitionError(f"Invalid YAML: {e}", source=source) from e

    if data is None:
        return []
    if not isinstance(data, dict):
        raise DefinitionError("Expected a mapping with a 'commands' list", source=source)

    commands = data.get("commands") or []
    if not isinstance(commands, list):
        raise DefinitionError("'commands' should be a list", source=source)
    return commands


async def read_definitions(path: Path, source: str | None = None) -> list[object]:
    """Read command entries from a file; a missing file yields no entries."""
    source = source or str(path)
    if not await aiofiles.os.path.exists(path):
        return []
    try:
        text = await read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise DefinitionError(f"Cannot read file: {e}", source=source) from e
    return parse_document(text, source)
