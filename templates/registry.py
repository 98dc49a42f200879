"""Template registry implementation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from utils import get_logger

from .errors import DefinitionError
from .loader import BUILTIN_COMMANDS_FILE, read_definitions
from .parser import parse_entry, strip_markers
from .types import CommandTemplate

logger = get_logger(__name__)

DUPLICATE_POLICIES = ("reject", "shadow")


def normalize_template(template: str) -> str:
    """Collapse runs of whitespace so equivalent templates compare equal."""
    return " ".join(template.split())


def search_templates(templates: Iterable[CommandTemplate], query: str) -> list[CommandTemplate]:
    """Templates whose visible description or template text contains `query` (case-insensitive)."""
    needle = query.strip().lower()
    if not needle:
        return list(templates)
    return [
        t
        for t in templates
        if needle in strip_markers(t.description).lower() or needle in t.template.lower()
    ]


class TemplateRegistry:
    """Flat, insertion-ordered set of parsed command templates.

    Entries that fail to parse are recorded in `errors` and skipped; the rest
    still load. Once loading is done the registry is only read.
    """

    def __init__(self, duplicate_policy: str = "reject") -> None:
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Unknown duplicate policy: {duplicate_policy}. Available: {list(DUPLICATE_POLICIES)}"
            )
        self.duplicate_policy = duplicate_policy
        self.templates: dict[str, CommandTemplate] = {}
        self.errors: list[DefinitionError] = []

    async def load(
        self,
        user_file: Path | None = None,
        extra_files: Iterable[Path] = (),
        include_builtin: bool = True,
    ) -> None:
        """Load built-in commands, then the user file, then any extra files."""
        if include_builtin:
            await self.load_file(BUILTIN_COMMANDS_FILE, source="builtin")
        if user_file is not None:
            await self.load_file(user_file)
        for path in extra_files:
            await self.load_file(path)

    async def load_file(self, path: Path, source: str | None = None) -> int:
        source = source or str(path)
        try:
            entries = await read_definitions(path, source=source)
        except DefinitionError as e:
            self._reject(e)
            return 0
        return self.load_entries(entries, source=source)

    def load_entries(self, entries: Iterable[object], source: str) -> int:
        """Parse and add decoded command entries; returns how many were added."""
        loaded = 0
        for entry in entries:
            try:
                self.add(parse_entry(entry, source=source))
            except DefinitionError as e:
                self._reject(e)
                continue
            loaded += 1
        logger.info(f"Loaded {loaded} templates from {source}")
        return loaded

    def add(self, template: CommandTemplate) -> None:
        """Insert a template.

        Raises:
            DefinitionError: If the normalized template already exists and the
                policy is "reject".
        """
        key = normalize_template(template.template)
        existing = self.templates.get(key)
        if existing is not None:
            if self.duplicate_policy == "reject":
                raise DefinitionError(
                    f"Duplicate template (already defined in {existing.source})",
                    template=template.template,
                    source=template.source,
                )
            logger.info(f"Template '{key}' from {template.source} shadows {existing.source}")
        self.templates[key] = template

    def get(self, template: str) -> CommandTemplate | None:
        return self.templates.get(normalize_template(template))

    def list_templates(self) -> list[CommandTemplate]:
        return list(self.templates.values())

    def search(self, query: str) -> list[CommandTemplate]:
        return search_templates(self.templates.values(), query)

    def _reject(self, error: DefinitionError) -> None:
        logger.warning(f"Rejected definition: {error}")
        self.errors.append(error)

    def __len__(self) -> int:
        return len(self.templates)

    def __iter__(self) -> Iterator[CommandTemplate]:
        return iter(self.templates.values())
