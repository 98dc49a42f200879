"""Interactive command building: pick a template, then walk its groups."""

from __future__ import annotations

from session import Complete, FlagMenu, SelectionEngine, ValuePrompt
from templates import CommandTemplate, InputValidationError, SelectionStateError, TemplateRegistry
from utils import get_logger, terminal_ui
from utils.tui.menu_ui import MenuAction, pick_menu_action, pick_template, prompt_value

logger = get_logger(__name__)


class InteractiveSession:
    """Drives one SelectionEngine from the terminal."""

    def __init__(self, registry: TemplateRegistry, query: str | None = None):
        """Initialize interactive session.

        Args:
            registry: Loaded template registry
            query: Optional initial filter for the template picker
        """
        self.registry = registry
        self.query = query or ""

    async def choose_template(self) -> CommandTemplate | None:
        """Let the user pick a template; a query matching exactly one skips the picker."""
        if self.query:
            matches = self.registry.search(self.query)
            if len(matches) == 1:
                logger.info(f"Query '{self.query}' matched {matches[0].template!r}")
                return matches[0]
            if not matches:
                terminal_ui.print_warning(f"No command matches '{self.query}'")

        return await pick_template(self.registry.list_templates(), query=self.query)

    async def build_command(self, template: CommandTemplate) -> str | None:
        """Walk the template's groups; returns the final command or None if cancelled."""
        engine = SelectionEngine(template)
        error: str | None = None

        while not engine.is_finished:
            request = engine.request()

            if isinstance(request, FlagMenu):
                choice = await pick_menu_action(request, title=request.group)
                if choice is None:
                    engine.cancel()
                elif choice.action == MenuAction.CHOOSE:
                    engine.choose_flag(choice.index)
                elif choice.action == MenuAction.DESELECT:
                    engine.deselect_flag(choice.index)
                elif choice.action == MenuAction.SKIP:
                    engine.skip()
                else:
                    engine.done()
                continue

            if not isinstance(request, ValuePrompt):
                raise SelectionStateError(f"Unexpected request {request!r}")
            raw = await prompt_value(request, error=error)
            error = None
            if raw is None:
                engine.cancel()
            elif not raw.strip() and request.can_skip:
                engine.skip()
            elif not raw.strip() and request.flag is not None:
                engine.back()
            else:
                try:
                    engine.submit(raw)
                except InputValidationError as e:
                    error = e.hint
                    terminal_ui.print_warning(str(e))

        if isinstance(engine.state, Complete):
            return engine.final_command
        logger.info(f"Session for {template.template!r} cancelled")
        return None

    async def run(self) -> str | None:
        template = await self.choose_template()
        if template is None:
            return None
        terminal_ui.print_info(template.template)
        return await self.build_command(template)


async def run_interactive_mode(registry: TemplateRegistry, query: str | None = None) -> str | None:
    """Run one interactive session and return the built command (None if cancelled).

    Args:
        registry: Loaded template registry
        query: Optional initial filter for the template picker
    """
    session = InteractiveSession(registry, query=query)
    return await session.run()
