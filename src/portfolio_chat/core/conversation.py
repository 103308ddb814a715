from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from portfolio_chat.core.profile import PortfolioPage

BOOT_LINES = (
    "Initializing recruiter assistant...",
    "Profile context loaded from this page.",
    "Ask anything about experience, projects or skills. Type 'help' for commands.",
)

COMMAND_NAMES = ("help", "projects", "skills", "contact", "about", "clear", "stop")


@dataclass
class CommandResult:
    """Output of a local terminal command.

    ``text`` is None when the command has no message of its own (``clear``).
    """

    text: Optional[str]
    replay_boot: bool = False


@dataclass
class Conversation:
    history: List[Dict[str, str]] = field(default_factory=list)
    booted: bool = False
    pending: bool = False

    def add_user(self, content: str) -> None:
        self.history.append({"role": "user", "content": content})

    def add_assistant(self, content: str) -> None:
        self.history.append({"role": "assistant", "content": content})

    def build_payload(self, prompt: str, context: str) -> Dict[str, Any]:
        return {"prompt": prompt, "context": context, "history": list(self.history)}

    def boot(self) -> List[str]:
        self.booted = True
        return list(BOOT_LINES)

    def reset(self) -> None:
        self.history.clear()
        self.booted = False


def _help(_conv: Conversation, _page: PortfolioPage, _email: str) -> CommandResult:
    return CommandResult(
        "\n".join(
            [
                "Available commands: " + ", ".join(COMMAND_NAMES),
                "You can also type any question about the profile "
                "(e.g., \"Tell me about the projects\").",
            ]
        )
    )


def _projects(_conv: Conversation, page: PortfolioPage, _email: str) -> CommandResult:
    if not page.project_names:
        return CommandResult("No project details found on the page.")
    return CommandResult("\n".join(page.project_names))


def _skills(_conv: Conversation, page: PortfolioPage, _email: str) -> CommandResult:
    line = next((ln for ln in page.context.split("\n") if ln.startswith("Skills")), None)
    return CommandResult(line or "Skills info not found.")


def _contact(_conv: Conversation, _page: PortfolioPage, email: str) -> CommandResult:
    return CommandResult(f"Email: {email}")


def _about(_conv: Conversation, page: PortfolioPage, _email: str) -> CommandResult:
    return CommandResult(page.about or "About section not found.")


def _clear(conv: Conversation, _page: PortfolioPage, _email: str) -> CommandResult:
    conv.reset()
    return CommandResult(None, replay_boot=True)


def _stop(conv: Conversation, _page: PortfolioPage, _email: str) -> CommandResult:
    if conv.pending:
        return CommandResult("Stopping current request...")
    return CommandResult("No request in progress.")


LOCAL_COMMANDS: Dict[str, Callable[[Conversation, PortfolioPage, str], CommandResult]] = {
    "help": _help,
    "projects": _projects,
    "skills": _skills,
    "contact": _contact,
    "about": _about,
    "clear": _clear,
    "stop": _stop,
}


def run_local_command(
    raw_input: str, conversation: Conversation, page: PortfolioPage, contact_email: str
) -> Optional[CommandResult]:
    """Run a local command if the whole input names one, otherwise return None."""
    handler = LOCAL_COMMANDS.get(raw_input.strip().lower())
    if handler is None:
        return None
    return handler(conversation, page, contact_email)
