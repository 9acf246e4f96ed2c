"""
Offline console demo — chat with the library assistant in the terminal.

Runs the real classifier, resolver, and local generator over the sample
catalog. No API key is needed; if OPENAI_API_KEY is set the session
starts in AI mode and falls back locally on any service failure.

Usage:
    python console_demo.py
    python console_demo.py --role staff
    python console_demo.py --scenario discovery
"""

import argparse
import random
from typing import Optional

from catalog_chat.config import settings
from catalog_chat.conversation.dialogue_session import DialogueSession
from catalog_chat.schemas.catalog_schema import Role
from catalog_chat.tools.catalog import SAMPLE_CATALOG, InMemoryCatalog

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleSession:
    """Drives one ``DialogueSession`` from stdin or a scripted scenario."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "discovery": [
            "Hello!",
            "Do you have Dune?",
            "Who wrote The Hobbit?",
            "Show me books by Tolkien",
            "How many fantasy books do you have?",
            "Recommend me a fantasy book",
            "thanks",
        ],
        "librarian": [
            "help",
            "How many books are available?",
            "Show me library statistics",
            "Recommend books to promote",
            "I'm bored",
        ],
        "edge": [
            "",
            "Do you have Moby Dick?",
            "find xyzzy",
            "Show me library statistics",
            "add a book",
        ],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self, role: Role, seed: Optional[int] = None) -> None:
        self.catalog = InMemoryCatalog.from_records(SAMPLE_CATALOG)
        self.session = DialogueSession(role, self.catalog, rng=random.Random(seed))

    def agent_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.assistant.name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  LIBRARY ASSISTANT - {title}{RESET}")
        print(f"{BOLD}  Role: {self.session.role.value} | Books: {len(self.catalog.list())}{RESET}")
        print(f"{BOLD}  {self.session.ai_status()}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _summary(self, title: str) -> None:
        turns = self.session.transcript
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {title}{RESET}")
        print(f"{DIM}  Turns recorded: {len(turns)}{RESET}")
        print(f"{DIM}  AI mode trace: {' -> '.join(self.session.ai_mode.get_mode_trace())}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}[You] {RESET}{step}")
            self._process_input(step)
        self._summary(f"Scenario '{scenario}' complete.")

    def run(self) -> None:
        self._banner("Console Demo (type 'quit' to exit)")
        self.agent_say(f"Hi! I'm {settings.assistant.name}. Ask me about the books in our library.")

        while True:
            try:
                user_input = input(f"\n{BLUE}[You] {RESET}").strip()
            except EOFError:
                break
            if user_input.lower() in ("quit", "exit", "q"):
                break
            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.agent_say("That was quite long. Could you keep it brief for me?")
                continue
            self._process_input(user_input)

        self._summary("Session ended.")

    def _process_input(self, text: str) -> None:
        was_enabled = self.session.is_ai_enabled
        self.agent_say(self.session.handle(text))
        if was_enabled and not self.session.is_ai_enabled:
            self.system_log("External service failed; switched to fallback mode")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline library assistant demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument(
        "--role",
        choices=[r.value for r in Role],
        default=Role.PATRON.value,
        help="Who is talking to the assistant",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reply variation")
    args = parser.parse_args()

    console = ConsoleSession(Role(args.role), seed=args.seed)
    if args.scenario:
        console.run_scenario(args.scenario)
    else:
        console.run()


if __name__ == "__main__":
    main()
