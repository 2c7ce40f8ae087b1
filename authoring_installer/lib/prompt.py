from __future__ import annotations

import getpass
import re
from typing import Callable, Optional

YES_RE = re.compile(r"^(y|yes)$", re.IGNORECASE)


class Prompter:
    """Line-based terminal prompts.

    Hidden prompts go through getpass so secrets are never echoed.
    """

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] = input,
        secret_fn: Callable[[str], str] = getpass.getpass,
        prefix: str = "> ",
    ) -> None:
        self._input = input_fn
        self._secret = secret_fn
        self.prefix = prefix

    def ask(self, label: str, *, default: Optional[str] = None, hidden: bool = False) -> str:
        shown = f"{self.prefix}{label}"
        if default not in (None, "") and not hidden:
            shown += f" ({default})"
        shown += ": "
        if hidden:
            return self._secret(shown)
        return self._input(shown)

    def confirm(self, question: str, *, default: bool = True) -> bool:
        answer = self.ask(question).strip()
        if not answer:
            return default
        return bool(YES_RE.match(answer))

    def say(self, text: str) -> None:
        print(text)
