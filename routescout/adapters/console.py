"""Console adapter — yes/no confirmation for the operator."""

from typing import Callable

AFFIRMATIVE_PREFIX = "y"


def is_affirmative(answer: str) -> bool:
    return answer.strip().lower().startswith(AFFIRMATIVE_PREFIX)


def ask_yes_no(prompt: str, input_func: Callable[[str], str] = input) -> bool:
    """Ask a yes/no question; anything not starting with "y" means no."""
    return is_affirmative(input_func(f"{prompt} [y/N]: "))
