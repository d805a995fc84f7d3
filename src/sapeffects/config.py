"""
Scanner configuration.

Lexing switches are consolidated here as a validated dataclass with
sensible defaults, so callers never have to touch the keyword tables.

Usage:
    from sapeffects.config import ScannerConfig

    cfg = ScannerConfig(emit_unknown=False)
    assert not cfg.validate()
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScannerConfig:
    """Configuration for a single scan.

    Attributes:
        skip_chars: Characters silently dropped between lexemes.
        emit_unknown: Emit UNKNOWN tokens for words with no keyword entry.
            When False those words are dropped.
        food_suffix: Word that, following a capitalized name, marks it as food.
    """
    skip_chars: str = " \t\r"
    emit_unknown: bool = True
    food_suffix: str = "Perk"

    def validate(self) -> list[str]:
        """Return a list of validation errors (empty if valid)."""
        errors: list[str] = []
        if "\n" in self.skip_chars:
            errors.append("skip_chars must not contain newline (it advances the line counter)")
        for chr_ in self.skip_chars:
            if not chr_.isspace():
                errors.append(f"skip_chars may only contain whitespace, got {chr_!r}")
        if not self.food_suffix:
            errors.append("food_suffix is required")
        elif not (self.food_suffix.isalpha() and self.food_suffix[0].isupper()):
            errors.append(f"food_suffix must be a capitalized word, got {self.food_suffix!r}")
        return errors


DEFAULT_CONFIG = ScannerConfig()
