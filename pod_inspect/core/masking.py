from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from re import Pattern

MASK_TOKEN = "[MASKED]"


@dataclass(frozen=True)
class RegexMasker:
    """Redacts configured patterns from container log text."""

    patterns: tuple[Pattern[str], ...] = field(default_factory=tuple)

    @classmethod
    def from_patterns(cls, patterns: list[str]) -> RegexMasker:
        compiled: list[Pattern[str]] = []
        for idx, pattern in enumerate(patterns):
            try:
                compiled.append(re.compile(pattern))
            except re.error as exc:
                raise ValueError(f"invalid masking regex at index {idx}: {pattern}") from exc
        return cls(patterns=tuple(compiled))

    @property
    def enabled(self) -> bool:
        return bool(self.patterns)

    def mask_text(self, text: str) -> str:
        if not text or not self.patterns:
            return text
        masked = text
        for pattern in self.patterns:
            masked = pattern.sub(MASK_TOKEN, masked)
        return masked

    def mask_logs(self, logs: Mapping[str, str]) -> dict[str, str]:
        return {container: self.mask_text(text) for container, text in logs.items()}


def build_masker(patterns: list[str]) -> RegexMasker:
    return RegexMasker.from_patterns(patterns)
