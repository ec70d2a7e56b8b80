"""Transient form state for the add-word and edit-word flows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from vocab_editor.exceptions import ValidationError
from vocab_editor.models import PartOfSpeech, Word


@dataclass(slots=True)
class DraftDefinition:
    """A definition row as typed by the user; may be incomplete."""

    text: str = ""
    part_of_speech: PartOfSpeech | None = None
    definition_id: int | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.text.strip()) and self.part_of_speech is not None


class EditSession:
    """Draft expression plus an ordered list of at least one definition row.

    The same class backs both flows. An add session is opened blank; an
    edit session is seeded from an existing word and remembers it as its
    target until closed.
    """

    def __init__(self) -> None:
        self.expression = ""
        self._drafts: list[DraftDefinition] = [DraftDefinition()]
        self.target: Word | None = None
        self.target_index: int | None = None
        self.is_open = False

    def __len__(self) -> int:
        return len(self._drafts)

    def __repr__(self) -> str:
        return (
            f"EditSession(expression={self.expression!r}, "
            f"drafts={len(self._drafts)}, open={self.is_open})"
        )

    @property
    def drafts(self) -> tuple[DraftDefinition, ...]:
        return tuple(self._drafts)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        self.reset()
        self.is_open = True

    def open_for(self, word: Word, index: int | None = None) -> None:
        """Seed the draft from *word* and record it as the edit target."""
        self.reset()
        self.expression = word.expression
        seeded = [
            DraftDefinition(
                text=d.text,
                part_of_speech=d.part_of_speech,
                definition_id=d.id,
            )
            for d in word.definitions
        ]
        self._drafts = seeded or [DraftDefinition()]
        self.target = word
        self.target_index = index
        self.is_open = True

    def close(self) -> None:
        self.reset()
        self.is_open = False

    def reset(self) -> None:
        self.expression = ""
        self._drafts = [DraftDefinition()]
        self.target = None
        self.target_index = None

    # ------------------------------------------------------------------
    # Definition rows
    # ------------------------------------------------------------------

    def add_definition(self) -> DraftDefinition:
        draft = DraftDefinition()
        self._drafts.append(draft)
        return draft

    def remove_definition(self, index: int) -> DraftDefinition:
        if len(self._drafts) <= 1:
            raise ValidationError("at least one definition row is required")
        return self._drafts.pop(index)

    def set_text(self, index: int, text: str) -> None:
        self._drafts[index].text = text

    def set_part_of_speech(self, index: int, value: Any) -> None:
        self._drafts[index].part_of_speech = PartOfSpeech.parse(value)

    def replace_definitions(self, drafts: list[DraftDefinition]) -> None:
        if not drafts:
            raise ValidationError("at least one definition row is required")
        self._drafts = list(drafts)

    def removed_definition_ids(self) -> list[int]:
        """Ids of the target's definitions that no longer have a row."""
        if self.target is None:
            return []
        kept = {d.definition_id for d in self._drafts if d.definition_id is not None}
        return [
            d.id for d in self.target.definitions
            if d.id is not None and d.id not in kept
        ]
