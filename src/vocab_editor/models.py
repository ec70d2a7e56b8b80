"""Domain model dataclasses and enums for vocab-editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from vocab_editor.difficulty import Difficulty, classify
from vocab_editor.exceptions import ValidationError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PartOfSpeech(str, Enum):
    """Part-of-speech tags accepted by the vocabulary service."""

    NOUN = "NOUN"
    PRONOUN = "PRONOUN"
    VERB = "VERB"
    ADJECTIVE = "ADJECTIVE"
    ADVERB = "ADVERB"
    ARTICLE = "ARTICLE"
    PREPOSITION = "PREPOSITION"
    CONJUNCTION = "CONJUNCTION"
    INTERJECTION = "INTERJECTION"

    @property
    def label(self) -> str:
        """Display label shown next to a definition."""
        return _POS_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> PartOfSpeech:
        """Resolve a member, wire value or display label."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            if key.upper() in cls.__members__:
                return cls[key.upper()]
            for pos, label in _POS_LABELS.items():
                if label == key:
                    return pos
        valid = ", ".join(cls.__members__)
        raise ValidationError(f"Invalid part of speech {value!r}. Valid: {valid}")


_POS_LABELS: dict[PartOfSpeech, str] = {
    PartOfSpeech.NOUN: "명사",
    PartOfSpeech.PRONOUN: "대명사",
    PartOfSpeech.VERB: "동사",
    PartOfSpeech.ADJECTIVE: "형용사",
    PartOfSpeech.ADVERB: "부사",
    PartOfSpeech.ARTICLE: "관사",
    PartOfSpeech.PREPOSITION: "전치사",
    PartOfSpeech.CONJUNCTION: "접속사",
    PartOfSpeech.INTERJECTION: "감탄사",
}


class NoticeLevel(str, Enum):
    """Severity of a user-facing notice."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Definition:
    """One meaning of a word together with its part of speech."""

    id: int | None
    text: str
    part_of_speech: PartOfSpeech | None


@dataclass(frozen=True, slots=True)
class Word:
    """A vocabulary entry merged with its definitions and difficulty."""

    id: int | None
    expression: str
    definitions: tuple[Definition, ...]
    difficulty: float | None = None
    stats: Any = None

    @property
    def level(self) -> Difficulty:
        return classify(self.difficulty)

    @property
    def is_placeholder(self) -> bool:
        """True for the entry that stands in for an empty vocabulary."""
        return self.id is None


# Rendered in place of an empty vocabulary so it is not mistaken for loading
EMPTY_VOCABULARY = Word(
    id=None,
    expression="",
    definitions=(Definition(id=None, text="", part_of_speech=None),),
)


@dataclass(frozen=True, slots=True)
class Envelope:
    """The ``{status, data}`` wrapper returned by every endpoint."""

    status: int | None
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status == 200

    @property
    def is_conflict(self) -> bool:
        return self.status == 409

    @classmethod
    def empty(cls, status: int | None = None) -> Envelope:
        """Failed envelope: keeps the declared status, drops the payload."""
        return cls(status=status, data=None)


@dataclass(frozen=True, slots=True)
class DefinitionResult:
    """Outcome of one item in a per-definition write batch."""

    index: int
    ok: bool
    message: str
    definition_id: int | None = None
    status: int | None = None


@dataclass(frozen=True, slots=True)
class SubmitResult:
    """Outcome of an add or edit submission."""

    ok: bool
    message: str
    word_id: int | None = None
    definitions: tuple[DefinitionResult, ...] = ()

    @property
    def failed_definitions(self) -> tuple[DefinitionResult, ...]:
        return tuple(r for r in self.definitions if not r.ok)


@dataclass(frozen=True, slots=True)
class Notice:
    """A message that would be shown to the user."""

    level: NoticeLevel
    message: str


@dataclass(slots=True)
class VocabularyView:
    """The merged word list and selection state of one vocabulary."""

    vocab_id: int
    title: str | None = None
    words: list[Word] = field(default_factory=list)
    selected: set[int] = field(default_factory=set)
    notices: list[Notice] = field(default_factory=list)

    def toggle(self, word_id: int | None) -> bool:
        """Flip selection of *word_id*; returns the new selected state."""
        if word_id is None:
            return False
        if word_id in self.selected:
            self.selected.discard(word_id)
            return False
        self.selected.add(word_id)
        return True

    def is_selected(self, word_id: int | None) -> bool:
        return word_id in self.selected

    def clear_selection(self) -> None:
        self.selected.clear()

    def replace_words(self, words: list[Word]) -> None:
        """Install a freshly aggregated list and drop vanished selections."""
        self.words = list(words)
        live = {w.id for w in self.words if w.id is not None}
        self.selected &= live

    def find(self, word_id: int) -> Word | None:
        for word in self.words:
            if word.id == word_id:
                return word
        return None

    def find_by_expression(self, expression: str) -> Word | None:
        for word in self.words:
            if not word.is_placeholder and word.expression == expression:
                return word
        return None

    def index_of(self, word: Word) -> int | None:
        for i, candidate in enumerate(self.words):
            if candidate.id == word.id and candidate.expression == word.expression:
                return i
        return None
