"""vocab-editor: load, merge and edit a vocabulary served over REST."""

__version__ = "0.3.0"

from vocab_editor.config import ClientConfig, load_config
from vocab_editor.difficulty import Difficulty, classify
from vocab_editor.editor import VocabularyEditor
from vocab_editor.exceptions import (
    ConfigError,
    ConflictError,
    EntityNotFoundError,
    RequestError,
    TransportError,
    ValidationError,
    VocabEditorError,
)
from vocab_editor.models import (
    EMPTY_VOCABULARY,
    Definition,
    DefinitionResult,
    Envelope,
    Notice,
    NoticeLevel,
    PartOfSpeech,
    SubmitResult,
    VocabularyView,
    Word,
)
from vocab_editor.session import DraftDefinition, EditSession
from vocab_editor.validation import validate_draft

__all__ = [
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "Definition",
    "DefinitionResult",
    "Difficulty",
    "DraftDefinition",
    "EMPTY_VOCABULARY",
    "EditSession",
    "EntityNotFoundError",
    "Envelope",
    "Notice",
    "NoticeLevel",
    "PartOfSpeech",
    "RequestError",
    "SubmitResult",
    "TransportError",
    "ValidationError",
    "VocabEditorError",
    "VocabularyEditor",
    "VocabularyView",
    "Word",
    "classify",
    "load_config",
    "validate_draft",
]
