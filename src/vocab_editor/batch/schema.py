"""
Data classes and constants for the batch change request system.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


# =============================================================================
# Operation Types
# =============================================================================

class OperationType(str, Enum):
    """Supported batch operations."""
    ADD_WORD = "add_word"
    EDIT_WORD = "edit_word"
    DELETE_WORD = "delete_word"
    ADD_DEFINITION = "add_definition"
    EDIT_DEFINITION = "edit_definition"
    DELETE_DEFINITION = "delete_definition"


# Operations that address an existing word by `word` (expression) or `word_id`
WORD_TARGETED = {
    OperationType.EDIT_WORD.value,
    OperationType.DELETE_WORD.value,
    OperationType.ADD_DEFINITION.value,
    OperationType.EDIT_DEFINITION.value,
    OperationType.DELETE_DEFINITION.value,
}

# Operations that address an existing definition by `index` or `def_id`
DEFINITION_TARGETED = {
    OperationType.EDIT_DEFINITION.value,
    OperationType.DELETE_DEFINITION.value,
}


# =============================================================================
# Field Requirements
# =============================================================================

REQUIRED_FIELDS: Dict[str, List[str]] = {
    OperationType.ADD_WORD.value: ["expression", "definitions"],
    OperationType.EDIT_WORD.value: [],
    OperationType.DELETE_WORD.value: [],
    OperationType.ADD_DEFINITION.value: ["definition", "type"],
    OperationType.EDIT_DEFINITION.value: [],
    OperationType.DELETE_DEFINITION.value: [],
}

OPTIONAL_FIELDS: Dict[str, List[str]] = {
    OperationType.ADD_WORD.value: [],
    OperationType.EDIT_WORD.value: ["word", "word_id", "expression", "definitions"],
    OperationType.DELETE_WORD.value: ["word", "word_id"],
    OperationType.ADD_DEFINITION.value: ["word", "word_id"],
    OperationType.EDIT_DEFINITION.value: [
        "word", "word_id", "index", "def_id", "definition", "type",
    ],
    OperationType.DELETE_DEFINITION.value: ["word", "word_id", "index", "def_id"],
}


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class Change:
    """Single change operation."""
    operation: str
    params: Dict[str, Any]

    @property
    def word(self) -> Optional[str]:
        """Expression of the targeted word, if given."""
        return self.params.get("word")

    @property
    def word_id(self) -> Optional[int]:
        return self.params.get("word_id")

    @property
    def target(self) -> Optional[str]:
        """Human-readable reference to the targeted word."""
        if self.word_id is not None:
            return f"#{self.word_id}"
        return self.word or self.params.get("expression")


@dataclass
class ChangeRequest:
    """Parsed change request from YAML."""
    vocabulary: int
    changes: List[Change]
    name: Optional[str] = None
    description: Optional[str] = None
    source_file: Optional[Path] = None


@dataclass
class ValidationError:
    """Validation error for a specific change."""
    index: int
    operation: str
    field: str
    message: str


@dataclass
class ValidationWarning:
    """Validation warning for a specific change."""
    index: int
    operation: str
    message: str


@dataclass
class ValidationResult:
    """Result of validating a change request."""
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


@dataclass
class ChangeResult:
    """Result of executing a single change."""
    index: int
    operation: str
    success: bool
    message: str
    target: Optional[str] = None
    created_id: Optional[int] = None
    error: Optional[str] = None


@dataclass
class BatchResult:
    """Result of executing a batch change request."""
    vocabulary: int
    total_count: int
    success_count: int
    failure_count: int
    changes: List[ChangeResult]
    duration_seconds: float

    @property
    def skipped_count(self) -> int:
        return self.total_count - self.success_count - self.failure_count
