from .app import IntentResult, TaskApp, build_app
from .codec import TaskCodec
from .factory import TaskFactory
from .models import StorageDocument, StorageMetadata, Task
from .store import TaskStore
from .validation import ValidationResult, validate_description

__all__ = [
    "IntentResult",
    "TaskApp",
    "build_app",
    "TaskCodec",
    "TaskFactory",
    "StorageDocument",
    "StorageMetadata",
    "Task",
    "TaskStore",
    "ValidationResult",
    "validate_description",
]
