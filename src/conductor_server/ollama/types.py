"""Type definitions for Ollama integration.

This module contains dataclasses and helpers used for representing Ollama
models and chat request options.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


class OllamaBackendError(Exception):
    """Raised when the Ollama backend is unreachable or answers with an error.

    Attributes:
        status_code: HTTP status returned by Ollama, None if it never answered
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class ModelInfo:
    """Information about an installed Ollama model.

    Attributes:
        name: Full model name (e.g., "qwen2.5:latest")
        size_bytes: Model size on disk in bytes
        format: Model format (e.g., "gguf")
        family: Model family (e.g., "qwen2")
        parameter_size: Human-readable parameter count (e.g., "7.6B")
        quantization_level: Quantization level (e.g., "Q4_K_M")
        modified_at: ISO 8601 timestamp of the last modification, if known
    """

    name: str
    size_bytes: int
    format: str
    family: str
    parameter_size: str
    quantization_level: str
    modified_at: str | None = None

    @property
    def size_gb(self) -> float:
        """Model size in gigabytes, rounded to two decimals."""
        return round(self.size_bytes / (1024**3), 2)

    @staticmethod
    def from_ollama_model(model_data: Any) -> "ModelInfo":
        """Create a ModelInfo instance from an entry of the Ollama tags list.

        Args:
            model_data: One entry of the list response (object or dict)

        Returns:
            ModelInfo: Parsed model information
        """

        # Helper to get value from either object attribute or dict key
        def get_value(obj: Any, key: str, default: Any = None) -> Any:
            if isinstance(obj, dict):
                return obj.get(key, default)
            return getattr(obj, key, default)

        model_name = get_value(model_data, "model") or get_value(
            model_data, "name", "unknown"
        )

        # Handle ByteSize object from ollama library
        size_obj = get_value(model_data, "size", 0) or 0
        try:
            size_bytes = int(size_obj)
        except (TypeError, ValueError):
            size_bytes = 0

        details = get_value(model_data, "details") or {}

        modified = get_value(model_data, "modified_at")
        if isinstance(modified, datetime):
            modified = modified.isoformat()

        return ModelInfo(
            name=model_name,
            size_bytes=size_bytes,
            format=get_value(details, "format") or "unknown",
            family=get_value(details, "family") or "unknown",
            parameter_size=get_value(details, "parameter_size") or "unknown",
            quantization_level=get_value(details, "quantization_level") or "unknown",
            modified_at=modified,
        )


def build_options(
    temperature: float | None = None,
    top_p: float | None = None,
    top_k: int | None = None,
    num_predict: int | None = None,
) -> dict[str, Any] | None:
    """Build the options object of an Ollama chat request.

    Unset values are left out so Ollama applies the model defaults.

    Returns:
        The options dict, or None if no option is set
    """
    options = {
        "temperature": temperature,
        "top_p": top_p,
        "top_k": top_k,
        "num_predict": num_predict,
    }
    options = {key: value for key, value in options.items() if value is not None}
    return options or None
