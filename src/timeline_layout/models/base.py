"""Base model class with common functionality for all timeline models."""

from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict


T = TypeVar("T", bound="LayoutModel")


class LayoutModel(BaseModel):
    """Base model class with JSON serialization support.

    Field names are snake_case in Python; the camelCase names used by the
    dashboard's documents are accepted as aliases on input.
    """

    model_config = ConfigDict(
        # Use enum values in serialization
        use_enum_values=True,
        # Validate field assignments
        validate_assignment=True,
        # Accept both field names and camelCase aliases
        populate_by_name=True,
    )

    def to_json(self, indent: int = 2) -> str:
        """Serialize model to JSON string.

        Args:
            indent: Indentation level for pretty printing (default: 2)

        Returns:
            JSON string representation of the model
        """
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize model to dictionary."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_json(cls: type[T], json_str: str) -> T:
        """Deserialize model from JSON string."""
        return cls.model_validate_json(json_str)

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        """Deserialize model from dictionary."""
        return cls.model_validate(data)

    @classmethod
    def load_from_file(cls: type[T], file_path: str | Path) -> T:
        """Load model from a JSON file.

        Args:
            file_path: Path to the JSON file

        Returns:
            Model instance
        """
        path = Path(file_path)
        return cls.from_json(path.read_text())

    def save_to_file(self, file_path: str | Path, indent: int = 2) -> None:
        """Save model to a JSON file.

        Args:
            file_path: Path to save the JSON file
            indent: Indentation level for pretty printing (default: 2)
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(indent=indent))
