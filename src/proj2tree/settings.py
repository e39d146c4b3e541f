from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from proj2tree.config import DEFAULT_OUTPUT_NAME


class Settings(BaseModel):
    """Configuration settings for the proj2tree command line."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    directory: Path = Field(default=Path(), description="Directory to scan.")
    output: Path | None = Field(default=None, description="Output file.")
    no_tree: bool = Field(default=False, description="Do not render the file tree.")
    no_contents: bool = Field(default=False, description="Do not render file contents.")
    print_to_console: bool = Field(default=False, description="Print the document to stdout.")
    no_gitignore: bool = Field(default=False, description="Ignore .gitignore rules.")
    config: Path | None = Field(default=None, description="YAML exclusion rules file.")
    log_file: str = Field(default="", description="Log file path.")

    def output_path(self) -> Path:
        """Return the file the document is written to when not printing."""
        if self.output is not None:
            return self.output
        return self.directory / DEFAULT_OUTPUT_NAME

    def output_name(self) -> str | None:
        """Return the basename to keep out of the document, if any."""
        if self.output is not None:
            return self.output.name
        if self.print_to_console:
            return None
        return self.output_path().name
