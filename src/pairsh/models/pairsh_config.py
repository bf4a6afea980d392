"""Configuration model for pairsh."""

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_PROGRAM = "aider"
DEFAULT_PACKAGE = "aider-chat"
DEFAULT_ARGS = ["--no-pretty"]
DEFAULT_KEY_PREFIX = "C-c"
DEFAULT_VENV_PATH = str(Path.home() / ".pairsh" / "venv")


class PairshConfig(BaseModel):
    """Runtime configuration for pairsh."""

    program: str = DEFAULT_PROGRAM
    args: list[str] = Field(default_factory=lambda: list(DEFAULT_ARGS))
    package: str = DEFAULT_PACKAGE
    venv_path: str = DEFAULT_VENV_PATH
    use_venv: bool = True
    output_buffer: str = "*aider*"
    input_buffer: str = "*aider-input*"
    key_prefix: str = DEFAULT_KEY_PREFIX
    log_file: str | None = None
