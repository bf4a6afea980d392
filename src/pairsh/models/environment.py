"""Isolated runtime environment descriptor."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class EnvironmentDescriptor:
    """A virtual environment directory on disk."""

    path: Path

    @classmethod
    def from_path(cls, raw: str | os.PathLike[str]) -> "EnvironmentDescriptor":
        return cls(Path(os.path.expandvars(os.fspath(raw))).expanduser())

    @property
    def bin_dir(self) -> Path:
        return self.path / ("Scripts" if os.name == "nt" else "bin")

    @property
    def python(self) -> Path:
        return self.bin_dir / ("python.exe" if os.name == "nt" else "python")

    @property
    def activate_script(self) -> Path:
        return self.bin_dir / "activate"

    @property
    def exists(self) -> bool:
        # An interrupted `venv` run can leave the directory without a usable layout.
        return self.activate_script.is_file()
