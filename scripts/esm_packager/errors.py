from __future__ import annotations

from typing import Any, Dict


class PackagingError(Exception):
    """Base class for failures that abort a packaging run."""

    reason_code = "PACKAGING_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def format_human(self) -> str:
        return f"[{self.reason_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {"reason_code": self.reason_code, "message": self.message}


class OptionsError(PackagingError):
    reason_code = "INVALID_OPTIONS"


class NodeModuleNotFoundError(PackagingError):
    reason_code = "MODULE_NOT_FOUND"

    def __init__(self, module: str, importer: str) -> None:
        super().__init__(f"Cannot find module {module} requested by {importer}")
        self.module = module
        self.importer = importer


class MissingManifestError(PackagingError):
    reason_code = "MISSING_MANIFEST"

    def __init__(self, manifest_path: str, module_path: str) -> None:
        super().__init__(f"Missing {manifest_path} in node module {module_path}")
        self.manifest_path = manifest_path
        self.module_path = module_path


class MissingModuleFieldError(PackagingError):
    reason_code = "MISSING_MODULE_FIELD"

    def __init__(self, manifest_path: str) -> None:
        super().__init__(f"Missing property 'module' package.json at {manifest_path}")
        self.manifest_path = manifest_path


class MissingEntryFileError(PackagingError):
    reason_code = "MISSING_ENTRY_FILE"

    def __init__(self, path: str) -> None:
        super().__init__(f"Missing file {path}")
        self.path = path


class InvalidManifestError(PackagingError):
    reason_code = "INVALID_MANIFEST"

    def __init__(self, manifest_path: str, detail: str) -> None:
        super().__init__(f"Failed to parse {manifest_path}: {detail}")
        self.manifest_path = manifest_path


class FileAccessError(PackagingError):
    reason_code = "IO_ERROR"

    def __init__(self, exc: OSError) -> None:
        path = exc.filename if exc.filename is not None else ""
        super().__init__(f"{exc.strerror or exc} {path}".strip())
        self.path = path
