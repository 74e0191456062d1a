from __future__ import annotations

from git_version import get_git_version

from .core import PackagedFile, PackagingSession, package_esm
from .destination import (
    apply_destination_folder_simplifications,
    compute_destination_path,
    is_under,
)
from .errors import (
    FileAccessError,
    InvalidManifestError,
    MissingEntryFileError,
    MissingManifestError,
    MissingModuleFieldError,
    NodeModuleNotFoundError,
    OptionsError,
    PackagingError,
)
from .imports import (
    ResolvedImport,
    is_relative_import,
    resolve_bare_import,
    resolve_import,
    resolve_relative_import,
    should_skip_import,
)
from .materialize import DirectoryMaterializer
from .node_modules import (
    find_node_module,
    find_node_module_import,
    node_module_candidates,
    read_manifest,
)
from .options import PackageOptions, load_package_options, normalize_repo_root
from .rewrite import relative_specifier, splice_specifier
from .scanner import ImportReference, Scanner, mask_comments, scan_imports
