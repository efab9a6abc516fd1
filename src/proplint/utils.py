"""Shared utilities for proplint."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path


def snippet(source: str, lineno: int, max_len: int = 160) -> str:
    """Return the source line at lineno (1-based), stripped and truncated."""
    lines = source.splitlines()
    if 0 < lineno <= len(lines):
        return lines[lineno - 1].strip()[:max_len]
    return ""

# Directories to skip during file discovery
SKIP_DIRS = {
    ".git", "__pycache__", "node_modules", "venv", ".venv", "env",
    ".tox", ".mypy_cache", ".pytest_cache", ".ruff_cache", "dist",
    "build", ".eggs", ".nox", ".cache",
}

# clang JSON dumps of large translation units get big; skip anything absurd
MAX_FILE_SIZE = 256 * 1024 * 1024  # 256 MB


def discover_files(workspace: Path, patterns: list[str]) -> list[Path]:
    """Walk workspace for tree documents, skipping ignored dirs and huge files."""
    files: list[Path] = []
    for item in sorted(workspace.rglob("*")):
        if item.is_dir():
            continue
        if any(part in SKIP_DIRS for part in item.relative_to(workspace).parts):
            continue
        if not any(fnmatch(item.name, p) for p in patterns):
            continue
        try:
            if item.stat().st_size > MAX_FILE_SIZE:
                continue
        except OSError:
            continue
        files.append(item)
    return files
