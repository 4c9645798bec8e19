"""Built-in conventional-commit message pool."""

from __future__ import annotations

DEFAULT_MESSAGE_POOL: dict[str, tuple[str, ...]] = {
    "feat": (
        "add new utility functions",
        "introduce configuration loader",
        "support optional output formats",
        "add input validation helpers",
    ),
    "fix": (
        "resolve minor bugs and issues",
        "handle empty input edge case",
        "correct error handling in API calls",
        "fix race condition in async operations",
    ),
    "docs": (
        "update documentation",
        "add usage examples",
        "clarify setup instructions",
        "update changelog",
    ),
    "refactor": (
        "improve code structure and readability",
        "extract helper functions",
        "centralize configuration",
        "simplify control flow",
    ),
    "test": (
        "add unit tests",
        "cover error paths",
        "add regression test",
        "improve test fixtures",
    ),
    "chore": (
        "update dependencies",
        "tidy project files",
        "bump version",
        "clean up temporary files",
    ),
    "perf": (
        "optimize performance",
        "reduce allocations in hot path",
        "cache repeated lookups",
    ),
    "style": (
        "improve code formatting",
        "normalize whitespace",
        "apply consistent naming",
    ),
    "build": (
        "update build configuration",
        "adjust packaging metadata",
    ),
    "ci": (
        "improve continuous integration",
        "speed up pipeline",
    ),
}
