"""Tests to enforce the ports/adapters import contracts via importlinter.

The contracts are configured in pyproject.toml under
[tool.importlinter.contracts]: the hashing pipeline depends only on ports,
and utilities never import the application layer.

If this test fails, a new import crossed one of those boundaries. Run
``lint-imports`` to see which contract was broken and fix the import.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def test_importlinter_contracts_enforced() -> None:
    """Verify all import contracts pass."""
    lint_imports = shutil.which("lint-imports")
    if lint_imports is None:
        # Fallback to virtualenv bin directory
        candidate = Path(sys.executable).parent / "lint-imports"
        if not candidate.exists():
            pytest.skip("import-linter is not installed")
        lint_imports = str(candidate)

    result = subprocess.run(
        [lint_imports],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
    )

    # importlinter returns 0 if all contracts pass, 1 if any broken
    if result.returncode != 0:
        output = result.stdout + "\n" + result.stderr
        raise AssertionError(
            f"Import contracts violated.\nRun 'lint-imports' for details.\n\nOutput:\n{output}"
        )

    assert "Contracts:" in result.stdout, (
        "Unexpected importlinter output - missing 'Contracts:' summary. "
        f"Got: {result.stdout[:500]}"
    )
