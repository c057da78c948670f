from __future__ import annotations

import ast
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]


def _line_count(path: Path) -> int:
    return len(path.read_text(encoding="utf-8", errors="ignore").splitlines())


def _python_files(root: Path):
    for path in root.rglob("*.py"):
        # Keep architecture checks focused on source/test code, not packaged artifacts.
        if "dist" in path.parts or "build" in path.parts:
            continue
        yield path


def _imported_modules(path: Path):
    tree = ast.parse(path.read_text(encoding="utf-8", errors="ignore"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom):
            yield node.module or ""


def test_no_python_module_exceeds_hard_line_limit():
    offenders = []
    for path in _python_files(ROOT):
        lines = _line_count(path)
        if lines > 600:
            offenders.append((str(path.relative_to(ROOT)), lines))
    assert not offenders, f"Modules exceed hard 600-line limit: {offenders}"


def test_core_layer_does_not_import_infra_layer():
    violations: list[tuple[str, str]] = []
    for path in _python_files(ROOT / "core"):
        for name in _imported_modules(path):
            if name == "infra" or name.startswith("infra."):
                violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Core layer imports infra layer: {violations}"


def test_core_layer_does_not_import_sqlalchemy():
    violations = [
        (str(path.relative_to(ROOT)), name)
        for path in _python_files(ROOT / "core")
        for name in _imported_modules(path)
        if name.split(".")[0] in {"sqlalchemy", "alembic"}
    ]

    assert not violations, f"Core layer depends on the persistence stack: {violations}"


def test_analytics_views_are_composed_from_mixins():
    text = (ROOT / "core" / "services" / "analytics" / "service.py").read_text(encoding="utf-8")

    for mixin in (
        "AnalyticsStatsMixin",
        "AnalyticsBranchMixin",
        "AnalyticsTrendMixin",
        "AnalyticsMemberMixin",
        "AnalyticsPerformanceMixin",
        "AnalyticsLoadingMixin",
    ):
        assert mixin in text


def test_role_checks_live_in_the_access_module():
    # views ask the access policy; only access.py and scope.py may branch on UserRole
    allowed = {"access.py", "scope.py", "models.py"}
    offenders = []
    for path in _python_files(ROOT / "core" / "services" / "analytics"):
        if path.name in allowed:
            continue
        if "UserRole." in path.read_text(encoding="utf-8", errors="ignore"):
            offenders.append(path.name)

    assert not offenders, f"Role branching outside access policies: {offenders}"
