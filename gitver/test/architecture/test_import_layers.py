from __future__ import annotations

import pytest

from ._gate import require_arch_checks_enabled
from ._utils import iter_source_files, matches_prefix, package_root, parse_imports

# package -> packages it must not import
_FORBIDDEN = {
    "core": ("gitver.platform", "gitver.git", "gitver.resolve", "gitver.output", "gitver.cli"),
    "platform": ("gitver.git", "gitver.resolve", "gitver.output", "gitver.cli"),
    "git": ("gitver.resolve", "gitver.output", "gitver.cli"),
    "resolve": ("gitver.output", "gitver.cli", "gitver.platform", "typer"),
    "output": ("gitver.git", "gitver.resolve", "gitver.cli"),
}


@pytest.mark.parametrize("package", sorted(_FORBIDDEN))
def test_lower_layers_do_not_import_upper_layers(package: str) -> None:
    require_arch_checks_enabled()

    root = package_root()
    offenders: list[str] = []
    for file_path in iter_source_files(root / package):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            for prefix in _FORBIDDEN[package]:
                if matches_prefix(item.module, prefix):
                    offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, f"{package} layering violations:\n" + "\n".join(offenders)
