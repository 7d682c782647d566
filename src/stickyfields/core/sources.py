import tempfile
from collections.abc import Iterable
from pathlib import Path

_GO_SUFFIX = ".go"
_TEST_SUFFIX = "_test.go"
_VENDOR_DIR = "vendor"


def is_go_file(path: Path) -> bool:
    return path.suffix == _GO_SUFFIX


def is_test_file(path: Path) -> bool:
    return path.name.endswith(_TEST_SUFFIX)


def is_vendored(path: Path) -> bool:
    return _VENDOR_DIR in path.parts[:-1]


def discover_go_files(paths: Iterable[str | Path]) -> list[Path]:
    """Expand files and directories into a sorted, de-duplicated list of Go sources."""
    found: set[Path] = set()
    for raw in paths:
        path = Path(raw).resolve()
        if path.is_dir():
            found.update(p for p in path.rglob(f"*{_GO_SUFFIX}") if p.is_file())
        elif path.is_file():
            if not is_go_file(path):
                raise ValueError(f"Unsupported file extension: {path.suffix}")
            found.add(path)
        else:
            raise FileNotFoundError(f"Path not found: {raw}")
    return sorted(found)


def write_temp_code_file(source: str) -> Path:
    with tempfile.NamedTemporaryFile(delete=False, suffix=_GO_SUFFIX) as temp_file:
        temp_file.write(source.encode("utf-8"))
        temp_file.flush()
        return Path(temp_file.name)
