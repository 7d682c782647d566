"""Helpers for building analyzable Go packages from source snippets."""

from collections.abc import Callable
from pathlib import Path

from stickyfields.core.syntax import FunctionDecl, SourceFile, parse_source
from stickyfields.core.typeinfo import TypeInfo


class GoPackage:
    """One or more parsed Go files sharing a single TypeInfo."""

    def __init__(self, files: dict[str, str]) -> None:
        self.files = [parse_source(code.encode("utf-8"), Path(path)) for path, code in files.items()]
        self.info = TypeInfo(self.files)

    @property
    def main(self) -> SourceFile:
        return self.files[0]

    def func(self, name: str) -> FunctionDecl:
        for source_file in self.files:
            for func in source_file.functions:
                if func.name == name:
                    return func
        raise KeyError(name)


BuildPackage = Callable[..., GoPackage]
