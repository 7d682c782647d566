import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from stickyfields.config import AnalyzerConfig
from stickyfields.core.classifier import is_possible_converter
from stickyfields.core.sources import discover_go_files, is_test_file, is_vendored, write_temp_code_file
from stickyfields.core.syntax import FunctionDecl, SourceFile, parse_file
from stickyfields.core.typeinfo import TypeInfo
from stickyfields.core.validator import ValidationError, validate_converter
from stickyfields.models import AnalysisReport, AnalysisSummary, ConverterValidationResult, Diagnostic

logger = logging.getLogger(__name__)


def format_message(result: ConverterValidationResult) -> str:
    missing_in = ", ".join(result.missing_input_fields)
    missing_out = ", ".join(result.missing_output_fields)
    return (
        "converter function is leaking fields: "
        f"missing input fields: [{missing_in}]; missing output fields: [{missing_out}]"
    )


def check_function(func: FunctionDecl, info: TypeInfo, config: AnalyzerConfig) -> ConverterValidationResult | None:
    """Validate ``func`` if it looks like a converter; None when it is skipped."""
    if not is_possible_converter(func, info, config):
        return None
    try:
        return validate_converter(func, info)
    except ValidationError as exc:
        logger.warning("Validation error, ignoring %s: %s", func.name, exc)
        return None


def analyze_files(files: Sequence[SourceFile], info: TypeInfo, config: AnalyzerConfig) -> AnalysisReport:
    """Run the converter check over ``files`` in order; ``info`` must cover their types."""
    diagnostics: list[Diagnostic] = []
    summary = AnalysisSummary()

    for source_file in files:
        summary.files_analyzed += 1
        file_has_warnings = False

        for func in source_file.functions:
            result = check_function(func, info, config)
            if result is None or result.valid:
                continue
            diagnostics.append(
                Diagnostic(
                    path=str(source_file.path),
                    function=func.name,
                    position=func.position,
                    message=format_message(result),
                    result=result,
                )
            )
            summary.warnings += 1
            file_has_warnings = True

        if file_has_warnings:
            summary.files_with_warnings += 1

    logger.info(summary.render())
    return AnalysisReport(diagnostics=diagnostics, summary=summary)


def analyze_paths(paths: Iterable[str | Path], config: AnalyzerConfig) -> AnalysisReport:
    """Analyze Go files under ``paths``.

    Test files are ignored entirely. Vendored files are parsed so their types
    resolve, but are not reported on.
    """
    parsed = [parse_file(p) for p in discover_go_files(paths) if not is_test_file(p)]
    info = TypeInfo(parsed)
    targets = [f for f in parsed if not is_vendored(f.path)]
    logger.debug("Parsed %d files, analyzing %d", len(parsed), len(targets))
    return analyze_files(targets, info, config)


def analyze_source(code: str, config: AnalyzerConfig) -> AnalysisReport:
    """Analyze a single code snippet."""
    temp_path = write_temp_code_file(code)
    try:
        source_file = parse_file(temp_path)
        return analyze_files([source_file], TypeInfo([source_file]), config)
    finally:
        temp_path.unlink(missing_ok=True)
