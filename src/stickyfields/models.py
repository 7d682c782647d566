from pydantic import BaseModel, Field


class Position(BaseModel):
    row: int
    column: int


class ConverterValidationResult(BaseModel):
    # True when every exported field (or its getter) was used on both sides
    valid: bool
    missing_input_fields: list[str] = Field(default_factory=list)
    missing_output_fields: list[str] = Field(default_factory=list)


class Diagnostic(BaseModel):
    path: str
    function: str
    position: Position
    message: str
    result: ConverterValidationResult


class AnalysisSummary(BaseModel):
    files_analyzed: int = 0
    files_with_warnings: int = 0
    warnings: int = 0

    def render(self) -> str:
        if self.warnings > 0:
            return (
                f"Files total analyzed: {self.files_analyzed}. "
                f"Warnings: {self.warnings} caught in {self.files_with_warnings} files"
            )
        return f"Files total analyzed: {self.files_analyzed}. Warnings: 0"


class AnalysisReport(BaseModel):
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    summary: AnalysisSummary = Field(default_factory=AnalysisSummary)
