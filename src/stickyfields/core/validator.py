from collections.abc import Sequence

from stickyfields.core.candidates import Candidate, extract_candidate
from stickyfields.core.gotypes import Var
from stickyfields.core.syntax import FunctionDecl
from stickyfields.core.typeinfo import TypeInfo
from stickyfields.core.usage import (
    UsageLookup,
    collect_output_fields,
    collect_used_fields,
    collect_used_methods,
)
from stickyfields.models import ConverterValidationResult

_GETTER_PREFIX = "Get"


class ValidationError(Exception):
    """A classified converter whose input or output candidate cannot be determined."""


def find_candidate(variables: Sequence[Var]) -> tuple[Candidate, str] | None:
    """Return the first candidate in declaration order with its variable name."""
    for var in variables:
        candidate = extract_candidate(var.type)
        if candidate is not None:
            return candidate, var.name
    return None


def collect_missing_fields(
    candidate: Candidate,
    used_fields: UsageLookup,
    used_methods: UsageLookup | None = None,
) -> list[str]:
    missing = []
    for name in candidate.shape:
        if used_fields.look_up(name):
            continue
        # reading through a getter counts as reading the field
        if used_methods is not None and used_methods.look_up(_GETTER_PREFIX + name):
            continue
        missing.append(name)
    return missing


def _qualify(var_name: str, names: list[str]) -> list[str]:
    if not var_name:
        return names
    return [f"{var_name}.{name}" for name in names]


def validate_converter(func: FunctionDecl, info: TypeInfo) -> ConverterValidationResult:
    """Check that ``func`` reads every input field and writes every output field.

    The input is the first record parameter and must be named; the output is
    the first record result, either a named result or an anonymous one built
    with a keyed literal.
    """
    signature = info.signature(func)
    if signature is None:
        raise ValidationError(f"cannot get type info for function {func.name!r}")
    if not signature.params or not signature.results:
        raise ValidationError(f"function {func.name!r} must have at least one parameter and one result")

    found_in = find_candidate(signature.params)
    if found_in is None or not found_in[1]:
        raise ValidationError(f"cannot determine candidate input parameter for function {func.name!r}")
    in_candidate, in_var = found_in

    found_out = find_candidate(signature.results)
    if found_out is None:
        raise ValidationError(f"cannot determine candidate output parameter for function {func.name!r}")
    out_candidate, out_var = found_out

    body = func.body
    fields_read = collect_used_fields(body, in_var, func.source)
    methods_called = collect_used_methods(body, in_var, func.source)
    missing_in = collect_missing_fields(in_candidate, fields_read, methods_called)

    fields_written = collect_output_fields(func, out_var, out_candidate.name)
    missing_out = collect_missing_fields(out_candidate, fields_written)

    return ConverterValidationResult(
        valid=not missing_in and not missing_out,
        missing_input_fields=_qualify(in_var, missing_in),
        missing_output_fields=_qualify(out_var, missing_out),
    )
