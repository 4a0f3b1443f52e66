"""
IO utilities for reading form inputs, saving/loading them as JSON and exporting results.
Everything here sits on the caller side of the projection engine.
"""
import json
import math
import pandas as pd
from typing import Dict, Any, List, Optional
from dataclasses import asdict
from datetime import datetime

from projection import (
    CalculatorInputs, ProjectionResults, RetirementProjector,
    STATE_PENSION_WEEKLY, STATE_PENSION_ANNUAL, WITHDRAWAL_RATE
)
from config_utils import (
    get_default_inputs, get_input_field_constraints, get_numeric_input_fields,
    GAP_SUGGESTIONS, DISCLAIMERS
)


_TRUTHY_STRINGS = {'true', '1', 'yes', 'on'}
_RADIX_PREFIXES = {'0x', '0o', '0b'}


def coerce_numeric_input(value: Any) -> float:
    """
    Convert a raw form value to a number the way a browser number field does.

    Blank text becomes 0.0, text that is not a number becomes NaN. Only the
    browser spellings are accepted: "Infinity" but not "inf" or "nan", hex,
    octal and binary literals without a sign, and no digit separators.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    if '_' in text:
        return math.nan

    unsigned = text.lstrip('+-')
    if len(text) - len(unsigned) > 1:
        return math.nan
    if unsigned == 'Infinity':
        return -math.inf if text.startswith('-') else math.inf
    if 'inf' in unsigned.lower() or 'nan' in unsigned.lower():
        return math.nan
    if unsigned[:2].lower() in _RADIX_PREFIXES:
        if unsigned != text:
            return math.nan
        try:
            return float(int(text, 0))
        except ValueError:
            return math.nan

    try:
        return float(text)
    except ValueError:
        return math.nan


def coerce_checkbox_input(value: Any) -> bool:
    """Convert a raw checkbox value to a bool"""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_STRINGS
    return bool(value)


def inputs_to_dict(inputs: CalculatorInputs) -> Dict[str, Any]:
    """
    Convert CalculatorInputs to dictionary for JSON serialization.

    Args:
        inputs: CalculatorInputs object

    Returns:
        Dictionary representation
    """
    return asdict(inputs)


def dict_to_inputs(input_dict: Dict[str, Any]) -> CalculatorInputs:
    """
    Convert dictionary to CalculatorInputs object.

    Missing fields take their default values and unknown keys are ignored.
    Numeric fields are coerced like raw form text.

    Args:
        input_dict: Dictionary with input values

    Returns:
        CalculatorInputs object
    """
    if not isinstance(input_dict, dict):
        raise TypeError(f"Expected a dictionary of inputs, got {type(input_dict).__name__}")

    merged = get_default_inputs()
    for key in merged:
        if key in input_dict:
            merged[key] = input_dict[key]

    values = {field: coerce_numeric_input(merged[field]) for field in get_numeric_input_fields()}
    values['include_state_pension'] = coerce_checkbox_input(merged['include_state_pension'])

    return CalculatorInputs(**values)


def save_inputs_json(inputs: CalculatorInputs, filepath: str) -> None:
    """
    Save calculator inputs to JSON file.

    Args:
        inputs: CalculatorInputs object to save
        filepath: Path to save JSON file
    """
    with open(filepath, 'w') as f:
        json.dump(inputs_to_dict(inputs), f, indent=2)


def load_inputs_json(filepath: str) -> CalculatorInputs:
    """
    Load calculator inputs from JSON file.

    Args:
        filepath: Path to JSON file

    Returns:
        CalculatorInputs object
    """
    with open(filepath, 'r') as f:
        input_dict = json.load(f)

    return dict_to_inputs(input_dict)


def create_inputs_download_json(inputs: CalculatorInputs) -> str:
    """Create JSON string for downloading inputs"""
    return json.dumps(inputs_to_dict(inputs), indent=2)


def parse_inputs_upload_json(json_string: str) -> CalculatorInputs:
    """Parse uploaded JSON string to CalculatorInputs"""
    return dict_to_inputs(json.loads(json_string))


def validate_inputs(inputs: CalculatorInputs) -> List[str]:
    """
    Check inputs against the form's field constraints.

    The projection engine accepts anything; this is for callers that want to
    warn about out-of-range values before showing a result.

    Args:
        inputs: CalculatorInputs to check

    Returns:
        List of error messages, empty when all fields are valid
    """
    errors = []
    values = inputs_to_dict(inputs)

    for field, limits in get_input_field_constraints().items():
        value = values[field]
        label = field.replace('_', ' ')

        if math.isnan(value):
            errors.append(f"{label.capitalize()} must be a number")
            continue

        for bound in ('min', 'max'):
            if bound not in limits:
                continue
            limit = limits[bound]
            if isinstance(limit, str):
                limit_label = limit.replace('_', ' ')
                limit = values[limit]
                if math.isnan(limit):
                    continue
            else:
                limit_label = f"{limit:g}"

            if bound == 'min' and value < limit:
                errors.append(f"{label.capitalize()} must be at least {limit_label}")
            elif bound == 'max' and value > limit:
                errors.append(f"{label.capitalize()} must be at most {limit_label}")

    return errors


def validate_inputs_json(json_string: str) -> tuple[bool, str]:
    """
    Validate uploaded inputs JSON.

    Args:
        json_string: JSON string to validate

    Returns:
        (is_valid, error_message)
    """
    try:
        input_dict = json.loads(json_string)

        if not isinstance(input_dict, dict):
            return False, "Inputs must be a JSON object"

        unknown = sorted(set(input_dict) - set(get_default_inputs()))
        if unknown:
            return False, f"Unknown field: {unknown[0]}"

        errors = validate_inputs(dict_to_inputs(input_dict))
        if errors:
            return False, errors[0]

        return True, ""

    except json.JSONDecodeError as e:
        return False, f"Invalid JSON: {str(e)}"
    except (TypeError, ValueError) as e:
        return False, f"Input validation error: {str(e)}"


def export_year_by_year_csv(details: Dict[str, List],
                           currency_format: str = "real") -> str:
    """
    Export the accumulation schedule to CSV string.

    Args:
        details: Dictionary with year-by-year details
        currency_format: "real" or "nominal" for column naming

    Returns:
        CSV string
    """
    df = pd.DataFrame(details)

    currency_columns = ['start_balance', 'contributions', 'growth', 'end_balance']

    rename_dict = {}
    for col in currency_columns:
        if col in df.columns:
            rename_dict[col] = f'{col}_{currency_format}'

    df = df.rename(columns=rename_dict)

    return df.to_csv(index=False)


def get_gap_suggestions(results: Optional[ProjectionResults]) -> List[str]:
    """Suggestions for closing the gap, empty unless there is a shortfall"""
    if results is None or not results.is_shortfall:
        return []
    return list(GAP_SUGGESTIONS)


def create_summary_report(inputs: CalculatorInputs,
                          results: ProjectionResults) -> Dict[str, Any]:
    """
    Create a summary report of one projection.

    Args:
        inputs: Calculator inputs the projection was run with
        results: Rounded projection results

    Returns:
        Dictionary with report data
    """
    details = RetirementProjector(inputs).run_projection()

    report = {
        'metadata': {
            'generated_at': datetime.now().isoformat(),
            'currency_format': 'real',
        },
        'inputs': inputs_to_dict(inputs),
        'assumptions': {
            'withdrawal_rate': WITHDRAWAL_RATE,
            'state_pension_weekly': STATE_PENSION_WEEKLY,
            'state_pension_annual': STATE_PENSION_ANNUAL,
        },
        'projection': {
            'years_to_invest': details.years_to_invest,
            'years_in_retirement': details.years_in_retirement,
            'real_return_rate': details.real_return_rate,
            'future_savings': details.future_savings,
            'future_contributions': details.future_contributions,
            'annual_withdrawal': details.annual_withdrawal,
            'state_pension_income': details.state_pension_income,
        },
        'results': {
            'total_savings': results.total_savings,
            'annual_income': results.annual_income,
            'gap': results.shortfall,
            'gap_type': 'shortfall' if results.is_shortfall else 'surplus',
        },
        'suggestions': get_gap_suggestions(results),
        'disclaimers': list(DISCLAIMERS),
    }

    return report


def export_summary_report_json(report: Dict[str, Any]) -> str:
    """Export summary report to JSON string"""
    return json.dumps(report, indent=2, default=str)
