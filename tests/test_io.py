"""
Unit tests for IO utilities (input coercion, save/load, validation, exports).
"""
import json
import math
import pytest
import pandas as pd
from io import StringIO
from projection import CalculatorInputs, RetirementProjector, calculate_retirement
from io_utils import (
    coerce_numeric_input, coerce_checkbox_input, inputs_to_dict, dict_to_inputs,
    save_inputs_json, load_inputs_json, create_inputs_download_json,
    parse_inputs_upload_json, validate_inputs, validate_inputs_json,
    export_year_by_year_csv, get_gap_suggestions, create_summary_report,
    export_summary_report_json
)
from config_utils import GAP_SUGGESTIONS, DISCLAIMERS


@pytest.fixture
def inputs():
    return CalculatorInputs(
        current_age=45,
        retirement_age=67,
        life_expectancy=90,
        current_savings=120_000,
        monthly_contributions=800,
        expected_return=6,
        inflation_rate=2.5,
        desired_income=30_000,
        include_state_pension=False
    )


class TestInputCoercion:
    """Test conversion of raw form values"""

    def test_numeric_text(self):
        assert coerce_numeric_input("42") == 42.0
        assert coerce_numeric_input(" 7.5 ") == 7.5
        assert coerce_numeric_input("1e3") == 1000.0

    def test_blank_text_is_zero(self):
        """Clearing a number field gives zero rather than NaN"""
        assert coerce_numeric_input("") == 0.0
        assert coerce_numeric_input("   ") == 0.0
        assert coerce_numeric_input(None) == 0.0

    def test_non_numeric_text_is_nan(self):
        assert math.isnan(coerce_numeric_input("abc"))
        assert math.isnan(coerce_numeric_input("12abc"))

    def test_python_only_spellings_are_nan(self):
        """Text a browser number field rejects stays NaN"""
        for text in ("1_000", "inf", "-inf", "nan", "infinity", "--5", "-0x10"):
            assert math.isnan(coerce_numeric_input(text)), text

    def test_browser_spellings(self):
        assert coerce_numeric_input("Infinity") == math.inf
        assert coerce_numeric_input("-Infinity") == -math.inf
        assert coerce_numeric_input("0x10") == 16.0
        assert coerce_numeric_input("0b101") == 5.0
        assert coerce_numeric_input("0o17") == 15.0
        assert coerce_numeric_input("+5") == 5.0

    def test_numbers_pass_through(self):
        assert coerce_numeric_input(500) == 500.0
        assert isinstance(coerce_numeric_input(500), float)
        assert coerce_numeric_input(True) == 1.0

    def test_checkbox_values(self):
        assert coerce_checkbox_input(True) is True
        assert coerce_checkbox_input("on") is True
        assert coerce_checkbox_input("TRUE") is True
        assert coerce_checkbox_input("false") is False
        assert coerce_checkbox_input("") is False
        assert coerce_checkbox_input(0) is False


class TestInputSerialization:
    """Test input save/load functionality"""

    def test_inputs_to_dict(self, inputs):
        input_dict = inputs_to_dict(inputs)

        assert input_dict['current_age'] == 45
        assert input_dict['include_state_pension'] is False
        assert len(input_dict) == 9

    def test_dict_to_inputs_fills_defaults(self):
        """Missing fields take the default values"""
        result = dict_to_inputs({'current_age': 40})

        assert result.current_age == 40.0
        assert result.retirement_age == 65.0
        assert result.current_savings == 50_000.0
        assert result.include_state_pension is True

    def test_dict_to_inputs_ignores_unknown_keys(self):
        result = dict_to_inputs({'current_age': 40, 'currency': 'GBP'})
        assert result.current_age == 40.0

    def test_dict_to_inputs_coerces_text(self):
        """Raw form text is coerced like a number field"""
        result = dict_to_inputs({
            'monthly_contributions': '750',
            'expected_return': '',
            'desired_income': 'lots',
            'include_state_pension': 'off'
        })

        assert result.monthly_contributions == 750.0
        assert result.expected_return == 0.0
        assert math.isnan(result.desired_income)
        assert result.include_state_pension is False

    def test_dict_to_inputs_rejects_non_dict(self):
        with pytest.raises(TypeError):
            dict_to_inputs([1, 2, 3])

    def test_save_and_load_json(self, inputs, tmp_path):
        filepath = tmp_path / "inputs.json"
        save_inputs_json(inputs, str(filepath))

        with open(filepath) as f:
            saved = json.load(f)
        assert saved['monthly_contributions'] == 800

        assert load_inputs_json(str(filepath)) == inputs

    def test_download_and_upload_json(self, inputs):
        json_string = create_inputs_download_json(inputs)

        assert json.loads(json_string)['expected_return'] == 6
        assert parse_inputs_upload_json(json_string) == inputs

    def test_upload_invalid_json_raises(self):
        with pytest.raises(json.JSONDecodeError):
            parse_inputs_upload_json("{not json")


class TestInputValidation:
    """Test form field constraint checks"""

    def test_valid_inputs(self, inputs):
        assert validate_inputs(inputs) == []

    def test_age_below_minimum(self):
        errors = validate_inputs(dict_to_inputs({'current_age': 16}))
        assert "Current age must be at least 18" in errors

    def test_retirement_before_current_age(self):
        errors = validate_inputs(dict_to_inputs({'current_age': 50, 'retirement_age': 45}))
        assert "Retirement age must be at least current age" in errors

    def test_life_expectancy_limits(self):
        errors = validate_inputs(dict_to_inputs({'life_expectancy': 60}))
        assert "Life expectancy must be at least retirement age" in errors

        errors = validate_inputs(dict_to_inputs({'life_expectancy': 130}))
        assert "Life expectancy must be at most 120" in errors

    def test_rate_limits(self):
        errors = validate_inputs(dict_to_inputs({'expected_return': 25, 'inflation_rate': -1}))

        assert "Expected return must be at most 20" in errors
        assert "Inflation rate must be at least 0" in errors

    def test_negative_money(self):
        errors = validate_inputs(dict_to_inputs({'current_savings': -1}))
        assert "Current savings must be at least 0" in errors

    def test_nan_reported(self):
        errors = validate_inputs(dict_to_inputs({'desired_income': 'abc'}))
        assert "Desired income must be a number" in errors

    def test_validation_does_not_block_projection(self):
        """The engine still projects inputs that fail validation"""
        bad = dict_to_inputs({'current_age': 70, 'retirement_age': 65})

        assert validate_inputs(bad)
        assert calculate_retirement(bad) is not None


class TestValidateInputsJson:
    """Test uploaded JSON validation"""

    def test_valid_json(self, inputs):
        is_valid, error = validate_inputs_json(create_inputs_download_json(inputs))

        assert is_valid
        assert error == ""

    def test_invalid_json(self):
        is_valid, error = validate_inputs_json("{oops")

        assert not is_valid
        assert "Invalid JSON" in error

    def test_not_an_object(self):
        is_valid, error = validate_inputs_json("[1, 2]")

        assert not is_valid
        assert "JSON object" in error

    def test_unknown_field(self):
        is_valid, error = validate_inputs_json(json.dumps({'current_age': 30, 'pension_pot': 1}))

        assert not is_valid
        assert "pension_pot" in error

    def test_out_of_range_field(self):
        is_valid, error = validate_inputs_json(json.dumps({'inflation_rate': 15}))

        assert not is_valid
        assert "Inflation rate" in error


class TestExports:
    """Test CSV and report exports"""

    def test_year_by_year_csv(self, inputs):
        schedule = RetirementProjector(inputs).build_accumulation_schedule()
        csv_string = export_year_by_year_csv(schedule, "real")

        df = pd.read_csv(StringIO(csv_string))
        assert len(df) == 22
        assert 'end_balance_real' in df.columns
        assert 'age' in df.columns
        assert df['age'].iloc[-1] == 67

    def test_year_by_year_csv_nominal_columns(self, inputs):
        schedule = RetirementProjector(inputs).build_accumulation_schedule()
        df = pd.read_csv(StringIO(export_year_by_year_csv(schedule, "nominal")))

        assert 'start_balance_nominal' in df.columns
        assert 'growth_nominal' in df.columns

    def test_gap_suggestions_only_on_shortfall(self, inputs):
        assert get_gap_suggestions(None) == []

        shortfall = calculate_retirement(dict_to_inputs({'current_savings': 0, 'monthly_contributions': 0}))
        assert shortfall.is_shortfall
        assert get_gap_suggestions(shortfall) == GAP_SUGGESTIONS

        surplus = calculate_retirement(dict_to_inputs({'desired_income': 0}))
        assert get_gap_suggestions(surplus) == []

    def test_summary_report(self, inputs):
        results = calculate_retirement(inputs)
        report = create_summary_report(inputs, results)

        assert report['inputs'] == inputs_to_dict(inputs)
        assert report['results']['total_savings'] == results.total_savings
        assert report['results']['gap_type'] in ('shortfall', 'surplus')
        assert report['projection']['years_to_invest'] == 22
        assert report['projection']['years_in_retirement'] == 23
        assert report['assumptions']['withdrawal_rate'] == 0.04
        assert report['disclaimers'] == DISCLAIMERS

    def test_summary_report_json(self, inputs):
        report = create_summary_report(inputs, calculate_retirement(inputs))
        parsed = json.loads(export_summary_report_json(report))

        assert parsed['results'] == report['results']
        assert 'generated_at' in parsed['metadata']
