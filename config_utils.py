"""
Configuration Utilities for the Retirement Calculator
Default inputs, field constraints and optional JSON overrides.
"""

import json
import os
from typing import Dict, Any, List


CONFIG_FILENAME = 'calculator_config.json'


# Shown when projected income falls short of the desired income
GAP_SUGGESTIONS = [
    "Consider increasing your monthly contributions",
    "Look into delaying retirement by a few years",
    "Review your investment strategy for potentially higher returns",
    "Adjust your desired retirement income expectations",
]

DISCLAIMERS = [
    "These calculations are estimates based on your inputs and assumptions.",
    "The results should not be considered as financial advice.",
    "Consult with a financial advisor for personalized retirement planning.",
]


def load_calculator_config(path: str = CONFIG_FILENAME) -> Dict[str, Any]:
    """Load optional calculator configuration from a JSON file"""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        print(f"Warning: Could not load {path}: {e}")
        return {}
    if not isinstance(config, dict):
        print(f"Warning: Ignoring {path}: expected a JSON object")
        return {}
    return config


def get_default_inputs() -> Dict[str, Any]:
    """Get default calculator inputs"""
    return {
        # Personal details
        'current_age': 30,
        'retirement_age': 65,
        'life_expectancy': 85,

        # Financial details
        'current_savings': 50_000,
        'monthly_contributions': 500,
        'expected_return': 7,
        'inflation_rate': 2,
        'desired_income': 40_000,
        'include_state_pension': True,
    }


def get_configured_default_inputs(config: Dict[str, Any] = None) -> Dict[str, Any]:
    """Get default inputs with any overrides from the calculator config applied"""
    if config is None:
        config = load_calculator_config()

    defaults = get_default_inputs()
    overrides = config.get('default_inputs', {})
    if not isinstance(overrides, dict):
        print("Warning: 'default_inputs' in calculator config is not an object, ignoring")
        return defaults

    for key, value in overrides.items():
        if key in defaults:
            defaults[key] = value
        else:
            print(f"Warning: Unknown default input '{key}' in calculator config")
    return defaults


def get_input_field_constraints() -> Dict[str, Dict[str, Any]]:
    """
    Get min/max constraints for each numeric input field.

    A bound given as a field name refers to that field's current value,
    e.g. retirement age may not be below the current age.
    """
    return {
        'current_age': {'min': 18, 'max': 100},
        'retirement_age': {'min': 'current_age', 'max': 100},
        'life_expectancy': {'min': 'retirement_age', 'max': 120},
        'current_savings': {'min': 0},
        'monthly_contributions': {'min': 0},
        'expected_return': {'min': 0, 'max': 20, 'step': 0.1},
        'inflation_rate': {'min': 0, 'max': 10, 'step': 0.1},
        'desired_income': {'min': 0},
    }


def get_numeric_input_fields() -> List[str]:
    """Get names of the numeric input fields in form order"""
    return [
        'current_age', 'retirement_age', 'life_expectancy',
        'current_savings', 'monthly_contributions', 'expected_return',
        'inflation_rate', 'desired_income'
    ]
