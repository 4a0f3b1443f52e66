"""
Deterministic retirement projection using a closed-form compound-interest model.
Projects savings at retirement and the income a 4% withdrawal rate supports.
"""
import numpy as np
from typing import Dict, List, Optional, Union
from dataclasses import dataclass


STATE_PENSION_WEEKLY = 203.85
STATE_PENSION_ANNUAL = STATE_PENSION_WEEKLY * 52
WITHDRAWAL_RATE = 0.04
MONTHS_PER_YEAR = 12
# Longest accumulation phase the schedule will list (oldest life expectancy)
MAX_SCHEDULE_YEARS = 120

# Whole currency units, or float NaN/inf when the arithmetic goes non-finite
Amount = Union[int, float]


@dataclass(frozen=True)
class CalculatorInputs:
    """Inputs for one retirement projection"""
    # Whole years in practice; coerced form values arrive as floats
    current_age: Union[int, float]
    retirement_age: Union[int, float]
    life_expectancy: Union[int, float]
    current_savings: float
    monthly_contributions: float
    expected_return: float  # Percent, e.g. 7 for 7%
    inflation_rate: float  # Percent
    desired_income: float
    include_state_pension: bool


@dataclass(frozen=True)
class ProjectionResults:
    """Rounded projection outcome"""
    total_savings: Amount
    annual_income: Amount
    shortfall: Amount
    is_shortfall: bool


@dataclass(frozen=True)
class ProjectionDetails:
    """Unrounded intermediate values from a projection"""
    years_to_invest: float
    years_in_retirement: float
    real_return_rate: float
    monthly_rate: float
    months: float
    future_savings: float
    future_contributions: float
    total_savings: float
    annual_withdrawal: float
    state_pension_income: float
    total_annual_income: float
    income_gap: float


def round_half_up(value: float) -> Amount:
    """
    Round to the nearest whole unit, with halves rounded up (1000.5 -> 1001).

    Finite values come back as int. NaN and infinities are returned unchanged
    as floats.
    """
    rounded = np.floor(np.float64(value) + 0.5)
    if np.isfinite(rounded):
        return int(rounded)
    return float(rounded)


class RetirementProjector:
    """Closed-form retirement projection in today's money"""

    def __init__(self, inputs: CalculatorInputs):
        self.inputs = inputs

    def _get_real_return_rate(self) -> np.float64:
        """Inflation-adjusted annual return, compounded rather than subtracted"""
        nominal = np.float64(self.inputs.expected_return) / 100
        inflation = np.float64(self.inputs.inflation_rate) / 100
        return (1 + nominal) / (1 + inflation) - 1

    def _get_future_savings(self, real_rate: np.float64, years: np.float64) -> np.float64:
        """Grow the current lump sum for the given number of years"""
        return np.float64(self.inputs.current_savings) * np.power(1 + real_rate, years)

    def _get_future_contributions(self, monthly_rate: np.float64, months: np.float64) -> np.float64:
        """Future value of the monthly contribution annuity"""
        contribution = np.float64(self.inputs.monthly_contributions)
        if monthly_rate == 0:
            return contribution * months
        return contribution * ((np.power(1 + monthly_rate, months) - 1) / monthly_rate)

    def _get_state_pension_income(self) -> float:
        return STATE_PENSION_ANNUAL if self.inputs.include_state_pension else 0.0

    def run_projection(self) -> ProjectionDetails:
        """Run the projection and return every intermediate value"""
        with np.errstate(all='ignore'):
            years_to_invest = np.float64(self.inputs.retirement_age) - np.float64(self.inputs.current_age)
            # Reported only; the payout below is a flat withdrawal rate
            years_in_retirement = np.float64(self.inputs.life_expectancy) - np.float64(self.inputs.retirement_age)

            real_rate = self._get_real_return_rate()
            future_savings = self._get_future_savings(real_rate, years_to_invest)

            monthly_rate = real_rate / MONTHS_PER_YEAR
            months = years_to_invest * MONTHS_PER_YEAR
            future_contributions = self._get_future_contributions(monthly_rate, months)

            total_savings = future_savings + future_contributions
            annual_withdrawal = total_savings * WITHDRAWAL_RATE

            state_pension = self._get_state_pension_income()
            total_income = annual_withdrawal + state_pension
            income_gap = np.float64(self.inputs.desired_income) - total_income

        return ProjectionDetails(
            years_to_invest=float(years_to_invest),
            years_in_retirement=float(years_in_retirement),
            real_return_rate=float(real_rate),
            monthly_rate=float(monthly_rate),
            months=float(months),
            future_savings=float(future_savings),
            future_contributions=float(future_contributions),
            total_savings=float(total_savings),
            annual_withdrawal=float(annual_withdrawal),
            state_pension_income=float(state_pension),
            total_annual_income=float(total_income),
            income_gap=float(income_gap)
        )

    def build_accumulation_schedule(self) -> Dict[str, List]:
        """
        Build year-by-year savings balances for the accumulation phase.

        Each year-end balance uses the same closed-form formulas as
        run_projection, so for a whole number of years the last end_balance
        equals the projected total savings. Partial years are not listed, and
        a span longer than MAX_SCHEDULE_YEARS gives an empty schedule.

        Returns:
            Dictionary of equal-length lists keyed by column name
        """
        details = {
            'year_offset': [],
            'age': [],
            'start_balance': [],
            'contributions': [],
            'growth': [],
            'end_balance': []
        }

        with np.errstate(all='ignore'):
            years_to_invest = np.float64(self.inputs.retirement_age) - np.float64(self.inputs.current_age)
            if not np.isfinite(years_to_invest) or not 0 < years_to_invest <= MAX_SCHEDULE_YEARS:
                return details

            real_rate = self._get_real_return_rate()
            monthly_rate = real_rate / MONTHS_PER_YEAR
            annual_contributions = np.float64(self.inputs.monthly_contributions) * MONTHS_PER_YEAR

            balance = np.float64(self.inputs.current_savings)
            for year_offset in range(1, int(years_to_invest) + 1):
                end_balance = (self._get_future_savings(real_rate, np.float64(year_offset)) +
                               self._get_future_contributions(monthly_rate, np.float64(year_offset * MONTHS_PER_YEAR)))

                details['year_offset'].append(year_offset)
                details['age'].append(float(self.inputs.current_age) + year_offset)
                details['start_balance'].append(float(balance))
                details['contributions'].append(float(annual_contributions))
                details['growth'].append(float(end_balance - balance - annual_contributions))
                details['end_balance'].append(float(end_balance))

                balance = end_balance

        return details


def calculate_retirement(inputs: Optional[CalculatorInputs]) -> Optional[ProjectionResults]:
    """
    Project the retirement outcome for a complete set of inputs.

    Args:
        inputs: Calculator inputs, or None before the caller has any

    Returns:
        Rounded results, or None when no inputs were supplied
    """
    if inputs is None:
        return None

    details = RetirementProjector(inputs).run_projection()
    gap = details.income_gap

    return ProjectionResults(
        total_savings=round_half_up(details.total_savings),
        annual_income=round_half_up(details.total_annual_income),
        shortfall=round_half_up(abs(gap)),
        is_shortfall=bool(gap > 0)
    )


def convert_to_nominal(real_values: np.ndarray,
                      inflation_rate: float = 0.02) -> np.ndarray:
    """
    Convert real values to nominal using compound inflation.

    Args:
        real_values: Array of values in today's money, one per year from year 1
        inflation_rate: Annual inflation rate as a decimal (0.02 for 2%),
            not the percentage held in CalculatorInputs

    Returns:
        Array of nominal values
    """
    real_values = np.asarray(real_values, dtype=float)
    years = np.arange(1, len(real_values) + 1)
    return real_values * (1 + inflation_rate) ** years


def create_nominal_table(details: Dict,
                        inflation_rate: float = 0.02) -> Dict:
    """
    Create nominal version of the accumulation schedule.

    Args:
        details: Year-by-year schedule in today's money
        inflation_rate: Annual inflation rate as a decimal (0.02 for 2%),
            not the percentage held in CalculatorInputs

    Returns:
        Dictionary with nominal values
    """
    nominal_details = {}

    nominal_fields = ['start_balance', 'contributions', 'growth', 'end_balance']
    passthrough_fields = ['year_offset', 'age']

    for field in nominal_fields:
        if field in details:
            real_values = np.array(details[field], dtype=float)
            years_offset = np.array(details['year_offset'])
            inflation_factors = (1 + inflation_rate) ** years_offset
            nominal_details[field] = (real_values * inflation_factors).tolist()

    for field in passthrough_fields:
        if field in details:
            nominal_details[field] = details[field]

    return nominal_details
