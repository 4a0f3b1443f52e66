#!/usr/bin/env python3
"""
Demo script showing how to use the retirement calculator programmatically.
Pass a JSON file of inputs to project your own numbers: python demo.py inputs.json
"""

import sys

from projection import RetirementProjector, calculate_retirement, create_nominal_table, STATE_PENSION_ANNUAL
from config_utils import get_configured_default_inputs, DISCLAIMERS
from io_utils import dict_to_inputs, load_inputs_json, validate_inputs, get_gap_suggestions


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    print("Retirement Calculator Demo")
    print("=" * 50)

    # 1. Load inputs
    if argv:
        print(f"\nLoading inputs from {argv[0]}...")
        inputs = load_inputs_json(argv[0])
    else:
        print("\nUsing default inputs...")
        inputs = dict_to_inputs(get_configured_default_inputs())

    print(f"   Age: {inputs.current_age:.0f} now, retiring at {inputs.retirement_age:.0f}, "
          f"planning to {inputs.life_expectancy:.0f}")
    print(f"   Savings: £{inputs.current_savings:,.0f} plus £{inputs.monthly_contributions:,.0f}/month")
    print(f"   Return {inputs.expected_return:.1f}%, inflation {inputs.inflation_rate:.1f}%")
    print(f"   Desired income: £{inputs.desired_income:,.0f}/year")
    if inputs.include_state_pension:
        print(f"   Including state pension of £{STATE_PENSION_ANNUAL:,.0f}/year")

    errors = validate_inputs(inputs)
    for error in errors:
        print(f"   Warning: {error}")

    # 2. Project
    results = calculate_retirement(inputs)
    details = RetirementProjector(inputs).run_projection()

    print("\nYour Retirement Projection:")
    print(f"   Real return rate: {details.real_return_rate:.3%}")
    print(f"   Total savings at retirement: £{results.total_savings:,.0f}")
    print(f"   Estimated annual income: £{results.annual_income:,.0f}")
    gap_label = "Annual shortfall" if results.is_shortfall else "Annual surplus"
    print(f"   {gap_label}: £{results.shortfall:,.0f}")

    suggestions = get_gap_suggestions(results)
    if suggestions:
        print("\nSuggestions to close the gap:")
        for suggestion in suggestions:
            print(f"   - {suggestion}")

    # 3. Show the last few years of the accumulation phase
    if errors:
        schedule = {'age': []}
    else:
        schedule = RetirementProjector(inputs).build_accumulation_schedule()
    if schedule['age']:
        print("\nSavings in the final years before retirement (today's money):")
        print(f"   {'Age':<5} {'Start':>12} {'Growth':>10} {'End':>12}")
        for i in range(max(0, len(schedule['age']) - 5), len(schedule['age'])):
            print(f"   {schedule['age'][i]:<5.0f} £{schedule['start_balance'][i]:>11,.0f} "
                  f"£{schedule['growth'][i]:>9,.0f} £{schedule['end_balance'][i]:>11,.0f}")

        # Inputs hold inflation as a percentage
        nominal = create_nominal_table(schedule, inputs.inflation_rate / 100)
        print(f"   At {inputs.inflation_rate:.1f}% inflation that is "
              f"£{nominal['end_balance'][-1]:,.0f} in future (nominal) money")

    print()
    for disclaimer in DISCLAIMERS:
        print(f"* {disclaimer}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
