"""
Headless field run.

Loads a field configuration (default: data/field/default.yaml), runs the
epidemic until eradication or a tick cap, and prints periodic summaries.

Usage:
    python scripts/run_field.py [config.yaml] [max_ticks]
"""

import sys
from pathlib import Path

from contagion.loader import load_field_config
from contagion.simulation import SimulationField
from contagion.constants import TICK_SUMMARY_INTERVAL


DEFAULT_CONFIG = Path(__file__).parent.parent / "data" / "field" / "default.yaml"
DEFAULT_MAX_TICKS = 20000


def main():
    """Run one field to eradication (or max_ticks) and report the outcome."""
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_CONFIG
    max_ticks = int(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_MAX_TICKS

    print("=" * 80)
    print(f"Contagion field run: {config_path}")
    print("=" * 80)

    config = load_field_config(config_path)
    field = SimulationField(config)
    field.set_destination_enabled(True)

    for i in range(max_ticks):
        field.advance()

        if (i + 1) % TICK_SUMMARY_INTERVAL == 0:
            field.print_tick_summary()

        if field.is_eradicated:
            break

    series = field.get_time_series()
    print()
    print("=" * 80)
    if field.is_eradicated:
        print(f"[OK] Eradicated at tick {field.eradication_tick}")
    else:
        print(f"[WARN] Not eradicated after {max_ticks} ticks")
    print(f"  Peak infected: {field.max_infected} / {config.subject_count}")
    if len(series):
        susceptible, infected, removed = series[-1]
        print(f"  Final S/I/R: {susceptible}/{infected}/{removed}")
        print(f"  Never infected: {100.0 * susceptible / config.subject_count:.1f}%")
    print("=" * 80)


if __name__ == '__main__':
    main()
