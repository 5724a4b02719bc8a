"""
Multi-N performance comparison for the transmission pass.

Runs the pass at 200, 1000, 2000, 5000 subjects with the cKDTree and the
O(N) scan backends and reports median/p90.
"""

# Pin threading for stable measurement
import os
os.environ.update({
    'OPENBLAS_NUM_THREADS': '1',
    'MKL_NUM_THREADS': '1',
    'NUMEXPR_NUM_THREADS': '1',
    'OMP_NUM_THREADS': '1'
})

import numpy as np
import time
import gc
from typing import List

from contagion.subject import Subject
from contagion.health import HealthStatus
from contagion.rng import make_generator
from contagion.transmission import simulate_transmission


def create_test_subjects(count: int, infected_fraction: float = 0.1, seed: int = 42) -> List[Subject]:
    """Create subjects scattered over a 640x480 field."""
    rng = make_generator(seed)
    subjects = []

    for i in range(count):
        subject = Subject(
            position=rng.random(2) * np.array([640.0, 480.0]),
            velocity=np.zeros(2),
            event_time=i
        )
        if rng.random() < infected_fraction:
            subject.update_health(HealthStatus.INFECTED, 0, 1000)
        subjects.append(subject)

    return subjects


def run_transmission_perf_test(subject_count: int, use_ckdtree: bool, runs: int = 7) -> dict:
    """
    Run transmission performance test at given subject count.

    Probability is near zero (1e-12) rather than zero: a zero probability
    returns before the contact search, while near zero still runs the full
    search and per-contact trial but practically never infects, so the
    population is not mutated between runs.

    Args:
        subject_count: Number of subjects to test
        use_ckdtree: Backend selection
        runs: Number of test runs (default 7 for stable median)

    Returns:
        Dict with p50, p90, min, max, contacts
    """
    subjects = create_test_subjects(subject_count)
    rng = make_generator(7)

    # Warmup
    simulate_transmission(subjects, 30.0, 1e-12, rng, 0, lambda: 1000, use_ckdtree=use_ckdtree)

    # Measure (GC disabled for stable timing)
    gc.collect()
    gc.disable()

    times_ns = []
    try:
        for tick in range(runs):
            start = time.perf_counter_ns()
            result = simulate_transmission(
                subjects, 30.0, 1e-12, rng, tick, lambda: 1000, use_ckdtree=use_ckdtree
            )
            elapsed_ns = time.perf_counter_ns() - start
            times_ns.append(elapsed_ns)
    finally:
        gc.enable()

    # Statistics
    times_ms = np.array(times_ns) / 1_000_000

    return {
        'subject_count': subject_count,
        'backend': 'ckdtree' if use_ckdtree else 'scan',
        'runs': runs,
        'p50_ms': np.percentile(times_ms, 50),
        'p90_ms': np.percentile(times_ms, 90),
        'min_ms': np.min(times_ms),
        'max_ms': np.max(times_ms),
        'contacts': result['contacts']
    }


def main():
    """Run multi-N transmission performance comparison."""
    print("=" * 80)
    print("Transmission Pass Multi-N Performance")
    print("=" * 80)
    print()

    test_sizes = [200, 1000, 2000, 5000]

    results = []

    for subject_count in test_sizes:
        print(f"[N = {subject_count}]")

        for use_ckdtree in (True, False):
            result = run_transmission_perf_test(subject_count, use_ckdtree, runs=7)
            print(f"  {result['backend']:8s} p50: {result['p50_ms']:.3f}ms "
                  f"p90: {result['p90_ms']:.3f}ms contacts: {result['contacts']}")
            results.append(result)

        print()

    # Summary table
    print("=" * 80)
    print("| Subjects | Backend  | p50 (ms) | p90 (ms) | Contacts |")
    print("|----------|----------|----------|----------|----------|")
    for r in results:
        print(f"| {r['subject_count']:8d} | {r['backend']:8s} | {r['p50_ms']:8.3f} | "
              f"{r['p90_ms']:8.3f} | {r['contacts']:8d} |")

    print()
    print("=" * 80)


if __name__ == '__main__':
    main()
