"""
Transmission pass for the contagion simulation.

Infected subjects pass the infection to susceptible subjects within the
infection radius, one Bernoulli trial per (infected, susceptible) contact.

Evaluation order:
- Infected and susceptible sets are captured at the start of the pass.
  A subject infected during the pass does not infect others until the
  next tick.
- Infected subjects are visited in population order, their contacts in
  ascending row order. A susceptible subject infected by an earlier
  contact is skipped for the rest of the pass (at most one infection).

Backend selection via constants.USE_CKDTREE:
- True: scipy.cKDTree query_ball_point, O(N log N) build
- False: vectorized O(N) distance scan per infected subject
"""

import numpy as np
from typing import Callable, Dict, List, Optional

from scipy.spatial import cKDTree

from .spatial import distance_squared
from .subject import Subject
from .health import HealthStatus
from .constants import USE_CKDTREE, CKDTREE_LEAFSIZE


def _contacts_ckdtree(
    positions: np.ndarray,
    infected_rows: np.ndarray,
    radius: float,
    leafsize: int
) -> List[np.ndarray]:
    """
    Rows within radius of each infected row (cKDTree backend).

    query_ball_point is inclusive at the radius; callers apply the strict
    squared-distance test afterwards.
    """
    tree = cKDTree(positions, leafsize=leafsize)
    hits = tree.query_ball_point(positions[infected_rows], r=radius)
    return [np.array(sorted(rows), dtype=np.int64) for rows in hits]


def _contacts_scan(positions: np.ndarray, infected_rows: np.ndarray, radius: float) -> List[np.ndarray]:
    """Rows within radius of each infected row (O(N) scan backend)"""
    radius_sq = radius * radius
    contacts = []
    for row in infected_rows:
        diff = positions - positions[row]
        dist_sq = np.einsum('ij,ij->i', diff, diff)
        contacts.append(np.nonzero(dist_sq < radius_sq)[0])
    return contacts


def simulate_transmission(
    subjects: List[Subject],
    infection_radius: float,
    probability: float,
    rng: np.random.Generator,
    tick: int,
    duration_fn: Callable[[], int],
    use_ckdtree: Optional[bool] = None
) -> Dict:
    """
    Run one transmission pass over the whole population.

    Args:
        subjects: Population (mutated in place)
        infection_radius: Contact radius; 0 disables transmission
        probability: Per-contact infection probability for this tick
        rng: Engine RNG
        tick: Current tick (start of any new infection)
        duration_fn: Returns the infection duration for a new case
        use_ckdtree: Override USE_CKDTREE constant (for testing)

    Returns:
        Dict with:
            - 'new_infections': rows infected during this pass (in infection order)
            - 'contacts': number of (infected, susceptible) pairs tested
    """
    result = {'new_infections': [], 'contacts': 0}

    if infection_radius <= 0.0 or probability <= 0.0 or not subjects:
        return result

    status = [s.status for s in subjects]
    infected_rows = np.array(
        [i for i, st in enumerate(status) if st is HealthStatus.INFECTED], dtype=np.int64
    )
    susceptible = np.array([st is HealthStatus.SUSCEPTIBLE for st in status], dtype=bool)

    if len(infected_rows) == 0 or not susceptible.any():
        return result

    positions = np.array([s.position for s in subjects], dtype=np.float64)
    radius_sq = infection_radius * infection_radius

    if use_ckdtree is None:
        use_ckdtree = USE_CKDTREE

    if use_ckdtree:
        contacts = _contacts_ckdtree(positions, infected_rows, infection_radius, CKDTREE_LEAFSIZE)
    else:
        contacts = _contacts_scan(positions, infected_rows, infection_radius)

    for source, rows in zip(infected_rows, contacts):
        source_pos = positions[source]
        for row in rows:
            if row == source or not susceptible[row]:
                continue

            if distance_squared(positions[row], source_pos) >= radius_sq:
                continue

            result['contacts'] += 1
            if rng.random() < probability:
                subjects[row].update_health(HealthStatus.INFECTED, tick, duration_fn())
                susceptible[row] = False
                result['new_infections'].append(int(row))

    return result
