"""
Seed loading, mutation scheduling and candidate generation.

A campaign starts from a single seed. The scheduler draws a plan of
catalog indices, uniformly and with repeats, and the generator applies
each planned mutator to the *unmutated* seed, so every candidate is the
seed plus exactly one mutation. Candidate zero is always the verbatim
seed, giving a baseline run.
"""

import logging

from blindfuzz.fuzzer.errors import EmptyCatalogError


def load_seed(path):
    """
    Read the seed file as text.

    An unreadable or missing seed is not fatal: the problem is logged and
    the campaign fuzzes from the empty string instead.

    Args:
        path: Path to the seed file

    Returns:
        File contents, or "" when it cannot be read
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logging.warning("could not read seed %s: %s; using an empty seed", path, e)
        return ""


def plan(rng, catalog_size, count):
    """
    Draw ``count`` catalog indices, each uniform over [0, catalog_size).

    Raises:
        EmptyCatalogError: if catalog_size is 0
        ValueError: if count is negative
    """
    if catalog_size <= 0:
        raise EmptyCatalogError("cannot schedule mutations from an empty catalog")
    if count < 0:
        raise ValueError("mutation count must not be negative, got %d" % count)
    return [rng.randrange(catalog_size) for _ in range(count)]


def generate_inputs(seed, mutation_plan, catalog, rng):
    """Apply each planned mutator to the seed, in plan order."""
    return [catalog[index].function(seed, rng) for index in mutation_plan]


class Corpus(object):
    """
    The seed of one campaign together with the catalog used to mutate it.

    Attributes:
        seed: Seed text
        catalog: Tuple of Mutator entries
        rng: random.Random shared by the scheduler and every mutator call
    """

    def __init__(self, seed, catalog, rng):
        self.seed = seed
        self.catalog = catalog
        self.rng = rng

    def plan(self, count):
        return plan(self.rng, len(self.catalog), count)

    def mutate(self, mutation_plan):
        return generate_inputs(self.seed, mutation_plan, self.catalog, self.rng)

    def candidates(self, count):
        """
        Build the candidate list for a campaign of ``count`` mutations.

        Returns:
            ``count + 1`` strings: the verbatim seed followed by one
            single-mutation variant per plan entry
        """
        mutation_plan = self.plan(count)
        logging.debug("mutation plan: %s", ", ".join(
            self.catalog[i].name for i in mutation_plan[:10]) + (" ..." if count > 10 else ""))
        return [self.seed] + self.mutate(mutation_plan)
