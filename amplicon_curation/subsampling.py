"""
Rarefaction depth and subsampling of a count table.

The depth is derived from the distribution of per-sample totals:
``max(min_depth, floor(quantile(q, totals)))``, where the quantile is the
linear interpolation between order statistics (R's type 7, numpy's
``linear`` method).
"""
import logging
import math

import numpy as np
import pandas as pd
from tqdm import tqdm

from amplicon_curation.errors import EmptyTableError

logger = logging.getLogger(__name__)


def sample_totals(table):
    return table.sum(axis=0)


def compute_threshold(table, quantile, min_depth):
    """
    :param table: count table, sequences x samples
    :param quantile: quantile of the sample totals, in the open interval (0, 1)
    :param min_depth: floor of the returned depth, positive integer
    :return: the rarefaction depth applied to every sample
    """
    if not 0 < quantile < 1:
        raise ValueError("quantile must be in (0, 1), got %s" % quantile)
    if isinstance(min_depth, bool) or int(min_depth) != min_depth or min_depth <= 0:
        raise ValueError("min_depth must be a positive integer, got %s" % min_depth)
    if table.shape[1] == 0:
        raise EmptyTableError("count table has no sample, no subsampling depth can be computed")

    totals = sample_totals(table).to_numpy(dtype=float)
    q_value = float(np.quantile(totals, quantile, method='linear'))
    threshold = max(int(min_depth), int(math.floor(q_value)))
    logger.info("quantile %s of %s sample totals is %s, subsampling depth set to %s",
                quantile, len(totals), q_value, threshold)
    return threshold


def rarefy_table(table, depth, seed=None, progress=False):
    """
    subsample every sample to ``depth`` reads without replacement.

    samples holding fewer reads than ``depth`` are dropped.
    rows which end up with zero reads are kept.
    """
    if isinstance(depth, bool) or int(depth) != depth or depth < 0:
        raise ValueError("depth must be a non-negative integer, got %s" % depth)
    depth = int(depth)
    totals = sample_totals(table)
    kept_samples = [s for s in table.columns if totals[s] >= depth]
    dropped = [s for s in table.columns if totals[s] < depth]
    if dropped:
        logger.warning("%s samples have fewer than %s reads and are removed: %s",
                       len(dropped), depth, ','.join(map(str, dropped)))
    if not kept_samples:
        raise EmptyTableError("no sample reaches the subsampling depth %s" % depth)

    rng = np.random.default_rng(seed)
    rarefied = {}
    for sample in tqdm(kept_samples, disable=not progress):
        counts = table[sample].to_numpy(dtype=np.int64)
        if totals[sample] == depth:
            rarefied[sample] = counts
        else:
            rarefied[sample] = rng.multivariate_hypergeometric(counts, depth)
    rarefied_df = pd.DataFrame(rarefied,
                               index=table.index,
                               columns=kept_samples).astype('int64')
    return rarefied_df
