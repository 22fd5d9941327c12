import logging
import re

import luigi
from Bio import SeqIO

from amplicon_curation.errors import InconsistentIdError
from amplicon_curation.input_parser import get_lineage, read_taxonomy

logger = logging.getLogger(__name__)

# bootstrap confidence appended by mothur/dada2 classifiers, e.g. Bacteria(100)
confidence_suffix = re.compile(r"\(\s*[0-9.]+\s*\)$")


def filter_abundance(table, min_abundance):
    """
    remove sequences whose total abundance over all samples is below ``min_abundance``.

    :return: (filtered table, removed sequence ids in table order)
    """
    if isinstance(min_abundance, bool) or int(min_abundance) != min_abundance or min_abundance < 0:
        raise ValueError("min_abundance must be a non-negative integer, got %s" % min_abundance)
    totals = table.sum(axis=1)
    keep = totals >= min_abundance
    removed = list(table.index[~keep.values])
    filtered = table.loc[keep.values, :]
    logger.info("%s of %s sequences have less than %s reads and are removed",
                len(removed), table.shape[0], min_abundance)
    return filtered, removed


def match_excluded_taxa(lineage, excluded_taxa):
    excluded = set([_.strip().lower() for _ in excluded_taxa])
    for rank in lineage.split(';'):
        name = confidence_suffix.sub('', rank.strip()).strip()
        if name and name.lower() in excluded:
            return True
    return False


def taxa_to_remove(taxonomy_file, excluded_taxa):
    """sequence ids of the taxonomy whose lineage contains one of ``excluded_taxa``"""
    return [sid
            for sid, line in read_taxonomy(taxonomy_file)
            if match_excluded_taxa(get_lineage(line), excluded_taxa)]


def filter_taxa(table, taxonomy_file, excluded_taxa):
    """
    drop the rows of ``table`` assigned to an excluded taxon.
    rows missing from the taxonomy are kept.
    """
    unwanted = set(taxa_to_remove(taxonomy_file, excluded_taxa))
    is_unwanted = table.index.isin(unwanted)
    removed = list(table.index[is_unwanted])
    logger.info("%s sequences assigned to %s are removed",
                len(removed), ','.join(excluded_taxa))
    return table.loc[~is_unwanted, :], removed


def filter_ids(retained_ids, fasta_in, taxonomy_in, fasta_out, taxonomy_out):
    """
    keep only the FASTA and taxonomy records of ``retained_ids``, in their original order.

    Both inputs are checked before anything is written; an id of ``retained_ids``
    missing from either file raises InconsistentIdError.
    FASTA is written in two-line format, so running it again on its own output changes nothing.

    :return: (ids written to fasta_out, ids written to taxonomy_out)
    """
    retained = set(retained_ids)
    records = [r for r in SeqIO.parse(fasta_in, 'fasta')]
    tax_records = read_taxonomy(taxonomy_in)

    fasta_ids = set([r.id for r in records])
    tax_ids = set([sid for sid, _ in tax_records])
    missing_fasta = sorted(retained.difference(fasta_ids))
    missing_tax = sorted(retained.difference(tax_ids))
    if missing_fasta or missing_tax:
        msg = []
        if missing_fasta:
            msg.append("%s retained ids are absent from %s: %s" % (len(missing_fasta),
                                                                 fasta_in,
                                                                 ';'.join(missing_fasta)))
        if missing_tax:
            msg.append("%s retained ids are absent from %s: %s" % (len(missing_tax),
                                                                 taxonomy_in,
                                                                 ';'.join(missing_tax)))
        raise InconsistentIdError('\n'.join(msg),
                                  missing=sorted(set(missing_fasta + missing_tax)))

    kept_records = [r for r in records if r.id in retained]
    kept_tax = [(sid, line) for sid, line in tax_records if sid in retained]
    with luigi.LocalTarget(fasta_out).open('w') as f1:
        SeqIO.write(kept_records, f1, 'fasta-2line')
    with luigi.LocalTarget(taxonomy_out).open('w') as f1:
        for _, line in kept_tax:
            f1.write(line + '\n')
    logger.info("kept %s of %s fasta records and %s of %s taxonomy records",
                len(kept_records), len(records), len(kept_tax), len(tax_records))
    return [r.id for r in kept_records], [sid for sid, _ in kept_tax]


def read_fasta_ids(fasta):
    return [r.id for r in SeqIO.parse(fasta, 'fasta')]
