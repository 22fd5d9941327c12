"""
Conversion between the count table and mothur's ``shared`` format.

A shared file has one row per sample::

    label   Group   numOtus OTU1    OTU2    ...
    <label> <sample> <n>    <count> <count> ...

The OTU columns follow the order of the representative FASTA, so downstream
tools can rely on positional correspondence between the two files.
"""
import csv
import logging
import os

import pandas as pd

from amplicon_curation.errors import InconsistentIdError, MalformedTableError
from amplicon_curation.input_parser import check_writable_names, format_tsv

logger = logging.getLogger(__name__)

shared_meta_columns = ['label', 'Group', 'numOtus']


def to_shared(table, otu_order=None, label='userLabel'):
    """
    :param table: count table, sequences x samples
    :param otu_order: OTU column order, usually the ids of the filtered FASTA; defaults to the table order
    :param label: value of the ``label`` column
    :return: DataFrame with the shared columns, one row per sample
    """
    if otu_order is None:
        otu_order = list(table.index)
    otu_order = list(otu_order)
    if len(set(otu_order)) != len(otu_order):
        raise InconsistentIdError("OTU order contains duplicated ids")
    not_in_order = sorted(set(table.index).difference(otu_order))
    not_in_table = sorted(set(otu_order).difference(table.index))
    if not_in_order or not_in_table:
        raise InconsistentIdError("OTU order and count table disagree; only in table: %s; only in order: %s" % (
            ';'.join(not_in_order), ';'.join(not_in_table)),
            missing=not_in_order + not_in_table)

    counts = table.loc[otu_order, :].T
    shared = pd.DataFrame({'label': [label] * counts.shape[0],
                           'Group': list(counts.index),
                           'numOtus': [len(otu_order)] * counts.shape[0]},
                          columns=shared_meta_columns)
    shared = pd.concat([shared,
                        counts.reset_index(drop=True)],
                       axis=1)
    shared.columns = shared_meta_columns + otu_order
    return shared


def write_shared(shared, handle):
    check_writable_names(shared.columns, 'OTU id')
    check_writable_names(shared['Group'], 'sample name')
    check_writable_names(shared['label'], 'label')
    handle.write(format_tsv(list(shared.columns), shared.values.tolist()))


def read_shared(filename):
    """parse a shared file back into a count table (OTUs x samples)"""
    filename = os.path.abspath(filename)
    try:
        df = pd.read_csv(filename,
                         sep='\t',
                         header=0,
                         dtype=str,
                         keep_default_na=False,
                         quoting=csv.QUOTE_NONE)
    except pd.errors.EmptyDataError:
        raise MalformedTableError("%s is empty" % filename)
    except pd.errors.ParserError as e:
        raise MalformedTableError("%s has a row with more columns than its header: %s" % (filename, e))

    if list(df.columns[:3]) != shared_meta_columns:
        raise MalformedTableError("%s does not start with the columns %s" % (filename,
                                                                           '\t'.join(shared_meta_columns)))
    if df.isna().values.any():
        raise MalformedTableError("%s has a row with fewer columns than its header" % filename)
    otus = list(df.columns[3:])
    for _, row in df.iterrows():
        if row['numOtus'] != str(len(otus)):
            raise MalformedTableError("sample %s declares %s OTUs, %s has %s OTU columns" % (row['Group'],
                                                                                          row['numOtus'],
                                                                                          filename,
                                                                                          len(otus)))
    counts = df.loc[:, otus]
    counts.index = list(df['Group'])
    for otu in otus:
        if not counts[otu].str.fullmatch('[0-9]+', na=False).all():
            raise MalformedTableError("OTU %s of %s has a count which is not a non-negative integer" % (otu,
                                                                                                     filename))
    # transposed first, a file without OTU columns still gives int64 sample columns
    try:
        table = counts.T.astype('int64')
    except (OverflowError, ValueError) as e:
        raise MalformedTableError("%s has a count too large for a 64 bit integer: %s" % (filename, e))
    table.index = otus
    table.columns = list(df['Group'])
    return table
