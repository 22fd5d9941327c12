import csv
import logging
import os

import pandas as pd

from amplicon_curation.errors import MalformedTableError

logger = logging.getLogger(__name__)


def read_count_table(filename):
    """
    parse a tab separated count table into a DataFrame.

    header is ``<blank>\\t<sample1>\\t<sample2>...``, each following row is
    ``<sequence id>\\t<count1>\\t<count2>...``.
    The returned DataFrame is indexed by sequence id (file order), has one
    int64 column per sample (file order).
    """
    filename = os.path.abspath(filename)
    try:
        # everything read as str, and the header is validated by hand
        # (pandas would silently mangle duplicated sample names)
        raw_df = pd.read_csv(filename,
                             sep='\t',
                             header=None,
                             index_col=None,
                             dtype=str,
                             keep_default_na=False,
                             quoting=csv.QUOTE_NONE,
                             skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        raise MalformedTableError("%s is empty, a header row is required." % filename)
    except pd.errors.ParserError as e:
        raise MalformedTableError("%s has a row with more columns than its header: %s" % (filename, e))
    return validate_count_df(raw_df, filename)


def validate_count_df(raw_df, filename):
    header = list(raw_df.iloc[0, :])
    samples = header[1:]
    body = raw_df.iloc[1:, :]

    if any(not str(s).strip() for s in samples):
        raise MalformedTableError("%s has a blank sample name in its header." % filename)
    duplicated = sorted(set([s for s in samples if samples.count(s) > 1]))
    if duplicated:
        raise MalformedTableError("sample names are duplicated in %s: %s" % (filename,
                                                                             ';'.join(duplicated)))

    # rows shorter than the header are padded with NaN by pandas
    short_rows = body.isna().any(axis=1)
    if short_rows.any():
        row = body.loc[short_rows, :].iloc[0, :]
        raise MalformedTableError("row %s of %s has %s columns, header has %s" % (row.iloc[0],
                                                                                  filename,
                                                                                  int(row.notna().sum()),
                                                                                  len(header)))

    ids = list(body.iloc[:, 0])
    if any(not _.strip() for _ in ids):
        raise MalformedTableError("%s contains a row without sequence id." % filename)
    duplicated = sorted(set(pd.Series(ids)[pd.Series(ids).duplicated()]))
    if duplicated:
        raise MalformedTableError("sequence ids are duplicated in %s: %s" % (filename,
                                                                            ';'.join(duplicated)))

    counts = body.iloc[:, 1:].copy()
    counts.index = ids
    counts.columns = samples
    for sample in counts.columns:
        is_count = counts[sample].str.fullmatch('[0-9]+', na=False)
        if not is_count.all():
            sid = counts.index[~is_count.values][0]
            raise MalformedTableError("count %r of sequence %s, sample %s in %s is not a non-negative integer" % (
                counts.loc[sid, sample], sid, sample, filename))
    try:
        table = counts.astype('int64')
    except (OverflowError, ValueError) as e:
        raise MalformedTableError("%s has a count too large for a 64 bit integer: %s" % (filename, e))
    table.index.name = None
    table.columns.name = None
    logger.debug("read %s sequences x %s samples from %s", table.shape[0], table.shape[1], filename)
    return table


def check_writable_names(names, kind):
    for name in names:
        if any(_ in str(name) for _ in '\t\r\n'):
            raise MalformedTableError("%s %r contains a tab or a line break" % (kind, name))


def format_tsv(header, rows):
    """join the cells verbatim, nothing is quoted so the readers (QUOTE_NONE) get the same text back"""
    return ''.join(['\t'.join([str(_) for _ in row]) + '\n'
                    for row in [header] + rows])


def write_count_table(table, handle):
    """
    the text is formatted before writing, ``handle`` may be a plain file or
    the text wrapper of a luigi target.
    """
    check_writable_names(table.index, 'sequence id')
    check_writable_names(table.columns, 'sample name')
    rows = [[sid] + counts for sid, counts in zip(table.index, table.values.tolist())]
    handle.write(format_tsv([''] + list(table.columns), rows))


def read_taxonomy(filename):
    """
    parse ``<sequence id>\\t<lineage>`` lines.
    :return: list of (sequence id, raw line) in file order, the raw line is kept verbatim (without its newline)
    """
    records = []
    with open(filename) as f1:
        for num, line in enumerate(f1, start=1):
            line = line.rstrip('\r\n')
            if not line.strip():
                continue
            if '\t' not in line:
                raise MalformedTableError("line %s of taxonomy %s has no tab separated lineage" % (num, filename))
            records.append((line.split('\t', 1)[0], line))
    return records


def get_lineage(line):
    return line.split('\t', 1)[1]
