import os

import pandas as pd


def write_file(path, text):
    with open(path, 'w') as f1:
        f1.write(text)
    return path


def read_file(path):
    with open(path) as f1:
        return f1.read()


def make_table(rows, samples):
    """rows: {sequence id: [counts in sample order]}"""
    return pd.DataFrame([counts for counts in rows.values()],
                        index=list(rows),
                        columns=samples,
                        dtype='int64')


testset_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.realpath(__file__))),
                           'testset')
