import os
import shutil
import tempfile
import unittest

import numpy as np
import pandas as pd

from amplicon_curation.errors import InconsistentIdError
from amplicon_curation.filtering import (filter_abundance, filter_ids,
                                         filter_taxa, match_excluded_taxa,
                                         read_fasta_ids, taxa_to_remove)
from tests.util import make_table, read_file, write_file

fasta_text = """>seq1 sample=A
ACGT..ACGT
TTGA
>seq2
AC-GTACGT
>seq3
GGGCCCAAA
"""

taxonomy_text = """seq1\tBacteria(100);Firmicutes(100);Bacilli(98);
seq2\tBacteria(100);Cyanobacteria(100);Chloroplast(100);
seq3\tBacteria(100);Proteobacteria(100);Rickettsiales(100);Mitochondria(97);
"""


class TestAbundanceFilter(unittest.TestCase):

    def test_example(self):
        table = make_table({'seq1': [3], 'seq2': [7]}, ['A'])
        filtered, removed = filter_abundance(table, 5)
        self.assertEqual(list(filtered.index), ['seq2'])
        self.assertEqual(removed, ['seq1'])

    def test_equal_is_kept_unchanged(self):
        table = make_table({'seq1': [2, 3], 'seq2': [1, 1]}, ['A', 'B'])
        filtered, removed = filter_abundance(table, 5)
        self.assertEqual(removed, ['seq2'])
        self.assertEqual(list(filtered.loc['seq1']), [2, 3])

    def test_partition(self):
        rng = np.random.default_rng(11)
        table = pd.DataFrame(rng.integers(0, 6, size=(40, 4)),
                             index=['seq%s' % i for i in range(40)],
                             columns=['A', 'B', 'C', 'D'])
        for a in [0, 1, 5, 10, 20, 100]:
            filtered, removed = filter_abundance(table, a)
            self.assertTrue((filtered.sum(axis=1) >= a).all())
            self.assertTrue((table.loc[removed, :].sum(axis=1) < a).all())
            self.assertEqual(set(filtered.index) | set(removed), set(table.index))
            self.assertEqual(len(filtered.index) + len(removed), table.shape[0])

    def test_everything_removed(self):
        table = make_table({'seq1': [1, 0], 'seq2': [0, 1]}, ['A', 'B'])
        filtered, removed = filter_abundance(table, 10)
        self.assertEqual(filtered.shape, (0, 2))
        self.assertEqual(removed, ['seq1', 'seq2'])

    def test_bad_minimum(self):
        table = make_table({'seq1': [1]}, ['A'])
        with self.assertRaises(ValueError):
            filter_abundance(table, -1)


class TestTaxaFilter(unittest.TestCase):

    def setUp(self):
        self.workdir = tempfile.mkdtemp(prefix="curation_taxa_")
        self.taxonomy = write_file(os.path.join(self.workdir, "rep.taxonomy"), taxonomy_text)

    def tearDown(self):
        if os.path.isdir(self.workdir):
            shutil.rmtree(self.workdir)

    def test_match(self):
        self.assertTrue(match_excluded_taxa("Bacteria(100);Chloroplast(100);", ['chloroplast']))
        self.assertTrue(match_excluded_taxa(" unknown ;unknown_unclassified;", ['unknown']))
        self.assertFalse(match_excluded_taxa("Bacteria;Chloroplast_fa;", ['Chloroplast']))
        self.assertFalse(match_excluded_taxa("Bacteria;Firmicutes;", []))

    def test_taxa_to_remove(self):
        self.assertEqual(taxa_to_remove(self.taxonomy, ['Chloroplast', 'Mitochondria']),
                         ['seq2', 'seq3'])

    def test_filter_table(self):
        table = make_table({'seq1': [1], 'seq2': [2], 'seq3': [3], 'seq4': [4]}, ['A'])
        filtered, removed = filter_taxa(table, self.taxonomy, ['Mitochondria'])
        # seq4 has no taxonomy and is left for the id filter to report
        self.assertEqual(list(filtered.index), ['seq1', 'seq2', 'seq4'])
        self.assertEqual(removed, ['seq3'])


class TestIdFilter(unittest.TestCase):

    def setUp(self):
        self.workdir = tempfile.mkdtemp(prefix="curation_ids_")
        self.fasta = write_file(os.path.join(self.workdir, "rep.fasta"), fasta_text)
        self.taxonomy = write_file(os.path.join(self.workdir, "rep.taxonomy"), taxonomy_text)
        self.fasta_out = os.path.join(self.workdir, "out", "rep.fasta")
        self.taxonomy_out = os.path.join(self.workdir, "out", "rep.taxonomy")

    def tearDown(self):
        if os.path.isdir(self.workdir):
            shutil.rmtree(self.workdir)

    def test_keep_order(self):
        fasta_ids, tax_ids = filter_ids(['seq3', 'seq1'],
                                        self.fasta, self.taxonomy,
                                        self.fasta_out, self.taxonomy_out)
        self.assertEqual(fasta_ids, ['seq1', 'seq3'])
        self.assertEqual(tax_ids, ['seq1', 'seq3'])
        self.assertEqual(read_file(self.fasta_out),
                         ">seq1 sample=A\nACGT..ACGTTTGA\n>seq3\nGGGCCCAAA\n")
        self.assertEqual(read_file(self.taxonomy_out),
                         "seq1\tBacteria(100);Firmicutes(100);Bacilli(98);\n"
                         "seq3\tBacteria(100);Proteobacteria(100);Rickettsiales(100);Mitochondria(97);\n")

    def test_gaps_are_kept(self):
        filter_ids({'seq2'}, self.fasta, self.taxonomy, self.fasta_out, self.taxonomy_out)
        self.assertEqual(read_file(self.fasta_out), ">seq2\nAC-GTACGT\n")

    def test_idempotent(self):
        filter_ids(['seq1', 'seq2'], self.fasta, self.taxonomy, self.fasta_out, self.taxonomy_out)
        first = (read_file(self.fasta_out), read_file(self.taxonomy_out))
        again_fasta = os.path.join(self.workdir, "again", "rep.fasta")
        again_tax = os.path.join(self.workdir, "again", "rep.taxonomy")
        filter_ids(['seq1', 'seq2'], self.fasta_out, self.taxonomy_out, again_fasta, again_tax)
        self.assertEqual((read_file(again_fasta), read_file(again_tax)), first)
        self.assertEqual(read_fasta_ids(again_fasta), ['seq1', 'seq2'])

    def test_missing_in_taxonomy(self):
        taxonomy = write_file(os.path.join(self.workdir, "short.taxonomy"),
                              "seq1\tBacteria;\nseq3\tBacteria;\n")
        with self.assertRaises(InconsistentIdError) as cm:
            filter_ids(['seq2'], self.fasta, taxonomy, self.fasta_out, self.taxonomy_out)
        self.assertEqual(cm.exception.missing, ['seq2'])
        self.assertFalse(os.path.exists(self.fasta_out))
        self.assertFalse(os.path.exists(self.taxonomy_out))

    def test_missing_in_fasta(self):
        with self.assertRaises(InconsistentIdError):
            filter_ids(['seq1', 'seq9'], self.fasta, self.taxonomy, self.fasta_out, self.taxonomy_out)
        self.assertFalse(os.path.exists(self.fasta_out))


if __name__ == '__main__':
    unittest.main()
