import os
import shutil
import tempfile
import unittest
from os.path import join

from click.testing import CliRunner

from amplicon_curation.main import cli
from tests.util import read_file, testset_dir, write_file


class TestCli(unittest.TestCase):

    def setUp(self):
        self.workdir = tempfile.mkdtemp(prefix="curation_cli_")
        self.runner = CliRunner()
        self.count_table = join(testset_dir, "count_table.tsv")
        self.fasta = join(testset_dir, "rep.fasta")
        self.taxonomy = join(testset_dir, "rep.taxonomy")

    def tearDown(self):
        if os.path.isdir(self.workdir):
            shutil.rmtree(self.workdir)

    def invoke(self, *args):
        return self.runner.invoke(cli, ['--log-path', join(self.workdir, 'log.txt')] + list(args))

    def test_threshold(self):
        result = self.invoke('threshold', self.count_table, '-q', '0.15', '-m', '20')
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), "47")
        result = self.invoke('threshold', self.count_table, '-q', '0.15', '-m', '1000')
        self.assertEqual(result.output.strip(), "1000")

    def test_threshold_bad_quantile(self):
        result = self.invoke('threshold', self.count_table, '-q', '1.5')
        self.assertNotEqual(result.exit_code, 0)

    def test_filter_steps(self):
        filtered = join(self.workdir, "filtered.tsv")
        removed = join(self.workdir, "removed.txt")
        result = self.invoke('filter-abundance', self.count_table, filtered, '-a', '2', '--removed', removed)
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(read_file(removed), "ASV4\nASV6\n")

        no_taxa = join(self.workdir, "no_taxa.tsv")
        result = self.invoke('filter-taxa', filtered, self.taxonomy, no_taxa, '-e', 'Chloroplast')
        self.assertEqual(result.exit_code, 0)

        fasta_out = join(self.workdir, "rep.fasta")
        tax_out = join(self.workdir, "rep.taxonomy")
        result = self.invoke('filter-ids', no_taxa, self.fasta, self.taxonomy, fasta_out, tax_out)
        self.assertEqual(result.exit_code, 0)

        shared = join(self.workdir, "otu.shared")
        result = self.invoke('make-shared', no_taxa, fasta_out, shared, '-l', '0.03')
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(read_file(shared).split('\n')[:2],
                         ["label\tGroup\tnumOtus\tASV1\tASV2\tASV3",
                          "0.03\tS1\t3\t30\t10\t5"])

    def test_rarefy(self):
        ofile = join(self.workdir, "rarefied.tsv")
        result = self.invoke('rarefy', self.count_table, ofile, '-d', '40', '--seed', '1')
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(read_file(ofile).split('\n')[0], "\tS1\tS2\tS3")

    def test_inconsistent_ids(self):
        taxonomy = write_file(join(self.workdir, "short.taxonomy"), "ASV1\tBacteria;\n")
        result = self.invoke('filter-ids', self.count_table, self.fasta, taxonomy,
                             join(self.workdir, "a.fasta"), join(self.workdir, "a.taxonomy"))
        self.assertEqual(result.exit_code, 1)
        self.assertIn("InconsistentIdError", result.output)
        self.assertFalse(os.path.exists(join(self.workdir, "a.fasta")))

    def test_final_steps_reject_empty_table(self):
        emptied = join(self.workdir, "emptied.tsv")
        result = self.invoke('filter-abundance', self.count_table, emptied, '-a', '100000')
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(read_file(emptied), "\tS1\tS2\tS3\n")

        fasta_out = join(self.workdir, "rep.fasta")
        result = self.invoke('filter-ids', emptied, self.fasta, self.taxonomy,
                             fasta_out, join(self.workdir, "rep.taxonomy"))
        self.assertEqual(result.exit_code, 1)
        self.assertIn("AllSequencesFilteredError", result.output)
        self.assertFalse(os.path.exists(fasta_out))

        shared = join(self.workdir, "otu.shared")
        result = self.invoke('make-shared', emptied, self.fasta, shared)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("AllSequencesFilteredError", result.output)
        self.assertFalse(os.path.exists(shared))

    def test_malformed_table(self):
        table = write_file(join(self.workdir, "bad.tsv"), "\tA\tB\nseq1\t1\n")
        result = self.invoke('threshold', table)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("MalformedTableError", result.output)


if __name__ == '__main__':
    unittest.main()
