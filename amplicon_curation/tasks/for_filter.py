from os.path import join

import luigi

from amplicon_curation import plan
from amplicon_curation.config import default_file_structures as fs
from amplicon_curation.filtering import (filter_abundance, filter_ids,
                                         filter_taxa)
from amplicon_curation.tasks.basic_tasks import base_luigi_task


class taxa_filter(base_luigi_task):
    step = plan.TAXA_FILTER

    def requires(self):
        return self.table_task(self.step)

    def output(self):
        odir = self.get_step_dir(fs.taxa_filter_dir)
        return {'table': luigi.LocalTarget(join(odir, fs.count_table_file)),
                'removed': luigi.LocalTarget(join(odir, fs.removed_ids_file))}

    def run(self):
        table = self.read_input_table()
        filtered, removed = filter_taxa(table,
                                        self.taxonomy,
                                        self.get_config_params(('taxa_filter_args', 'excluded_taxa')))
        self.check_not_empty(filtered)
        self.write_table(filtered, self.output()['table'])
        self.write_ids(removed, self.output()['removed'])


class abundance_filter(base_luigi_task):
    step = plan.ABUNDANCE_FILTER

    def requires(self):
        return self.table_task(self.step)

    def output(self):
        odir = self.get_step_dir(fs.abundance_filter_dir)
        return {'table': luigi.LocalTarget(join(odir, fs.count_table_file)),
                'removed': luigi.LocalTarget(join(odir, fs.removed_ids_file))}

    def run(self):
        table = self.read_input_table()
        filtered, removed = filter_abundance(table,
                                             self.get_config_params(('abundance_args', 'min_abundance')))
        self.check_not_empty(filtered)
        self.write_table(filtered, self.output()['table'])
        self.write_ids(removed, self.output()['removed'])


class id_filter(base_luigi_task):
    """
    subset the representative FASTA and the taxonomy to the sequences left in the final table
    """
    step = plan.ID_FILTER

    def requires(self):
        return self.table_task(self.step)

    def output(self):
        odir = self.get_step_dir(fs.id_filter_dir)
        return {'fasta': luigi.LocalTarget(join(odir, fs.rep_fasta_file)),
                'taxonomy': luigi.LocalTarget(join(odir, fs.rep_taxonomy_file))}

    def run(self):
        table = self.read_input_table()
        filter_ids(list(table.index),
                   self.fasta,
                   self.taxonomy,
                   self.output()['fasta'].path,
                   self.output()['taxonomy'].path)

