from os.path import join

import luigi

from amplicon_curation import plan
from amplicon_curation.config import default_file_structures as fs
from amplicon_curation.filtering import read_fasta_ids
from amplicon_curation.input_parser import read_count_table
from amplicon_curation.shared import to_shared, write_shared
from amplicon_curation.tasks.basic_tasks import base_luigi_task
from amplicon_curation.tasks.for_filter import id_filter


class make_shared(base_luigi_task):
    """
    shared table whose OTU columns follow the order of the filtered FASTA
    """
    step = plan.SHARED

    def requires(self):
        required_tasks = {}
        required_tasks['ids'] = id_filter(**self.get_kwargs())
        required_tasks['table'] = self.table_task(plan.ID_FILTER)
        return required_tasks

    def output(self):
        odir = self.get_step_dir(fs.shared_dir)
        return luigi.LocalTarget(join(odir, fs.shared_file))

    def run(self):
        table = read_count_table(self.input()['table']['table'].path)
        otu_order = read_fasta_ids(self.input()['ids']['fasta'].path)
        shared = to_shared(table,
                           otu_order,
                           label=self.get_config_params(('shared_args', 'label')))
        with self.output().open('w') as f1:
            write_shared(shared, f1)
