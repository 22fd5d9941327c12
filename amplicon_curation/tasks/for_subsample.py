from os.path import join

import luigi

from amplicon_curation import plan
from amplicon_curation.config import default_file_structures as fs
from amplicon_curation.subsampling import compute_threshold, rarefy_table
from amplicon_curation.tasks.basic_tasks import base_luigi_task


class subsample(base_luigi_task):
    """
    rarefy every sample to a depth taken from a quantile of the sample totals.
    the depth is kept in threshold.txt next to the subsampled table.
    """
    step = plan.SUBSAMPLE

    def requires(self):
        return self.table_task(self.step)

    def output(self):
        odir = self.get_step_dir(fs.subsample_dir)
        return {'threshold': luigi.LocalTarget(join(odir, fs.threshold_file)),
                'table': luigi.LocalTarget(join(odir, fs.count_table_file))}

    def run(self):
        table = self.read_input_table()
        threshold = compute_threshold(table,
                                      quantile=self.get_config_params(('subsampling_args', 'quantile')),
                                      min_depth=self.get_config_params(('subsampling_args', 'min_depth')))
        rarefied = rarefy_table(table,
                                threshold,
                                seed=self.get_config_params(('subsampling_args', 'seed')))
        with self.output()['threshold'].open('w') as f1:
            f1.write("%s\n" % threshold)
        self.write_table(rarefied, self.output()['table'])
