import copy
import logging
from os.path import join

import luigi

from amplicon_curation.config import default_params_path
from amplicon_curation.errors import AllSequencesFilteredError
from amplicon_curation.input_parser import read_count_table, write_count_table
from amplicon_curation.plan import (SubsamplingMode, TaxaFilterStage,
                                    build_plan, previous_step)
from amplicon_curation.toolkit import setup_logging

logger = logging.getLogger(__name__)


def parse_param(file, g):
    with open(file, 'r') as f1:
        exec(f1.read(), g)


def load_config(config=None):
    """
    default parameters, updated with the ones of a user python file.

    dict parameters are merged key by key, others are replaced.
    names unknown to the defaults are ignored.
    """
    defaults = {}
    parse_param(default_params_path, defaults)
    params = {k: copy.deepcopy(v)
              for k, v in defaults.items()
              if not k.startswith('__')}
    if config:
        new_params = {}
        parse_param(config, new_params)
        for aparam, val in new_params.items():
            if '__' in aparam or aparam not in params:
                continue
            if type(params[aparam]) == dict:
                params[aparam].update(val)
            else:
                params[aparam] = val
    return params


class count_table_input(luigi.ExternalTask):
    count_table = luigi.Parameter()

    def output(self):
        return {'table': luigi.LocalTarget(self.count_table)}


class base_luigi_task(luigi.Task):
    odir = luigi.Parameter()
    count_table = luigi.Parameter()
    fasta = luigi.Parameter()
    taxonomy = luigi.Parameter()
    log_path = luigi.OptionalParameter(default=None)
    config = luigi.OptionalParameter(default=None)
    subsampling = luigi.EnumParameter(enum=SubsamplingMode,
                                      default=SubsamplingMode.SUBSAMPLE)
    taxa_stage = luigi.EnumParameter(enum=TaxaFilterStage,
                                     default=TaxaFilterStage.END)

    step = None

    def get_log_path(self):
        return self.log_path

    def get_kwargs(self):
        kwargs = dict(odir=self.odir,
                      count_table=self.count_table,
                      fasta=self.fasta,
                      taxonomy=self.taxonomy,
                      log_path=self.log_path,
                      config=self.config,
                      subsampling=self.subsampling,
                      taxa_stage=self.taxa_stage)
        return kwargs

    def get_config(self):
        if not hasattr(self, 'config_params'):
            self.config_params = load_config(self.config)
        return self.config_params

    def get_config_params(self, arg):
        config_params = self.get_config()
        if type(arg) == str:
            return config_params.get(arg)
        else:
            return config_params[arg[0]][arg[1]]

    def get_plan(self):
        return build_plan(self.subsampling, self.taxa_stage)

    def get_step_dir(self, name):
        return join(str(self.odir), name)

    def table_task(self, step):
        """task producing the count table consumed by ``step``"""
        from amplicon_curation.tasks import get_step_task
        prior = previous_step(self.get_plan(), step)
        if prior is None:
            return count_table_input(count_table=self.count_table)
        return get_step_task(prior)(**self.get_kwargs())

    def read_input_table(self):
        return read_count_table(self.input()['table'].path)

    def write_table(self, table, target):
        with target.open('w') as f1:
            write_count_table(table, f1)

    def write_ids(self, ids, target):
        with target.open('w') as f1:
            for _ in ids:
                f1.write(str(_) + '\n')

    def check_not_empty(self, table):
        if table.shape[0] == 0:
            raise AllSequencesFilteredError("no sequence is left after %s of %s" % (self.step,
                                                                                   self.count_table))


@base_luigi_task.event_handler(luigi.Event.START)
def attach_log(task):
    setup_logging(task.get_log_path())
    logger.info("start %s", task.task_id)


@base_luigi_task.event_handler(luigi.Event.FAILURE)
def report_failure(task, exception):
    logger.error("step %s failed with %s: %s",
                 task.step or task.task_family,
                 type(exception).__name__,
                 exception)
