import luigi

from amplicon_curation.tasks.basic_tasks import base_luigi_task
from amplicon_curation.tasks.for_shared import make_shared


class curation_workflow(base_luigi_task, luigi.WrapperTask):
    """
    count table + representative FASTA + taxonomy  ->  filtered FASTA, taxonomy and shared table
    """

    def requires(self):
        return make_shared(**self.get_kwargs())
