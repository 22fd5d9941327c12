"""
Which linear pipeline a curation run follows.

Subsampling can be skipped, and the taxa filter can run before subsampling
(interim) or right before the FASTA/taxonomy filtering (end). Both choices are
made once, when the workflow is configured; every task then asks the plan for
the step feeding it.
"""
import enum

TAXA_FILTER = 'taxa_filter'
SUBSAMPLE = 'subsample'
ABUNDANCE_FILTER = 'abundance_filter'
ID_FILTER = 'id_filter'
SHARED = 'shared'

# steps whose output is a count table
table_steps = (TAXA_FILTER, SUBSAMPLE, ABUNDANCE_FILTER)


class SubsamplingMode(enum.Enum):
    SUBSAMPLE = 'subsample'
    SKIP = 'skip'


class TaxaFilterStage(enum.Enum):
    INTERIM = 'interim'
    END = 'end'


def build_plan(subsampling=SubsamplingMode.SUBSAMPLE,
               taxa_stage=TaxaFilterStage.END):
    subsample = [SUBSAMPLE] if subsampling == SubsamplingMode.SUBSAMPLE else []
    if taxa_stage == TaxaFilterStage.INTERIM:
        steps = [TAXA_FILTER] + subsample + [ABUNDANCE_FILTER]
    else:
        steps = subsample + [ABUNDANCE_FILTER, TAXA_FILTER]
    return tuple(steps + [ID_FILTER, SHARED])


def previous_step(plan, step):
    """the closest count table step before ``step``, None when it reads the input table"""
    if step not in plan:
        raise ValueError("step %s is not part of the plan %s" % (step, ','.join(plan)))
    for prior in reversed(plan[:plan.index(step)]):
        if prior in table_steps:
            return prior
    return None