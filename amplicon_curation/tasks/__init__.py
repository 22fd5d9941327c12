from amplicon_curation import plan


def get_step_task(step):
    from amplicon_curation.tasks.for_filter import (abundance_filter,
                                                    id_filter, taxa_filter)
    from amplicon_curation.tasks.for_shared import make_shared
    from amplicon_curation.tasks.for_subsample import subsample
    step2task = {plan.TAXA_FILTER: taxa_filter,
                 plan.SUBSAMPLE: subsample,
                 plan.ABUNDANCE_FILTER: abundance_filter,
                 plan.ID_FILTER: id_filter,
                 plan.SHARED: make_shared}
    return step2task[step]
