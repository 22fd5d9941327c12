############################################################
# subsampling (rarefaction)
# depth = max(min_depth, floor(quantile of the per-sample totals))
subsampling_args = dict(quantile=0.15,
                        min_depth=5000,
                        seed=12345)

############################################################
# abundance filter
# sequences with fewer reads than min_abundance over all samples are removed
abundance_args = dict(min_abundance=2)

############################################################
# taxa filter
# a sequence is removed when any rank of its lineage is one of excluded_taxa
taxa_filter_args = dict(excluded_taxa=['Chloroplast',
                                       'Mitochondria',
                                       'unknown',
                                       'Archaea',
                                       'Eukaryota'])

############################################################
# shared file
shared_args = dict(label='userLabel')
