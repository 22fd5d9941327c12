############################################################
# output layout under --odir, one directory per step
taxa_filter_dir = 'taxa_filtered'
subsample_dir = 'subsampled'
abundance_filter_dir = 'abundance_filtered'
id_filter_dir = 'id_filtered'
shared_dir = 'shared'

count_table_file = 'count_table.tsv'
removed_ids_file = 'removed_ids.txt'
threshold_file = 'threshold.txt'
rep_fasta_file = 'rep.fasta'
rep_taxonomy_file = 'rep.taxonomy'
shared_file = 'otu.shared'
