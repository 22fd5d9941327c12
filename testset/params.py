subsampling_args = dict(quantile=0.15,
                        min_depth=20)

abundance_args = dict(min_abundance=2)
