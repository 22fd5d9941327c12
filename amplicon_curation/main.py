import sys
import warnings
from contextlib import contextmanager
from os.path import join

import click
import luigi

from amplicon_curation.errors import AllSequencesFilteredError, CurationError
from amplicon_curation.filtering import (filter_abundance, filter_ids,
                                         filter_taxa, read_fasta_ids)
from amplicon_curation.input_parser import read_count_table, write_count_table
from amplicon_curation.shared import to_shared, write_shared
from amplicon_curation.subsampling import compute_threshold, rarefy_table
from amplicon_curation.tasks.workflow import curation_workflow
from amplicon_curation.toolkit import (get_project_root, get_validate_path,
                                       run_cmd, setup_logging, valid_path)

warnings.filterwarnings('ignore')


@contextmanager
def step_errors():
    try:
        yield
    except CurationError as e:
        raise click.ClickException("%s: %s" % (type(e).__name__, e))


def write_table(table, ofile):
    with luigi.LocalTarget(ofile).open('w') as f1:
        write_count_table(table, f1)


def read_final_table(count_table):
    table = read_count_table(count_table)
    if table.shape[0] == 0:
        raise AllSequencesFilteredError("no sequence is left in %s" % count_table)
    return table


@click.group()
@click.option("--log-path", default=None, help="append log records to this file instead of stderr")
def cli(log_path):
    setup_logging(log_path)


@cli.command(context_settings=dict(ignore_unknown_options=True))
@click.argument('cmd', nargs=-1, type=click.UNPROCESSED)
def run(cmd):
    """pass the arguments to luigi, e.g. run -- curation_workflow --odir ... --local-scheduler"""
    luigi.run(cmdline_args=list(cmd))


@cli.command(help="run the whole curation on the bundled test dataset, need to assign a output directory.")
@click.option("-o", "--odir", required=True, help="output directory for testing ... ... ")
@click.option("--local-scheduler", "cmd", is_flag=True, help="Use an in-memory central scheduler. Useful for testing.")
@click.option("--workers",
              'worker', default=1, help='number of workers')
def test(odir, cmd, worker):
    testset = join(get_project_root(), 'testset')
    odir = get_validate_path(odir)
    valid_path(odir, check_odir=True)
    cmd = " --local-scheduler" if cmd else ''
    cmd += " --workers {}".format(str(int(worker)))
    cmd = (f"{sys.executable} -m amplicon_curation.main run -- curation_workflow "
           f"--count-table {testset}/count_table.tsv --fasta {testset}/rep.fasta "
           f"--taxonomy {testset}/rep.taxonomy --config {testset}/params.py "
           f"--odir {odir} --log-path {odir}/cmd_log.txt" + cmd)
    run_cmd(cmd, dry_run=False)


@cli.command()
@click.argument('count_table', type=click.Path(exists=True, dir_okay=False))
@click.option('-q', '--quantile', type=float, default=0.15, show_default=True,
              help="quantile of the per-sample totals")
@click.option('-m', '--min-depth', type=int, default=5000, show_default=True,
              help="lowest depth ever returned")
def threshold(count_table, quantile, min_depth):
    """print the subsampling depth of COUNT_TABLE"""
    if not 0 < quantile < 1:
        raise click.BadParameter("must be in (0, 1)", param_hint='--quantile')
    if min_depth <= 0:
        raise click.BadParameter("must be positive", param_hint='--min-depth')
    with step_errors():
        table = read_count_table(count_table)
        click.echo(compute_threshold(table, quantile, min_depth))


@cli.command()
@click.argument('count_table', type=click.Path(exists=True, dir_okay=False))
@click.argument('ofile', type=click.Path(dir_okay=False))
@click.option('-d', '--depth', type=click.IntRange(min=0), required=True)
@click.option('--seed', type=int, default=None)
def rarefy(count_table, ofile, depth, seed):
    """subsample every sample of COUNT_TABLE to DEPTH reads"""
    with step_errors():
        table = read_count_table(count_table)
        write_table(rarefy_table(table, depth, seed=seed), ofile)


@cli.command('filter-abundance')
@click.argument('count_table', type=click.Path(exists=True, dir_okay=False))
@click.argument('ofile', type=click.Path(dir_okay=False))
@click.option('-a', '--min-abundance', type=click.IntRange(min=0), required=True)
@click.option('--removed', type=click.Path(dir_okay=False), default=None,
              help="write the removed sequence ids to this file")
def filter_abundance_cmd(count_table, ofile, min_abundance, removed):
    """remove sequences with fewer than MIN_ABUNDANCE reads in total"""
    with step_errors():
        table = read_count_table(count_table)
        filtered, removed_ids = filter_abundance(table, min_abundance)
        write_table(filtered, ofile)
        if removed:
            with luigi.LocalTarget(removed).open('w') as f1:
                f1.write(''.join([_ + '\n' for _ in removed_ids]))


@cli.command('filter-taxa')
@click.argument('count_table', type=click.Path(exists=True, dir_okay=False))
@click.argument('taxonomy', type=click.Path(exists=True, dir_okay=False))
@click.argument('ofile', type=click.Path(dir_okay=False))
@click.option('-e', '--exclude', 'excluded', multiple=True, required=True,
              help="taxon name to remove, can be given several times")
def filter_taxa_cmd(count_table, taxonomy, ofile, excluded):
    """remove sequences assigned to an excluded taxon"""
    with step_errors():
        table = read_count_table(count_table)
        filtered, _ = filter_taxa(table, taxonomy, list(excluded))
        write_table(filtered, ofile)


@cli.command('filter-ids')
@click.argument('count_table', type=click.Path(exists=True, dir_okay=False))
@click.argument('fasta', type=click.Path(exists=True, dir_okay=False))
@click.argument('taxonomy', type=click.Path(exists=True, dir_okay=False))
@click.argument('fasta_out', type=click.Path(dir_okay=False))
@click.argument('taxonomy_out', type=click.Path(dir_okay=False))
def filter_ids_cmd(count_table, fasta, taxonomy, fasta_out, taxonomy_out):
    """keep the FASTA and taxonomy records of the sequences of COUNT_TABLE"""
    with step_errors():
        table = read_final_table(count_table)
        filter_ids(list(table.index), fasta, taxonomy, fasta_out, taxonomy_out)


@cli.command('make-shared')
@click.argument('count_table', type=click.Path(exists=True, dir_okay=False))
@click.argument('fasta', type=click.Path(exists=True, dir_okay=False))
@click.argument('ofile', type=click.Path(dir_okay=False))
@click.option('-l', '--label', default='userLabel', show_default=True)
def make_shared_cmd(count_table, fasta, ofile, label):
    """convert COUNT_TABLE into a shared file, OTU columns in FASTA order"""
    with step_errors():
        table = read_final_table(count_table)
        shared = to_shared(table, read_fasta_ids(fasta), label=label)
        with luigi.LocalTarget(ofile).open('w') as f1:
            write_shared(shared, f1)


if __name__ == '__main__':
    cli()
