import logging
import os
import sys
from os.path import abspath
from subprocess import check_call

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(log_path=None, level=logging.INFO):
    """
    attach one handler to the package logger.
    with ``log_path`` the records are appended to that file, otherwise
    they go to stderr.
    """
    logger = logging.getLogger("amplicon_curation")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    if log_path:
        valid_path(log_path, check_ofile=True)
        handler = logging.FileHandler(log_path, mode='a')
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


def run_cmd(cmd, dry_run=False, log_file=None, **kwargs):
    outstream = None
    if type(log_file) == str:
        valid_path(log_file, check_ofile=True)
        outstream = open(log_file, 'a')
    elif log_file is None:
        outstream = sys.stdout
    else:
        outstream = log_file

    executable = "/usr/bin/zsh"
    if not os.path.exists(executable):
        executable = "/bin/bash"
    try:
        print(cmd, file=outstream)
        outstream.flush()
        if not dry_run:
            check_call(cmd,
                       shell=True,
                       executable=executable,
                       stdout=outstream,
                       stderr=outstream,
                       **kwargs)
            outstream.flush()
    finally:
        if type(log_file) == str:
            outstream.close()


def get_validate_path(pth):
    if not pth.startswith('/'):
        pth = './' + pth
    pth = abspath(pth)
    return pth


def valid_path(in_pth,
               check_odir=False,
               check_ofile=False):
    if type(in_pth) == str:
        in_pths = [in_pth]
    else:
        in_pths = in_pth[::]
    for in_pth in in_pths:
        if in_pth is None:
            continue
        in_pth = os.path.abspath(os.path.realpath(in_pth))
        if check_odir:
            if not os.path.isdir(in_pth):
                os.makedirs(in_pth, exist_ok=True)
        if check_ofile:
            odir_file = os.path.dirname(in_pth)
            if not os.path.isdir(odir_file):
                os.makedirs(odir_file, exist_ok=True)
    return True


def get_dir_path(path, num=1):
    path = os.path.abspath(os.path.realpath(path))
    for _ in range(num):
        path = os.path.dirname(path)
    if path == "/":
        raise Exception("reach root path....")
    return path


def get_project_root():
    return get_dir_path(__file__, 2)
