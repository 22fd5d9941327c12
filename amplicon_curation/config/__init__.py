from os.path import dirname, join

from . import default_file_structures

filepath = __file__
default_params_path = join(dirname(filepath),
                           "default_params.py")
