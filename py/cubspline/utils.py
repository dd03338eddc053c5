import os
import yaml
import logging
from frozendict import frozendict

from cubspline.spline import get_spline_type

DEFAULT_CONFIG_NAME = 'cubspline.yaml'


def get_default_config():
    """Create a default parameter config dictionary

    Returns
    -------
    ret: dict
        Dictionary with config params

"""
    D = {}
    D['spline_type'] = 'natural'
    D['sort_inputs'] = False
    D['extrapolate'] = True  # continue the spline linearly in the dumps
    D['npoints'] = 100  # number of intervals in the dumps
    return D


def _load_yaml(fname, fname_specified):
    if not os.path.exists(fname):
        if fname_specified:
            raise RuntimeError(f"Configuration file '{fname}' not found.")
        logging.debug('Configuration file %s not found. Using defaults',
                      fname)
        return {}
    with open(fname, 'r') as fp:
        D = yaml.safe_load(fp)
    if D is None:
        logging.warning(f'Configuration file {fname} is empty. '
                        'Using default settings')
        return {}
    if not isinstance(D, dict):
        raise RuntimeError(f'Configuration file {fname} must contain '
                           'a mapping of options')
    return D


def read_config(fname=None, override_options=None):
    """
    Read the configuration of the spline tools

    Parameters
    ----------

    fname: string, optional
        The path to the configuration file. If not given cubspline.yaml in
        the current directory is used if it exists
    override_options: dictionary, optional
        Options taking precedence over the file (i.e. from the command line)

    Returns
    -------
    config: frozendict
        The configuration

    """
    fname_specified = fname is not None
    if fname is None:
        fname = DEFAULT_CONFIG_NAME
    D0 = get_default_config()
    D = _load_yaml(fname, fname_specified)
    for k in D.keys():
        if k not in D0:
            logging.warning(f'Unknown option {k} in {fname} is ignored')
    D = {k: D.get(k, v) for k, v in D0.items()}
    if override_options is not None:
        for k, v in override_options.items():
            if k in D and v != D[k]:
                logging.info('Option %s=%s overrides the configured value %s',
                             k, v, D[k])
            D[k] = v
    # fails on unknown spline families
    get_spline_type(D['spline_type'])
    D['config_file_path'] = os.path.abspath(fname)
    return frozendict(D)
