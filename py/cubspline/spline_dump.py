import argparse
import logging
import sys
import numpy as np

import cubspline
from cubspline import utils
from cubspline.spline import Spline, UnsupportedSplineTypeError


def read_points(fname):
    """
    Read the sampling points from a text file with two columns x y

    Parameters
    ----------
    fname: string
        The filename

    Returns
    -------
    x, y: ndarray
        The arrays with the sampling points

    """
    dat = np.loadtxt(fname, dtype=np.float64, ndmin=2)
    if dat.shape[1] < 2:
        raise ValueError(f'File {fname} must have two columns x y')
    return dat[:, 0], dat[:, 1]


def make_figure(spline, x0, x1, npoints, fig_fname, extrapolate=True):
    """
    Plot the spline, its derivative and the sampling points

    Parameters
    ----------
    spline: Spline
        The spline object
    x0, x1: float
        The plotting range
    npoints: int
        The number of points to evaluate
    fig_fname: string
        The filename of the figure

    """
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    line_width = 0.8
    dpi = 150
    xgrid = np.linspace(x0, x1, npoints + 1)
    if not extrapolate:
        xgrid = xgrid[(xgrid >= spline.x_min) & (xgrid <= spline.x_max)]
    fig = plt.figure(figsize=(8, 6), dpi=dpi)
    fig.add_subplot(2, 1, 1)
    plt.plot(xgrid,
             spline(xgrid, extrapolate=extrapolate),
             'k-',
             linewidth=line_width)
    plt.plot(spline.x, spline.y, 'r.')
    plt.ylabel('y')
    plt.title(f'{spline.spline_type.value} spline')
    fig.add_subplot(2, 1, 2)
    plt.plot(xgrid,
             spline(xgrid, nu=1, extrapolate=extrapolate),
             'b-',
             linewidth=line_width)
    plt.ylabel('dy/dx')
    plt.xlabel('x')
    plt.tight_layout()
    plt.savefig(fig_fname)
    plt.close(fig)


def process(fname, config, x0=None, x1=None, m0=None, m1=None, output=None,
            fig_fname=None):
    """
    Build the spline through the points from the file and write the
    dump of it

    Parameters
    ----------
    fname: string
        The file with the sampling points
    config: dict
        The configuration dictionary
    x0, x1: float, optional
        The range of the dump. By default the range of sampling points
    m0, m1: float, optional
        The boundary slopes for the full spline
    output: string, optional
        The output filename, if not given the dump goes to stdout
    fig_fname: string, optional
        If specified, the figure is saved there

    Returns
    -------
    spline: Spline
        The constructed spline

    """
    x, y = read_points(fname)
    logging.info('Read %d sampling points from %s', len(x), fname)
    spline_type = config['spline_type']
    if m0 is not None or m1 is not None:
        spline_type = 'full'
    spline = Spline(x,
                    y,
                    spline_type=spline_type,
                    m0=m0,
                    m1=m1,
                    sort_inputs=config['sort_inputs'])
    if x0 is None:
        x0 = spline.x_min
    if x1 is None:
        x1 = spline.x_max
    if not config['extrapolate']:
        x0 = min(max(x0, spline.x_min), spline.x_max)
        x1 = min(max(x1, spline.x_min), spline.x_max)
    npoints = config['npoints']
    if output is None:
        spline.dump(x0, x1, npoints, fp=sys.stdout)
    else:
        with open(output, 'w') as fp:
            spline.dump(x0, x1, npoints, fp=fp)
        logging.info('Wrote %s', output)
    if fig_fname is not None:
        make_figure(spline,
                    x0,
                    x1,
                    npoints,
                    fig_fname,
                    extrapolate=config['extrapolate'])
    return spline


def add_bool_arg(parser, name, default=False, help=None):
    group = parser.add_mutually_exclusive_group(required=False)
    group.add_argument('--' + name, dest=name, action='store_true', help=help)
    group.add_argument('--no-' + name,
                       dest=name,
                       action='store_false',
                       help='Invert the ' + name + ' option')
    parser.set_defaults(**{name: default})


def main(args=None):
    if args is None:
        args = sys.argv[1:]
    parser = argparse.ArgumentParser(
        description='Construct the cubic spline through the tabulated '
        'points and write the values, derivatives and monotonicity '
        'on a regular grid.')
    parser.add_argument('--input',
                        type=str,
                        help='Text file with the x y columns',
                        required=False)
    parser.add_argument('--type',
                        type=str,
                        default=None,
                        help='Spline type (full, natural, periodic, '
                        'monotonic). Overrides the configuration file')
    parser.add_argument('--m0',
                        type=float,
                        default=None,
                        help='Slope at the first point (full splines)')
    parser.add_argument('--m1',
                        type=float,
                        default=None,
                        help='Slope at the last point (full splines)')
    add_bool_arg(parser,
                 'sort',
                 default=None,
                 help='Sort the sampling points by x')
    parser.add_argument('--x0',
                        type=float,
                        default=None,
                        help='Start of the output range')
    parser.add_argument('--x1',
                        type=float,
                        default=None,
                        help='End of the output range')
    parser.add_argument('--npoints',
                        type=int,
                        default=None,
                        help='The number of intervals in the output')
    parser.add_argument('--output',
                        type=str,
                        default=None,
                        help='The output file (stdout if not given)')
    parser.add_argument('--figure',
                        type=str,
                        default=None,
                        help='The filename of the figure with the spline')
    parser.add_argument('--config',
                        type=str,
                        default=None,
                        help='The filename of the configuration file')
    parser.add_argument('--log_level',
                        type=str,
                        default='WARNING',
                        help='DEBUG,INFO,WARNING,ERROR for the log level')
    parser.add_argument('--version',
                        help='Output the version of the software',
                        action='store_true',
                        default=False)
    args = parser.parse_args(args)

    if args.version:
        print(cubspline.__version__)
        return

    if args.input is None:
        parser.error('--input is required')
    if (args.m0 is None) != (args.m1 is None):
        parser.error('--m0 and --m1 need to be specified together')

    logging.basicConfig(level=args.log_level)

    override = {}
    if args.type is not None:
        override['spline_type'] = args.type
    if args.sort is not None:
        override['sort_inputs'] = args.sort
    if args.npoints is not None:
        override['npoints'] = args.npoints
    try:
        config = utils.read_config(args.config, override_options=override)
        process(args.input,
                config,
                x0=args.x0,
                x1=args.x1,
                m0=args.m0,
                m1=args.m1,
                output=args.output,
                fig_fname=args.figure)
    except UnsupportedSplineTypeError as e:
        parser.error(str(e))


if __name__ == '__main__':
    main(sys.argv[1:])
