import os
import logging

import click
import numpy as np
import yaml
from tqdm import tqdm

from histogram_grid.config import load_config
from histogram_grid.helpers import InvalidInputError, blur, zeros
from histogram_grid.maps import read_map, uniform_belief

logger = logging.getLogger()
logger.setLevel(os.environ.get("LOGLEVEL", "INFO"))

DEMO_SHAPE = (5, 5)


def initial_belief(grid_map, start=None):
    """Impulse at ``start`` if given, otherwise the uniform prior over the map."""
    shape = DEMO_SHAPE if grid_map is None else grid_map.shape
    if start is None:
        if grid_map is None:
            start = (shape[0] // 2, shape[1] // 2)
        else:
            return uniform_belief(grid_map)

    row, col = start
    if not (0 <= row < shape[0] and 0 <= col < shape[1]):
        raise InvalidInputError(f"start {start} is outside the {shape[0]}x{shape[1]} grid")
    belief = zeros(*shape)
    belief[row, col] = 1.0
    return belief


def run_diffusion(belief, blurring, steps, progress=True):
    """Applies ``blur`` ``steps`` times and returns every intermediate belief."""
    beliefs = [belief]
    for t in tqdm(range(steps), desc="blur", disable=not progress):
        belief = blur(belief, blurring)
        beliefs.append(belief)
        logging.debug('> Step {}: peak {:.4f} at {}'.format(
            t + 1, belief.max(), np.unravel_index(np.argmax(belief), belief.shape)))
    return beliefs


def format_grid(grid, precision=2):
    return "\n".join("  ".join(f"{v:.{precision}f}" for v in row) for row in grid)


@click.command()
@click.option('--config', 'config_path', default=None, type=click.Path(exists=True, dir_okay=False),
              help='YAML file with run settings')
@click.option('--map', 'map_path', default=None, type=click.Path(exists=True, dir_okay=False),
              help='map file, rows of space-separated color codes')
@click.option('--blurring', default=None, type=click.FloatRange(0.0, 1.0),
              help='fraction of mass each cell spills over to its neighbours')
@click.option('--steps', default=None, type=click.IntRange(min=0), help='number of blur steps')
@click.option('--start', default=None, type=(int, int), help='row and column of an impulse start belief')
@click.option('--plot', default=None, type=click.Path(dir_okay=False),
              help='save the belief evolution figure to this file')
@click.option('--precision', default=None, type=click.IntRange(min=0), help='decimals when printing')
@click.option('--quiet', is_flag=True, help='hide the progress bar')
def main(config_path, map_path, blurring, steps, start, plot, precision, quiet):
    # Run python -m histogram_grid.main --help to see the command line arguments
    try:
        config = load_config(config_path, overrides={
            "map": map_path, "blurring": blurring, "steps": steps,
            "start": start, "plot": plot, "precision": precision,
        })
        grid_map = read_map(config["map"]) if config["map"] else None
        belief = initial_belief(grid_map, config["start"])
    except (InvalidInputError, yaml.YAMLError, OSError) as e:
        raise click.ClickException(str(e))

    logging.info('> Blurring {}x{} belief {} times with blurring={}'.format(
        belief.shape[0], belief.shape[1], config["steps"], config["blurring"]))
    beliefs = run_diffusion(belief, config["blurring"], config["steps"], progress=not quiet)

    click.echo(format_grid(beliefs[-1], config["precision"]))

    if config["plot"]:
        import matplotlib
        matplotlib.use("Agg")
        from histogram_grid.visualizer import plot_belief_evolution

        fig = plot_belief_evolution(beliefs, blurring=config["blurring"])
        fig.savefig(config["plot"])
        logging.info("> Saving belief evolution plot in " + config["plot"])

    return beliefs


if __name__ == '__main__':
    main()
