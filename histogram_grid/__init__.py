from histogram_grid.helpers import InvalidInputError, blur, blur_kernel, close_enough, normalize, zeros
from histogram_grid.maps import read_line, read_map, uniform_belief
