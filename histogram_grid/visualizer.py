import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as colors
from matplotlib.animation import FuncAnimation


def map_image(grid_map):
    """
    Turns a map of single-character codes into an index image and a colormap.
    Codes that matplotlib knows as colors ('r', 'g', 'b', ...) are drawn in that color.
    """
    codes, index = np.unique(np.asarray(grid_map), return_inverse=True)
    palette = [c if colors.is_color_like(c) else 'lightgray' for c in codes]
    return index.reshape(np.shape(grid_map)), colors.ListedColormap(palette), codes


def _draw_map(ax, grid_map, blurring=None):
    image, cmap, codes = map_image(grid_map)
    ax.imshow(image, cmap=cmap, vmin=0, vmax=max(cmap.N - 1, 1))
    title = f"World Map ({', '.join(codes)})"
    if blurring is not None:
        title += f", blurring = {blurring}"
    ax.set_title(title)
    ax.set_xlabel('Column (wraps)')
    ax.set_ylabel('Row (wraps)')


def _belief_title(step, belief):
    row, col = np.unravel_index(np.argmax(belief), belief.shape)
    return f'Step {step}: peak {np.max(belief):.3f} at ({row}, {col})'


class BeliefVisualizer:
    """Map on the left, belief heat map on the right, redrawn after every blur step."""

    def __init__(self, grid_map, blurring=None):
        self.grid_map = np.asarray(grid_map)
        self.step = 0
        self.fig, (self.ax1, self.ax2) = plt.subplots(1, 2, figsize=(12, 5))

        _draw_map(self.ax1, self.grid_map, blurring)

        self.belief_img = self.ax2.imshow(np.zeros(self.grid_map.shape, dtype=float),
                                          cmap='hot', vmin=0, vmax=1)
        self.ax2.set_title('Belief Distribution')
        self.ax2.set_xlabel('Column (wraps)')
        self.ax2.set_ylabel('Row (wraps)')
        plt.colorbar(self.belief_img, ax=self.ax2)

    def update_belief(self, belief):
        belief = np.asarray(belief, dtype=float)
        if belief.shape != self.grid_map.shape:
            raise ValueError(f"Belief shape {belief.shape} does not match map shape {self.grid_map.shape}")

        # An all-zero belief would leave an empty color range
        self.belief_img.set_data(belief)
        self.belief_img.set_clim(vmin=0, vmax=max(belief.max(), 1e-12))
        self.ax2.set_title(_belief_title(self.step, belief))
        self.step += 1
        self.fig.canvas.draw()

    def show(self):
        plt.show()

    def save_frame(self, filename):
        self.fig.savefig(filename, dpi=150, bbox_inches='tight')


def plot_belief_evolution(beliefs, blurring=None):
    """
    Plot the evolution of belief over repeated blur steps

    Args:
        beliefs: List of belief arrays, beliefs[0] is the starting belief
        blurring: Blur factor used between steps (optional, shown in the title)
    """
    n_steps = len(beliefs)
    n_cols = max((n_steps + 1) // 2, 1)
    fig, axes = plt.subplots(2, n_cols, figsize=(15, 8), squeeze=False)
    axes = axes.flatten()
    vmax = np.max(beliefs)

    for i, belief in enumerate(beliefs):
        ax = axes[i]
        ax.imshow(belief, cmap='hot', vmin=0, vmax=vmax)
        ax.set_title(f'Step {i}')
        ax.text(0.5, -0.1, f"Peak: {np.max(belief):.3f}", ha='center',
                transform=ax.transAxes, fontsize=8)

    # Hide unused subplots
    for i in range(n_steps, len(axes)):
        axes[i].axis('off')

    if blurring is not None:
        fig.suptitle(f'Blurring = {blurring}')

    plt.tight_layout()
    return fig


def create_animation(beliefs, grid_map, blurring=None, interval=500):
    """
    Create an animation of a belief spreading over repeated blur steps

    Args:
        beliefs: List of belief arrays, beliefs[0] is the starting belief
        grid_map: The world map the beliefs live on
        blurring: Blur factor used between steps (optional, shown on the map panel)
        interval: Time between frames in milliseconds
    """
    fig, (ax_map, ax_belief) = plt.subplots(1, 2, figsize=(12, 5))
    _draw_map(ax_map, grid_map, blurring)

    # Shared color scale so the spreading is visible as fading
    belief_img = ax_belief.imshow(beliefs[0], cmap='hot', vmin=0, vmax=np.max(beliefs))
    ax_belief.set_title(_belief_title(0, beliefs[0]))
    plt.colorbar(belief_img, ax=ax_belief)

    def draw_step(step):
        belief_img.set_data(beliefs[step])
        ax_belief.set_title(_belief_title(step, beliefs[step]))
        return [belief_img]

    return FuncAnimation(fig, draw_step, frames=len(beliefs), interval=interval, blit=False)
