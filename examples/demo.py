import numpy as np
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from histogram_grid.helpers import blur, normalize
from histogram_grid.maps import read_map
from histogram_grid.visualizer import BeliefVisualizer, plot_belief_evolution

MAP_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'maps', 'm1.txt')


def simple_demo():
    """
    A robot that knows exactly where it is loses certainty as it keeps moving
    """
    grid_map = read_map(MAP_FILE)

    # Start with all the mass on one cell
    belief = np.zeros(grid_map.shape)
    belief[2, 2] = 1.0

    beliefs = [belief]

    print("Initial belief (certain):")
    print(belief)
    print()

    for i in range(5):
        belief = blur(belief, 0.12)
        beliefs.append(belief)

        print(f"Step {i+1}: peak belief {np.max(belief):.3f} "
              f"at {np.unravel_index(np.argmax(belief), belief.shape)}")

    fig = plot_belief_evolution(beliefs, blurring=0.12)
    fig.savefig('belief_evolution.png')
    print("Saved belief evolution to belief_evolution.png")


def wraparound_demo():
    """
    Mass placed in a corner spills over onto the opposite edges of the world
    """
    belief = np.zeros((4, 4))
    belief[0, 0] = 1.0

    blurred = blur(belief, 0.5)
    print("Corner impulse after one blur with blurring=0.5:")
    print(np.round(blurred, 3))
    print(f"Opposite corner received {blurred[3, 3]:.3f}")
    print()


def blurring_analysis():
    """
    Analyze how different blur factors spread an unnormalized belief
    """
    belief = normalize(np.array([
        [1, 0, 0, 0, 0],
        [0, 4, 0, 0, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 2, 0],
        [0, 0, 0, 0, 0]
    ]))

    for blurring in [0.0, 0.1, 0.3, 0.6, 1.0]:
        blurred = belief
        for _ in range(3):
            blurred = blur(blurred, blurring)

        print(f"Blurring: {blurring}")
        print(f"Maximum belief after 3 steps: {np.max(blurred):.3f}")
        print()


def interactive_demo():
    """
    Press enter to blur the belief one more step, q to quit
    """
    grid_map = read_map(MAP_FILE)
    visualizer = BeliefVisualizer(grid_map, blurring=0.2)

    belief = np.zeros(grid_map.shape)
    belief[0, 0] = 1.0
    visualizer.update_belief(belief)

    while True:
        if input("Blur again? (enter/q): ").lower() == 'q':
            break
        belief = blur(belief, 0.2)
        visualizer.update_belief(belief)
        print(f"Confidence: {np.max(belief):.3f}")

    visualizer.show()


if __name__ == "__main__":
    print("Running simple demo...")
    simple_demo()

    print("\n" + "="*50 + "\n")

    print("Running wraparound demo...")
    wraparound_demo()

    print("\n" + "="*50 + "\n")

    print("Running blurring analysis...")
    blurring_analysis()

    # Uncomment to run interactive demo
    # print("Starting interactive demo...")
    # interactive_demo()
