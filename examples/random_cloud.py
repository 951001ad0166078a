"""Random point cloud up to tetrahedra, saved to JSON.

Run:
    python examples/random_cloud.py [out.json]
"""

import logging
import sys

import numpy as np

from combinatorial_ph import build_filtration_complex, print_complex_summary, save_complex


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    rng = np.random.default_rng(0)
    X = rng.uniform(size=(12, 3))

    result = build_filtration_complex(X, max_dimension=3, max_ball_radius=0.6)
    print_complex_summary(result)

    out = sys.argv[1] if len(sys.argv) > 1 else "random_cloud_complex.json"
    print(f"\nsaved to {save_complex(result, out)}")


if __name__ == "__main__":
    main()
