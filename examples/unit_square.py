"""Worked example: the unit square

Four corners, L1 distances, complex up to triangles:
4 vertices, 6 edges (four of length 1, two diagonals of length 2),
4 triangles (each containing one diagonal).

Run:
    python examples/unit_square.py
"""

import numpy as np

from combinatorial_ph import build_filtration_complex, default_config, print_complex_summary, verify_complex


POINTS = np.array([
    [0.0, 0.0],
    [1.0, 0.0],
    [0.0, 1.0],
    [1.0, 1.0],
])


def main() -> None:
    cfg = default_config()
    cfg["max_dimension"] = 2
    cfg["max_ball_radius"] = 2.0

    result = build_filtration_complex(POINTS, config=cfg)
    print_complex_summary(result, top_n=20)

    checks = verify_complex(result)
    print("\nchecks: " + ", ".join(f"{k}={'ok' if v else 'FAIL'}" for k, v in checks.items()))

    # same square, radius 0: nothing beyond the vertices
    empty = build_filtration_complex(POINTS, max_dimension=2, max_ball_radius=0.0)
    print(f"\nradius 0 -> counts {empty['counts']}, boundary shape {empty['boundary'].shape}")


if __name__ == "__main__":
    main()
