"""
D2Q9 Lattice Constants

Velocity set, weights and related constants.
"""
import numpy as np

# D2Q9 lattice velocities
#     6   2   5
#       \ | /
#     3 - 0 - 1
#       / | \
#     7   4   8

EX = np.array([0, 1, 0, -1, 0, 1, -1, -1, 1], dtype=np.int32)
EY = np.array([0, 0, 1, 0, -1, 1, 1, -1, -1], dtype=np.int32)

W = np.array([4/9, 1/9, 1/9, 1/9, 1/9, 1/36, 1/36, 1/36, 1/36], dtype=np.float64)

# Reflected direction for bounce-back
OPPOSITE = np.array([0, 3, 4, 1, 2, 7, 8, 5, 6], dtype=np.int32)

CS2 = 1.0 / 3.0
CS4 = CS2 * CS2

Q = 9

# Velocity matrix, shape (2, Q): row 0 is e_x, row 1 is e_y
VELOCITIES = np.stack([EX, EY]).astype(np.float64)
