"""Default parameters for the preview engine and the example robot.

Values are read as ``cfg.preview_params.get(key, default)`` so that a caller
can patch this module (or pass explicit values to the engine setters)
without touching the code that consumes them.
"""

import numpy as np

# ----------------------------------------------------------------------------------------------------------------
preview_params = {
    # Spacing between two consecutive samples of a full preview trajectory (s)
    'sample_time': 0.001,
    # Apex of the swing trajectory above the highest of lift-off and touch-down (m)
    'step_height': 0.1,
    # Normal contact force above which a foot is considered active (N)
    'force_threshold': 0.0,
    # Smallest CoM height above the CoP accepted by the cart-table model (m)
    'min_pendulum_height': 1e-3,
    'gravity': 9.81,
    }

# ----------------------------------------------------------------------------------------------------------------
# Example quadruped used by simulation/preview_sequence.py. Stance offsets are the feet
# positions w.r.t. the CoM in the default posture, expressed in the CoM frame.
robot_params = {
    'mass': 24.0,
    'gravity': 9.81,
    'feet': ['FL', 'FR', 'RL', 'RR'],
    'default_com': np.array([0.0, 0.0, 0.0]),
    'default_posture': np.array([0.0, 0.75, -1.5] * 4),
    'stance_posture': {
        'FL': np.array([0.36, 0.21, -0.55]),
        'FR': np.array([0.36, -0.21, -0.55]),
        'RL': np.array([-0.36, 0.21, -0.55]),
        'RR': np.array([-0.36, -0.21, -0.55]),
        },
    }
