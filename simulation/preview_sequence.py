# Description: This script previews a multi-phase locomotion sequence with the reduced model
import argparse
import pathlib
from datetime import datetime

import numpy as np
from tqdm import tqdm

from legged_preview import config as cfg
from legged_preview.models import FunctionTerrain, RobotModel
from legged_preview.preview import PreviewLocomotion

# Import for MATLAB file export
try:
    from scipy.io import savemat
    SCIPY_AVAILABLE = True
except ImportError:
    SCIPY_AVAILABLE = False

try:
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

DEFAULT_SEQUENCE = pathlib.Path(__file__).parent / "example_sequence.yaml"


class MatLogger:
    """Logger for recording preview samples and exporting them to MATLAB .mat format.

    Every sample becomes one row of a data matrix; the header names each column
    (``com_pos_0``, ``FL_pos_2``, ...). The file is rewritten every
    ``write_every_n_steps`` samples so a partial trajectory survives an interruption.
    """

    def __init__(self, foot_names, filepath, write_every_n_steps=100):
        """Initialize the MatLogger.

        Args:
            foot_names: Robot feet, in the column order of the feet fields
            filepath: Path where the .mat file should be saved
            write_every_n_steps: Write to disk every N samples

        Raises:
            ValueError: If filepath is None or write_every_n_steps is not positive
        """
        if filepath is None:
            raise ValueError("filepath cannot be None")
        if not isinstance(write_every_n_steps, int) or write_every_n_steps <= 0:
            raise ValueError(f"write_every_n_steps must be a positive integer, got {write_every_n_steps}")

        self.foot_names = list(foot_names)
        self.filepath = pathlib.Path(filepath)
        self.write_every_n_steps = write_every_n_steps

        self.all_data = []
        self.header = self._build_header()
        self.step_count = 0

        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def _build_header(self):
        header = ['time']
        for field_name in ('com_pos', 'com_vel', 'com_acc', 'angular_pos', 'cop'):
            header.extend(f"{field_name}_{i}" for i in range(3))
        for name in self.foot_names:
            header.extend(f"{name}_pos_{i}" for i in range(3))
            header.append(f"{name}_support")
        return header

    def record_step(self, state):
        """Record one reduced-body sample.

        Feet missing from the sample (terminal-only previews carry no foot motion)
        are logged as NaN.
        """
        row = [state.time]
        for value in (state.com_pos, state.com_vel, state.com_acc, state.angular_pos, state.cop):
            row.extend(np.asarray(value, dtype=np.float64).flatten())
        for name in self.foot_names:
            foot_pos = state.foot_pos.get(name)
            if foot_pos is None:
                row.extend([np.nan] * 3)
            else:
                row.extend(np.asarray(foot_pos, dtype=np.float64).flatten())
            row.append(1.0 if name in state.support_region else 0.0)

        self.all_data.append(row)
        self.step_count += 1
        if self.step_count % self.write_every_n_steps == 0:
            self._write_to_file()

    def _write_to_file(self):
        if not self.all_data:
            return
        mat_dict = {
            'data': np.array(self.all_data, dtype=np.float64),
            'header': np.array(self.header, dtype=object),
        }
        savemat(str(self.filepath), mat_dict, do_compression=True)

    def finalize(self):
        """Write any remaining data and report the file location."""
        self._write_to_file()
        print(f"Preview data saved to: {self.filepath}")
        print(f"  Total samples: {len(self.all_data)}")
        print(f"  Number of columns: {len(self.header)}")


def plot_preview(trajectory, foot_names):
    """Plot the CoM trajectory and the foot heights of a full preview."""
    times = trajectory.times()
    com = trajectory.com_positions()

    fig, axes = plt.subplots(2, 1, sharex=True, figsize=(8, 6))
    for axis, label in enumerate(('x', 'y', 'z')):
        axes[0].plot(times, com[:, axis], label=f"CoM {label}")
    axes[0].set_ylabel("CoM position [m]")
    axes[0].legend()

    for name in foot_names:
        feet = trajectory.foot_positions(name)
        if len(feet) == len(times):
            axes[1].plot(times, feet[:, 2], label=name)
    axes[1].set_xlabel("time [s]")
    axes[1].set_ylabel("foot height (CoM frame) [m]")
    axes[1].legend()
    fig.tight_layout()
    plt.show()


def run_preview(sequence_file, sample_time=None, step_height=None, terrain_height=None, plot=False,
                mat_file=None):
    """Preview a sequence file with the example robot of the config module.

    Args:
        sequence_file: YAML preview-sequence file
        sample_time: Sampling period of the full preview, config default when None
        step_height: Swing apex clearance, config default when None
        terrain_height: Height of a flat terrain map; the flat-ground heuristic is used when None
        plot: Plot the CoM and foot trajectories (requires matplotlib)
        mat_file: Export the full trajectory to this .mat file (requires scipy)

    Returns:
        Tuple of (full trajectory, terminal trajectory, energy)
    """
    robot_model = RobotModel.from_config(cfg.robot_params)
    terrain = None
    if terrain_height is not None:
        terrain = FunctionTerrain(lambda x, y: terrain_height)

    engine = PreviewLocomotion.from_robot_model(robot_model, terrain=terrain)
    if sample_time is not None:
        engine.set_sample_time(sample_time)
    if step_height is not None:
        engine.set_step_height(step_height)

    state, control = engine.read_preview_sequence(sequence_file)
    print(f"Loaded {len(control)} phases from {sequence_file}")
    for k, params in enumerate(control):
        phase_type = params.phase.type.value
        swing_feet = params.phase.swing_feet(robot_model.feet)
        print(f"  phase_{k}: {phase_type:7s} duration={params.duration:.3f} s swing={swing_feet}")

    trajectory = engine.multi_phase_preview(state, control)
    terminal = engine.multi_phase_preview(state, control, full=False)
    energy = engine.multi_phase_energy(state, control)

    print(f"\nFull preview: {len(trajectory)} samples, "
          f"t = [{trajectory[0].time:.3f}, {trajectory[-1].time:.3f}] s")
    print("Terminal states:")
    for k, terminal_state in enumerate(terminal):
        support = sorted(terminal_state.support_region)
        print(f"  phase_{k}: t={terminal_state.time:.3f} com={np.round(terminal_state.com_pos, 4)} "
              f"support={support}")
    print(f"CoM energy [x, y, z]: {np.round(energy, 4)} (total {energy.sum():.4f})")

    if mat_file is not None:
        if not SCIPY_AVAILABLE:
            print("Warning: scipy not available, the .mat export is disabled")
        else:
            logger = MatLogger(robot_model.feet, mat_file)
            for sample in tqdm(trajectory, desc="Exporting", unit="sample"):
                logger.record_step(sample)
            logger.finalize()

    if plot:
        if not MATPLOTLIB_AVAILABLE:
            print("Warning: matplotlib not available, plotting is disabled")
        else:
            plot_preview(trajectory, robot_model.feet)

    return trajectory, terminal, energy


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Preview a multi-phase locomotion sequence")
    parser.add_argument("sequence", nargs="?", default=str(DEFAULT_SEQUENCE))
    parser.add_argument("--sample-time", type=float, default=None)
    parser.add_argument("--step-height", type=float, default=None)
    parser.add_argument("--terrain-height", type=float, default=None)
    parser.add_argument("--plot", action="store_true")
    parser.add_argument("--mat", action="store_true", help="export the full trajectory to a .mat file")
    args = parser.parse_args()

    mat_file = None
    if args.mat:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        mat_file = pathlib.Path(__file__).parent / "logs" / f"preview_{timestamp}.mat"

    run_preview(
        args.sequence,
        sample_time=args.sample_time,
        step_height=args.step_height,
        terrain_height=args.terrain_height,
        plot=args.plot,
        mat_file=mat_file,
    )
