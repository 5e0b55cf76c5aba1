"""Reduced dynamic model, robot description and collaborator interfaces."""

from .cart_table_model import CartTableControlParams, CartTableModel, CartTableProperties
from .contact_dynamics import ContactDynamics
from .model_interface import TerrainMap, WholeBodyDynamics, WholeBodyKinematics
from .robot_model import RobotModel
from .terrain_map import FunctionTerrain

__all__ = [
    'CartTableControlParams',
    'CartTableModel',
    'CartTableProperties',
    'ContactDynamics',
    'FunctionTerrain',
    'RobotModel',
    'TerrainMap',
    'WholeBodyDynamics',
    'WholeBodyKinematics',
]
