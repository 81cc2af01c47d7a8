"""Import classes and definitions representing 3D positions, orientations, and poses."""

from .point3d import Point3D as Point3D
from .poses import WORLD_FRAME as WORLD_FRAME
from .poses import Pose3D as Pose3D
from .poses import StampedPose as StampedPose
from .poses import body_frame_name as body_frame_name
from .rotations import EulerRPY as EulerRPY
from .rotations import Quaternion as Quaternion
