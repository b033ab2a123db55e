"""Host-side transforms: immutable ``Transform`` values and mutable nodes.

The projection core only ever reads a ``Transform``.  ``SceneNode`` is the
thing a host owns and mutates; every mutation bumps a generation counter
so the owner can tell when derived state needs recomputing without
polling dirty flags.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from offaxis.core.math_utils import (
    Mat4, Vec3, Quat,
    as_quat, as_vec3, mat4_compose, quat_identity, quat_multiply,
    quat_normalize, transform_point, vec3,
)


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.array(a, dtype=np.float64)
    a.setflags(write=False)
    return a


@dataclass(frozen=True, eq=False)
class Transform:
    """World-space position, rotation and scale of an object."""
    position: Vec3 = field(default_factory=vec3)
    quaternion: Quat = field(default_factory=quat_identity)
    scale: Vec3 = field(default_factory=lambda: vec3(1, 1, 1))

    def __post_init__(self):
        object.__setattr__(self, "position", _frozen(as_vec3(self.position)))
        object.__setattr__(self, "quaternion", _frozen(quat_normalize(as_quat(self.quaternion))))
        object.__setattr__(self, "scale", _frozen(as_vec3(self.scale)))

    def matrix(self) -> Mat4:
        """Local-to-world TRS matrix."""
        return mat4_compose(self.position, self.quaternion, self.scale)

    def transform_point(self, p: Vec3) -> Vec3:
        return transform_point(self.matrix(), p)


class SceneNode:
    """A transform node that may hang off a parent.

    World transform = parent world transform composed with the local one.
    World scale is the component-wise product along the chain, which is
    exact for uniform scales.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.parent: Optional["SceneNode"] = None
        self.children: list["SceneNode"] = []

        self.position: Vec3 = vec3()
        self.quaternion: Quat = quat_identity()
        self.scale: Vec3 = vec3(1, 1, 1)

        # Generation counter, bumped on every mutation
        self.version: int = 0

    def add(self, child: "SceneNode") -> "SceneNode":
        """Add a child node. Removes from previous parent if any."""
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        child.version += 1
        return self

    def remove(self, child: "SceneNode") -> "SceneNode":
        """Remove a child node."""
        if child in self.children:
            self.children.remove(child)
            child.parent = None
            child.version += 1
        return self

    def set_position(self, x: float, y: float, z: float) -> "SceneNode":
        self.position = vec3(x, y, z)
        self.version += 1
        return self

    def set_quaternion(self, q: Quat) -> "SceneNode":
        self.quaternion = quat_normalize(as_quat(q))
        self.version += 1
        return self

    def set_scale(self, x: float, y: float, z: float) -> "SceneNode":
        self.scale = vec3(x, y, z)
        self.version += 1
        return self

    def world_version(self) -> tuple[int, ...]:
        """Generation counters of this node and its ancestors, root first."""
        chain = []
        node: Optional[SceneNode] = self
        while node is not None:
            chain.append(node.version)
            node = node.parent
        return tuple(reversed(chain))

    def local_transform(self) -> Transform:
        return Transform(self.position, self.quaternion, self.scale)

    def world_transform(self) -> Transform:
        """Compose local transforms from the root down to this node."""
        if self.parent is None:
            return self.local_transform()
        parent = self.parent.world_transform()
        position = transform_point(parent.matrix(), self.position)
        quaternion = quat_multiply(parent.quaternion, self.quaternion)
        scale = parent.scale * self.scale
        return Transform(position, quaternion, scale)

    def get_world_position(self) -> Vec3:
        return np.array(self.world_transform().position)
