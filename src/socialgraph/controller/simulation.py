"""
Force Simulation
================
Moves free nodes towards a local equilibrium.

Each tick accumulates three forces per node (gravity towards the canvas
center, pairwise repulsion, link springs) and integrates them with a damped
semi-implicit Euler step. Pinned axes are never integrated.

Repulsion is evaluated for every pair of nodes, so a tick costs O(n^2); that
is fine up to a few hundred nodes.
"""
from __future__ import annotations

import logging
import math

import numpy as np

from socialgraph.model.scene import Scene

logger = logging.getLogger(__name__)


class ForceSimulation:
    def __init__(self, scene: Scene) -> None:
        self.scene = scene

    def _positions(self) -> np.ndarray:
        return np.array([(node.x, node.y) for node in self.scene.nodes], dtype=np.float64).reshape(-1, 2)

    def reposition(self) -> None:
        """Spread the free nodes over a circle around the canvas center."""
        nodes = self.scene.nodes
        if not nodes:
            return
        radius = self.scene.constants.links.default_length * 2
        cx, cy = self.scene.center
        count = len(nodes)
        for i, node in enumerate(nodes):
            angle = 2 * math.pi * (i / count)
            if not node.x_fixed:
                node.x = cx + radius * math.cos(angle)
            if not node.y_fixed:
                node.y = cy + radius * math.sin(angle)

    def calculate_forces(self) -> None:
        """Replace the force on every node with gravity + repulsion + springs."""
        nodes = self.scene.nodes
        count = len(nodes)
        if count == 0:
            return
        constants = self.scene.constants
        pos = self._positions()

        # Gravity
        to_center = np.array(self.scene.center) - pos
        angle = np.arctan2(to_center[:, 1], to_center[:, 0])
        forces = constants.gravity * np.column_stack((np.cos(angle), np.sin(angle)))

        # Repulsion, once per unordered pair
        i, j = np.triu_indices(count, k=1)
        if i.size:
            delta = pos[j] - pos[i]
            dmin = constants.nodes.minimum_distance
            distance2 = np.einsum("ij,ij->i", delta, delta)
            angle = np.arctan2(delta[:, 1], delta[:, 0])
            strength = 2 * np.exp(-5 * distance2 / (dmin * dmin))
            pair = np.column_stack((np.cos(angle) * strength, np.sin(angle) * strength))
            np.add.at(forces, i, -pair)
            np.add.at(forces, j, pair)

        # Springs
        row_of = {id(node): row for row, node in enumerate(nodes)}
        springs = [(row_of[id(link.from_node)], row_of[id(link.to_node)], link.stiffness, link.length)
                   for link in self.scene.links
                   if id(link.from_node) in row_of and id(link.to_node) in row_of]
        if springs:
            src, dst, stiffness, rest = (np.array(column) for column in zip(*springs))
            delta = pos[dst] - pos[src]
            length = np.hypot(delta[:, 0], delta[:, 1])
            angle = np.arctan2(delta[:, 1], delta[:, 0])
            strength = stiffness * (rest - length)
            spring = np.column_stack((np.cos(angle) * strength, np.sin(angle) * strength))
            np.add.at(forces, src, -spring)
            np.add.at(forces, dst, spring)

        for node, (fx, fy) in zip(nodes, forces):
            node.fx = float(fx)
            node.fy = float(fy)

    def discrete_step_nodes(self) -> None:
        """Integrate one tick of ``refresh_rate`` milliseconds."""
        nodes = self.scene.nodes
        if not nodes:
            return
        interval = self.scene.constants.interval

        pos = self._positions()
        velocity = np.array([(node.vx, node.vy) for node in nodes], dtype=np.float64)
        force = np.array([(node.fx, node.fy) for node in nodes], dtype=np.float64)
        mass = np.array([node.mass for node in nodes], dtype=np.float64)[:, None]
        damping = np.array([node.damping for node in nodes], dtype=np.float64)[:, None]
        free = ~np.array([(node.x_fixed, node.y_fixed) for node in nodes], dtype=bool)

        acceleration = (force - damping * velocity) / mass
        velocity = np.where(free, velocity + acceleration / interval, velocity)
        pos = np.where(free, pos + velocity / interval, pos)

        for node, (x, y), (vx, vy) in zip(nodes, pos, velocity):
            node.x, node.y = float(x), float(y)
            node.vx, node.vy = float(vx), float(vy)

    def is_moving(self, vmin: float | None = None) -> bool:
        """
        True while any node is faster than ``vmin`` on an axis, or feels a
        force above ``min_force`` on a free axis.
        """
        nodes = self.scene.nodes
        if not nodes:
            return False
        constants = self.scene.constants
        vmin = constants.min_velocity if vmin is None else vmin

        velocity = np.array([(node.vx, node.vy) for node in nodes], dtype=np.float64)
        force = np.array([(node.fx, node.fy) for node in nodes], dtype=np.float64)
        free = ~np.array([(node.x_fixed, node.y_fixed) for node in nodes], dtype=bool)

        fast = np.abs(velocity) > vmin
        pushed = free & (np.abs(force) > constants.min_force)
        return bool(np.any(fast | pushed))

    def stabilize(self) -> int:
        """
        Iterate until nothing moves or ``max_iterations`` is reached.

        Returns:
            The number of iterations performed.
        """
        limit = self.scene.constants.max_iterations
        count = 0
        stable = False
        while not stable and count < limit:
            self.calculate_forces()
            self.discrete_step_nodes()
            stable = not self.is_moving()
            count += 1

        if stable:
            logger.info(f"Stabilized {len(self.scene.nodes)} nodes in {count} iterations")
        else:
            logger.info(f"Stopped stabilizing after {count} iterations, layout still moving")
        return count
