"""
Path builders for the node, link and package shapes.

All functions take canvas coordinates and return a ``QPainterPath`` that the
renderer fills and/or strokes.
"""
from __future__ import annotations

import math

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QPainterPath

# control point distance for approximating a quarter ellipse with a cubic
KAPPA = 0.5522848


def round_rect(x: float, y: float, width: float, height: float, radius: float) -> QPainterPath:
    radius = max(0.0, min(radius, width / 2, height / 2))
    path = QPainterPath()
    path.addRoundedRect(QRectF(x, y, width, height), radius, radius)
    return path


def circle(x: float, y: float, radius: float) -> QPainterPath:
    path = QPainterPath()
    path.addEllipse(QPointF(x, y), radius, radius)
    return path


def ellipse(x: float, y: float, width: float, height: float) -> QPainterPath:
    """Ellipse inside the box with top-left (x, y), built from four cubics."""
    ox = (width / 2) * KAPPA
    oy = (height / 2) * KAPPA
    xe = x + width
    ye = y + height
    xm = x + width / 2
    ym = y + height / 2

    path = QPainterPath(QPointF(x, ym))
    path.cubicTo(x, ym - oy, xm - ox, y, xm, y)
    path.cubicTo(xm + ox, y, xe, ym - oy, xe, ym)
    path.cubicTo(xe, ym + oy, xm + ox, ye, xm, ye)
    path.cubicTo(xm - ox, ye, x, ym + oy, x, ym)
    path.closeSubpath()
    return path


def database(x: float, y: float, width: float, height: float) -> QPainterPath:
    """Cylinder: a body with an elliptic top (height / 3) and bottom."""
    third = height / 3
    ox = (width / 2) * KAPPA
    oy = (third / 2) * KAPPA
    xe = x + width
    xm = x + width / 2
    ym = y + third / 2
    ye = y + height

    path = QPainterPath(QPointF(xe, ym))
    # top cap
    path.cubicTo(xe, ym + oy, xm + ox, ym + third / 2, xm, ym + third / 2)
    path.cubicTo(xm - ox, ym + third / 2, x, ym + oy, x, ym)
    path.cubicTo(x, ym - oy, xm - ox, ym - third / 2, xm, ym - third / 2)
    path.cubicTo(xm + ox, ym - third / 2, xe, ym - oy, xe, ym)
    # body
    path.lineTo(xe, ye - third / 2)
    path.cubicTo(xe, ye - third / 2 + oy, xm + ox, ye, xm, ye)
    path.cubicTo(xm - ox, ye, x, ye - third / 2 + oy, x, ye - third / 2)
    path.lineTo(x, ym)
    return path


def arrow(x: float, y: float, angle: float, length: float) -> QPainterPath:
    """Filled arrow head with its tip at (x, y) pointing along ``angle``."""
    xl = x - length * math.cos(angle)
    yl = y - length * math.sin(angle)
    xi = x - length * 0.9 * math.cos(angle)
    yi = y - length * 0.9 * math.sin(angle)
    half = length / 3
    perpendicular = angle + math.pi / 2

    path = QPainterPath(QPointF(x, y))
    path.lineTo(xl + half * math.cos(perpendicular), yl + half * math.sin(perpendicular))
    path.lineTo(xi, yi)
    path.lineTo(xl - half * math.cos(perpendicular), yl - half * math.sin(perpendicular))
    path.closeSubpath()
    return path
