"""
Scene Renderer
==============
Paints a ``Scene`` with a ``QPainter``.

Why is this file needed?
------------------------
Each node, link and package style has its own drawing routine. The routines
register themselves per style with a decorator, so ``paint_scene`` only looks
up the painter for an entity's style and never branches on it.

Drawing order is links, then nodes, then packages, all in canvas coordinates
under the scene's pan/zoom transform.
"""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen

from socialgraph.model.link import Link, LinkStyle
from socialgraph.model.node import Node, NodeStyle
from socialgraph.model.package import Package, PackageStyle
from socialgraph.model.scene import Scene
from socialgraph.view import shapes

logger = logging.getLogger(__name__)

T = TypeVar("T")
Painter = Callable[[QPainter, T], None]

_NODE_PAINTERS: dict[NodeStyle, Painter[Node]] = {}
_LINK_PAINTERS: dict[LinkStyle, Painter[Link]] = {}
_PACKAGE_PAINTERS: dict[PackageStyle, Painter[Package]] = {}

CORNER_RADIUS = 5.0


def register_node(*styles: NodeStyle) -> Callable[[Painter[Node]], Painter[Node]]:
    """Function decorator to register a node painter for the given styles."""
    def decorator(func: Painter[Node]) -> Painter[Node]:
        for style in styles:
            _NODE_PAINTERS[style] = func
        return func
    return decorator


def register_link(*styles: LinkStyle) -> Callable[[Painter[Link]], Painter[Link]]:
    def decorator(func: Painter[Link]) -> Painter[Link]:
        for style in styles:
            _LINK_PAINTERS[style] = func
        return func
    return decorator


def register_package(*styles: PackageStyle) -> Callable[[Painter[Package]], Painter[Package]]:
    def decorator(func: Painter[Package]) -> Painter[Package]:
        for style in styles:
            _PACKAGE_PAINTERS[style] = func
        return func
    return decorator


def node_painter(style: NodeStyle) -> Painter[Node]:
    painter = _NODE_PAINTERS.get(style)
    if painter is None:
        raise KeyError(f"No painter registered for node style '{style}'")
    return painter


def link_painter(style: LinkStyle) -> Painter[Link]:
    painter = _LINK_PAINTERS.get(style)
    if painter is None:
        raise KeyError(f"No painter registered for link style '{style}'")
    return painter


def package_painter(style: PackageStyle) -> Painter[Package]:
    painter = _PACKAGE_PAINTERS.get(style)
    if painter is None:
        raise KeyError(f"No painter registered for package style '{style}'")
    return painter


def paint_scene(painter: QPainter, scene: Scene) -> None:
    painter.save()
    painter.setRenderHint(QPainter.Antialiasing)
    transform = scene.transform
    painter.translate(transform.tx, transform.ty)
    painter.scale(transform.scale, transform.scale)

    for link in scene.links:
        link_painter(link.kind)(painter, link)
    for node in scene.nodes:
        node_painter(node.kind)(painter, node)
    for package in scene.packages:
        package_painter(package.kind)(painter, package)

    painter.restore()


# -------------------------------------------------------------------------------
# Nodes
# -------------------------------------------------------------------------------

def _outline(painter: QPainter, node: Node) -> None:
    style = node.group_style
    painter.setPen(QPen(QColor(style.stroke), 2.0 if node.selected else 1.0))
    painter.setBrush(QBrush(QColor(style.highlight if node.selected else style.fill)))


def _text(painter: QPainter, node: Node, x: float, y: float, below: bool = False) -> None:
    """Label centered on (x, y), or hanging below y when ``below``."""
    if not node.text:
        return
    font = QFont(node.font_face)
    font.setPixelSize(int(node.font_size))
    font.setBold(node.selected)
    painter.setFont(font)
    painter.setPen(QColor(node.font_color))
    width = max(node.width or 0.0, 1.0) * 4
    if below:
        box = QRectF(x - width / 2, y, width, node.font_size * 2)
        painter.drawText(box, Qt.AlignHCenter | Qt.AlignTop, str(node.text))
    else:
        box = QRectF(x - width / 2, y - node.font_size, width, node.font_size * 2)
        painter.drawText(box, Qt.AlignCenter, str(node.text))


@register_node(NodeStyle.RECT)
def paint_rect(painter: QPainter, node: Node) -> None:
    _outline(painter, node)
    painter.drawPath(shapes.round_rect(node.left, node.top, node.width, node.height, CORNER_RADIUS))
    _text(painter, node, node.x, node.y)


@register_node(NodeStyle.CIRCLE)
def paint_circle(painter: QPainter, node: Node) -> None:
    _outline(painter, node)
    painter.drawPath(shapes.circle(node.x, node.y, node.radius))
    _text(painter, node, node.x, node.y)


@register_node(NodeStyle.DOT)
def paint_dot(painter: QPainter, node: Node) -> None:
    _outline(painter, node)
    painter.drawPath(shapes.circle(node.x, node.y, node.radius))


@register_node(NodeStyle.DATABASE)
def paint_database(painter: QPainter, node: Node) -> None:
    _outline(painter, node)
    painter.drawPath(shapes.database(node.x - node.width / 2, node.y - node.height / 2, node.width, node.height))
    _text(painter, node, node.x, node.y)


@register_node(NodeStyle.TEXT)
def paint_text(painter: QPainter, node: Node) -> None:
    _text(painter, node, node.x, node.y)


@register_node(NodeStyle.IMAGE)
def paint_image(painter: QPainter, node: Node) -> None:
    entry = node.image_entry
    if entry is not None and entry.loaded:
        painter.drawImage(QPointF(node.left, node.top), entry.image)
        _text(painter, node, node.x, node.y + entry.height / 2, below=True)
    else:
        # still loading, show the label only
        _text(painter, node, node.x, node.y)


# -------------------------------------------------------------------------------
# Links
# -------------------------------------------------------------------------------

def _line(painter: QPainter, link: Link) -> None:
    painter.setPen(QPen(QColor(link.color), link.width))
    painter.setBrush(Qt.NoBrush)
    painter.drawLine(QPointF(link.from_node.x, link.from_node.y), QPointF(link.to_node.x, link.to_node.y))


@register_link(LinkStyle.LINE)
def paint_line(painter: QPainter, link: Link) -> None:
    _line(painter, link)


@register_link(LinkStyle.ARROW, LinkStyle.MOVING_ARROWS)
def paint_arrows(painter: QPainter, link: Link) -> None:
    _line(painter, link)
    painter.setBrush(QBrush(QColor(link.color)))
    angle = link.angle()
    length = 10 + 5 * link.width
    for phase in link.arrows:
        x, y = link.point_at(phase)
        painter.drawPath(shapes.arrow(x, y, angle, length))


@register_link(LinkStyle.MOVING_DOT)
def paint_moving_dot(painter: QPainter, link: Link) -> None:
    _line(painter, link)
    painter.setPen(Qt.NoPen)
    painter.setBrush(QBrush(QColor(link.color)))
    x, y = link.point_at(link.dot)
    painter.drawPath(shapes.circle(x, y, 4 + 2 * link.width))


# -------------------------------------------------------------------------------
# Packages
# -------------------------------------------------------------------------------

@register_package(PackageStyle.DOT)
def paint_package_dot(painter: QPainter, package: Package) -> None:
    painter.setPen(Qt.NoPen)
    painter.setBrush(QBrush(QColor(package.color)))
    x, y = package.position()
    painter.drawPath(shapes.circle(x, y, package.radius))


@register_package(PackageStyle.IMAGE)
def paint_package_image(painter: QPainter, package: Package) -> None:
    entry = package.image_entry
    if entry is None or not entry.loaded:
        return
    x, y = package.position()
    painter.drawImage(QPointF(x - entry.width / 2, y - entry.height / 2), entry.image)
