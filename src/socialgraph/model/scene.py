"""
Scene Model
===========
Owns every node, link and package of one network, and keeps them in sync
with the tables supplied by the embedding application.

Why is this file needed?
------------------------
1. Ingestion: tables are applied row by row with create/update/delete
   semantics. A failing row raises before it changes anything; earlier rows
   of the same table stay applied.
2. Ownership: links and packages only reference nodes. When a node goes away
   (delete action, replacement, timestamp filter), dependent links and
   packages are re-bound to the live node with the same id or removed.
3. Time filtering: the last full tables are retained so the visible subset
   can be recomputed for any timestamp.
"""
from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from enum import StrEnum
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from socialgraph.config import NetworkConstants
from socialgraph.errors import InvalidActionError, InvalidArgumentError, MissingColumnError, NotFoundError
from socialgraph.model.geometry import Rect, Transform
from socialgraph.model.groups import Groups
from socialgraph.model.images import Images
from socialgraph.model.link import Link
from socialgraph.model.node import Node, TextMeasure
from socialgraph.model.package import Package
from socialgraph.model.table import DataTable, as_table, numbers, present, timestamp_ms

logger = logging.getLogger(__name__)

TableLike = Union[DataTable, Iterable[dict[str, Any]], None]


class EntityKind(StrEnum):
    NODES = "nodes"
    LINKS = "links"
    PACKAGES = "packages"


REQUIRED_COLUMNS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.NODES: ("id",),
    EntityKind.LINKS: ("from", "to"),
    EntityKind.PACKAGES: ("from", "to"),
}


def _check_columns(kind: EntityKind, table: Optional[DataTable]) -> None:
    """Reject a table missing a required column before any state changes."""
    if table is None:
        return
    for column in REQUIRED_COLUMNS[kind]:
        if not table.has_column(column):
            raise MissingColumnError(column, kind.value)


class Scene:
    def __init__(self, constants: Optional[NetworkConstants] = None, images: Optional[Images] = None) -> None:
        self.constants = constants or NetworkConstants()
        self.images = images if images is not None else Images()
        self.groups = Groups()
        self.transform = Transform()
        self.width = 0.0
        self.height = 0.0

        self.nodes: list[Node] = []
        self.links: list[Link] = []
        self.packages: list[Package] = []

        self.nodes_table: Optional[DataTable] = None
        self.links_table: Optional[DataTable] = None
        self.packages_table: Optional[DataTable] = None

        self.has_moving_nodes = False
        self.has_moving_links = False
        self.has_moving_packages = False

    def set_canvas_size(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2

    # -------------------------------------------------------------------------
    # Generic entry points
    # -------------------------------------------------------------------------

    def set_entities(self, kind: EntityKind | str, table: TableLike) -> None:
        {
            EntityKind.NODES: self.set_nodes,
            EntityKind.LINKS: self.set_links,
            EntityKind.PACKAGES: self.set_packages,
        }[EntityKind(kind)](table)

    def add_entities(self, kind: EntityKind | str, table: TableLike) -> None:
        {
            EntityKind.NODES: self.add_nodes,
            EntityKind.LINKS: self.add_links,
            EntityKind.PACKAGES: self.add_packages,
        }[EntityKind(kind)](table)

    def set_timestamp(self, timestamp: Any) -> None:
        """Show only what exists at ``timestamp``."""
        self.filter_nodes(timestamp)
        self.filter_links(timestamp)
        self.filter_packages(timestamp)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def set_nodes(self, table: TableLike) -> None:
        table = as_table(table)
        _check_columns(EntityKind.NODES, table)
        self.has_moving_nodes = False
        self.nodes_table = table
        self.nodes = []
        if table is None:
            self._prune_references()
            return
        self._ingest(EntityKind.NODES, table, self._apply_node_row)
        logger.debug(f"Loaded {len(self.nodes)} nodes")

    def add_nodes(self, table: TableLike) -> None:
        table = as_table(table)
        _check_columns(EntityKind.NODES, table)
        if table is not None:
            self._ingest(EntityKind.NODES, table, self._apply_node_row)

    def filter_nodes(self, timestamp: Any) -> None:
        table = self.nodes_table
        if table is None or not table.has_column("timestamp"):
            return
        cutoff = timestamp_ms(timestamp)
        if cutoff is not None:
            self.nodes = [node for node in self.nodes if not _is_after(node.timestamp_ms, cutoff)]

        def apply_visible(row: dict[str, Any]) -> None:
            if not _is_after(timestamp_ms(row.get("timestamp")), cutoff):
                self._apply_node_row(row)

        self._ingest(EntityKind.NODES, table, apply_visible)

    def find_node(self, node_id: Any) -> Optional[int]:
        for index, node in enumerate(self.nodes):
            if node.id == node_id:
                return index
        return None

    def get_node(self, node_id: Any) -> Optional[Node]:
        index = self.find_node(node_id)
        return self.nodes[index] if index is not None else None

    def _apply_node_row(self, properties: dict[str, Any]) -> None:
        action = properties.get("action", "update")
        node_id = properties.get("id")

        if action == "create":
            node = Node(properties, self.images, self.groups, self.constants)
            index = self.find_node(node.id)
            if index is not None:
                self.nodes[index] = node
            else:
                self.nodes.append(node)
        elif action == "update":
            if node_id is None:
                raise InvalidArgumentError("Cannot update a node without id")
            index = self.find_node(node_id)
            if index is not None:
                node = self.nodes[index]
                node.set_properties(properties)
            else:
                node = Node(properties, self.images, self.groups, self.constants)
                self.nodes.append(node)
        elif action == "delete":
            if node_id is None:
                raise InvalidArgumentError("Cannot delete a node without id")
            index = self.find_node(node_id)
            if index is None:
                raise NotFoundError("node", node_id)
            del self.nodes[index]
            return
        else:
            raise InvalidActionError(action)

        if not node.is_fixed():
            self.has_moving_nodes = True

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    def set_links(self, table: TableLike) -> None:
        table = as_table(table)
        _check_columns(EntityKind.LINKS, table)
        self.links_table = table
        self.links = []
        if table is not None:
            self._ingest(EntityKind.LINKS, table, self._apply_link_row)
            logger.debug(f"Loaded {len(self.links)} links")
        self._update_motion_flags()

    def add_links(self, table: TableLike) -> None:
        table = as_table(table)
        _check_columns(EntityKind.LINKS, table)
        if table is not None:
            self._ingest(EntityKind.LINKS, table, self._apply_link_row)

    def filter_links(self, timestamp: Any) -> None:
        table = self.links_table
        if table is None or not table.has_column("timestamp"):
            return
        cutoff = timestamp_ms(timestamp)
        self.links = []

        def apply_visible(row: dict[str, Any]) -> None:
            if not _is_after(timestamp_ms(row.get("timestamp")), cutoff) and self._endpoints_live(row):
                self._apply_link_row(row)

        self._ingest(EntityKind.LINKS, table, apply_visible)

    def find_link(self, link_id: Any) -> Optional[int]:
        for index, link in enumerate(self.links):
            if link.id is not None and link.id == link_id:
                return index
        return None

    def _apply_link_row(self, properties: dict[str, Any]) -> None:
        action = properties.get("action", "create")
        link_id = properties.get("id")

        if action == "create":
            link = Link(properties, self.get_node, self.constants)
            index = self.find_link(link.id) if link.id is not None else None
            if index is not None:
                self.links[index] = link
            else:
                self.links.append(link)
        elif action == "update":
            if link_id is None:
                raise InvalidArgumentError("Cannot update a link without id")
            index = self.find_link(link_id)
            if index is not None:
                self.links[index].set_properties(properties)
            else:
                self.links.append(Link(properties, self.get_node, self.constants))
        elif action == "delete":
            if link_id is None:
                raise InvalidArgumentError("Cannot delete a link without id")
            index = self.find_link(link_id)
            if index is None:
                raise NotFoundError("link", link_id)
            del self.links[index]
        else:
            raise InvalidActionError(action)

    # -------------------------------------------------------------------------
    # Packages
    # -------------------------------------------------------------------------

    def set_packages(self, table: TableLike) -> None:
        table = as_table(table)
        _check_columns(EntityKind.PACKAGES, table)
        self.packages_table = table
        self.packages = []
        if table is not None:
            self._ingest(EntityKind.PACKAGES, table, self._apply_package_row)
            logger.debug(f"Loaded {len(self.packages)} packages")
        self._update_motion_flags()

    def add_packages(self, table: TableLike) -> None:
        table = as_table(table)
        _check_columns(EntityKind.PACKAGES, table)
        if table is not None:
            self._ingest(EntityKind.PACKAGES, table, self._apply_package_row)

    def filter_packages(self, timestamp: Any) -> None:
        """
        Rebuild the packages visible at ``timestamp``.

        A package row without progress is shown on its way: its progress is
        the time elapsed since its timestamp divided by its duration, and it
        is hidden once it has arrived.
        """
        table = self.packages_table
        if table is None:
            return
        cutoff = timestamp_ms(timestamp)
        default_duration = self.constants.packages.default_duration
        self.packages = []

        def apply_visible(row: dict[str, Any]) -> None:
            start = timestamp_ms(row.get("timestamp"))
            if _is_after(start, cutoff):
                return
            if "progress" not in row and start is not None and cutoff is not None:
                duration = numbers(row, ("duration",)).get("duration", default_duration)
                elapsed = (cutoff - start) / 1000.0
                if elapsed >= duration:
                    return
                row = dict(row, progress=elapsed / duration)
            if self._endpoints_live(row):
                self._apply_package_row(row)

        self._ingest(EntityKind.PACKAGES, table, apply_visible)

    def find_package(self, package_id: Any) -> Optional[int]:
        for index, package in enumerate(self.packages):
            if package.id is not None and package.id == package_id:
                return index
        return None

    def _apply_package_row(self, properties: dict[str, Any]) -> None:
        action = properties.get("action", "create")
        package_id = properties.get("id")

        if action == "create":
            package = Package(properties, self.get_node, self.images, self.constants)
            index = self.find_package(package.id) if package.id is not None else None
            if index is not None:
                self.packages[index] = package
            else:
                self.packages.append(package)
        elif action == "update":
            if package_id is None:
                raise InvalidArgumentError("Cannot update a package without id")
            index = self.find_package(package_id)
            if index is not None:
                self.packages[index].set_properties(properties)
            else:
                self.packages.append(Package(properties, self.get_node, self.images, self.constants))
        elif action == "delete":
            if package_id is None:
                raise InvalidArgumentError("Cannot delete a package without id")
            index = self.find_package(package_id)
            if index is None:
                raise NotFoundError("package", package_id)
            del self.packages[index]
        else:
            raise InvalidActionError(action)

    # -------------------------------------------------------------------------
    # Ingestion helpers
    # -------------------------------------------------------------------------

    def _ingest(self, kind: EntityKind, table: DataTable,
                apply_row: Callable[[dict[str, Any]], None]) -> None:
        try:
            for row in table.rows():
                apply_row(present(row))
        finally:
            if kind == EntityKind.NODES:
                self._prune_references()
            self._update_motion_flags()

        if kind == EntityKind.NODES and table.has_column("value"):
            self.update_value_range(self.nodes)
        elif kind == EntityKind.LINKS and table.has_column("value"):
            self.update_value_range(self.links)
        elif kind == EntityKind.PACKAGES:
            self.update_value_range(self.packages)

    def _endpoints_live(self, row: dict[str, Any]) -> bool:
        return self.get_node(row.get("from")) is not None and self.get_node(row.get("to")) is not None

    def _prune_references(self) -> None:
        """Re-bind links and packages to live nodes by id; drop the ones left dangling."""
        live = {id(node) for node in self.nodes}
        by_id = {node.id: node for node in self.nodes}

        def rebind(entity: Link | Package) -> bool:
            for attribute in ("from_node", "to_node"):
                node = getattr(entity, attribute)
                if id(node) in live:
                    continue
                replacement = by_id.get(node.id)
                if replacement is None:
                    return False
                setattr(entity, attribute, replacement)
            return True

        link_count = len(self.links)
        package_count = len(self.packages)
        self.links = [link for link in self.links if rebind(link)]
        self.packages = [package for package in self.packages if rebind(package)]

        removed = (link_count - len(self.links)) + (package_count - len(self.packages))
        if removed:
            logger.debug(f"Removed {removed} links/packages referencing removed nodes")

    def _update_motion_flags(self) -> None:
        self.has_moving_links = any(link.is_moving() for link in self.links)
        self.has_moving_packages = any(package.is_moving() for package in self.packages)

    @staticmethod
    def update_value_range(entities: Sequence[Node | Link | Package]) -> None:
        """Scale radius or width linearly over the value range of ``entities``."""
        values = [entity.value for entity in entities if entity.value is not None]
        if not values:
            return
        minimum, maximum = min(values), max(values)
        if minimum == maximum:
            return
        for entity in entities:
            entity.set_value_range(minimum, maximum)

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------

    @property
    def has_timestamps(self) -> bool:
        return any(table is not None and table.column_values("timestamp")
                   for table in (self.nodes_table, self.links_table, self.packages_table))

    def get_range(self) -> tuple[Any, Any]:
        """
        Time span covered by the timestamp columns of all three tables.

        A package without progress ends ``duration`` seconds after its
        timestamp. Returns datetimes when the tables hold datetimes, else
        milliseconds, and (None, None) when there are no timestamps.
        """
        start: Optional[float] = None
        end: Optional[float] = None
        zone: Optional[tzinfo] = None
        is_date = False

        def widen(first: float, last: float) -> None:
            nonlocal start, end
            start = first if start is None else min(start, first)
            end = last if end is None else max(end, last)

        for table in (self.nodes_table, self.links_table):
            if table is None:
                continue
            values = table.column_values("timestamp")
            for value in values:
                if isinstance(value, datetime):
                    is_date = True
                    zone = zone or value.tzinfo
            millis = [timestamp_ms(value) for value in values]
            if millis:
                widen(min(millis), max(millis))

        if self.packages_table is not None:
            default_duration = self.constants.packages.default_duration
            for row in self.packages_table.rows():
                value = row.get("timestamp")
                if value is None:
                    continue
                if isinstance(value, datetime):
                    is_date = True
                    zone = zone or value.tzinfo
                begin = timestamp_ms(value)
                if row.get("progress") is not None:
                    widen(begin, begin)
                else:
                    duration = row.get("duration")
                    duration = default_duration if duration is None else duration
                    widen(begin, begin + duration * 1000.0)

        if start is None:
            return None, None
        if is_date:
            return datetime.fromtimestamp(start / 1000.0, tz=zone), datetime.fromtimestamp(end / 1000.0, tz=zone)
        return start, end

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def selection(self) -> list[int]:
        return [row for row, node in enumerate(self.nodes) if node.selected]

    def select_nodes(self, rows: Iterable[int], append: bool = False) -> bool:
        """Returns True when the selection changed."""
        before = self.selection()
        if not append:
            for node in self.nodes:
                node.unselect()
        for row in rows:
            self.nodes[row].select()
        return self.selection() != before

    def unselect_nodes(self, rows: Optional[Iterable[int]] = None) -> bool:
        before = self.selection()
        targets = range(len(self.nodes)) if rows is None else rows
        for row in targets:
            self.nodes[row].unselect()
        return self.selection() != before

    def set_selection(self, selection: Any) -> bool:
        """
        Replace the selection with the given node rows.

        Rows may be ints or ``{"row": int}`` dicts. The whole selection is
        validated before anything changes.
        """
        if isinstance(selection, (str, bytes, dict)) or not isinstance(selection, Sequence):
            raise InvalidArgumentError("Selection must be a list of node rows")
        rows = []
        for item in selection:
            row = item.get("row") if isinstance(item, dict) else item
            if isinstance(row, bool) or not isinstance(row, int):
                raise InvalidArgumentError(f"Invalid row {item!r} in selection")
            if not 0 <= row < len(self.nodes):
                raise InvalidArgumentError(f"Row {row} out of range")
            rows.append(row)
        return self.select_nodes(rows)

    def nodes_overlapping(self, rect: Rect) -> list[int]:
        return [row for row, node in enumerate(self.nodes) if node.is_overlapping_with(rect)]

    def title_target_at(self, rect: Rect) -> Optional[Node | Link | Package]:
        """First titled entity under ``rect``: packages, then nodes, then links."""
        for collection in (self.packages, self.nodes, self.links):
            for entity in collection:
                if entity.title and entity.is_overlapping_with(rect):
                    return entity
        return None

    # -------------------------------------------------------------------------
    # Animation
    # -------------------------------------------------------------------------

    def update_sizes(self, measure: TextMeasure) -> None:
        for node in self.nodes:
            node.resize(measure)

    def step_links(self, interval: float) -> None:
        for link in self.links:
            link.advance(interval)

    def step_packages(self, interval: float) -> None:
        for package in self.packages:
            package.discrete_step(interval)

    def delete_finished_packages(self) -> None:
        self.packages = [package for package in self.packages if not package.is_finished()]
        self.has_moving_packages = any(package.is_moving() for package in self.packages)


def _is_after(value: Optional[float], cutoff: Optional[float]) -> bool:
    return value is not None and cutoff is not None and value > cutoff
