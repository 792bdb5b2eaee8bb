"""
People
======
Turns persons and their relations into node and link tables.

Each person becomes one node, identified by the order in which names are first
seen. Each relation becomes a link coloured by the domain it belongs to and
weighted by how often the two people meet (contacts per year).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Iterable, Optional

from socialgraph.model.table import DataTable


class Sex(StrEnum):
    MALE = "male"
    FEMALE = "female"


@dataclass
class Relation:
    name: str  # name of the other person
    domain: str = ""
    frequency: str = ""


@dataclass
class Person:
    name: str
    age: Optional[int] = None
    sex: Optional[Sex] = None
    relations: list[Relation] = field(default_factory=list)


DOMAIN_COLORS: dict[str, str] = {
    "": "black",
    "Buitenspelen": "red",
    "Buurtactiviteiten": "blue",
    "Cultuur/kunst": "green",
    "Familie": "magenta",
    "Opvang": "brown",
    "Religie": "orange",
    "School": "darkviolet",
    "Sport": "limegreen",
}

# contacts per year; keep this order, it runs from rare to daily
FREQUENCIES: dict[str, int] = {
    "": 0,
    "Bijna nooit": 1,
    "1x in 3 maanden": 4,
    "1x per maand": 12,
    "1x per week": 52,
    "2x per week": 104,
    "dagelijks": 365,
}

DEFAULT_COLOR = "black"

DRAW_OPTIONS: dict[str, Any] = {
    "width": "600px",
    "height": "500px",
    "backgroundColor": {"stroke": "lightgray"},
    "links": {"defaultLength": 120},
}


def legend() -> list[tuple[str, str]]:
    """(domain, colour) pairs of the named domains, sorted by domain."""
    return [(domain, DOMAIN_COLORS[domain]) for domain in sorted(DOMAIN_COLORS) if domain]


def build_tables(persons: Iterable[Person]) -> tuple[DataTable, DataTable]:
    """
    Build the node and link tables for a list of persons.

    Returns:
        (nodes, links): nodes have columns id and text; links have from, to,
        color, value, style and title.
    """
    nodes = DataTable(["id", "text"])
    links = DataTable(["from", "to", "color", "value", "style", "title"])
    ids: dict[str, int] = {}

    def person_id(name: str) -> int:
        if name not in ids:
            ids[name] = nodes.add_row([len(nodes), name])
        return ids[name]

    for person in persons:
        source = person_id(person.name)
        for relation in person.relations:
            target = person_id(relation.name)
            links.add_row([
                source,
                target,
                DOMAIN_COLORS.get(relation.domain, DEFAULT_COLOR),
                FREQUENCIES.get(relation.frequency, 0),
                "line",
                f"{relation.domain}<br>{relation.frequency}",
            ])
    return nodes, links


def sample_persons() -> list[Person]:
    """A small neighbourhood used by the demo application."""
    return [
        Person("Anna", 9, Sex.FEMALE, [
            Relation("Bram", "School", "dagelijks"),
            Relation("Chris", "Sport", "2x per week"),
            Relation("Mama", "Familie", "dagelijks"),
            Relation("Oma", "Familie", "1x per week"),
        ]),
        Person("Bram", 10, Sex.MALE, [
            Relation("Anna", "School", "dagelijks"),
            Relation("Daan", "Buitenspelen", "1x per week"),
            Relation("Juf Els", "School", "dagelijks"),
        ]),
        Person("Chris", 9, Sex.MALE, [
            Relation("Anna", "Sport", "2x per week"),
            Relation("Daan", "Sport", "2x per week"),
            Relation("Eva", "Buurtactiviteiten", "1x per maand"),
        ]),
        Person("Daan", 11, Sex.MALE, [
            Relation("Eva", "Religie", "1x per week"),
            Relation("Fleur", "Opvang", "2x per week"),
        ]),
        Person("Eva", 8, Sex.FEMALE, [
            Relation("Fleur", "Cultuur/kunst", "1x in 3 maanden"),
            Relation("Oma", "Familie", "Bijna nooit"),
        ]),
    ]
