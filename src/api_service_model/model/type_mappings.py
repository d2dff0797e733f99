"""Type-name normalization.

Raw names that collide once their first letter is uppercased ("widget"
and "Widget") get distinct external names. Names that do not collide
are left out of the mapping; consumers fall back to uppercasing the
first letter.
"""

import logging

from api_service_model.entities.model import Fields, StructureDescription, type_description
from api_service_model.entities.naming import starting_with_uppercase

logger = logging.getLogger(__name__)

STRUCTURE_LABEL = ""


def group_type_names(names_with_labels: list[tuple[str, str]]) -> dict[str, dict[str, list[str]]]:
    """Group raw names by normalized name, then by semantic label."""
    groups: dict[str, dict[str, list[str]]] = {}
    for name, label in names_with_labels:
        groups.setdefault(starting_with_uppercase(name), {}).setdefault(label, []).append(name)
    return groups


def get_type_mappings(
    structure_descriptions: dict[str, StructureDescription],
    field_descriptions: dict[str, Fields],
) -> dict[str, str]:
    """Map each colliding raw type name to a unique external name.

    Within a colliding group, names get the label as a suffix when the group
    holds more than one label, then a 1-based index when their label holds
    more than one name. A lone "String" label in the "String" group keeps
    the name "String".
    """
    names_with_labels = [(name, type_description(field)) for name, field in field_descriptions.items()]
    names_with_labels.extend((name, STRUCTURE_LABEL) for name in structure_descriptions)

    type_mappings: dict[str, str] = {}
    for normalized_name, labels in sorted(group_type_names(names_with_labels).items()):
        if sum(len(names) for names in labels.values()) <= 1:
            continue

        for label in sorted(labels):
            label_suffix = label if len(labels) > 1 else ""
            names = sorted(labels[label])

            for index, name in enumerate(names):
                index_suffix = str(index + 1) if len(names) > 1 else ""

                if normalized_name == "String" and label == "String" and not label_suffix:
                    type_mappings[name] = "String"
                else:
                    type_mappings[name] = f"{normalized_name}{label_suffix}{index_suffix}"

        logger.debug("Disambiguated type names for %s", normalized_name)

    return type_mappings
