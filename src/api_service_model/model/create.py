"""Builds a ServiceModel from a parsed API document."""

import logging

from api_service_model.entities.model import OperationDescription, ServiceModel
from api_service_model.entities.naming import starting_with_uppercase
from api_service_model.entities.override import ModelOverride
from api_service_model.model.filters import OverrideFilter
from api_service_model.model.operation_input import ParameterClassifier
from api_service_model.model.operation_output import ResponseMerger
from api_service_model.model.type_mappings import get_type_mappings
from api_service_model.model.walker import SchemaWalker
from api_service_model.parser.base import ApiDocument, Operation

logger = logging.getLogger(__name__)


def create_service_model(document: ApiDocument, override: ModelOverride | None = None) -> ServiceModel:
    """Walk every definition and operation of `document`, then normalize type names.

    Definitions, paths and verbs are visited in ascending order so that the
    result does not depend on the document's key order.
    """
    model = ServiceModel()
    walker = SchemaWalker(model, document.definitions, override)
    override_filter = OverrideFilter(override)
    classifier = ParameterClassifier(walker, override_filter)
    merger = ResponseMerger(walker, override_filter)

    for name in sorted(document.definitions):
        walker.walk(document.definitions[name], name)

    for path in sorted(document.paths):
        operations = filter_operations(document.paths[path].operations, override_filter)

        for verb in sorted(operations):
            operation = operations[verb]
            if operation.operation_id is None:
                logger.debug("Skipping %s %s without an operationId", verb.upper(), path)
                continue

            operation_name = get_operation_name(operation.operation_id, verb, len(operations))
            description = OperationDescription(
                http_verb=verb.upper(),
                http_url=path,
                documentation=operation.description or operation.summary or None,
            )

            members = classifier.classify(operation_name, operation.parameters)
            classifier.set_operation_input(operation_name, members, description)
            merger.set_operation_output(operation_name, operation.responses, description, operation.operation_id)

            model.operation_descriptions[operation_name] = description

    model.type_mappings = get_type_mappings(model.structure_descriptions, model.field_descriptions)
    logger.info(
        "Built model with %d structures, %d fields and %d operations",
        len(model.structure_descriptions),
        len(model.field_descriptions),
        len(model.operation_descriptions),
    )
    return model


def filter_operations(operations: dict[str, Operation], override_filter: OverrideFilter) -> dict[str, Operation]:
    return {
        verb: operation
        for verb, operation in operations.items()
        if not override_filter.ignore_operation(operation.operation_id, verb)
    }


def get_operation_name(operation_id: str, verb: str, operations_on_path: int) -> str:
    """The operationId, suffixed with the verb when the path has more than one operation."""
    if operations_on_path > 1:
        return operation_id + starting_with_uppercase(verb)
    return operation_id
