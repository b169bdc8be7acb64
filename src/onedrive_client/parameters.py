# -*- coding: utf-8 -*-
"""
Parameter directors for OneDrive operations.

Operations accept a flat options dict ({'conflictBehavior': 'rename',
'top': 10, ...}). A director looks up which options an operation supports
and turns them into query string, header or body parameters, each option
being serialized then injected at its place in the target structure.
"""

from enum import Enum


class ScalarSerializer:
    """Serialize a value as-is, unwrapping enums"""

    def serialize(self, value):
        if isinstance(value, Enum):
            return value.value
        return value


class OrderBySerializer:
    """
    Serialize a list of (property, direction) tuples into a $orderby value.

    Example:
        [('name', 'desc'), ('size',)] -> 'name desc,size'
    """

    def serialize(self, value):
        clauses = []
        for clause in value:
            if isinstance(clause, str):
                clauses.append(clause)
            else:
                clauses.append(' '.join(str(part) for part in clause))
        return ','.join(clauses)


class FlatInjector:
    """Set values[name] = value"""

    def __init__(self, name):
        self.name = name

    def inject(self, values, value):
        values[self.name] = value
        return values


class PathInjector:
    """Set a value at a nested path, creating intermediate dicts"""

    def __init__(self, path):
        self.path = list(path)

    def inject(self, values, value):
        current = values
        for key in self.path[:-1]:
            current = current.setdefault(key, {})
        current[self.path[-1]] = value
        return values


class ParameterDefinition:
    """How one option is serialized and where it lands in a request"""

    def __init__(self, injector, serializer=None):
        self.injector = injector
        self.serializer = serializer or ScalarSerializer()

    def serialize_value(self, value):
        return self.serializer.serialize(value)

    def inject_value(self, values, value):
        return self.injector.inject(values, value)


class ResourceDefinition:
    """
    Operation definitions of a resource, plus definitions of sub-resources.

    An operation definition maps a parameter kind ('query', 'headers',
    'body') to a dict of option name -> ParameterDefinition.
    """

    def __init__(self, operation_definitions, resource_definitions=None):
        self.operation_definitions = operation_definitions
        self.resource_definitions = resource_definitions or {}

    def get_operation_definition(self, name):
        return self.operation_definitions[name]

    def get_resource_definition(self, name):
        return self.resource_definitions[name]


def _build(definitions, options):
    values = {}
    for name, definition in definitions.items():
        if name not in options or options[name] is None:
            continue
        value = definition.serialize_value(options[name])
        definition.inject_value(values, value)
    return values


def default_drive_item_resource_definition():
    """Parameter definitions for the drive item operations supported by this client."""
    conflict_behavior_query = ParameterDefinition(FlatInjector('@microsoft.graph.conflictBehavior'))

    return ResourceDefinition({
        'children.get': {
            'query': {
                'top': ParameterDefinition(FlatInjector('$top')),
                'orderBy': ParameterDefinition(FlatInjector('$orderby'), OrderBySerializer()),
            },
        },
        'children.post': {
            'body': {
                'conflictBehavior': ParameterDefinition(FlatInjector('@microsoft.graph.conflictBehavior')),
                'description': ParameterDefinition(FlatInjector('description')),
            },
        },
        'content.put': {
            'query': {
                'conflictBehavior': conflict_behavior_query,
            },
            'headers': {
                'contentType': ParameterDefinition(FlatInjector('Content-Type')),
            },
        },
        'createUploadSession.post': {
            'body': {
                'conflictBehavior': ParameterDefinition(PathInjector(['item', '@microsoft.graph.conflictBehavior'])),
                'description': ParameterDefinition(PathInjector(['item', 'description'])),
                'fileSize': ParameterDefinition(PathInjector(['item', 'fileSize'])),
            },
        },
    })


class DriveItemParameterDirector:
    """
    Build request parameters for drive item operations from an options dict.

    Options an operation does not define are ignored.
    """

    def __init__(self, resource_definition=None):
        self.resource_definition = resource_definition or default_drive_item_resource_definition()

    def _build(self, operation, kind, options):
        definitions = self.resource_definition.get_operation_definition(operation).get(kind, {})
        return _build(definitions, options or {})

    def build_get_children(self, options=None):
        """Query parameters for GET /children ($top, $orderby)."""
        return self._build('children.get', 'query', options)

    def build_post_children_body_parameters(self, options=None):
        """Body parameters for POST /children (folder creation)."""
        return self._build('children.post', 'body', options)

    def build_put_content_query_string_parameters(self, options=None):
        """Query parameters for PUT /content (simple upload)."""
        return self._build('content.put', 'query', options)

    def build_put_content_header_parameters(self, options=None):
        """Header parameters for PUT /content (simple upload)."""
        return self._build('content.put', 'headers', options)

    def build_post_create_upload_session_body_parameters(self, options=None):
        """Body parameters for POST /createUploadSession."""
        return self._build('createUploadSession.post', 'body', options)

