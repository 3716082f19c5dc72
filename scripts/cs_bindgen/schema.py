"""
Metadata schema module

Checks the shape of a dear_bindings metadata document before generation.
"""

import jsonschema


class MetadataError(ValueError):
    """Metadata document does not match the expected shape"""


_COMMENTS = {
    'type': 'object',
    'properties': {
        'attached': {'type': 'string'},
        'preceding': {'type': 'array', 'items': {'type': 'string'}},
    },
}

_CONDITIONALS = {
    'type': 'array',
    'items': {
        'type': 'object',
        'required': ['condition', 'expression'],
        'properties': {
            'condition': {'enum': ['ifdef', 'ifndef', 'if', 'ifnot']},
            'expression': {'type': 'string'},
        },
    },
}

_TYPE_INFO = {
    'type': 'object',
    'required': ['description'],
    'properties': {
        'declaration': {'type': 'string'},
        'description': {'$ref': '#/definitions/description'},
    },
}

METADATA_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    'type': 'object',
    'definitions': {
        'description': {
            'type': 'object',
            'required': ['kind'],
            'properties': {
                'kind': {'enum': ['Builtin', 'User', 'Pointer', 'Array', 'Function', 'Type']},
                'builtin_type': {'type': 'string'},
                'name': {'type': 'string'},
                'bounds': {'type': 'string'},
                'inner_type': {'$ref': '#/definitions/description'},
                'return_type': {'$ref': '#/definitions/description'},
                'parameters': {'type': 'array', 'items': {'$ref': '#/definitions/description'}},
                'storage_classes': {'type': 'array', 'items': {'type': 'string'}},
            },
            'allOf': [
                {
                    'if': {'properties': {'kind': {'enum': ['Pointer', 'Array']}}},
                    'then': {'required': ['inner_type']},
                },
                {
                    'if': {'properties': {'kind': {'const': 'Function'}}},
                    'then': {'required': ['return_type', 'parameters']},
                },
            ],
        },
    },
    'properties': {
        'defines': {
            'type': 'array',
            'items': {
                'type': 'object',
                'required': ['name'],
                'properties': {
                    'name': {'type': 'string'},
                    'content': {'type': 'string'},
                    'conditionals': _CONDITIONALS,
                    'comments': _COMMENTS,
                },
            },
        },
        'enums': {
            'type': 'array',
            'items': {
                'type': 'object',
                'required': ['name', 'elements'],
                'properties': {
                    'name': {'type': 'string'},
                    'is_flags_enum': {'type': 'boolean'},
                    'conditionals': _CONDITIONALS,
                    'comments': _COMMENTS,
                    'elements': {
                        'type': 'array',
                        'items': {
                            'type': 'object',
                            'required': ['name'],
                            'properties': {
                                'name': {'type': 'string'},
                                'value': {'type': 'integer'},
                                'value_expression': {'type': 'string'},
                                'conditionals': _CONDITIONALS,
                                'comments': _COMMENTS,
                            },
                        },
                    },
                },
            },
        },
        'typedefs': {
            'type': 'array',
            'items': {
                'type': 'object',
                'required': ['name', 'type'],
                'properties': {
                    'name': {'type': 'string'},
                    'type': _TYPE_INFO,
                    'conditionals': _CONDITIONALS,
                    'comments': _COMMENTS,
                },
            },
        },
        'structs': {
            'type': 'array',
            'items': {
                'type': 'object',
                'required': ['name', 'fields'],
                'properties': {
                    'name': {'type': 'string'},
                    'conditionals': _CONDITIONALS,
                    'comments': _COMMENTS,
                    'fields': {
                        'type': 'array',
                        'items': {
                            'type': 'object',
                            'required': ['name', 'type'],
                            'properties': {
                                'name': {'type': 'string'},
                                'type': _TYPE_INFO,
                                'is_array': {'type': 'boolean'},
                                'array_bounds': {'type': 'string'},
                                'conditionals': _CONDITIONALS,
                                'comments': _COMMENTS,
                            },
                        },
                    },
                },
            },
        },
        'functions': {
            'type': 'array',
            'items': {
                'type': 'object',
                'required': ['name', 'return_type', 'arguments'],
                'properties': {
                    'name': {'type': 'string'},
                    'return_type': _TYPE_INFO,
                    'conditionals': _CONDITIONALS,
                    'comments': _COMMENTS,
                    'arguments': {
                        'type': 'array',
                        'items': {
                            'type': 'object',
                            'properties': {
                                'name': {'type': 'string'},
                                'type': _TYPE_INFO,
                                'default_value': {'type': 'string'},
                                'is_varargs': {'type': 'boolean'},
                            },
                        },
                    },
                },
            },
        },
    },
}


def validate_metadata(payload: dict):
    """Raise MetadataError when payload is not a dear_bindings document"""
    validator = jsonschema.Draft7Validator(METADATA_SCHEMA)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        first = errors[0]
        location = '/'.join(str(p) for p in first.absolute_path) or '<root>'
        raise MetadataError(f'metadata failed JSON schema validation at {location}: {first.message}')
