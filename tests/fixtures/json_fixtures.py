"""
Wire document fixtures for the test suite.

Documents are written the way the serializer emits them: compact separators,
reserved properties first, then normal properties, telemetry and components.
"""

SIMPLE_TWIN_JSON = '{"$dtId":"122233","$etag":"4444","quantity":1}'

TWIN_WITH_ALL_ATTRIBUTES_JSON = (
    '{"$dtId":"0","$etag":"0","label":"property","flag":true,'
    '"intArray":[1,2,3],"stringMap":{"key":"value"},'
    '"guidId":"b2d1ab5e-d953-4003-85e1-1018a00fe848","nullableId":null,'
    '"temperature":21.5,"componentTwin":{"quantity":1}}'
)

TWIN_WITH_NESTED_OBJECT_JSON = (
    '{"$dtId":"11111","$etag":"abcd","nestedObj":{"name":"name","state":1},"speed":50}'
)

TWIN_WITH_ENUM_JSON = '{"$dtId":"E1","color":"Green","priority":2}'

BUILDING_WITH_METADATA_JSON = (
    '{"$dtId":"B1","$metadata":{"$model":"dtmi:twins:Building;1"},"name":"Head office"}'
)

UNKNOWN_MODEL_JSON = (
    '{"$dtId":"X1","$etag":"W/\\"7\\"","$metadata":{"$model":"dtmi:other:Thing;1"},'
    '"temperature":19.5,"tags":["a","b"]}'
)

PUMP_JSON = (
    '{"$dtId":"P1","rpm":1450,"grade":"A","efficiency":0.82,"price":1250.75,'
    '"installed":"2023-04-01T08:30:00Z","serviced":"2024-01-15",'
    '"sensor":{"manufacturer":"Acme","serial":"S-9"}}'
)
