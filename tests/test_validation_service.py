import pytest

from services.validation_service import (
    parse_appliance_id,
    sanitize_text,
    validate_appliance,
    validate_rate,
)

VALID = {'name': 'Oven', 'power_watts': 2400, 'daily_hours': 1, 'usage_days': [0, 6]}


def test_valid_appliance():
    result = validate_appliance(dict(VALID))
    assert result['valid'] is True
    assert result['errors'] == []
    assert result['data'].standby_watts == 0


def test_name_is_trimmed():
    result = validate_appliance({**VALID, 'name': '   Oven  '})
    assert result['data'].name == 'Oven'


def test_unknown_fields_are_ignored():
    result = validate_appliance({**VALID, 'colour': 'red'})
    assert result['valid'] is True


def test_errors_are_field_keyed_in_check_order():
    result = validate_appliance({'name': '', 'power_watts': 'high', 'daily_hours': 2, 'usage_days': [9]})
    assert result['valid'] is False
    assert [e['field'] for e in result['errors']] == ['name', 'power_watts', 'usage_days']
    assert result['data'] is None


def test_markup_only_name_is_reported_in_field_order():
    result = validate_appliance({**VALID, 'name': '<script>x</script>', 'power_watts': -1})
    assert [e['field'] for e in result['errors']] == ['name', 'power_watts']


def test_update_rejects_markup_only_name():
    result = validate_appliance({'name': '<iframe src="x"></iframe>'}, is_update=True)
    assert result['valid'] is False
    assert result['errors'][0]['field'] == 'name'


def test_one_error_per_field():
    result = validate_appliance({**VALID, 'usage_days': [7, 8, 9]})
    assert result['errors'] == [{
        'field': 'usage_days',
        'message': 'Usage days must be a non-empty list of numbers between 0 (Sunday) and 6 (Saturday)',
    }]


def test_update_supplied_fields_only():
    result = validate_appliance({'daily_hours': 3}, is_update=True)
    assert result['valid'] is True
    assert result['data'].supplied() == {'daily_hours': 3}


def test_update_with_no_known_field():
    result = validate_appliance({'unknown': 1}, is_update=True)
    assert result['errors'] == [{'field': 'update', 'message': 'Update requires at least one field to be provided'}]


@pytest.mark.parametrize('raw, clean', [
    ('Desk Lamp', 'Desk Lamp'),
    ('<SCRIPT>evil()</SCRIPT>Lamp', 'Lamp'),
    ('<object data="x">y</object>TV', 'TV'),
    ('Fan<embed src="x.swf">', 'Fan'),
    ('<link rel="stylesheet">Fan', 'Fan'),
    ('javascript:alert(1)', ''),
    ('Img data:image/png;base64,AAAA', 'Img'),
    ("Tom's \"TV\" a/b", 'Tom&#x27;s &quot;TV&quot; a&#x2F;b'),
    ('1 < 2 > 0', '1 &lt; 2 &gt; 0'),
])
def test_sanitize_text(raw, clean):
    assert sanitize_text(raw) == clean


def test_sanitize_text_passes_through_non_strings():
    assert sanitize_text(None) is None


@pytest.mark.parametrize('value, expected', [
    (3, 3),
    ('12', 12),
    (' 7 ', 7),
    (4.0, 4),
    (4.5, None),
    ('abc', None),
    ('', None),
    (None, None),
    (False, None),
])
def test_parse_appliance_id(value, expected):
    assert parse_appliance_id(value) == expected


@pytest.mark.parametrize('rate, ok', [
    (0.12, True),
    (1, True),
    (0, False),
    (-1, False),
    ('0.1', False),
    (float('nan'), False),
    (False, False),
])
def test_validate_rate(rate, ok):
    assert validate_rate(rate) is ok
