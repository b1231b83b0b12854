"""Tests for the dataset serializer and the text interchange variant."""

import json
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from tally.codec.errors import EncodingFailedError, MalformedDataError
from tally.codec.serializer import deserialize, from_text, serialize, to_text
from tally.models.category import Category, ExpenseItem


WHEN = datetime(2025, 3, 9, 14, 30, 15, 123456, tzinfo=timezone.utc)


def sample_dataset() -> list[Category]:
    return [
        Category(
            name="Groceries",
            items=[
                ExpenseItem(amount=25.99, description="Randall's", date=WHEN),
                ExpenseItem(amount=0.0, description="", date=WHEN - timedelta(days=1)),
            ],
        ),
        Category(name="Empty"),
        Category(
            name="Café ☕ & Ünïcødé",
            items=[
                ExpenseItem(amount=-12.5, description="Remboursement – 返金", date=WHEN),
                ExpenseItem(amount=987654321.01, description="🏠", date=WHEN),
            ],
        ),
    ]


def valid_item(**overrides) -> dict:
    item = {
        "id": str(uuid4()),
        "amount": 10.0,
        "description": "Coffee",
        "date": "2025-03-09T14:30:15Z",
    }
    item.update(overrides)
    return item


class TestSerializeRoundTrip:
    """Round-trip fidelity."""

    def test_round_trip(self):
        """Test deserialize(serialize(d)) == d, ids included."""
        dataset = sample_dataset()
        assert deserialize(serialize(dataset)) == dataset

    def test_item_with_default_id_and_date(self):
        """Test generated ids and 'now' timestamps read back from their JSON strings."""
        dataset = [Category(name="A", items=[ExpenseItem(amount=1.5)])]
        decoded = deserialize(serialize(dataset))
        assert decoded == dataset
        assert decoded[0].items[0].date == dataset[0].items[0].date

    def test_empty_dataset(self):
        """Test the empty dataset is an empty JSON array."""
        assert serialize([]) == b"[]"
        assert deserialize(b"[]") == []

    def test_wire_keys(self):
        """Test the exact field names on the wire."""
        decoded = json.loads(serialize(sample_dataset()))
        assert set(decoded[0]) == {"id", "name", "items"}
        assert set(decoded[0]["items"][0]) == {"id", "amount", "description", "date"}
        assert decoded[1]["items"] == []

    def test_date_is_iso8601(self):
        """Test dates are encoded as ISO-8601 strings."""
        decoded = json.loads(serialize(sample_dataset()))
        parsed = datetime.fromisoformat(decoded[0]["items"][0]["date"].replace("Z", "+00:00"))
        assert parsed == WHEN

    def test_serialize_non_category_fails(self):
        """Test unserializable input surfaces as EncodingFailedError."""
        with pytest.raises(EncodingFailedError):
            serialize([object()])


class TestDeserializeValidation:
    """Strict decoding rules."""

    def test_accepts_unknown_fields(self):
        """Test forward compatibility with extra keys."""
        data = [{
            "id": str(uuid4()),
            "name": "Fuel",
            "items": [valid_item(currency="USD")],
            "colour": "#ff0000",
        }]
        categories = deserialize(json.dumps(data).encode())
        assert categories[0].name == "Fuel"
        assert categories[0].items[0].amount == 10.0

    def test_accepts_integer_amount(self):
        """Test whole-number amounts written without a decimal point."""
        data = [{"id": str(uuid4()), "name": "A", "items": [valid_item(amount=12)]}]
        assert deserialize(json.dumps(data).encode())[0].items[0].amount == 12.0

    @pytest.mark.parametrize("missing", ["id", "name", "items"])
    def test_missing_category_field(self, missing):
        """Test every category field is required on the wire."""
        category = {"id": str(uuid4()), "name": "A", "items": []}
        del category[missing]
        with pytest.raises(MalformedDataError):
            deserialize(json.dumps([category]).encode())

    @pytest.mark.parametrize("missing", ["id", "amount", "description", "date"])
    def test_missing_item_field(self, missing):
        """Test every item field is required on the wire."""
        item = valid_item()
        del item[missing]
        data = [{"id": str(uuid4()), "name": "A", "items": [item]}]
        with pytest.raises(MalformedDataError):
            deserialize(json.dumps(data).encode())

    @pytest.mark.parametrize(
        "overrides",
        [
            {"amount": "12.50"},
            {"description": 42},
            {"date": 1741530615},
            {"id": "not-a-uuid"},
        ],
    )
    def test_wrong_types(self, overrides):
        """Test values of the wrong type are not coerced."""
        data = [{"id": str(uuid4()), "name": "A", "items": [valid_item(**overrides)]}]
        with pytest.raises(MalformedDataError):
            deserialize(json.dumps(data).encode())

    def test_wrong_category_name_type(self):
        """Test a numeric category name is not coerced."""
        data = [{"id": str(uuid4()), "name": 7, "items": []}]
        with pytest.raises(MalformedDataError):
            deserialize(json.dumps(data).encode())

    @pytest.mark.parametrize("date", ["2025-03-09T14:30:15+02:00", "2025-03-09T14:30:15.5Z"])
    def test_accepts_iso_dates(self, date):
        """Test offset and fractional ISO-8601 dates."""
        data = [{"id": str(uuid4()), "name": "A", "items": [valid_item(date=date)]}]
        assert deserialize(json.dumps(data).encode())[0].items[0].date.tzinfo is not None

    def test_not_a_list(self):
        """Test a top-level object is rejected."""
        with pytest.raises(MalformedDataError):
            deserialize(b'{"id": "x"}')

    def test_invalid_json(self):
        """Test non-JSON bytes are rejected."""
        with pytest.raises(MalformedDataError):
            deserialize(b"\x1f\x8b\x08 definitely not json")


class TestTextVariant:
    """Pretty-printed JSON interchange."""

    def test_text_is_indented(self):
        """Test the text form is human-readable."""
        text = to_text(sample_dataset())
        assert text.startswith("[\n  {")
        assert '"name": "Groceries"' in text

    def test_text_round_trip(self):
        """Test from_text(to_text(d)) == d."""
        dataset = sample_dataset()
        assert from_text(to_text(dataset)) == dataset

    def test_text_accepts_compact_json(self):
        """Test compact JSON is accepted on the text path."""
        dataset = sample_dataset()
        assert from_text(serialize(dataset).decode("utf-8")) == dataset
