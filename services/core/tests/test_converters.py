"""Tests for upstream payload converters."""

import json
import math

from datafeed.providers.base import Series, serialize_series
from datafeed.udf.converters import (
    convert_primary_history,
    convert_quote_batch,
    convert_secondary_history,
)

from conftest import PRIMARY_CSV, SECONDARY_JSON, quote_row


class TestPrimaryHistory:
    def test_rows_are_reversed_into_ascending_order(self):
        series = convert_primary_history(PRIMARY_CSV)

        assert series.status == "ok"
        assert [b.time for b in series.bars] == [1577923200, 1578009600]  # 2020-01-02, 2020-01-03
        first = series.bars[0]
        assert first.open == 296.24
        assert first.high == 300.60
        assert first.low == 295.19
        assert first.close == 300.35
        assert first.volume == 33911900.0

    def test_timestamps_strictly_increasing(self):
        rows = "\n".join(f"2020-01-{day:02d},1,2,0.5,1.5,100" for day in range(31, 0, -1))
        series = convert_primary_history("Date,Open,High,Low,Close,Volume\n" + rows + "\n")

        times = [b.time for b in series.bars]
        assert len(times) == 31
        assert all(a < b for a, b in zip(times, times[1:]))

    def test_empty_input_is_no_data(self):
        series = convert_primary_history("")
        assert series.status == "no_data"
        assert series.bars == []

    def test_header_only_is_no_data(self):
        assert convert_primary_history("Date,Open,High,Low,Close,Volume\n").status == "no_data"
        assert convert_primary_history("Date,Open,High,Low,Close,Volume").status == "no_data"

    def test_bad_numeric_field_becomes_nan(self):
        data = "Date,Open,High,Low,Close,Volume\n2020-01-02,abc,2,1,1.5,\n"
        series = convert_primary_history(data)

        assert series.status == "ok"
        assert math.isnan(series.bars[0].open)
        assert series.bars[0].high == 2.0
        assert math.isnan(series.bars[0].volume)

    def test_unreadable_date_row_is_skipped(self):
        data = (
            "Date,Open,High,Low,Close,Volume\n"
            "2020-01-03,1,1,1,1,1\n"
            "garbage\n"
            "2020-01-02,1,1,1,1,1\n"
        )
        series = convert_primary_history(data)
        assert len(series.bars) == 2

    def test_nan_serializes_as_null(self):
        data = "Date,Open,High,Low,Close,Volume\n2020-01-02,abc,2,1,1.5,7\n"
        payload = json.loads(serialize_series(convert_primary_history(data)))
        assert payload["o"] == [None]
        assert payload["v"] == [7.0]


class TestSecondaryHistory:
    def test_maps_columns_by_name(self):
        series = convert_secondary_history(SECONDARY_JSON)

        assert series.status == "ok"
        assert len(series.bars) == 2
        assert series.bars[0].time == 1577923200
        assert series.bars[0].close == 300.35
        assert series.bars[1].volume == 36633400.0

    def test_keeps_provider_order(self):
        data = json.loads(SECONDARY_JSON)
        data["datatable"]["data"].reverse()
        series = convert_secondary_history(json.dumps(data))

        assert [b.time for b in series.bars] == [1578009600, 1577923200]

    def test_idempotent(self):
        assert convert_secondary_history(SECONDARY_JSON) == convert_secondary_history(SECONDARY_JSON)

    def test_malformed_json_gives_empty_ok_series(self):
        series = convert_secondary_history("<html>oops</html>")
        assert series.status == "ok"
        assert series.bars == []

    def test_missing_column_gives_empty_ok_series(self):
        data = json.loads(SECONDARY_JSON)
        data["datatable"]["columns"] = [c for c in data["datatable"]["columns"] if c["name"] != "volume"]
        series = convert_secondary_history(json.dumps(data))
        assert series.status == "ok"
        assert series.bars == []

    def test_null_rows_give_empty_ok_series(self):
        data = json.loads(SECONDARY_JSON)
        data["datatable"]["data"] = None
        series = convert_secondary_history(json.dumps(data))
        assert series.status == "ok"
        assert series.bars == []

    def test_missing_datatable_gives_empty_ok_series(self):
        series = convert_secondary_history(json.dumps({"quandl_error": {"code": "QEPx04"}}))
        assert series == Series()

    def test_empty_table_is_no_data(self):
        data = json.loads(SECONDARY_JSON)
        data["datatable"]["data"] = []
        assert convert_secondary_history(json.dumps(data)).status == "no_data"


class TestSeriesWireFormat:
    def test_round_trip(self):
        series = convert_secondary_history(SECONDARY_JSON)
        payload = json.loads(serialize_series(series))

        assert set(payload) == {"s", "t", "o", "h", "l", "c", "v"}
        assert Series.from_udf(payload) == series


class TestQuoteBatch:
    def test_single_object_is_normalized_to_list(self):
        data = {"query": {"results": {"quote": quote_row("AAPL")}}}
        batch = convert_quote_batch({"AAPL": "NASDAQ:AAPL"}, data)

        assert batch.status == "ok"
        assert len(batch.quotes) == 1
        quote = batch.quotes[0].to_udf()
        assert quote["s"] == "ok"
        assert quote["n"] == "NASDAQ:AAPL"
        assert quote["v"]["lp"] == "300.35"
        assert quote["v"]["chp"] == "0.40"
        assert quote["v"]["original_name"] == "NMS:AAPL"
        assert quote["v"]["description"] == "AAPL Corp"

    def test_negative_percent_change_keeps_sign(self):
        data = {"query": {"results": {"quote": quote_row("IBM", ChangeinPercent="-1.5%")}}}
        batch = convert_quote_batch({"IBM": "NYSE:IBM"}, data)
        assert batch.quotes[0].values["chp"] == "-1.5"

    def test_realtime_fields_preferred(self):
        row = quote_row("AAPL", ChangeRealtime="+2.00", PercentChange="+0.70%")
        batch = convert_quote_batch({}, {"query": {"results": {"quote": [row]}}})
        assert batch.quotes[0].values["ch"] == "+2.00"
        assert batch.quotes[0].values["chp"] == "0.70"

    def test_error_rows(self):
        rows = [
            quote_row("AAPL"),
            quote_row("NOPE", ErrorIndicationreturnedforsymbolchangedinvalid="No such ticker symbol."),
            quote_row("IBM", StockExchange=None),
        ]
        labels = {"AAPL": "NASDAQ:AAPL", "NOPE": "X:NOPE", "IBM": "NYSE:IBM"}
        batch = convert_quote_batch(labels, {"query": {"results": {"quote": rows}}})

        assert [q.to_udf() for q in batch.quotes[1:]] == [
            {"s": "error", "n": "X:NOPE", "v": {}},
            {"s": "error", "n": "NYSE:IBM", "v": {}},
        ]

    def test_missing_wrapper_is_error_batch(self):
        batch = convert_quote_batch({}, {"error": {"description": "Query syntax error"}})
        payload = batch.to_udf()

        assert payload["s"] == "error"
        assert payload["errmsg"].startswith("empty_quotes_response")

    def test_null_results_is_error_batch(self):
        batch = convert_quote_batch({}, {"query": {"count": 0, "results": None}})
        assert batch.status == "error"
