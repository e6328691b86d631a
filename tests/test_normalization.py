"""Tests for symbol codecs and response normalization helpers."""

from decimal import Decimal

import pytest

from cointrade.errors import MalformedResponse
from cointrade.exchanges.normalization import (
    SymbolCodec,
    decimal_str,
    decode_json,
    format_path,
    get_field,
    get_str,
    pair_levels,
    parse_native_symbol,
    price_str,
    split_symbol,
)
from cointrade.exchanges.protocol import OrderBookLevel


BINANCE = SymbolCodec("")
OKX = SymbolCodec("-")
UPBIT = SymbolCodec("-", quote_first=True)


class TestSplitSymbol:
    """Tests for split_symbol()."""

    def test_valid(self):
        assert split_symbol("BTC/USDT") == ("BTC", "USDT")

    @pytest.mark.parametrize(
        "symbol",
        ["BTCUSDT", "BTC-USDT", "BTC/", "/USDT", "BTC/USDT/X", "btc/usdt", "", "BTC/USDT\n", "BTC\n/USDT"],
    )
    def test_invalid(self, symbol):
        with pytest.raises(ValueError):
            split_symbol(symbol)


class TestSymbolCodec:
    """Tests for SymbolCodec."""

    @pytest.mark.parametrize(
        "codec,expected",
        [(BINANCE, "BTCUSDT"), (OKX, "BTC-USDT"), (UPBIT, "USDT-BTC")],
    )
    def test_encode(self, codec, expected):
        assert codec.encode("BTC/USDT") == expected

    @pytest.mark.parametrize("codec", [BINANCE, OKX, UPBIT])
    @pytest.mark.parametrize("symbol", ["BTC/USDT", "ETH/KRW"])
    def test_encode_and_parse_are_inverse(self, codec, symbol):
        native = codec.encode(symbol)

        assert codec.parse(native) == symbol
        assert codec.encode(codec.parse(native)) == native

    def test_parse_quote_first(self):
        assert UPBIT.parse("KRW-BTC") == "BTC/KRW"

    def test_concatenated_prefers_longest_quote(self):
        assert BINANCE.parse("BTCFDUSD") == "BTC/FDUSD"
        assert BINANCE.parse("ETHBTC") == "ETH/BTC"

    def test_concatenated_unknown_quote(self):
        with pytest.raises(ValueError):
            BINANCE.parse("BTCXYZ")

    def test_parse_rejects_trailing_newline(self):
        with pytest.raises(ValueError):
            UPBIT.parse("KRW-BTC\n")
        with pytest.raises(ValueError):
            OKX.parse("BTC-USDT\n")

    def test_parse_rejects_wrong_separator(self):
        with pytest.raises(ValueError):
            OKX.parse("BTC_USDT")

    def test_encode_rejects_invalid_symbol(self):
        with pytest.raises(ValueError):
            OKX.encode("BTCUSDT")

    def test_parse_native_symbol_wraps_errors(self):
        with pytest.raises(MalformedResponse) as exc_info:
            parse_native_symbol(OKX, "BTCUSDT", "data[3].instId")
        assert exc_info.value.field == "data[3].instId"


class TestDecodeJson:
    """Tests for decode_json()."""

    def test_numbers_keep_their_digits(self):
        payload = decode_json(b'{"price": 1.50000000, "qty": 3}')

        assert payload["price"] == Decimal("1.50000000")
        assert str(payload["price"]) == "1.50000000"
        assert payload["qty"] == 3

    def test_invalid_json(self):
        with pytest.raises(MalformedResponse):
            decode_json(b"<html>bad gateway</html>")


class TestFieldAccess:
    """Tests for path-based field helpers."""

    PAYLOAD = {"data": [{"asks": [["1", "2"]], "last": "65000.5"}]}

    def test_format_path(self):
        assert format_path(["data", 0, "asks"]) == "data[0].asks"
        assert format_path([0, "market"]) == "[0].market"
        assert format_path([]) == "<root>"

    def test_get_field(self):
        assert get_field(self.PAYLOAD, "data", 0, "last") == "65000.5"

    @pytest.mark.parametrize(
        "path,field",
        [
            (("data", 1), "data[1]"),
            (("data", 0, "bids"), "data[0].bids"),
            (("result",), "result"),
            (("data", "x"), "data.x"),
        ],
    )
    def test_missing_field_reports_path(self, path, field):
        with pytest.raises(MalformedResponse) as exc_info:
            get_field(self.PAYLOAD, *path)
        assert exc_info.value.field == field

    def test_get_str_accepts_numbers(self):
        assert get_str({"orderId": 28}, "orderId") == "28"
        assert get_str({"price": Decimal("1.10")}, "price") == "1.10"

    def test_get_str_rejects_objects(self):
        with pytest.raises(MalformedResponse):
            get_str({"orderId": {"id": 1}}, "orderId")


class TestDecimalStr:
    """Tests for decimal_str() and price_str()."""

    def test_string_passes_through(self):
        assert decimal_str("0.00100000", "qty") == "0.00100000"

    def test_decimal_keeps_trailing_zeros(self):
        assert decimal_str(Decimal("1.50000000"), "qty") == "1.50000000"

    def test_rejects_non_numeric(self):
        with pytest.raises(MalformedResponse) as exc_info:
            decimal_str(None, "asks[0][0]")
        assert exc_info.value.field == "asks[0][0]"

    def test_rejects_bool(self):
        with pytest.raises(MalformedResponse):
            decimal_str(True, "qty")

    def test_missing_price_defaults_to_zero(self):
        assert price_str({}, "price") == "0"
        assert price_str({"price": None}, "price") == "0"
        assert price_str({"data": [{}]}, "data", 0, "last") == "0"

    def test_price_present(self):
        assert price_str({"price": "65000.50"}, "price") == "65000.50"

    def test_small_numbers_stay_positional(self):
        assert decimal_str(Decimal("0.00000045"), "trade_price") == "0.00000045"
        assert decimal_str(Decimal("1E-8"), "ask_size") == "0.00000001"
        assert price_str(decode_json(b'{"price": 0.00000045}'), "price") == "0.00000045"

    def test_get_str_small_decimal(self):
        assert get_str({"volume": Decimal("1E-8")}, "volume") == "0.00000001"

    @pytest.mark.parametrize(
        "payload,path,field",
        [
            ([{"price": "65000.50"}], ("price",), "price"),
            ({"data": ["65000.5"]}, ("data", 0, "last"), "data[0].last"),
            ({"data": []}, ("data", 0, "last"), "data[0]"),
            ([], (0, "trade_price"), "[0]"),
        ],
    )
    def test_wrong_shape_is_not_a_missing_price(self, payload, path, field):
        with pytest.raises(MalformedResponse) as exc_info:
            price_str(payload, *path)
        assert exc_info.value.field == field


class TestPairLevels:
    """Tests for pair_levels()."""

    def test_truncates_to_shorter_side(self):
        asks = [["101", "1"], ["102", "2"], ["103", "3"]]
        bids = [["100", "4"], ["99", "5"]]

        levels = pair_levels(asks, bids)

        assert levels == (
            OrderBookLevel(ask_price="101", ask_size="1", bid_price="100", bid_size="4"),
            OrderBookLevel(ask_price="102", ask_size="2", bid_price="99", bid_size="5"),
        )

    def test_extra_entry_fields_are_ignored(self):
        levels = pair_levels([["101", "1", "0", "3"]], [["100", "2", "0", "1"]])
        assert levels[0].ask_size == "1"
        assert levels[0].bid_size == "2"

    def test_empty_side_gives_no_levels(self):
        assert pair_levels([], [["100", "1"]]) == ()

    def test_short_entry_reports_path(self):
        with pytest.raises(MalformedResponse) as exc_info:
            pair_levels([["101", "1"]], [["100"]], bids_path="data[0].bids")
        assert exc_info.value.field == "data[0].bids[0]"
